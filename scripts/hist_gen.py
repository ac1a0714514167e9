import argparse
import logging
import sys

from fptree import config
from fptree.engine import HistogramFingerprint
from fptree.errors import TreeIndexError

if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Print the colour histogram fingerprint of an image')
    parser.add_argument('image', help='Image file')
    parser.add_argument('-b', '--bins', type=int, default=4,
                       help='Histogram bins per colour band')

    args = parser.parse_args()
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)

    try:
        fingerprint = HistogramFingerprint.from_image_file(args.image, args.bins)
    except TreeIndexError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(fingerprint.as_text())
