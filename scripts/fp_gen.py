import argparse
import logging
import sys

from fptree import config
from fptree.engine import MwisdFingerprint
from fptree.errors import TreeIndexError

if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Print the wavelet fingerprint of an image')
    parser.add_argument('image', help='Image file')
    parser.add_argument('--base', type=int, default=config.WAVELET_SCALE_BASE,
                       help='Wavelet scale base')
    parser.add_argument('--exponent', type=int, default=config.WAVELET_SCALE_EXPONENT,
                       help='Wavelet scale exponent')

    args = parser.parse_args()
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)

    try:
        fingerprint = MwisdFingerprint.from_image_file(args.image, args.base, args.exponent)
    except TreeIndexError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(fingerprint.as_text())
