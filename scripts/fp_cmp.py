import argparse
import logging
import sys

from fptree import config
from fptree.engine import MwisdFingerprint, compare_with_mirror
from fptree.errors import TreeIndexError

MODES = {
    '-ivi': (True, True),
    '-ivf': (True, False),
    '-fvi': (False, True),
    '-fvf': (False, False),
}


def load_fingerprint(value, is_image):
    if is_image:
        return MwisdFingerprint.from_image_file(value)
    return MwisdFingerprint.from_text(value)


if __name__ == '__main__':
    parser = argparse.ArgumentParser(
        description='Compare images or text fingerprints; a negative score means '
                    'the second input matches best as a mirror image',
        prefix_chars='+')
    parser.add_argument('mode', nargs='?', default='-ivi', choices=sorted(MODES),
                        help='i = image file, f = fingerprint text (default -ivi)')
    parser.add_argument('first', help='Image file or fingerprint text')
    parser.add_argument('second', help='Image file or fingerprint text')

    args = parser.parse_args()
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)

    first_is_image, second_is_image = MODES[args.mode]
    try:
        fingerprint_1 = load_fingerprint(args.first, first_is_image)
        fingerprint_2 = load_fingerprint(args.second, second_is_image)
    except TreeIndexError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"{compare_with_mirror(fingerprint_1, fingerprint_2):1.5f}")
