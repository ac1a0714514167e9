import argparse
import logging
import sys

from fp_cmp import MODES

from fptree import config
from fptree.engine import HistogramFingerprint
from fptree.errors import TreeIndexError


def load_histogram(value, is_image, bins_per_band=4):
    if is_image:
        return HistogramFingerprint.from_image_file(value, bins_per_band)
    return HistogramFingerprint.from_text(value, bins_per_band)


def chi_square_distance(first, second, mode='-ivi', bins_per_band=4):
    """
    Chi-square distance between two inputs; 0 means identical histograms

    Args:
        first, second: Image paths or histogram text, as selected by mode
        mode: One of -ivi, -ivf, -fvi, -fvf (i = image file, f = fingerprint text)
    """
    first_is_image, second_is_image = MODES[mode]
    histogram_1 = load_histogram(first, first_is_image, bins_per_band)
    histogram_2 = load_histogram(second, second_is_image, bins_per_band)
    return histogram_1.chi_square(histogram_2)


if __name__ == '__main__':
    parser = argparse.ArgumentParser(
        description='Chi-square distance between colour histograms of images or text fingerprints',
        prefix_chars='+')
    parser.add_argument('mode', nargs='?', default='-ivi', choices=sorted(MODES),
                        help='i = image file, f = fingerprint text (default -ivi)')
    parser.add_argument('first', help='Image file or fingerprint text')
    parser.add_argument('second', help='Image file or fingerprint text')

    args = parser.parse_args()
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)

    try:
        distance = chi_square_distance(args.first, args.second, args.mode)
    except TreeIndexError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"{distance:1.5f}")
