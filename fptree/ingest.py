"""
Parallel fingerprint extraction from directories of images.

Unreadable files are logged and skipped, so every identifier in the
returned collection has a fingerprint.
"""

import logging
import os
import re
from concurrent.futures import ThreadPoolExecutor

import cv2

from . import config
from .engine import MwisdFingerprint
from .errors import ComparatorFailure

logger = logging.getLogger(__name__)

IMAGE_PATTERN = re.compile(
    r'\.(?:%s)\Z' % '|'.join(re.escape(ext) for ext in config.IMAGE_EXTENSIONS),
    re.IGNORECASE,
)


def scan_images(directory):
    """Sorted image filenames in a directory"""
    return sorted(f for f in os.listdir(directory) if IMAGE_PATTERN.search(f))


def fingerprint_directories(directories, workers=None, fingerprint_class=MwisdFingerprint):
    """
    Fingerprint every image in the given directories

    Args:
        directories: Directory paths, processed in order
        workers: Thread pool size
        fingerprint_class: Engine used to fingerprint each file

    Returns:
        Collection of (filename, fingerprint) pairs ordered by directory,
        then filename
    """
    if workers is None:
        workers = config.WORKERS

    collection = []
    for directory in directories:
        logger.info("Processing: %s", directory)
        filenames = scan_images(directory)

        def process_image(filename):
            path = os.path.join(directory, filename)
            try:
                return filename, fingerprint_class.from_image_file(path)
            except (ComparatorFailure, cv2.error, OSError) as e:
                logger.warning("Skipping %s: %s", path, e)
                return filename, None

        # Process images in parallel; map keeps filename order
        with ThreadPoolExecutor(max_workers=workers) as executor:
            for filename, fingerprint in executor.map(process_image, filenames):
                if fingerprint is not None:
                    logger.debug("Fingerprinted %s", filename)
                    collection.append((filename, fingerprint))

        logger.info("Collection size: %d", len(collection))

    return collection
