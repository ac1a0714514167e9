"""
De-duplication of a collection before it is indexed.

A collection is an ordered list of (identifier, fingerprint) pairs. The
tree needs distinct fingerprints and, when several sources are merged,
distinct identifiers; in both cases the earlier entry is kept.
"""

import logging

from .. import config

logger = logging.getLogger(__name__)


def _remove_positions(collection, positions):
    # Delete from the highest index down so pending indices stay valid
    result = list(collection)
    for index in sorted(positions, reverse=True):
        del result[index]
    return result


def deduplicate_fingerprints(collection, threshold=None):
    """
    Drop entries whose fingerprint is near-identical to an earlier one

    Args:
        collection: Sequence of (identifier, fingerprint) pairs
        threshold: Similarity above which two fingerprints are duplicates

    Returns:
        New list of pairs; the first occurrence of each fingerprint is kept
    """
    if threshold is None:
        threshold = config.DUPLICATE_THRESHOLD

    n = len(collection)
    duplicates = set()
    for i in range(n):
        first_id, first_fp = collection[i]
        # Every later entry is compared, even ones already marked
        for j in range(i + 1, n):
            second_id, second_fp = collection[j]
            if first_fp.compare(second_fp) > threshold:
                if j not in duplicates:
                    logger.info("Skipping %s as a duplicate of %s", second_id, first_id)
                duplicates.add(j)

    return _remove_positions(collection, duplicates)


def deduplicate_identifiers(collection):
    """
    Drop entries whose identifier already appeared earlier

    Only needed when collections from several sources are merged.
    """
    n = len(collection)
    duplicates = set()
    for i in range(n):
        for j in range(i + 1, n):
            if collection[i][0] == collection[j][0]:
                if j not in duplicates:
                    logger.info("Skipping non-uniquely named %s", collection[j][0])
                duplicates.add(j)

    return _remove_positions(collection, duplicates)


def deduplicate(collection, identifiers=False, threshold=None):
    """Fingerprint de-duplication, followed by identifier de-duplication if requested"""
    result = deduplicate_fingerprints(collection, threshold)
    if identifiers:
        result = deduplicate_identifiers(result)
    return result
