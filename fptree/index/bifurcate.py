from collections import namedtuple

from ..errors import InvalidInput

# midpoint: median similarity to the pivot
# lesser_set: positions scoring below the midpoint (and up to midpoint + epsilon, when fuzzy)
# greater_or_equal_set: positions scoring at or above the midpoint (and down to midpoint - epsilon, when fuzzy)
BifurcationResult = namedtuple('BifurcationResult', ['midpoint', 'lesser_set', 'greater_or_equal_set'])


def bifurcate(candidates, pivot, epsilon=0.0):
    """
    Split candidates into two groups around their median similarity to a pivot

    Args:
        candidates: Sequence of (identifier, fingerprint) pairs, pivot excluded
        pivot: Fingerprint every candidate is scored against
        epsilon: Half-width of the overlap band; 0 gives a strict partition

    Returns:
        BifurcationResult with lists of candidate positions in ascending order.
        With epsilon > 0, positions scoring within epsilon of the midpoint
        belong to both groups.
    """
    if not candidates:
        raise InvalidInput("Cannot bifurcate an empty candidate set")
    if epsilon < 0:
        raise InvalidInput(f"epsilon must be >= 0, got {epsilon}")

    scores = [pivot.compare(fingerprint) for _, fingerprint in candidates]

    # Lower median, no averaging
    midpoint = sorted(scores)[len(scores) // 2]

    lesser = []
    greater = []
    for position, score in enumerate(scores):
        if epsilon == 0:
            if score < midpoint:
                lesser.append(position)
            else:
                greater.append(position)
        else:
            if score <= midpoint + epsilon:
                lesser.append(position)
            if score >= midpoint - epsilon:
                greater.append(position)

    return BifurcationResult(midpoint, lesser, greater)
