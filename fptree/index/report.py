"""Similarity statistics over small collections, for inspecting fingerprint quality."""


def pairwise_similarities(collection):
    """
    Compare every unique pair of entries (1/2 * N * (N-1) comparisons)

    Returns:
        List of (identifier_1, identifier_2, similarity) for each i < j
    """
    results = []
    for i, (id1, fp1) in enumerate(collection):
        for id2, fp2 in collection[i + 1:]:
            results.append((id1, id2, fp1.compare(fp2)))
    return results


def max_min_similarities(collection):
    """
    Per entry, the highest similarity to any other distinct fingerprint and
    the lowest similarity overall

    Returns:
        List of (identifier, maximum, minimum)
    """
    results = []
    for id1, fp1 in collection:
        maximum = 0.0
        minimum = 1.0
        for _, fp2 in collection:
            similarity = fp1.compare(fp2)
            # A perfect score only counts against a different fingerprint
            if similarity > maximum and (similarity < 1.0 or fp1 != fp2):
                maximum = similarity
            if similarity < minimum:
                minimum = similarity
        results.append((id1, maximum, minimum))
    return results
