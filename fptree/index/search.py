import logging
from collections import namedtuple

from .. import config
from ..errors import LookupFailure

logger = logging.getLogger(__name__)

MATCH = 'match'
NO_MATCH = 'no_match'


class SearchResult(namedtuple('SearchResult', ['finding', 'depth', 'matched_id'])):
    """
    finding: MATCH or NO_MATCH
    depth: level of the tree at which the search ended (root is 0)
    matched_id: identifier of the match, or None
    """
    __slots__ = ()

    @property
    def is_match(self):
        return self.finding == MATCH


class SearchEngine:
    """
    Descends a partition tree looking for the first fingerprint above cutoff

    Scoring against a single pivot can send a query just across a midpoint
    into the wrong subtree. When a descent fails, each node passed on the way
    down whose untaken branch lies within epsilon of its midpoint gets one
    probe of that branch. Probes are plain descents and never probe again.
    """
    def __init__(self, tree, fingerprints, cutoff=None, recovery_factor=None):
        """
        Args:
            tree: Built Tree
            fingerprints: Mapping of identifier -> fingerprint backing the tree
            cutoff: Minimum similarity accepted as a match (strictly greater)
            recovery_factor: epsilon = (1 - cutoff) * recovery_factor
        """
        if cutoff is None:
            cutoff = config.MATCH_CUTOFF
        if recovery_factor is None:
            recovery_factor = config.RECOVERY_FACTOR
        self.tree = tree
        self.fingerprints = fingerprints
        self.cutoff = cutoff
        self.epsilon = (1.0 - cutoff) * recovery_factor

    def _fingerprint(self, identifier):
        try:
            return self.fingerprints[identifier]
        except KeyError as e:
            raise LookupFailure(
                f"Tree references {identifier!r}, which is missing from the fingerprint store") from e

    def search(self, query):
        """
        Find a fingerprint matching query

        Returns:
            SearchResult
        """
        # Nodes on the original descent, with the score that routed the query
        pending = []
        probing = False
        node = self.tree.root
        depth = 0

        while True:
            if node is None:
                # Branch absent: the parent had a single child
                result = SearchResult(NO_MATCH, depth - 1, None)
            else:
                score = query.compare(self._fingerprint(node.identifier))
                if score > self.cutoff:
                    return SearchResult(MATCH, depth, node.identifier)
                if node.is_leaf:
                    result = SearchResult(NO_MATCH, depth, None)
                else:
                    went_lesser = score < node.midpoint
                    if not probing:
                        pending.append((node, score, depth, went_lesser))
                    node = node.lesser if went_lesser else node.greater
                    depth += 1
                    continue

            # No match below here: unwind to the nearest node worth a probe
            while pending:
                parent, score, parent_depth, went_lesser = pending.pop()
                if went_lesser and score + self.epsilon >= parent.midpoint:
                    logger.debug("Retrying greater branch of %r (score %.6f, midpoint %.6f)",
                                 parent.identifier, score, parent.midpoint)
                    node = parent.greater
                elif not went_lesser and score - self.epsilon <= parent.midpoint:
                    logger.debug("Retrying lesser branch of %r (score %.6f, midpoint %.6f)",
                                 parent.identifier, score, parent.midpoint)
                    node = parent.lesser
                else:
                    continue
                depth = parent_depth + 1
                probing = True
                break
            else:
                return result
