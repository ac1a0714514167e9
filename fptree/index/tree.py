"""
Similarity-partition tree over a collection of fingerprints.

Each internal node is a pivot fingerprint plus the median similarity
(midpoint) of its subtree's members to that pivot. Members scoring below the
midpoint live under `lesser`, the rest under `greater`. The first member of
every (sub)collection becomes its pivot, so the input order fixes the shape
of the tree and no depth balance is guaranteed.
"""

import logging

from .. import config
from ..errors import InvalidInput
from .bifurcate import bifurcate

logger = logging.getLogger(__name__)


class TreeNode:
    """
    One position in the tree

    Leaves have no midpoint and no children. Nodes are wired together only
    while the tree is being built and are read-only afterwards.
    """
    def __init__(self, identifier, midpoint=None):
        self.identifier = identifier
        self.midpoint = midpoint
        self.greater = None
        self.lesser = None

    @property
    def next_greater(self):
        return self.greater.identifier if self.greater is not None else None

    @property
    def next_lesser(self):
        return self.lesser.identifier if self.lesser is not None else None

    @property
    def is_leaf(self):
        return self.greater is None and self.lesser is None

    def __repr__(self):
        return (f"TreeNode({self.identifier!r}, midpoint={self.midpoint}, "
                f"next_greater={self.next_greater!r}, next_lesser={self.next_lesser!r})")


class Tree:
    """
    Built partition tree, rooted at the first entry of the collection

    Fuzzy trees can hold one identifier at several positions; lookups by
    identifier return its first internal position in pre-order.
    """
    def __init__(self, root, epsilon=0.0):
        self.root = root
        self.epsilon = epsilon
        self._nodes = {}
        self._identifiers = set()
        self._size = 0
        for node in self.walk():
            self._size += 1
            self._identifiers.add(node.identifier)
            if not node.is_leaf:
                self._nodes.setdefault(node.identifier, node)

    @property
    def root_id(self):
        return self.root.identifier

    def walk(self):
        """Yield every position in pre-order, greater subtree before lesser"""
        stack = [self.root]
        while stack:
            node = stack.pop()
            yield node
            if node.lesser is not None:
                stack.append(node.lesser)
            if node.greater is not None:
                stack.append(node.greater)

    def node(self, identifier):
        """Internal node recorded for identifier, or None for leaves and unknown ids"""
        return self._nodes.get(identifier)

    def depth(self):
        """Number of edges on the longest root-to-leaf path"""
        deepest = 0
        stack = [(self.root, 0)]
        while stack:
            node, depth = stack.pop()
            deepest = max(deepest, depth)
            for child in (node.greater, node.lesser):
                if child is not None:
                    stack.append((child, depth + 1))
        return deepest

    def as_dict(self):
        """identifier -> {midpoint, next_greater, next_lesser} for every internal node"""
        return {
            identifier: {
                'midpoint': node.midpoint,
                'next_greater': node.next_greater,
                'next_lesser': node.next_lesser,
            }
            for identifier, node in self._nodes.items()
        }

    def __len__(self):
        return self._size

    def __contains__(self, identifier):
        return identifier in self._identifiers

    def __repr__(self):
        return f"Tree(root_id={self.root_id!r}, positions={self._size}, epsilon={self.epsilon})"


def build_tree(collection, epsilon=0.0):
    """
    Build a partition tree over a de-duplicated collection

    Args:
        collection: Sequence of (identifier, fingerprint) pairs; the first
            entry becomes the root pivot
        epsilon: Overlap band passed to every bifurcation (0 for a plain tree)

    Returns:
        Tree
    """
    if not collection:
        raise InvalidInput("Cannot build a tree from an empty collection")

    root = TreeNode(collection[0][0])
    pending = [(root, list(collection))]
    comparisons = 0

    # Explicit stack: degenerate inputs give trees as deep as the collection
    while pending:
        node, members = pending.pop()
        if len(members) < 2:
            continue

        pivot_fp = members[0][1]
        candidates = members[1:]
        layer = bifurcate(candidates, pivot_fp, epsilon)
        comparisons += len(candidates)
        node.midpoint = layer.midpoint

        group_ge = [candidates[i] for i in layer.greater_or_equal_set]
        group_lt = [candidates[i] for i in layer.lesser_set]

        if group_lt:
            node.lesser = TreeNode(group_lt[0][0])
            pending.append((node.lesser, group_lt))
        if group_ge:
            node.greater = TreeNode(group_ge[0][0])
            pending.append((node.greater, group_ge))

    tree = Tree(root, epsilon)
    logger.info("Built tree over %d entries: %d positions, depth %d, %d comparisons",
                len(collection), len(tree), tree.depth(), comparisons)
    return tree


def build_fuzzy_tree(collection, epsilon=None):
    """
    Build a tree whose subtrees overlap around every midpoint

    Members within epsilon of a midpoint are indexed under both children,
    trading index size for tolerance of near-midpoint queries.
    """
    if epsilon is None:
        epsilon = config.FUZZY_EPSILON
    return build_tree(collection, epsilon)
