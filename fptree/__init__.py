# fptree/__init__.py
from .engine import MwisdFingerprint, HistogramFingerprint, ExhaustiveIndex
from .index import (
    bifurcate,
    build_tree,
    build_fuzzy_tree,
    deduplicate_fingerprints,
    deduplicate_identifiers,
    SearchEngine,
    SearchResult,
    Tree,
    TreeNode,
)
from .errors import TreeIndexError, InvalidInput, LookupFailure, ComparatorFailure

__version__ = "0.1.0"

__all__ = [
    'MwisdFingerprint', 'HistogramFingerprint', 'ExhaustiveIndex',
    'bifurcate', 'build_tree', 'build_fuzzy_tree',
    'deduplicate_fingerprints', 'deduplicate_identifiers',
    'SearchEngine', 'SearchResult', 'Tree', 'TreeNode',
    'TreeIndexError', 'InvalidInput', 'LookupFailure', 'ComparatorFailure',
]
