# fptree/index/__init__.py
from .dedupe import deduplicate, deduplicate_fingerprints, deduplicate_identifiers
from .bifurcate import bifurcate, BifurcationResult
from .tree import Tree, TreeNode, build_tree, build_fuzzy_tree
from .search import SearchEngine, SearchResult, MATCH, NO_MATCH
from .report import pairwise_similarities, max_min_similarities

__all__ = [
    'deduplicate', 'deduplicate_fingerprints', 'deduplicate_identifiers',
    'bifurcate', 'BifurcationResult',
    'Tree', 'TreeNode', 'build_tree', 'build_fuzzy_tree',
    'SearchEngine', 'SearchResult', 'MATCH', 'NO_MATCH',
    'pairwise_similarities', 'max_min_similarities',
]
