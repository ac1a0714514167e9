# fptree/engine/__init__.py
from .mwisd import MwisdFingerprint, compare_with_mirror
from .histogram import HistogramFingerprint
from .exhaustive import ExhaustiveIndex

__all__ = ['MwisdFingerprint', 'compare_with_mirror', 'HistogramFingerprint', 'ExhaustiveIndex']
