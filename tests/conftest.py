"""Shared fixtures: stub fingerprints with exact similarities, random fingerprints, images."""

import cv2
import numpy as np
import pytest

from fptree.engine import MwisdFingerprint


class ScalarFingerprint:
    """Fingerprint on a line: similarity is 1 - |x - y|"""

    def __init__(self, value):
        self.value = value

    def compare(self, other):
        return 1.0 - abs(self.value - other.value)

    def __repr__(self):
        return f"ScalarFingerprint({self.value})"


class TableFingerprint:
    """Fingerprint whose similarities to others come from a shared table"""

    def __init__(self, name, table):
        self.name = name
        self.table = table

    def compare(self, other):
        if other.name == self.name:
            return 1.0
        return self.table[frozenset((self.name, other.name))]


class ConstantFingerprint:
    """Scores 1.0 against itself and 0.5 against anything else"""

    def compare(self, other):
        return 1.0 if other is self else 0.5


class ScriptedFingerprint:
    """Query with a fixed score against each stored fingerprint object"""

    def __init__(self, scores):
        self.scores = scores

    def compare(self, other):
        return self.scores[other]


def scalar_collection(*pairs):
    return [(identifier, ScalarFingerprint(value)) for identifier, value in pairs]


@pytest.fixture
def ladder():
    """
    Pivot P with three candidates. The tree it builds is:

        P (midpoint 0.7)
        |- lesser:  X1 (leaf)
        |- greater: X2 (midpoint 0.8)
                    |- greater: X3 (leaf)
    """
    return scalar_collection(('P', 0.0), ('X1', 0.5), ('X2', 0.3), ('X3', 0.1))


@pytest.fixture
def random_collection():
    """Factory for collections of random, mutually dissimilar wavelet fingerprints"""
    def _make(n, seed=0, prefix='img'):
        rng = np.random.default_rng(seed)
        return [
            (f"{prefix}{i:04d}.jpg",
             MwisdFingerprint(rng.integers(0, 65536, size=64, dtype=np.uint16)))
            for i in range(n)
        ]
    return _make


@pytest.fixture
def image_file(tmp_path):
    """Factory writing smooth random images into tmp_path"""
    def _make(name, size=(128, 128), channels=3, seed=0):
        rng = np.random.default_rng(seed)
        shape = size if channels == 1 else size + (channels,)
        img = rng.integers(0, 256, size=shape, dtype=np.uint8)
        img = cv2.GaussianBlur(img, (0, 0), 3)
        path = tmp_path / name
        assert cv2.imwrite(str(path), img)
        return path
    return _make
