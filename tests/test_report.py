"""Tests for collection similarity reports."""

import pytest

from conftest import scalar_collection
from fptree.index import max_min_similarities, pairwise_similarities


def test_pairwise():
    collection = scalar_collection(('a', 0.0), ('b', 0.25), ('c', 0.5))
    results = pairwise_similarities(collection)
    assert [(id1, id2) for id1, id2, _ in results] == [('a', 'b'), ('a', 'c'), ('b', 'c')]
    assert [score for _, _, score in results] == pytest.approx([0.75, 0.5, 0.75])


def test_pairwise_single_entry():
    assert pairwise_similarities(scalar_collection(('a', 0.0))) == []


def test_max_min():
    collection = scalar_collection(('a', 0.0), ('b', 0.25), ('c', 0.5))
    results = max_min_similarities(collection)
    assert [identifier for identifier, _, _ in results] == ['a', 'b', 'c']
    assert results[0][1:] == pytest.approx((0.75, 0.5))
    # Each entry scores 1.0 against itself, which is not counted as its maximum
    assert results[1][1:] == pytest.approx((0.75, 0.75))


def test_identical_copies_do_not_count_as_maximum(random_collection):
    collection = random_collection(3)
    collection.append(('copy.jpg', collection[0][1]))
    results = max_min_similarities(collection)
    assert results[0][1] < 1.0
    assert results[0][2] < 0.6
