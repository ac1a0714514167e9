"""Tests for the brute-force FAISS index."""

import pytest

from fptree.engine import ExhaustiveIndex, MwisdFingerprint
from fptree.errors import InvalidInput
from fptree.index import SearchEngine, build_tree


def flip_bits(fp, count):
    words = fp.as_int_array()
    for bit in range(count):
        words[bit * 3] ^= 1 << (bit % 16)
    return MwisdFingerprint(words)


@pytest.fixture
def index(random_collection):
    index = ExhaustiveIndex()
    index.build(random_collection(50))
    return index


def test_exact_member_scores_one(index, random_collection):
    identifier, fp = random_collection(50)[17]
    assert index.search(fp) == [(identifier, 1.0)]


def test_results_are_ordered(index, random_collection):
    _, fp = random_collection(50)[5]
    results = index.search(fp, k=5)
    assert len(results) == 5
    assert results[0] == ('img0005.jpg', 1.0)
    scores = [score for _, score in results]
    assert scores == sorted(scores, reverse=True)


def test_similarity_agrees_with_compare(index, random_collection):
    collection = random_collection(50)
    query = flip_bits(collection[8][1], 20)
    identifier, score = index.search(query)[0]
    assert identifier == 'img0008.jpg'
    assert score == pytest.approx(query.compare(collection[8][1]))
    assert score == pytest.approx(1.0 - 20 / 1024)


def test_k_is_clipped(random_collection):
    index = ExhaustiveIndex()
    index.build(random_collection(3))
    assert len(index.search(random_collection(3)[0][1], k=10)) == 3


def test_best_match(index, random_collection):
    collection = random_collection(50)
    assert index.best_match(flip_bits(collection[2][1], 10), 0.93) == 'img0002.jpg'
    assert index.best_match(random_collection(1, seed=99)[0][1], 0.93) is None


def test_unbuilt_index():
    with pytest.raises(InvalidInput):
        ExhaustiveIndex().search(MwisdFingerprint())


def test_empty_collection():
    with pytest.raises(InvalidInput):
        ExhaustiveIndex().build([])


def test_size_mismatch(random_collection):
    with pytest.raises(InvalidInput):
        ExhaustiveIndex(bits=512).build(random_collection(2))


def test_tree_agrees_on_members(index, random_collection):
    collection = random_collection(50)
    engine = SearchEngine(build_tree(collection), dict(collection))
    for identifier, fp in collection:
        assert engine.search(fp).matched_id == index.best_match(fp, engine.cutoff) == identifier
