"""Tests for the SQL fingerprint store."""

import pytest

from fptree.engine import HistogramFingerprint
from fptree.store import FingerprintStore


@pytest.fixture
def store(tmp_path):
    return FingerprintStore(f"sqlite:///{tmp_path / 'fingerprints.db'}")


def test_empty_store(store):
    assert len(store) == 0
    assert store.load() == []
    store.save([])
    assert len(store) == 0


def test_load_keeps_insertion_order(store, random_collection):
    collection = random_collection(5)
    store.save(collection[3:])
    store.save(collection[:3])
    loaded = store.load()
    assert [identifier for identifier, _ in loaded] == [
        'img0003.jpg', 'img0004.jpg', 'img0000.jpg', 'img0001.jpg', 'img0002.jpg']
    assert dict(loaded) == dict(collection)


def test_save_replaces_by_identifier(store, random_collection):
    collection = random_collection(3)
    replacement = random_collection(1, seed=9)[0][1]
    store.save(collection)
    store.save([('img0001.jpg', replacement)])

    loaded = store.load()
    assert len(store) == 3
    # The replaced entry keeps its original position
    assert [identifier for identifier, _ in loaded] == ['img0000.jpg', 'img0001.jpg', 'img0002.jpg']
    assert loaded[1][1] == replacement


def test_as_mapping(store, random_collection):
    collection = random_collection(4)
    store.save(collection)
    assert store.as_mapping() == dict(collection)


def test_clear(store, random_collection):
    store.save(random_collection(4))
    store.clear()
    assert len(store) == 0


def test_persists_across_instances(tmp_path, random_collection):
    url = f"sqlite:///{tmp_path / 'shared.db'}"
    collection = random_collection(3)
    FingerprintStore(url).save(collection)
    assert FingerprintStore(url).load() == collection


def test_histogram_fingerprints(tmp_path, image_file):
    store = FingerprintStore(f"sqlite:///{tmp_path / 'hist.db'}", fingerprint_class=HistogramFingerprint)
    fp = HistogramFingerprint.from_image_file(image_file("base.png"))
    store.save([('base.png', fp)])
    assert store.load() == [('base.png', fp)]
