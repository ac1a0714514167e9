import logging

import faiss
import numpy as np

from ..errors import InvalidInput

logger = logging.getLogger(__name__)


class ExhaustiveIndex:
    """
    Brute-force Hamming index over wavelet fingerprints

    Compares a query against every stored fingerprint, so it is the ground
    truth the partition tree is measured against.
    """
    def __init__(self, bits=1024):
        """
        Initialize an exhaustive index

        Args:
            bits: Fingerprint size in bits (default 1024 for 128-byte fingerprints)
        """
        if bits <= 0 or bits % 8:
            raise InvalidInput(f"bits must be a positive multiple of 8, got {bits}")
        self.bits = bits
        self.index = None
        self.identifiers = []

    def _as_vectors(self, fingerprints):
        vectors = np.vstack([np.frombuffer(fp.as_bytes(), dtype=np.uint8) for fp in fingerprints])
        if vectors.shape[1] * 8 != self.bits:
            raise InvalidInput(f"Fingerprints are {vectors.shape[1] * 8} bits, index expects {self.bits}")
        return np.ascontiguousarray(vectors)

    def build(self, collection):
        """
        Build the index from a collection

        Args:
            collection: Sequence of (identifier, MwisdFingerprint) pairs

        Returns:
            Built FAISS index
        """
        if not collection:
            raise InvalidInput("Cannot build an index from an empty collection")

        index = faiss.IndexBinaryFlat(self.bits)
        index.add(self._as_vectors([fp for _, fp in collection]))

        self.identifiers = [identifier for identifier, _ in collection]
        self.index = index
        logger.debug("Exhaustive index built over %d fingerprints", index.ntotal)
        return index

    def search(self, query, k=1):
        """
        Find the most similar stored fingerprints

        Args:
            query: Query fingerprint
            k: Number of results to return

        Returns:
            List of (identifier, similarity) pairs, most similar first
        """
        if self.index is None:
            raise InvalidInput("Index not built. Call build first.")

        k = min(k, self.index.ntotal)
        distances, indices = self.index.search(self._as_vectors([query]), k)
        return [
            (self.identifiers[i], 1.0 - float(d) / self.bits)
            for d, i in zip(distances[0], indices[0])
            if i != -1
        ]

    def best_match(self, query, cutoff):
        """Identifier of the closest fingerprint scoring above cutoff, or None"""
        results = self.search(query, k=1)
        if results and results[0][1] > cutoff:
            return results[0][0]
        return None
