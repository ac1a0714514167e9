import timeit

import memory_profiler
import numpy as np

from fptree.engine import ExhaustiveIndex, MwisdFingerprint
from fptree.index import SearchEngine, build_fuzzy_tree, build_tree


def random_collection(n, seed=0):
    rng = np.random.default_rng(seed)
    return [(f"img{i:06d}.jpg", MwisdFingerprint(rng.integers(0, 65536, size=64, dtype=np.uint16)))
            for i in range(n)]


def benchmark_tree():
    sizes = [1000, 5000, 20000]

    print("Benchmarking Tree Build and Search:")
    print("{:<10} {:<10} {:<15} {:<15} {:<15}".format(
        'Size', 'Tree', 'Build (s)', 'Memory (MB)', 'Search (ms)'))

    for n in sizes:
        collection = random_collection(n)
        fingerprints = dict(collection)
        queries = [fp for _, fp in collection[::max(1, n // 100)]]

        for name, builder in (('plain', build_tree), ('fuzzy', lambda c: build_fuzzy_tree(c, 0.002))):
            time_build = timeit.timeit(lambda: builder(collection), number=1)
            mem_build = memory_profiler.memory_usage((builder, (collection,)), max_usage=True)

            engine = SearchEngine(builder(collection), fingerprints)
            time_search = timeit.timeit(lambda: [engine.search(q) for q in queries], number=1)
            time_search = time_search * 1000.0 / len(queries)

            print(f"{n:<10} {name:<10} {time_build:<15.4f} {mem_build:<15.2f} {time_search:<15.4f}")

        # Exhaustive baseline
        index = ExhaustiveIndex()
        index.build(collection)
        time_flat = timeit.timeit(lambda: [index.search(q) for q in queries], number=1)
        print(f"{n:<10} {'faiss':<10} {'-':<15} {'-':<15} {time_flat * 1000.0 / len(queries):<15.4f}")


if __name__ == '__main__':
    benchmark_tree()
