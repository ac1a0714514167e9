import argparse
import logging

from fptree import config
from fptree.engine import ExhaustiveIndex, MwisdFingerprint
from fptree.index import (
    SearchEngine,
    build_fuzzy_tree,
    build_tree,
    deduplicate,
    max_min_similarities,
    pairwise_similarities,
)
from fptree.ingest import fingerprint_directories
from fptree.store import FingerprintStore

logger = logging.getLogger("build_index")

# Collections this small get full similarity reports
REPORT_LIMIT = 8


def report_small_collection(collection):
    for id1, id2, similarity in pairwise_similarities(collection):
        print(f"{id1} v. {id2} : {similarity:.6f}")
    for identifier, maximum, minimum in max_min_similarities(collection):
        print(f"{identifier} max/min inter-similarity: {maximum:.6f} {minimum:.6f}")


def run_searches(engine, fingerprints, exhaustive, size):
    """Search for (up to) the last `size` members and check against the exhaustive index"""
    identifiers = list(fingerprints)[-size:] if size > 0 else []
    found = agreed = total_depth = 0
    for identifier in identifiers:
        result = engine.search(fingerprints[identifier])
        expected = exhaustive.best_match(fingerprints[identifier], engine.cutoff)
        found += result.is_match
        agreed += result.matched_id == expected
        total_depth += result.depth
        print(f"Search {identifier}: {result.finding} #compares={result.depth}")

    if identifiers:
        print(f"Matched {found}/{len(identifiers)}, agreed with exhaustive search "
              f"{agreed}/{len(identifiers)}, mean depth {total_depth / len(identifiers):.2f}")


def build_index(directories, from_db=False, fuzzy=False, epsilon=None, cutoff=None,
                searches=100, probe=None, database_url=None):
    store = FingerprintStore(database_url)

    if from_db:
        collection = store.load()
    else:
        collection = fingerprint_directories(directories)

    if len(collection) <= REPORT_LIMIT:
        report_small_collection(collection)

    # Identifier clashes only arise when merging directories
    collection = deduplicate(collection, identifiers=len(directories) > 1)
    logger.info("Building tree over %d unique fingerprints", len(collection))
    if not from_db:
        # Persist exactly what the tree indexes
        store.save(collection)

    if fuzzy:
        tree = build_fuzzy_tree(collection, epsilon)
    else:
        tree = build_tree(collection)
    if len(collection) <= REPORT_LIMIT:
        print(f"tree: {tree.as_dict()}")

    fingerprints = dict(collection)
    engine = SearchEngine(tree, fingerprints, cutoff)
    exhaustive = ExhaustiveIndex()
    exhaustive.build(collection)

    run_searches(engine, fingerprints, exhaustive, searches)

    if probe:
        # Something likely not in the tree, then its mirror image
        query = MwisdFingerprint.from_image_file(probe)
        result = engine.search(query)
        print(f"Manual search {probe}: {result.finding} #compares={result.depth}")
        result = engine.search(query.mirrored())
        print(f"Manual mirror search {probe}: {result.finding} #compares={result.depth}")

    return tree


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Build a fingerprint tree and search it')
    parser.add_argument('directories', nargs='*',
                       help='Directories of images to fingerprint')
    parser.add_argument('--from-db', action='store_true',
                       help='Load fingerprints from the database instead of images')
    parser.add_argument('--db', default=None,
                       help='Database URL (default from FPTREE_DATABASE_URL)')
    parser.add_argument('--fuzzy', action='store_true',
                       help='Build a fuzzy tree with overlapping subtrees')
    parser.add_argument('-e', '--epsilon', type=float, default=config.FUZZY_EPSILON,
                       help='Overlap band for fuzzy trees')
    parser.add_argument('-c', '--cutoff', type=float, default=config.MATCH_CUTOFF,
                       help='Minimum similarity accepted as a match')
    parser.add_argument('-n', '--searches', type=int, default=100,
                       help='Number of members to search for')
    parser.add_argument('--probe', default=None,
                       help='Extra image to search for, plain and mirrored')

    args = parser.parse_args()
    if not args.directories and not args.from_db:
        parser.error('give image directories or --from-db')

    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
    build_index(args.directories, args.from_db, args.fuzzy, args.epsilon, args.cutoff,
                args.searches, args.probe, args.db)
