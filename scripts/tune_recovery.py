import argparse
import logging

import numpy as np
import optuna

from fptree import config
from fptree.engine import ExhaustiveIndex, MwisdFingerprint
from fptree.index import SearchEngine, build_tree, deduplicate_fingerprints
from fptree.store import FingerprintStore

logger = logging.getLogger("tune_recovery")


def perturb(fingerprint, flips, rng):
    """Copy of fingerprint with `flips` random bits inverted"""
    bits = np.unpackbits(np.frombuffer(fingerprint.as_bytes(), dtype=np.uint8))
    positions = rng.choice(len(bits), size=flips, replace=False)
    bits[positions] ^= 1
    return MwisdFingerprint.from_bytes(np.packbits(bits).tobytes(), fingerprint.size_in_bytes)


def optimize_recovery(database_url=None, flips=40, queries=200, trials=100, depth_weight=0.1, seed=0):
    # Load sample data
    collection = deduplicate_fingerprints(FingerprintStore(database_url).load())
    if len(collection) < 2:
        raise SystemExit("Need at least two stored fingerprints")

    tree = build_tree(collection)
    fingerprints = dict(collection)
    exhaustive = ExhaustiveIndex()
    exhaustive.build(collection)

    # Near-duplicate queries: stored fingerprints with noise added
    rng = np.random.default_rng(seed)
    picks = rng.choice(len(collection), size=min(queries, len(collection)), replace=False)
    probes = [perturb(collection[i][1], flips, rng) for i in picks]
    logger.info("Tuning over %d fingerprints with %d queries of %d flipped bits",
                len(collection), len(probes), flips)

    def objective(trial):
        # Suggest search parameters
        cutoff = trial.suggest_float('cutoff', 0.85, 0.97)
        recovery_factor = trial.suggest_float('recovery_factor', 0.0, 0.5)
        engine = SearchEngine(tree, fingerprints, cutoff, recovery_factor)

        hits = expected = depth = 0
        for probe in probes:
            truth = exhaustive.best_match(probe, cutoff)
            result = engine.search(probe)
            depth += result.depth
            if truth is not None:
                expected += 1
                hits += result.is_match

        recall = hits / (expected + 1e-8)
        mean_depth = depth / len(probes)
        # Reward recall, penalize long searches relative to tree depth
        return recall - depth_weight * mean_depth / max(1, tree.depth())

    study = optuna.create_study(direction='maximize')
    study.optimize(objective, n_trials=trials)

    print(f"Best parameters: {study.best_params}")
    print(f"Best score: {study.best_value}")
    return study.best_params


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Tune search cutoff and boundary recovery')
    parser.add_argument('--db', default=None,
                       help='Database URL (default from FPTREE_DATABASE_URL)')
    parser.add_argument('-f', '--flips', type=int, default=40,
                       help='Bits flipped to make each near-duplicate query')
    parser.add_argument('-q', '--queries', type=int, default=200,
                       help='Number of queries per trial')
    parser.add_argument('-t', '--trials', type=int, default=100,
                       help='Number of optuna trials')

    args = parser.parse_args()
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
    optimize_recovery(args.db, args.flips, args.queries, args.trials)
