"""Damped iterative solver for zero-centred strength offsets."""

from typing import Dict, List, Sequence, Tuple

import numpy as np

PairKey = Tuple[str, str]


def add_pair_observation(pair_diffs: Dict[PairKey, List[float]], first: str, second: str, diff: float) -> None:
    """
    Record ``diff`` = (rate in ``first``) - (rate in ``second``).

    Pairs are stored under a sorted key with the difference oriented to match.
    """
    if first == second:
        return
    if first > second:
        first, second, diff = second, first, -diff
    pair_diffs.setdefault((first, second), []).append(diff)


def solve_offsets(
    keys: Sequence[str],
    pair_diffs: Dict[PairKey, List[float]],
    iterations: int = 20,
    damping: float = 0.5,
) -> Dict[str, float]:
    """
    Offsets that explain the averaged pairwise differences.

    A positive difference for (a, b) means players do better in ``a``, so
    ``a`` is pushed down and ``b`` up. Each pass blends the previous offset
    with the new estimate and re-centres the offsets to mean zero. Contexts
    with no observations stay at zero before centring.

    Args:
        keys: Every context to solve for
        pair_diffs: Sorted pair -> observed differences
        iterations: Fixed number of passes
        damping: Weight kept on the previous offset

    Returns:
        key -> offset, summing to zero
    """
    keys = list(keys)
    if not keys:
        return {}
    index = {k: i for i, k in enumerate(keys)}
    offsets = np.zeros(len(keys))

    pairs = [
        (index[a], index[b], float(np.mean(diffs)))
        for (a, b), diffs in pair_diffs.items()
        if a in index and b in index and diffs
    ]
    if not pairs:
        return {k: 0.0 for k in keys}

    for _ in range(iterations):
        estimate = np.zeros(len(keys))
        counts = np.zeros(len(keys))
        for a, b, avg in pairs:
            estimate[a] -= avg / 2
            estimate[b] += avg / 2
            counts[a] += 1
            counts[b] += 1
        seen = counts > 0
        offsets[seen] = damping * offsets[seen] + (1 - damping) * estimate[seen] / counts[seen]
        offsets -= offsets.mean()

    return {k: float(offsets[i]) for k, i in index.items()}
