"""
Variety potential and its analytic gradient.

The variety of a point set is

    V = sqrt(Σ r_ij²) · Σ (1 / r_ij)

over every unordered pair i < j. It is scale invariant and bounded below by
R^1.5 (R = number of pairs), reached only when all pairwise distances are
equal. Distances are floored before use so coincident points stay finite.

Example:
    >>> from variety_sim3d.physics.variety import compute_variety_and_gradient
    >>> variety, grad = compute_variety_and_gradient(positions)
"""

from __future__ import annotations

import numpy as np

DISTANCE_FLOOR = 0.1


def pair_count(n: int) -> int:
    """Number of unordered pairs among ``n`` points."""
    n = int(n)
    return (n * (n - 1)) // 2


def theoretical_minimum(n: int) -> float:
    """
    Lower bound of the variety for ``n`` points.

    By Cauchy-Schwarz, sqrt(Σr²)·Σ(1/r) >= R^1.5 with equality when all R
    distances coincide.
    """
    return float(pair_count(n)) ** 1.5


def pair_distances(positions: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """
    Enumerate all unordered pairs of an (n, 3) position array.

    Returns:
        (i, j, diff, dist) where ``diff[k] = positions[i[k]] - positions[j[k]]``
        and ``dist[k]`` is its Euclidean length. Pairs are ordered
        lexicographically by (i, j).
    """
    pos = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
    i_idx, j_idx = np.triu_indices(pos.shape[0], k=1)
    diff = pos[i_idx] - pos[j_idx]
    dist = np.sqrt(np.sum(diff * diff, axis=1))
    return i_idx, j_idx, diff, dist


def pair_forces(
    positions: np.ndarray,
    *,
    floor: float = DISTANCE_FLOOR,
) -> tuple[float, np.ndarray, np.ndarray, np.ndarray]:
    """
    Per-pair descent contributions of the variety potential.

    For each pair the derivative of V with respect to the pair distance is

        dV/dr = (r / sqrt(S2)) · S1 - sqrt(S2) / r²

    with r floored at ``floor``. The contribution ``g = u_ij · (-dV/dr)``
    (``u_ij`` the unit vector from j to i) is already negated: adding it to
    particle i and subtracting it from particle j moves the set downhill.

    Returns:
        (variety, i, j, g) with ``g`` shaped (R, 3).
    """
    i_idx, j_idx, diff, dist = pair_distances(positions)
    if dist.size == 0:
        return 0.0, i_idx, j_idx, np.zeros((0, 3), dtype=np.float64)

    safe = np.maximum(dist, float(floor))
    sum_sq = float(np.sum(safe * safe))
    sum_inv = float(np.sum(1.0 / safe))
    sqrt_sum_sq = float(np.sqrt(sum_sq))
    variety = sqrt_sum_sq * sum_inv

    dv_dr = (safe / sqrt_sum_sq) * sum_inv - sqrt_sum_sq / (safe * safe)

    # Coincident points have no direction: their unit vector stays zero.
    length = np.where(dist > 0.0, dist, 1.0)
    unit = diff / length[:, None]
    g = unit * (-dv_dr)[:, None]
    return variety, i_idx, j_idx, g


def compute_variety_and_gradient(
    positions: np.ndarray,
    *,
    floor: float = DISTANCE_FLOOR,
) -> tuple[float, np.ndarray]:
    """
    Variety of a point set and the per-point descent direction.

    Args:
        positions: (n, 3) array, read only
        floor: minimum distance used in the potential

    Returns:
        (variety, gradients) where ``gradients`` is (n, 3) and equals
        ``-∂V/∂position`` for every point. n = 1 yields variety 0 and a zero
        gradient.
    """
    pos = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
    variety, i_idx, j_idx, g = pair_forces(pos, floor=floor)
    gradients = np.zeros_like(pos)
    np.add.at(gradients, i_idx, g)
    np.subtract.at(gradients, j_idx, g)
    return variety, gradients


def variety_of(positions: np.ndarray, *, floor: float = DISTANCE_FLOOR) -> float:
    """Variety alone, without the gradient pass."""
    _i, _j, _diff, dist = pair_distances(positions)
    if dist.size == 0:
        return 0.0
    safe = np.maximum(dist, float(floor))
    return float(np.sqrt(np.sum(safe * safe)) * np.sum(1.0 / safe))
