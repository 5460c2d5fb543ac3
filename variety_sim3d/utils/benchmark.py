#!/usr/bin/env python3
"""
Performance benchmark for the variety kernel.

Times one variety/gradient evaluation and one full engine step for a range
of body counts. Both are O(N²) in the number of bodies.

Usage:
    python -m variety_sim3d.utils.benchmark [--bodies 100] [--iterations 10]
"""

from __future__ import annotations

import argparse
import random
import sys
import time
from typing import Callable

import numpy as np

from variety_sim3d.core.engine import VarietyEngine
from variety_sim3d.params import VarietyParams
from variety_sim3d.physics.variety import compute_variety_and_gradient, pair_count


def generate_positions(n: int, seed: int = 42, half_extent: float = 8.0) -> np.ndarray:
    """Generate random positions in the starting cube."""
    rng = random.Random(seed)
    return np.array(
        [[rng.uniform(-half_extent, half_extent) for _ in range(3)] for _ in range(n)],
        dtype=np.float64,
    )


def time_call(fn: Callable[[], object], iterations: int) -> tuple[float, float]:
    """Mean and standard deviation of ``fn`` runtime in milliseconds."""
    times = []
    for _ in range(max(1, iterations)):
        t0 = time.perf_counter()
        fn()
        times.append(time.perf_counter() - t0)
    mean = sum(times) / len(times)
    std = (sum((t - mean) ** 2 for t in times) / len(times)) ** 0.5
    return mean * 1000.0, std * 1000.0


def run_benchmark(n: int, iterations: int = 10) -> dict[str, float]:
    print(f"\n{'=' * 60}")
    print(f"Benchmark: N = {n} bodies ({pair_count(n)} pairs), {iterations} iterations")
    print(f"{'=' * 60}")

    results: dict[str, float] = {}

    positions = generate_positions(n)
    mean_ms, std_ms = time_call(lambda: compute_variety_and_gradient(positions), iterations)
    results["kernel"] = mean_ms
    print(f"  Variety + gradient: {mean_ms:.3f} ± {std_ms:.3f} ms")

    engine = VarietyEngine(VarietyParams(body_count=n).clamp())
    mean_ms, std_ms = time_call(engine.step, iterations)
    results["step"] = mean_ms
    print(f"  Engine step:        {mean_ms:.3f} ± {std_ms:.3f} ms")

    return results


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Benchmark the variety kernel")
    parser.add_argument("--bodies", "-n", type=int, default=100, help="Number of bodies")
    parser.add_argument("--iterations", "-i", type=int, default=10, help="Benchmark iterations")
    parser.add_argument("--sweep", action="store_true", help="Run sweep over body counts")
    args = parser.parse_args(argv)

    print("Variety Minimization Benchmark")
    print(f"Platform: {sys.platform}")
    print(f"NumPy: {np.__version__}")

    if args.sweep:
        for n in [8, 25, 50, 100, 200]:
            run_benchmark(n, args.iterations)
    else:
        run_benchmark(args.bodies, args.iterations)


if __name__ == "__main__":
    main()
