"""Benchmark lane packing for growing numbers of timed item cards."""

from __future__ import annotations

import argparse
import statistics
import time
from dataclasses import dataclass
from typing import Mapping, Sequence

import numpy as np

from item_timeline.core.layout import LayoutSettings, layout_timeline
from item_timeline.core.timings import TimingEntry


@dataclass(slots=True)
class BenchmarkResult:
    """Statistical summary for one card-count scenario."""

    cards: int
    durations: list[float]
    lanes: int

    @property
    def mean(self) -> float:
        return statistics.fmean(self.durations)

    @property
    def pstdev(self) -> float:
        if len(self.durations) <= 1:
            return 0.0
        return statistics.pstdev(self.durations)


def _random_timings(count: int, *, seed: int, max_minute: float) -> Mapping[str, TimingEntry]:
    rng = np.random.default_rng(seed)
    minutes = rng.uniform(0.0, max_minute, size=count)
    uses = rng.integers(0, 5_000, size=count)
    return {
        f"item-{index}": TimingEntry(f"item-{index}", float(minute), int(used))
        for index, (minute, used) in enumerate(zip(minutes, uses))
    }


def _measure(
    timings: Mapping[str, TimingEntry],
    settings: LayoutSettings,
    *,
    repeats: int,
    warmup: int,
) -> tuple[list[float], int]:
    for _ in range(max(warmup, 0)):
        layout_timeline(timings, settings)
    durations: list[float] = []
    lanes = 0
    for _ in range(max(repeats, 1)):
        start = time.perf_counter()
        layout = layout_timeline(timings, settings)
        durations.append(time.perf_counter() - start)
        lanes = layout.lane_count
    return durations, lanes


def _format_result(result: BenchmarkResult) -> str:
    throughput = result.cards / result.mean if result.mean else float("nan")
    return (
        f"{result.cards:>6} cards: {result.mean * 1e3:.3f}ms ± {result.pstdev * 1e3:.3f}ms, "
        f"{result.lanes} lanes ({throughput:,.0f} cards/s)"
    )


def run(
    sizes: Sequence[int],
    *,
    repeats: int,
    warmup: int,
    max_minute: float,
    settings: LayoutSettings,
    seed: int,
) -> list[BenchmarkResult]:
    results: list[BenchmarkResult] = []
    for size in sizes:
        timings = _random_timings(size, seed=seed, max_minute=max_minute)
        durations, lanes = _measure(timings, settings, repeats=repeats, warmup=warmup)
        results.append(BenchmarkResult(cards=size, durations=durations, lanes=lanes))
    return results


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--sizes",
        type=int,
        nargs="+",
        default=[10, 100, 1_000, 5_000],
        help="Card counts to benchmark.",
    )
    parser.add_argument("--repeats", type=int, default=5, help="Measured runs per size.")
    parser.add_argument("--warmup", type=int, default=1, help="Unmeasured runs per size.")
    parser.add_argument(
        "--max-minute",
        type=float,
        default=60.0,
        help="Upper bound of the uniformly drawn purchase minutes.",
    )
    parser.add_argument(
        "--min-gap",
        type=float,
        default=96.0,
        help="Minimum gap in pixels between cards sharing a lane.",
    )
    parser.add_argument("--seed", type=int, default=7, help="Random seed.")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    settings = LayoutSettings(minimum_gap_px=args.min_gap)
    for result in run(
        args.sizes,
        repeats=args.repeats,
        warmup=args.warmup,
        max_minute=args.max_minute,
        settings=settings,
        seed=args.seed,
    ):
        print(_format_result(result))


if __name__ == "__main__":
    main()
