"""Throughput timing for the core generator and the stream bank."""

from __future__ import annotations

from dataclasses import dataclass
import statistics as stats
import time
from typing import Callable

from .config import BenchConfig
from .core import GeneratorState
from .streams import StreamBank


@dataclass(frozen=True)
class BenchResult:
    name: str
    calls_per_round: int
    round_seconds: list[float]

    @property
    def best_seconds(self) -> float:
        return min(self.round_seconds)

    @property
    def median_seconds(self) -> float:
        return stats.median(self.round_seconds)

    @property
    def calls_per_second(self) -> float:
        best = self.best_seconds
        return self.calls_per_round / best if best > 0 else float("inf")

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "calls_per_round": self.calls_per_round,
            "round_seconds": list(self.round_seconds),
            "best_seconds": self.best_seconds,
            "median_seconds": self.median_seconds,
            "calls_per_second": self.calls_per_second,
        }


def _time_rounds(step: Callable[[], object], calls: int, rounds: int) -> list[float]:
    timings: list[float] = []
    for _ in range(rounds):
        t0 = time.perf_counter()
        for _ in range(calls):
            step()
        timings.append(time.perf_counter() - t0)
    return timings


class GeneratorBenchmark:
    """Times `next_u64` on a state it owns; the caller's state is never touched."""

    def __init__(self, state: GeneratorState, config: BenchConfig | None = None):
        self.state = state.copy()
        self.config = config or BenchConfig()

    def run(self) -> BenchResult:
        cfg = self.config
        if cfg.calls_per_round < 1 or cfg.rounds < 1:
            raise ValueError("calls_per_round and rounds must be >= 1")

        step = self.state.next_u64
        for _ in range(cfg.warmup_calls):
            step()
        timings = _time_rounds(step, cfg.calls_per_round, cfg.rounds)
        return BenchResult("next_u64", cfg.calls_per_round, timings)


def bench_stream_bank(bank: StreamBank, config: BenchConfig | None = None) -> BenchResult:
    """Time lockstep steps of a stream bank; one call yields `len(bank)` outputs."""

    cfg = config or BenchConfig()
    if cfg.calls_per_round < 1 or cfg.rounds < 1:
        raise ValueError("calls_per_round and rounds must be >= 1")

    steps = max(1, cfg.calls_per_round // len(bank))
    timings = _time_rounds(bank.next_u64, steps, cfg.rounds)
    return BenchResult(f"stream_bank[{len(bank)}]", steps * len(bank), timings)
