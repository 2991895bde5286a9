from __future__ import annotations

from biski64.bench import GeneratorBenchmark, bench_stream_bank
from biski64.config import BenchConfig
from biski64.core import seed
from biski64.streams import StreamBank


def test_generator_benchmark_leaves_caller_state_untouched() -> None:
    state = seed(12345)
    before = state.copy()

    result = GeneratorBenchmark(state, BenchConfig(calls_per_round=1_000, rounds=2, warmup_calls=10)).run()

    assert state == before
    assert result.name == "next_u64"
    assert len(result.round_seconds) == 2
    assert result.best_seconds <= result.median_seconds
    assert result.calls_per_second > 0


def test_stream_bank_benchmark_counts_all_streams() -> None:
    bank = StreamBank.from_seed(1, 8)

    result = bench_stream_bank(bank, BenchConfig(calls_per_round=800, rounds=1))

    assert result.calls_per_round == 800
    assert result.to_dict()["name"] == "stream_bank[8]"
