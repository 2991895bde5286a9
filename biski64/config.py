"""Configuration models for generator demo runs."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


DEFAULT_COUNT = 4096
DEFAULT_STREAMS = 4
DEFAULT_BITMAP_WIDTH = 256


@dataclass(frozen=True)
class QualityConfig:
    """Controls the statistical quality report."""

    sample_count: int = 100_000
    bounded_max_inclusive: int = 9
    double_bins: int = 64
    significance: float = 0.001
    gaussian_samples: int = 20_000
    gaussian_mean_tolerance: float = 0.05
    gaussian_std_tolerance: float = 0.05


@dataclass(frozen=True)
class BitmapConfig:
    """Controls the output-bit bitmap preview."""

    width_bits: int = DEFAULT_BITMAP_WIDTH
    max_rows: int = 1024


@dataclass(frozen=True)
class BenchConfig:
    """Controls the throughput timing harness."""

    calls_per_round: int = 200_000
    rounds: int = 3
    warmup_calls: int = 10_000


@dataclass(frozen=True)
class RunConfig:
    """Primary demo-run configuration."""

    count: int = DEFAULT_COUNT
    streams: int = DEFAULT_STREAMS
    stream_steps: int = 16
    quality: QualityConfig = field(default_factory=QualityConfig)
    bitmap: BitmapConfig = field(default_factory=BitmapConfig)
    bench: BenchConfig = field(default_factory=BenchConfig)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
