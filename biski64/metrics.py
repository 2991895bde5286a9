"""Statistical quality summaries for generator output."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from scipy import stats

from .config import QualityConfig
from .core import GeneratorState
from .distributions import (
    random_bounded_int,
    random_double_array,
    random_gaussian,
    random_u64_array,
)


@dataclass(frozen=True)
class UniformityMetrics:
    """Chi-square goodness of fit against a uniform distribution."""

    bins: int
    samples: int
    chi_square: float
    p_value: float
    passed: bool


@dataclass(frozen=True)
class BitBalanceMetrics:
    """Fraction of set bits per output bit position."""

    samples: int
    min_ones_fraction: float
    max_ones_fraction: float
    max_deviation: float


@dataclass(frozen=True)
class GaussianMetrics:
    samples: int
    mean: float
    std: float
    passed: bool


@dataclass(frozen=True)
class QualityReport:
    bounded: UniformityMetrics
    doubles: UniformityMetrics
    bits: BitBalanceMetrics
    gaussian: GaussianMetrics

    @property
    def passed(self) -> bool:
        return self.bounded.passed and self.doubles.passed and self.gaussian.passed


def chi_square_uniform(counts: np.ndarray, *, significance: float = 0.001) -> UniformityMetrics:
    """Test observed bin counts against equal expected frequencies."""

    counts = np.asarray(counts, dtype=np.float64)
    if counts.ndim != 1 or counts.shape[0] < 2:
        raise ValueError("counts must be a 1D array with at least 2 bins")
    total = int(counts.sum())
    if total == 0:
        raise ValueError("counts must not all be zero")

    result = stats.chisquare(counts)
    p_value = float(result.pvalue)
    return UniformityMetrics(
        bins=int(counts.shape[0]),
        samples=total,
        chi_square=float(result.statistic),
        p_value=p_value,
        passed=p_value >= significance,
    )


def bit_balance(outputs: np.ndarray) -> BitBalanceMetrics:
    """Per-position set-bit fractions over a uint64 output array."""

    outputs = np.asarray(outputs, dtype=np.uint64)
    if outputs.ndim != 1 or outputs.shape[0] == 0:
        raise ValueError("outputs must be a non-empty 1D array")

    # Big-endian bytes so bit column 0 is the most significant output bit.
    bits = np.unpackbits(outputs.astype(">u8").view(np.uint8).reshape(-1, 8), axis=1)
    ones = bits.mean(axis=0)
    return BitBalanceMetrics(
        samples=int(outputs.shape[0]),
        min_ones_fraction=float(ones.min()),
        max_ones_fraction=float(ones.max()),
        max_deviation=float(np.max(np.abs(ones - 0.5))),
    )


def quality_report(state: GeneratorState, config: QualityConfig | None = None) -> QualityReport:
    """Draw samples from `state` and summarize their distribution."""

    cfg = config or QualityConfig()
    n_values = cfg.bounded_max_inclusive + 1

    bounded = np.fromiter(
        (random_bounded_int(state, cfg.bounded_max_inclusive) for _ in range(cfg.sample_count)),
        dtype=np.int64,
        count=cfg.sample_count,
    )
    bounded_metrics = chi_square_uniform(
        np.bincount(bounded, minlength=n_values), significance=cfg.significance
    )

    doubles = random_double_array(state, cfg.sample_count)
    hist, _ = np.histogram(doubles, bins=cfg.double_bins, range=(0.0, 1.0))
    doubles_metrics = chi_square_uniform(hist, significance=cfg.significance)

    bits_metrics = bit_balance(random_u64_array(state, cfg.sample_count))

    gaussians = np.fromiter(
        (random_gaussian(state) for _ in range(cfg.gaussian_samples)),
        dtype=np.float64,
        count=cfg.gaussian_samples,
    )
    mean = float(gaussians.mean())
    std = float(gaussians.std())
    gaussian_metrics = GaussianMetrics(
        samples=cfg.gaussian_samples,
        mean=mean,
        std=std,
        passed=abs(mean) <= cfg.gaussian_mean_tolerance and abs(std - 1.0) <= cfg.gaussian_std_tolerance,
    )

    return QualityReport(bounded_metrics, doubles_metrics, bits_metrics, gaussian_metrics)
