"""Stream partitioning for parallel, non-overlapping generator instances."""

from __future__ import annotations

from dataclasses import dataclass
import hashlib

import numpy as np

from .core import (
    LOOP_MIX_ROTATION,
    MIX_ROTATION,
    WARMUP_ROUNDS,
    WEYL_INCREMENT,
    GeneratorState,
    InvalidArgumentError,
    check_non_negative,
    entropy_seed,
    normalize_seed,
    warm_up,
)
from .splitmix import MASK64, expand

MAX_STREAMS = (1 << 63) - 1


def _check_stream_args(stream_index: int, total_streams: int) -> None:
    for name, value in (("stream_index", stream_index), ("total_streams", total_streams)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidArgumentError(f"{name} must be an integer, got {type(value).__name__}")
    if total_streams < 1 or total_streams > MAX_STREAMS:
        raise InvalidArgumentError(f"total_streams must be in [1, {MAX_STREAMS}], got {total_streams}")
    if stream_index < 0 or stream_index >= total_streams:
        raise InvalidArgumentError(
            f"stream_index must be in [0, {total_streams - 1}], got {stream_index}"
        )


def stream_offset(stream_index: int, total_streams: int) -> int:
    """Starting `fast_loop` for one of `total_streams` evenly spaced streams.

    The streams sit `(2^64 - 1) // total_streams` Weyl steps apart; truncating
    the product to 64 bits is the intended modular arithmetic.
    """

    _check_stream_args(stream_index, total_streams)
    cycles_per_stream = MASK64 // total_streams
    return (stream_index * cycles_per_stream * WEYL_INCREMENT) & MASK64


def seed_for_stream(seed: int | None, stream_index: int, total_streams: int) -> GeneratorState:
    """Build the warmed-up state of stream `stream_index` out of `total_streams`.

    All streams share `mix` and `loop_mix` derived from `seed`; only the Weyl
    component is spaced out, which keeps their sequences disjoint. A `None`
    seed draws a fresh per-stream seed from `entropy_seed`.
    """

    _check_stream_args(stream_index, total_streams)
    if seed is None:
        seed = entropy_seed((stream_index << 32) | total_streams)
    mix, loop_mix, fast_loop = expand(normalize_seed(seed), 3)
    if total_streams > 1:
        fast_loop = stream_offset(stream_index, total_streams)
    return warm_up(GeneratorState(mix, loop_mix, fast_loop))


def derive_seed(parent_seed: int, key: str, *, namespace: str = "biski64") -> int:
    """Derive a deterministic child seed from a parent seed and label."""

    payload = f"{namespace}:{normalize_seed(parent_seed)}:{key}".encode("utf-8")
    digest = hashlib.blake2b(payload, digest_size=8, person=b"streamfork").digest()
    return int.from_bytes(digest, byteorder="big", signed=False)


@dataclass(frozen=True)
class StreamFamily:
    """Immutable set of partitioned streams that can be forked by name."""

    seed: int
    total_streams: int = 1
    namespace: str = "biski64"

    def state(self, stream_index: int) -> GeneratorState:
        return seed_for_stream(self.seed, stream_index, self.total_streams)

    def states(self) -> list[GeneratorState]:
        return [self.state(i) for i in range(self.total_streams)]

    def bank(self) -> "StreamBank":
        return StreamBank.from_seed(self.seed, self.total_streams)

    def fork(self, key: str) -> "StreamFamily":
        if not key:
            raise ValueError("fork key must be non-empty")
        child_seed = derive_seed(self.seed, key, namespace=self.namespace)
        return StreamFamily(child_seed, self.total_streams, self.namespace)


def _rotl_array(values: np.ndarray, shift: int) -> np.ndarray:
    return (values << np.uint64(shift)) | (values >> np.uint64(64 - shift))


class StreamBank:
    """Lockstep engine holding one state per stream in uint64 arrays.

    Each `next_u64` call advances every stream once; column `i` of the
    outputs equals the scalar sequence of `seed_for_stream(seed, i, n)`.
    """

    def __init__(self, mix: np.ndarray, loop_mix: np.ndarray, fast_loop: np.ndarray):
        self.mix = np.array(mix, dtype=np.uint64, ndmin=1)
        self.loop_mix = np.array(loop_mix, dtype=np.uint64, ndmin=1)
        self.fast_loop = np.array(fast_loop, dtype=np.uint64, ndmin=1)
        if not (self.mix.shape == self.loop_mix.shape == self.fast_loop.shape) or self.mix.ndim != 1:
            raise ValueError("mix, loop_mix and fast_loop must be 1D arrays of equal length")

    @classmethod
    def from_seed(cls, seed: int, total_streams: int) -> "StreamBank":
        _check_stream_args(0, total_streams)
        mix, loop_mix, fast_loop = expand(normalize_seed(seed), 3)
        if total_streams > 1:
            cycles_per_stream = np.uint64(MASK64 // total_streams)
            indices = np.arange(total_streams, dtype=np.uint64)
            fast_loops = indices * cycles_per_stream * np.uint64(WEYL_INCREMENT)
        else:
            fast_loops = np.array([fast_loop], dtype=np.uint64)
        bank = cls(
            np.full(total_streams, mix, dtype=np.uint64),
            np.full(total_streams, loop_mix, dtype=np.uint64),
            fast_loops,
        )
        for _ in range(WARMUP_ROUNDS):
            bank.next_u64()
        return bank

    @classmethod
    def from_states(cls, states: list[GeneratorState]) -> "StreamBank":
        if not states:
            raise ValueError("states must be non-empty")
        return cls(
            np.array([s.mix for s in states], dtype=np.uint64),
            np.array([s.loop_mix for s in states], dtype=np.uint64),
            np.array([s.fast_loop for s in states], dtype=np.uint64),
        )

    def __len__(self) -> int:
        return int(self.mix.shape[0])

    def next_u64(self) -> np.ndarray:
        output = self.mix + self.loop_mix
        old_loop_mix = self.loop_mix

        self.loop_mix = self.fast_loop ^ self.mix
        self.mix = _rotl_array(self.mix, MIX_ROTATION) + _rotl_array(old_loop_mix, LOOP_MIX_ROTATION)
        self.fast_loop = self.fast_loop + np.uint64(WEYL_INCREMENT)

        return output

    def take(self, steps: int) -> np.ndarray:
        """Advance `steps` times; returns a `(steps, n_streams)` uint64 array."""

        check_non_negative("steps", steps)
        out = np.empty((steps, len(self)), dtype=np.uint64)
        for row in range(steps):
            out[row] = self.next_u64()
        return out

    def state(self, stream_index: int) -> GeneratorState:
        _check_stream_args(stream_index, len(self))
        return GeneratorState(
            int(self.mix[stream_index]),
            int(self.loop_mix[stream_index]),
            int(self.fast_loop[stream_index]),
        )
