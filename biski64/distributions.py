"""Derived distributions built on the raw 64-bit output."""

from __future__ import annotations

import math

import numpy as np

from .core import INT64_MAX, GeneratorState, check_non_negative

DOUBLE_UNIT = 1.0 / (1 << 53)


def random_double(state: GeneratorState) -> float:
    """Uniform double in [0, 1) from the high 53 bits of one output."""

    return (state.next_u64() >> 11) * DOUBLE_UNIT


def random_bounded_int(state: GeneratorState, max_inclusive: int) -> int:
    """Uniform integer in [0, max_inclusive] without modulo bias."""

    check_non_negative("max_inclusive", max_inclusive)
    if max_inclusive == 0:
        return 0

    n = max_inclusive + 1
    while True:
        bits = state.next_u64() & INT64_MAX
        val = bits % n
        # Draws from the final partial block of size < n would overflow int64.
        if bits - val + (n - 1) <= INT64_MAX:
            return val


def flip_coin(state: GeneratorState) -> bool:
    return bool(state.next_u64() & 1)


def random_gaussian(state: GeneratorState) -> float:
    """Standard normal deviate via the polar Box-Muller method.

    Only one of the pair is returned; the companion `v2 * multiplier` is
    discarded so the generator holds no extra state.
    """

    while True:
        v1 = 2.0 * random_double(state) - 1.0
        v2 = 2.0 * random_double(state) - 1.0
        s = v1 * v1 + v2 * v2
        if 0.0 < s < 1.0:
            break

    return v1 * math.sqrt(-2.0 * math.log(s) / s)


def random_hex_string(state: GeneratorState, length: int) -> str:
    """Lowercase hex string of exactly `length` characters."""

    check_non_negative("length", length)
    if length == 0:
        return ""

    chunks: list[str] = []
    produced = 0
    while produced < length:
        chunks.append(f"{state.next_u64():016x}")
        produced += 16
    return "".join(chunks)[:length]


def fill_bytes(state: GeneratorState, size: int) -> bytes:
    """Little-endian bytes of successive outputs, truncated to `size`."""

    check_non_negative("size", size)
    words = -(-size // 8)
    buf = bytearray()
    for _ in range(words):
        buf += state.next_u64().to_bytes(8, byteorder="little", signed=False)
    return bytes(buf[:size])


def random_u64_array(state: GeneratorState, size: int) -> np.ndarray:
    """Next `size` raw outputs as a uint64 array."""

    check_non_negative("size", size)
    out = np.empty(size, dtype=np.uint64)
    for i in range(size):
        out[i] = state.next_u64()
    return out


def random_double_array(state: GeneratorState, size: int) -> np.ndarray:
    """Next `size` uniform doubles in [0, 1), same values as `random_double`."""

    raw = random_u64_array(state, size)
    return (raw >> np.uint64(11)).astype(np.float64) * DOUBLE_UNIT
