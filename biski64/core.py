"""Core biski64 state machine and single-stream seeding."""

from __future__ import annotations

from dataclasses import dataclass
import os
import threading
import time

from .splitmix import MASK64, expand

WEYL_INCREMENT = 0x9999999999999999
MIX_ROTATION = 16
LOOP_MIX_ROTATION = 40
WARMUP_ROUNDS = 16
INT64_MAX = (1 << 63) - 1


class InvalidArgumentError(ValueError):
    """Raised when a caller passes an out-of-range argument."""


def rotl64(value: int, shift: int) -> int:
    return ((value << shift) | (value >> (64 - shift))) & MASK64


def normalize_seed(value: int) -> int:
    """Reduce an integer seed into the unsigned 64-bit range."""

    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"seed must be an integer, got {type(value).__name__}")
    return value & MASK64


def check_non_negative(name: str, value: int, *, upper: int = INT64_MAX) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{name} must be an integer, got {type(value).__name__}")
    if value < 0:
        raise InvalidArgumentError(f"{name} must be non-negative, got {value}")
    if value > upper:
        raise InvalidArgumentError(f"{name} must be <= {upper}, got {value}")


def entropy_seed(salt: int = 0) -> int:
    """Fresh 64-bit seed from OS entropy, the clock and the calling thread."""

    raw = int.from_bytes(os.urandom(8), byteorder="little", signed=False)
    return (raw ^ time.perf_counter_ns() ^ threading.get_ident() ^ salt) & MASK64


@dataclass(eq=True)
class GeneratorState:
    """The three 64-bit words of one generator instance.

    `fast_loop` is a Weyl sequence stepped by an odd constant and alone
    provides the 2^64 minimum period. Instances are not shared between
    threads; give each worker its own state via `seed_for_stream`.
    """

    mix: int
    loop_mix: int
    fast_loop: int

    def next_u64(self) -> int:
        output = (self.mix + self.loop_mix) & MASK64
        old_loop_mix = self.loop_mix

        self.loop_mix = self.fast_loop ^ self.mix
        self.mix = (rotl64(self.mix, MIX_ROTATION) + rotl64(old_loop_mix, LOOP_MIX_ROTATION)) & MASK64
        self.fast_loop = (self.fast_loop + WEYL_INCREMENT) & MASK64

        return output

    def copy(self) -> "GeneratorState":
        return GeneratorState(self.mix, self.loop_mix, self.fast_loop)


def next_u64(state: GeneratorState) -> int:
    """Advance `state` once and return the next 64-bit output."""

    return state.next_u64()


def next_u32(state: GeneratorState) -> int:
    """Return the high 32 bits of the next 64-bit output."""

    return state.next_u64() >> 32


def warm_up(state: GeneratorState, rounds: int = WARMUP_ROUNDS) -> GeneratorState:
    for _ in range(rounds):
        state.next_u64()
    return state


def seed(value: int | None = None) -> GeneratorState:
    """Build a warmed-up single-stream state from one seed value.

    With no value the seed is drawn from `entropy_seed`, so two unseeded
    states differ.
    """

    if value is None:
        value = entropy_seed()
    mix, loop_mix, fast_loop = expand(normalize_seed(value), 3)
    return warm_up(GeneratorState(mix, loop_mix, fast_loop))
