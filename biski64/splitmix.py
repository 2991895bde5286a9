"""SplitMix64 seed expander."""

from __future__ import annotations

MASK64 = 0xFFFFFFFFFFFFFFFF
GOLDEN_GAMMA = 0x9E3779B97F4A7C15

_MUL_1 = 0xBF58476D1CE4E5B9
_MUL_2 = 0x94D049BB133111EB


def splitmix64_mix(z: int) -> int:
    """Finalize one 64-bit value without advancing any accumulator."""

    z &= MASK64
    z = ((z ^ (z >> 30)) * _MUL_1) & MASK64
    z = ((z ^ (z >> 27)) * _MUL_2) & MASK64
    return z ^ (z >> 31)


class SplitMix64:
    """
    Running SplitMix64 accumulator. Each draw adds the golden-ratio gamma
    and mixes, so successive draws from one seed are decorrelated.
    """

    __slots__ = ("state",)

    def __init__(self, seed: int):
        self.state = seed & MASK64

    def next_u64(self) -> int:
        self.state = (self.state + GOLDEN_GAMMA) & MASK64
        return splitmix64_mix(self.state)


def expand(seed: int, count: int) -> list[int]:
    """Return `count` successive SplitMix64 draws starting from `seed`."""

    seeder = SplitMix64(seed)
    return [seeder.next_u64() for _ in range(count)]
