"""biski64 pseudo-random number generator."""

from .core import GeneratorState, InvalidArgumentError, next_u32, next_u64, seed
from .distributions import (
    fill_bytes,
    flip_coin,
    random_bounded_int,
    random_double,
    random_double_array,
    random_gaussian,
    random_hex_string,
    random_u64_array,
)
from .streams import StreamBank, StreamFamily, seed_for_stream

__all__ = [
    "GeneratorState",
    "InvalidArgumentError",
    "StreamBank",
    "StreamFamily",
    "fill_bytes",
    "flip_coin",
    "next_u32",
    "next_u64",
    "random_bounded_int",
    "random_double",
    "random_double_array",
    "random_gaussian",
    "random_hex_string",
    "random_u64_array",
    "seed",
    "seed_for_stream",
]
