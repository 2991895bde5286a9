"""Derived raster previews from generator output."""

from __future__ import annotations

import numpy as np


def output_bits(outputs: np.ndarray) -> np.ndarray:
    """Unpack uint64 outputs into a flat 0/1 array, most significant bit first."""

    outputs = np.asarray(outputs, dtype=np.uint64)
    if outputs.ndim != 1:
        raise ValueError("outputs must be a 1D array")
    return np.unpackbits(outputs.astype(">u8").view(np.uint8))


def bits_bitmap_u8(outputs: np.ndarray, *, width_bits: int = 256, max_rows: int = 1024) -> np.ndarray:
    """Lay output bits out row-major as an 8-bit black/white bitmap."""

    if width_bits <= 0:
        raise ValueError("width_bits must be positive")
    if max_rows <= 0:
        raise ValueError("max_rows must be positive")

    bits = output_bits(outputs)
    rows = min(bits.shape[0] // width_bits, max_rows)
    if rows == 0:
        raise ValueError(f"need at least {width_bits} bits for one bitmap row, got {bits.shape[0]}")
    grid = bits[: rows * width_bits].reshape(rows, width_bits)
    return np.where(grid == 1, 255, 0).astype(np.uint8)
