"""Seed parsing, canonicalization, and hashing utilities."""

from __future__ import annotations

from dataclasses import dataclass
import hashlib
import re

from .splitmix import MASK64

_DECIMAL_RE = re.compile(r"^[0-9]+$")
_HEX_RE = re.compile(r"^0[xX][0-9a-fA-F]+$")
_PHRASE_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9 _-]*$")
_SEPARATOR_RE = re.compile(r"[\s_-]+")

_EXAMPLE_SEEDS = ["12345", "0x9e3779b97f4a7c15", "misty-forge"]


class SeedParseError(ValueError):
    """Raised when seed text cannot be turned into a 64-bit seed."""


@dataclass(frozen=True)
class ParsedSeed:
    """Validated seed text and its 64-bit value."""

    original: str
    kind: str
    canonical: str
    value: int


def seed_hash64(phrase: str) -> int:
    """Hash a canonical phrase to a deterministic unsigned 64-bit integer."""

    digest = hashlib.blake2b(
        phrase.encode("ascii", errors="strict"),
        digest_size=8,
        person=b"biski64seed",
    ).digest()
    return int.from_bytes(digest, byteorder="big", signed=False)


def parse_seed(seed_text: str) -> ParsedSeed:
    """Parse decimal, `0x` hex, or phrase seed text into a `ParsedSeed`."""

    if seed_text is None:
        raise SeedParseError(_error_message("Seed is required."))

    raw = seed_text.strip()
    if not raw:
        raise SeedParseError(_error_message("Seed cannot be empty."))

    if _DECIMAL_RE.fullmatch(raw):
        return _numeric_seed(raw, "decimal", int(raw, 10))

    if _HEX_RE.fullmatch(raw):
        return _numeric_seed(raw, "hex", int(raw[2:], 16))

    if not _PHRASE_RE.fullmatch(raw):
        raise SeedParseError(
            _error_message("Phrase seeds may contain only letters, digits, spaces, '-' and '_'.")
        )

    canonical = _SEPARATOR_RE.sub("-", raw.lower()).strip("-")
    return ParsedSeed(raw, "phrase", canonical, seed_hash64(canonical))


def _numeric_seed(raw: str, kind: str, value: int) -> ParsedSeed:
    if value > MASK64:
        raise SeedParseError(_error_message(f"Numeric seed {raw} does not fit in 64 bits."))
    return ParsedSeed(raw, kind, str(value), value)


def _error_message(reason: str) -> str:
    examples = ", ".join(_EXAMPLE_SEEDS)
    return f"{reason} Examples: {examples}"
