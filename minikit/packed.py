"""Four-bit packed sequences and small numeric helpers."""

from __future__ import annotations

import math
import struct

__all__ = ["PackedSeq4", "roundup32", "fast_log2"]

_MASK32 = 0xFFFFFFFF


class PackedSeq4:
    """Fixed-length sequence of 4-bit codes packed eight per 32-bit word."""

    __slots__ = ("_words", "_length")

    def __init__(self, length: int) -> None:
        if length < 0:
            raise ValueError("length must not be negative")
        self._length = length
        self._words = [0] * ((length + 7) >> 3)

    def __len__(self) -> int:
        return self._length

    def _index(self, i: int) -> int:
        if i < 0:
            i += self._length
        if not 0 <= i < self._length:
            raise IndexError("packed sequence index out of range")
        return i

    def __getitem__(self, i: int) -> int:
        i = self._index(i)
        return self._words[i >> 3] >> ((i & 7) << 2) & 0xF

    def __setitem__(self, i: int, c: int) -> None:
        if not 0 <= c <= 0xF:
            raise ValueError(f"code {c} does not fit in four bits")
        i = self._index(i)
        shift = (i & 7) << 2
        word = self._words[i >> 3] & ~(0xF << shift) & _MASK32
        self._words[i >> 3] = word | c << shift

    @property
    def words(self) -> tuple[int, ...]:
        """The packed 32-bit words, lowest position in the lowest bits."""
        return tuple(self._words)


def roundup32(x: int) -> int:
    """Round a 32-bit unsigned value up to the next power of two.

    Zero, and values above 2**31, wrap around to zero.
    """
    x = (x - 1) & _MASK32
    for shift in (1, 2, 4, 8, 16):
        x |= x >> shift
    return (x + 1) & _MASK32


def fast_log2(x: float) -> float:
    """Approximate ``log2(x)`` from the bits of a single-precision float."""
    if not x > 0 or math.isinf(x):
        raise ValueError("fast_log2 needs a finite positive value")
    (bits,) = struct.unpack("<I", struct.pack("<f", x))
    log_2 = float(((bits >> 23) & 255) - 128)
    bits &= ~(255 << 23) & _MASK32
    bits += 127 << 23
    (f,) = struct.unpack("<f", struct.pack("<I", bits & _MASK32))
    log_2 += (-0.34484843 * f + 2.02466578) * f - 0.67487759
    return log_2