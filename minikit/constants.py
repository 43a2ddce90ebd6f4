"""Mapping and indexing flags, CIGAR operators and CIGAR encoding."""

from __future__ import annotations

import enum
from typing import Iterable

__all__ = [
    "VERSION",
    "IDX_MAGIC",
    "MAX_SEG",
    "CIGAR_STR",
    "MapFlag",
    "IndexFlag",
    "CigarOp",
    "encode_cigar",
    "decode_cigar",
    "cigar_to_string",
]

VERSION = "2.26-r1175"
IDX_MAGIC = b"MMI\x02"
MAX_SEG = 255
CIGAR_STR = "MIDNSHP=XB"

_MAX_CIGAR_LEN = (1 << 28) - 1


class MapFlag(enum.IntFlag):
    """Bit flags controlling mapping and output."""

    NO_DIAG = 0x001
    NO_DUAL = 0x002
    CIGAR = 0x004
    OUT_SAM = 0x008
    NO_QUAL = 0x010
    OUT_CG = 0x020
    OUT_CS = 0x040
    SPLICE = 0x080
    SPLICE_FOR = 0x100
    SPLICE_REV = 0x200
    NO_LJOIN = 0x400
    OUT_CS_LONG = 0x800
    SR = 0x1000
    FRAG_MODE = 0x2000
    NO_PRINT_2ND = 0x4000
    TWO_IO_THREADS = 0x8000
    LONG_CIGAR = 0x10000
    INDEPEND_SEG = 0x20000
    SPLICE_FLANK = 0x40000
    SOFTCLIP = 0x80000
    FOR_ONLY = 0x100000
    REV_ONLY = 0x200000
    HEAP_SORT = 0x400000
    ALL_CHAINS = 0x800000
    OUT_MD = 0x1000000
    COPY_COMMENT = 0x2000000
    EQX = 0x4000000
    PAF_NO_HIT = 0x8000000
    NO_END_FLT = 0x10000000
    HARD_MLEVEL = 0x20000000
    SAM_HIT_ONLY = 0x40000000
    RMQ = 0x80000000
    QSTRAND = 0x100000000
    NO_INV = 0x200000000
    NO_HASH_NAME = 0x400000000
    SPLICE_OLD = 0x800000000
    SECONDARY_SEQ = 0x1000000000


class IndexFlag(enum.IntFlag):
    """Bit flags describing how an index was built."""

    HPC = 0x1
    NO_SEQ = 0x2
    NO_NAME = 0x4


class CigarOp(enum.IntEnum):
    """CIGAR operators in their BAM numbering."""

    MATCH = 0
    INS = 1
    DEL = 2
    N_SKIP = 3
    SOFTCLIP = 4
    HARDCLIP = 5
    PADDING = 6
    EQ_MATCH = 7
    X_MISMATCH = 8

    @property
    def char(self) -> str:
        """The one-letter SAM symbol of this operator."""
        return CIGAR_STR[self.value]


def encode_cigar(op: int, length: int) -> int:
    """Pack an operator and a length into one 32-bit CIGAR word."""
    op = CigarOp(op)
    if not 0 <= length <= _MAX_CIGAR_LEN:
        raise ValueError(f"CIGAR length {length} outside [0, {_MAX_CIGAR_LEN}]")
    return length << 4 | op.value


def decode_cigar(value: int) -> tuple[CigarOp, int]:
    """Split a 32-bit CIGAR word into ``(operator, length)``."""
    if not 0 <= value <= 0xFFFFFFFF:
        raise ValueError(f"CIGAR word {value} is not a 32-bit unsigned value")
    try:
        op = CigarOp(value & 0xF)
    except ValueError:
        raise ValueError(f"unknown CIGAR operator {value & 0xF}") from None
    return op, value >> 4


def cigar_to_string(cigar: Iterable[int]) -> str:
    """Render a sequence of CIGAR words in SAM text form."""
    parts = []
    for word in cigar:
        op, length = decode_cigar(word)
        parts.append(f"{length}{op.char}")
    return "".join(parts)