"""Shared pieces of the banded extension aligners.

This covers the alignment flags, the extension result, CIGAR accumulation
and the traceback over a backtrack matrix.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Optional, Sequence

from .constants import CigarOp, encode_cigar

__all__ = [
    "NEG_INF",
    "KswFlag",
    "Extension",
    "push_cigar",
    "backtrack",
]

NEG_INF = -0x40000000


class KswFlag(enum.IntFlag):
    """Options accepted by the extension aligners."""

    SCORE_ONLY = 0x01
    RIGHT = 0x02
    GENERIC_SC = 0x04
    APPROX_MAX = 0x08
    APPROX_DROP = 0x10
    EXTZ_ONLY = 0x40
    REV_CIGAR = 0x80
    SPLICE_FOR = 0x100
    SPLICE_REV = 0x200
    SPLICE_FLANK = 0x400
    SPLICE_CMPLX = 0x800


@dataclass
class Extension:
    """Scores, coordinates and CIGAR produced by an extension alignment.

    ``max_q``/``max_t`` locate the best-scoring cell; ``mqe`` is the best
    score at the end of the query (reached at ``mqe_t``), ``mte`` the best at
    the end of the target (reached at ``mte_q``) and ``score`` the score
    reaching both ends, possibly :data:`NEG_INF`.
    """

    max: int = 0
    zdropped: bool = False
    max_q: int = -1
    max_t: int = -1
    mqe: int = NEG_INF
    mqe_t: int = -1
    mte: int = NEG_INF
    mte_q: int = -1
    score: int = NEG_INF
    reach_end: bool = False
    cigar: list[int] = field(default_factory=list)

    def reset(self) -> None:
        """Return every field to its state before an alignment."""
        self.max_q = self.max_t = self.mqe_t = self.mte_q = -1
        self.max = 0
        self.score = self.mqe = self.mte = NEG_INF
        self.cigar = []
        self.zdropped = False
        self.reach_end = False

    def apply_zdrop(
        self, is_rot: bool, h: int, a: int, b: int, zdrop: int, e: int
    ) -> bool:
        """Record a new maximum or test the Z-drop condition.

        With ``is_rot`` the cell is given as (anti-diagonal ``a``, target
        position ``b``); otherwise as (target ``a``, query ``b``).  Returns
        ``True`` and sets :attr:`zdropped` when the score fell too far below
        the maximum; a negative ``zdrop`` disables the test.
        """
        if is_rot:
            r, t = a, b
        else:
            r, t = a + b, a
        if h > self.max:
            self.max = h
            self.max_t = t
            self.max_q = r - t
        elif t >= self.max_t and r - t >= self.max_q:
            tl = t - self.max_t
            ql = (r - t) - self.max_q
            gap = abs(tl - ql)
            if zdrop >= 0 and self.max - h > zdrop + gap * e:
                self.zdropped = True
                return True
        return False


def push_cigar(cigar: list[int], op: int, length: int) -> None:
    """Append ``length`` of ``op`` to ``cigar``, merging with the last word."""
    if cigar and op == (cigar[-1] & 0xF):
        cigar[-1] += length << 4
    else:
        cigar.append(encode_cigar(op, length))


def backtrack(
    p: Sequence[int],
    off: Sequence[int],
    off_end: Optional[Sequence[int]],
    n_col: int,
    i0: int,
    j0: int,
    is_rot: bool = False,
    is_rev: bool = False,
    min_intron_len: int = 0,
) -> list[int]:
    """Trace back through a backtrack matrix and return the CIGAR words.

    Each byte of ``p`` holds, in bits 0-2, the state that gave the maximum
    (0 H, 1 E, 2 F, 3 long E, 4 long F) and in bits 3-6 whether E, F, long E
    and long F continue.  Row ``r`` of ``p`` starts at column ``off[r]``; a
    cell left of ``off`` forces an insertion and one right of ``off_end``
    forces a deletion.  ``is_rot`` selects anti-diagonal rows.  The CIGAR
    runs from the start of the alignment unless ``is_rev`` is set.
    """
    cigar: list[int] = []
    i, j, state = i0, j0, 0
    while i >= 0 and j >= 0:
        force_state = -1
        if is_rot:
            row, col = i + j, i
        else:
            row, col = i, j
        if col < off[row]:
            force_state = 2
        if off_end is not None and col > off_end[row]:
            force_state = 1
        tmp = p[row * n_col + col - off[row]] if force_state < 0 else 0
        if state == 0:
            state = tmp & 7
        elif not (tmp >> (state + 2) & 1):
            state = 0
        if state == 0:
            state = tmp & 7
        if force_state >= 0:
            state = force_state
        if state == 0:
            push_cigar(cigar, CigarOp.MATCH, 1)
            i -= 1
            j -= 1
        elif state == 1 or (state == 3 and min_intron_len <= 0):
            push_cigar(cigar, CigarOp.DEL, 1)
            i -= 1
        elif state == 3 and min_intron_len > 0:
            push_cigar(cigar, CigarOp.N_SKIP, 1)
            i -= 1
        else:
            push_cigar(cigar, CigarOp.INS, 1)
            j -= 1
    if i >= 0:
        op = (
            CigarOp.N_SKIP
            if min_intron_len > 0 and i >= min_intron_len
            else CigarOp.DEL
        )
        push_cigar(cigar, op, i + 1)
    if j >= 0:
        push_cigar(cigar, CigarOp.INS, j + 1)
    if not is_rev:
        cigar.reverse()
    return cigar