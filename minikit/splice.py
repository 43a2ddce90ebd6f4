"""Spliced extension alignment with a long-gap state for introns.

The dynamic programme runs over anti-diagonals of the target/query matrix
and keeps the score differences between neighbouring cells as signed
8-bit values.  Deletions longer than a threshold are scored as a flat
intron cost, optionally adjusted by donor/acceptor splice signals and by
annotated junctions.
"""

from __future__ import annotations

from typing import Optional, Sequence

from .ksw import NEG_INF, Extension, KswFlag, backtrack

__all__ = ["splice_align"]

# Splice-signal rules keyed by (reverse CIGAR, forward strand).  Each maps
# the two bases next to the junction to either a penalty class (1 or 2) or
# the set of flanking bases that make the site fully canonical.
_DONOR_RULES = {
    (False, True): {(2, 3): frozenset({0, 2}), (2, 1): 1, (0, 3): 2},
    (False, False): {(1, 3): frozenset({0, 2}), (2, 3): 2},
    (True, True): {(2, 0): frozenset({1, 3}), (1, 0): 2},
    (True, False): {(1, 0): frozenset({1, 3}), (1, 2): 1, (3, 0): 2},
}
_ACCEPTOR_RULES = {
    (False, True): {(0, 2): frozenset({1, 3}), (0, 1): 2},
    (False, False): {(0, 1): frozenset({1, 3}), (2, 1): 1, (0, 3): 2},
    (True, True): {(3, 2): frozenset({0, 2}), (1, 2): 1, (3, 0): 2},
    (True, False): {(3, 1): frozenset({0, 2}), (3, 2): 2},
}
_COMPLEX_PENALTIES = (8, 15, 21, 30)


def _i8(value: int) -> int:
    """Wrap an integer to the signed 8-bit range."""
    return ((value + 128) & 0xFF) - 128


def _classify(rule, flank: int) -> int:
    if rule is None:
        return 3
    if isinstance(rule, frozenset):
        return -1 if flank in rule else 0
    return rule


def _splice_signals(
    target: Sequence[int], flag: int, noncan: int
) -> tuple[list[int], list[int]]:
    tlen = len(target)
    if not flag & (KswFlag.SPLICE_FOR | KswFlag.SPLICE_REV):
        return [0] * tlen, [0] * tlen
    if flag & KswFlag.SPLICE_CMPLX:
        sp = [int(v / 3.0 + 0.499) for v in _COMPLEX_PENALTIES]
    else:
        first = int(noncan / 2) if flag & KswFlag.SPLICE_FLANK else 0
        sp = [first, noncan, noncan, noncan]
    donor = [_i8(-sp[3])] * tlen
    acceptor = [_i8(-sp[3])] * tlen
    strand_key = (bool(flag & KswFlag.REV_CIGAR), bool(flag & KswFlag.SPLICE_FOR))
    donor_rules = _DONOR_RULES[strand_key]
    acceptor_rules = _ACCEPTOR_RULES[strand_key]
    for t in range(tlen - 4):
        z = _classify(donor_rules.get((target[t + 1], target[t + 2])), target[t + 3])
        donor[t] = 0 if z < 0 else _i8(-sp[z])
    for t in range(2, tlen):
        z = _classify(acceptor_rules.get((target[t - 1], target[t])), target[t - 2])
        acceptor[t] = 0 if z < 0 else _i8(-sp[z])
    return donor, acceptor


def _apply_junctions(
    donor: list[int],
    acceptor: list[int],
    junc: Sequence[int],
    flag: int,
    junc_bonus: int,
) -> None:
    if flag & KswFlag.SPLICE_FOR:
        strand = 0
    elif flag & KswFlag.SPLICE_REV:
        strand = 1
    else:
        return
    if flag & KswFlag.REV_CIGAR:
        donor_bit, acceptor_bit = (2, 4)[strand], (1, 8)[strand]
    else:
        donor_bit, acceptor_bit = (1, 8)[strand], (2, 4)[strand]
    tlen = len(donor)
    for t in range(tlen - 1):
        if junc[t + 1] & donor_bit:
            donor[t] = _i8(donor[t] + junc_bonus)
    for t in range(tlen):
        if junc[t] & acceptor_bit:
            acceptor[t] = _i8(acceptor[t] + junc_bonus)


def _exact_row_max(
    h: list[int], u: list[int], v: list[int], st0: int, en0: int
) -> tuple[int, int]:
    """Advance the 32-bit scores of one anti-diagonal and find its maximum.

    Ties are resolved as in a four-lane scan: each lane keeps its first
    maximum and lanes are merged in lane order.
    """
    h[en0] = h[en0 - 1] + u[en0] if en0 > 0 else h[en0] + v[en0]
    max_h, max_t = h[en0], en0
    en1 = st0 + (en0 - st0) // 4 * 4
    lane_h = [max_h] * 4
    lane_t = [max_t] * 4
    for t in range(st0, en1):
        h[t] += v[t]
        lane = (t - st0) & 3
        if h[t] > lane_h[lane]:
            lane_h[lane] = h[t]
            lane_t[lane] = t - lane
    for lane in range(4):
        if max_h < lane_h[lane]:
            max_h, max_t = lane_h[lane], lane_t[lane] + lane
    for t in range(en1, en0):
        h[t] += v[t]
        if h[t] > max_h:
            max_h, max_t = h[t], t
    return max_h, max_t


def splice_align(
    query: Sequence[int],
    target: Sequence[int],
    m: int,
    mat: Sequence[int],
    q: int,
    e: int,
    q2: int,
    noncan: int = 0,
    zdrop: int = -1,
    junc_bonus: int = 0,
    flag: int = 0,
    junc: Optional[Sequence[int]] = None,
) -> Extension:
    """Align ``query`` to ``target`` allowing introns; return the extension.

    Residues are codes in ``[0, m)`` with ``m - 1`` the wildcard; ``mat``
    is the ``m * m`` score matrix (only its match, mismatch and wildcard
    entries are used unless :attr:`KswFlag.GENERIC_SC` is set).  A gap of
    length ``l`` costs ``q + l * e``; a deletion can instead cost the flat
    ``q2`` and is then reported as an intron.  ``junc`` holds per-target
    junction annotation bits that earn ``junc_bonus``.
    """
    flag = int(flag)
    q, e, q2 = _i8(q), _i8(e), _i8(q2)
    noncan, junc_bonus = _i8(noncan), _i8(junc_bonus)
    ez = Extension()
    qlen, tlen = len(query), len(target)
    if m <= 1 or qlen <= 0 or tlen <= 0 or q2 <= q + e:
        return ez
    if flag & KswFlag.SPLICE_FOR and flag & KswFlag.SPLICE_REV:
        raise ValueError("SPLICE_FOR and SPLICE_REV cannot both be set")
    if len(mat) < m * m:
        raise ValueError(f"score matrix needs {m * m} entries, got {len(mat)}")
    if junc is not None and len(junc) < tlen:
        raise ValueError("junction annotation is shorter than the target")

    min_sc = min(mat[: m * m])
    if -min_sc > 2 * (q + e):
        return ez

    long_thres = (q2 - q) // e - 1
    if q2 > q + e + long_thres * e:
        long_thres += 1
    long_diff = long_thres * e - (q2 - q)

    with_cigar = not flag & KswFlag.SCORE_ONLY
    approx_max = bool(flag & KswFlag.APPROX_MAX)
    right = bool(flag & KswFlag.RIGHT)
    generic = bool(flag & KswFlag.GENERIC_SC)

    q8, q28, qe8 = _i8(q), _i8(q2), _i8(q + e)
    neg_qe, neg_q2 = _i8(-q - e), _i8(-q2)
    sc_mch, sc_mis = _i8(mat[0]), _i8(mat[1])
    sc_n = _i8(-e) if mat[m * m - 1] == 0 else _i8(mat[m * m - 1])
    wildcard = m - 1

    def edge(r: int) -> int:
        if r == 0:
            return neg_qe
        if r < long_thres:
            return _i8(-e)
        if r == long_thres:
            return _i8(long_diff)
        return 0

    u = [neg_qe] * tlen
    v = [neg_qe] * tlen
    x = [neg_qe] * tlen
    y = [neg_qe] * tlen
    x2 = [neg_q2] * tlen
    donor, acceptor = _splice_signals(target, flag, noncan)
    if junc is not None:
        _apply_junctions(donor, acceptor, junc, flag, junc_bonus)

    rows = qlen + tlen - 1
    n_col = min(qlen, tlen)
    if with_cigar:
        p = bytearray(rows * n_col)
        off = [0] * rows
        off_end = [0] * rows
    h = None if approx_max else [NEG_INF] * tlen
    h0 = 0
    last_h0_t = 0

    for r in range(rows):
        st0 = max(0, r - qlen + 1)
        en0 = min(tlen - 1, r)
        if st0 > 0:
            px, pv, px2 = x[st0 - 1], v[st0 - 1], x2[st0 - 1]
        else:
            px, pv, px2 = neg_qe, edge(r), neg_q2
        if en0 == r:
            y[r] = neg_qe
            u[r] = edge(r)
        base = r * n_col - st0
        for t in range(st0, en0 + 1):
            xt1, vt1, x2t1 = px, pv, px2
            px, pv, px2 = x[t], v[t], x2[t]
            ut = u[t]
            tb, qb = target[t], query[r - t]
            if generic:
                z = _i8(mat[tb * m + qb])
            elif tb == wildcard or qb == wildcard:
                z = sc_n
            else:
                z = sc_mch if tb == qb else sc_mis
            a = _i8(xt1 + vt1)
            b = _i8(y[t] + ut)
            a2 = _i8(x2t1 + vt1)
            a2a = _i8(a2 + acceptor[t])
            d = 0
            if not with_cigar:
                z = max(z, a, b, a2a)
            elif right:
                d = 0 if z > a else 1
                z = max(z, a)
                if not z > b:
                    d = 2
                z = max(z, b)
                if not z > a2a:
                    d = 3
                z = max(z, a2a)
            else:
                d = 1 if a > z else 0
                z = max(z, a)
                if b > z:
                    d = 2
                z = max(z, b)
                if a2a > z:
                    d = 3
                z = max(z, a2a)
            u[t] = _i8(z - vt1)
            v[t] = _i8(z - ut)
            zq = _i8(z - q8)
            a = _i8(a - zq)
            b = _i8(b - zq)
            a2 = _i8(a2 - _i8(z - q28))
            x[t] = _i8(max(a, 0) - qe8)
            y[t] = _i8(max(b, 0) - qe8)
            dn = donor[t]
            x2[t] = _i8(max(a2, dn) - q28)
            if with_cigar:
                if right:
                    d |= (0x08 if a >= 0 else 0) | (0x10 if b >= 0 else 0)
                    d |= 0x20 if a2 >= dn else 0
                else:
                    d |= (0x08 if a > 0 else 0) | (0x10 if b > 0 else 0)
                    d |= 0x20 if a2 > dn else 0
                p[base + t] = d
        if with_cigar:
            off[r], off_end[r] = st0, en0

        if h is not None:
            if r > 0:
                max_h, max_t = _exact_row_max(h, u, v, st0, en0)
            else:
                h[0] = v[0] - qe8
                max_h, max_t = h[0], 0
            if en0 == tlen - 1 and h[en0] > ez.mte:
                ez.mte, ez.mte_q = h[en0], r - en0
            if r - st0 == qlen - 1 and h[st0] > ez.mqe:
                ez.mqe, ez.mqe_t = h[st0], st0
            if ez.apply_zdrop(True, max_h, r, max_t, zdrop, 0):
                break
            if r == rows - 1 and en0 == tlen - 1:
                ez.score = h[tlen - 1]
        else:
            if r > 0:
                here = st0 <= last_h0_t <= en0
                if here and st0 <= last_h0_t + 1 <= en0:
                    d0, d1 = v[last_h0_t], u[last_h0_t + 1]
                    if d0 > d1:
                        h0 += d0
                    else:
                        h0 += d1
                        last_h0_t += 1
                elif here:
                    h0 += v[last_h0_t]
                else:
                    last_h0_t += 1
                    h0 += u[last_h0_t]
            else:
                h0, last_h0_t = v[0] - qe8, 0
            if flag & KswFlag.APPROX_DROP and ez.apply_zdrop(
                True, h0, r, last_h0_t, zdrop, 0
            ):
                break
            if r == rows - 1 and en0 == tlen - 1:
                ez.score = h0

    if with_cigar:
        rev_cigar = bool(flag & KswFlag.REV_CIGAR)
        if not ez.zdropped and not flag & KswFlag.EXTZ_ONLY:
            ez.cigar = backtrack(
                p, off, off_end, n_col, tlen - 1, qlen - 1,
                is_rot=True, is_rev=rev_cigar, min_intron_len=long_thres,
            )
        elif ez.max_t >= 0 and ez.max_q >= 0:
            ez.cigar = backtrack(
                p, off, off_end, n_col, ez.max_t, ez.max_q,
                is_rot=True, is_rev=rev_cigar, min_intron_len=long_thres,
            )
    return ez