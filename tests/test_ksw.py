import pytest
from hypothesis import given
from hypothesis import strategies as st

from minikit.constants import CigarOp, decode_cigar, encode_cigar
from minikit.ksw import NEG_INF, Extension, KswFlag, backtrack, push_cigar


def test_flag_values_match_format():
    assert KswFlag(0x01) is KswFlag.SCORE_ONLY
    assert KswFlag(0x80) is KswFlag.REV_CIGAR
    assert KswFlag(0x300) == KswFlag.SPLICE_FOR | KswFlag.SPLICE_REV


def test_push_cigar_merges_same_operator():
    cigar = []
    push_cigar(cigar, CigarOp.MATCH, 3)
    push_cigar(cigar, CigarOp.MATCH, 2)
    assert cigar == [encode_cigar(CigarOp.MATCH, 5)]


def test_push_cigar_appends_new_operator():
    cigar = []
    push_cigar(cigar, CigarOp.MATCH, 3)
    push_cigar(cigar, CigarOp.INS, 1)
    assert [decode_cigar(w) for w in cigar] == [(CigarOp.MATCH, 3), (CigarOp.INS, 1)]


@given(st.lists(st.tuples(st.integers(0, 3), st.integers(1, 50)), max_size=40))
def test_push_cigar_invariants(ops):
    cigar = []
    for op, length in ops:
        push_cigar(cigar, op, length)
    decoded = [decode_cigar(w) for w in cigar]
    assert sum(n for _, n in decoded) == sum(n for _, n in ops)
    assert all(a[0] != b[0] for a, b in zip(decoded, decoded[1:]))


def test_reset_restores_defaults():
    ez = Extension(max=9, max_q=3, max_t=4, score=7, zdropped=True, cigar=[16])
    ez.reset()
    assert ez.score == NEG_INF and ez.mqe == NEG_INF and ez.mte == NEG_INF
    assert (ez.max, ez.max_q, ez.max_t, ez.mqe_t, ez.mte_q) == (0, -1, -1, -1, -1)
    assert ez.cigar == [] and not ez.zdropped and not ez.reach_end


def test_apply_zdrop_records_max():
    ez = Extension()
    assert ez.apply_zdrop(False, 10, 2, 3, 5, 1) is False
    assert (ez.max, ez.max_t, ez.max_q) == (10, 2, 3)


def test_apply_zdrop_rotated_coordinates():
    ez = Extension()
    ez.apply_zdrop(True, 10, 5, 2, 5, 1)
    assert (ez.max, ez.max_t, ez.max_q) == (10, 2, 3)


def test_apply_zdrop_triggers():
    ez = Extension()
    ez.apply_zdrop(False, 10, 0, 0, 5, 1)
    assert ez.apply_zdrop(False, 2, 1, 1, 5, 1) is True
    assert ez.zdropped is True


def test_apply_zdrop_negative_disables():
    ez = Extension()
    ez.apply_zdrop(False, 10, 0, 0, -1, 1)
    assert ez.apply_zdrop(False, -100, 1, 1, -1, 1) is False
    assert ez.zdropped is False


def test_apply_zdrop_within_threshold():
    ez = Extension()
    ez.apply_zdrop(False, 10, 0, 0, 5, 1)
    assert ez.apply_zdrop(False, 6, 1, 1, 5, 1) is False
    assert ez.max == 10


def test_backtrack_all_matches():
    p = [0] * 9
    cigar = backtrack(p, [0, 0, 0], None, 3, 2, 2)
    assert cigar == [encode_cigar(CigarOp.MATCH, 3)]


def test_backtrack_leading_deletion_only():
    cigar = backtrack([], [0, 0, 0], None, 3, 2, -1)
    assert cigar == [encode_cigar(CigarOp.DEL, 3)]


def test_backtrack_leading_intron():
    cigar = backtrack([], [0, 0, 0], None, 3, 2, -1, min_intron_len=2)
    assert cigar == [encode_cigar(CigarOp.N_SKIP, 3)]


def test_backtrack_mixed_and_reversed():
    p = [0] * 9
    p[2 * 3 + 2] = 1
    fwd = backtrack(p, [0, 0, 0], None, 3, 2, 2)
    rev = backtrack(p, [0, 0, 0], None, 3, 2, 2, is_rev=True)
    assert fwd == [
        encode_cigar(CigarOp.INS, 1),
        encode_cigar(CigarOp.MATCH, 2),
        encode_cigar(CigarOp.DEL, 1),
    ]
    assert rev == list(reversed(fwd))


def test_backtrack_forced_insertion_left_of_band():
    p = [0] * 9
    cigar = backtrack(p, [0, 0, 5], None, 3, 2, 2)
    ops = [decode_cigar(w) for w in cigar]
    assert ops[-1] == (CigarOp.INS, 3)


@given(st.integers(0, 6), st.integers(0, 6))
def test_backtrack_consumes_both_sequences(i0, j0):
    n_col = j0 + 1
    p = [0] * ((i0 + 1) * n_col)
    cigar = backtrack(p, [0] * (i0 + 1), None, n_col, i0, j0)
    decoded = [decode_cigar(w) for w in cigar]
    target = sum(n for op, n in decoded if op in (CigarOp.MATCH, CigarOp.DEL))
    query = sum(n for op, n in decoded if op in (CigarOp.MATCH, CigarOp.INS))
    assert (target, query) == (i0 + 1, j0 + 1)


def test_push_cigar_rejects_negative_length():
    with pytest.raises(ValueError):
        push_cigar([], CigarOp.MATCH, -1)