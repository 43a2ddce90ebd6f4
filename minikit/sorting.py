"""Heap helpers, quickselect and in-place radix sort."""

from __future__ import annotations

import operator
from typing import Any, Callable, MutableSequence, Optional

__all__ = ["heap_down", "heap_make", "ksmall", "radix_sort"]

_RS_MIN_SIZE = 64
_RS_MAX_BITS = 8

LessThan = Callable[[Any, Any], bool]


def heap_down(
    values: MutableSequence, i: int, n: int, lt: LessThan = operator.lt
) -> None:
    """Sift ``values[i]`` down a max-heap occupying ``values[:n]``."""
    tmp = values[i]
    k = i
    while (k := 2 * k + 1) < n:
        if k != n - 1 and lt(values[k], values[k + 1]):
            k += 1
        if lt(values[k], tmp):
            break
        values[i] = values[k]
        i = k
    values[i] = tmp


def heap_make(values: MutableSequence, lt: LessThan = operator.lt) -> None:
    """Rearrange ``values`` in place into a max-heap under ``lt``."""
    n = len(values)
    for i in range(n // 2 - 1, -1, -1):
        heap_down(values, i, n, lt)


def ksmall(values: MutableSequence, k: int, lt: LessThan = operator.lt) -> Any:
    """Return the ``k``-th smallest element (0-based), partially reordering
    ``values`` in place."""
    n = len(values)
    if not 0 <= k < n:
        raise IndexError(f"k={k} out of range for {n} values")
    a = values
    low, high = 0, n - 1
    while True:
        if high <= low:
            return a[k]
        if high == low + 1:
            if lt(a[high], a[low]):
                a[low], a[high] = a[high], a[low]
            return a[k]
        mid = low + (high - low) // 2
        if lt(a[high], a[mid]):
            a[mid], a[high] = a[high], a[mid]
        if lt(a[high], a[low]):
            a[low], a[high] = a[high], a[low]
        if lt(a[low], a[mid]):
            a[mid], a[low] = a[low], a[mid]
        a[mid], a[low + 1] = a[low + 1], a[mid]
        ll, hh = low + 1, high
        while True:
            ll += 1
            while lt(a[ll], a[low]):
                ll += 1
            hh -= 1
            while lt(a[low], a[hh]):
                hh -= 1
            if hh < ll:
                break
            a[ll], a[hh] = a[hh], a[ll]
        a[low], a[hh] = a[hh], a[low]
        if hh <= k:
            low = ll
        if hh >= k:
            high = hh - 1


def _insertion_sort(a: list, beg: int, end: int) -> None:
    for i in range(beg + 1, end):
        if a[i][0] < a[i - 1][0]:
            tmp = a[i]
            j = i
            while j > beg and tmp[0] < a[j - 1][0]:
                a[j] = a[j - 1]
                j -= 1
            a[j] = tmp


def _radix_pass(a: list, beg: int, end: int, n_bits: int, shift: int) -> None:
    size = 1 << n_bits
    mask = size - 1
    starts = [beg] * size
    ends = [beg] * size
    for item in a[beg:end]:
        ends[(item[0] >> shift) & mask] += 1
    for k in range(1, size):
        ends[k] += ends[k - 1] - beg
        starts[k] = ends[k - 1]

    k = 0
    while k != size:
        if starts[k] == ends[k]:
            k += 1
            continue
        dest = (a[starts[k]][0] >> shift) & mask
        if dest != k:
            tmp = a[starts[k]]
            while True:
                tmp, a[starts[dest]] = a[starts[dest]], tmp
                starts[dest] += 1
                dest = (tmp[0] >> shift) & mask
                if dest == k:
                    break
            a[starts[k]] = tmp
        starts[k] += 1

    starts[0] = beg
    for k in range(1, size):
        starts[k] = ends[k - 1]
    if shift:
        shift = shift - n_bits if shift > n_bits else 0
        for b, e in zip(starts, ends):
            if e - b > _RS_MIN_SIZE:
                _radix_pass(a, b, e, n_bits, shift)
            elif e - b > 1:
                _insertion_sort(a, b, e)


def radix_sort(
    values: MutableSequence,
    key: Optional[Callable[[Any], int]] = None,
    key_bytes: int = 8,
) -> None:
    """Sort ``values`` in place by an unsigned integer key.

    Keys must lie in ``[0, 256 ** key_bytes)``.  Short inputs are sorted by
    stable insertion; longer ones by most-significant-byte radix passes,
    which do not preserve the order of equal keys.
    """
    if key_bytes < 1:
        raise ValueError("key_bytes must be at least 1")
    key_of = key if key is not None else (lambda v: v)
    limit = 1 << (8 * key_bytes)
    items = []
    for value in values:
        k = key_of(value)
        if not 0 <= k < limit:
            raise ValueError(f"key {k!r} outside [0, {limit})")
        items.append((k, value))
    if len(items) <= _RS_MIN_SIZE:
        _insertion_sort(items, 0, len(items))
    else:
        _radix_pass(items, 0, len(items), _RS_MAX_BITS, (key_bytes - 1) * _RS_MAX_BITS)
    values[:] = [value for _, value in items]