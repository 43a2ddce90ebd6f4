# minikit

Pure-Python building blocks for sequence alignment tools. It has no
dependencies outside the standard library.

## Modules

- `minikit.fastx` – streaming FASTA/FASTQ reader over binary or text
  streams. `read_fastx(stream)` and `FastxReader` (iterable, or call
  `read()` until it returns `None`) produce frozen `FastxRecord` objects with
  `name`, `comment`, `seq` and `qual` (`None` for FASTA; `is_fastq` tells
  which). FASTA and FASTQ records may be mixed, multi-line sequences and
  qualities are joined, and `\r\n` line endings are accepted. A FASTQ record
  whose quality string is missing or of a different length from the
  sequence raises `TruncatedQualityError` (a `ValueError`).
- `minikit.rmqtree` – `RmqTree(key=None, min_key=None)`, an AVL tree that
  keeps subtree sizes and subtree minima. It offers `insert` and `find`
  (both also return the number of items not above the query), `interval`
  (nearest items below and above), `rmq(lo, hi)` (the item with the smallest
  `min_key` among keys in the closed range), `erase`, `erase_first`,
  `len()`, in-order and reversed iteration, and `iter_from`.
- `minikit.sorting` – `heap_make` and `heap_down` for max-heaps,
  `ksmall(values, k)` for the k-th smallest element (reorders in place), and
  `radix_sort(values, key=None, key_bytes=8)` for unsigned integer keys.
  All comparisons take an optional `lt` function.
- `minikit.constants` – `MapFlag`, `IndexFlag` and `CigarOp`, the constants
  `VERSION`, `IDX_MAGIC`, `MAX_SEG` and `CIGAR_STR`, and `encode_cigar`,
  `decode_cigar` and `cigar_to_string` for 32-bit CIGAR words.
- `minikit.packed` – `PackedSeq4`, a fixed-length array of 4-bit codes
  stored eight to a 32-bit word (see its `words`), plus `roundup32` (next
  power of two in 32 bits) and `fast_log2` (a fast approximation of
  `log2`).
- `minikit.ksw` – `KswFlag` alignment options, `NEG_INF`, the `Extension`
  result (scores, best-cell coordinates, Z-drop state and CIGAR, with
  `reset()` and `apply_zdrop()`), `push_cigar` and `backtrack` over a
  backtrack matrix.
- `minikit.splice` – `splice_align(query, target, m, mat, q, e, q2, ...)`,
  an extension aligner over integer-coded sequences in which long deletions
  cost a flat `q2` and are reported as introns (`N` in the CIGAR). With
  `KswFlag.SPLICE_FOR` or `KswFlag.SPLICE_REV` it scores donor and acceptor
  signals assuming A/C/G/T are coded 0/1/2/3, and an optional `junc` list of
  annotation bits earns `junc_bonus`. It returns an `Extension`.

## Install

```
pip install .
```

With the test tools:

```
pip install ".[test]"
pytest
```

## Examples

```python
import io
from minikit.fastx import read_fastx

for rec in read_fastx(io.BytesIO(b">r1 demo\nACGT\n")):
    print(rec.name, rec.comment, rec.seq)   # r1 demo ACGT
```

```python
from minikit.constants import CigarOp, encode_cigar, cigar_to_string

cigar = [encode_cigar(CigarOp.MATCH, 10), encode_cigar(CigarOp.INS, 2)]
print(cigar_to_string(cigar))   # 10M2I
```

```python
from minikit.rmqtree import RmqTree

tree = RmqTree(key=lambda x: x[0], min_key=lambda x: x[1])
for item in [(1, 5), (2, 3), (3, 9)]:
    tree.insert(item)
print(tree.rmq((1, 0), (3, 0)))   # (2, 3)
```

## What it does not do

minikit is a library of parts. It does not build or load sequence indexes,
compute minimizers, chain seeds, map reads, or write PAF or SAM output, and
it installs no command-line program. The only aligner it contains is
`splice_align`, written in plain Python and so suited to short sequences.