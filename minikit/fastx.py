"""Streaming reader for FASTA and FASTQ records.

Records may be mixed freely in one stream.  Sequence lines of a FASTA
record are concatenated; FASTQ quality strings may span several lines and
may start with ``@``.  Windows line endings are accepted.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import IO, Iterator, Optional

__all__ = ["FastxRecord", "TruncatedQualityError", "FastxReader", "read_fastx"]

_BUFSIZE = 16384
_SPACE = re.compile(r"[ \t\n\v\f\r]")
_NEWLINE = re.compile("\n")


@dataclass(frozen=True)
class FastxRecord:
    """One sequence record; ``qual`` is ``None`` for FASTA input."""

    name: str
    comment: str
    seq: str
    qual: Optional[str] = None

    @property
    def is_fastq(self) -> bool:
        return self.qual is not None


class TruncatedQualityError(ValueError):
    """Raised when a FASTQ quality string is missing or of the wrong length."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"truncated or mismatched quality string in record {name!r}"
        )
        self.name = name


class _Source:
    """Character source over a binary or text stream, read in chunks."""

    def __init__(self, stream: IO) -> None:
        self._stream = stream
        self._buf = ""
        self._pos = 0
        self._eof = False

    def _fill(self) -> bool:
        if self._eof:
            return False
        chunk = self._stream.read(_BUFSIZE)
        if not chunk:
            self._eof = True
            return False
        if isinstance(chunk, (bytes, bytearray)):
            chunk = chunk.decode("latin-1")
        self._buf = chunk
        self._pos = 0
        return True

    def _exhausted(self) -> bool:
        return self._pos >= len(self._buf) and not self._fill()

    def getc(self) -> str:
        """Return the next character, or an empty string at end of input."""
        if self._exhausted():
            return ""
        c = self._buf[self._pos]
        self._pos += 1
        return c

    def getuntil(self, pattern: re.Pattern) -> Optional[tuple[str, str]]:
        """Read up to the next delimiter matching ``pattern``.

        Returns ``(text, delimiter)``; the delimiter is consumed and is an
        empty string when input ended first.  Returns ``None`` when the
        input was already exhausted.
        """
        if self._exhausted():
            return None
        parts: list[str] = []
        while True:
            if self._exhausted():
                return "".join(parts), ""
            match = pattern.search(self._buf, self._pos)
            if match is not None:
                parts.append(self._buf[self._pos:match.start()])
                self._pos = match.start() + 1
                return "".join(parts), match.group()
            parts.append(self._buf[self._pos:])
            self._pos = len(self._buf)


class _Builder:
    """Accumulates lines, dropping a carriage return left at the end."""

    __slots__ = ("parts", "length")

    def __init__(self) -> None:
        self.parts: list[str] = []
        self.length = 0

    def add(self, piece: str) -> None:
        self.length += len(piece)
        if self.length > 1 and piece.endswith("\r"):
            piece = piece[:-1]
            self.length -= 1
        self.parts.append(piece)

    def text(self) -> str:
        return "".join(self.parts)


def _strip_cr(text: str) -> str:
    return text[:-1] if len(text) > 1 and text.endswith("\r") else text


class FastxReader:
    """Reads FASTA/FASTQ records one at a time from a stream."""

    def __init__(self, stream: IO) -> None:
        self._src = _Source(stream)
        self._last = ""

    def __iter__(self) -> Iterator[FastxRecord]:
        while True:
            record = self.read()
            if record is None:
                return
            yield record

    def read(self) -> Optional[FastxRecord]:
        """Return the next record, or ``None`` at the end of the input.

        Raises :class:`TruncatedQualityError` for a FASTQ record whose
        quality string is absent or differs in length from the sequence.
        """
        src = self._src
        if not self._last:
            while True:
                c = src.getc()
                if not c:
                    return None
                if c in ">@":
                    break
            self._last = c

        got = src.getuntil(_SPACE)
        if got is None:
            return None
        name, delimiter = got
        comment = ""
        if delimiter != "\n":
            line = src.getuntil(_NEWLINE)
            if line is not None:
                comment = _strip_cr(line[0])

        seq = _Builder()
        while True:
            c = src.getc()
            if not c or c in ">+@":
                break
            if c == "\n":
                continue
            rest = src.getuntil(_NEWLINE)
            seq.add(c + (rest[0] if rest is not None else ""))
        self._last = c if c in (">", "@") and c else ""

        if c != "+":
            return FastxRecord(name, comment, seq.text())

        while True:
            c = src.getc()
            if not c:
                raise TruncatedQualityError(name)
            if c == "\n":
                break

        qual = _Builder()
        while True:
            line = src.getuntil(_NEWLINE)
            if line is None:
                break
            qual.add(line[0])
            if qual.length >= seq.length:
                break
        self._last = ""
        if qual.length != seq.length:
            raise TruncatedQualityError(name)
        return FastxRecord(name, comment, seq.text(), qual.text())


def read_fastx(stream: IO) -> Iterator[FastxRecord]:
    """Yield every record of a FASTA/FASTQ stream."""
    yield from FastxReader(stream)