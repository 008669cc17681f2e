"""
FASTQ reading and writing.

Reads plain or compressed (gzip, bzip2, xz) FASTQ files record by record.
Malformed records are yielded as ``FASTQParseError`` values rather than
raised, so a consumer can skip them and keep going.
"""

import bz2
import gzip
import logging
import lzma
from os import PathLike
from pathlib import Path
from typing import BinaryIO, Iterator, NamedTuple, Optional, Union

logger = logging.getLogger(__name__)

_GZIP_MAGIC = b"\x1f\x8b"
_BZIP2_MAGIC = b"BZh"
_XZ_MAGIC = b"\xfd7zXZ\x00"


class FASTQParseError(Exception):
    """Raised when FASTQ parsing encounters an error."""
    pass


class FastqRecord(NamedTuple):
    """A single FASTQ entry. ``qual`` holds the raw encoded quality bytes."""

    name: str
    seq: bytes
    qual: bytes


def open_fastq(fastq_fn: Union[PathLike, str]) -> BinaryIO:
    """
    Open a FASTQ file for binary reading, decompressing if needed.

    The compression format is detected from the file's magic bytes, not
    its extension.
    """
    fastq_fn = Path(fastq_fn)
    if not fastq_fn.exists():
        raise FileNotFoundError(f"FASTQ file does not exist: {fastq_fn}")

    with open(fastq_fn, "rb") as f:
        magic = f.read(6)

    if magic.startswith(_GZIP_MAGIC):
        logger.debug(f"{fastq_fn.name}: gzip compressed")
        return gzip.open(fastq_fn, "rb")
    if magic.startswith(_BZIP2_MAGIC):
        logger.debug(f"{fastq_fn.name}: bzip2 compressed")
        return bz2.open(fastq_fn, "rb")
    if magic.startswith(_XZ_MAGIC):
        logger.debug(f"{fastq_fn.name}: xz compressed")
        return lzma.open(fastq_fn, "rb")
    return open(fastq_fn, "rb")


def read_fastq(handle: BinaryIO) -> Iterator[Union[FastqRecord, FASTQParseError]]:
    """
    Iterate over the records of an open binary FASTQ handle.

    Parameters
    ----------
    handle : binary file object
        Handle positioned at the start of a record.

    Yields
    ------
    FastqRecord or FASTQParseError
        One item per four-line block. Blocks that do not form a valid
        record are yielded as an error instance.
    """
    line_num = 0
    while True:
        try:
            header = handle.readline()
            line_num += 1
            if not header:
                return
            header = header.rstrip(b"\r\n")
            if not header:
                # Blank lines between records
                continue

            seq = handle.readline().rstrip(b"\r\n")
            sep = handle.readline().rstrip(b"\r\n")
            qual = handle.readline().rstrip(b"\r\n")
        except (EOFError, OSError) as e:
            # Truncated or corrupt compressed stream; nothing further is readable
            yield FASTQParseError(f"Line {line_num}: input stream ended unexpectedly ({e})")
            return
        start_line = line_num
        line_num += 3

        if not header.startswith(b"@"):
            yield FASTQParseError(f"Line {start_line}: expected '@' at start of record")
            continue
        if not sep.startswith(b"+"):
            yield FASTQParseError(f"Line {start_line + 2}: expected '+' separator")
            continue
        if len(seq) != len(qual):
            yield FASTQParseError(
                f"Line {start_line}: sequence and quality lengths differ ({len(seq)} != {len(qual)})"
            )
            continue

        # Names round-trip byte for byte through format_fastq
        fields = header[1:].split(maxsplit=1)
        name = fields[0].decode("utf-8", errors="surrogateescape") if fields else ""
        yield FastqRecord(name=name, seq=seq, qual=qual)


def iter_fastq(fastq_fn: Union[PathLike, str]) -> Iterator[Union[FastqRecord, FASTQParseError]]:
    """Open ``fastq_fn`` and yield its records, closing the file when exhausted."""
    with open_fastq(fastq_fn) as handle:
        yield from read_fastq(handle)


def format_fastq(name: str, seq: bytes, qual: bytes, comment: Optional[str] = None) -> bytes:
    """Render a single FASTQ record."""
    header = f"@{name}" if comment is None else f"@{name} {comment}"
    return header.encode("utf-8", errors="surrogateescape") + b"\n" + seq + b"\n+\n" + qual + b"\n"
