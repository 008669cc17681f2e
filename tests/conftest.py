"""
Shared fixtures for read_filter tests.
"""

import sys
from pathlib import Path

import pytest

# Add source directory to Python path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from read_filter.config import FilterConfig
from read_filter.constants import DEFAULT_LEFT_FLANK, DEFAULT_RIGHT_FLANK
from read_filter.fastq import FastqRecord
from read_filter.sequence import reverse_complement

CONTENT = "ACGTACGTACGTACGTACGTA"


@pytest.fixture
def content():
    """A valid 21-base content region."""
    return CONTENT


@pytest.fixture
def config():
    """Filter with window [28, 44] and no quality thresholds."""
    return FilterConfig(
        left_flank=DEFAULT_LEFT_FLANK,
        right_flank=DEFAULT_RIGHT_FLANK,
        content_length=len(CONTENT),
        expected_start=36,
        tolerance=8,
    )


@pytest.fixture
def make_read():
    """
    Factory building a read with the flank pair at a given offset.

    The construct is ``N * prefix + left + content + right + N * suffix``.
    With ``reverse=True`` the whole read is reverse complemented (quality
    reversed), so the pattern sits on the reverse strand at the same
    distance from the read's 3' end.
    """

    def _make_read(
        prefix: int,
        content: str = CONTENT,
        suffix: int = 10,
        qual: int = 40,
        content_qual=None,
        reverse: bool = False,
        name: str = "read1",
    ) -> FastqRecord:
        seq = ("N" * prefix + DEFAULT_LEFT_FLANK + content + DEFAULT_RIGHT_FLANK + "N" * suffix).encode()
        quals = [qual] * len(seq)
        if content_qual is not None:
            assert len(content_qual) == len(content)
            start = prefix + len(DEFAULT_LEFT_FLANK)
            quals[start:start + len(content)] = content_qual
        quality = bytes(q + 33 for q in quals)
        if reverse:
            seq = reverse_complement(seq)
            quality = quality[::-1]
        return FastqRecord(name=name, seq=seq, qual=quality)

    return _make_read
