"""
Sequence primitives for anchored matching.

Provides the reverse complement, the DNA alphabet check and an exact
pattern finder used to locate flank occurrences in a read.
"""

from typing import Iterator, Union

from .config import ConfigError
from .constants import DNA_ALPHABET, MAX_PATTERN_LENGTH

_COMPLEMENT = bytes.maketrans(
    b"ACGTRYSWKMBDHVNacgtryswkmbdhvn",
    b"TGCAYRSWMKVHDBNtgcayrswmkvhdbn",
)

_DNA_BYTES = frozenset(DNA_ALPHABET)


class PatternLengthError(ConfigError):
    """Raised when a flank cannot be handled by the exact matcher."""
    pass


def reverse_complement(seq: Union[bytes, str]) -> bytes:
    """
    Reverse complement a DNA sequence.

    Case is preserved, IUPAC ambiguity codes are complemented and any
    other byte is passed through unchanged.

    Examples
    --------
    >>> reverse_complement(b"AGAGAGGC")
    b'GCCTCTCT'
    """
    if isinstance(seq, str):
        seq = seq.encode("ascii")
    return bytes(seq).translate(_COMPLEMENT)[::-1]


def is_dna(seq) -> bool:
    """Check that every base is one of A, C, G, T (upper case)."""
    return all(b in _DNA_BYTES for b in seq)


class ExactPattern:
    """
    Exact matcher for a single short pattern.

    Parameters
    ----------
    pattern : bytes or str
        Literal pattern, at most 64 symbols.

    Raises
    ------
    PatternLengthError
        If the pattern is empty or longer than ``MAX_PATTERN_LENGTH``.

    Examples
    --------
    >>> list(ExactPattern(b"AA").find_all(b"AAAT"))
    [0, 1]
    """

    def __init__(self, pattern: Union[bytes, str]):
        if isinstance(pattern, str):
            pattern = pattern.encode("ascii")
        if not pattern:
            raise PatternLengthError("Pattern must not be empty")
        if len(pattern) > MAX_PATTERN_LENGTH:
            raise PatternLengthError(
                f"Pattern of length {len(pattern)} exceeds the maximum of {MAX_PATTERN_LENGTH}"
            )
        self.pattern = bytes(pattern)

    def __len__(self) -> int:
        return len(self.pattern)

    def __repr__(self) -> str:
        return f"ExactPattern({self.pattern!r})"

    def find_all(self, text: bytes) -> Iterator[int]:
        """Yield all (possibly overlapping) start offsets in ascending order."""
        idx = text.find(self.pattern)
        while idx != -1:
            yield idx
            idx = text.find(self.pattern, idx + 1)
