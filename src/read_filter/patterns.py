"""
Precomputed search patterns.

Everything needed to test a read against the configured flanks on both
strands is derived once per run and kept in an immutable ``PatternIndex``.
"""

from dataclasses import dataclass

from .config import FilterConfig
from .sequence import ExactPattern, reverse_complement


@dataclass(frozen=True)
class PatternIndex:
    """
    Flank patterns and derived distances for dual-strand matching.

    Attributes
    ----------
    fwd_start : ExactPattern
        Left flank, searched on the forward strand.
    fwd_end : bytes
        Right flank, verified positionally on the forward strand.
    rev_start : bytes
        Reverse complement of the left flank, verified on the reverse strand.
    rev_end : ExactPattern
        Reverse complement of the right flank, searched on the reverse strand.
    expt_begin, expt_end : int
        Closed window of accepted left flank offsets.
    fwd_dist : int
        Offset of the right flank relative to the left flank.
    rev_dist : int
        Offset of the reverse left flank relative to the reverse right flank.
    total_len : int
        Length of flank + content + flank.
    """

    fwd_start: ExactPattern
    fwd_end: bytes
    rev_start: bytes
    rev_end: ExactPattern
    content_len: int
    start_len: int
    end_len: int
    expt_begin: int
    expt_end: int
    fwd_dist: int
    rev_dist: int
    total_len: int

    @classmethod
    def build(
        cls,
        left_flank: str,
        right_flank: str,
        content_length: int,
        expected_start: int,
        tolerance: int,
    ) -> "PatternIndex":
        left = left_flank.encode("ascii")
        right = right_flank.encode("ascii")
        start_len = len(left)
        end_len = len(right)

        return cls(
            fwd_start=ExactPattern(left),
            fwd_end=right,
            rev_start=reverse_complement(left),
            rev_end=ExactPattern(reverse_complement(right)),
            content_len=content_length,
            start_len=start_len,
            end_len=end_len,
            # Saturating: the window never reaches below offset 0
            expt_begin=max(0, expected_start - tolerance),
            expt_end=expected_start + tolerance,
            fwd_dist=start_len + content_length,
            rev_dist=end_len + content_length,
            total_len=start_len + content_length + end_len,
        )

    @classmethod
    def from_config(cls, config: FilterConfig) -> "PatternIndex":
        return cls.build(
            left_flank=config.left_flank,
            right_flank=config.right_flank,
            content_length=config.content_length,
            expected_start=config.expected_start,
            tolerance=config.tolerance,
        )
