"""
Dual-strand anchored matching.

Locates the flank pair on the forward strand and, independently, on the
reverse complement strand of a read, within the configured window.
"""

from typing import Optional, Tuple

from .fastq import FastqRecord
from .match import CandidateMatch
from .patterns import PatternIndex


def match_forward(read: FastqRecord, patterns: PatternIndex) -> Optional[CandidateMatch]:
    """
    Find the first left flank occurrence that delimits a valid content region.

    The right flank is verified at its fixed distance, not searched. The
    first qualifying offset wins; further forward anchors are ignored.
    """
    read_seq = read.seq
    read_len = len(read_seq)

    for idx in patterns.fwd_start.find_all(read_seq):
        if idx > patterns.expt_end:
            # Offsets are ascending, nothing further can qualify
            break
        if (
            idx >= patterns.expt_begin
            and idx + patterns.total_len <= read_len
            and read_seq[idx + patterns.fwd_dist:idx + patterns.total_len] == patterns.fwd_end
        ):
            start_idx = idx + patterns.start_len
            return CandidateMatch(
                read_seq,
                read.qual,
                start_idx,
                start_idx + patterns.content_len,
                reverse_strand=False,
                start_pos=start_idx,
            )
    return None


def match_reverse(read: FastqRecord, patterns: PatternIndex) -> Optional[CandidateMatch]:
    """
    Find the anchored pattern on the reverse complement strand.

    Searches the unmodified read for the reverse complement of the right
    flank. The window is expressed relative to the 3' end of the read, so
    ``idx + total_len + expt_begin <= read_len <= idx + total_len + expt_end``.
    """
    read_seq = read.seq
    read_len = len(read_seq)

    for idx in patterns.rev_end.find_all(read_seq):
        if idx + patterns.total_len + patterns.expt_begin > read_len:
            # Any later offset would start even closer to the 3' end
            break
        if (
            idx + patterns.total_len + patterns.expt_end >= read_len
            and read_seq[idx + patterns.rev_dist:idx + patterns.total_len] == patterns.rev_start
        ):
            # Non-negative because of the first window condition
            start_pos = read_len - (idx + patterns.rev_dist)
            return CandidateMatch(
                read_seq,
                read.qual,
                idx + patterns.end_len,
                idx + patterns.rev_dist,
                reverse_strand=True,
                start_pos=start_pos,
            )
    return None


def match_both_strands(
    read: FastqRecord,
    patterns: PatternIndex,
) -> Tuple[Optional[CandidateMatch], Optional[CandidateMatch]]:
    """
    Attempt an anchored match on each strand of ``read``.

    Parameters
    ----------
    read : FastqRecord
        Read with sequence and equal-length quality bytes.
    patterns : PatternIndex
        Precomputed flank patterns and window.

    Returns
    -------
    forward, reverse : CandidateMatch or None
        At most one candidate per strand. Both may be present, which the
        caller treats as ambiguous.
    """
    return match_forward(read, patterns), match_reverse(read, patterns)
