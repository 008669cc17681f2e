"""
Types holding an individual match.

``CandidateMatch`` is a zero-copy view into a read used while filtering;
``ExtractedRecord`` is the owned, strand-normalized result handed to
consumers.
"""

from dataclasses import dataclass
from typing import List

from .constants import PHRED_OFFSET
from .fastq import format_fastq
from .sequence import is_dna, reverse_complement


def _peak_qual(quality) -> int:
    # Lowest quality corresponds to the peak error probability
    if len(quality) == 0:
        raise ValueError("Expected nonempty content")
    return min(quality) - PHRED_OFFSET


def _mean_qual(quality) -> int:
    if len(quality) == 0:
        raise ValueError("Expected nonempty content")
    return sum(quality) // len(quality) - PHRED_OFFSET


class CandidateMatch:
    """
    Zero-copy match on one strand of a read.

    Holds ``memoryview`` slices of the read's sequence and quality covering
    exactly the content region. The bytes are in read orientation, not yet
    adjusted for the matched strand. Only valid while the read's buffers
    are alive; call ``materialize`` to obtain an owned record.

    Parameters
    ----------
    seq : bytes
        Full read sequence.
    quality : bytes
        Full read quality string.
    start, stop : int
        Content range within the read.
    reverse_strand : bool
        Whether the match was found on the reverse complement strand.
    start_pos : int
        Content start measured from the 5' end of the matched strand.
    """

    __slots__ = ("seq", "quality", "reverse_strand", "start_pos")

    def __init__(
        self,
        seq: bytes,
        quality: bytes,
        start: int,
        stop: int,
        reverse_strand: bool,
        start_pos: int,
    ):
        self.seq = memoryview(seq)[start:stop]
        self.quality = memoryview(quality)[start:stop]
        self.reverse_strand = reverse_strand
        self.start_pos = start_pos

    def __repr__(self) -> str:
        strand = "-" if self.reverse_strand else "+"
        return f"CandidateMatch({self.start_pos}({strand}): {self.seq.tobytes()!r})"

    def peak_qual(self) -> int:
        """Lowest PHRED score in the content."""
        return _peak_qual(self.quality)

    def mean_qual(self) -> int:
        """Average PHRED score in the content (integer division)."""
        return _mean_qual(self.quality)

    def is_dna(self) -> bool:
        return is_dna(self.seq)

    def materialize(self, read_id: str = "") -> "ExtractedRecord":
        """
        Copy the content out of the read.

        Reverse strand matches are reverse complemented and their quality
        is reversed, so the record reads in pattern orientation.
        """
        seq = self.seq.tobytes()
        quality = self.quality.tobytes()
        if self.reverse_strand:
            seq = reverse_complement(seq)
            quality = quality[::-1]
        return ExtractedRecord(
            seq=seq,
            quality=quality,
            reverse_strand=self.reverse_strand,
            start_pos=self.start_pos,
            read_id=read_id,
        )


@dataclass
class ExtractedRecord:
    """
    Owned version of a successful match.

    Attributes
    ----------
    seq : bytes
        Content in pattern orientation.
    quality : bytes
        Raw encoded quality, aligned with ``seq``. Subtract 33 for PHRED.
    reverse_strand : bool
        Whether the match occurred on the reverse complement strand.
    start_pos : int
        Content start from the 5' end of the matched strand.
    read_id : str
        Identifier of the read the content came from.
    """

    seq: bytes
    quality: bytes
    reverse_strand: bool
    start_pos: int
    read_id: str = ""

    def __str__(self) -> str:
        strand = "-" if self.reverse_strand else "+"
        seq = self.seq.decode("ascii", errors="replace")
        qual = self.quality.decode("ascii", errors="replace")
        return f"{self.start_pos}({strand}): {seq}, PHRED: {qual}"

    def peak_qual(self) -> int:
        """Lowest PHRED score in the content."""
        return _peak_qual(self.quality)

    def mean_qual(self) -> int:
        """Integer mean PHRED score, identical to the value used for filtering."""
        return _mean_qual(self.quality)

    def accurate_mean_qual(self) -> float:
        """Floating point mean PHRED score, for diagnostics."""
        return sum(self.quality) / len(self.quality) - PHRED_OFFSET

    def phred_scores(self) -> List[int]:
        return [q - PHRED_OFFSET for q in self.quality]

    def to_fastq(self, read_id: str) -> bytes:
        """FASTQ record with the content in the orientation defined by the flanks."""
        strand = "-" if self.reverse_strand else "+"
        return format_fastq(read_id, self.seq, self.quality, comment=strand)

    def to_fastq_original_strand(self, read_id: str) -> bytes:
        """FASTQ record with the content in the orientation it had in the read."""
        if not self.reverse_strand:
            return format_fastq(read_id, self.seq, self.quality, comment="+")
        return format_fastq(
            read_id,
            reverse_complement(self.seq),
            self.quality[::-1],
            comment="-",
        )

    def read_report_row(self) -> list:
        """Row of the per-read report: content, position, strand, qualities."""
        return [
            self.seq.decode("ascii"),
            self.start_pos,
            self.reverse_strand,
            self.peak_qual(),
            self.accurate_mean_qual(),
            *self.phred_scores(),
        ]
