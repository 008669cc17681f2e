"""
Streaming read filter.

Turns an iterable of raw reads into strand-normalized content extracts,
counting every rejection along the way.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Dict, Iterable, Iterator, Optional, Union

from .config import FilterConfig
from .constants import PROGRESS_INTERVAL
from .fastq import FASTQParseError, FastqRecord
from .match import ExtractedRecord
from .matching import match_both_strands
from .patterns import PatternIndex

logger = logging.getLogger(__name__)


@dataclass
class RunningStats:
    """
    Counters collected while filtering a single input.

    ``matching_reads`` counts reads with an unambiguous, pure DNA match
    before any quality filter is applied.
    """

    total_reads: int = 0
    matching_reads: int = 0
    ambiguous_rejected: int = 0
    peak_rejected: int = 0
    mean_rejected: int = 0

    @property
    def quality_reads(self) -> int:
        """Matching reads that passed both quality filters."""
        return self.matching_reads - (self.peak_rejected + self.mean_rejected)

    def as_dict(self) -> Dict[str, int]:
        result = asdict(self)
        result["quality_reads"] = self.quality_reads
        return result


class ReadFilter:
    """
    Single-pass iterator yielding accepted ``ExtractedRecord`` objects.

    For each read: count it, match both strands, drop ambiguous or
    unmatched reads, drop content with non-ACGT bases, then apply the
    optional peak and mean quality thresholds. Survivors are copied out
    of the read and yielded.

    Parameters
    ----------
    records : iterable of FastqRecord or FASTQParseError
        Read source. Decode failures are skipped without being counted.
    config : FilterConfig
        Flanks, window and quality thresholds.
    stats : RunningStats, optional
        Counters to update. A fresh instance is created if omitted; either
        way it is available as ``self.stats``.
    sample : str, optional
        Label used in progress log messages.

    Examples
    --------
    >>> from read_filter import load_json_config, iter_fastq
    >>> config = load_json_config("filter.json")
    >>> stats = RunningStats()
    >>> accepted = list(ReadFilter(iter_fastq("reads.fastq.gz"), config, stats))
    >>> stats.total_reads >= len(accepted)
    True
    """

    def __init__(
        self,
        records: Iterable[Union[FastqRecord, FASTQParseError]],
        config: FilterConfig,
        stats: Optional[RunningStats] = None,
        sample: str = "reads",
    ):
        self._records = iter(records)
        self.patterns = PatternIndex.from_config(config)
        self.min_peak_qual = config.min_peak_qual
        self.min_mean_qual = config.min_mean_qual
        self.stats = stats if stats is not None else RunningStats()
        self._sample = sample
        self._decode_failures = 0

    def __iter__(self) -> Iterator[ExtractedRecord]:
        return self

    def __next__(self) -> ExtractedRecord:
        for rec in self._records:
            if isinstance(rec, FASTQParseError):
                self._decode_failures += 1
                logger.debug(f"{self._sample}: skipping unreadable record ({rec})")
                continue

            self.stats.total_reads += 1
            if self.stats.total_reads % PROGRESS_INTERVAL == 0:
                logger.info(f"{self._sample}: {self.stats.total_reads:,} reads processed...")

            fwd, rev = match_both_strands(rec, self.patterns)
            if fwd is not None and rev is not None:
                self.stats.ambiguous_rejected += 1
                continue
            candidate = fwd if fwd is not None else rev
            if candidate is None:
                continue

            if not candidate.is_dna():
                continue

            self.stats.matching_reads += 1
            if self.min_peak_qual is not None and candidate.peak_qual() < self.min_peak_qual:
                self.stats.peak_rejected += 1
                continue
            if self.min_mean_qual is not None and candidate.mean_qual() < self.min_mean_qual:
                self.stats.mean_rejected += 1
                continue

            return candidate.materialize(read_id=rec.name)

        raise StopIteration

    @property
    def decode_failures(self) -> int:
        """Number of source entries skipped because they could not be decoded."""
        return self._decode_failures
