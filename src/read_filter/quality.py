"""
Quality aggregation over accepted reads.

Groups extracted records by (start position, peak quality, mean quality)
and keeps per-position quality sums for each group.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

import numpy as np
import pandas as pd

from .constants import PHRED_OFFSET
from .match import ExtractedRecord

QualKey = Tuple[int, int, int]


class QualityLengthError(RuntimeError):
    """Raised when a record's content length differs from its bucket's."""
    pass


@dataclass
class _Bucket:
    reads: int
    reverse_reads: int
    sums: np.ndarray


@dataclass
class QualityRow:
    """One emitted bucket. ``mean_quality`` holds per-position PHRED averages."""

    start_pos: int
    peak_qual: int
    mean_qual: int
    reads: int
    reverse_reads: int
    mean_quality: np.ndarray


class QualStats:
    """
    Per-bucket read counts and summed qualities.

    Buckets are created on first sight of a key and updated in place
    afterwards. Output order does not depend on insertion order: ``emit``
    sorts by key, descending.

    Examples
    --------
    >>> qs = QualStats()
    >>> qs.append(record)
    >>> rows = qs.emit()
    >>> rows[0].reads
    1
    """

    def __init__(self):
        self._buckets: Dict[QualKey, _Bucket] = {}

    def __len__(self) -> int:
        return len(self._buckets)

    def append(self, record: ExtractedRecord) -> None:
        """
        Add a record to its bucket.

        Raises
        ------
        QualityLengthError
            If the record's quality length differs from the bucket's.
        """
        key = (record.start_pos, record.peak_qual(), record.mean_qual())
        # Widen to avoid overflow when summing many reads
        quality = np.frombuffer(record.quality, dtype=np.uint8).astype(np.int64)
        reverse = int(record.reverse_strand)

        bucket = self._buckets.get(key)
        if bucket is None:
            self._buckets[key] = _Bucket(reads=1, reverse_reads=reverse, sums=quality)
            return

        if len(quality) != len(bucket.sums):
            raise QualityLengthError(
                f"Content length {len(quality)} does not match bucket {key} "
                f"with length {len(bucket.sums)}"
            )
        bucket.reads += 1
        bucket.reverse_reads += reverse
        bucket.sums += quality

    def emit(self) -> List[QualityRow]:
        """All buckets in descending (start_pos, peak_qual, mean_qual) order."""
        rows = []
        for key in sorted(self._buckets, reverse=True):
            bucket = self._buckets[key]
            start_pos, peak_qual, mean_qual = key
            rows.append(QualityRow(
                start_pos=start_pos,
                peak_qual=peak_qual,
                mean_qual=mean_qual,
                reads=bucket.reads,
                reverse_reads=bucket.reverse_reads,
                mean_quality=bucket.sums / bucket.reads - PHRED_OFFSET,
            ))
        return rows

    def to_frame(self, content_length: int) -> pd.DataFrame:
        """
        Export the emitted rows as a DataFrame.

        Parameters
        ----------
        content_length : int
            Number of per-position quality columns.

        Returns
        -------
        pd.DataFrame
            Columns ``dist_start, peak_qual, mean_qual, reads, reverse_reads``
            followed by ``qual_pos_0 .. qual_pos_{n-1}``.
        """
        qual_cols = [f"qual_pos_{i}" for i in range(content_length)]
        columns = ["dist_start", "peak_qual", "mean_qual", "reads", "reverse_reads"] + qual_cols

        records = []
        for row in self.emit():
            records.append(
                [row.start_pos, row.peak_qual, row.mean_qual, row.reads, row.reverse_reads]
                + row.mean_quality.tolist()
            )
        return pd.DataFrame(records, columns=columns)
