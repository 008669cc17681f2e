"""
Read database for accumulating content counts.

Provides in-memory storage for extracted content counts per sample while
FASTQ files are filtered.
"""

from typing import Dict, List, Optional

import pandas as pd


class ReadDB:
    """
    In-memory database for accumulating read counts.

    Stores the number of accepted reads for each extracted content sequence
    per sample.

    Parameters
    ----------
    sample_list : list of str, optional
        Pre-defined list of sample names. Every sample appears as a column
        in ``counts()`` even if it received no reads.

    Examples
    --------
    >>> db = ReadDB(sample_list=['Sample1'])
    >>> db.increment_count('ACGTACGT', 'Sample1')
    >>> db.increment_count('ACGTACGT', 'Sample1')
    >>> db.counts().loc['ACGTACGT', 'Sample1']
    2
    """

    def __init__(self, sample_list: Optional[List[str]] = None):
        self._sample_list = list(sample_list or [])

        # Structure: {content: {sample: count}}
        self._counts: Dict[str, Dict[str, int]] = {}

    def increment_count(self, content: str, sample: str, count: int = 1) -> None:
        """
        Increment the count for a content-sample pair.

        Parameters
        ----------
        content : str
            Extracted content sequence.
        sample : str
            Sample identifier.
        count : int, default 1
            Amount to increment by.
        """
        if sample not in self._sample_list:
            self._sample_list.append(sample)

        sample_counts = self._counts.setdefault(content, {})
        sample_counts[sample] = sample_counts.get(sample, 0) + count

    def get_count(self, content: str, sample: str) -> int:
        """Count for a content-sample pair, or 0 if never seen."""
        return self._counts.get(content, {}).get(sample, 0)

    def counts(self) -> pd.DataFrame:
        """
        Export counts as a DataFrame.

        Returns
        -------
        pd.DataFrame
            Count matrix with content sequences as rows (index ``seq``) and
            samples as columns. Rows are ordered by total count, descending,
            then by sequence. Missing values are filled with 0.
        """
        if not self._counts:
            df = pd.DataFrame(columns=self._sample_list, dtype=int)
            df.index.name = "seq"
            return df

        df = pd.DataFrame.from_dict(self._counts, orient='index')
        df = df.reindex(columns=self._sample_list)
        df = df.fillna(0).astype(int)

        totals = df.sum(axis=1)
        order = sorted(df.index, key=lambda seq: (-totals[seq], seq))
        df = df.loc[order]
        df.index.name = "seq"

        return df

    @property
    def n_features(self) -> int:
        """Number of distinct content sequences with counts."""
        return len(self._counts)

    @property
    def n_samples(self) -> int:
        return len(self._sample_list)

    @property
    def total_counts(self) -> int:
        """Total count across all sequences and samples."""
        return sum(sum(sample_counts.values()) for sample_counts in self._counts.values())
