"""
Report serialization.

Writes the processed count table with its comment header, the per-read
report and the quality report, as TSV or as a single Excel workbook.
"""

import logging
from os import PathLike
from pathlib import Path
from typing import List, Optional, Union

import pandas as pd

from .config import FilterConfig
from .match import ExtractedRecord
from .read_filter import RunningStats

logger = logging.getLogger(__name__)


def config_header(config: FilterConfig) -> str:
    """Comment lines describing the filter that produced a table."""
    return (
        f"# filter: {config.filter_regex()}\n"
        f"# accepted_peak_qual: {config.min_peak_qual or 0}\n"
        f"# accepted_mean_qual: {config.min_mean_qual or 0}\n"
    )


def stats_header(stats: RunningStats) -> str:
    """Comment lines with the run counters."""
    return (
        f"# raw_total_reads: {stats.total_reads}\n"
        f"# matching_reads: {stats.matching_reads}\n"
        f"# peak_qual_rejected_reads: {stats.peak_rejected}\n"
        f"# mean_qual_rejected_reads: {stats.mean_rejected}\n"
        f"# ambiguous_matches_rejected: {stats.ambiguous_rejected}\n"
        f"# quality_reads: {stats.quality_reads}\n"
    )


def summary_frame(config: FilterConfig, stats: RunningStats) -> pd.DataFrame:
    """Config and counters as a two-column key/value table."""
    rows = [
        ("filter", config.filter_regex()),
        ("accepted_peak_qual", config.min_peak_qual or 0),
        ("accepted_mean_qual", config.min_mean_qual or 0),
        ("raw_total_reads", stats.total_reads),
        ("matching_reads", stats.matching_reads),
        ("peak_qual_rejected_reads", stats.peak_rejected),
        ("mean_qual_rejected_reads", stats.mean_rejected),
        ("ambiguous_matches_rejected", stats.ambiguous_rejected),
        ("quality_reads", stats.quality_reads),
    ]
    return pd.DataFrame(rows, columns=["key", "value"])


def read_report_columns(content_length: int) -> List[str]:
    return (
        ["read", "dist_start", "reversed", "peak_qual", "mean_qual"]
        + [f"qual_pos_{i}" for i in range(content_length)]
    )


def write_processed(
    path: Union[PathLike, str],
    config: FilterConfig,
    stats: RunningStats,
    counts: pd.DataFrame,
) -> None:
    """
    Write the processed count table.

    Parameters
    ----------
    path : PathLike or str
        Output file.
    config : FilterConfig
        Written as a comment header.
    stats : RunningStats
        Written as a comment header after the config.
    counts : pd.DataFrame
        Single-column count table indexed by content sequence.
    """
    table = counts.iloc[:, 0].rename("reads").reset_index()
    table.columns = ["seq", "reads"]

    with open(path, "w") as f:
        f.write(config_header(config))
        f.write(stats_header(stats))
        table.to_csv(f, sep="\t", index=False)


def write_quality_report(path: Union[PathLike, str], quality_df: pd.DataFrame) -> None:
    quality_df.to_csv(path, sep="\t", index=False)


def write_excel(
    path: Union[PathLike, str],
    config: FilterConfig,
    stats: RunningStats,
    counts: pd.DataFrame,
    read_report: Optional[pd.DataFrame] = None,
    quality: Optional[pd.DataFrame] = None,
) -> None:
    """Write all tables of one input into a single workbook."""
    table = counts.iloc[:, 0].rename("reads").reset_index()
    table.columns = ["seq", "reads"]

    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        table.to_excel(writer, sheet_name="counts", index=False)
        summary_frame(config, stats).to_excel(writer, sheet_name="summary", index=False)
        if read_report is not None:
            read_report.to_excel(writer, sheet_name="read_report", index=False)
        if quality is not None:
            quality.to_excel(writer, sheet_name="quality", index=False)


class ReadReport:
    """
    Per-read report of accepted records.

    With a ``path`` the rows are written in chunks as they arrive; without
    one they are kept in memory and returned by ``to_frame``.

    Parameters
    ----------
    content_length : int
        Number of per-position quality columns.
    path : PathLike or str, optional
        TSV file to stream rows into. The header is written immediately.
    chunk_size : int, default 10000
        Rows buffered between writes.
    """

    def __init__(
        self,
        content_length: int,
        path: Optional[Union[PathLike, str]] = None,
        chunk_size: int = 10000,
    ):
        self.columns = read_report_columns(content_length)
        self._path = Path(path) if path is not None else None
        self._chunk_size = chunk_size
        self._rows: List[list] = []
        self.n_rows = 0

        if self._path is not None:
            pd.DataFrame(columns=self.columns).to_csv(self._path, sep="\t", index=False)

    def add(self, record: ExtractedRecord) -> None:
        self._rows.append(record.read_report_row())
        self.n_rows += 1
        if self._path is not None and len(self._rows) >= self._chunk_size:
            self.flush()

    def flush(self) -> None:
        if self._path is None or not self._rows:
            return
        chunk = pd.DataFrame(self._rows, columns=self.columns)
        chunk.to_csv(self._path, sep="\t", index=False, header=False, mode="a")
        self._rows = []

    def close(self) -> None:
        self.flush()
        if self._path is not None:
            logger.debug(f"Wrote {self.n_rows:,} rows to {self._path}")

    def to_frame(self) -> pd.DataFrame:
        if self._path is not None:
            raise ValueError("Rows were streamed to disk; read the report file instead")
        return pd.DataFrame(self._rows, columns=self.columns)
