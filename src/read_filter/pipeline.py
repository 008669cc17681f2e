"""
FASTQ filtering pipeline and command-line interface.

Runs the anchored read filter over one or more FASTQ files, collects
content counts and optional quality summaries, and serializes results.
"""

import argparse
import logging
import sys
from os import PathLike
from pathlib import Path
from typing import Dict, List, Literal, Optional, Sequence, Union

import pandas as pd

from .config import ConfigError, FilterConfig, load_json_config
from .constants import (
    EXCEL_ENDING,
    FASTQ_ENDING,
    FASTQ_SUFFIXES,
    PROCESSED_ENDING,
    QUALITY_ENDING,
    READ_REPORT_ENDING,
)
from .fastq import iter_fastq
from .output import ReadReport, write_excel, write_processed, write_quality_report
from .quality import QualStats
from .read_db import ReadDB
from .read_filter import ReadFilter, RunningStats

logger = logging.getLogger(__name__)


def output_name(fastq_fn: Union[PathLike, str], ending: str) -> str:
    """
    Output file name for an input FASTQ.

    Examples
    --------
    >>> output_name('/data/sample_A.fastq.gz', '.processed.tsv')
    'sample_A.processed.tsv'
    """
    name = Path(fastq_fn).name
    for suffix in FASTQ_SUFFIXES:
        if name.endswith(suffix):
            return name[:-len(suffix)] + ending
    return name + ending


class FilterFASTQ:
    """
    Anchored content extraction over a set of FASTQ files.

    Files are processed one after another. Each gets its own counters,
    count table and optional reports.

    Parameters
    ----------
    fastq_files : list of PathLike or str
        Input FASTQ files (plain, gzip, bzip2 or xz).
    config : FilterConfig
        Flanks, window and quality thresholds.
    results_path : PathLike or str
        Output directory, created if missing.
    read_report : bool, default False
        Also write one line per accepted read.
    qc_report : bool, default False
        Also aggregate and write quality buckets.
    write_fastq : bool, default False
        Also write accepted contents as FASTQ in pattern orientation.
    format : {'tsv', 'excel'}, default 'tsv'
        Table format of the serialized results.

    Attributes
    ----------
    stats : dict of str -> RunningStats
        Counters per sample after ``read()``.
    merged_counts_df : pd.DataFrame
        Content x sample count matrix after ``read()``.

    Examples
    --------
    >>> config = load_json_config('filter.json')
    >>> runner = FilterFASTQ(['/data/A.fastq.gz'], config, '/results', qc_report=True)
    >>> runner.read()
    >>> runner.serialize()
    """

    def __init__(
        self,
        fastq_files: Sequence[Union[PathLike, str]],
        config: FilterConfig,
        results_path: Union[PathLike, str],
        read_report: bool = False,
        qc_report: bool = False,
        write_fastq: bool = False,
        format: Literal['tsv', 'excel'] = 'tsv',
    ):
        if format not in ('tsv', 'excel'):
            raise ValueError(f"Unknown output format: {format}")

        self.config = config
        self._read_report = read_report
        self._qc_report = qc_report
        self._write_fastq = write_fastq
        self._format = format

        self._fastq_files = [Path(f) for f in fastq_files]
        if not self._fastq_files:
            raise ValueError("At least one FASTQ file must be provided")
        for fastq_fn in self._fastq_files:
            if not fastq_fn.is_file():
                raise FileNotFoundError(f"FASTQ file does not exist: {fastq_fn}")

        self._results_path = Path(results_path)
        self._results_path.mkdir(parents=True, exist_ok=True)

        # Sample name per input, made unique if basenames collide
        self._samples: Dict[Path, str] = {}
        for fastq_fn in self._fastq_files:
            sample = output_name(fastq_fn, "")
            while sample in self._samples.values():
                sample += "_dup"
            self._samples[fastq_fn] = sample

        self._read_db = ReadDB(sample_list=list(self._samples.values()))
        self.stats: Dict[str, RunningStats] = {}
        self.quality: Dict[str, QualStats] = {}
        self._read_report_frames: Dict[str, pd.DataFrame] = {}
        self.merged_counts_df = pd.DataFrame()

    def _outpath(self, sample: str, ending: str) -> Path:
        return self._results_path / (sample + ending)

    def read(self) -> None:
        """Filter every input and accumulate counts."""
        logger.info(f"Processing {len(self._fastq_files)} FASTQ files...")
        logger.info(f"Filter: {self.config.filter_regex()}")

        for fastq_fn in self._fastq_files:
            self._read_one(fastq_fn)

        self.merged_counts_df = self._read_db.counts()
        logger.info(
            f"Merged counts: {self.merged_counts_df.shape[0]} sequences x "
            f"{self.merged_counts_df.shape[1]} samples"
        )

    def _read_one(self, fastq_fn: Path) -> None:
        sample = self._samples[fastq_fn]
        stats = RunningStats()
        qual_stats = QualStats() if self._qc_report else None

        report = None
        if self._read_report:
            report_path = None
            if self._format == 'tsv':
                report_path = self._outpath(sample, READ_REPORT_ENDING)
            report = ReadReport(self.config.content_length, path=report_path)

        fastq_out = None
        if self._write_fastq:
            fastq_out = open(self._outpath(sample, FASTQ_ENDING), "wb")

        read_filter = ReadFilter(iter_fastq(fastq_fn), self.config, stats, sample=sample)
        try:
            for record in read_filter:
                self._read_db.increment_count(record.seq.decode("ascii"), sample)
                if qual_stats is not None:
                    qual_stats.append(record)
                if report is not None:
                    report.add(record)
                if fastq_out is not None:
                    fastq_out.write(record.to_fastq(record.read_id))
        finally:
            if report is not None:
                report.close()
            if fastq_out is not None:
                fastq_out.close()

        if read_filter.decode_failures:
            logger.warning(f"{sample}: skipped {read_filter.decode_failures:,} malformed records")

        self.stats[sample] = stats
        if qual_stats is not None:
            self.quality[sample] = qual_stats
        if report is not None and self._format == 'excel':
            self._read_report_frames[sample] = report.to_frame()

        logger.info(
            f"{sample}: Complete - {stats.total_reads:,} reads, "
            f"{stats.matching_reads:,} matching, {stats.quality_reads:,} passed quality"
        )

    def sample_counts(self, sample: str) -> pd.DataFrame:
        """Non-zero counts of a single sample."""
        counts = self.merged_counts_df[[sample]]
        return counts[counts[sample] > 0]

    def serialize(self) -> None:
        """Save count tables and requested reports to the results directory."""
        for sample, stats in self.stats.items():
            counts = self.sample_counts(sample)
            quality_df = None
            if sample in self.quality:
                quality_df = self.quality[sample].to_frame(self.config.content_length)

            if self._format == 'excel':
                write_excel(
                    self._outpath(sample, EXCEL_ENDING),
                    self.config,
                    stats,
                    counts,
                    read_report=self._read_report_frames.get(sample),
                    quality=quality_df,
                )
            else:
                write_processed(self._outpath(sample, PROCESSED_ENDING), self.config, stats, counts)
                if quality_df is not None:
                    write_quality_report(self._outpath(sample, QUALITY_ENDING), quality_df)

        if len(self.stats) > 1:
            if self._format == 'excel':
                self.merged_counts_df.to_excel(self._results_path / 'merged_counts.xlsx')
            else:
                self.merged_counts_df.to_csv(self._results_path / 'merged_counts.tsv', sep="\t")

        logger.info(f"Results saved to {self._results_path}")

    def print_summary(self) -> None:
        """Print a summary of the filtered data."""
        print(f"Filter: {self.config.filter_regex()}")
        print(f"Input files: {len(self._fastq_files)}")
        for sample, stats in self.stats.items():
            print(
                f"{sample}: {stats.total_reads:,} total, {stats.matching_reads:,} matching, "
                f"{stats.ambiguous_rejected:,} ambiguous, {stats.peak_rejected:,} peak rejected, "
                f"{stats.mean_rejected:,} mean rejected, {stats.quality_reads:,} quality reads"
            )
        if len(self.merged_counts_df) > 0:
            print(f"Distinct sequences: {self.merged_counts_df.shape[0]:,}")


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line interface for FilterFASTQ."""
    parser = argparse.ArgumentParser(
        prog='read-filter',
        description='Read filter for amplicon sequencing with a defined region',
    )

    parser.add_argument(
        '-c', '--config',
        required=True,
        help='Path to JSON filter configuration',
    )
    parser.add_argument(
        'inputs',
        nargs='+',
        metavar='INPUT',
        help='FASTQ file(s) to filter (plain, gzip, bzip2 or xz)',
    )
    parser.add_argument(
        'output',
        metavar='OUTPUT',
        help='Path to output directory',
    )
    parser.add_argument(
        '-r', '--read-report',
        action='store_true',
        help='Also output a table with QC information for each read',
    )
    parser.add_argument(
        '-q', '--qc-report',
        action='store_true',
        help='Also output a table with overall QC information',
    )
    parser.add_argument(
        '--fastq',
        action='store_true',
        help='Also output accepted contents as FASTQ',
    )
    parser.add_argument(
        '--format',
        choices=['tsv', 'excel'],
        default='tsv',
        help='Output format',
    )
    parser.add_argument(
        '-d', '--debug',
        action='count',
        default=0,
        help='Enable debug logging',
    )

    args = parser.parse_args(argv)

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    try:
        config = load_json_config(args.config)
        runner = FilterFASTQ(
            fastq_files=args.inputs,
            config=config,
            results_path=args.output,
            read_report=args.read_report,
            qc_report=args.qc_report,
            write_fastq=args.fastq,
            format=args.format,
        )
    except (ConfigError, FileNotFoundError) as e:
        logger.error(str(e))
        return 1

    runner.read()
    runner.serialize()
    runner.print_summary()
    return 0


if __name__ == '__main__':
    sys.exit(main())
