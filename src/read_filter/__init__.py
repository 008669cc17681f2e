"""
Read Filter - anchored content extraction for amplicon sequencing.

This package extracts a fixed-length content region flanked by two known
constant sequences from FASTQ reads, on either strand, within a tolerance
window around an expected position. Reads can be rejected on quality, and
the accepted contents are aggregated into count and quality reports.

Main Classes
------------
FilterFASTQ
    Run the filter over FASTQ files and serialize the results.

ReadFilter
    Streaming filter turning raw reads into extracted records.

PatternIndex
    Precomputed flank patterns and window for dual-strand matching.

QualStats
    Aggregate accepted reads by position and quality bucket.

ReadDB
    In-memory database for accumulating content counts.

Examples
--------
>>> from read_filter import FilterFASTQ, load_json_config
>>> config = load_json_config('/path/to/filter.json')
>>> runner = FilterFASTQ(
...     fastq_files=['/path/to/sample.fastq.gz'],
...     config=config,
...     results_path='/path/to/results',
...     qc_report=True,
... )
>>> runner.read()
>>> runner.serialize()
"""

from .config import ConfigError, FilterConfig, load_json_config
from .constants import (
    DEFAULT_LEFT_FLANK,
    DEFAULT_RIGHT_FLANK,
    MAX_PATTERN_LENGTH,
    PHRED_OFFSET,
)
from .fastq import FASTQParseError, FastqRecord, iter_fastq, open_fastq, read_fastq
from .match import CandidateMatch, ExtractedRecord
from .matching import match_both_strands
from .patterns import PatternIndex
from .pipeline import FilterFASTQ
from .quality import QualityLengthError, QualityRow, QualStats
from .read_db import ReadDB
from .read_filter import ReadFilter, RunningStats
from .sequence import ExactPattern, PatternLengthError, is_dna, reverse_complement

__all__ = [
    # Main classes
    "FilterFASTQ",
    "ReadFilter",
    "PatternIndex",
    "QualStats",
    "ReadDB",
    # Records and results
    "FastqRecord",
    "CandidateMatch",
    "ExtractedRecord",
    "RunningStats",
    "QualityRow",
    # Configuration
    "FilterConfig",
    "load_json_config",
    # Errors
    "ConfigError",
    "PatternLengthError",
    "FASTQParseError",
    "QualityLengthError",
    # Convenience functions
    "match_both_strands",
    "reverse_complement",
    "is_dna",
    "ExactPattern",
    "open_fastq",
    "read_fastq",
    "iter_fastq",
    # Constants
    "PHRED_OFFSET",
    "MAX_PATTERN_LENGTH",
    "DEFAULT_LEFT_FLANK",
    "DEFAULT_RIGHT_FLANK",
]

__version__ = "0.1.0"
