"""
Constants for anchored read filtering.

Contains the PHRED encoding offset, pattern limits and the file endings
used when writing per-input results.
"""

# Encoded quality bytes are PHRED + 33 (Sanger / Illumina 1.8+)
PHRED_OFFSET = 33

# Longest flank the exact matcher accepts
MAX_PATTERN_LENGTH = 64

# Content bases accepted in the output
DNA_ALPHABET = b"ACGT"

# Example amplicon flanks
DEFAULT_LEFT_FLANK = "AGAGAGGC"    # Upstream constant (5' of content)
DEFAULT_RIGHT_FLANK = "GCCCAGGC"   # Downstream constant (3' of content)

# Output file endings, appended to the input basename
PROCESSED_ENDING = ".processed.tsv"
READ_REPORT_ENDING = ".readreport.tsv"
QUALITY_ENDING = ".quality.tsv"
FASTQ_ENDING = ".extracted.fastq"
EXCEL_ENDING = ".processed.xlsx"

# Input suffixes stripped to obtain the basename
FASTQ_SUFFIXES = (".fastq.gz", ".fq.gz", ".txt.gz", ".fastq", ".fq")

# Log progress every N reads
PROGRESS_INTERVAL = 100000
