"""
Unit tests for report serialization.
"""

import pandas as pd

from read_filter.match import ExtractedRecord
from read_filter.output import (
    ReadReport,
    config_header,
    read_report_columns,
    stats_header,
    write_excel,
    write_processed,
)
from read_filter.read_db import ReadDB
from read_filter.read_filter import RunningStats


def _stats():
    return RunningStats(
        total_reads=100,
        matching_reads=60,
        ambiguous_rejected=3,
        peak_rejected=10,
        mean_rejected=5,
    )


def test_config_header(config):
    assert config_header(config) == (
        "# filter: ^.{28,44}AGAGAGGC([ACGT]{21})GCCCAGGC.*$\n"
        "# accepted_peak_qual: 0\n"
        "# accepted_mean_qual: 0\n"
    )


def test_stats_header():
    assert stats_header(_stats()) == (
        "# raw_total_reads: 100\n"
        "# matching_reads: 60\n"
        "# peak_qual_rejected_reads: 10\n"
        "# mean_qual_rejected_reads: 5\n"
        "# ambiguous_matches_rejected: 3\n"
        "# quality_reads: 45\n"
    )


def test_read_report_columns():
    assert read_report_columns(2) == [
        "read", "dist_start", "reversed", "peak_qual", "mean_qual", "qual_pos_0", "qual_pos_1",
    ]


def test_write_processed(tmp_path, config):
    db = ReadDB(sample_list=["sample"])
    db.increment_count("ACGT", "sample", count=4)
    db.increment_count("TTTT", "sample")
    path = tmp_path / "sample.processed.tsv"

    write_processed(path, config, _stats(), db.counts())

    lines = path.read_text().splitlines()
    assert lines[0].startswith("# filter: ")
    assert lines[8] == "# quality_reads: 45"
    assert lines[9:] == ["seq\treads", "ACGT\t4", "TTTT\t1"]

    df = pd.read_csv(path, sep="\t", comment="#")
    assert df["reads"].sum() == 5


def test_write_processed_empty(tmp_path, config):
    path = tmp_path / "empty.processed.tsv"
    write_processed(path, config, RunningStats(), ReadDB(sample_list=["empty"]).counts())
    assert path.read_text().splitlines()[-1] == "seq\treads"


def test_write_excel(tmp_path, config):
    db = ReadDB(sample_list=["sample"])
    db.increment_count("ACGT", "sample", count=2)
    path = tmp_path / "sample.processed.xlsx"

    write_excel(path, config, _stats(), db.counts())

    counts = pd.read_excel(path, sheet_name="counts")
    assert counts.to_dict("list") == {"seq": ["ACGT"], "reads": [2]}
    summary = pd.read_excel(path, sheet_name="summary")
    assert summary.set_index("key").loc["ambiguous_matches_rejected", "value"] == 3


class TestReadReport:
    """Test cases for ReadReport."""

    def setup_method(self):
        self.records = [
            ExtractedRecord(b"AC", bytes([53, 63]), False, 44, "r1"),
            ExtractedRecord(b"GT", bytes([73, 73]), True, 40, "r2"),
            ExtractedRecord(b"TT", bytes([43, 53]), False, 44, "r3"),
        ]

    def test_streamed(self, tmp_path):
        path = tmp_path / "sample.readreport.tsv"
        report = ReadReport(2, path=path, chunk_size=2)
        for record in self.records:
            report.add(record)
        report.close()

        df = pd.read_csv(path, sep="\t")
        assert len(df) == 3
        assert report.n_rows == 3
        assert df["read"].tolist() == ["AC", "GT", "TT"]
        assert df["reversed"].tolist() == [False, True, False]
        assert df["qual_pos_1"].tolist() == [30, 40, 20]
        assert df.loc[0, "mean_qual"] == 25.0

    def test_header_written_without_rows(self, tmp_path):
        path = tmp_path / "empty.readreport.tsv"
        ReadReport(1, path=path).close()
        assert path.read_text().strip() == "read\tdist_start\treversed\tpeak_qual\tmean_qual\tqual_pos_0"

    def test_in_memory(self):
        report = ReadReport(2)
        for record in self.records:
            report.add(record)

        df = report.to_frame()
        assert df.shape == (3, 7)
        assert df["dist_start"].tolist() == [44, 40, 44]
