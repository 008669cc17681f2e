"""
Unit tests for the content count database.
"""

from read_filter.read_db import ReadDB


class TestReadDB:
    """Test cases for ReadDB."""

    def test_increment(self):
        db = ReadDB(sample_list=["Sample1"])
        db.increment_count("ACGTACGT", "Sample1")
        db.increment_count("ACGTACGT", "Sample1")

        assert db.get_count("ACGTACGT", "Sample1") == 2
        assert db.counts().loc["ACGTACGT", "Sample1"] == 2

    def test_missing_count_is_zero(self):
        db = ReadDB()
        assert db.get_count("ACGT", "Sample1") == 0

    def test_counts_ordering(self):
        db = ReadDB(sample_list=["A", "B"])
        db.increment_count("TTTT", "A")
        db.increment_count("CCCC", "A", count=3)
        db.increment_count("AAAA", "B")
        db.increment_count("GGGG", "B", count=3)

        df = db.counts()
        assert df.index.tolist() == ["CCCC", "GGGG", "AAAA", "TTTT"]
        assert df.columns.tolist() == ["A", "B"]
        assert df.loc["GGGG", "A"] == 0
        assert df.index.name == "seq"

    def test_empty_sample_kept(self):
        db = ReadDB(sample_list=["A", "B"])
        db.increment_count("ACGT", "A")
        assert db.counts().columns.tolist() == ["A", "B"]

    def test_empty(self):
        db = ReadDB(sample_list=["A"])
        df = db.counts()
        assert df.empty
        assert df.columns.tolist() == ["A"]

    def test_summary_properties(self):
        db = ReadDB()
        db.increment_count("ACGT", "A", count=5)
        db.increment_count("ACGA", "B")

        assert db.n_features == 2
        assert db.n_samples == 2
        assert db.total_counts == 6
