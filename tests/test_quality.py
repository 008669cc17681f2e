"""
Unit tests for quality aggregation.
"""

import numpy as np
import pytest

from read_filter.match import ExtractedRecord
from read_filter.quality import QualityLengthError, QualStats


def _record(phred, start_pos=44, reverse=False, seq=None):
    quality = bytes(q + 33 for q in phred)
    return ExtractedRecord(
        seq=seq or b"A" * len(phred),
        quality=quality,
        reverse_strand=reverse,
        start_pos=start_pos,
    )


class TestQualStats:
    """Test cases for QualStats."""

    def test_known_quality(self):
        record = ExtractedRecord(b"ACG", bytes([53, 53, 53]), False, 10)
        assert record.peak_qual() == 20
        assert record.mean_qual() == 20

        qs = QualStats()
        qs.append(record)
        rows = qs.emit()

        assert len(rows) == 1
        row = rows[0]
        assert (row.start_pos, row.peak_qual, row.mean_qual) == (10, 20, 20)
        assert row.reads == 1
        assert row.reverse_reads == 0
        np.testing.assert_allclose(row.mean_quality, [20.0, 20.0, 20.0])

    def test_same_bucket_accumulates(self):
        qs = QualStats()
        qs.append(_record([20, 20, 20]))
        qs.append(_record([20, 22, 20], reverse=True))

        assert len(qs) == 1
        row = qs.emit()[0]
        assert row.reads == 2
        assert row.reverse_reads == 1
        np.testing.assert_allclose(row.mean_quality, [20.0, 21.0, 20.0])

    def test_new_reverse_bucket(self):
        qs = QualStats()
        qs.append(_record([30, 30], reverse=True))
        assert qs.emit()[0].reverse_reads == 1

    def test_descending_order(self):
        qs = QualStats()
        qs.append(_record([20, 20], start_pos=44))
        qs.append(_record([40, 40], start_pos=10))
        qs.append(_record([30, 30], start_pos=44))
        qs.append(_record([20, 40], start_pos=44))

        keys = [(r.start_pos, r.peak_qual, r.mean_qual) for r in qs.emit()]
        assert keys == [(44, 30, 30), (44, 20, 30), (44, 20, 20), (10, 40, 40)]

    def test_order_independent(self):
        a = _record([20, 25, 30], start_pos=44)
        b = _record([35, 35, 35], start_pos=40, reverse=True)
        c = _record([20, 25, 31], start_pos=44)

        qs1 = QualStats()
        for record in (a, b, c):
            qs1.append(record)
        qs2 = QualStats()
        for record in (c, b, a):
            qs2.append(record)

        assert qs1.to_frame(3).equals(qs2.to_frame(3))

    def test_length_mismatch(self):
        qs = QualStats()
        qs.append(_record([20, 20, 20]))
        with pytest.raises(QualityLengthError):
            qs.append(_record([20, 20]))

    def test_sums_widened(self):
        qs = QualStats()
        record = _record([40] * 5)
        for _ in range(1000):
            qs.append(record)

        row = qs.emit()[0]
        assert row.reads == 1000
        np.testing.assert_allclose(row.mean_quality, [40.0] * 5)

    def test_empty(self):
        qs = QualStats()
        assert qs.emit() == []
        df = qs.to_frame(2)
        assert len(df) == 0
        assert list(df.columns)[-1] == "qual_pos_1"

    def test_to_frame(self):
        qs = QualStats()
        qs.append(_record([20, 30]))
        qs.append(_record([20, 40], start_pos=12))

        df = qs.to_frame(2)
        assert list(df.columns) == [
            "dist_start", "peak_qual", "mean_qual", "reads", "reverse_reads",
            "qual_pos_0", "qual_pos_1",
        ]
        assert df["dist_start"].tolist() == [44, 12]
        assert df.loc[1, "mean_qual"] == 30
        assert df.loc[0, "qual_pos_1"] == pytest.approx(30.0)
