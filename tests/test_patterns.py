"""
Unit tests for the precomputed pattern index.
"""

import dataclasses

import pytest

from read_filter.patterns import PatternIndex
from read_filter.sequence import PatternLengthError


def test_derived_fields(config):
    patterns = PatternIndex.from_config(config)

    assert patterns.start_len == 8
    assert patterns.end_len == 8
    assert patterns.content_len == 21
    assert patterns.total_len == 37
    assert patterns.fwd_dist == 29
    assert patterns.rev_dist == 29
    assert patterns.expt_begin == 28
    assert patterns.expt_end == 44


def test_patterns(config):
    patterns = PatternIndex.from_config(config)

    assert patterns.fwd_start.pattern == b"AGAGAGGC"
    assert patterns.fwd_end == b"GCCCAGGC"
    assert patterns.rev_start == b"GCCTCTCT"
    assert patterns.rev_end.pattern == b"GCCTGGGC"


def test_asymmetric_flanks():
    patterns = PatternIndex.build("AAAC", "GGGTTT", 10, expected_start=0, tolerance=0)

    assert patterns.fwd_dist == 14
    assert patterns.rev_dist == 16
    assert patterns.total_len == 20


def test_window_saturates():
    patterns = PatternIndex.build("AGAGAGGC", "GCCCAGGC", 21, expected_start=3, tolerance=10)
    assert patterns.expt_begin == 0
    assert patterns.expt_end == 13


def test_immutable(config):
    patterns = PatternIndex.from_config(config)
    with pytest.raises(dataclasses.FrozenInstanceError):
        patterns.expt_end = 100


def test_flank_too_long():
    with pytest.raises(PatternLengthError):
        PatternIndex.build("A" * 65, "GCCCAGGC", 21, expected_start=36, tolerance=8)
