"""Tests for run statistics and formatting helpers."""

import math

import pytest

from src2llm.core.models import PackageBundle
from src2llm.core.stats import (
    compute_stats,
    estimate_tokens,
    format_bytes,
    format_number,
    total_source_size,
)


class TestEstimateTokens:
    """Test the character-count heuristic."""

    @pytest.mark.parametrize("length", [0, 1, 3, 4, 7, 8, 100, 1001])
    def test_ceiling_of_length(self, length):
        text = "x" * length
        assert estimate_tokens(text) == math.ceil(length / 3.5)

    def test_counts_code_points(self):
        """Non-ASCII characters count once each."""
        assert estimate_tokens("日本語日本語日") == 2
        assert estimate_tokens("日本語日本語日") == estimate_tokens("abcdefg")


class TestComputeStats:
    """Test aggregate statistics for a bundle."""

    def test_stats(self):
        bundle = PackageBundle.from_dict({
            "p": {"a.ts": "abc", "b.ts": "é"},
            "q": {"c.ts": ""},
        })
        encoded = "e" * 10
        stats = compute_stats(bundle, encoded, output_file_size=12)

        assert stats.total_files == 3
        assert stats.total_source_size == 5
        assert stats.output_file_size == 12
        assert stats.estimated_tokens == 3

    def test_total_source_size_in_bytes(self):
        bundle = PackageBundle.from_dict({"p": {"a.ts": "€"}})
        assert total_source_size(bundle) == 3

    def test_empty_bundle(self):
        stats = compute_stats(PackageBundle(), "{}", 2)
        assert stats.total_files == 0
        assert stats.total_source_size == 0
        assert stats.estimated_tokens == 1


class TestFormatting:
    """Test human readable output helpers."""

    @pytest.mark.parametrize("size,expected", [
        (0, "0 Bytes"),
        (1, "1 Bytes"),
        (512, "512 Bytes"),
        (1023, "1023 Bytes"),
        (1024, "1 KB"),
        (1536, "1.5 KB"),
        (1024 * 1024, "1 MB"),
        (int(2.25 * 1024 ** 3), "2.25 GB"),
        (5 * 1024 ** 4, "5120 GB"),
    ])
    def test_format_bytes(self, size, expected):
        assert format_bytes(size) == expected

    @pytest.mark.parametrize("value,expected", [
        (0, "0"),
        (999, "999"),
        (1000, "1,000"),
        (1234567, "1,234,567"),
    ])
    def test_format_number(self, value, expected):
        assert format_number(value) == expected
