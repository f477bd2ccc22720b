"""
Unit tests for data models (FingerprintResult, CacheEntry, ValidationStats).
"""

import pytest

from blurest.models import CacheEntry, CacheOutcome, FingerprintResult, ValidationStats


class TestFingerprintResult:
    """Test FingerprintResult data class."""

    def test_to_dict(self):
        result = FingerprintResult("LEHV6nWB2yk8pyo0adR*.7kCMdnj", 800, 600)
        assert result.to_dict() == {
            'blurhash': "LEHV6nWB2yk8pyo0adR*.7kCMdnj",
            'width': 800,
            'height': 600,
        }

    def test_is_immutable(self):
        result = FingerprintResult("L00000fQfQfQfQfQfQfQfQfQfQfQ", 1, 1)
        with pytest.raises(AttributeError):
            result.width = 2

    def test_equality(self):
        assert FingerprintResult("x", 1, 2) == FingerprintResult("x", 1, 2)
        assert FingerprintResult("x", 1, 2) != FingerprintResult("x", 2, 1)


class TestCacheEntry:
    """Test CacheEntry data class."""

    def test_result(self):
        entry = CacheEntry(
            key="img/a.png",
            content_hash="00000000000000aa",
            modified_at_ms=1,
            blurhash="LEHV6nWB2yk8pyo0adR*.7kCMdnj",
            width=640,
            height=480,
        )
        assert entry.result == FingerprintResult("LEHV6nWB2yk8pyo0adR*.7kCMdnj", 640, 480)

    def test_store_fields_default_to_none(self):
        entry = CacheEntry("a.png", "ff", 1, "x", 1, 1)
        assert entry.id is None
        assert entry.created_at is None
        assert entry.updated_at is None


class TestValidationStats:
    """Test ValidationStats counters."""

    def test_empty(self):
        stats = ValidationStats()
        assert stats.total == 0
        assert stats.hit_rate == 0.0

    def test_record(self):
        stats = ValidationStats()
        for outcome in (CacheOutcome.HIT, CacheOutcome.HIT, CacheOutcome.REFRESHED,
                        CacheOutcome.RECOMPUTED, CacheOutcome.MISS):
            stats.record(outcome)
        assert (stats.hits, stats.refreshed, stats.recomputed, stats.misses) == (2, 1, 1, 1)
        assert stats.total == 5

    def test_hit_rate_counts_refreshed(self):
        stats = ValidationStats(hits=1, refreshed=2, recomputed=0, misses=1)
        assert stats.hit_rate == 75.0

    def test_to_dict(self):
        stats = ValidationStats(hits=1, refreshed=0, recomputed=1, misses=1)
        assert stats.to_dict() == {
            'hits': 1,
            'refreshed': 0,
            'recomputed': 1,
            'misses': 1,
            'total': 3,
            'hit_rate': 33.3,
        }

    def test_outcome_values(self):
        assert CacheOutcome('miss') is CacheOutcome.MISS
        assert CacheOutcome.HIT == 'hit'
