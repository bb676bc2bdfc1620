"""Tests for the analyzer — staleness rule, labels, ordering, scan."""

from __future__ import annotations

from datetime import timedelta

import pytest

from secretsweep.core.analyzer import NEVER, RECENCY_THRESHOLD, analyze, rank, scan
from secretsweep.source.base import SourceError


class TestStaleness:
    def test_old_access_is_stale(self, make_record, now):
        results = analyze([make_record("old", accessed_days_ago=30)], False, now=now)
        assert results[0].stale is True
        assert results[0].age == timedelta(days=30)

    def test_recent_access_is_fresh(self, make_record, now):
        results = analyze([make_record("fresh", accessed_days_ago=2)], False, now=now)
        assert results[0].stale is False

    def test_exactly_threshold_is_not_stale(self, make_record, now):
        """Staleness requires the age to exceed the threshold."""
        results = analyze([make_record("edge", accessed_days_ago=14)], False, now=now)
        assert results[0].age == RECENCY_THRESHOLD
        assert results[0].stale is False

    def test_never_accessed_uses_creation_age(self, make_record, now):
        record = make_record("unused", created_days_ago=40)
        result = analyze([record], False, now=now)[0]
        assert result.age == now - record.created_at
        assert result.stale is True

    def test_never_accessed_recently_created_is_fresh(self, make_record, now):
        result = analyze([make_record("new", created_days_ago=3)], False, now=now)[0]
        assert result.stale is False

    def test_custom_threshold(self, make_record, now):
        records = [make_record("a", accessed_days_ago=5)]
        assert analyze(records, True, threshold=timedelta(days=3), now=now)
        assert not analyze(records, True, now=now)


class TestLabels:
    def test_never_label(self, make_record, now):
        result = analyze([make_record("unused")], False, now=now)[0]
        assert result.last_accessed_label == NEVER == "Never"

    def test_date_label(self, make_record, now):
        result = analyze([make_record("a", accessed_days_ago=1)], False, now=now)[0]
        assert result.last_accessed_label == "2026-05-31"

    def test_description_carried(self, make_record, now):
        result = analyze([make_record("a", description="db password")], False, now=now)[0]
        assert result.description == "db password"


class TestRecencyFilter:
    @pytest.mark.parametrize(
        "offsets",
        [
            [],
            [1, 2, 3],
            [30, 60, None],
            [None, 1, 15, 14, 100],
        ],
    )
    def test_filtered_is_subset_of_unfiltered(self, make_record, now, offsets):
        records = [make_record(f"s{i}", accessed_days_ago=o) for i, o in enumerate(offsets)]
        filtered = {r.name for r in analyze(records, True, now=now)}
        unfiltered = {r.name for r in analyze(records, False, now=now)}
        assert filtered <= unfiltered
        assert len(unfiltered) == len(records)

    def test_filter_keeps_only_stale(self, make_record, now):
        records = [
            make_record("stale", accessed_days_ago=20),
            make_record("fresh", accessed_days_ago=1),
            make_record("never"),
        ]
        names = [r.name for r in analyze(records, True, now=now)]
        assert names == ["stale", "never"]

    def test_preserves_upstream_order(self, make_record, now):
        records = [make_record(n, accessed_days_ago=d) for n, d in [("c", 20), ("a", 90), ("b", 40)]]
        assert [r.name for r in analyze(records, False, now=now)] == ["c", "a", "b"]

    def test_propagates_source_errors(self, make_record, now):
        def records():
            yield make_record("a", accessed_days_ago=20)
            raise SourceError("list_secrets", "ExpiredTokenException")

        with pytest.raises(SourceError, match="ExpiredTokenException"):
            analyze(records(), True, now=now)


class TestRank:
    def test_oldest_access_first_never_last(self, make_record, now):
        records = [
            make_record("never-new", created_days_ago=20),
            make_record("recent", accessed_days_ago=15),
            make_record("never-old", created_days_ago=200),
            make_record("ancient", accessed_days_ago=90),
        ]
        ranked = rank(analyze(records, False, now=now))
        assert [r.name for r in ranked] == ["ancient", "recent", "never-old", "never-new"]


class TestScan:
    def test_scan_reads_source(self, fake_source, make_record, now):
        source = fake_source([make_record("a", accessed_days_ago=30), make_record("b", accessed_days_ago=1)])
        assert [r.name for r in scan(source, True, now=now)] == ["a"]
        assert [r.name for r in scan(source, False, now=now)] == ["a", "b"]

    def test_scan_sorted(self, fake_source, make_record, now):
        source = fake_source(
            [make_record("newer", accessed_days_ago=20), make_record("older", accessed_days_ago=60)]
        )
        results = scan(source, False, sort_oldest_first=True, now=now)
        assert [r.name for r in results] == ["older", "newer"]

    def test_scan_failure_propagates(self, fake_source):
        source = fake_source(list_error=SourceError("list_secrets", "AccessDenied"))
        with pytest.raises(SourceError):
            scan(source, True)
