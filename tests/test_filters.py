"""Tests for structural search filters."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from chronicle.domains.search.filters import RecencyWindow, compose_filters, cutoff_for


NOW = datetime(2024, 6, 30, 12, 0, tzinfo=timezone.utc)


@pytest.mark.unit
@pytest.mark.parametrize(
    ("window", "days"),
    [(RecencyWindow.WEEK, 7), (RecencyWindow.MONTH, 30), (RecencyWindow.YEAR, 365), ("week", 7)],
)
def test_cutoff_is_now_minus_window(window, days: int) -> None:
    assert cutoff_for(window, NOW) == NOW - timedelta(days=days)


@pytest.mark.unit
def test_no_window_means_no_cutoff() -> None:
    assert cutoff_for(None, NOW) is None


@pytest.mark.unit
def test_published_predicates_are_always_present() -> None:
    predicates = compose_filters()

    rendered = [str(predicate) for predicate in predicates]
    assert len(predicates) == 2
    assert any("published_at IS NOT NULL" in text for text in rendered)


@pytest.mark.unit
def test_author_and_recency_add_one_predicate_each() -> None:
    predicates = compose_filters("writer", RecencyWindow.MONTH, NOW)

    rendered = " AND ".join(str(predicate) for predicate in predicates)
    assert len(predicates) == 4
    assert "users.username" in rendered
    assert "posts.published_at >=" in rendered


@pytest.mark.unit
def test_recency_requires_a_clock() -> None:
    with pytest.raises(ValueError):
        compose_filters(recency=RecencyWindow.WEEK)


@pytest.mark.unit
def test_unknown_window_is_rejected() -> None:
    with pytest.raises(ValueError):
        RecencyWindow("decade")
