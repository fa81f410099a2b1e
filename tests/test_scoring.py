"""Tests for the NPS scoring engine and reporting service."""

from datetime import datetime, timezone

import pytest

from app.domains.response.models import NpsResponse
from app.domains.response.schemas import ResponseFilter
from app.domains.scoring import engine
from app.domains.scoring.schemas import BreakdownDimension, Classification, TrendDirection


def _response(score: int, created_at: str = "2026-03-01T10:00:00Z", **fields) -> NpsResponse:
    return NpsResponse(
        id=fields.pop("id", f"nps_{score}_{created_at}"),
        score=score,
        created_at=created_at,
        **fields,
    )


# ---------------------------------------------------------------------------
# classify / calculate
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "score,expected",
    [
        (0, Classification.DETRACTOR),
        (6, Classification.DETRACTOR),
        (7, Classification.PASSIVE),
        (8, Classification.PASSIVE),
        (9, Classification.PROMOTER),
        (10, Classification.PROMOTER),
    ],
)
def test_classify_bands(score, expected):
    assert engine.classify(score) == expected


def test_calculate_empty_is_all_zero():
    result = engine.calculate([])

    assert result.score == 0
    assert result.total == 0
    assert result.promoters == result.passives == result.detractors == 0
    assert result.promoter_pct == result.passive_pct == result.detractor_pct == 0


def test_calculate_mixed_set():
    responses = [_response(s, id=f"r{i}") for i, s in enumerate([10, 9, 8, 3])]

    result = engine.calculate(responses)

    assert result.total == 4
    assert (result.promoters, result.passives, result.detractors) == (2, 1, 1)
    assert result.promoter_pct == 50.0
    assert result.passive_pct == 25.0
    assert result.detractor_pct == 25.0
    assert result.score == 25


def test_calculate_rounds_percentages_half_up():
    # 1 of 3: 33.333 -> 33.3, 2 of 3: 66.667 -> 66.7
    responses = [_response(s, id=f"r{i}") for i, s in enumerate([9, 0, 0])]

    result = engine.calculate(responses)

    assert result.promoter_pct == 33.3
    assert result.detractor_pct == 66.7
    assert result.score == -33


def test_calculate_counts_always_sum_to_total():
    scores = [0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 10, 9, 7]
    result = engine.calculate(_response(s, id=f"r{i}") for i, s in enumerate(scores))

    assert result.promoters + result.passives + result.detractors == result.total
    assert -100 <= result.score <= 100


def test_calculate_extremes():
    assert engine.calculate([_response(10, id="a"), _response(9, id="b")]).score == 100
    assert engine.calculate([_response(0, id="a"), _response(6, id="b")]).score == -100


# ---------------------------------------------------------------------------
# trend / breakdown
# ---------------------------------------------------------------------------


def test_month_windows_cross_year_boundary():
    now = datetime(2026, 2, 10, tzinfo=timezone.utc)

    windows = engine.month_windows(3, now)

    assert [start.isoformat() for start, _ in windows] == [
        "2025-12-01",
        "2026-01-01",
        "2026-02-01",
    ]
    assert windows[-1][1].isoformat() == "2026-02-28"


def test_trend_includes_last_day_of_month():
    now = datetime(2026, 3, 15, tzinfo=timezone.utc)
    responses = [
        _response(10, "2026-02-28T23:30:00Z", id="late-feb"),
        _response(0, "2026-03-02T08:00:00Z", id="early-mar"),
    ]

    points = engine.trend(responses, 2, now)

    assert [p.month for p in points] == ["2026-02-01", "2026-03-01"]
    assert points[0].label == "Feb 2026"
    assert points[0].total == 1
    assert points[0].score == 100
    assert points[1].score == -100


def test_trend_empty_months_are_zero():
    now = datetime(2026, 3, 15, tzinfo=timezone.utc)

    points = engine.trend([], 6, now)

    assert len(points) == 6
    assert all(p.total == 0 and p.score == 0 for p in points)


def test_breakdown_by_agent_sorted_by_score():
    responses = [
        _response(3, id="r1", agent_id="A1"),
        _response(10, id="r2", agent_id="A2"),
        _response(9, id="r3", agent_id="A2"),
        _response(8, id="r4", agent_id=""),
    ]

    items = engine.breakdown(responses, BreakdownDimension.AGENT)

    assert [item.key for item in items] == ["A2", "unassigned", "A1"]
    assert items[0].total == 2
    assert items[0].dimension == BreakdownDimension.AGENT


def test_breakdown_missing_category_is_uncategorized():
    items = engine.breakdown([_response(9, id="r1")], BreakdownDimension.CATEGORY)

    assert items[0].key == "uncategorized"


# ---------------------------------------------------------------------------
# ScoringService
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_widget_trend_up(services, clock):
    # Last month: one detractor. This month: two promoters.
    await services.responses.save({"score": 0, "created_at": "2026-02-10T10:00:00Z", "id": "old"})
    await services.responses.save({"score": 10})
    await services.responses.save({"score": 9})

    widget = await services.scoring.widget()

    assert widget.previous_score == -100
    assert widget.score == 33
    assert widget.trend == TrendDirection.UP
    assert widget.enabled is True


@pytest.mark.asyncio
async def test_widget_without_responses_is_stable(services):
    widget = await services.scoring.widget()

    assert widget.score == 0
    assert widget.previous_score == 0
    assert widget.trend == TrendDirection.STABLE


@pytest.mark.asyncio
async def test_contact_history_limits_to_ten(services, clock):
    for score in range(11):
        clock.advance(minutes=1)
        await services.responses.save({"contact_id": "C1", "score": score})
    await services.responses.save({"contact_id": "C2", "score": 10})

    history = await services.scoring.contact_history("C1")

    assert len(history.responses) == 10
    assert history.responses[0].score == 10
    assert history.nps.total == 11


@pytest.mark.asyncio
async def test_score_with_filters(services):
    await services.responses.save({"agent_id": "A1", "score": 10})
    await services.responses.save({"agent_id": "A2", "score": 0})

    result = await services.scoring.score()
    assert result.total == 2

    filtered = await services.scoring.score(ResponseFilter(agent_id="A1"))
    assert filtered.total == 1
    assert filtered.score == 100
