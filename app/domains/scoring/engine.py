"""Pure NPS arithmetic.

NPS = promoter% - detractor%, where promoters scored 9-10, passives 7-8
and detractors 0-6. The result ranges from -100 to 100.
"""

import calendar
from collections import defaultdict
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Sequence

from app.domains.response.models import NpsResponse
from app.domains.scoring.schemas import (
    BreakdownDimension,
    BreakdownItem,
    Classification,
    NpsResult,
    TrendPoint,
)

UNASSIGNED = "unassigned"
UNCATEGORIZED = "uncategorized"


def classify(score: int) -> Classification:
    """Classify a 0-10 score into its NPS band."""
    if score >= 9:
        return Classification.PROMOTER
    if score >= 7:
        return Classification.PASSIVE
    return Classification.DETRACTOR


def _round_half_up(value: Decimal, places: int = 0) -> Decimal:
    # Half away from zero, also for negative NPS values
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def _percentage(count: int, total: int) -> Decimal:
    return _round_half_up(Decimal(count) * 100 / Decimal(total), 1)


def calculate(responses: Iterable[NpsResponse]) -> NpsResult:
    """
    Calculate NPS metrics for a set of responses.

    Percentages are rounded to one decimal; the score is the difference of
    the rounded promoter and detractor percentages, rounded to an integer.
    An empty set gives all zeros.
    """
    counts = {band: 0 for band in Classification}
    total = 0
    for response in responses:
        counts[classify(response.score)] += 1
        total += 1

    if total == 0:
        return NpsResult()

    promoter_pct = _percentage(counts[Classification.PROMOTER], total)
    passive_pct = _percentage(counts[Classification.PASSIVE], total)
    detractor_pct = _percentage(counts[Classification.DETRACTOR], total)

    return NpsResult(
        score=int(_round_half_up(promoter_pct - detractor_pct)),
        total=total,
        promoters=counts[Classification.PROMOTER],
        passives=counts[Classification.PASSIVE],
        detractors=counts[Classification.DETRACTOR],
        promoter_pct=float(promoter_pct),
        passive_pct=float(passive_pct),
        detractor_pct=float(detractor_pct),
    )


def month_windows(months: int, now: datetime) -> list[tuple[date, date]]:
    """First and last day of the ``months`` calendar months ending with ``now``'s, oldest first."""
    windows = []
    current = now.year * 12 + (now.month - 1)
    for offset in range(months - 1, -1, -1):
        year, month_index = divmod(current - offset, 12)
        month = month_index + 1
        last_day = calendar.monthrange(year, month)[1]
        windows.append((date(year, month, 1), date(year, month, last_day)))
    return windows


def trend(responses: Sequence[NpsResponse], months: int, now: datetime) -> list[TrendPoint]:
    """
    Monthly NPS snapshots, oldest to newest.

    A response falls in a month when its ``created_at`` string lies between
    ``YYYY-MM-01`` and ``YYYY-MM-<last>T23:59:59Z`` inclusive.
    """
    points = []
    for month_start, month_end in month_windows(months, now):
        lower = month_start.isoformat()
        upper = f"{month_end.isoformat()}T23:59:59Z"
        in_month = [r for r in responses if lower <= r.created_at <= upper]
        points.append(
            TrendPoint(
                month=lower,
                label=month_start.strftime("%b %Y"),
                **calculate(in_month).model_dump(),
            )
        )
    return points


def bucket_key(response: NpsResponse, dimension: BreakdownDimension) -> str:
    value = getattr(response, dimension.value)
    if value:
        return value
    return UNCATEGORIZED if dimension == BreakdownDimension.CATEGORY else UNASSIGNED


def breakdown(
    responses: Iterable[NpsResponse],
    dimension: BreakdownDimension,
) -> list[BreakdownItem]:
    """NPS per dimension value, best score first."""
    groups: dict[str, list[NpsResponse]] = defaultdict(list)
    for response in responses:
        groups[bucket_key(response, dimension)].append(response)

    items = [
        BreakdownItem(dimension=dimension, key=key, **calculate(group).model_dump())
        for key, group in groups.items()
    ]
    items.sort(key=lambda item: item.score, reverse=True)
    return items
