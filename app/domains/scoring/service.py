"""NPS reporting service - trend, breakdowns and dashboard data."""

from app.core.timeutils import Clock, utcnow
from app.domains.response.schemas import ResponseFilter, ResponseOut
from app.domains.response.service import ResponseService
from app.domains.scoring import engine
from app.domains.scoring.schemas import (
    BreakdownDimension,
    BreakdownItem,
    ContactHistory,
    NpsResult,
    TrendDirection,
    TrendPoint,
    WidgetSummary,
)
from app.domains.survey_config.service import ConfigService

CONTACT_HISTORY_LIMIT = 10
TREND_THRESHOLD = 2


class ScoringService:
    """Runs the scoring engine over stored responses."""

    def __init__(
        self,
        response_service: ResponseService,
        config_service: ConfigService,
        clock: Clock = utcnow,
    ):
        self._responses = response_service
        self._config = config_service
        self._clock = clock

    async def score(self, filters: ResponseFilter | None = None) -> NpsResult:
        """NPS over all responses matching ``filters``."""
        return engine.calculate(await self._responses.query(filters))

    async def trend(
        self,
        months: int = 6,
        filters: ResponseFilter | None = None,
    ) -> list[TrendPoint]:
        """Monthly NPS for the last ``months`` calendar months, oldest first."""
        responses = await self._responses.query(filters)
        return engine.trend(responses, months, self._clock())

    async def breakdown_by(
        self,
        dimension: BreakdownDimension,
        filters: ResponseFilter | None = None,
    ) -> list[BreakdownItem]:
        """NPS per agent, team or category, best first."""
        responses = await self._responses.query(filters)
        return engine.breakdown(responses, dimension)

    async def widget(self) -> WidgetSummary:
        """
        Overall NPS with a month-over-month direction.

        The direction is ``up``/``down`` only when the current score differs
        from last month's by more than two points.
        """
        config = await self._config.load()
        nps = engine.calculate(await self._responses.all())
        points = await self.trend(months=2)

        previous_score = points[0].score if points else 0
        direction = TrendDirection.STABLE
        if nps.score > previous_score + TREND_THRESHOLD:
            direction = TrendDirection.UP
        elif nps.score < previous_score - TREND_THRESHOLD:
            direction = TrendDirection.DOWN

        return WidgetSummary(
            **nps.model_dump(),
            trend=direction,
            previous_score=previous_score,
            enabled=config.enabled,
        )

    async def contact_history(self, contact_id: str) -> ContactHistory:
        """A contact's latest responses and their overall NPS."""
        responses = await self._responses.for_contact(contact_id) if contact_id else []
        return ContactHistory(
            contact_id=contact_id,
            responses=[
                ResponseOut(**r.to_record()) for r in responses[:CONTACT_HISTORY_LIMIT]
            ],
            nps=engine.calculate(responses),
        )
