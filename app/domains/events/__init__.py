"""Host event adapter domain."""

from app.domains.events.schemas import QueueDecision, TicketResolvedEvent
from app.domains.events.service import EventHandler, TicketOutcome

__all__ = [
    "QueueDecision",
    "TicketResolvedEvent",
    "EventHandler",
    "TicketOutcome",
]
