"""NPS response domain."""

from app.domains.response.models import NpsResponse
from app.domains.response.schemas import ResponseFilter, ResponseOut, ResponseWrite
from app.domains.response.service import ResponseService

__all__ = [
    "NpsResponse",
    "ResponseFilter",
    "ResponseOut",
    "ResponseWrite",
    "ResponseService",
]
