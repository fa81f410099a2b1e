"""Survey queue domain."""

from app.domains.survey.models import PendingSurvey, SurveyStatus
from app.domains.survey.schemas import SurveyForm, SurveyOut, SurveySubmit, SurveySubmitResult
from app.domains.survey.service import SurveyQueue

__all__ = [
    "PendingSurvey",
    "SurveyStatus",
    "SurveyForm",
    "SurveyOut",
    "SurveySubmit",
    "SurveySubmitResult",
    "SurveyQueue",
]
