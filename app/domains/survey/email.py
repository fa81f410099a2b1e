"""Survey email rendering."""

from html import escape

from app.domains.scoring.engine import classify
from app.domains.scoring.schemas import Classification
from app.domains.survey_config.models import NpsConfig

BAND_COLORS = {
    Classification.DETRACTOR: "#ef4444",
    Classification.PASSIVE: "#eab308",
    Classification.PROMOTER: "#22c55e",
}


def build_survey_url(base_url: str, token: str) -> str:
    """Public survey link for ``token``."""
    return f"{base_url.rstrip('/')}/nps/survey/{token}"


def build_email_body(config: NpsConfig, survey_url: str) -> str:
    """
    Render the survey email.

    One link per score 0-10, coloured by NPS band; each link carries the
    score so the survey page opens with it preselected.
    """
    question = escape(config.question)
    url = escape(survey_url, quote=True)

    parts = [
        '<div style="font-family: sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">'
    ]

    if config.branding.logo_url:
        logo = escape(config.branding.logo_url, quote=True)
        parts.append(
            '<div style="text-align: center; margin-bottom: 20px;">'
            f'<img src="{logo}" alt="Logo" style="max-height: 48px;"></div>'
        )

    parts.append(f'<h2 style="text-align: center; color: #333;">{question}</h2>')
    parts.append(
        '<p style="text-align: center; color: #666; margin-bottom: 24px;">'
        "Click a number below to rate your experience:</p>"
    )
    parts.append('<div style="text-align: center;">')

    for score in range(0, 11):
        color = BAND_COLORS[classify(score)]
        parts.append(
            f'<a href="{url}?score={score}" style="display: inline-block; width: 36px; '
            "height: 36px; line-height: 36px; text-align: center; margin: 2px; "
            f"border-radius: 6px; background: {color}; color: #fff; "
            f'text-decoration: none; font-weight: 600;">{score}</a>'
        )

    parts.append("</div>")
    parts.append(
        '<p style="text-align: center; margin-top: 12px; font-size: 12px; color: #999;">'
        "0 = Not likely &nbsp;&nbsp; 10 = Extremely likely</p>"
    )
    parts.append("</div>")

    return "\n".join(parts)
