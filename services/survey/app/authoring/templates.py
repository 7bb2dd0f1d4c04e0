"""Built-in starter templates.

The catalog is read only: drafts loaded from a template copy its questions,
and questions are frozen, so editing a draft never touches the catalog.
"""
from __future__ import annotations

from dataclasses import dataclass

from app.authoring.exceptions import TemplateNotFoundError
from app.surveys.questions import Question, parse_question


@dataclass(frozen=True, slots=True)
class SurveyTemplate:
    id: str
    title: str
    description: str
    estimated_time: str
    questions: tuple[Question, ...]
    icon: str = ""
    completion_rate: str = ""

    @property
    def question_count(self) -> int:
        return len(self.questions)


def _template(
    template_id: str,
    title: str,
    estimated_time: str,
    questions: list[dict],
    *,
    icon: str,
    completion_rate: str,
) -> SurveyTemplate:
    parsed = tuple(parse_question(q) for q in questions)
    return SurveyTemplate(
        id=template_id,
        title=title,
        description=f"{len(parsed)} questions • {estimated_time}",
        estimated_time=estimated_time,
        questions=parsed,
        icon=icon,
        completion_rate=completion_rate,
    )


# Seed content for DraftStore.create_empty().
STARTER_TITLE = "My New Survey"
STARTER_ESTIMATED_TIME = "2 min"
STARTER_QUESTIONS: tuple[Question, ...] = tuple(
    parse_question(q)
    for q in (
        {
            "id": 1,
            "type": "multiple_choice",
            "title": "What is your age group?",
            "options": ["18-24", "25-34", "35-44", "45-54", "55+"],
            "required": True,
        },
        {
            "id": 2,
            "type": "rating",
            "title": "How satisfied are you with our service?",
            "required": True,
        },
        {
            "id": 3,
            "type": "text_input",
            "subtype": "long_text",
            "title": "Any additional feedback?",
            "placeholder": "Share your thoughts...",
            "required": False,
        },
    )
)


SURVEY_TEMPLATES: tuple[SurveyTemplate, ...] = (
    _template(
        "know-my-audience",
        "Know My Audience",
        "2 min",
        [
            {
                "id": 1,
                "type": "multiple_choice",
                "title": "What is your age group?",
                "options": ["18-24", "25-34", "35-44", "45-54", "55+"],
                "required": True,
            },
            {
                "id": 2,
                "type": "multiple_choice",
                "title": "What is your primary occupation?",
                "options": ["Student", "Professional", "Entrepreneur", "Retired", "Other"],
                "required": True,
            },
            {
                "id": 3,
                "type": "multiple_choice",
                "title": "How did you hear about us?",
                "options": ["Social Media", "Friend Referral", "Search Engine", "Advertisement", "Other"],
                "required": False,
            },
        ],
        icon="👥",
        completion_rate="85% completion rate",
    ),
    _template(
        "product-feedback",
        "Product Feedback",
        "3 min",
        [
            {"id": 1, "type": "rating", "title": "How would you rate our product overall?", "required": True},
            {
                "id": 2,
                "type": "multiple_choice",
                "title": "Which feature do you use most?",
                "options": ["Dashboard", "Analytics", "Reports", "Settings", "Support"],
                "required": True,
            },
            {"id": 3, "type": "text_input", "title": "What do you like most about our product?", "required": False},
            {"id": 4, "type": "text_input", "title": "What could we improve?", "required": False},
            {
                "id": 5,
                "type": "rating",
                "title": "How likely are you to recommend us to a friend?",
                "required": True,
            },
        ],
        icon="📦",
        completion_rate="78% completion rate",
    ),
    _template(
        "feature-feedback",
        "Feature Feedback",
        "3 min",
        [
            {
                "id": 1,
                "type": "multiple_choice",
                "title": "Which new feature are you most excited about?",
                "options": ["AI Assistant", "Real-time Collaboration", "Advanced Analytics", "Mobile App", "API Access"],
                "required": True,
            },
            {"id": 2, "type": "rating", "title": "How easy was it to find this new feature?", "required": True},
            {"id": 3, "type": "rating", "title": "How intuitive is the feature to use?", "required": True},
            {
                "id": 4,
                "type": "text_input",
                "title": "What additional functionality would you like to see?",
                "required": False,
            },
            {
                "id": 5,
                "type": "multiple_choice",
                "title": "How often do you plan to use this feature?",
                "options": ["Daily", "Weekly", "Monthly", "Rarely", "Never"],
                "required": True,
            },
        ],
        icon="⚡",
        completion_rate="72% completion rate",
    ),
)

_BY_ID = {t.id: t for t in SURVEY_TEMPLATES}


def get_template(template_id: str) -> SurveyTemplate:
    try:
        return _BY_ID[template_id]
    except KeyError:
        raise TemplateNotFoundError(template_id) from None


def list_templates() -> tuple[SurveyTemplate, ...]:
    return SURVEY_TEMPLATES
