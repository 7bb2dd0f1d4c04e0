"""Errors raised by the authoring core (draft, demo, taking flow, gateway client).

Every operation that raises leaves its object exactly as it was before the call.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.surveys.questions import ValidationResult


class AuthoringError(Exception):
    """Base class for authoring failures."""


class QuestionNotFoundError(AuthoringError, LookupError):
    def __init__(self, question_id: int):
        self.question_id = question_id
        super().__init__(f"Question not found: {question_id}")


class DuplicateQuestionIdError(AuthoringError):
    """A freshly assigned question id already exists in the draft."""

    def __init__(self, question_id: int):
        self.question_id = question_id
        super().__init__(f"Duplicate question id: {question_id}")


class OptionsNotSupportedError(AuthoringError):
    def __init__(self, question_id: int, question_type: str):
        self.question_id = question_id
        self.question_type = question_type
        super().__init__(f"Question {question_id} ({question_type}) has no options")


class OptionIndexError(AuthoringError, IndexError):
    def __init__(self, question_id: int, index: int):
        self.question_id = question_id
        self.index = index
        super().__init__(f"Option index {index} out of range for question {question_id}")


class QuestionIndexError(AuthoringError, IndexError):
    def __init__(self, index: int):
        self.index = index
        super().__init__(f"Question index {index} out of range")


class MinimumOptionsViolation(AuthoringError):
    def __init__(self, question_id: int, minimum: int = 2):
        self.question_id = question_id
        self.minimum = minimum
        super().__init__(f"Question {question_id} needs at least {minimum} options")


class InvalidQuestionError(AuthoringError, ValueError):
    """A field update would produce an invalid question."""


class DraftValidationError(AuthoringError, ValueError):
    """The draft cannot be published (or a draft-level edit is malformed)."""

    def __init__(self, message: str, result: ValidationResult | None = None):
        self.result = result
        super().__init__(message)


class InvalidTransitionError(AuthoringError):
    def __init__(self, action: str, state: str):
        self.action = action
        self.state = state
        super().__init__(f"Cannot {action} while {state}")


class AnswerRequiredError(AuthoringError):
    def __init__(self, question_id: int):
        self.question_id = question_id
        super().__init__(f"Question {question_id} requires an answer")


class SessionCompletedError(AuthoringError):
    """The taking session is terminal once completed."""


class EmptySurveyError(AuthoringError, ValueError):
    """A survey without questions cannot be taken."""


class TemplateNotFoundError(AuthoringError, LookupError):
    def __init__(self, template_id: str):
        self.template_id = template_id
        super().__init__(f"Template not found: {template_id}")


# ── Gateway client ────────────────────────────────────────────────────────────

class GatewayError(AuthoringError):
    """Transport failure or unexpected HTTP status from the survey API."""

    def __init__(self, message: str, status_code: int | None = None, payload: object = None):
        self.status_code = status_code
        self.payload = payload
        super().__init__(message)


class GatewayValidationError(GatewayError):
    pass


class GatewayAuthError(GatewayError):
    pass


class GatewayNotFoundError(GatewayError):
    pass
