"""Domain exception classes for the survey service.

Raised by service-layer code and caught by controllers, which map them to
HTTP responses.  Nothing in here knows about FastAPI.
"""


class UserNotFoundError(Exception):
    def __init__(self, user_id: str = ""):
        self.user_id = user_id
        super().__init__(f"User not found: {user_id}")


class SurveyNotFoundError(Exception):
    """Unknown survey id, or the survey exists but is not published."""

    def __init__(self, survey_id: str = ""):
        self.survey_id = survey_id
        super().__init__(f"Survey not found: {survey_id}")


class SurveyValidationError(Exception):
    """Raised when a survey or a response set fails domain validation."""

    def __init__(self, message: str, issues: list[dict] | None = None):
        self.issues = issues or []
        super().__init__(message)


class InvalidAnswerError(ValueError):
    """Raised when an answer value does not fit its question kind."""

    def __init__(self, question_id: int, reason: str):
        self.question_id = question_id
        self.reason = reason
        super().__init__(f"Invalid answer for question {question_id}: {reason}")


class GoogleAuthError(Exception):
    """Google rejected the authorization code or the ID token did not verify."""


class UpstreamError(Exception):
    """Google could not be reached or answered with something unusable."""
