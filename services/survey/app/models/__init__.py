from .survey import Survey
from .survey_response import SurveyResponse
from .user import User

__all__ = ["Survey", "SurveyResponse", "User"]
