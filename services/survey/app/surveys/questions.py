"""Question model: one tagged union over question kinds.

Each kind carries only the fields that make sense for it and is selected by
the ``type`` discriminator.  Questions are frozen: editors replace a question
with a re-validated copy instead of mutating it.

Also home to the pure helpers shared by the server and the authoring core:
publish validation (``validate_for_publish`` / ``validate_survey``) and answer
coercion (``coerce_answer``).
"""
from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel

from app.exceptions import InvalidAnswerError

QUESTION_TYPES: tuple[str, ...] = (
    "multiple_choice",
    "text_input",
    "rating",
    "slider",
    "date",
    "file_upload",
)

MIN_OPTIONS = 2

# Normalised answer value stored per question.
Answer = Union[str, int, float, list[str]]


# ---------------------------------------------------------------------------
# Question kinds
# ---------------------------------------------------------------------------


class _QuestionBase(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    id: int
    title: str = ""
    description: str | None = None
    required: bool = True
    help_text: str | None = None


class TextValidation(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    min_length: int | None = Field(default=None, ge=0)
    max_length: int | None = Field(default=None, ge=1)
    pattern: str | None = None
    custom_message: str | None = None

    @field_validator("pattern")
    @classmethod
    def _pattern_compiles(cls, value: str | None) -> str | None:
        if value:
            try:
                re.compile(value)
            except re.error as exc:
                raise ValueError(f"invalid pattern: {exc}") from exc
        return value


class MultipleChoiceQuestion(_QuestionBase):
    type: Literal["multiple_choice"] = "multiple_choice"
    subtype: Literal["single_select", "multi_select", "boolean", "branded_options"] = "single_select"
    options: tuple[str, ...] = ()
    randomize_options: bool = False
    allow_other: bool = False
    other_placeholder: str | None = None


class TextInputQuestion(_QuestionBase):
    type: Literal["text_input"] = "text_input"
    subtype: Literal["short_text", "long_text", "email"] = "short_text"
    placeholder: str | None = None
    validation: TextValidation | None = None


class RatingQuestion(_QuestionBase):
    type: Literal["rating"] = "rating"
    subtype: Literal["star_rating", "number_scale"] = "star_rating"
    min_value: int = 1
    max_value: int = 5
    step: int = Field(default=1, ge=1)
    # Optional labelled scale, one label per point.
    options: tuple[str, ...] | None = None


class SliderQuestion(_QuestionBase):
    type: Literal["slider"] = "slider"
    min_value: float = 0
    max_value: float = 100
    step: float = Field(default=1, gt=0)


class DateQuestion(_QuestionBase):
    type: Literal["date"] = "date"
    placeholder: str | None = None


class FileUploadQuestion(_QuestionBase):
    type: Literal["file_upload"] = "file_upload"
    placeholder: str | None = None


Question = Annotated[
    Union[
        MultipleChoiceQuestion,
        TextInputQuestion,
        RatingQuestion,
        SliderQuestion,
        DateQuestion,
        FileUploadQuestion,
    ],
    Field(discriminator="type"),
]

QuestionAdapter: TypeAdapter[Question] = TypeAdapter(Question)

_QUESTION_CLASSES = (
    MultipleChoiceQuestion,
    TextInputQuestion,
    RatingQuestion,
    SliderQuestion,
    DateQuestion,
    FileUploadQuestion,
)

# snake_case field name → camelCase wire alias, across every kind
FIELD_ALIASES: dict[str, str] = {
    name: info.alias or name
    for cls in _QUESTION_CLASSES
    for name, info in cls.model_fields.items()
}


def parse_question(data: Any) -> Question:
    """Build a question from a mapping (wire or stored form)."""
    return QuestionAdapter.validate_python(data)


def dump_question(question: Question) -> dict:
    """Wire/storage form: camelCase keys, no nulls."""
    return question.model_dump(mode="json", by_alias=True, exclude_none=True)


def requires_options(question: Question) -> bool:
    if isinstance(question, MultipleChoiceQuestion):
        return True
    return isinstance(question, RatingQuestion) and question.options is not None


def auto_advances(question: Question) -> bool:
    """True for kinds answered with a single tap (no continue button)."""
    if isinstance(question, MultipleChoiceQuestion):
        return question.subtype != "multi_select"
    return isinstance(question, RatingQuestion)


# ---------------------------------------------------------------------------
# Publish validation
# ---------------------------------------------------------------------------


class IssueCode(str, Enum):
    MISSING_TITLE = "MissingTitle"
    INSUFFICIENT_OPTIONS = "InsufficientOptions"
    INVALID_RANGE = "InvalidRange"
    NO_QUESTIONS = "NoQuestions"
    DUPLICATE_QUESTION_ID = "DuplicateQuestionId"


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    code: IssueCode
    message: str
    question_id: int | None = None

    def as_dict(self) -> dict:
        return {"code": self.code.value, "questionId": self.question_id, "message": self.message}


@dataclass(frozen=True, slots=True)
class ValidationResult:
    errors: tuple[ValidationIssue, ...] = field(default_factory=tuple)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def codes(self) -> list[IssueCode]:
        return [e.code for e in self.errors]

    def __add__(self, other: ValidationResult) -> ValidationResult:
        return ValidationResult(self.errors + other.errors)


def validate_for_publish(question: Question) -> ValidationResult:
    issues: list[ValidationIssue] = []
    if not question.title.strip():
        issues.append(ValidationIssue(IssueCode.MISSING_TITLE, "Question title is required.", question.id))
    if requires_options(question):
        options = question.options or ()
        if len(options) < MIN_OPTIONS:
            issues.append(
                ValidationIssue(
                    IssueCode.INSUFFICIENT_OPTIONS,
                    f"At least {MIN_OPTIONS} options are required.",
                    question.id,
                )
            )
    if isinstance(question, (RatingQuestion, SliderQuestion)) and question.min_value > question.max_value:
        issues.append(
            ValidationIssue(
                IssueCode.INVALID_RANGE,
                f"Minimum ({question.min_value}) is greater than maximum ({question.max_value}).",
                question.id,
            )
        )
    rules = question.validation if isinstance(question, TextInputQuestion) else None
    if (
        rules is not None
        and rules.min_length is not None
        and rules.max_length is not None
        and rules.min_length > rules.max_length
    ):
        issues.append(
            ValidationIssue(
                IssueCode.INVALID_RANGE,
                f"Minimum length ({rules.min_length}) is greater than maximum length ({rules.max_length}).",
                question.id,
            )
        )
    return ValidationResult(tuple(issues))


def validate_survey(title: str, questions: Sequence[Question]) -> ValidationResult:
    """Survey-level checks followed by every question's publish checks."""
    issues: list[ValidationIssue] = []
    if not (title or "").strip():
        issues.append(ValidationIssue(IssueCode.MISSING_TITLE, "Survey title is required."))
    if not questions:
        issues.append(ValidationIssue(IssueCode.NO_QUESTIONS, "At least one question is required."))

    seen: set[int] = set()
    for question in questions:
        if question.id in seen:
            issues.append(
                ValidationIssue(IssueCode.DUPLICATE_QUESTION_ID, "Question ids must be unique.", question.id)
            )
        seen.add(question.id)

    result = ValidationResult(tuple(issues))
    for question in questions:
        result = result + validate_for_publish(question)
    return result


# ---------------------------------------------------------------------------
# Answer coercion
# ---------------------------------------------------------------------------

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _require_text(question: Question, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidAnswerError(question.id, "expected a non-empty string")
    return value.strip()


def _choice(question: MultipleChoiceQuestion, value: Any) -> str:
    if isinstance(value, bool) and question.subtype == "boolean" and len(question.options) >= MIN_OPTIONS:
        # true/false maps onto the first/second option ("Yes"/"No")
        return question.options[0] if value else question.options[1]
    text = _require_text(question, value)
    if text not in question.options and not question.allow_other:
        raise InvalidAnswerError(question.id, f"{text!r} is not one of the options")
    return text


def _choices(question: MultipleChoiceQuestion, value: Any) -> list[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)) or not value:
        raise InvalidAnswerError(question.id, "expected a non-empty list of options")
    picked: list[str] = []
    for item in value:
        choice = _choice(question, item)
        if choice in picked:
            raise InvalidAnswerError(question.id, f"{choice!r} selected twice")
        picked.append(choice)
    return picked


def _text(question: TextInputQuestion, value: Any) -> str:
    text = _require_text(question, value)
    rules = question.validation
    if question.subtype == "email" and not _EMAIL_RE.match(text):
        raise InvalidAnswerError(question.id, "expected an email address")
    if rules is not None:
        message = rules.custom_message
        if rules.min_length is not None and len(text) < rules.min_length:
            raise InvalidAnswerError(question.id, message or f"shorter than {rules.min_length} characters")
        if rules.max_length is not None and len(text) > rules.max_length:
            raise InvalidAnswerError(question.id, message or f"longer than {rules.max_length} characters")
        if rules.pattern:
            try:
                matched = re.fullmatch(rules.pattern, text)
            except re.error:
                raise InvalidAnswerError(question.id, "the question has an invalid pattern") from None
            if not matched:
                raise InvalidAnswerError(question.id, message or "does not match the expected format")
    return text


def _number(question: Question, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise InvalidAnswerError(question.id, "expected a number")
    try:
        return float(value)
    except ValueError:
        raise InvalidAnswerError(question.id, "expected a number") from None


def _rating(question: RatingQuestion, value: Any) -> int:
    number = _number(question, value)
    if not number.is_integer():
        raise InvalidAnswerError(question.id, "expected a whole number")
    if not question.min_value <= number <= question.max_value:
        raise InvalidAnswerError(
            question.id, f"expected a value between {question.min_value} and {question.max_value}"
        )
    return int(number)


def _slider(question: SliderQuestion, value: Any) -> float:
    number = _number(question, value)
    if not question.min_value <= number <= question.max_value:
        raise InvalidAnswerError(
            question.id, f"expected a value between {question.min_value} and {question.max_value}"
        )
    return number


def _date(question: DateQuestion, value: Any) -> str:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    text = _require_text(question, value)
    try:
        return date.fromisoformat(text[:10]).isoformat()
    except ValueError:
        raise InvalidAnswerError(question.id, "expected an ISO date (YYYY-MM-DD)") from None


def coerce_answer(question: Question, value: Any) -> Answer:
    """Check ``value`` against the question kind and return its normalised form."""
    if value is None:
        raise InvalidAnswerError(question.id, "an answer is required")
    if isinstance(question, MultipleChoiceQuestion):
        if question.subtype == "multi_select":
            return _choices(question, value)
        return _choice(question, value)
    if isinstance(question, TextInputQuestion):
        return _text(question, value)
    if isinstance(question, RatingQuestion):
        return _rating(question, value)
    if isinstance(question, SliderQuestion):
        return _slider(question, value)
    if isinstance(question, DateQuestion):
        return _date(question, value)
    if isinstance(question, FileUploadQuestion):
        return _require_text(question, value)
    raise TypeError(f"Unsupported question kind: {type(question).__name__}")


def index_questions(questions: Iterable[Question]) -> dict[int, Question]:
    return {q.id: q for q in questions}
