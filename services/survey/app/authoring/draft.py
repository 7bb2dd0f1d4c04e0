"""Survey draft store: the single authoritative editor state for one creator.

The store holds an immutable ``SurveyDraft`` snapshot and replaces it on every
successful edit.  Each edit validates first and only then swaps the snapshot,
so a failing call never leaves a half-applied change behind.  Any successful
edit also resets the store's demo playback, since the previewed content
changed underneath it.
"""
from __future__ import annotations

import dataclasses
import logging
import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from app.authoring.demo import DemoPlayback
from app.authoring.exceptions import (
    DraftValidationError,
    DuplicateQuestionIdError,
    InvalidQuestionError,
    MinimumOptionsViolation,
    OptionIndexError,
    OptionsNotSupportedError,
    QuestionIndexError,
    QuestionNotFoundError,
)
from app.authoring.templates import STARTER_ESTIMATED_TIME, STARTER_QUESTIONS, STARTER_TITLE, SurveyTemplate
from app.surveys.questions import (
    FIELD_ALIASES,
    MIN_OPTIONS,
    QUESTION_TYPES,
    MultipleChoiceQuestion,
    Question,
    RatingQuestion,
    ValidationResult,
    dump_question,
    parse_question,
    requires_options,
    validate_survey,
)
from app.surveys.schemas import SurveyCreatedResponse, SurveyCreateRequest, SurveySettings

if TYPE_CHECKING:
    from app.authoring.gateway import SurveyGateway

logger = logging.getLogger(__name__)

DEFAULT_QUESTION_TITLE = "New Question"
DEFAULT_OPTIONS = ("Option 1", "Option 2")
DEFAULT_TEXT_PLACEHOLDER = "Enter your answer..."

# Fields that survive a change of question type.
_COMMON_FIELDS = ("id", "title", "description", "required", "helpText")


@dataclass(frozen=True, slots=True)
class SurveyDraft:
    id: str
    title: str
    description: str
    questions: tuple[Question, ...]
    estimated_time: str
    settings: SurveySettings

    @property
    def question_count(self) -> int:
        return len(self.questions)


def _new_draft_id() -> str:
    return f"draft-{uuid.uuid4().hex}"


def _defaults_for(question_type: str) -> dict[str, Any]:
    data: dict[str, Any] = {"type": question_type, "title": DEFAULT_QUESTION_TITLE, "required": True}
    if question_type == "multiple_choice":
        data["options"] = list(DEFAULT_OPTIONS)
    elif question_type == "text_input":
        data["placeholder"] = DEFAULT_TEXT_PLACEHOLDER
    return data


def _options_of(question: Question) -> list[str]:
    if isinstance(question, MultipleChoiceQuestion):
        return list(question.options)
    if isinstance(question, RatingQuestion) and question.options is not None:
        return list(question.options)
    raise OptionsNotSupportedError(question.id, question.type)


def _check_index(question_id: int, index: int, size: int) -> None:
    if not 0 <= index < size:
        raise OptionIndexError(question_id, index)


class DraftStore:
    def __init__(self, draft: SurveyDraft | None = None):
        self._draft: SurveyDraft
        self._next_id = 1
        self.demo = DemoPlayback(lambda: self._draft.questions)
        if draft is None:
            self.create_empty()
        else:
            self._replace_draft(draft)

    @property
    def draft(self) -> SurveyDraft:
        return self._draft

    @property
    def questions(self) -> tuple[Question, ...]:
        return self._draft.questions

    # ── Whole-draft lifecycle ─────────────────────────────────────────────────

    def create_empty(self) -> SurveyDraft:
        self._replace_draft(
            SurveyDraft(
                id=_new_draft_id(),
                title=STARTER_TITLE,
                description="",
                questions=STARTER_QUESTIONS,
                estimated_time=STARTER_ESTIMATED_TIME,
                settings=SurveySettings(),
            )
        )
        return self._draft

    def load_from_template(self, template: SurveyTemplate) -> SurveyDraft:
        self._replace_draft(
            SurveyDraft(
                id=template.id,
                title=template.title,
                description=template.description,
                questions=tuple(q.model_copy(deep=True) for q in template.questions),
                estimated_time=template.estimated_time,
                settings=SurveySettings(),
            )
        )
        return self._draft

    def _replace_draft(self, draft: SurveyDraft) -> None:
        self._draft = draft
        self._next_id = max((q.id for q in draft.questions), default=0) + 1
        self.demo.reset()

    def _commit(self, **changes: Any) -> SurveyDraft:
        self._draft = dataclasses.replace(self._draft, **changes)
        self.demo.reset()
        return self._draft

    # ── Survey fields ─────────────────────────────────────────────────────────

    def set_title(self, text: str) -> None:
        self._commit(title=text)

    def set_description(self, text: str) -> None:
        self._commit(description=text)

    def set_estimated_time(self, text: str) -> None:
        self._commit(estimated_time=text)

    def update_settings(self, **changes: bool) -> SurveySettings:
        unknown = set(changes) - set(SurveySettings.model_fields)
        if unknown:
            raise DraftValidationError(f"Unknown settings: {', '.join(sorted(unknown))}")
        settings = self._draft.settings.model_copy(update=changes)
        self._commit(settings=settings)
        return settings

    # ── Questions ─────────────────────────────────────────────────────────────

    def _position(self, question_id: int) -> int:
        for i, q in enumerate(self._draft.questions):
            if q.id == question_id:
                return i
        raise QuestionNotFoundError(question_id)

    def get_question(self, question_id: int) -> Question:
        return self._draft.questions[self._position(question_id)]

    def _replace_question(self, position: int, question: Question) -> None:
        questions = list(self._draft.questions)
        questions[position] = question
        self._commit(questions=tuple(questions))

    def add_question(self, question_type: str) -> Question:
        if question_type not in QUESTION_TYPES:
            raise InvalidQuestionError(f"Unknown question type: {question_type}")
        question_id = self._next_id
        if any(q.id == question_id for q in self._draft.questions):
            raise DuplicateQuestionIdError(question_id)
        question = parse_question({"id": question_id, **_defaults_for(question_type)})
        self._next_id += 1
        self._commit(questions=self._draft.questions + (question,))
        return question

    def update_question_title(self, question_id: int, text: str) -> Question:
        position = self._position(question_id)
        question = self._draft.questions[position].model_copy(update={"title": text})
        self._replace_question(position, question)
        return question

    def update_question_fields(self, question_id: int, partial: Mapping[str, Any]) -> Question:
        """Apply a partial update (snake_case or camelCase keys) and re-validate.

        Changing ``type`` keeps only the common fields and applies the new
        kind's defaults before the rest of ``partial`` is laid on top.
        """
        position = self._position(question_id)
        current = self._draft.questions[position]

        changes: dict[str, Any] = {}
        for key, value in partial.items():
            alias = FIELD_ALIASES.get(key, key)
            if alias not in FIELD_ALIASES.values():
                raise InvalidQuestionError(f"Unknown question field: {key}")
            changes[alias] = value
        if changes.get("id", question_id) != question_id:
            raise InvalidQuestionError("A question's id cannot change")

        data = dump_question(current)
        new_type = changes.get("type", current.type)
        if new_type != current.type:
            if new_type not in QUESTION_TYPES:
                raise InvalidQuestionError(f"Unknown question type: {new_type}")
            data = {
                **_defaults_for(new_type),
                **{k: v for k, v in data.items() if k in _COMMON_FIELDS},
            }
        data.update(changes)

        try:
            question = parse_question(data)
        except ValidationError as exc:
            raise InvalidQuestionError(str(exc)) from exc

        if requires_options(question) and len(question.options) < MIN_OPTIONS:
            if "options" in changes:
                raise MinimumOptionsViolation(question_id, MIN_OPTIONS)
            question = question.model_copy(update={"options": DEFAULT_OPTIONS})

        self._replace_question(position, question)
        return question

    def delete_question(self, question_id: int) -> None:
        position = self._position(question_id)
        questions = list(self._draft.questions)
        del questions[position]
        self._commit(questions=tuple(questions))

    def reorder_questions(self, from_index: int, to_index: int) -> None:
        questions = list(self._draft.questions)
        for index in (from_index, to_index):
            if not 0 <= index < len(questions):
                raise QuestionIndexError(index)
        questions.insert(to_index, questions.pop(from_index))
        self._commit(questions=tuple(questions))

    # ── Options ───────────────────────────────────────────────────────────────

    def _set_options(self, question_id: int, position: int, options: list[str]) -> Question:
        question = self._draft.questions[position].model_copy(update={"options": tuple(options)})
        self._replace_question(position, question)
        return question

    def add_option(self, question_id: int, text: str) -> Question:
        position = self._position(question_id)
        options = _options_of(self._draft.questions[position])
        options.append(text)
        return self._set_options(question_id, position, options)

    def update_option(self, question_id: int, index: int, text: str) -> Question:
        position = self._position(question_id)
        options = _options_of(self._draft.questions[position])
        _check_index(question_id, index, len(options))
        options[index] = text
        return self._set_options(question_id, position, options)

    def delete_option(self, question_id: int, index: int) -> Question:
        position = self._position(question_id)
        question = self._draft.questions[position]
        options = _options_of(question)
        _check_index(question_id, index, len(options))
        if requires_options(question) and len(options) - 1 < MIN_OPTIONS:
            raise MinimumOptionsViolation(question_id, MIN_OPTIONS)
        del options[index]
        return self._set_options(question_id, position, options)

    def reorder_options(self, question_id: int, from_index: int, to_index: int) -> Question:
        position = self._position(question_id)
        options = _options_of(self._draft.questions[position])
        _check_index(question_id, from_index, len(options))
        _check_index(question_id, to_index, len(options))
        options.insert(to_index, options.pop(from_index))
        return self._set_options(question_id, position, options)

    # ── Publishing ────────────────────────────────────────────────────────────

    def validate(self) -> ValidationResult:
        return validate_survey(self._draft.title, self._draft.questions)

    def serialize(self) -> SurveyCreateRequest:
        """Request body for the create endpoint.  No validation, no I/O."""
        draft = self._draft
        # model_construct matches wire aliases, hence the camelCase key
        return SurveyCreateRequest.model_construct(
            title=draft.title,
            description=draft.description,
            questions=list(draft.questions),
            estimatedTime=draft.estimated_time,
            settings=draft.settings,
        )

    def mark_persisted(self, created: SurveyCreatedResponse) -> SurveyDraft:
        """Drop the draft the server just acknowledged and start a fresh one."""
        logger.info("Draft %s published as survey %s", self._draft.id, created.survey_id)
        return self.create_empty()

    async def save(self, gateway: SurveyGateway) -> SurveyCreatedResponse:
        result = self.validate()
        if not result.is_valid:
            raise DraftValidationError(result.errors[0].message, result)
        created = await gateway.create_survey(self.serialize())
        self.mark_persisted(created)
        return created
