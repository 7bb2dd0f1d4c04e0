"""Respondent walk through a published survey.

A session starts on the first question.  Required questions gate ``next()``;
optional ones may be skipped unless they auto-advance, in which case only an
answer moves the respondent on.  Completion is terminal.
"""
from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from app.authoring.demo import DemoStatus, Progress
from app.authoring.exceptions import (
    AnswerRequiredError,
    EmptySurveyError,
    InvalidTransitionError,
    QuestionNotFoundError,
    SessionCompletedError,
)
from app.surveys.questions import Answer, Question, auto_advances, coerce_answer
from app.surveys.schemas import PublicSurveyResponse, ResponseItemIn, ResponseSubmission

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class ResponseItem:
    question_id: int
    answer: Answer
    answered_at: datetime
    time_spent: float | None = None


class TakingSession:
    def __init__(
        self,
        questions: Sequence[Question],
        *,
        survey_id: str | None = None,
        clock: Clock = _utcnow,
    ):
        if not questions:
            raise EmptySurveyError("A survey needs at least one question to be taken")
        self.survey_id = survey_id
        self._questions = tuple(questions)
        self._clock = clock
        self._status = DemoStatus.IN_PROGRESS
        self._index = 0
        self._items: dict[int, ResponseItem] = {}
        self.started_at = clock()
        self.completed_at: datetime | None = None
        self._entered_at = self.started_at

    @classmethod
    def for_survey(cls, survey: PublicSurveyResponse, *, clock: Clock = _utcnow) -> TakingSession:
        return cls(survey.questions, survey_id=str(survey.id), clock=clock)

    # ── State ─────────────────────────────────────────────────────────────────

    @property
    def status(self) -> DemoStatus:
        return self._status

    @property
    def is_completed(self) -> bool:
        return self._status is DemoStatus.COMPLETED

    @property
    def index(self) -> int | None:
        return None if self.is_completed else self._index

    @property
    def questions(self) -> tuple[Question, ...]:
        return self._questions

    @property
    def current_question(self) -> Question | None:
        return None if self.is_completed else self._questions[self._index]

    @property
    def progress(self) -> Progress:
        total = len(self._questions)
        return Progress(total if self.is_completed else self._index + 1, total)

    @property
    def answered_count(self) -> int:
        return len(self._items)

    @property
    def responses(self) -> list[ResponseItem]:
        """Recorded answers in question order."""
        return [self._items[q.id] for q in self._questions if q.id in self._items]

    def answer_for(self, question_id: int) -> Answer | None:
        item = self._items.get(question_id)
        return item.answer if item else None

    @property
    def can_continue(self) -> bool:
        question = self.current_question
        if question is None:
            return False
        if question.id in self._items:
            return True
        return not question.required and not auto_advances(question)

    # ── Transitions ───────────────────────────────────────────────────────────

    def answer(self, question_id: int, value: Any) -> ResponseItem:
        self._require_open()
        question = next((q for q in self._questions if q.id == question_id), None)
        if question is None:
            raise QuestionNotFoundError(question_id)
        coerced = coerce_answer(question, value)
        now = self._clock()
        time_spent = None
        if question is self._questions[self._index]:
            time_spent = max((now - self._entered_at).total_seconds(), 0.0)
        item = ResponseItem(question_id, coerced, now, time_spent)
        self._items[question_id] = item
        return item

    def next(self) -> None:
        self._require_open()
        if not self.can_continue:
            raise AnswerRequiredError(self._questions[self._index].id)
        if self._index + 1 >= len(self._questions):
            self.complete()
            return
        self._index += 1
        self._entered_at = self._clock()

    def previous(self) -> None:
        self._require_open()
        if self._index > 0:
            self._index -= 1
            self._entered_at = self._clock()

    def complete(self) -> None:
        self._require_open()
        for question in self._questions:
            if question.required and question.id not in self._items:
                raise AnswerRequiredError(question.id)
        self._status = DemoStatus.COMPLETED
        self.completed_at = self._clock()

    def to_submission(self) -> ResponseSubmission:
        if not self.is_completed:
            raise InvalidTransitionError("submit", self._status.value)
        if not self._items:
            # every question was optional and skipped; the API rejects empty sets
            raise InvalidTransitionError("submit", "no question has been answered")
        return ResponseSubmission(
            responses=[
                ResponseItemIn(
                    question_id=item.question_id,
                    answer=item.answer,
                    answered_at=item.answered_at,
                    time_spent=item.time_spent,
                )
                for item in self.responses
            ],
            completed_at=self.completed_at,
            time_spent=max((self.completed_at - self.started_at).total_seconds(), 0.0),
        )

    def _require_open(self) -> None:
        if self.is_completed:
            raise SessionCompletedError("The survey has already been completed")
