"""Creator-side dry run of a survey.

The playback never owns questions: it reads them through a source callable on
every step, so a template preview and a live-draft preview are the same class
with different sources.  Nothing here is persisted.
"""
from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any

from app.authoring.exceptions import InvalidTransitionError, QuestionNotFoundError
from app.surveys.questions import Answer, Question, coerce_answer

QuestionSource = Callable[[], Sequence[Question]]


class DemoStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass(frozen=True, slots=True)
class Progress:
    current: int
    total: int

    @property
    def percentage(self) -> float:
        return self.current / self.total * 100 if self.total else 0.0


class DemoPlayback:
    def __init__(self, source: QuestionSource):
        self._source = source
        self._status = DemoStatus.NOT_STARTED
        self._index: int | None = None
        self._answers: dict[int, Answer] = {}

    # ── State ─────────────────────────────────────────────────────────────────

    @property
    def status(self) -> DemoStatus:
        return self._status

    @property
    def index(self) -> int | None:
        """Current position; None unless in progress."""
        return self._index

    @property
    def is_completed(self) -> bool:
        return self._status is DemoStatus.COMPLETED

    @property
    def answers(self) -> Mapping[int, Answer]:
        return MappingProxyType(dict(self._answers))

    @property
    def current_question(self) -> Question | None:
        if self._index is None:
            return None
        return self._source()[self._index]

    @property
    def progress(self) -> Progress:
        total = len(self._source())
        if self._status is DemoStatus.COMPLETED:
            return Progress(total, total)
        if self._index is None:
            return Progress(0, total)
        return Progress(self._index + 1, total)

    # ── Transitions ───────────────────────────────────────────────────────────

    def start(self) -> None:
        self._answers = {}
        if not self._source():
            self._status, self._index = DemoStatus.COMPLETED, None
        else:
            self._status, self._index = DemoStatus.IN_PROGRESS, 0

    def answer(self, question_id: int, value: Any) -> Answer:
        self._require_in_progress("answer")
        question = next((q for q in self._source() if q.id == question_id), None)
        if question is None:
            raise QuestionNotFoundError(question_id)
        coerced = coerce_answer(question, value)
        self._answers[question_id] = coerced
        return coerced

    def next(self) -> None:
        self._require_in_progress("advance")
        if self._index + 1 < len(self._source()):
            self._index += 1
        else:
            self._status, self._index = DemoStatus.COMPLETED, None

    def previous(self) -> None:
        self._require_in_progress("go back")
        self._index = max(0, self._index - 1)

    def stop(self) -> None:
        self.reset()

    def reset(self) -> None:
        self._status, self._index = DemoStatus.NOT_STARTED, None
        self._answers = {}

    def _require_in_progress(self, action: str) -> None:
        if self._status is not DemoStatus.IN_PROGRESS:
            raise InvalidTransitionError(action, self._status.value)
