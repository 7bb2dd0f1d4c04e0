import pytest

from app.authoring.demo import DemoStatus
from app.authoring.draft import DraftStore
from app.authoring.exceptions import (
    DraftValidationError,
    InvalidQuestionError,
    MinimumOptionsViolation,
    OptionIndexError,
    OptionsNotSupportedError,
    QuestionIndexError,
    QuestionNotFoundError,
)
from app.authoring.templates import get_template
from app.surveys.questions import IssueCode, MultipleChoiceQuestion, RatingQuestion, TextInputQuestion


def _assert_count(store: DraftStore) -> None:
    assert store.draft.question_count == len(store.draft.questions)


def test_create_empty_seeds_starter_draft() -> None:
    store = DraftStore()
    draft = store.draft
    assert draft.title == "My New Survey"
    assert draft.estimated_time == "2 min"
    assert draft.id.startswith("draft-")
    assert [q.type for q in draft.questions] == ["multiple_choice", "rating", "text_input"]
    _assert_count(store)


def test_add_question_defaults() -> None:
    store = DraftStore()
    mc = store.add_question("multiple_choice")
    text = store.add_question("text_input")
    rating = store.add_question("rating")
    slider = store.add_question("slider")

    assert isinstance(mc, MultipleChoiceQuestion)
    assert mc.title == "New Question" and mc.required
    assert list(mc.options) == ["Option 1", "Option 2"]
    assert text.placeholder == "Enter your answer..."
    assert (rating.min_value, rating.max_value) == (1, 5)
    assert (slider.min_value, slider.max_value) == (0, 100)
    assert store.questions[-4:] == (mc, text, rating, slider)
    _assert_count(store)


def test_new_ids_are_never_reused() -> None:
    store = DraftStore()
    first = store.add_question("date")
    store.delete_question(first.id)
    second = store.add_question("date")
    assert second.id > first.id
    assert len({q.id for q in store.questions}) == len(store.questions)


def test_add_then_delete_restores_question_list() -> None:
    store = DraftStore()
    before = store.questions
    added = store.add_question("multiple_choice")
    store.delete_question(added.id)
    assert store.questions == before
    _assert_count(store)


def test_delete_allows_reaching_zero_questions() -> None:
    store = DraftStore()
    for question in list(store.questions):
        store.delete_question(question.id)
    assert store.draft.question_count == 0
    assert IssueCode.NO_QUESTIONS in store.validate().codes


def test_unknown_question_id_is_consistent() -> None:
    store = DraftStore()
    with pytest.raises(QuestionNotFoundError):
        store.update_question_title(999, "x")
    with pytest.raises(QuestionNotFoundError):
        store.update_question_fields(999, {"required": False})
    with pytest.raises(QuestionNotFoundError):
        store.delete_question(999)
    with pytest.raises(QuestionNotFoundError):
        store.add_option(999, "x")


def test_load_from_template_copies_questions() -> None:
    template = get_template("know-my-audience")
    store = DraftStore()
    store.load_from_template(template)
    first = store.questions[0]
    store.update_question_title(first.id, "Edited")
    store.add_option(first.id, "65+")

    assert template.questions[0].title == "What is your age group?"
    assert "65+" not in template.questions[0].options
    assert store.draft.id == "know-my-audience"


def test_update_question_fields_accepts_both_key_styles() -> None:
    store = DraftStore()
    rating = next(q for q in store.questions if isinstance(q, RatingQuestion))
    updated = store.update_question_fields(rating.id, {"maxValue": 10, "help_text": "10 is best"})
    assert updated.max_value == 10
    assert updated.help_text == "10 is best"
    assert store.get_question(rating.id) == updated


def test_update_question_fields_change_type_applies_defaults() -> None:
    store = DraftStore()
    text = next(q for q in store.questions if isinstance(q, TextInputQuestion))
    changed = store.update_question_fields(text.id, {"type": "multiple_choice"})
    assert isinstance(changed, MultipleChoiceQuestion)
    assert changed.title == text.title
    assert list(changed.options) == ["Option 1", "Option 2"]


def test_update_question_fields_rejects_bad_input_without_mutation() -> None:
    store = DraftStore()
    before = store.draft
    target = store.questions[0]
    with pytest.raises(InvalidQuestionError):
        store.update_question_fields(target.id, {"id": 42})
    with pytest.raises(InvalidQuestionError):
        store.update_question_fields(target.id, {"colour": "red"})
    with pytest.raises(InvalidQuestionError):
        store.update_question_fields(target.id, {"subtype": "carousel"})
    with pytest.raises(MinimumOptionsViolation):
        store.update_question_fields(target.id, {"options": ["only one"]})
    assert store.draft is before


def test_option_operations() -> None:
    store = DraftStore()
    qid = store.add_question("multiple_choice").id
    store.add_option(qid, "Option 3")
    store.update_option(qid, 0, "First")
    store.reorder_options(qid, 2, 0)
    assert list(store.get_question(qid).options) == ["Option 3", "First", "Option 2"]
    store.delete_option(qid, 1)
    assert list(store.get_question(qid).options) == ["Option 3", "Option 2"]


def test_delete_option_at_minimum_fails_and_keeps_options() -> None:
    store = DraftStore()
    qid = store.add_question("multiple_choice").id
    with pytest.raises(MinimumOptionsViolation):
        store.delete_option(qid, 0)
    assert list(store.get_question(qid).options) == ["Option 1", "Option 2"]


def test_option_index_and_kind_errors() -> None:
    store = DraftStore()
    mc = store.add_question("multiple_choice").id
    text = store.add_question("text_input").id
    with pytest.raises(OptionIndexError):
        store.update_option(mc, 5, "x")
    with pytest.raises(OptionIndexError):
        store.delete_option(mc, -1)
    with pytest.raises(OptionsNotSupportedError):
        store.add_option(text, "x")


def test_labelled_rating_scale_options() -> None:
    store = DraftStore()
    rid = store.add_question("rating").id
    with pytest.raises(OptionsNotSupportedError):
        store.add_option(rid, "Poor")
    store.update_question_fields(rid, {"options": ["Poor", "Great"]})
    store.add_option(rid, "Amazing")
    assert list(store.get_question(rid).options) == ["Poor", "Great", "Amazing"]
    store.delete_option(rid, 2)
    with pytest.raises(MinimumOptionsViolation):
        store.delete_option(rid, 0)


def test_reorder_questions() -> None:
    store = DraftStore()
    ids = [q.id for q in store.questions]
    store.reorder_questions(0, 2)
    assert [q.id for q in store.questions] == [ids[1], ids[2], ids[0]]
    with pytest.raises(QuestionIndexError):
        store.reorder_questions(0, 3)


def test_survey_fields_and_settings() -> None:
    store = DraftStore()
    store.set_title("Poll")
    store.set_description("Quick one")
    store.set_estimated_time("1 min")
    settings = store.update_settings(show_progress=False)
    assert settings.show_progress is False
    assert (store.draft.title, store.draft.description, store.draft.estimated_time) == ("Poll", "Quick one", "1 min")
    with pytest.raises(DraftValidationError):
        store.update_settings(dark_mode=True)


def test_every_mutation_resets_the_demo() -> None:
    store = DraftStore()
    store.demo.start()
    store.demo.answer(store.questions[0].id, "18-24")
    assert store.demo.status is DemoStatus.IN_PROGRESS

    store.set_title("Changed")
    assert store.demo.status is DemoStatus.NOT_STARTED
    assert dict(store.demo.answers) == {}


def test_failed_mutation_does_not_reset_the_demo() -> None:
    store = DraftStore()
    store.demo.start()
    with pytest.raises(QuestionNotFoundError):
        store.delete_question(999)
    assert store.demo.status is DemoStatus.IN_PROGRESS


def test_serialize() -> None:
    store = DraftStore()
    store.set_title("Poll")
    request = store.serialize()
    body = request.model_dump(by_alias=True, mode="json")
    assert body["title"] == "Poll"
    assert body["estimatedTime"] == "2 min"
    assert [q["id"] for q in body["questions"]] == [q.id for q in store.questions]
    assert body["settings"] == {"allowBack": True, "showProgress": True, "autoSave": False}


def test_question_count_tracks_every_operation() -> None:
    store = DraftStore()
    qid = store.add_question("multiple_choice").id
    _assert_count(store)
    store.add_option(qid, "x")
    _assert_count(store)
    store.reorder_questions(0, 1)
    _assert_count(store)
    store.delete_question(qid)
    _assert_count(store)
