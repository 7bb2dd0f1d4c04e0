import pytest
from pydantic import ValidationError

from app.exceptions import InvalidAnswerError
from app.surveys.questions import (
    IssueCode,
    MultipleChoiceQuestion,
    RatingQuestion,
    SliderQuestion,
    TextInputQuestion,
    TextValidation,
    auto_advances,
    coerce_answer,
    dump_question,
    parse_question,
    requires_options,
    validate_for_publish,
    validate_survey,
)


def test_parse_selects_kind_by_type() -> None:
    question = parse_question({"id": 1, "type": "rating", "title": "Rate", "minValue": 0, "maxValue": 10})
    assert isinstance(question, RatingQuestion)
    assert (question.min_value, question.max_value) == (0, 10)
    assert question.required is True


def test_parse_rejects_unknown_type() -> None:
    with pytest.raises(ValidationError):
        parse_question({"id": 1, "type": "matrix", "title": "?"})


def test_dump_uses_camel_case_and_drops_nulls() -> None:
    question = TextInputQuestion(id=3, title="Email", subtype="email", help_text="work address")
    data = dump_question(question)
    assert data["helpText"] == "work address"
    assert "placeholder" not in data
    assert parse_question(data) == question


def test_questions_are_frozen() -> None:
    question = MultipleChoiceQuestion(id=1, title="Pick", options=("A", "B"))
    with pytest.raises(ValidationError):
        question.title = "Changed"


@pytest.mark.parametrize(
    ("question", "expected"),
    [
        (MultipleChoiceQuestion(id=1, title="q"), True),
        (RatingQuestion(id=1, title="q"), False),
        (RatingQuestion(id=1, title="q", options=("Bad", "Good")), True),
        (SliderQuestion(id=1, title="q"), False),
        (TextInputQuestion(id=1, title="q"), False),
    ],
)
def test_requires_options(question, expected: bool) -> None:
    assert requires_options(question) is expected


def test_auto_advances() -> None:
    assert auto_advances(MultipleChoiceQuestion(id=1, subtype="single_select"))
    assert auto_advances(MultipleChoiceQuestion(id=1, subtype="boolean"))
    assert not auto_advances(MultipleChoiceQuestion(id=1, subtype="multi_select"))
    assert auto_advances(RatingQuestion(id=1))
    assert not auto_advances(TextInputQuestion(id=1))


# ---------------------------------------------------------------------------
# Publish validation
# ---------------------------------------------------------------------------


def test_validate_for_publish_clean_question() -> None:
    result = validate_for_publish(MultipleChoiceQuestion(id=1, title="Pick", options=("A", "B")))
    assert result.is_valid
    assert result.errors == ()


def test_validate_for_publish_reports_every_problem() -> None:
    result = validate_for_publish(RatingQuestion(id=7, title="  ", min_value=5, max_value=1, options=("x",)))
    assert not result.is_valid
    assert result.codes == [IssueCode.MISSING_TITLE, IssueCode.INSUFFICIENT_OPTIONS, IssueCode.INVALID_RANGE]
    assert {issue.question_id for issue in result.errors} == {7}


def test_validate_for_publish_inverted_text_lengths() -> None:
    question = TextInputQuestion(id=4, title="Name", validation={"minLength": 10, "maxLength": 2})
    result = validate_for_publish(question)
    assert result.codes == [IssueCode.INVALID_RANGE]
    assert result.errors[0].question_id == 4


def test_validate_survey_level_checks() -> None:
    result = validate_survey("", [])
    assert result.codes == [IssueCode.MISSING_TITLE, IssueCode.NO_QUESTIONS]
    assert result.errors[0].question_id is None


def test_validate_survey_duplicate_ids() -> None:
    questions = [TextInputQuestion(id=1, title="a"), TextInputQuestion(id=1, title="b")]
    result = validate_survey("Survey", questions)
    assert result.codes == [IssueCode.DUPLICATE_QUESTION_ID]
    assert result.errors[0].as_dict() == {
        "code": "DuplicateQuestionId",
        "questionId": 1,
        "message": "Question ids must be unique.",
    }


# ---------------------------------------------------------------------------
# Answer coercion
# ---------------------------------------------------------------------------


def test_single_choice() -> None:
    question = MultipleChoiceQuestion(id=1, options=("A", "B"))
    assert coerce_answer(question, " A ") == "A"
    with pytest.raises(InvalidAnswerError):
        coerce_answer(question, "C")


def test_single_choice_with_other() -> None:
    question = MultipleChoiceQuestion(id=1, options=("A", "B"), allow_other=True)
    assert coerce_answer(question, "Something else") == "Something else"


def test_boolean_accepts_true_false() -> None:
    question = MultipleChoiceQuestion(id=1, subtype="boolean", options=("Yes", "No"))
    assert coerce_answer(question, True) == "Yes"
    assert coerce_answer(question, False) == "No"
    assert coerce_answer(question, "No") == "No"


def test_multi_select() -> None:
    question = MultipleChoiceQuestion(id=1, subtype="multi_select", options=("A", "B", "C"))
    assert coerce_answer(question, ["C", "A"]) == ["C", "A"]
    assert coerce_answer(question, "B") == ["B"]
    for bad in ([], ["A", "A"], ["A", "Z"]):
        with pytest.raises(InvalidAnswerError):
            coerce_answer(question, bad)


def test_text_validation_rules() -> None:
    question = TextInputQuestion(
        id=1,
        validation={"minLength": 3, "maxLength": 5, "customMessage": "3 to 5 letters"},
    )
    assert coerce_answer(question, "abcd") == "abcd"
    with pytest.raises(InvalidAnswerError, match="3 to 5 letters"):
        coerce_answer(question, "ab")
    with pytest.raises(InvalidAnswerError):
        coerce_answer(question, "")


def test_text_pattern_must_compile() -> None:
    with pytest.raises(ValidationError):
        TextInputQuestion(id=1, validation={"pattern": "("})
    with pytest.raises(ValidationError):
        parse_question({"id": 1, "type": "text_input", "validation": {"pattern": "[a-"}})


def test_broken_pattern_is_an_invalid_answer() -> None:
    # stored data that skipped validation
    question = TextInputQuestion(id=1, validation=TextValidation.model_construct(pattern="("))
    with pytest.raises(InvalidAnswerError, match="invalid pattern"):
        coerce_answer(question, "x")


def test_email_subtype() -> None:
    question = TextInputQuestion(id=1, subtype="email")
    assert coerce_answer(question, "a@b.co") == "a@b.co"
    with pytest.raises(InvalidAnswerError):
        coerce_answer(question, "not-an-email")


def test_rating_range_and_whole_numbers() -> None:
    question = RatingQuestion(id=1)
    assert coerce_answer(question, 5) == 5
    assert coerce_answer(question, "3") == 3
    for bad in (0, 6, 2.5, True, "x"):
        with pytest.raises(InvalidAnswerError):
            coerce_answer(question, bad)


def test_slider_range() -> None:
    question = SliderQuestion(id=1, min_value=0, max_value=10)
    assert coerce_answer(question, 2.5) == 2.5
    with pytest.raises(InvalidAnswerError):
        coerce_answer(question, 11)


def test_date_normalised_to_iso() -> None:
    question = parse_question({"id": 1, "type": "date", "title": "When?"})
    assert coerce_answer(question, "2026-03-01T10:00:00Z") == "2026-03-01"
    with pytest.raises(InvalidAnswerError):
        coerce_answer(question, "next tuesday")


def test_none_is_never_an_answer() -> None:
    with pytest.raises(InvalidAnswerError):
        coerce_answer(RatingQuestion(id=1), None)
