import uuid

import httpx
import pytest
from httpx import AsyncClient

from app.authoring.draft import DraftStore
from app.authoring.exceptions import (
    DraftValidationError,
    GatewayAuthError,
    GatewayError,
    GatewayNotFoundError,
    GatewayValidationError,
)
from app.authoring.gateway import SurveyGateway
from app.authoring.taking import TakingSession
from app.surveys.questions import MultipleChoiceQuestion
from app.surveys.schemas import SurveyCreateRequest, SurveySettings


def _gateway(client: AsyncClient, headers: dict | None = None) -> SurveyGateway:
    token = headers["Authorization"].split(" ", 1)[1] if headers else None
    return SurveyGateway("http://test", token=token, client=client)


def _poll_store() -> DraftStore:
    store = DraftStore()
    for question in list(store.questions):
        store.delete_question(question.id)
    store.set_title("Poll")
    qid = store.add_question("multiple_choice").id
    store.update_question_fields(qid, {"subtype": "boolean", "title": "Ship it?", "options": ["Yes", "No"]})
    return store


async def test_draft_round_trip_through_the_api(async_client: AsyncClient, auth_headers: dict) -> None:
    store = _poll_store()
    expected = store.serialize()
    gateway = _gateway(async_client, auth_headers)

    created = await store.save(gateway)
    # the saved draft is dropped in favour of a fresh one
    assert store.draft.title == "My New Survey"

    survey = await gateway.get_published_survey(created.survey_id)
    assert survey.question_count == 1
    assert survey.title == expected.title
    assert [q.title for q in survey.questions] == [q.title for q in expected.questions]
    assert list(survey.questions[0].options) == ["Yes", "No"]
    assert survey.share_url == created.share_url


async def test_taking_session_submission(async_client: AsyncClient, auth_headers: dict) -> None:
    gateway = _gateway(async_client, auth_headers)
    created = await _poll_store().save(gateway)

    public = await _gateway(async_client).get_published_survey(created.survey_id)
    session = TakingSession.for_survey(public)
    session.answer(session.current_question.id, True)
    session.next()

    submitted = await _gateway(async_client).submit_response(created.survey_id, session.to_submission())
    assert isinstance(submitted.response_id, uuid.UUID)

    listed = await gateway.list_surveys()
    assert listed[0].stats.total_responses == 1
    assert listed[0].stats.completion_rate == 100.0


async def test_save_refuses_invalid_draft(async_client: AsyncClient, auth_headers: dict) -> None:
    store = DraftStore()
    store.set_title("")
    with pytest.raises(DraftValidationError):
        await store.save(_gateway(async_client, auth_headers))
    assert store.draft.title == ""


async def test_status_codes_map_to_errors(async_client: AsyncClient, auth_headers: dict) -> None:
    with pytest.raises(GatewayNotFoundError):
        await _gateway(async_client).get_published_survey(uuid.uuid4())
    with pytest.raises(GatewayValidationError):
        await _gateway(async_client).get_published_survey("nope")
    with pytest.raises(GatewayAuthError):
        await _gateway(async_client).list_surveys()

    bad_token = SurveyGateway("http://test", token="garbage", client=async_client)
    with pytest.raises(GatewayAuthError) as excinfo:
        await bad_token.list_surveys()
    assert excinfo.value.status_code == 403


async def test_validation_error_carries_server_message(async_client: AsyncClient, auth_headers: dict) -> None:
    request = SurveyCreateRequest.model_construct(
        title="One option",
        description="",
        questions=[MultipleChoiceQuestion(id=1, title="Pick", options=("A",))],
        estimatedTime="",
        settings=SurveySettings(),
    )
    with pytest.raises(GatewayValidationError) as excinfo:
        await _gateway(async_client, auth_headers).create_survey(request)
    assert excinfo.value.status_code == 400
    assert excinfo.value.payload["error"]["details"]["issues"][0]["code"] == "InsufficientOptions"


async def test_transport_failure_is_gateway_error() -> None:
    def boom(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("down", request=request)

    async with SurveyGateway(
        "http://api", client=httpx.AsyncClient(transport=httpx.MockTransport(boom))
    ) as gateway:
        with pytest.raises(GatewayError):
            await gateway.get_published_survey(uuid.uuid4())


async def test_server_error_is_plain_gateway_error() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(503, json={"detail": "maintenance"}))
    async with httpx.AsyncClient(transport=transport) as client:
        gateway = SurveyGateway("http://api", client=client)
        with pytest.raises(GatewayError) as excinfo:
            await gateway.get_published_survey(uuid.uuid4())
    assert type(excinfo.value) is GatewayError
    assert str(excinfo.value) == "maintenance"
