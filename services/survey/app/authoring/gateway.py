"""Async HTTP client for the survey REST API.

Used by the authoring core at its save / fetch / submit boundary.  Failures
surface as ``GatewayError`` subclasses; callers decide whether to retry.
"""
from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

import httpx

from app.authoring.exceptions import (
    GatewayAuthError,
    GatewayError,
    GatewayNotFoundError,
    GatewayValidationError,
)
from app.surveys.schemas import (
    PublicSurveyResponse,
    ResponseSubmission,
    ResponseSubmittedResponse,
    SurveyCreatedResponse,
    SurveyCreateRequest,
    SurveySummary,
)

logger = logging.getLogger(__name__)

_STATUS_ERRORS: dict[int, type[GatewayError]] = {
    400: GatewayValidationError,
    401: GatewayAuthError,
    403: GatewayAuthError,
    404: GatewayNotFoundError,
}


def _extract_error_detail(response: httpx.Response) -> tuple[str, Any]:
    detail = response.reason_phrase or f"Request failed ({response.status_code})"
    try:
        payload = response.json()
    except ValueError:
        return detail, None

    if isinstance(payload, dict):
        body_error = payload.get("error")
        if isinstance(body_error, dict) and isinstance(body_error.get("message"), str):
            return body_error["message"], payload
        body_detail = payload.get("detail")
        if isinstance(body_detail, str):
            return body_detail, payload
        if isinstance(payload.get("message"), str):
            return payload["message"], payload
    return detail, payload


class SurveyGateway:
    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self._base_url = base_url.rstrip("/")
        self.token = token

    async def __aenter__(self) -> SurveyGateway:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    async def _request(self, method: str, path: str, *, json: Any = None, auth: bool = False) -> Any:
        headers = {}
        if auth or self.token:
            if not self.token:
                raise GatewayAuthError("A bearer token is required for this call")
            headers["Authorization"] = f"Bearer {self.token}"

        try:
            response = await self._client.request(method, self._url(path), json=json, headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("Survey API %s %s failed: %s", method, path, exc)
            raise GatewayError(f"Could not reach the survey API: {exc}") from exc

        if response.is_success:
            return response.json()

        message, payload = _extract_error_detail(response)
        error_cls = _STATUS_ERRORS.get(response.status_code, GatewayError)
        raise error_cls(message, status_code=response.status_code, payload=payload)

    # ── Endpoints ─────────────────────────────────────────────────────────────

    async def create_survey(self, request: SurveyCreateRequest) -> SurveyCreatedResponse:
        body = request.model_dump(mode="json", by_alias=True, exclude_none=True)
        data = await self._request("POST", "/api/surveys", json=body, auth=True)
        return SurveyCreatedResponse.model_validate(data)

    async def list_surveys(self) -> list[SurveySummary]:
        data = await self._request("GET", "/api/surveys", auth=True)
        return [SurveySummary.model_validate(s) for s in data.get("surveys", [])]

    async def get_published_survey(self, survey_id: UUID | str) -> PublicSurveyResponse:
        data = await self._request("GET", f"/api/surveys/{survey_id}/public")
        return PublicSurveyResponse.model_validate(data)

    async def submit_response(
        self, survey_id: UUID | str, submission: ResponseSubmission
    ) -> ResponseSubmittedResponse:
        body = submission.model_dump(mode="json", by_alias=True, exclude_none=True)
        data = await self._request("POST", f"/api/surveys/{survey_id}/responses", json=body)
        return ResponseSubmittedResponse.model_validate(data)
