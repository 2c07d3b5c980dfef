"""
Onboarding backend REST client
Thin async wrapper over the forms, fields, field-responses and notifications
endpoints. HTTP failures are translated into the portal's error taxonomy.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from onboarding.config.settings import settings
from onboarding.models.form import FormSchema, FieldSchema
from onboarding.models.notification import NotificationEvent
from onboarding.models.submission import SubmissionAck, SubmissionPage, SubmissionPayload
from onboarding.utils.exceptions import NotFound, SubmissionRejected, TransportError

logger = logging.getLogger(__name__)

NOTIFICATIONS_ORDERING = "-created_at"


class OnboardingApiClient:
    """Async client for the onboarding backend."""

    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    @classmethod
    def from_settings(cls, transport: Optional[httpx.AsyncBaseTransport] = None) -> "OnboardingApiClient":
        base_url = settings.API_BASE_URL.rstrip("/") + "/"
        client = httpx.AsyncClient(base_url=base_url, timeout=settings.HTTP_TIMEOUT, transport=transport)
        return cls(client)

    async def aclose(self) -> None:
        await self._client.aclose()

    # ─── Forms & Fields ─────────────────────────────────────────────────

    async def list_forms(self) -> List[FormSchema]:
        data = await self._request("GET", "forms/")
        return [_validate(FormSchema, item) for item in data or []]

    async def get_form(self, form_id: int) -> FormSchema:
        data = await self._request("GET", f"forms/{form_id}/", not_found=f"Form {form_id} not found")
        return _validate(FormSchema, data)

    async def create_form(self, name: str, description: str = "") -> FormSchema:
        data = await self._request("POST", "forms/", json={"name": name, "description": description})
        return _validate(FormSchema, data)

    async def create_field(
        self,
        form_id: int,
        label: str,
        field_type: str,
        required: bool = False,
        options: Optional[List[str]] = None,
    ) -> FieldSchema:
        payload = {
            "form": form_id,
            "label": label,
            "field_type": field_type,
            "required": required,
            "options": options,
        }
        data = await self._request("POST", "fields/", json=payload, not_found=f"Form {form_id} not found")
        return _validate(FieldSchema, data)

    # ─── Submissions ────────────────────────────────────────────────────

    async def submit_response(self, payload: SubmissionPayload) -> SubmissionAck:
        data = await self._request(
            "POST",
            "field-responses/",
            json=payload.model_dump(),
            not_found=f"Form {payload.form_id} not found",
            rejectable=True,
        )
        return _validate(SubmissionAck, data or {})

    async def list_submissions(
        self,
        page: int = 1,
        page_size: int = settings.DEFAULT_PAGE_SIZE,
        form_id: Optional[int] = None,
        status: Optional[str] = None,
    ) -> SubmissionPage:
        params: Dict[str, Any] = {"page": page, "page_size": page_size}
        if form_id:
            params["form_id"] = form_id
        if status:
            params["status"] = status
        data = await self._request("GET", "field-responses/", params=params)
        data = data or {}
        return _validate(SubmissionPage, {
            "results": data.get("results") or [],
            "page": data.get("page") or page,
            "total_pages": data.get("total_pages") or 1,
        })

    # ─── Notifications ──────────────────────────────────────────────────

    async def list_notifications(self) -> List[NotificationEvent]:
        data = await self._request("GET", "notifications/", params={"ordering": NOTIFICATIONS_ORDERING})
        return [_validate(NotificationEvent, item) for item in data or []]

    async def mark_notification_read(self, notification_id: int) -> Dict[str, Any]:
        return await self._request(
            "PATCH",
            f"notifications/{notification_id}/",
            json={"is_read": True},
            not_found=f"Notification {notification_id} not found",
        )

    # ─── Plumbing ───────────────────────────────────────────────────────

    async def _request(
        self,
        method: str,
        url: str,
        not_found: Optional[str] = None,
        rejectable: bool = False,
        **kwargs,
    ) -> Any:
        try:
            resp = await self._client.request(method, url, **kwargs)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            detail = _error_detail(exc.response)
            if status_code == 404 and not_found:
                raise NotFound(not_found, detail=detail) from exc
            if rejectable and status_code in (400, 422):
                raise SubmissionRejected("Submission rejected by backend", detail=detail) from exc
            logger.error("%s %s failed with status %d", method, url, status_code)
            raise TransportError(
                f"Backend returned {status_code}", detail=detail, upstream_status=status_code
            ) from exc
        except httpx.RequestError as exc:
            logger.error("%s %s failed: %s", method, url, exc)
            raise TransportError(f"Backend unreachable: {exc}") from exc

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise TransportError("Backend returned a non-JSON body") from exc


def _error_detail(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def _validate(model, data: Any):
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        logger.error("Unexpected %s payload from backend: %s", model.__name__, exc)
        raise TransportError(f"Malformed {model.__name__} in backend response") from exc
