"""
Pytest configuration and fixtures
"""
import asyncio
import copy
import json
import re
from typing import Any, Dict, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from onboarding.dependencies import get_api_client, get_channel_factory
from onboarding.main import app
from onboarding.models.form import FieldSchema, FormSchema
from onboarding.services.api_client import OnboardingApiClient
from onboarding.utils.exceptions import ChannelError

BACKEND_URL = "http://backend.test/api/"


def onboarding_form() -> Dict[str, Any]:
    return {
        "id": 7,
        "name": "Client Onboarding",
        "description": "KYC details",
        "fields": [
            {"id": 1, "label": "Full Name", "field_type": "text", "required": True, "options": None},
            {"id": 2, "label": "Country", "field_type": "dropdown", "required": True, "options": ["KE", "UG"]},
        ],
    }


class FakeBackend:
    """In-memory stand-in for the onboarding REST backend."""

    def __init__(self):
        self.forms: Dict[int, Dict[str, Any]] = {7: onboarding_form()}
        self.notifications: List[Dict[str, Any]] = [
            {"id": 6, "message": "New submission for Client Onboarding", "created_at": "2026-10-18T09:30:00Z",
             "submission_id": 16, "is_read": False},
            {"id": 5, "message": "New submission for Client Onboarding", "created_at": "2026-10-18T08:00:00Z",
             "submission_id": 15, "is_read": True},
        ]
        self.submissions: List[Dict[str, Any]] = []
        self.requests: List[httpx.Request] = []
        self.submit_status = 201
        self.offline = False
        self._next_id = 100

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls(self, method: str, path_prefix: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path.startswith(path_prefix)]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.offline:
            raise httpx.ConnectError("connection refused", request=request)

        path = request.url.path
        body = json.loads(request.content) if request.content else None

        if request.method == "GET" and path == "/api/forms/":
            summaries = [{**f, "fields": []} for f in self.forms.values()]
            return httpx.Response(200, json=summaries)

        if request.method == "POST" and path == "/api/forms/":
            self._next_id += 1
            form = {"id": self._next_id, "name": body["name"], "description": body.get("description"), "fields": []}
            self.forms[form["id"]] = form
            return httpx.Response(201, json=form)

        match = re.fullmatch(r"/api/forms/(\d+)/", path)
        if request.method == "GET" and match:
            form = self.forms.get(int(match.group(1)))
            if form is None:
                return httpx.Response(404, json={"detail": "Not found."})
            return httpx.Response(200, json=copy.deepcopy(form))

        if request.method == "POST" and path == "/api/fields/":
            form = self.forms.get(body["form"])
            if form is None:
                return httpx.Response(404, json={"detail": "Not found."})
            self._next_id += 1
            field = {k: v for k, v in body.items() if k != "form"}
            field["id"] = self._next_id
            form["fields"].append(field)
            return httpx.Response(201, json=field)

        if request.method == "POST" and path == "/api/field-responses/":
            if self.submit_status >= 400:
                return httpx.Response(self.submit_status, json={"detail": "rejected"})
            self._next_id += 1
            self.submissions.append(body)
            return httpx.Response(201, json={"submission_id": self._next_id, "status": "submitted"})

        if request.method == "GET" and path == "/api/field-responses/":
            return httpx.Response(200, json={
                "results": [
                    {"submission_id": 15, "form_id": 7, "form_name": "Client Onboarding",
                     "submitted_by": "jane@example.com", "status": "submitted",
                     "submitted_at": "2026-10-18T08:00:00Z", "answers": {"Full Name": "Jane"},
                     "field_responses": []},
                ],
                "page": int(request.url.params.get("page", 1)),
                "total_pages": 3,
            })

        if request.method == "GET" and path == "/api/notifications/":
            return httpx.Response(200, json=copy.deepcopy(self.notifications))

        match = re.fullmatch(r"/api/notifications/(\d+)/", path)
        if request.method == "PATCH" and match:
            for item in self.notifications:
                if item["id"] == int(match.group(1)):
                    item.update(body)
                    return httpx.Response(200, json=item)
            return httpx.Response(404, json={"detail": "Not found."})

        return httpx.Response(500, json={"detail": f"unexpected {request.method} {path}"})


class FakeChannel:
    """Live channel that replays canned messages.

    With `hold=True` the channel stays open after the last message until the
    listener is cancelled, like a quiet websocket.
    """

    def __init__(self, messages: Optional[List[Any]] = None, error: Optional[str] = None,
                 fail_open: bool = False, hold: bool = False):
        self.messages = list(messages or [])
        self.error = error
        self.fail_open = fail_open
        self.hold = hold
        self.opened = 0
        self.closed = 0

    async def __aenter__(self):
        if self.fail_open:
            raise ChannelError("Could not connect")
        self.opened += 1
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.closed += 1

    def __aiter__(self):
        return self._messages()

    async def _messages(self):
        for message in self.messages:
            yield message
        if self.error:
            raise ChannelError(self.error)
        if self.hold:
            await asyncio.Event().wait()


async def settle(rounds: int = 10):
    """Let background tasks run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def api_client(backend):
    return OnboardingApiClient(httpx.AsyncClient(base_url=BACKEND_URL, transport=backend.transport()))


@pytest.fixture
def form_schema():
    return FormSchema.model_validate(onboarding_form())


@pytest.fixture
def make_field():
    def _make(label="Field", field_type="text", required=False, options=None, field_id=1):
        return FieldSchema(id=field_id, label=label, field_type=field_type, required=required, options=options)
    return _make


@pytest.fixture
def live_messages():
    return []


@pytest.fixture
def client(api_client, live_messages):
    app.dependency_overrides[get_api_client] = lambda: api_client
    app.dependency_overrides[get_channel_factory] = lambda: (lambda: FakeChannel(live_messages))
    yield TestClient(app)
    app.dependency_overrides.clear()
