"""Shared test fixtures."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from core.config import AppSettings


class RecordingTransport:
    """`httpx.MockTransport` that remembers every request it answers."""

    def __init__(self, status_code: int = 200, body: str = '{"status": "ok"}') -> None:
        self.status_code = status_code
        self.body = body
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, text=self.body)

    def last_json(self) -> Any:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        username="testuser",
        password="testpass",
        tenant="testtenant",
        _env_file=None,
    )


@pytest.fixture
def recording() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def antithesis_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ANTITHESIS_USERNAME", "testuser")
    monkeypatch.setenv("ANTITHESIS_PASSWORD", "testpass")
    monkeypatch.setenv("ANTITHESIS_TENANT", "testtenant")
    monkeypatch.delenv("ANTITHESIS_BASE_URL", raising=False)


@pytest.fixture
def make_transport() -> type[RecordingTransport]:
    return RecordingTransport
