from __future__ import annotations

import json
from typing import Any, Callable, List

import httpx
import pytest

from imagegen.http import HttpClient


class RecordingHandler:
    """Replies with a fixed status and JSON body, and keeps every request it receives."""

    def __init__(self, status_code: int, json_body: Any) -> None:
        self.status_code = status_code
        self.json_body = json_body
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.json_body)

    @property
    def last_json(self) -> Any:
        return json.loads(self.requests[-1].content)


@pytest.fixture()
def make_http_client() -> Callable[..., tuple[HttpClient, RecordingHandler]]:
    def _make(status_code: int = 200, json_body: Any = None) -> tuple[HttpClient, RecordingHandler]:
        handler = RecordingHandler(status_code, json_body)
        return HttpClient(transport=httpx.MockTransport(handler)), handler

    return _make
