import base64
import json
from typing import Any

import httpx
import pytest

from mixpanel_events import Mixpanel


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request and answers with a fixed body."""

    def __init__(self, body: str = "1"):
        self.body = body
        self.requests: list[httpx.Request] = []
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(200, text=self.body)


def decode_data(request: httpx.Request) -> dict[str, Any]:
    return json.loads(base64.b64decode(request.url.params["data"]).decode("utf-8"))


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def mp(transport: RecordingTransport) -> Mixpanel:
    return Mixpanel("tok123", transport=transport)
