"""Encode payloads, send them to the ingestion service and classify the reply."""
import asyncio
import base64
import json
import time
from typing import Any, Callable, Optional

import httpx

from mixpanel_events.config import ClientConfig, settings
from mixpanel_events.errors import ConfigurationError, ServiceRejectedError
from mixpanel_events.logging_config import get_logger
from mixpanel_events.metrics import REQUEST_LATENCY, REQUESTS_TOTAL
from mixpanel_events.models import IMPORT_ENDPOINT

Callback = Callable[[Optional[BaseException]], Any]


def _noop(_err: Optional[BaseException]) -> None:
    return None


def encode_payload(payload: dict[str, Any]) -> str:
    raw = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")


def build_params(endpoint: str, payload: dict[str, Any], config: ClientConfig) -> dict[str, Any]:
    """Query parameters for one request. Raises ConfigurationError before any I/O."""
    params: dict[str, Any] = {"data": encode_payload(payload), "ip": 0}
    if endpoint == IMPORT_ENDPOINT:
        if not config.api_key:
            raise ConfigurationError(
                "The Mixpanel Client needs a Mixpanel api key when importing old events: "
                "`init(token, {'api_key': ...})`"
            )
        params["api_key"] = config.api_key
    if config.test:
        params["test"] = 1
    return params


class RequestDispatcher:
    """Issues one GET per payload. No batching, retries or cancellation."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.api_url).rstrip("/")
        self.timeout = settings.request_timeout_seconds if timeout is None else timeout
        self.transport = transport
        self._pending: set[asyncio.Task] = set()

    def send(
        self,
        endpoint: str,
        payload: dict[str, Any],
        config: ClientConfig,
        callback: Optional[Callback] = None,
    ) -> "asyncio.Task[Optional[BaseException]]":
        """Schedule the request and return its task.

        The task resolves to None on success or to the error; ``callback`` gets the same
        value exactly once. A missing api key on import raises here instead.
        """
        params = build_params(endpoint, payload, config)
        loop = asyncio.get_running_loop()
        task = loop.create_task(
            self._request(endpoint, params, config.debug, callback or _noop)
        )
        # the loop only keeps weak references to tasks
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _request(
        self,
        endpoint: str,
        params: dict[str, Any],
        debug: bool,
        callback: Callback,
    ) -> Optional[BaseException]:
        log = get_logger(endpoint=endpoint)
        start = time.perf_counter()
        error: Optional[BaseException] = None
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                r = await client.get(f"{self.base_url}{endpoint}", params=params)
            body = r.text
        except httpx.RequestError as e:
            if debug:
                log.error("transport_error", error=str(e))
            REQUESTS_TOTAL.labels(endpoint=endpoint, outcome="transport_error").inc()
            error = e
        else:
            if body != "1":
                REQUESTS_TOTAL.labels(endpoint=endpoint, outcome="rejected").inc()
                error = ServiceRejectedError(body)
            else:
                REQUESTS_TOTAL.labels(endpoint=endpoint, outcome="success").inc()
        finally:
            REQUEST_LATENCY.labels(endpoint=endpoint).observe(time.perf_counter() - start)
        callback(error)
        return error
