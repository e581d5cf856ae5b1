from typing import Any, Mapping, Optional, Union

import httpx

from mixpanel_events.config import ClientConfig
from mixpanel_events.dispatcher import Callback, RequestDispatcher
from mixpanel_events.errors import ConstructionError
from mixpanel_events.logging_config import get_logger
from mixpanel_events.models import (
    ENGAGE_ENDPOINT,
    build_event,
    build_profile_delete,
    build_profile_increment,
    build_profile_set,
    classify_update,
)


class People:
    """Engage (profile) operations: ``mp.people.set(...)`` and friends."""

    def __init__(self, client: "Mixpanel"):
        self._client = client

    def set(
        self,
        distinct_id: Any,
        prop: Union[str, Mapping[str, Any]],
        to: Any = None,
        callback: Optional[Callback] = None,
    ):
        """Set one property (``set('bob', 'gender', 'm')``) or several (``set('joe', {...})``)."""
        update, callback = classify_update(prop, to, callback)
        payload = build_profile_set(self._client.token, distinct_id, update).wire()
        if self._client.config.debug:
            get_logger().info("sending_engage", data=payload)
        return self._client.send_request(ENGAGE_ENDPOINT, payload, callback)

    def increment(
        self,
        distinct_id: Any,
        prop: Union[str, Mapping[str, Any]],
        by: Any = None,
        callback: Optional[Callback] = None,
    ):
        """Add to numeric properties. A single property without ``by`` is incremented by 1;
        pass a negative number to decrement. Non-numeric values in a mapping are skipped.
        """
        update, callback = classify_update(prop, by, callback)
        config = self._client.config
        payload = build_profile_increment(
            self._client.token, distinct_id, update, debug=config.debug
        ).wire()
        if config.debug:
            get_logger().info("sending_engage", data=payload)
        return self._client.send_request(ENGAGE_ENDPOINT, payload, callback)

    def delete_user(self, distinct_id: Any, callback: Optional[Callback] = None):
        payload = build_profile_delete(self._client.token, distinct_id).wire()
        if self._client.config.debug:
            get_logger().info("deleting_user", distinct_id=distinct_id)
        return self._client.send_request(ENGAGE_ENDPOINT, payload, callback)


class Mixpanel:
    """Fire-and-report client: each call sends exactly one request, reported via task and callback.

    Calls must be made while an asyncio event loop is running. They return an
    ``asyncio.Task`` that resolves to None or to the error; async failures are never raised.
    """

    def __init__(
        self,
        token: str,
        config: Optional[Mapping[str, Any]] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not token:
            raise ConstructionError("The Mixpanel Client needs a Mixpanel token")
        self._token = token
        self.config = ClientConfig()
        self.dispatcher = RequestDispatcher(base_url=base_url, transport=transport)
        self.people = People(self)
        if config:
            self.set_config(config)

    @property
    def token(self) -> str:
        return self._token

    def set_config(self, config: Optional[Mapping[str, Any]] = None, **overrides: Any) -> None:
        """Overwrite only the given config keys; everything else is kept."""
        update = {**(config or {}), **overrides}
        self.config = self.config.merged(update)

    def send_request(self, endpoint: str, data: dict[str, Any], callback: Optional[Callback] = None):
        return self.dispatcher.send(endpoint, data, self.config, callback)

    def track(
        self,
        event: str,
        properties: Optional[Mapping[str, Any]] = None,
        callback: Optional[Callback] = None,
    ):
        """Send an event. A ``time`` property routes it to the import endpoint,
        which needs ``api_key`` in the config.
        """
        if callable(properties) and callback is None:
            properties, callback = None, properties
        endpoint, event_payload = build_event(self._token, event, properties)
        payload = event_payload.wire()
        if self.config.debug:
            get_logger().info("sending_event", endpoint=endpoint, data=payload)
        return self.send_request(endpoint, payload, callback)
