"""Payload shapes for the track and engage endpoints, and the builders that produce them."""
import math
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Union

from pydantic import BaseModel, Field

from mixpanel_events.logging_config import get_logger
from mixpanel_events.metrics import INCREMENT_VALUES_DROPPED
from mixpanel_events.timeutil import get_unixtime

LIB_TAG = "python"

TRACK_ENDPOINT = "/track"
IMPORT_ENDPOINT = "/import"
ENGAGE_ENDPOINT = "/engage"


@dataclass(frozen=True)
class Single:
    name: str
    value: Any = None


@dataclass(frozen=True)
class Bulk:
    entries: Mapping[str, Any]


ProfileUpdate = Union[Single, Bulk]


def classify_update(
    prop: Union[str, Mapping[str, Any]],
    value: Any = None,
    callback: Optional[Callable] = None,
) -> tuple[ProfileUpdate, Optional[Callable]]:
    """Resolve the (prop, value, callback) call shape into a variant plus the callback.

    A callable in the value slot is the callback, for either shape; with a single
    property the value is then treated as absent.
    """
    if callback is None and callable(value):
        value, callback = None, value
    if isinstance(prop, Mapping):
        return Bulk(dict(prop)), callback
    return Single(prop, value), callback


class EventPayload(BaseModel):
    event: str
    properties: dict[str, Any]

    def wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class ProfilePayload(BaseModel):
    token: str = Field(..., alias="$token")
    distinct_id: Any = Field(..., alias="$distinct_id")

    model_config = {"populate_by_name": True}

    def wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class ProfileSet(ProfilePayload):
    properties: dict[str, Any] = Field(..., alias="$set")


class ProfileIncrement(ProfilePayload):
    amounts: dict[str, Any] = Field(..., alias="$add")


class ProfileDelete(ProfilePayload):
    delete: Any = Field(..., alias="$delete")


def build_event(
    token: str, event: str, properties: Optional[Mapping[str, Any]] = None
) -> tuple[str, EventPayload]:
    """Return (endpoint, payload) for a tracked event.

    An explicit ``time`` in the caller's properties selects the import endpoint;
    this is decided before ``time`` is filled in below.
    """
    props = dict(properties or {})
    endpoint = IMPORT_ENDPOINT if props.get("time") is not None else TRACK_ENDPOINT
    props["token"] = token
    props["time"] = get_unixtime(props.get("time"))
    props["mp_lib"] = LIB_TAG
    return endpoint, EventPayload(event=str(event), properties=props)


def build_profile_set(token: str, distinct_id: Any, update: ProfileUpdate) -> ProfileSet:
    if isinstance(update, Bulk):
        values = dict(update.entries)
    else:
        values = {update.name: update.value}
    return ProfileSet(token=token, distinct_id=distinct_id, properties=values)


def _as_number(value: Any) -> Optional[Union[int, float]]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return None
        if not math.isfinite(number):
            return None
        return int(number) if number.is_integer() and "." not in value else number
    return None


def build_profile_increment(
    token: str, distinct_id: Any, update: ProfileUpdate, debug: bool = False
) -> ProfileIncrement:
    """Build an ``$add`` payload.

    Bulk entries that are not numeric are dropped rather than failing the call;
    the rest are still sent.
    """
    add: dict[str, Union[int, float]] = {}
    if isinstance(update, Bulk):
        for key, val in update.entries.items():
            number = _as_number(val)
            if number is None:
                INCREMENT_VALUES_DROPPED.inc()
                if debug:
                    get_logger().warning("invalid_increment_value", key=key, value=repr(val))
                continue
            add[key] = number
    else:
        add[update.name] = 1 if update.value is None else update.value
    return ProfileIncrement(token=token, distinct_id=distinct_id, amounts=add)


def build_profile_delete(token: str, distinct_id: Any) -> ProfileDelete:
    return ProfileDelete(token=token, distinct_id=distinct_id, delete=distinct_id)
