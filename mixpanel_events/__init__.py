import warnings
from typing import Any, Mapping, Optional

from mixpanel_events.client import Mixpanel, People
from mixpanel_events.config import ClientConfig, Settings
from mixpanel_events.errors import (
    ConfigurationError,
    ConstructionError,
    MixpanelError,
    ServiceRejectedError,
)
from mixpanel_events.models import Bulk, Single
from mixpanel_events.timeutil import get_unixtime

__all__ = [
    "Bulk",
    "Client",
    "ClientConfig",
    "ConfigurationError",
    "ConstructionError",
    "Mixpanel",
    "MixpanelError",
    "People",
    "ServiceRejectedError",
    "Settings",
    "Single",
    "get_unixtime",
    "init",
]


def init(token: str, config: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> Mixpanel:
    return Mixpanel(token, config, **kwargs)


def Client(token: str) -> Mixpanel:
    warnings.warn(
        "The function `Client(token)` is deprecated.  It is now called `init(token)`.",
        DeprecationWarning,
        stacklevel=2,
    )
    return init(token)
