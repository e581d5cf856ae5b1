"""Error types raised or delivered by the client."""


class MixpanelError(Exception):
    """Base class for client errors."""


class ConstructionError(MixpanelError, ValueError):
    """Client created without a project token."""


class ConfigurationError(MixpanelError):
    """Request cannot be built from the current client config (e.g. missing api key on import)."""


class ServiceRejectedError(MixpanelError):
    """The service answered with anything other than "1"."""

    def __init__(self, body: str):
        super().__init__(f"Mixpanel Server Error: {body}")
        self.body = body
