from typing import Any, Mapping, Optional

from pydantic import AliasChoices, BaseModel, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    api_url: str = "http://api.mixpanel.com"
    request_timeout_seconds: float = 10.0
    log_level: str = "INFO"
    log_json: bool = False

    class Config:
        env_prefix = "MIXPANEL_"


settings = Settings()


class ClientConfig(BaseModel):
    """Per-client options. Unknown keys are kept so merges never lose data."""

    api_key: Optional[str] = Field(None, validation_alias=AliasChoices("api_key", "key"))
    test: bool = False
    debug: bool = False

    model_config = {"extra": "allow", "populate_by_name": True}

    def merged(self, update: Optional[Mapping[str, Any]]) -> "ClientConfig":
        """Return a copy with the supplied keys overwritten (last write wins)."""
        if not update:
            return self.model_copy()
        if "token" in update:
            raise ValueError("token cannot be changed after the client is created")
        values = self.model_dump()
        for k, v in update.items():
            values["api_key" if k == "key" else k] = v
        return ClientConfig.model_validate(values)
