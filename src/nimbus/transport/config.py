"""Server connection settings."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat

from nimbus.constants import DEFAULT_SERVER_URL


class ServerConfig(BaseModel):
    """Where the object store lives and how to authenticate against it."""

    model_config = ConfigDict(extra="forbid")

    url: str = Field(default=DEFAULT_SERVER_URL, min_length=1)
    application_id: str | None = None
    client_key: str | None = None
    session_token: str | None = None
    timeout: PositiveFloat = 10.0

    def headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.application_id:
            headers["X-Parse-Application-Id"] = self.application_id
        if self.client_key:
            headers["X-Parse-REST-API-Key"] = self.client_key
        if self.session_token:
            headers["X-Parse-Session-Token"] = self.session_token
        return headers
