from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import httpx
import pytest
from loguru import logger

from nimbus import Client, MainThreadContext, ServerConfig
from nimbus.transport import HttpObjectFetcher

SERVER_URL = "https://api.example.test/parse"
TIMESTAMP = "2024-01-02T03:04:05.678Z"


class FakeServer:
    """In-process stand-in for the REST API, served through httpx.MockTransport."""

    def __init__(self) -> None:
        self.objects: dict[tuple[str, str], dict[str, Any]] = {}
        self.requests: list[httpx.Request] = []
        self.offline = False

    def add(self, class_name: str, object_id: str, **fields: Any) -> None:
        self.objects[(class_name, object_id)] = {
            "objectId": object_id,
            "createdAt": TIMESTAMP,
            "updatedAt": TIMESTAMP,
            **fields,
        }

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.offline:
            raise httpx.ConnectError("Network is unreachable", request=request)

        *_, class_name, object_id = request.url.path.split("/")
        payload = self.objects.get((class_name, object_id))
        if payload is None:
            return httpx.Response(404, json={"code": 101, "error": "Object not found."})
        return httpx.Response(200, json=payload)


@pytest.fixture
def fake_server() -> FakeServer:
    return FakeServer()


@pytest.fixture
def server_config() -> ServerConfig:
    return ServerConfig(url=SERVER_URL, application_id="test-app", client_key="test-key", timeout=2.0)


@pytest.fixture
def fetcher(fake_server: FakeServer, server_config: ServerConfig) -> Iterator[HttpObjectFetcher]:
    http_client = httpx.Client(transport=httpx.MockTransport(fake_server))
    yield HttpObjectFetcher(server_config, client=http_client)
    http_client.close()


@pytest.fixture
def data_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    data_home = tmp_path / "xdg-data"
    monkeypatch.setenv("XDG_DATA_HOME", str(data_home))
    return data_home


@pytest.fixture
def main_context() -> MainThreadContext:
    return MainThreadContext()


@pytest.fixture
def client(
    fetcher: HttpObjectFetcher,
    server_config: ServerConfig,
    main_context: MainThreadContext,
    data_home: Path,
) -> Iterator[Client]:
    with Client(server_config, fetcher=fetcher, callback_context=main_context) as client:
        yield client


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    messages: list[str] = []
    logger.enable("nimbus")
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
    logger.disable("nimbus")
