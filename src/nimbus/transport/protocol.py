"""Object fetcher protocol."""

from __future__ import annotations

from typing import Protocol

from result import Result

from nimbus.objects import FetchError, RemoteObject

type FetchResult = Result[RemoteObject, FetchError]


class ObjectFetcher(Protocol):
    """Protocol for retrieving a single object by class name and id.

    Expected failures (not found, network down, bad response) come back as
    ``Err`` values; implementations do not raise for them.
    """

    def fetch(self, class_name: str, object_id: str) -> FetchResult: ...
