from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

import pytest
from pydantic import ValidationError

from nimbus.cache import FileDataStore, ObjectCache
from nimbus.common import AppDirectories
from nimbus.objects import ConnectionFailedError, FetchTimeoutError, ObjectNotFoundError, RemoteObject
from nimbus.objects.errors import is_connectivity_error


def test_from_json_separates_reserved_keys() -> None:
    obj = RemoteObject.from_json(
        "MyClass",
        {
            "objectId": "abc123",
            "createdAt": "2024-01-02T03:04:05.678Z",
            "updatedAt": "2024-01-03T00:00:00.000Z",
            "ACL": {"*": {"read": True}},
            "name": "widget",
            "tags": ["a", "b"],
        },
    )

    assert obj.object_id == "abc123"
    assert obj.created_at == datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=UTC)
    assert obj.data == {"name": "widget", "tags": ["a", "b"]}
    assert obj["name"] == "widget"
    assert obj.get("missing", "fallback") == "fallback"


def test_to_json_uses_rest_field_names() -> None:
    obj = RemoteObject(
        class_name="MyClass",
        object_id="abc123",
        created_at=datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=UTC),
        data={"name": "widget"},
    )

    assert obj.to_json() == {
        "className": "MyClass",
        "objectId": "abc123",
        "createdAt": "2024-01-02T03:04:05.678Z",
        "name": "widget",
    }


def test_to_json_round_trips_through_from_json() -> None:
    payload = {"objectId": "abc123", "createdAt": "2024-01-02T03:04:05.678Z", "count": 2}

    obj = RemoteObject.from_json("MyClass", payload)

    assert RemoteObject.from_json("MyClass", obj.to_json()) == obj


@pytest.mark.parametrize("class_name", ["", "1Class", "My-Class", "My Class"])
def test_rejects_invalid_class_name(class_name: str) -> None:
    with pytest.raises(ValidationError):
        RemoteObject(class_name=class_name, object_id="abc123")


def test_rejects_missing_object_id() -> None:
    with pytest.raises(ValidationError):
        RemoteObject.from_json("MyClass", {"name": "no id"})


def test_objects_are_immutable() -> None:
    obj = RemoteObject(class_name="MyClass", object_id="abc123")

    with pytest.raises(ValidationError):
        obj.object_id = "other"


def test_connectivity_errors_are_recognised() -> None:
    assert is_connectivity_error(ConnectionFailedError(message="down"))
    assert is_connectivity_error(FetchTimeoutError(message="slow"))
    assert not is_connectivity_error(ObjectNotFoundError(message="gone"))


@pytest.mark.parametrize("key", ["objectId", "className", "createdAt", "ACL"])
def test_rejects_reserved_keys_in_data(key: str) -> None:
    with pytest.raises(ValidationError, match=key):
        RemoteObject(class_name="MyClass", object_id="abc123", data={key: "zzz"})


def test_cached_object_keeps_its_identity(data_home: Path) -> None:
    cache = ObjectCache(FileDataStore(namespace="objects", directories=AppDirectories()))
    obj = RemoteObject(class_name="MyClass", object_id="abc123", data={"name": "widget"})
    obj.data["objectId"] = "zzz"

    cache.put(obj)
    cached = cache.get("MyClass", "abc123").unwrap()

    assert cached.object_id == "abc123"
    assert cached.class_name == "MyClass"
