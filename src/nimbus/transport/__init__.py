"""Fetching objects from the remote store."""

from .config import ServerConfig
from .http import HttpObjectFetcher
from .protocol import FetchResult, ObjectFetcher

__all__ = [
    "FetchResult",
    "HttpObjectFetcher",
    "ObjectFetcher",
    "ServerConfig",
]
