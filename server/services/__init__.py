"""Backing logic: item catalog providers."""

from .item_provider import InMemoryItemProvider, JsonItemProvider

__all__ = [
    "InMemoryItemProvider",
    "JsonItemProvider",
]
