"""Tracking state storage."""

from .kv import KeyValueStore, InMemoryStore

__all__ = ["KeyValueStore", "InMemoryStore"]
