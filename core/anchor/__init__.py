"""
Read-only access to externally anchored batch roots.
"""
from .store import AnchorStore, InMemoryAnchorStore, JsonAnchorStore

__all__ = [
    "AnchorStore",
    "InMemoryAnchorStore",
    "JsonAnchorStore",
]
