"""
Storage package for the social graph API.

Provides the in-memory entity store and demo seed data.
"""

from .seed import build_demo_store
from .store import EntityStore

__all__ = [
    "EntityStore",
    "build_demo_store",
]
