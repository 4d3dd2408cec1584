"""Shared base classes for entities and their tables."""

from ._base import Entity, EntityTable, utcnow

__all__ = ["Entity", "EntityTable", "utcnow"]
