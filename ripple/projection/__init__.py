"""Projection storage for the reactor's read-model."""

from .store import InMemoryProjectionStore, ProjectionStore, validate_fields

__all__ = [
    "ProjectionStore",
    "InMemoryProjectionStore",
    "validate_fields",
]
