"""Service layer for the Git DSL API."""

from .diff import DiffService

__all__ = ["DiffService"]
