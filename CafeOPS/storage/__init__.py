"""Persistence layer: SQLAlchemy tables and the café store."""

from .store import CafeStore

__all__ = ["CafeStore"]
