"""Public interface for the git adapter."""

from __future__ import annotations

from .store import GitRepositoryStore

__all__ = ["GitRepositoryStore"]
