"""Specification ABC for declarative resources."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .context import Context


class Specification[P](ABC):
    """Base class for all declared resources."""

    @property
    def id(self) -> str | None:
        """Identifier recorded once the resource exists remotely."""
        return getattr(self, "_id", None)

    @abstractmethod
    def equals(self, ctx: Context[P]) -> bool:
        """Current state matches desired state."""

    def exists(self, ctx: Context[P]) -> bool:
        """Resource exists (defaults to equals)."""
        return self.equals(ctx)

    @abstractmethod
    def apply(self, ctx: Context[P]) -> None:
        """Create the resource and wait until it is visible."""

    @abstractmethod
    def remove(self, ctx: Context[P]) -> None:
        """Delete the resource and wait until it is gone."""

    def __str__(self) -> str:
        return f"{type(self).__name__}({self.id or 'new'})"
