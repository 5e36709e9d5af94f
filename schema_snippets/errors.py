"""Error conditions raised by the snippet catalog."""

from __future__ import annotations


class SnippetError(Exception):
    """Base class for client-correctable catalog errors."""


class InvalidSnippetError(SnippetError):
    """The submitted document could not be turned into a snippet."""


class SnippetConflictError(SnippetError):
    """A snippet with the same ``$id`` is already stored."""

    def __init__(self, snippet_id: str) -> None:
        super().__init__(f"A snippet with $id '{snippet_id}' already exists")
        self.snippet_id = snippet_id


class SnippetNotFoundError(SnippetError):
    """No stored snippet matches the requested ``$id``."""

    def __init__(self, snippet_id: str) -> None:
        super().__init__(f"Snippet with $id '{snippet_id}' not found")
        self.snippet_id = snippet_id


__all__ = [
    "SnippetError",
    "InvalidSnippetError",
    "SnippetConflictError",
    "SnippetNotFoundError",
]
