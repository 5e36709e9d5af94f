"""Snippet data model."""

from .model import Definitions, Snippet

__all__ = ["Definitions", "Snippet"]
