"""Utilities - local git helpers."""

from .git import GitHandler

__all__ = ["GitHandler"]
