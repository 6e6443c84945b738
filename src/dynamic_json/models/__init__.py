"""Data models for Dynamic JSON."""

from .diff_entry import DiffEntry

__all__ = ["DiffEntry"]
