"""Reusable adapter base classes."""

from .responses import ResponsesClientBase

__all__ = ["ResponsesClientBase"]
