"""Shared client helper utilities."""

from .normalization import extract_usage, to_plain_dict

__all__ = [
    "to_plain_dict",
    "extract_usage",
]
