"""Utility modules (payload I/O, number formatting)."""

from .numbers import format_number, to_number

__all__ = [
    "format_number",
    "to_number",
]
