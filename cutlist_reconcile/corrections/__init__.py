"""Correction diff detection between source text and canonical parts."""

from .diff_detector import detect_diffs, detect_diffs_for_parts, summarize_corrections

__all__ = [
    "detect_diffs",
    "detect_diffs_for_parts",
    "summarize_corrections",
]
