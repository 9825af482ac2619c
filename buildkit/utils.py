"""Utility helpers for the buildkit package.

Small text helpers shared by the shell executor. Keep this module
intentionally tiny to avoid import cycles.
"""

from __future__ import annotations

from typing import Optional


def normalize_line_endings(text: Optional[str], to: str = "\n") -> str:
    """Normalize line endings in the provided text.

    Replaces CRLF ("\r\n") and lone CR ("\r") with the requested
    newline sequence (defaults to "\n"). If ``text`` is None, returns
    the empty string.
    """
    if text is None:
        return ""
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    if to != "\n":
        normalized = normalized.replace("\n", to)
    return normalized


def trim_trailing_newlines(text: Optional[str]) -> str:
    """Drop trailing newlines from command output, keeping other whitespace."""
    return normalize_line_endings(text).rstrip("\n")
