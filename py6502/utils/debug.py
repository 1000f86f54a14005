"""Lightweight debug logging helpers for the 6502 emulator."""

from __future__ import annotations

import os
import sys
from typing import Iterable

DEBUG_ENV_VAR = "PY6502_DEBUG"

_CATEGORIES: set[str] | None = None


def _load_categories() -> set[str]:
    global _CATEGORIES
    if _CATEGORIES is not None:
        return _CATEGORIES
    value = os.environ.get(DEBUG_ENV_VAR, "")
    if not value:
        _CATEGORIES = set()
        return _CATEGORIES
    parts: Iterable[str] = (part.strip().lower() for part in value.split(","))
    _CATEGORIES = {part for part in parts if part}
    return _CATEGORIES


def reload_categories() -> None:
    """Forget the cached category set so the environment is read again."""

    global _CATEGORIES
    _CATEGORIES = None


def debug_enabled(category: str | None = None) -> bool:
    categories = _load_categories()
    if not categories:
        return False
    if "all" in categories:
        return True
    if category is None:
        return True
    return category.lower() in categories


def _format(category: str, message: str, args: tuple) -> str:
    prefix = f"[6502][{category}]"
    if args:
        try:
            message = message % args
        except (TypeError, ValueError):
            message = f"{message} {args!r}"
    return f"{prefix} {message}"


def debug_log(category: str, message: str, *args) -> None:
    if not debug_enabled(category):
        return
    print(_format(category, message, args))


def diagnostic_log(category: str, message: str, *args) -> None:
    """Always-on diagnostic written to stderr (e.g. unknown opcodes)."""

    print(_format(category, message, args), file=sys.stderr)
