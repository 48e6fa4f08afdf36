from __future__ import annotations

from pathlib import Path
from typing import Optional


def read_text(path: str) -> Optional[str]:
    """Return file contents, or None when the file does not exist.

    Undecodable bytes survive as surrogates, so exact-line matching behaves
    like `grep` on the raw file. PermissionError propagates to the caller.
    """

    try:
        return Path(path).read_text(encoding="utf-8", errors="surrogateescape")
    except FileNotFoundError:
        return None


def has_exact_line(text: str, line: str) -> bool:
    return line in text.splitlines()


def line_to_append(existing: str, line: str) -> str:
    """Text to append so `line` ends up on its own line."""

    if existing and not existing.endswith("\n"):
        return "\n" + line + "\n"
    return line + "\n"
