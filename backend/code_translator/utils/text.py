"""Text helpers for log previews.

Model replies can be long and contain control characters; these helpers
keep log lines short and readable.
"""

import re
from typing import Optional

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_WORD_BREAK = re.compile(r"[\s,.!?;:\-]")

# How far back from the cut to look for a word break
_BREAK_WINDOW = 20


def safe_truncate(text: str, limit: int, ellipsis: str = "...") -> str:
    """Cut ``text`` to at most ``limit`` characters plus ``ellipsis``.

    The cut moves back to a nearby word break when one exists, so previews
    do not end mid-word.
    """
    if not text or len(text) <= limit:
        return text

    head = text[:limit]
    window_start = max(limit - _BREAK_WINDOW, 1)
    breaks = [m.start() for m in _WORD_BREAK.finditer(head, window_start)]
    if breaks:
        head = head[: breaks[-1]].rstrip()
    return head + ellipsis


def normalize_for_display(text: str, max_length: Optional[int] = None) -> str:
    """Strip control characters, collapse whitespace and optionally shorten."""
    if not text:
        return ""

    cleaned = _CONTROL_CHARS.sub("", text)
    cleaned = re.sub(r"[ \t]+", " ", cleaned)
    cleaned = re.sub(r"\n{3,}", "\n\n", cleaned)
    if max_length:
        cleaned = safe_truncate(cleaned, max_length)
    return cleaned.strip()
