# chatjson/core/boundary.py
"""
Boundary extraction: isolate the JSON-like span inside raw model output.

The span is simply the first ``{``/``[`` to the last ``}``/``]``. There is no
depth tracking, so brackets in prose before or after the payload will widen
the span; callers rely on the later repair and recovery stages for that.
"""

import re
from typing import Optional

# Opening or closing fence with an optional language tag, e.g. ```json
FENCE_PATTERN = re.compile(r"```[ \t]*[a-z0-9_+.-]*[ \t]*(?:\r?\n)?", re.IGNORECASE)

OPENERS = "{["
CLOSERS = "}]"


def strip_code_fences(text: str) -> str:
    """Remove every markdown code-fence marker from ``text``."""
    if not text:
        return ""
    return FENCE_PATTERN.sub("", text)


def find_json_span(text: str) -> Optional[str]:
    """
    Return the substring from the first opening bracket to the last closing
    bracket (inclusive), or ``None`` when there is no such span.
    """
    if not text:
        return None

    start = -1
    for i, ch in enumerate(text):
        if ch in OPENERS:
            start = i
            break

    end = -1
    for i in range(len(text) - 1, -1, -1):
        if text[i] in CLOSERS:
            end = i
            break

    if start >= 0 and end > start:
        return text[start:end + 1]
    return None


def extract_json(text: Optional[str]) -> Optional[str]:
    """Strip fences, then isolate the outermost JSON-like span."""
    if text is None or not text.strip():
        return None
    return find_json_span(strip_code_fences(text))
