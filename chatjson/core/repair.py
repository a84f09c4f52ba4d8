# chatjson/core/repair.py
"""
Escape repair for JSON text produced by a language model.

Model output mixes over-escaping (``\\"`` before a closing quote) with
under-escaping (raw newlines and quotes inside string values). No single
regex can tell the two apart, so repair is split into passes:

1. ``fix_malformed_escapes`` - ordered regex rules for known corruption
   patterns, followed by a character scanner that drops backslashes in front
   of quotes that are really string boundaries.
2. ``escape_control_characters`` - a scanner that escapes raw control
   characters inside strings, doubles stray backslashes and escapes quotes
   that cannot be a boundary.
3. ``normalize_syntax`` - trailing commas, comments and single-quoted strings.

The scanners are small finite-state machines over OUTSIDE / INSIDE / ESCAPED.
Every pass returns its input untouched when the input already parses, and
none of them raises: text that cannot be repaired comes back as is.
"""

import json
import re
from enum import Enum
from typing import List

STRUCTURAL_DELIMITERS = ",}]:"
BLANKS = " \t\r\n"
JSON_ESCAPES = '"\\/bfnrt'
HEX4 = re.compile(r"[0-9a-fA-F]{4}")

# Applied once each, in order.
MALFORMED_ESCAPE_RULES = [
    # value\",\"next  ->  value","next
    (re.compile(r'\\+",\\"'), '","'),
    # value\"}  /  value\",  /  value\"]  ->  value"}  ...
    (re.compile(r'\\+"(\s*[,}\]])'), r'"\1'),
    # doubled backslash-quote  ->  single escaped quote
    (re.compile(r'\\\\"'), r'\\"'),
    # orphaned backslashes in front of a comma delimiter
    (re.compile(r'\\+(\s*,\s*\\?")'), r'\1'),
]

CONTROL_ESCAPES = {
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
}


class ScanState(Enum):
    OUTSIDE = "outside-string"
    INSIDE = "inside-string"
    ESCAPED = "just-escaped"


def parses(text: str) -> bool:
    """True when ``text`` is strict JSON."""
    try:
        json.loads(text)
    except (ValueError, TypeError, RecursionError):
        return False
    return True


def _next_significant(text: str, index: int) -> str:
    """First non-blank character at or after ``index``; '' at end of text."""
    n = len(text)
    while index < n and text[index] in BLANKS:
        index += 1
    return text[index] if index < n else ""


def _is_boundary_follower(ch: str) -> bool:
    return ch == "" or ch in STRUCTURAL_DELIMITERS


def _is_valid_escape(text: str, index: int) -> bool:
    """True when ``text[index]`` can follow a backslash in a JSON string."""
    c = text[index]
    if c == "u":
        return HEX4.fullmatch(text, index + 1, index + 5) is not None
    return c in JSON_ESCAPES


def _next_code_char(text: str, index: int) -> str:
    """Like ``_next_significant`` but also skips comments."""
    n = len(text)
    while index < n:
        if text[index] in BLANKS:
            index += 1
        elif text.startswith("//", index):
            end = text.find("\n", index)
            index = n if end < 0 else end
        elif text.startswith("/*", index):
            end = text.find("*/", index + 2)
            index = n if end < 0 else end + 2
        else:
            return text[index]
    return ""


# ==================== pass 1: malformed escapes ====================

def apply_escape_rules(text: str) -> str:
    for pattern, replacement in MALFORMED_ESCAPE_RULES:
        text = pattern.sub(replacement, text)
    return text


def scan_escaped_quotes(text: str) -> str:
    """
    Drop backslashes that were put in front of string boundaries.

    Inside a string, ``\\"`` directly followed by a structural delimiter is
    taken as an over-escaped closing quote. Outside a string a backslash in
    front of a quote is never legal, so it is dropped and the quote opens a
    string.
    """
    out: List[str] = []
    state = ScanState.OUTSIDE
    n = len(text)
    i = 0
    while i < n:
        c = text[i]
        if state is ScanState.OUTSIDE:
            if c == "\\" and i + 1 < n and text[i + 1] == '"':
                i += 1
                continue
            if c == '"':
                state = ScanState.INSIDE
            out.append(c)
        elif state is ScanState.INSIDE:
            if c == "\\":
                state = ScanState.ESCAPED
            elif c == '"':
                state = ScanState.OUTSIDE
            out.append(c)
        else:
            if c == '"' and _is_boundary_follower(_next_significant(text, i + 1)):
                out.pop()  # the backslash
                state = ScanState.OUTSIDE
            else:
                state = ScanState.INSIDE
            out.append(c)
        i += 1
    return "".join(out)


def fix_malformed_escapes(text: str) -> str:
    """Regex rules, then the escaped-quote scanner."""
    if not text or parses(text):
        return text
    return scan_escaped_quotes(apply_escape_rules(text))


# ==================== pass 2: unescaped special characters ====================

def escape_control_characters(text: str) -> str:
    """
    Escape raw control characters inside strings and quotes that cannot be
    string boundaries. A backslash that does not start a valid JSON escape
    is doubled so it survives as a literal backslash.

    A raw quote inside a string closes it only when the next non-blank
    character is a structural delimiter or the end of the text; otherwise it
    is taken as part of the value and escaped.
    """
    if not text or parses(text):
        return text

    out: List[str] = []
    state = ScanState.OUTSIDE
    for i, c in enumerate(text):
        if state is ScanState.OUTSIDE:
            if c == '"':
                state = ScanState.INSIDE
            out.append(c)
        elif state is ScanState.ESCAPED:
            if c in CONTROL_ESCAPES:
                # backslash followed by a raw line break
                out.append(CONTROL_ESCAPES[c][-1])
            elif c == "'":
                out[-1] = c
            elif not _is_valid_escape(text, i):
                # stray backslash: Windows paths, regex classes
                out.append("\\" + c)
            else:
                out.append(c)
            state = ScanState.INSIDE
        elif c == "\\":
            out.append(c)
            state = ScanState.ESCAPED
        elif c == '"':
            if _is_boundary_follower(_next_significant(text, i + 1)):
                out.append(c)
                state = ScanState.OUTSIDE
            else:
                out.append('\\"')
        elif c in CONTROL_ESCAPES:
            out.append(CONTROL_ESCAPES[c])
        elif ord(c) < 0x20:
            out.append("\\u%04x" % ord(c))
        else:
            out.append(c)
    return "".join(out)


# ==================== pass 3: syntax cleanup ====================

def normalize_syntax(text: str) -> str:
    """Remove trailing commas and comments, convert single-quoted strings."""
    if not text or parses(text):
        return text

    out: List[str] = []
    state = ScanState.OUTSIDE
    single = False
    n = len(text)
    i = 0
    while i < n:
        c = text[i]
        if state is ScanState.ESCAPED:
            if single and c == "'":
                out.pop()  # \' needs no escape in a double-quoted string
            out.append(c)
            state = ScanState.INSIDE
        elif state is ScanState.INSIDE:
            if c == "\\":
                out.append(c)
                state = ScanState.ESCAPED
            elif single and c == "'":
                out.append('"')
                state = ScanState.OUTSIDE
            elif single and c == '"':
                out.append('\\"')
            else:
                out.append(c)
                if c == '"' and not single:
                    state = ScanState.OUTSIDE
        elif c in "\"'":
            single = c == "'"
            out.append('"')
            state = ScanState.INSIDE
        elif text.startswith("//", i):
            end = text.find("\n", i)
            i = n if end < 0 else end
            continue
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            i = n if end < 0 else end + 2
            continue
        elif c == "," and _next_code_char(text, i + 1) in ("}", "]"):
            pass
        else:
            out.append(c)
        i += 1
    return "".join(out)

