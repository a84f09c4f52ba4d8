# ollacoder/core/code_cleaner.py
"""Cleanup of generated file content before it is written."""

import re

from chatjson.core.recovery import decode_code_units

# A surrogate pair first, so emoji are decoded as one character.
UNICODE_ESCAPE = re.compile(
    r"\\u([dD][89abAB][0-9a-fA-F]{2})\\u([dD][c-fC-F][0-9a-fA-F]{2})|\\u([0-9a-fA-F]{4})"
)

# Escape sequences left behind when the model escaped the code twice.
LITERAL_ESCAPES = [
    ("\\r\\n", "\r\n"),
    ("\\n", "\n"),
    ("\\r", "\r"),
    ("\\t", "\t"),
    ('\\"', '"'),
]


def strip_surrounding_quotes(code: str) -> str:
    stripped = code.strip()
    if len(stripped) >= 2 and stripped[0] == stripped[-1] and stripped[0] in "\"'":
        return stripped[1:-1]
    return code


def _decode_unicode(match) -> str:
    high, low, single = match.groups()
    if single is not None:
        return decode_code_units(int(single, 16))
    return decode_code_units(int(high, 16), int(low, 16))


def clean_code(code: str) -> str:
    """
    Undo leftover escaping in generated code: literal ``\\n`` ``\\r`` ``\\t``
    and ``\\"`` sequences, accidental surrounding quotes, and ``\\uXXXX``
    escapes.
    """
    if not code:
        return ""
    code = strip_surrounding_quotes(code)
    for literal, actual in LITERAL_ESCAPES:
        code = code.replace(literal, actual)
    return UNICODE_ESCAPE.sub(_decode_unicode, code)
