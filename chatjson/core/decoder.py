# chatjson/core/decoder.py
"""
Typed decoding: the entry point of the pipeline.

    raw text -> boundary extraction -> escape repair -> structural validation
             -> field mapping                       => PARSED
             -> (failure) partial recovery          => RECOVERED
             -> (failure) default response          => DEFAULT

``decode`` is total over the five response kinds: whatever the text, it
returns a well-formed value of the requested shape.
"""

import logging
from typing import Any, Union

from .boundary import extract_json, strip_code_fences
from .defaults import default_response
from .mapping import ShapeMismatch, build_shape
from .models import ResponseKind, ResponseShape
from .recovery import recover
from .repair import escape_control_characters
from .result import DecodeResult, DecodeSource
from .validator import validate
from ..exceptions import UnsupportedShapeError

logger = logging.getLogger(__name__)

# Shapes whose payload is an object; a one-element array around it is unwrapped.
_OBJECT_KINDS = (
    ResponseKind.CLASSIFICATION,
    ResponseKind.SINGLE_TASK,
    ResponseKind.GENERAL_ANSWER,
)


def _as_str(text: Union[str, bytes, None]) -> str:
    if text is None:
        return ""
    if isinstance(text, bytes):
        return text.decode("utf-8", errors="replace")
    return str(text)


def _unwrap(data: Any, kind: ResponseKind) -> Any:
    if kind in _OBJECT_KINDS and isinstance(data, list) and len(data) == 1 and isinstance(data[0], dict):
        return data[0]
    return data


def _structural_decode(text: str, kind: ResponseKind):
    """Returns ``(value, error)``; exactly one of them is ``None``."""
    span = extract_json(text)
    if span is None:
        return None, "No JSON-like span found in response"

    parsed = validate(escape_control_characters(span))
    if not parsed.ok:
        return None, parsed.error
    try:
        return build_shape(kind, _unwrap(parsed.data, kind)), None
    except ShapeMismatch as e:
        return None, str(e)


def decode(text: Union[str, bytes, None], kind: ResponseKind) -> DecodeResult:
    """
    Decode model output into the shape named by ``kind``.

    Never raises for bad text. Raises ``UnsupportedShapeError`` when ``kind``
    is not a ``ResponseKind`` member, since there is no fallback for it.
    """
    if not isinstance(kind, ResponseKind):
        raise UnsupportedShapeError(kind)

    raw = _as_str(text)
    value, error = _structural_decode(raw, kind)
    if value is not None:
        return DecodeResult(value, DecodeSource.PARSED)

    cleaned = strip_code_fences(raw)
    logger.debug("Failed to decode %s: %s", kind.value, error)
    logger.debug("Problematic response (first 500 chars): %s", cleaned[:500])

    recovered = recover(cleaned, kind)
    if recovered is not None:
        return DecodeResult(recovered, DecodeSource.RECOVERED, error)
    return DecodeResult(default_response(kind), DecodeSource.DEFAULT, error)


def decode_value(text: Union[str, bytes, None], kind: ResponseKind) -> ResponseShape:
    """Like ``decode`` but returns only the value."""
    return decode(text, kind).value

