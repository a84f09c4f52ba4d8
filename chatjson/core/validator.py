# chatjson/core/validator.py
"""
Structural validation with a single bounded repair retry.
"""

import json
import logging

from .repair import fix_malformed_escapes, normalize_syntax
from .result import ParseOutcome, ParseResult

logger = logging.getLogger(__name__)


def try_parse(text: str) -> ParseResult:
    """Strict parse. Failure is reported as NEEDS_REPAIR, never raised."""
    if text is None or not text.strip():
        return ParseResult(ParseOutcome.UNRECOVERABLE, text or "", error="empty text")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        return ParseResult(
            ParseOutcome.NEEDS_REPAIR,
            text,
            error=f"{e.msg} at line {e.lineno} column {e.colno}",
        )
    except (ValueError, RecursionError) as e:
        return ParseResult(ParseOutcome.NEEDS_REPAIR, text, error=str(e))
    return ParseResult(ParseOutcome.SUCCESS, text, data=data)


def validate(text: str) -> ParseResult:
    """
    Parse ``text``; on failure run the malformed-escape and syntax passes once
    and parse again. A second failure is UNRECOVERABLE.
    """
    first = try_parse(text)
    if first.outcome is not ParseOutcome.NEEDS_REPAIR:
        return first

    repaired = normalize_syntax(fix_malformed_escapes(text))
    second = try_parse(repaired)
    if second.ok:
        logger.debug("JSON repaired after: %s", first.error)
        return ParseResult(ParseOutcome.SUCCESS, repaired, data=second.data, repaired=True)

    logger.debug("Still invalid after repair attempt: %s", second.error)
    logger.debug("Attempted repair result: %s", repaired[:500])
    return ParseResult(ParseOutcome.UNRECOVERABLE, repaired, error=second.error or first.error)
