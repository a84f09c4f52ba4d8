# chatjson/core/result.py
"""
Explicit result types threaded through the decode pipeline, so expected
failures (unparseable text, missing fields) travel as values instead of
exceptions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .models import ResponseShape


class ParseOutcome(Enum):
    SUCCESS = "success"
    NEEDS_REPAIR = "needs_repair"
    UNRECOVERABLE = "unrecoverable"


@dataclass(frozen=True)
class ParseResult:
    outcome: ParseOutcome
    text: str
    data: Any = None
    repaired: bool = False
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome is ParseOutcome.SUCCESS


class DecodeSource(Enum):
    PARSED = "parsed"        # full structural decode
    RECOVERED = "recovered"  # field-pattern salvage
    DEFAULT = "default"      # safe placeholder


@dataclass(frozen=True)
class DecodeResult:
    value: ResponseShape
    source: DecodeSource
    error: Optional[str] = None

    @property
    def degraded(self) -> bool:
        return self.source is DecodeSource.DEFAULT
