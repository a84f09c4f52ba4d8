# ollacoder/core/structured.py
"""
Structured requests: prompt the generator and decode its answer into a
response shape, with one retry that asks for JSON output explicitly.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from chatjson import DecodeResult, DecodeSource, ResponseKind, UnsupportedShapeError, decode, default_response
from chatjson.core.models import ResponseShape

from .exceptions import GenerationError
from .generator import ITextGenerator
from .prompts import PromptRenderer

logger = logging.getLogger(__name__)

# First attempt without a format hint, second with the generator's JSON mode.
ATTEMPT_FORMATS = (None, "json")


class StructuredClient:
    def __init__(
        self,
        generator: ITextGenerator,
        renderer: Optional[PromptRenderer] = None,
        retry_delay: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.generator = generator
        self.renderer = renderer or PromptRenderer()
        self.retry_delay = retry_delay
        self._sleep = sleep

    async def request(self, prompt: str, kind: ResponseKind) -> DecodeResult:
        """
        Send ``prompt`` and decode the answer as ``kind``.

        Stops at the first attempt whose decode did not fall back to the
        default value. When every attempt degrades, the last attempt's default
        is returned; failures never reach the caller as exceptions.

        Raises:
            UnsupportedShapeError: ``kind`` is not a known response kind.
        """
        if not isinstance(kind, ResponseKind):
            raise UnsupportedShapeError(kind)

        full_prompt = self.renderer.with_json_rules(prompt)
        result = DecodeResult(default_response(kind), DecodeSource.DEFAULT, "no attempt made")

        for attempt, format_hint in enumerate(ATTEMPT_FORMATS, start=1):
            label = "with" if format_hint else "without"
            if attempt > 1 and self.retry_delay > 0:
                await self._sleep(self.retry_delay)

            try:
                raw = await self.generator.generate(full_prompt, format_hint)
            except GenerationError as e:
                logger.debug("Attempt %d %s JSON format failed: %s", attempt, label, e)
                result = DecodeResult(default_response(kind), DecodeSource.DEFAULT, str(e))
                continue

            logger.debug("Raw response (attempt %d %s JSON format): %s", attempt, label, raw[:500])
            result = decode(raw, kind)
            if not result.degraded:
                if result.source is DecodeSource.RECOVERED:
                    logger.info("Using partially recovered %s response", kind.value)
                return result
            logger.debug("Attempt %d %s JSON format degraded: %s", attempt, label, result.error)

        logger.warning("Could not parse %s response, using default. Error: %s", kind.value, result.error)
        return result

    async def request_value(self, prompt: str, kind: ResponseKind) -> ResponseShape:
        return (await self.request(prompt, kind)).value
