# ollacoder/core/generator.py
"""
Text generator backed by a local Ollama server (``POST /api/generate``).
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from .config import DEFAULT_OPTIONS, AssistantConfig
from .exceptions import GenerationError

logger = logging.getLogger(__name__)


class ITextGenerator(ABC):
    """Submit a prompt, receive text."""

    @abstractmethod
    async def generate(self, prompt: str, format_hint: Optional[str] = None) -> str:
        """
        Return the generated text. Implementations raise ``GenerationError`` for
        every failure so callers can treat it as a failed attempt.
        """
        pass


class OllamaGenerator(ITextGenerator):
    """
    Every failure (connection, timeout, HTTP status, payload without a
    ``response`` string) is raised as ``GenerationError``.
    """

    def __init__(
        self,
        model: str = "gpt-oss:20b",
        base_url: str = "http://localhost:11434",
        timeout: float = 300.0,
        options: Optional[Dict[str, Any]] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.options = {**DEFAULT_OPTIONS, **(options or {})}
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_config(cls, config: AssistantConfig) -> 'OllamaGenerator':
        return cls(model=config.model, base_url=config.base_url, timeout=config.timeout, options=config.options)

    def build_payload(self, prompt: str, format_hint: Optional[str] = None) -> Dict[str, Any]:
        payload = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": dict(self.options),
        }
        if format_hint:
            payload["format"] = format_hint
        return payload

    async def generate(self, prompt: str, format_hint: Optional[str] = None) -> str:
        url = f"{self.base_url}/api/generate"
        logger.debug("POST %s model=%s format=%s", url, self.model, format_hint)
        try:
            response = await self._client.post(url, json=self.build_payload(prompt, format_hint))
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            raise GenerationError(f"Request to {url} timed out") from e
        except httpx.HTTPStatusError as e:
            raise GenerationError(f"Ollama returned HTTP {e.response.status_code}: {e.response.text[:200]}") from e
        except httpx.HTTPError as e:
            raise GenerationError(f"Cannot reach Ollama at {self.base_url}: {e}") from e
        except ValueError as e:
            raise GenerationError(f"Ollama returned a non-JSON payload: {e}") from e

        text = data.get("response") if isinstance(data, dict) else None
        if not isinstance(text, str):
            raise GenerationError("Ollama payload has no 'response' text")
        return text

    async def aclose(self):
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> 'OllamaGenerator':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
