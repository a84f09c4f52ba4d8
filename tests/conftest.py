# tests/conftest.py
"""
Shared fixtures for the chatjson and ollacoder tests.
"""

import os
import tempfile
from pathlib import Path

import pytest

from ollacoder.core.exceptions import GenerationError
from ollacoder.core.generator import ITextGenerator


class ScriptedGenerator(ITextGenerator):
    """
    Generator returning canned responses in order. An exception instance in
    the script is raised instead of returned.
    """

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    async def generate(self, prompt, format_hint=None):
        self.calls.append((prompt, format_hint))
        if not self.responses:
            raise GenerationError("no scripted response left")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    @property
    def prompts(self):
        return [prompt for prompt, _ in self.calls]

    @property
    def format_hints(self):
        return [hint for _, hint in self.calls]


# --- Pytest Fixtures ---

@pytest.fixture(scope="session")
def anyio_backend():
    """Backend for the async tests run through the anyio plugin"""
    return 'asyncio'


@pytest.fixture(scope="function")
def isolated_filesystem():
    """
    Temporary working directory; the original cwd is restored afterwards.
    """
    with tempfile.TemporaryDirectory() as temp_dir:
        temp_path = Path(temp_dir).resolve()
        original_cwd = os.getcwd()
        os.chdir(temp_path)
        try:
            yield temp_path
        finally:
            os.chdir(original_cwd)


@pytest.fixture
def runner():
    """Click CliRunner for CLI commands"""
    from click.testing import CliRunner
    return CliRunner()


@pytest.fixture
def scripted_generator():
    """Factory: ``scripted_generator([...responses])``"""
    return ScriptedGenerator


@pytest.fixture
def fake_sleep():
    """Awaitable sleep replacement that records the requested delays."""
    calls = []

    async def _sleep(delay):
        calls.append(delay)

    _sleep.calls = calls
    return _sleep
