# ollacoder/core/exceptions.py
"""Ollacoder exceptions."""


class OllacoderError(Exception):
    """Base class for ollacoder errors."""


class ConfigError(OllacoderError):
    """The configuration file is unreadable or malformed."""


class GenerationError(OllacoderError):
    """The generator could not produce a response (transport, HTTP status, timeout, payload)."""


class FileStoreError(OllacoderError):
    """A file-store read, write or delete failed or was rejected."""

    def __init__(self, message: str, path: str = ""):
        self.path = path
        super().__init__(message)
