# chatjson/__init__.py
"""
ChatJSON - resilient decoding of structured output from language models.
"""

from .core.decoder import decode, decode_value
from .core.defaults import default_response
from .core.models import (
    Classification,
    ContextRetrieval,
    GeneralAnswer,
    Operation,
    PromptType,
    ResponseKind,
    SingleTask,
    TaskList,
    TaskRecord,
)
from .core.result import DecodeResult, DecodeSource
from .exceptions import ChatJsonError, UnsupportedShapeError

__all__ = [
    'decode', 'decode_value', 'default_response',
    'ResponseKind', 'Operation', 'PromptType',
    'Classification', 'ContextRetrieval', 'TaskList', 'TaskRecord', 'SingleTask', 'GeneralAnswer',
    'DecodeResult', 'DecodeSource', 'ChatJsonError', 'UnsupportedShapeError',
]
