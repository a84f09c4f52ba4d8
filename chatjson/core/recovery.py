# chatjson/core/recovery.py
"""
Partial recovery: pull individual known fields out of text that could not be
decoded structurally (truncated output, unbalanced brackets, stray quotes).

Each shape has its own rule. A rule returns ``None`` when the text does not
contain the field that makes a recovered value worth more than the default.
"""

import json
import logging
import re
from typing import Callable, Dict, List, Optional

from .mapping import task_from_mapping
from .models import (
    Classification,
    ContextRetrieval,
    GeneralAnswer,
    Operation,
    PromptType,
    ResponseKind,
    ResponseShape,
    SingleTask,
    TaskList,
    TaskRecord,
)

logger = logging.getLogger(__name__)

RECOVERED_EXPLANATION = "Recovered partial result: the response was not valid JSON, fields were extracted individually."

# A JSON string body that tolerates escaped quotes; may run to end of text.
_STRING_BODY = r'((?:[^"\\]|\\.)*)'
_ITEM_PATTERN = re.compile(r'"' + _STRING_BODY + r'"', re.DOTALL)
_ESCAPE_PATTERN = re.compile(
    r"\\(u[dD][89abAB][0-9a-fA-F]{2}\\u[dD][c-fC-F][0-9a-fA-F]{2}|u[0-9a-fA-F]{4}|.)", re.DOTALL
)
_SIMPLE_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "b": "\b",
    "f": "\f",
    '"': '"',
    "\\": "\\",
    "/": "/",
}


def decode_code_units(high: int, low: Optional[int] = None) -> str:
    """
    Decode one ``\\uXXXX`` escape or a surrogate pair. A lone surrogate has no
    UTF-8 form and becomes U+FFFD.
    """
    if low is not None:
        return chr(0x10000 + ((high - 0xD800) << 10) + (low - 0xDC00))
    if 0xD800 <= high <= 0xDFFF:
        return "\ufffd"
    return chr(high)


def unescape_json_string(body: str) -> str:
    """
    Decode JSON escapes in a captured string body without ever failing.
    Unknown escapes keep their backslash.
    """
    def _replace(match):
        token = match.group(1)
        if len(token) == 11:
            return decode_code_units(int(token[1:5], 16), int(token[7:11], 16))
        if token[0] == "u" and len(token) == 5:
            return decode_code_units(int(token[1:], 16))
        return _SIMPLE_ESCAPES.get(token, "\\" + token)

    return _ESCAPE_PATTERN.sub(_replace, body)


def find_string_field(text: str, key: str) -> Optional[str]:
    pattern = re.compile(r'"' + re.escape(key) + r'"\s*:\s*"' + _STRING_BODY, re.IGNORECASE | re.DOTALL)
    match = pattern.search(text)
    if not match:
        return None
    return unescape_json_string(match.group(1))


def find_string_list(text: str, key: str) -> Optional[List[str]]:
    pattern = re.compile(r'"' + re.escape(key) + r'"\s*:\s*\[(.*?)(?:\]|$)', re.IGNORECASE | re.DOTALL)
    match = pattern.search(text)
    if not match:
        return None
    return [unescape_json_string(item) for item in _ITEM_PATTERN.findall(match.group(1))]


# ==================== per-shape rules ====================

def recover_single_task(text: str) -> Optional[SingleTask]:
    code = find_string_field(text, "code")
    if not code:
        return None
    return SingleTask(
        code=code,
        file_path=find_string_field(text, "file_path") or "",
        operation=Operation.UPDATE,
        explanation=RECOVERED_EXPLANATION,
        operation_text=Operation.UPDATE.value,
    )


def recover_classification(text: str) -> Optional[Classification]:
    kind_text = find_string_field(text, "type")
    if kind_text is None:
        return None
    return Classification(
        kind=PromptType.parse(kind_text),
        reasoning=find_string_field(text, "reasoning") or "",
        kind_text=kind_text,
    )


def recover_context_retrieval(text: str) -> Optional[ContextRetrieval]:
    files = find_string_list(text, "relevant_files")
    if files is None:
        return None
    return ContextRetrieval(relevant_files=tuple(files), reasoning=find_string_field(text, "reasoning") or "")


def recover_general_answer(text: str) -> Optional[GeneralAnswer]:
    answer = find_string_field(text, "answer")
    if not answer:
        return None
    return GeneralAnswer(answer=answer, references=tuple(find_string_list(text, "references") or ()))


def recover_task_list(text: str) -> Optional[TaskList]:
    """Salvage every complete task object, even from a truncated array."""
    match = re.search(r'"tasks"\s*:\s*\[', text, re.IGNORECASE)
    if not match:
        return None

    decoder = json.JSONDecoder()
    tasks: List[TaskRecord] = []
    index = match.end()
    while True:
        index = text.find("{", index)
        if index < 0:
            break
        try:
            item, end = decoder.raw_decode(text, index)
        except ValueError:
            index += 1
            continue
        # braces inside a truncated task's strings can decode to stray objects
        if isinstance(item, dict) and {"task_name", "target_file"} & {str(k).lower() for k in item}:
            tasks.append(task_from_mapping(item))
        index = end

    if not tasks:
        return None
    return TaskList(tasks=tuple(tasks), summary=find_string_field(text, "summary") or "")


RECOVERY_RULES: Dict[ResponseKind, Callable[[str], Optional[ResponseShape]]] = {
    ResponseKind.CLASSIFICATION: recover_classification,
    ResponseKind.CONTEXT_RETRIEVAL: recover_context_retrieval,
    ResponseKind.TASK_LIST: recover_task_list,
    ResponseKind.SINGLE_TASK: recover_single_task,
    ResponseKind.GENERAL_ANSWER: recover_general_answer,
}


def recover(text: str, kind: ResponseKind) -> Optional[ResponseShape]:
    """Apply the recovery rule for ``kind``; ``None`` when nothing usable is found."""
    if not text:
        return None
    rule = RECOVERY_RULES.get(kind)
    if rule is None:
        return None
    value = rule(text)
    if value is not None:
        logger.debug("Recovered partial %s from unparseable response", kind.value)
    return value
