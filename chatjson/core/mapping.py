# chatjson/core/mapping.py
"""
Field mapping from parsed JSON data to the typed response records.

Keys are matched case-insensitively and unknown keys are ignored. Values are
coerced leniently: a missing string becomes ``""``, a scalar in a list field
becomes a one-item list, enum-like text falls back to its safe member.
"""

import json
from typing import Any, Dict, Mapping, Tuple

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
from ..exceptions import UnsupportedShapeError


class ShapeMismatch(ValueError):
    """Parsed data cannot be mapped onto the requested shape."""


def fold_keys(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Lower-case every key. The first spelling of a key wins."""
    folded: Dict[str, Any] = {}
    for key, value in data.items():
        folded.setdefault(str(key).strip().lower(), value)
    return folded


def as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    # objects and arrays where a string was expected
    return json.dumps(value, ensure_ascii=False)


def as_text_tuple(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(as_text(item) for item in value if item is not None)
    return (as_text(value),)


def _require_mapping(data: Any, kind: ResponseKind) -> Dict[str, Any]:
    if not isinstance(data, Mapping):
        raise ShapeMismatch(f"expected an object for {kind.value}, got {type(data).__name__}")
    return fold_keys(data)


def task_from_mapping(data: Mapping[str, Any]) -> TaskRecord:
    fields = fold_keys(data)
    operation_text = as_text(fields.get("operation"))
    return TaskRecord(
        task_name=as_text(fields.get("task_name")),
        target_file=as_text(fields.get("target_file")),
        operation=Operation.parse(operation_text),
        detailed_prompt=as_text(fields.get("detailed_prompt")),
        dependencies=as_text_tuple(fields.get("dependencies")),
        operation_text=operation_text,
    )


def _tasks_from_list(items: Any) -> Tuple[TaskRecord, ...]:
    if items is None:
        return ()
    if isinstance(items, Mapping):
        items = [items]
    if not isinstance(items, list):
        raise ShapeMismatch("'tasks' is not a list")
    return tuple(task_from_mapping(item) for item in items if isinstance(item, Mapping))


def build_shape(kind: ResponseKind, data: Any) -> ResponseShape:
    """
    Map parsed JSON ``data`` onto the record for ``kind``.

    Raises:
        ShapeMismatch: ``data`` has the wrong structure for ``kind``.
        UnsupportedShapeError: ``kind`` has no mapping rules.
    """
    if kind is ResponseKind.CLASSIFICATION:
        fields = _require_mapping(data, kind)
        kind_text = as_text(fields.get("type"))
        return Classification(
            kind=PromptType.parse(kind_text),
            reasoning=as_text(fields.get("reasoning")),
            kind_text=kind_text,
        )

    if kind is ResponseKind.CONTEXT_RETRIEVAL:
        if isinstance(data, list):
            return ContextRetrieval(relevant_files=as_text_tuple(data), reasoning="")
        fields = _require_mapping(data, kind)
        return ContextRetrieval(
            relevant_files=as_text_tuple(fields.get("relevant_files")),
            reasoning=as_text(fields.get("reasoning")),
        )

    if kind is ResponseKind.TASK_LIST:
        if isinstance(data, list):
            return TaskList(tasks=_tasks_from_list(data), summary="")
        fields = _require_mapping(data, kind)
        return TaskList(
            tasks=_tasks_from_list(fields.get("tasks")),
            summary=as_text(fields.get("summary")),
        )

    if kind is ResponseKind.SINGLE_TASK:
        fields = _require_mapping(data, kind)
        operation_text = as_text(fields.get("operation"))
        return SingleTask(
            code=as_text(fields.get("code")),
            file_path=as_text(fields.get("file_path")),
            operation=Operation.parse(operation_text),
            explanation=as_text(fields.get("explanation")),
            operation_text=operation_text,
        )

    if kind is ResponseKind.GENERAL_ANSWER:
        fields = _require_mapping(data, kind)
        return GeneralAnswer(
            answer=as_text(fields.get("answer")),
            references=as_text_tuple(fields.get("references")),
        )

    raise UnsupportedShapeError(kind)
