# chatjson/core/defaults.py
"""Safe fallback values, one per response shape."""

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
)
from ..exceptions import UnsupportedShapeError


def default_response(kind: ResponseKind) -> ResponseShape:
    """
    Placeholder value for ``kind``. Used only after every decode and recovery
    step has failed.

    Raises:
        UnsupportedShapeError: ``kind`` is not one of the five known shapes.
    """
    if kind is ResponseKind.CLASSIFICATION:
        return Classification(
            kind=PromptType.CODING,
            reasoning="Failed to classify - defaulting to coding",
            kind_text=PromptType.CODING.value,
        )
    if kind is ResponseKind.CONTEXT_RETRIEVAL:
        return ContextRetrieval(relevant_files=(), reasoning="Could not determine relevant files")
    if kind is ResponseKind.TASK_LIST:
        return TaskList(tasks=(), summary="Failed to generate tasks")
    if kind is ResponseKind.SINGLE_TASK:
        return SingleTask(
            code="",
            file_path="",
            operation=Operation.UPDATE,
            explanation="Failed to generate code",
            operation_text=Operation.UPDATE.value,
        )
    if kind is ResponseKind.GENERAL_ANSWER:
        return GeneralAnswer(answer="Unable to process the question at this time.", references=())
    raise UnsupportedShapeError(kind)
