# chatjson/core/models.py
"""
ChatJSON data model.

The five response shapes a decode call can target, plus the enum-like values
they carry. A caller names the shape it expects with a ``ResponseKind`` member;
the decoder dispatches on that member explicitly.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union


class ResponseKind(Enum):
    CLASSIFICATION = "classification"
    CONTEXT_RETRIEVAL = "context_retrieval"
    TASK_LIST = "task_list"
    SINGLE_TASK = "single_task"
    GENERAL_ANSWER = "general_answer"

    @classmethod
    def parse(cls, value: str) -> "ResponseKind":
        """Look up a kind by value or member name, ignoring case and dashes."""
        key = value.strip().lower().replace("-", "_")
        for member in cls:
            if key in (member.value, member.name.lower()):
                return member
        raise ValueError(f"Unknown response kind '{value}'")


class Operation(Enum):
    CREATE = "Create"
    UPDATE = "Update"
    DELETE = "Delete"

    @classmethod
    def parse(cls, text: Optional[str]) -> "Operation":
        # Garbled or missing values fall back to Update so decoding stays total.
        if isinstance(text, str):
            cleaned = text.strip().lower()
            for member in cls:
                if member.value.lower() == cleaned:
                    return member
        return cls.UPDATE


class PromptType(Enum):
    CODING = "Coding"
    QUESTION_ANSWER = "QuestionAnswer"

    @classmethod
    def parse(cls, text: Optional[str]) -> "PromptType":
        if isinstance(text, str):
            cleaned = text.strip().lower()
            for member in cls:
                if member.value.lower() == cleaned:
                    return member
        return cls.CODING


@dataclass(frozen=True)
class Classification:
    kind: PromptType
    reasoning: str
    kind_text: str = ""


@dataclass(frozen=True)
class ContextRetrieval:
    relevant_files: Tuple[str, ...] = ()
    reasoning: str = ""


@dataclass(frozen=True)
class TaskRecord:
    """A single planned file mutation.

    ``dependencies`` is kept as the model produced it; execution order is the
    order of the task list and never looks at it.
    """
    task_name: str
    target_file: str
    operation: Operation
    detailed_prompt: str
    dependencies: Tuple[str, ...] = ()
    operation_text: str = ""


@dataclass(frozen=True)
class TaskList:
    tasks: Tuple[TaskRecord, ...] = ()
    summary: str = ""


@dataclass(frozen=True)
class SingleTask:
    code: str
    file_path: str
    operation: Operation
    explanation: str
    operation_text: str = ""


@dataclass(frozen=True)
class GeneralAnswer:
    answer: str
    references: Tuple[str, ...] = ()


ResponseShape = Union[Classification, ContextRetrieval, TaskList, SingleTask, GeneralAnswer]
