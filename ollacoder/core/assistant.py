# ollacoder/core/assistant.py
"""
Request orchestration: classify the request, gather the relevant files as
context, then either answer the question or plan and execute file tasks.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional, Sequence

from chatjson import (
    Classification,
    ContextRetrieval,
    GeneralAnswer,
    PromptType,
    ResponseKind,
    TaskList,
)

from .config import AssistantConfig
from .exceptions import FileStoreError
from .executor import TaskExecutor, TaskReport
from .file_store import WorkspaceFileStore
from .generator import ITextGenerator, OllamaGenerator
from .paths import ExtensionPolicy
from .prompts import PromptRenderer
from .structured import StructuredClient
from ..utils.console import heading, info, warning

logger = logging.getLogger(__name__)

NO_CONTEXT = "(no relevant files)"
TRUNCATED_MARKER = "\n... [context truncated]"


@dataclass
class AssistantResult:
    kind: PromptType
    answer: Optional[str] = None
    summary: Optional[str] = None
    reports: List[TaskReport] = field(default_factory=list)
    references: List[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return all(r.succeeded for r in self.reports)


class Assistant:
    def __init__(
        self,
        generator: ITextGenerator,
        file_store: WorkspaceFileStore,
        config: Optional[AssistantConfig] = None,
        renderer: Optional[PromptRenderer] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.config = config or AssistantConfig()
        self.generator = generator
        self.file_store = file_store
        self.renderer = renderer or PromptRenderer()
        self.client = StructuredClient(
            generator, self.renderer, retry_delay=self.config.request_retry_delay, sleep=sleep
        )
        self.executor = TaskExecutor(
            self.client,
            file_store,
            renderer=self.renderer,
            extension_policy=ExtensionPolicy(self.config.extension_rules, self.config.default_extension),
            max_attempts=self.config.task_max_attempts,
            base_delay=self.config.task_retry_base_delay,
            sleep=sleep,
        )

    @classmethod
    def from_config(cls, config: AssistantConfig, file_store: Optional[WorkspaceFileStore] = None) -> 'Assistant':
        if file_store is None:
            file_store = WorkspaceFileStore(
                ignore_dirs=config.ignore_dirs,
                ignore_extensions=config.ignore_extensions,
                ignore_suffixes=config.ignore_suffixes,
            )
        return cls(OllamaGenerator.from_config(config), file_store, config)

    async def aclose(self):
        close = getattr(self.generator, "aclose", None)
        if close is not None:
            await close()

    # ==================== pipeline ====================

    async def handle(self, request: str) -> AssistantResult:
        """
        Run one request end to end. Decode problems never escape: each step
        falls back to its default response and the pipeline carries on.
        """
        classification = await self.classify(request)
        info(f"Request type: {classification.kind.value}")

        files = self.file_store.list_files()
        retrieval = await self.retrieve_context(request, files)
        context = self.build_context(retrieval.relevant_files)

        if classification.kind is PromptType.QUESTION_ANSWER:
            answer = await self.answer(request, context)
            return AssistantResult(PromptType.QUESTION_ANSWER, answer=answer.answer, references=list(answer.references))

        plan = await self.plan(request, files, context)
        if not plan.tasks:
            warning(f"No tasks to execute: {plan.summary}")
            return AssistantResult(PromptType.CODING, summary=plan.summary)

        heading(f"Executing {len(plan.tasks)} task(s)")
        reports = await self.executor.execute_all(plan.tasks, context)
        return AssistantResult(PromptType.CODING, summary=plan.summary, reports=reports)

    async def classify(self, request: str) -> Classification:
        prompt = self.renderer.render('classify', request=request)
        return await self.client.request_value(prompt, ResponseKind.CLASSIFICATION)

    async def retrieve_context(self, request: str, files: List[str]) -> ContextRetrieval:
        prompt = self.renderer.render('context', request=request, files=files)
        return await self.client.request_value(prompt, ResponseKind.CONTEXT_RETRIEVAL)

    async def answer(self, request: str, context: str) -> GeneralAnswer:
        prompt = self.renderer.render('answer', request=request, context=context)
        return await self.client.request_value(prompt, ResponseKind.GENERAL_ANSWER)

    async def plan(self, request: str, files: List[str], context: str) -> TaskList:
        prompt = self.renderer.render('plan', request=request, files=files, context=context)
        return await self.client.request_value(prompt, ResponseKind.TASK_LIST)

    # ==================== context ====================

    def build_context(self, relevant_files: Sequence[str]) -> str:
        """
        Concatenate the existing relevant files, each under a ``=== path ===``
        header, up to ``max_context_chars`` characters.
        """
        limit = self.config.max_context_chars
        parts: List[str] = []
        used = 0
        for path in dict.fromkeys(relevant_files):
            try:
                content = self.file_store.read(path)
            except FileStoreError as e:
                logger.warning("Skipping context file %s: %s", path, e)
                continue
            if content is None:
                logger.debug("Context file %s does not exist", path)
                continue

            block = f"=== {path} ===\n{content}\n"
            if used + len(block) > limit:
                remaining = limit - used
                if remaining > 0:
                    parts.append(block[:remaining])
                parts.append(TRUNCATED_MARKER)
                break
            parts.append(block)
            used += len(block)

        return "".join(parts) if parts else NO_CONTEXT
