# tests/test_assistant.py
import json

import pytest

from chatjson import PromptType
from ollacoder.core.assistant import NO_CONTEXT, TRUNCATED_MARKER, Assistant
from ollacoder.core.config import AssistantConfig
from ollacoder.core.file_store import WorkspaceFileStore

FOOD_MODEL = "public class Food\n{\n    public string Name { get; set; }\n}\n"


@pytest.fixture
def workspace(tmp_path):
    (tmp_path / "Models").mkdir()
    (tmp_path / "Models" / "Food.cs").write_text(FOOD_MODEL, encoding="utf-8")
    return WorkspaceFileStore(tmp_path)


def _assistant(generator, workspace, sleep, **config):
    settings = {"request_retry_delay": 0, "task_retry_base_delay": 0}
    settings.update(config)
    return Assistant(generator, workspace, AssistantConfig(**settings), sleep=sleep)


@pytest.mark.anyio
async def test_question_flow(scripted_generator, workspace, fake_sleep):
    generator = scripted_generator([
        '{"type": "QuestionAnswer", "reasoning": "asks about the model"}',
        '{"relevant_files": ["Models/Food.cs", "Models/Missing.cs"], "reasoning": "model"}',
        '{"answer": "Food has a Name property.", "references": ["Models/Food.cs"]}',
    ])
    assistant = _assistant(generator, workspace, fake_sleep)

    result = await assistant.handle("What does Food contain?")

    assert result.kind is PromptType.QUESTION_ANSWER
    assert result.answer == "Food has a Name property."
    assert result.references == ["Models/Food.cs"]
    assert result.reports == []
    assert "- Models/Food.cs" in generator.prompts[1]
    answer_prompt = generator.prompts[2]
    assert "=== Models/Food.cs ===" in answer_prompt
    assert "public string Name" in answer_prompt
    assert "Missing.cs" not in answer_prompt


@pytest.mark.anyio
async def test_coding_flow_writes_files(scripted_generator, workspace, fake_sleep):
    plan = {
        "tasks": [{
            "task_name": "Food service",
            "target_file": "Services/FoodService",
            "operation": "Create",
            "detailed_prompt": "Create a FoodService that lists foods",
            "dependencies": [],
        }],
        "summary": "Add a food service",
    }
    task = {
        "code": "public class FoodService {}",
        "file_path": "Services/FoodService.cs",
        "operation": "Create",
        "explanation": "New service",
    }
    generator = scripted_generator([
        '```json\n{"type": "Coding", "reasoning": "new file"}\n```',
        '{"relevant_files": ["Models/Food.cs"], "reasoning": "uses Food"}',
        json.dumps(plan),
        json.dumps(task),
    ])
    assistant = _assistant(generator, workspace, fake_sleep)

    result = await assistant.handle("Add a food service")

    assert result.kind is PromptType.CODING
    assert result.summary == "Add a food service"
    assert len(result.reports) == 1
    assert result.succeeded
    written = workspace.working_directory / "Services" / "FoodService.cs"
    assert written.read_text(encoding="utf-8") == "public class FoodService {}"
    assert "Create a FoodService that lists foods" in generator.prompts[3]
    assert "public string Name" in generator.prompts[3]


@pytest.mark.anyio
async def test_degraded_steps_fall_back_to_defaults(scripted_generator, workspace, fake_sleep):
    # classification, context and plan all fail on both attempts
    generator = scripted_generator(["?"] * 6)
    assistant = _assistant(generator, workspace, fake_sleep)

    result = await assistant.handle("do something")

    assert result.kind is PromptType.CODING
    assert result.reports == []
    assert result.summary == "Failed to generate tasks"
    assert len(generator.calls) == 6


def test_build_context_is_bounded(workspace):
    (workspace.working_directory / "Big.cs").write_text("x" * 500, encoding="utf-8")
    assistant = Assistant(None, workspace, AssistantConfig(max_context_chars=100))

    context = assistant.build_context(["Big.cs", "Models/Food.cs"])

    assert context.startswith("=== Big.cs ===\n")
    assert context.endswith(TRUNCATED_MARKER)
    assert len(context) == 100 + len(TRUNCATED_MARKER)
    assert "Food" not in context


def test_build_context_skips_missing_and_escaping_paths(workspace):
    assistant = Assistant(None, workspace, AssistantConfig())
    assert assistant.build_context([]) == NO_CONTEXT
    assert assistant.build_context(["nope.cs", "../outside.cs"]) == NO_CONTEXT
    assert assistant.build_context(["Models/Food.cs", "Models/Food.cs"]).count("=== Models/Food.cs ===") == 1
