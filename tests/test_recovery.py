# tests/test_recovery.py
from chatjson import DecodeSource, Operation, PromptType, ResponseKind, decode
from chatjson.core.recovery import (
    RECOVERED_EXPLANATION,
    find_string_field,
    find_string_list,
    recover,
    recover_classification,
    recover_context_retrieval,
    recover_general_answer,
    recover_single_task,
    recover_task_list,
    unescape_json_string,
)


def test_unescape_json_string():
    assert unescape_json_string(r'a\"b\\c\ndA') == 'a"b\\c\ndA'


def test_unescape_keeps_unknown_escapes():
    assert unescape_json_string(r"\q\u12") == "\\q\\u12"
    assert unescape_json_string(r"Models\Food.cs") == "Models\\Food.cs"


def test_unescape_combines_surrogate_pairs():
    assert unescape_json_string(r"smile \ud83d\ude00!") == "smile \U0001F600!"
    assert unescape_json_string(r"\uD83D\uDE00") == "\U0001F600"


def test_unescape_replaces_lone_surrogates():
    assert unescape_json_string(r"a\ud83d b") == "a\ufffd b"
    assert unescape_json_string(r"\ude00") == "\ufffd"


def test_find_string_field_tolerates_escaped_quotes():
    text = r'{"code": "print(\"hi\")", "file_path": "a.py"'
    assert find_string_field(text, "code") == 'print("hi")'
    assert find_string_field(text, "FILE_PATH") == "a.py"
    assert find_string_field(text, "missing") is None


def test_find_string_field_runs_to_end_of_text():
    assert find_string_field('{"code": "class A {\\n', "code") == "class A {\n"


def test_find_string_list_truncated():
    assert find_string_list('{"relevant_files": ["a.cs", "b.cs", "c', "relevant_files") == ["a.cs", "b.cs"]
    assert find_string_list('{"relevant_files": []}', "relevant_files") == []
    assert find_string_list("{}", "relevant_files") is None


def test_recover_single_task_forces_update():
    value = recover_single_task('{"operation": "Delete", "code": "x = 1", "file_path": "a.py", "expl')
    assert value.code == "x = 1"
    assert value.file_path == "a.py"
    assert value.operation is Operation.UPDATE
    assert value.explanation == RECOVERED_EXPLANATION


def test_recover_single_task_needs_code():
    assert recover_single_task('{"file_path": "a.py"') is None
    assert recover_single_task('{"code": "", "file_path": "a.py"') is None


def test_recover_classification():
    value = recover_classification('{"type": "QuestionAnswer", "reasoning": "asks about')
    assert value.kind is PromptType.QUESTION_ANSWER
    assert value.reasoning == "asks about"
    assert recover_classification('{"reasoning": "x"') is None


def test_recover_context_retrieval():
    value = recover_context_retrieval('{"reasoning": "needed", "relevant_files": ["Models/Food.cs"')
    assert value.relevant_files == ("Models/Food.cs",)
    assert value.reasoning == "needed"


def test_recover_general_answer():
    value = recover_general_answer('{"answer": "Use a \\"using\\" block", "references": ["a.cs"')
    assert value.answer == 'Use a "using" block'
    assert value.references == ("a.cs",)
    assert recover_general_answer('{"answer": ""') is None


def test_recover_task_list_keeps_complete_tasks():
    text = (
        '{"tasks": [{"task_name": "A", "target_file": "a.cs", "operation": "Create", "detailed_prompt": "make a"}, '
        '{"task_name": "B", "target_file": "b.cs", "detailed_prompt": "unfinished'
    )
    value = recover_task_list(text)
    assert [t.task_name for t in value.tasks] == ["A"]
    assert value.tasks[0].operation is Operation.CREATE


def test_recover_task_list_ignores_objects_nested_in_prompts():
    text = (
        '{"tasks": [{"task_name": "A", "target_file": "a.cs", "detailed_prompt": "add {\\"x\\": 1} config"}, '
        '{"task_name": "B", "detailed_prompt": "use {\\"y\\": 2}'
    )
    value = recover_task_list(text)
    assert [t.task_name for t in value.tasks] == ["A"]


def test_recover_task_list_nothing_usable():
    assert recover_task_list('{"tasks": [{"task_name": "A"') is None
    assert recover_task_list('{"summary": "x"}') is None


def test_recover_dispatch():
    assert recover("", ResponseKind.SINGLE_TASK) is None
    assert recover('{"answer": "ok"', ResponseKind.GENERAL_ANSWER).answer == "ok"


def test_decode_recovers_truncated_task_list():
    text = '```json\n{"summary": "plan", "tasks": [{"task_name": "A", "target_file": "a.cs"}, {"task_name": "B'
    result = decode(text, ResponseKind.TASK_LIST)
    assert result.source is DecodeSource.RECOVERED
    assert [t.target_file for t in result.value.tasks] == ["a.cs"]
    assert result.value.summary == "plan"


def test_decode_recovers_emoji_from_truncated_code():
    text = r'{"code": "s = \"\ud83d\ude00\"", "file_path": "a.py", "operation": "Cre'
    result = decode(text, ResponseKind.SINGLE_TASK)
    assert result.source is DecodeSource.RECOVERED
    assert result.value.code == 's = "\U0001F600"'
    assert result.value.code.encode("utf-8") == b's = "\xf0\x9f\x98\x80"'


def test_decode_recovers_backslash_path_from_truncated_task():
    result = decode(r'{"code": "class Food {}", "file_path": "Models\Food.cs", "expl', ResponseKind.SINGLE_TASK)
    assert result.source is DecodeSource.RECOVERED
    assert result.value.file_path == r"Models\Food.cs"
