# tests/test_config.py
import pytest
import yaml

from ollacoder.core.config import (
    DEFAULT_EXTENSION_RULES,
    DEFAULT_OPTIONS,
    AssistantConfig,
    load_config,
)
from ollacoder.core.exceptions import ConfigError
from ollacoder.init import render_config, validate_config_content


def test_missing_file_gives_defaults(tmp_path):
    config = load_config(tmp_path / "nope.yaml")
    assert config == AssistantConfig()
    assert config.model == "gpt-oss:20b"
    assert config.base_url == "http://localhost:11434"
    assert config.timeout == 300.0
    assert config.task_max_attempts == 2
    assert config.options == DEFAULT_OPTIONS
    assert config.extension_rules == DEFAULT_EXTENSION_RULES


def test_load_merges_options(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"model": "llama3", "options": {"temperature": 0.7}}), encoding="utf-8")
    config = load_config(path)
    assert config.model == "llama3"
    assert config.options["temperature"] == 0.7
    assert config.options["seed"] == 42


def test_unknown_keys_are_ignored():
    config = AssistantConfig.from_dict({"model": "m", "colour": "blue"})
    assert config.model == "m"


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == AssistantConfig()


def test_malformed_yaml_raises(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("model: [unclosed", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_non_mapping_raises(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


@pytest.mark.parametrize("data", [
    {"task_max_attempts": 0},
    {"timeout": "soon"},
    {"request_retry_delay": -1},
    {"options": ["temperature"]},
    {"ignore_dirs": "bin"},
    {"extension_rules": [{"keywords": ["x"]}]},
])
def test_invalid_values_raise(data):
    with pytest.raises(ConfigError):
        AssistantConfig.from_dict(data)


def test_extension_rules_are_normalized():
    config = AssistantConfig.from_dict({"extension_rules": [{"keywords": "Component", "extension": ".tsx"}]})
    assert config.extension_rules == [{"keywords": ["component"], "extension": ".tsx"}]


def test_rendered_config_round_trips():
    content = render_config("qwen2.5-coder", "http://gpu-box:11434")
    config = validate_config_content(content)
    assert config.model == "qwen2.5-coder"
    assert config.base_url == "http://gpu-box:11434"
    assert config.extension_rules == DEFAULT_EXTENSION_RULES
    assert config.options == DEFAULT_OPTIONS


def test_validate_config_content_errors():
    with pytest.raises(ConfigError):
        validate_config_content("a: [")
    with pytest.raises(ConfigError):
        validate_config_content("just text")
    assert validate_config_content("") == AssistantConfig()
