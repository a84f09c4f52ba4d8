# ollacoder/core/config.py
"""
Assistant configuration, stored as YAML in ``.ollacoder/config.yaml``.
Every key has a default, so a missing file means an all-default configuration.
"""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .exceptions import ConfigError

CONFIG_DIR = Path(".ollacoder")
CONFIG_FILE = CONFIG_DIR / "config.yaml"

DEFAULT_OPTIONS = {
    "temperature": 0.2,
    "top_p": 0.9,
    "seed": 42,
    "repeat_penalty": 1.1,
    "num_predict": 2048,
}

DEFAULT_IGNORE_DIRS = [
    ".git", ".vs", ".vscode", ".idea",
    "bin", "obj", "packages",
    "node_modules", "bower_components",
    "wwwroot", "ClientApp",
    "TestResults", "artifacts",
    ".nuget", "publish",
]

DEFAULT_IGNORE_EXTENSIONS = [
    ".dll", ".exe", ".pdb", ".cache",
    ".user", ".suo", ".lock", ".ide",
    ".min.js", ".min.css",
    ".nupkg", ".snupkg",
]

DEFAULT_IGNORE_SUFFIXES = [".g.cs", ".designer.cs"]

# Checked in order against the lower-cased path; first match wins.
DEFAULT_EXTENSION_RULES = [
    {"keywords": ["controller"], "extension": ".cs"},
    {"keywords": ["model"], "extension": ".cs"},
    {"keywords": ["service"], "extension": ".cs"},
    {"keywords": ["view", "page"], "extension": ".cshtml"},
    {"keywords": ["script"], "extension": ".js"},
    {"keywords": ["style"], "extension": ".css"},
]


@dataclass
class AssistantConfig:
    model: str = "gpt-oss:20b"
    base_url: str = "http://localhost:11434"
    timeout: float = 300.0
    options: Dict[str, Any] = field(default_factory=lambda: dict(DEFAULT_OPTIONS))
    request_retry_delay: float = 1.0
    task_max_attempts: int = 2
    task_retry_base_delay: float = 1.0
    max_context_chars: int = 20000
    ignore_dirs: List[str] = field(default_factory=lambda: list(DEFAULT_IGNORE_DIRS))
    ignore_extensions: List[str] = field(default_factory=lambda: list(DEFAULT_IGNORE_EXTENSIONS))
    ignore_suffixes: List[str] = field(default_factory=lambda: list(DEFAULT_IGNORE_SUFFIXES))
    extension_rules: List[Dict[str, Any]] = field(default_factory=lambda: [dict(r) for r in DEFAULT_EXTENSION_RULES])
    default_extension: str = ".cs"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AssistantConfig':
        """
        Build a config from a mapping. Unknown keys are ignored; ``options`` is
        merged over the default generation options.
        """
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known and v is not None}

        if "options" in values:
            if not isinstance(values["options"], dict):
                raise ConfigError("'options' must be a mapping")
            values["options"] = {**DEFAULT_OPTIONS, **values["options"]}

        if "extension_rules" in values:
            values["extension_rules"] = _validate_rules(values["extension_rules"])

        for key in ("ignore_dirs", "ignore_extensions", "ignore_suffixes"):
            if key in values and not isinstance(values[key], list):
                raise ConfigError(f"'{key}' must be a list")

        for key in ("timeout", "request_retry_delay", "task_retry_base_delay"):
            if key in values:
                values[key] = _number(key, values[key])

        for key in ("task_max_attempts", "max_context_chars"):
            if key in values:
                values[key] = int(_number(key, values[key]))
        if values.get("task_max_attempts", 1) < 1:
            raise ConfigError("'task_max_attempts' must be at least 1")

        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _number(key: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"'{key}' must be a number, got {value!r}")
    if value < 0:
        raise ConfigError(f"'{key}' must not be negative")
    return float(value)


def _validate_rules(rules: Any) -> List[Dict[str, Any]]:
    if not isinstance(rules, list):
        raise ConfigError("'extension_rules' must be a list")
    checked = []
    for rule in rules:
        if not isinstance(rule, dict) or "keywords" not in rule or "extension" not in rule:
            raise ConfigError(f"Invalid extension rule: {rule!r}")
        keywords = rule["keywords"]
        if isinstance(keywords, str):
            keywords = [keywords]
        checked.append({"keywords": [str(k).lower() for k in keywords], "extension": str(rule["extension"])})
    return checked


def load_config(path: Optional[Union[str, Path]] = None) -> AssistantConfig:
    """
    Load the YAML config at ``path`` (default ``.ollacoder/config.yaml``).

    Raises:
        ConfigError: the file cannot be read or is not a YAML mapping.
    """
    config_path = Path(path) if path else CONFIG_FILE
    if not config_path.exists():
        return AssistantConfig()

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to read {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a mapping, got {type(data).__name__}")
    return AssistantConfig.from_dict(data)
