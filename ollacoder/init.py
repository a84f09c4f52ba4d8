# ollacoder/init.py
"""
Project initialization: collect settings interactively and render the config
file content. Writing the file is left to the CLI.
"""

from typing import Optional

import click
import yaml

from .core.config import AssistantConfig
from .core.exceptions import ConfigError
from .core.prompts import PromptRenderer


def render_config(model: str, base_url: str, renderer: Optional[PromptRenderer] = None) -> str:
    renderer = renderer or PromptRenderer()
    return renderer.render('config', model=model, base_url=base_url) + "\n"


def init_project(renderer: Optional[PromptRenderer] = None) -> str:
    """Ask for the model and server, return the rendered config.yaml content."""
    defaults = AssistantConfig()
    model = click.prompt("Model name", default=defaults.model)
    base_url = click.prompt("Ollama server URL", default=defaults.base_url)
    return render_config(model, base_url, renderer)


def validate_config_content(content: str) -> AssistantConfig:
    """
    Parse rendered config content.

    Raises:
        ConfigError: the content is not valid YAML or not a valid configuration.
    """
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"YAML syntax error: {e}") from e

    if data is None:
        return AssistantConfig()
    if not isinstance(data, dict):
        raise ConfigError("Config content must be a YAML mapping")
    return AssistantConfig.from_dict(data)
