# ollacoder/core/prompts.py
from pathlib import Path
from typing import Any, Optional, Union

import jinja2

# Template root, shipped inside the package
TEMPLATES_DIR = Path(__file__).parent.parent / "templates"

ALIASES = {
    'classify': 'classify.md.j2',
    'context': 'context.md.j2',
    'plan': 'plan.md.j2',
    'task': 'task.md.j2',
    'answer': 'answer.md.j2',
    'json_rules': 'json_rules.md.j2',
    'config': 'config.yaml.j2',
}


class PromptRenderer:
    def __init__(self, templates_dir: Optional[Union[str, Path]] = None):
        self.templates_dir = Path(templates_dir) if templates_dir else TEMPLATES_DIR
        self.env = self._create_jinja_env()

    def _create_jinja_env(self) -> jinja2.Environment:
        loader = jinja2.FileSystemLoader(str(self.templates_dir))
        return jinja2.Environment(loader=loader, autoescape=False, trim_blocks=True, lstrip_blocks=True)

    def _resolve_template_path(self, template: str) -> str:
        if template in ALIASES:
            template = ALIASES[template]
        if not template.endswith('.j2'):
            template += '.j2'
        return template

    def render(self, template: str, **context: Any) -> str:
        template_path = self._resolve_template_path(template)
        try:
            tmpl = self.env.get_template(template_path)
        except jinja2.TemplateNotFound:
            raise FileNotFoundError(f"Template not found: {template_path}")
        return tmpl.render(**context).strip()

    def with_json_rules(self, prompt: str) -> str:
        """Append the strict JSON formatting reminder to ``prompt``."""
        return self.render('json_rules', prompt=prompt)
