# ollacoder/core/paths.py
"""
Target path normalization.

Planned targets often come without an extension ("Services/FoodService").
The extension is guessed from ordered keyword rules against the lower-cased
path; the first matching rule wins, so "Views/ModelPicker" is a model file.
The rules are framework specific and can be replaced from the config.
"""

from pathlib import PurePosixPath
from typing import Any, Dict, List, Optional, Sequence

from .config import DEFAULT_EXTENSION_RULES


def has_extension(path: str) -> bool:
    """True when the file name (last path segment) contains a dot."""
    if not path or not path.strip():
        return False
    normalized = path.strip().replace("\\", "/")
    if normalized.endswith("/"):
        return False
    return "." in PurePosixPath(normalized).name


class ExtensionPolicy:
    def __init__(self, rules: Optional[Sequence[Dict[str, Any]]] = None, default_extension: str = ".cs"):
        self.rules: List[Dict[str, Any]] = [
            {"keywords": [k.lower() for k in r["keywords"]], "extension": r["extension"]}
            for r in (rules if rules is not None else DEFAULT_EXTENSION_RULES)
        ]
        self.default_extension = default_extension

    def infer_extension(self, path: str) -> str:
        lowered = path.lower()
        for rule in self.rules:
            if any(keyword in lowered for keyword in rule["keywords"]):
                return rule["extension"]
        return self.default_extension

    def ensure_extension(self, path: str) -> str:
        """Return ``path`` unchanged if it has an extension, else with an inferred one."""
        cleaned = (path or "").strip()
        if not cleaned or has_extension(cleaned):
            return cleaned
        return cleaned + self.infer_extension(cleaned)
