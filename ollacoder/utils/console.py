# ollacoder/utils/console.py
"""
Console output for the CLI, built on rich: themed message helpers plus the
logging handler that renders library diagnostics on the same console.
"""
import logging
from enum import Enum
from typing import Any, Iterable, Optional, Sequence

from rich.console import Console as RichConsole
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.theme import Theme

CUSTOM_THEME = Theme({
    "info": "cyan bold",
    "success": "green bold",
    "warning": "yellow bold",
    "error": "red bold",
    "heading": "bold underline",
    "path": "magenta",
    "task": "blue",
    "prompt": "green",
})

# Shared console instance
console = RichConsole(theme=CUSTOM_THEME, soft_wrap=True)


# --- message helpers ---

def info(message: str):
    """Cyan informational message."""
    console.print(f"💡 [info]INFO[/info]: {message}")


def success(message: str):
    """Green success message."""
    console.print(f"✅ [success]SUCCESS[/success]: {message}")


def warning(message: str):
    """Yellow warning."""
    console.print(f"⚠️  [warning]WARNING[/warning]: {message}")


def error(message: str):
    """Red error message."""
    console.print(f"❌ [error]ERROR[/error]: {message}")


def heading(title: str):
    """Section heading."""
    console.print(f"\n🎯 [heading]{title}[/heading]\n")


def task_line(index: int, total: int, target: str, name: str):
    """Header line printed before a task runs."""
    console.print(f"\n[task]Task {index}/{total}[/task] [[path]{target}[/path]] : {name}")


def print_panel(content: str, title: str, border_style: str = "blue"):
    """Boxed block of text, used for answers."""
    console.print(Panel(content, title=title, border_style=border_style))


def print_table(rows: Iterable[Sequence[Any]], headers: Sequence[str], title: Optional[str] = None):
    """Simple table; every cell is rendered with str()."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    for h in headers:
        table.add_column(h)
    for row in rows:
        table.add_row(*[str(cell) for cell in row])
    console.print(table)


def _json_default(obj: Any) -> Any:
    if isinstance(obj, Enum):
        return obj.value
    return str(obj)


def print_json(data: Any):
    """Pretty-print JSON data; enums print as their values."""
    console.print_json(data=data, default=_json_default)


# --- interactive input ---

def prompt_input(prompt: str, default: str = None) -> str:
    """Styled input prompt."""
    default_str = f" ({default})" if default else ""
    value = console.input(f"📝 [prompt]{prompt}{default_str}:[/prompt] ")
    return value if value else default


def confirm(prompt: str, default: bool = True) -> bool:
    """Y/N question; an empty answer means ``default``."""
    yes_no = "[Y/n]" if default else "[y/N]"
    response = console.input(f"❓ {prompt} {yes_no}: ").strip().lower()
    if not response:
        return default
    return response in ("y", "yes")


# --- logging ---

def setup_logging(verbose: bool = False) -> None:
    """
    Route stdlib logging (used by chatjson and ollacoder.core) to the console.
    DEBUG when verbose, WARNING otherwise.
    """
    handler = RichHandler(console=console, show_path=False, markup=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root = logging.getLogger()
    for existing in list(root.handlers):
        if isinstance(existing, RichHandler):
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    # the HTTP stack is noisy at DEBUG
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)


# --- banner ---

def show_welcome():
    """Welcome banner."""
    console.print("\n" + "═" * 50, style="bold blue")
    console.print("🚀 [bold green]Ollacoder[/bold green] - local model coding assistant", end="")
    console.print(" 🤖", emoji=True)
    console.print("═" * 50 + "\n", style="bold blue")
