# ollacoder/cli.py
"""
Ollacoder CLI entry point.
"""
import asyncio
from dataclasses import asdict
from pathlib import Path
from typing import Optional

import click

from chatjson import ResponseKind, decode

from . import __version__
from .core.assistant import Assistant, AssistantResult
from .core.config import CONFIG_FILE, AssistantConfig, load_config
from .core.exceptions import ConfigError, FileStoreError, OllacoderError
from .core.file_store import WorkspaceFileStore
from .init import init_project, validate_config_content
from .utils.console import (
    confirm, console, error, heading, info, print_json, print_panel,
    print_table, prompt_input, setup_logging, show_welcome, success, warning,
)

SHAPE_CHOICES = [kind.value for kind in ResponseKind]
EXIT_COMMANDS = ("exit", "quit")


# ------------------------------
# CLI main entry
# ------------------------------

@click.group(invoke_without_command=True)
@click.version_option(__version__, message="Ollacoder CLI v%(version)s")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), default=None,
              help="Config file (default: .ollacoder/config.yaml in the working directory)")
@click.option("--workdir", "-C", type=click.Path(exists=True, file_okay=False), default=None,
              help="Project working directory")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx, config_path: Optional[str], workdir: Optional[str], verbose: bool):
    """🤖 Ollacoder - coding assistant for a local Ollama model"""
    setup_logging(verbose)
    show_welcome()
    ctx.ensure_object(dict)
    ctx.obj['CONFIG_PATH'] = config_path
    ctx.obj['WORKDIR'] = workdir
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ------------------------------
# helpers
# ------------------------------

def _config_path(ctx) -> Path:
    if ctx.obj.get('CONFIG_PATH'):
        return Path(ctx.obj['CONFIG_PATH'])
    workdir = ctx.obj.get('WORKDIR')
    return Path(workdir) / CONFIG_FILE if workdir else CONFIG_FILE


def _load_config(ctx) -> AssistantConfig:
    try:
        return load_config(_config_path(ctx))
    except ConfigError as e:
        error(f"Invalid configuration: {e}")
        raise click.Abort()


def _load_file_store(ctx, config: AssistantConfig) -> WorkspaceFileStore:
    return WorkspaceFileStore(
        root=ctx.obj.get('WORKDIR'),
        ignore_dirs=config.ignore_dirs,
        ignore_extensions=config.ignore_extensions,
        ignore_suffixes=config.ignore_suffixes,
    )


async def _run_request(config: AssistantConfig, file_store: WorkspaceFileStore, request: str) -> AssistantResult:
    assistant = Assistant.from_config(config, file_store)
    try:
        return await assistant.handle(request)
    finally:
        await assistant.aclose()


def _show_result(result: AssistantResult):
    if result.answer is not None:
        print_panel(result.answer, title="💬 Answer", border_style="green")
        if result.references:
            info("References: " + ", ".join(result.references))
        return

    if result.summary:
        console.print(f"\n📝 {result.summary}")
    if not result.reports:
        return

    done = sum(1 for r in result.reports if r.succeeded)
    rows = [
        (r.task_name, r.target_file or "-", "✓" if r.succeeded else "✗", r.attempts, r.error or "")
        for r in result.reports
    ]
    print_table(rows, headers=["Task", "File", "Status", "Attempts", "Error"], title="Task Results")
    if done == len(result.reports):
        success(f"All {done} task(s) completed")
    else:
        warning(f"{done}/{len(result.reports)} task(s) completed")


def _print_files(file_store: WorkspaceFileStore):
    files = file_store.list_files()
    if not files:
        console.print("No files found.", style="yellow")
        return
    print_table([(path,) for path in files], headers=["Path"], title=f"Files in {file_store.working_directory}")
    info(f"{len(files)} file(s)")


# ------------------------------
# Command: init
# ------------------------------

@cli.command()
@click.pass_context
def init(ctx):
    """🔧 Create the configuration file"""
    heading("Project Initialization")
    config_file = _config_path(ctx)

    if config_file.exists():
        if not confirm(f"{config_file} already exists. Overwrite?", default=False):
            info("Cancelled.")
            return

    try:
        content = init_project()
        validate_config_content(content)
        config_file.parent.mkdir(parents=True, exist_ok=True)
        config_file.write_text(content, encoding="utf-8")
    except (OllacoderError, OSError) as e:
        error(f"Initialization failed: {e}")
        raise click.Abort()

    success(f"Generated: {config_file}")


# ------------------------------
# Command: config
# ------------------------------

@cli.command(name="config")
@click.pass_context
def show_config(ctx):
    """📚 Show the effective configuration"""
    heading("Configuration")
    config = _load_config(ctx)
    config_file = _config_path(ctx)
    if not config_file.exists():
        info(f"{config_file} not found, using defaults.")
    print_json(config.to_dict())


# ------------------------------
# Command: files
# ------------------------------

@cli.command()
@click.pass_context
def files(ctx):
    """📋 List the workspace files the assistant can see"""
    heading("Workspace Files")
    config = _load_config(ctx)
    _print_files(_load_file_store(ctx, config))


# ------------------------------
# Command: ask
# ------------------------------

@cli.command()
@click.argument("request")
@click.pass_context
def ask(ctx, request: str):
    """🚀 Handle a single request"""
    config = _load_config(ctx)
    file_store = _load_file_store(ctx, config)
    heading("Request")
    console.print(request)
    try:
        result = asyncio.run(_run_request(config, file_store, request))
    except OllacoderError as e:
        error(f"Request failed: {e}")
        raise click.Abort()
    _show_result(result)


# ------------------------------
# Command: chat
# ------------------------------

@cli.command()
@click.pass_context
def chat(ctx):
    """💬 Interactive session ('exit' or 'quit' to leave, 'cd PATH', 'files')"""
    config = _load_config(ctx)
    file_store = _load_file_store(ctx, config)
    info(f"Working directory: {file_store.working_directory}")

    while True:
        try:
            line = prompt_input("ollacoder")
        except (EOFError, KeyboardInterrupt):
            break
        line = (line or "").strip()
        if not line:
            continue

        command = line.lower()
        if command in EXIT_COMMANDS:
            break
        if command == "files":
            _print_files(file_store)
            continue
        if command.startswith("cd "):
            try:
                new_root = file_store.change_directory(line[3:].strip())
                success(f"Working directory: {new_root}")
            except FileStoreError as e:
                error(str(e))
            continue

        try:
            result = asyncio.run(_run_request(config, file_store, line))
        except Exception as e:
            error(f"Request failed: {e}")
            continue
        _show_result(result)

    info("Bye!")


# ------------------------------
# Command: decode
# ------------------------------

@cli.command(name="decode")
@click.argument("response_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--shape", "-s", type=click.Choice(SHAPE_CHOICES), required=True, help="Expected response shape")
def decode_response(response_file: str, shape: str):
    """🔍 Decode a saved model response file"""
    heading(f"Decoding {response_file} as {shape}")
    try:
        text = Path(response_file).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        error(f"Failed to read response file '{response_file}': {e}")
        raise click.Abort()

    result = decode(text, ResponseKind.parse(shape))
    info(f"Source: {result.source.value}")
    if result.error:
        warning(f"Decode error: {result.error}")
    print_json(asdict(result.value))


if __name__ == "__main__":
    cli(obj={})
