"""Command-line filter for todo.txt text.

Every command reads todo.txt text from FILE, its last positional argument
(omitted or ``-`` for stdin), and writes its result to stdout. Nothing is written back to disk.
"""

import logging
from datetime import date
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.text import Text

from . import __version__
from .buffer import (
    TodoBuffer,
    append_task,
    delete_task_at_line,
    parse_todo_txt,
    update_task_at_line,
)
from .config import OUTPUT_FORMATS, ConfigModel, load_config
from .export import ExportFormat, export_todos
from .parser import parse_todo_line, scan_contexts, scan_projects, scan_tags
from .todo import Todo

logger = logging.getLogger(__name__)

PRIORITY_STYLES = {
    "A": "bold red",
    "B": "yellow",
    "C": "green",
}


def setup_logging(level: str) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def get_console(config: ConfigModel) -> Console:
    return Console(no_color=config.no_color, highlight=False)


def warn(message: str) -> None:
    Console(stderr=True).print(f"[yellow]Warning:[/yellow] {message}")


def today() -> str:
    """Today as ``YYYY-MM-DD``, the only date shape the grammar reads back."""
    return date.today().isoformat()


def build_todo_table(buffer: TodoBuffer, indexes=None) -> Table:
    """Build a rich table with one row per todo."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Done", justify="center")
    table.add_column("Pri", justify="center")
    table.add_column("Completed")
    table.add_column("Created")
    table.add_column("Description")
    table.add_column("Projects", style="cyan")
    table.add_column("Contexts", style="magenta")
    table.add_column("Tags", style="blue")

    if indexes is None:
        indexes = range(len(buffer))

    for index, todo in zip(indexes, buffer):
        priority = todo.priority or ""
        table.add_row(
            str(index),
            "x" if todo.completed else "",
            Text(priority, style=PRIORITY_STYLES.get(priority, "")),
            todo.completion_date or "",
            todo.creation_date or "",
            Text(todo.description),
            Text(" ".join("+" + project for project in todo.projects)),
            Text(" ".join("@" + context for context in todo.contexts)),
            Text(" ".join(f"{key}:{value}" for key, value in todo.tags.items())),
        )
    return table


def _validate_priority(ctx, param, value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    if len(value) != 1 or not ("A" <= value <= "Z"):
        raise click.BadParameter("priority must be a single uppercase letter A-Z")
    return value


@click.group()
@click.version_option(version=__version__, prog_name="todotxt")
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path),
              help="Path to config file")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def main(ctx, config_path, verbose):
    """todotxt - parse and edit todo.txt text."""
    ctx.ensure_object(dict)
    config = load_config(config_path)
    setup_logging("DEBUG" if verbose else config.log_level)
    ctx.obj["config"] = config
    ctx.obj["verbose"] = verbose


@main.command("list")
@click.argument("file", type=click.File("r", encoding="utf-8-sig"), default="-")
@click.option("--format", "-f", "output_format", type=click.Choice(OUTPUT_FORMATS),
              help="Output format (defaults to the configured one)")
@click.option("--project", "-p", help="Only tasks tagged with +PROJECT")
@click.option("--context", "-c", help="Only tasks tagged with @CONTEXT")
@click.option("--pending", is_flag=True, help="Hide completed tasks")
@click.pass_context
def list_tasks(ctx, file, output_format, project, context, pending):
    """List the tasks in FILE."""
    config: ConfigModel = ctx.obj["config"]
    output_format = output_format or config.output_format

    full = TodoBuffer.from_text(file.read())
    hide_completed = pending or not config.show_completed

    indexes = [
        index for index, todo in enumerate(full)
        if (project is None or project in todo.projects)
        and (context is None or context in todo.contexts)
        and not (hide_completed and todo.completed)
    ]
    selected = TodoBuffer(full[index] for index in indexes)
    logger.debug("Listing %d of %d tasks", len(selected), len(full))

    if output_format == "table":
        get_console(config).print(build_todo_table(selected, indexes))
        return
    click.echo(export_todos(selected, ExportFormat(output_format)))


@main.command()
@click.argument("description")
@click.argument("file", type=click.File("r", encoding="utf-8-sig"), default="-")
@click.option("--priority", "-p", callback=_validate_priority, help="Priority letter A-Z")
@click.option("--date/--no-date", "stamp_date", default=True,
              help="Stamp today's date as the creation date")
def add(description, file, priority, stamp_date):
    """Append a task with DESCRIPTION to FILE."""
    todo = Todo(
        priority=priority,
        creation_date=today() if stamp_date else None,
        description=description,
        projects=scan_projects(description),
        contexts=scan_contexts(description),
        tags=scan_tags(description),
    )
    click.echo(append_task(file.read(), todo))


@main.command()
@click.argument("index", type=int)
@click.argument("line")
@click.argument("file", type=click.File("r", encoding="utf-8-sig"), default="-")
def update(index, line, file):
    """Replace the task at INDEX in FILE with LINE."""
    text = file.read()
    if not 0 <= index < len(parse_todo_txt(text)):
        warn(f"no task at index {index}, input left unchanged")
    click.echo(update_task_at_line(text, index, parse_todo_line(line)))


@main.command()
@click.argument("index", type=int)
@click.argument("file", type=click.File("r", encoding="utf-8-sig"), default="-")
def done(index, file):
    """Mark the task at INDEX in FILE as completed today."""
    text = file.read()
    todos = parse_todo_txt(text)
    if not 0 <= index < len(todos):
        warn(f"no task at index {index}, input left unchanged")
        click.echo(text)
        return
    completed = todos[index].replace(completed=True, completion_date=today())
    click.echo(update_task_at_line(text, index, completed))


@main.command()
@click.argument("index", type=int)
@click.argument("file", type=click.File("r", encoding="utf-8-sig"), default="-")
def delete(index, file):
    """Remove the task at INDEX from FILE."""
    text = file.read()
    if not 0 <= index < len(parse_todo_txt(text)):
        warn(f"no task at index {index}, input left unchanged")
    click.echo(delete_task_at_line(text, index))


if __name__ == "__main__":
    main()
