"""Export parsed todos as todo.txt, JSON or YAML text."""

import json
from enum import Enum
from typing import Iterable, List

import yaml

from .buffer import render_todos
from .todo import Todo


class ExportFormat(Enum):
    """Supported export formats"""
    TODOTXT = "todotxt"
    JSON = "json"
    YAML = "yaml"


def _todo_dicts(todos: Iterable[Todo]) -> List[dict]:
    return [todo.to_dict() for todo in todos]


def export_todos(todos: Iterable[Todo], fmt: ExportFormat = ExportFormat.TODOTXT) -> str:
    """Render ``todos`` in the requested format.

    Args:
        todos: Records to export, in order
        fmt: Target format

    Returns:
        The exported text. JSON and YAML carry every record field,
        including ``raw``; todo.txt output is canonical serialization.
    """
    if fmt is ExportFormat.TODOTXT:
        return render_todos(todos)
    if fmt is ExportFormat.JSON:
        return json.dumps(_todo_dicts(todos), indent=2, ensure_ascii=False)
    if fmt is ExportFormat.YAML:
        return yaml.safe_dump(
            _todo_dicts(todos),
            allow_unicode=True,
            sort_keys=False,
            default_flow_style=False,
        )
    raise ValueError(f"Unsupported export format: {fmt!r}")
