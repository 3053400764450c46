"""todotxt-parser - parse, serialize and edit todo.txt text."""

__version__ = "0.1.0"

from .todo import Todo
from .parser import parse_todo_line, serialize_todo
from .buffer import (
    TodoBuffer,
    append_task,
    delete_task_at_line,
    parse_todo_txt,
    render_todos,
    replace_at,
    update_task_at_line,
    update_todo_in_list,
)

__all__ = [
    "Todo",
    "TodoBuffer",
    "parse_todo_line",
    "parse_todo_txt",
    "serialize_todo",
    "render_todos",
    "replace_at",
    "update_todo_in_list",
    "append_task",
    "update_task_at_line",
    "delete_task_at_line",
    "__version__",
]
