"""Buffer operations over multi-line todo.txt text.

A buffer is the whole text of a todo.txt file. Blank lines are skipped,
and every remaining line is addressed by its position among the non-blank
lines. All functions here are pure: they return new text or new lists and
never modify their arguments.
"""

import logging
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from .parser import parse_todo_line, serialize_todo, trim
from .todo import Todo

logger = logging.getLogger(__name__)

LINE_SEPARATOR = "\n"


def _in_range(index: int, length: int) -> bool:
    return 0 <= index < length


def parse_todo_txt(text: str) -> List[Todo]:
    """Parse multi-line todo.txt text into a list of :class:`Todo`.

    Lines that are empty after trimming (whitespace and byte-order marks)
    are skipped. CRLF input is fine
    because every line is trimmed before parsing.
    """
    if not isinstance(text, str):
        raise TypeError(f"text must be str, got {type(text).__name__}")
    return [
        parse_todo_line(line)
        for line in text.split(LINE_SEPARATOR)
        if trim(line)
    ]


def render_todos(todos: Iterable[Todo]) -> str:
    """Serialize todos and join them with line feeds (no trailing newline)."""
    return LINE_SEPARATOR.join(serialize_todo(todo) for todo in todos)


def replace_at(todos: Sequence[Todo], index: int, todo: Todo) -> List[Todo]:
    """Return a copy of ``todos`` with position ``index`` replaced.

    An index outside ``[0, len(todos))`` returns an unchanged copy.
    """
    updated = list(todos)
    if _in_range(index, len(updated)):
        updated[index] = todo
    return updated


def update_todo_in_list(todos: Sequence[Todo], index: int, todo: Todo) -> str:
    """Replace the todo at ``index`` and render the whole list.

    An empty list renders as ``""``; an out-of-range index renders the
    list as it was.
    """
    if not todos:
        return ""
    return render_todos(replace_at(todos, index, todo))


def append_task(text: str, todo: Todo) -> str:
    """Append ``todo`` as a new last line of ``text``."""
    line = serialize_todo(todo)
    if not text:
        return line
    return f"{text}{LINE_SEPARATOR}{line}"


def update_task_at_line(text: str, index: int, todo: Todo) -> str:
    """Replace the task at ``index`` in ``text``.

    Empty text always gives ``""``, whatever the index. An out-of-range
    index returns ``text`` exactly as given, not a re-rendered copy.
    """
    if not text:
        return ""
    todos = parse_todo_txt(text)
    if not _in_range(index, len(todos)):
        logger.debug("Update index %d out of range for %d tasks", index, len(todos))
        return text
    return update_todo_in_list(todos, index, todo)


def delete_task_at_line(text: str, index: int) -> str:
    """Remove the task at ``index`` from ``text``.

    Empty text gives ``""``; an out-of-range index (negative included)
    returns ``text`` unchanged. Removing the only task gives ``""``.
    """
    if not text:
        return ""
    todos = parse_todo_txt(text)
    if not _in_range(index, len(todos)):
        logger.debug("Delete index %d out of range for %d tasks", index, len(todos))
        return text
    return render_todos(todos[:index] + todos[index + 1:])


def _unique(labels: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(labels))


class TodoBuffer:
    """Immutable ordered collection of todos.

    Every editing method returns a new buffer; the original is left as
    it was.
    """

    def __init__(self, todos: Iterable[Todo] = ()):
        self._todos: Tuple[Todo, ...] = tuple(todos)

    @classmethod
    def from_text(cls, text: str) -> "TodoBuffer":
        return cls(parse_todo_txt(text))

    @property
    def text(self) -> str:
        """The buffer rendered as todo.txt text."""
        return render_todos(self._todos)

    def __len__(self) -> int:
        return len(self._todos)

    def __iter__(self) -> Iterator[Todo]:
        return iter(self._todos)

    def __getitem__(self, index: Union[int, slice]):
        if isinstance(index, slice):
            return TodoBuffer(self._todos[index])
        return self._todos[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TodoBuffer):
            return NotImplemented
        return self._todos == other._todos

    def __repr__(self) -> str:
        return f"TodoBuffer({list(self._todos)!r})"

    def append(self, todo: Todo) -> "TodoBuffer":
        return TodoBuffer(self._todos + (todo,))

    def update(self, index: int, todo: Todo) -> "TodoBuffer":
        """Return a buffer with ``index`` replaced; out of range is a no-op."""
        return TodoBuffer(replace_at(self._todos, index, todo))

    def delete(self, index: int) -> "TodoBuffer":
        """Return a buffer without ``index``; out of range is a no-op."""
        if not _in_range(index, len(self._todos)):
            return self
        return TodoBuffer(self._todos[:index] + self._todos[index + 1:])

    def projects(self) -> List[str]:
        """All project labels in the buffer, first occurrence order, no repeats."""
        return _unique(project for todo in self._todos for project in todo.projects)

    def contexts(self) -> List[str]:
        """All context labels in the buffer, first occurrence order, no repeats."""
        return _unique(context for todo in self._todos for context in todo.contexts)

    def filter(
        self,
        project: Optional[str] = None,
        context: Optional[str] = None,
        completed: Optional[bool] = None,
    ) -> "TodoBuffer":
        """Return the todos matching every given criterion, in order."""
        def matches(todo: Todo) -> bool:
            if project is not None and project not in todo.projects:
                return False
            if context is not None and context not in todo.contexts:
                return False
            if completed is not None and todo.completed != completed:
                return False
            return True

        return TodoBuffer(todo for todo in self._todos if matches(todo))
