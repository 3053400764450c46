"""Line grammar for the todo.txt format.

A line is read in two independent passes:

1. A prefix pass over the trimmed line that consumes, in order, the
   completion mark (``x ``), a priority (``(A) ``) and up to two dates
   (``YYYY-MM-DD ``). Whatever is left is the description.
2. An annotation pass over the whole trimmed line that collects
   ``+project``, ``@context`` and ``key:value`` tokens.

Anything that does not match a token exactly is left as description text;
parsing never fails on a string.
"""

import logging
from typing import Dict, Iterator, List, Optional, Tuple

from .todo import Todo

logger = logging.getLogger(__name__)

COMPLETION_MARK = "x "
PROJECT_MARKER = "+"
CONTEXT_MARKER = "@"
TAG_SEPARATOR = ":"

# Byte-order mark; counted as whitespace when trimming and splitting
BOM = "\ufeff"

# YYYY-MM-DD
DATE_LENGTH = 10
DATE_DASH_POSITIONS = (4, 7)


def _is_ascii_digit(char: str) -> bool:
    return "0" <= char <= "9"


def _is_ascii_upper(char: str) -> bool:
    return "A" <= char <= "Z"


def _is_space(char: str) -> bool:
    return char.isspace() or char == BOM


def trim(text: str) -> str:
    """Strip whitespace and byte-order marks from both ends of ``text``."""
    start, end = 0, len(text)
    while start < end and _is_space(text[start]):
        start += 1
    while end > start and _is_space(text[end - 1]):
        end -= 1
    return text[start:end]


def _tokens(text: str) -> Iterator[str]:
    start = None
    for position, char in enumerate(text):
        if _is_space(char):
            if start is not None:
                yield text[start:position]
                start = None
        elif start is None:
            start = position
    if start is not None:
        yield text[start:]


# ---------------------------------------------------------------------------
# Prefix matchers
# ---------------------------------------------------------------------------

def match_priority(text: str) -> Optional[Tuple[str, str]]:
    """Match ``(X) `` at the start of ``text``.

    Returns ``(letter, remainder)`` or None. X must be a single ASCII
    uppercase letter and the closing paren must be followed by exactly one
    space.
    """
    if len(text) < 4:
        return None
    if text[0] != "(" or text[2] != ")" or text[3] != " ":
        return None
    if not _is_ascii_upper(text[1]):
        return None
    return text[1], text[4:]


def match_date(text: str) -> Optional[Tuple[str, str]]:
    """Match a ``YYYY-MM-DD `` token at the start of ``text``.

    Only the shape is checked; ``2024-13-45`` is a valid match.
    """
    if len(text) <= DATE_LENGTH or text[DATE_LENGTH] != " ":
        return None
    token = text[:DATE_LENGTH]
    for position, char in enumerate(token):
        if position in DATE_DASH_POSITIONS:
            if char != "-":
                return None
        elif not _is_ascii_digit(char):
            return None
    return token, text[DATE_LENGTH + 1:]


# ---------------------------------------------------------------------------
# Annotation scanners
# ---------------------------------------------------------------------------

def _scan_marked(text: str, marker: str) -> List[str]:
    """Collect every ``<marker><run>`` that starts the text or follows whitespace.

    The run is the non-whitespace text after the marker and may itself
    contain marker characters (``++double`` yields ``+double``).
    """
    found: List[str] = []
    length = len(text)
    position = 0
    while position < length:
        at_boundary = position == 0 or _is_space(text[position - 1])
        if text[position] != marker or not at_boundary:
            position += 1
            continue
        end = position + 1
        while end < length and not _is_space(text[end]):
            end += 1
        if end > position + 1:
            found.append(text[position + 1:end])
        position = end
    return found


def scan_projects(text: str) -> List[str]:
    """Return +project labels in order of appearance, duplicates kept."""
    return _scan_marked(text, PROJECT_MARKER)


def scan_contexts(text: str) -> List[str]:
    """Return @context labels in order of appearance, duplicates kept."""
    return _scan_marked(text, CONTEXT_MARKER)


def _split_tag(token: str) -> Optional[Tuple[str, str]]:
    # The key needs at least one character, so a leading colon never splits
    separator = token.find(TAG_SEPARATOR, 1)
    if separator == -1 or separator == len(token) - 1:
        return None
    return token[:separator], token[separator + 1:]


def scan_tags(text: str) -> Dict[str, str]:
    """Return ``key:value`` tags found anywhere in ``text``.

    The key stops at the first colon, so ``time:10:30`` gives
    ``{"time": "10:30"}``. Tokens starting with ``+`` or ``@`` are
    projects/contexts and never produce a tag. A later duplicate key
    overwrites an earlier one.
    """
    tags: Dict[str, str] = {}
    for token in _tokens(text):
        if token.startswith((PROJECT_MARKER, CONTEXT_MARKER)):
            continue
        pair = _split_tag(token)
        if pair is not None:
            key, value = pair
            tags[key] = value
    return tags


# ---------------------------------------------------------------------------
# Parse / serialize
# ---------------------------------------------------------------------------

def parse_todo_line(line: str) -> Todo:
    """Parse a single todo.txt line into a :class:`Todo`.

    Example::

        >>> todo = parse_todo_line("(A) 2024-01-01 Call Mom +Family @phone")
        >>> todo.priority, todo.creation_date, todo.projects
        ('A', '2024-01-01', ('Family',))

    With two leading dates the first is the completion date and the second
    the creation date. With one date it is the completion date on a
    completed line and the creation date otherwise.
    """
    if not isinstance(line, str):
        raise TypeError(f"line must be str, got {type(line).__name__}")

    trimmed = trim(line)

    completed = trimmed.startswith(COMPLETION_MARK)
    remaining = trim(trimmed[len(COMPLETION_MARK):]) if completed else trimmed

    priority = None
    priority_match = match_priority(remaining)
    if priority_match:
        priority, remaining = priority_match

    completion_date = None
    creation_date = None
    first_date = match_date(remaining)
    if first_date:
        first, remaining = first_date
        second_date = match_date(remaining)
        if second_date:
            completion_date = first
            creation_date, remaining = second_date
        elif completed:
            completion_date = first
        else:
            creation_date = first

    todo = Todo(
        completed=completed,
        priority=priority,
        completion_date=completion_date,
        creation_date=creation_date,
        description=remaining,
        projects=scan_projects(trimmed),
        contexts=scan_contexts(trimmed),
        tags=scan_tags(trimmed),
        raw=line,
    )
    logger.debug(
        "Parsed line %r: completed=%s priority=%s dates=(%s, %s) projects=%d contexts=%d tags=%d",
        line, completed, priority, completion_date, creation_date,
        len(todo.projects), len(todo.contexts), len(todo.tags),
    )
    return todo


def serialize_todo(todo: Todo) -> str:
    """Render a :class:`Todo` as a canonical todo.txt line.

    Fields are emitted in the order ``x``, ``(P)``, completion date,
    creation date, description. The completion date is written only for
    completed records, so a pending record that carries a completion date
    loses it on the way out; re-parsing such a line does not give back the
    same record. Projects, contexts and tags are not re-derived; they are
    expected to be present in ``description`` already.

    Example::

        >>> serialize_todo(Todo(completed=True, completion_date="2024-01-15",
        ...                     creation_date="2024-01-01", description="Buy milk"))
        'x 2024-01-15 2024-01-01 Buy milk'
    """
    parts = []
    if todo.completed:
        parts.append(COMPLETION_MARK)
    if todo.priority:
        parts.append(f"({todo.priority}) ")
    if todo.completed and todo.completion_date:
        parts.append(f"{todo.completion_date} ")
    if todo.creation_date:
        parts.append(f"{todo.creation_date} ")
    parts.append(todo.description)
    return "".join(parts)
