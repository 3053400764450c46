"""Todo record for a single todo.txt line."""

from dataclasses import dataclass, field, replace as dataclass_replace
from typing import Any, Dict, Mapping, Optional, Tuple


class TagMap(dict):
    """A dict that refuses mutation.

    Being a real dict, it deep-copies, pickles and passes through
    ``dataclasses.asdict`` like any other mapping.
    """

    def _readonly(self, *args, **kwargs):
        raise TypeError(f"{type(self).__name__} is read-only")

    __setitem__ = __delitem__ = _readonly
    clear = pop = popitem = setdefault = update = _readonly
    __ior__ = _readonly

    def __reduce__(self):
        # Rebuild through __init__; the default dict protocol would call __setitem__
        return type(self), (dict(self),)

    def __repr__(self):
        return f"{type(self).__name__}({dict.__repr__(self)})"


@dataclass(frozen=True)
class Todo:
    """One parsed todo.txt line.

    Records are immutable values. ``description`` keeps any +project,
    @context and key:value text verbatim; ``projects``, ``contexts`` and
    ``tags`` are extracted from the line by reference, not removed from it.
    ``raw`` holds the untouched input line and is never read back when
    serializing.
    """

    completed: bool = False
    priority: Optional[str] = None
    completion_date: Optional[str] = None
    creation_date: Optional[str] = None
    description: str = ""
    projects: Tuple[str, ...] = ()
    contexts: Tuple[str, ...] = ()
    tags: Mapping[str, str] = field(default_factory=dict, hash=False)
    raw: str = ""

    def __post_init__(self):
        # Normalize containers so callers cannot mutate a record after the fact
        object.__setattr__(self, "projects", tuple(self.projects))
        object.__setattr__(self, "contexts", tuple(self.contexts))
        object.__setattr__(self, "tags", TagMap(self.tags))

    @property
    def has_priority(self) -> bool:
        return self.priority is not None

    @property
    def is_dated(self) -> bool:
        """True when either a completion or creation date is set."""
        return self.completion_date is not None or self.creation_date is not None

    def replace(self, **changes: Any) -> "Todo":
        """Return a copy of this record with ``changes`` applied."""
        return dataclass_replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the Todo to plain JSON-ready data."""
        return {
            "completed": self.completed,
            "priority": self.priority,
            "completion_date": self.completion_date,
            "creation_date": self.creation_date,
            "description": self.description,
            "projects": list(self.projects),
            "contexts": list(self.contexts),
            "tags": dict(self.tags),
            "raw": self.raw,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Todo":
        """Create a Todo from a dictionary.

        Accepts the snake_case keys produced by :meth:`to_dict` as well as
        the camelCase ``completionDate``/``creationDate`` spelling.
        """
        return cls(
            completed=bool(data.get("completed", False)),
            priority=data.get("priority"),
            completion_date=data.get("completion_date", data.get("completionDate")),
            creation_date=data.get("creation_date", data.get("creationDate")),
            description=data.get("description", ""),
            projects=data.get("projects") or (),
            contexts=data.get("contexts") or (),
            tags=data.get("tags") or {},
            raw=data.get("raw", ""),
        )
