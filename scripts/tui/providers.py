"""
Data providers for the task form.

Protocols define the interface; implementations can be swapped
for testing or alternative storage.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol


def _parse_datetime(s: str | None) -> datetime | None:
    """Parse ISO datetime string."""
    if not s:
        return None
    try:
        return datetime.fromisoformat(s.replace("Z", "+00:00"))
    except (ValueError, TypeError):
        return None


def _format_datetime(dt: datetime | None) -> str | None:
    return dt.isoformat() if dt is not None else None


@dataclass(frozen=True)
class Task:
    """Immutable task record, one element of the stored collection.

    Fields not collected by the form keep their zero value: empty
    strings, empty tuples and ``None`` timestamps.
    """

    title: str = ""
    description: str = ""
    urgency: str = ""
    status: str = ""
    assigned_by: str = ""
    attachments: tuple[str, ...] = ()
    comments: tuple[str, ...] = ()
    created_at: datetime | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    due: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON object stored on disk."""
        return {
            "title": self.title,
            "description": self.description,
            "urgency": self.urgency,
            "status": self.status,
            "assigned_by": self.assigned_by,
            "attachments": list(self.attachments),
            "comments": list(self.comments),
            "timestamp": _format_datetime(self.created_at),
            "starttime": _format_datetime(self.start_time),
            "endtime": _format_datetime(self.end_time),
            "due": _format_datetime(self.due),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Task":
        """Build a Task from a stored JSON object."""
        return cls(
            title=data.get("title") or "",
            description=data.get("description") or "",
            urgency=data.get("urgency") or "",
            status=data.get("status") or "",
            assigned_by=data.get("assigned_by") or "",
            attachments=tuple(data.get("attachments") or ()),
            comments=tuple(data.get("comments") or ()),
            created_at=_parse_datetime(data.get("timestamp")),
            start_time=_parse_datetime(data.get("starttime")),
            end_time=_parse_datetime(data.get("endtime")),
            due=_parse_datetime(data.get("due")),
        )


class TaskStore(Protocol):
    """Protocol for persisting task records."""

    def append(self, task: Task) -> None:
        """Durably append one task to the collection."""
        ...

    def load(self) -> list[Task]:
        """Load every stored task, in append order."""
        ...
