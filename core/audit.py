"""In-memory audit trail for intake edits and officer overrides."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, List


@dataclass
class AuditEntry:
    user: str
    field: str
    old_value: Any
    new_value: Any
    timestamp: datetime
    action: str = "edit"


class AuditLog:
    """Append-only list of changes made during one session."""

    def __init__(self) -> None:
        self.entries: List[AuditEntry] = []

    def record(self, user: str, field: str, old_value: Any, new_value: Any, action: str = "edit") -> None:
        """Record a change with the acting user and a UTC timestamp."""
        self.entries.append(
            AuditEntry(
                user=user,
                field=field,
                old_value=old_value,
                new_value=new_value,
                timestamp=datetime.now(timezone.utc),
                action=action,
            )
        )

    def record_override(self, user: str, warnings: List[str], reason: str) -> None:
        """Record an officer proceeding despite underwriting warnings."""
        if not reason or not reason.strip():
            raise ValueError("An override reason is required")
        self.record(user, "underwriting_warnings", list(warnings), reason.strip(), action="override")

    def for_field(self, field: str) -> List[AuditEntry]:
        return [e for e in self.entries if e.field == field]

    def as_dict(self) -> List[dict]:
        return [
            {
                "user": e.user,
                "action": e.action,
                "field": e.field,
                "old": e.old_value,
                "new": e.new_value,
                "timestamp": e.timestamp.isoformat(),
            }
            for e in self.entries
        ]
