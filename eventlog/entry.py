"""
Event Log - Entry Model

PURE DATA - NO I/O

One LogEntry is one line of a day-file:
    {"ts": "<ISO-8601>", "kind": "<kind>", ...payload}

The DayKey is taken from the same clock reading as the timestamp,
so an entry always belongs to exactly one day-file.
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, Literal, Optional, get_args

from pydantic import BaseModel, Field


EventKind = Literal["status", "message", "action", "error"]

EVENT_KINDS = frozenset(get_args(EventKind))

DAY_KEY_FORMAT = "%Y%m%d"


def day_key(now: Optional[datetime] = None) -> str:
    """Local calendar date as YYYYMMDD."""
    if now is None:
        now = datetime.now()
    elif now.tzinfo is not None:
        now = now.astimezone()
    return now.strftime(DAY_KEY_FORMAT)


def iso_timestamp(now: datetime) -> str:
    """UTC ISO-8601 with millisecond precision and a trailing Z."""
    if now.tzinfo is None:
        now = now.astimezone()
    utc = now.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class LogEntry(BaseModel):
    """
    Immutable, timestamped, kind-tagged event record.

    Entries are never mutated after creation. They only exist
    as serialized lines once flushed.
    """

    ts: str = Field(..., description="Creation time, ISO-8601 UTC")
    kind: EventKind = Field(..., description="status | message | action | error")
    day_key: str = Field(..., description="YYYYMMDD partition (local date)")
    payload: Dict[str, Any] = Field(default_factory=dict)

    class Config:
        frozen = True

    @classmethod
    def create(
        cls,
        kind: str,
        payload: Optional[Dict[str, Any]] = None,
        now: Optional[datetime] = None,
    ) -> "LogEntry":
        """
        Build an entry stamped with the current (or given) time.

        Raises:
            ValueError: Unknown kind
        """
        if kind not in EVENT_KINDS:
            raise ValueError(f"Unknown event kind: {kind!r}")

        # One clock reading for both ts and day_key
        if now is None:
            now = datetime.now().astimezone()

        return cls(
            ts=iso_timestamp(now),
            kind=kind,
            day_key=day_key(now),
            payload=dict(payload or {}),
        )

    def to_record(self) -> Dict[str, Any]:
        """Flattened record; payload keys never shadow ts/kind."""
        record: Dict[str, Any] = {"ts": self.ts, "kind": self.kind}
        for key, value in self.payload.items():
            if key not in record:
                record[key] = value
        return record

    def to_line(self) -> str:
        """Serialized JSON line, newline-terminated."""
        return json.dumps(self.to_record(), ensure_ascii=False, default=str) + "\n"
