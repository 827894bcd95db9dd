"""Structured action journal shared by the engine and its collaborators."""

from __future__ import annotations

from collections import deque
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class JournalEntry(BaseModel):
    """Represents a single immutable record of something the engine did."""

    model_config = ConfigDict(frozen=True)

    sequence: int = Field(..., ge=0)
    event_type: str = Field(..., min_length=1)
    side: int | None = Field(default=None, ge=0)
    message: str | None = None
    payload: dict[str, Any] = Field(default_factory=dict)
    occurred_at: datetime = Field(default_factory=_utcnow)


class ActionJournal:
    """Bounded, append-only sequence of :class:`JournalEntry` records.

    Sequence numbers keep increasing even after old entries fall off the
    front, so a renderer can detect that it missed records.
    """

    def __init__(self, limit: int | None = None) -> None:
        if limit is not None and limit < 1:
            msg = "Journal limit must be positive."
            raise ValueError(msg)
        self._entries: deque[JournalEntry] = deque(maxlen=limit)
        self._next_sequence = 0

    def record(
        self,
        event_type: str,
        *,
        side: int | None = None,
        message: str | None = None,
        payload: dict[str, Any] | None = None,
    ) -> JournalEntry:
        """Append a new entry and return it."""
        entry = JournalEntry(
            sequence=self._next_sequence,
            event_type=event_type,
            side=side,
            message=message,
            payload=dict(payload or {}),
        )
        self._entries.append(entry)
        self._next_sequence += 1
        return entry

    def entries(self, *, since: int = 0) -> tuple[JournalEntry, ...]:
        """Return retained entries whose sequence number is at least *since*."""
        return tuple(entry for entry in self._entries if entry.sequence >= since)

    @property
    def next_sequence(self) -> int:
        return self._next_sequence

    def discard_from(self, sequence: int) -> None:
        """Drop entries numbered *sequence* or later and reuse their numbers."""
        while self._entries and self._entries[-1].sequence >= sequence:
            self._entries.pop()
        self._next_sequence = min(self._next_sequence, sequence)

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["ActionJournal", "JournalEntry"]
