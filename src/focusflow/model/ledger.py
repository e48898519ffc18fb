# -*- test-case-name: focusflow.model.test.test_ledger -*-
from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass, field, replace
from typing import Iterable, Sequence

from .boundaries import IntervalType


@dataclass(frozen=True)
class DailyProgressEntry:
    """
    What got done on one calendar day.
    """

    date: str
    "The day, as an ISO C{YYYY-MM-DD} string."

    completedFocusIntervals: int = 0
    focusMinutes: int = 0
    tasksCompleted: int = 0


@dataclass(frozen=True)
class ProgressTotals:
    focusIntervals: int
    tasksCompleted: int
    focusMinutes: int


@dataclass(frozen=True)
class CompletedSession:
    """
    A historical record of one interval that ran to completion.
    """

    id: str
    intervalType: IntervalType
    durationMinutes: int
    completedAt: float
    taskID: str | None = None


def _byDate(entry: DailyProgressEntry) -> str:
    return entry.date


@dataclass
class ProgressLedger:
    """
    The day-by-day history of completed work, kept in date order with at most
    one entry per day.

    The ledger never looks at a clock; every operation is told which day it
    applies to.
    """

    _entries: list[DailyProgressEntry] = field(default_factory=list)

    def __post_init__(self) -> None:
        given, self._entries = self._entries, []
        for entry in given:
            self._merge(entry)

    @classmethod
    def fromEntries(cls, entries: Iterable[DailyProgressEntry]) -> ProgressLedger:
        """
        Build a ledger from entries in any order; entries that share a date
        are added together.
        """
        return cls(list(entries))

    def _merge(self, entry: DailyProgressEntry) -> None:
        index, existing = self._upsert(entry.date)
        self._entries[index] = replace(
            existing,
            completedFocusIntervals=(
                existing.completedFocusIntervals + entry.completedFocusIntervals
            ),
            focusMinutes=existing.focusMinutes + entry.focusMinutes,
            tasksCompleted=existing.tasksCompleted + entry.tasksCompleted,
        )

    def _upsert(self, date: str) -> tuple[int, DailyProgressEntry]:
        index = bisect_left(self._entries, date, key=_byDate)
        if index < len(self._entries) and self._entries[index].date == date:
            return index, self._entries[index]
        created = DailyProgressEntry(date)
        self._entries.insert(index, created)
        return index, created

    @property
    def entries(self) -> Sequence[DailyProgressEntry]:
        return tuple(self._entries)

    def entryFor(self, date: str) -> DailyProgressEntry | None:
        index = bisect_left(self._entries, date, key=_byDate)
        if index < len(self._entries) and self._entries[index].date == date:
            return self._entries[index]
        return None

    def recordFocusCompletion(
        self, date: str, minutes: int
    ) -> DailyProgressEntry:
        """
        A work interval of C{minutes} length was completed on C{date}.
        """
        if minutes < 0:
            raise ValueError(f"cannot credit {minutes} minutes of focus")
        index, existing = self._upsert(date)
        updated = self._entries[index] = replace(
            existing,
            completedFocusIntervals=existing.completedFocusIntervals + 1,
            focusMinutes=existing.focusMinutes + minutes,
        )
        return updated

    def recordTaskCompletionDelta(
        self, date: str, delta: int
    ) -> DailyProgressEntry:
        """
        A task was completed (C{delta} is C{+1}) or un-completed (C{delta} is
        C{-1}) on C{date}.  The count for a day never drops below zero.
        """
        if delta not in (1, -1):
            raise ValueError(f"task delta must be +1 or -1, not {delta!r}")
        index, existing = self._upsert(date)
        updated = self._entries[index] = replace(
            existing, tasksCompleted=max(0, existing.tasksCompleted + delta)
        )
        return updated

    def lastDays(self, count: int) -> Sequence[DailyProgressEntry]:
        """
        The most recent C{count} entries, oldest first.
        """
        if count <= 0:
            return ()
        return tuple(self._entries[-count:])

    def totals(self) -> ProgressTotals:
        return ProgressTotals(
            focusIntervals=sum(
                each.completedFocusIntervals for each in self._entries
            ),
            tasksCompleted=sum(each.tasksCompleted for each in self._entries),
            focusMinutes=sum(each.focusMinutes for each in self._entries),
        )
