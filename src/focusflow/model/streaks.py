# -*- test-case-name: focusflow.model.test.test_streaks -*-
from __future__ import annotations

from typing import Sequence

from .dates import daysBefore
from .ledger import DailyProgressEntry


def bestStreak(history: Sequence[DailyProgressEntry]) -> int:
    """
    The longest run of adjacent entries that each have at least one completed
    focus interval.

    Adjacency is by position in C{history}, not by date; a day missing from
    the ledger does not break a run here.
    """
    best = current = 0
    for day in history:
        if day.completedFocusIntervals > 0:
            current += 1
            best = max(best, current)
        else:
            current = 0
    return best


def currentStreak(history: Sequence[DailyProgressEntry], today: str) -> int:
    """
    How many days in a row, ending C{today}, had at least one completed focus
    interval.

    Unlike L{bestStreak}, this requires the trailing entries to be on
    consecutive calendar days: the entry C{k} places from the end must be for
    the day C{k} days before C{today}.
    """
    streak = 0
    for k, day in enumerate(reversed(history)):
        if day.date != daysBefore(today, k) or day.completedFocusIntervals <= 0:
            break
        streak += 1
    return streak


def totalFocusTime(history: Sequence[DailyProgressEntry]) -> str:
    """
    All-time focus time, like C{3h 20m} or C{45m}.
    """
    hours, minutes = divmod(sum(each.focusMinutes for each in history), 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def streakMessage(streak: int) -> str:
    """
    Some encouragement appropriate to a current streak of C{streak} days.
    """
    if streak == 0:
        return "Start your first session today!"
    if streak == 1:
        return "Great start! Keep the momentum going!"
    if streak < 7:
        return f"{streak} days strong! You're building a great habit!"
    if streak < 30:
        return f"Amazing! {streak} days of consistency!"
    return f"Incredible! {streak} days of dedication! You're unstoppable!"
