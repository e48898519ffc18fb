# -*- test-case-name: focusflow.model.test.test_scheduler -*-
from __future__ import annotations

from .boundaries import IntervalType
from .configuration import ConfigurationError


def nextType(
    completedType: IntervalType,
    completedWorkCount: int,
    longBreakIntervalCount: int,
) -> IntervalType:
    """
    Decide what comes after an interval of type C{completedType}.

    @param completedWorkCount: the number of completed work intervals,
        including C{completedType} if it was one.

    @param longBreakIntervalCount: every Nth work interval is followed by a
        long break.
    """
    if longBreakIntervalCount < 1:
        raise ConfigurationError(
            f"long break interval must be positive, not {longBreakIntervalCount}"
        )
    if completedType.isBreak:
        return IntervalType.Work
    if completedWorkCount % longBreakIntervalCount == 0:
        return IntervalType.LongBreak
    return IntervalType.ShortBreak
