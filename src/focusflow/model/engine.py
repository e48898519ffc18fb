# -*- test-case-name: focusflow.model.test.test_engine -*-
from __future__ import annotations

from dataclasses import dataclass, field

from .boundaries import IntervalType, TimerState
from .configuration import SessionConfig
from .debugger import debug
from .scheduler import nextType
from .util import formatRemaining


@dataclass(frozen=True)
class EngineState:
    """
    A point-in-time copy of everything the L{SessionStateMachine} knows.
    """

    timerState: TimerState
    currentType: IntervalType
    remainingSeconds: int
    completedWorkCount: int


@dataclass(frozen=True)
class SessionCompleted:
    """
    An interval ran all the way down to zero.
    """

    intervalType: IntervalType
    "The type of the interval that just finished."

    durationMinutes: int
    "The configured length of the interval that just finished."

    completedWorkCount: int
    "How many work intervals have been completed, including this one."

    nextType: IntervalType
    "The type of interval that is now waiting to be started."


@dataclass
class SessionStateMachine:
    """
    The timer: which interval we're in, how much of it is left, and whether
    it's counting down.
    """

    _config: SessionConfig
    _timerState: TimerState = TimerState.Idle
    _currentType: IntervalType = IntervalType.Work
    _completedWorkCount: int = 0
    _remainingSeconds: int = field(init=False)

    def __post_init__(self) -> None:
        self._remainingSeconds = self.durationFor(self._currentType)

    def durationFor(self, intervalType: IntervalType) -> int:
        return self._config.durationFor(intervalType)

    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def timerState(self) -> TimerState:
        return self._timerState

    @property
    def currentType(self) -> IntervalType:
        return self._currentType

    @property
    def remainingSeconds(self) -> int:
        return self._remainingSeconds

    @property
    def completedWorkCount(self) -> int:
        return self._completedWorkCount

    @property
    def progress(self) -> float:
        """
        Percentage of the current interval that has elapsed, from 0 to 100.
        """
        duration = self.durationFor(self._currentType)
        elapsed = (duration - self._remainingSeconds) / duration * 100
        return min(100.0, max(0.0, elapsed))

    @property
    def formattedTime(self) -> str:
        return formatRemaining(self._remainingSeconds)

    def snapshot(self) -> EngineState:
        return EngineState(
            timerState=self._timerState,
            currentType=self._currentType,
            remainingSeconds=self._remainingSeconds,
            completedWorkCount=self._completedWorkCount,
        )

    def start(self) -> None:
        """
        Start (or resume) counting down.  Already running is fine.
        """
        self._timerState = TimerState.Running

    def pause(self) -> None:
        if self._timerState is TimerState.Running:
            self._timerState = TimerState.Paused

    def reset(self) -> None:
        """
        Stop, and rewind the current interval to its full length.  The type of
        interval and the count of completed work intervals are unchanged.
        """
        self._timerState = TimerState.Idle
        self._remainingSeconds = self.durationFor(self._currentType)

    def restart(self) -> None:
        """
        Go all the way back to the beginning: an idle, full-length work
        interval with nothing completed.
        """
        self._timerState = TimerState.Idle
        self._currentType = IntervalType.Work
        self._completedWorkCount = 0
        self._remainingSeconds = self.durationFor(IntervalType.Work)

    def reconfigure(self, config: SessionConfig) -> None:
        """
        Switch to a new configuration.

        If any interval's length changed, the current interval is rewound to
        its (new) full length, even if it is counting down.
        """
        old, self._config = self._config, config
        if not old.sameDurations(config):
            debug("durations changed, rewinding", self._currentType)
            self._remainingSeconds = self.durationFor(self._currentType)

    def tick(self) -> SessionCompleted | None:
        """
        One second has elapsed.

        @return: a L{SessionCompleted} if this second finished the current
            interval, otherwise C{None}.
        """
        if self._timerState is not TimerState.Running:
            return None
        self._remainingSeconds = max(0, self._remainingSeconds - 1)
        if self._remainingSeconds > 0:
            return None
        return self._expire()

    def _expire(self) -> SessionCompleted:
        completedType = self._currentType
        if completedType is IntervalType.Work:
            self._completedWorkCount += 1
        upcoming = nextType(
            completedType,
            self._completedWorkCount,
            self._config.longBreakIntervalCount,
        )
        event = SessionCompleted(
            intervalType=completedType,
            durationMinutes=self._config.minutesFor(completedType),
            completedWorkCount=self._completedWorkCount,
            nextType=upcoming,
        )
        debug("interval expired", event)
        self._timerState = TimerState.Idle
        self._currentType = upcoming
        self._remainingSeconds = self.durationFor(upcoming)
        return event
