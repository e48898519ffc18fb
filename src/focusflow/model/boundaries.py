from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Protocol, TypeAlias

if TYPE_CHECKING:
    from .context import EngineContext


class IntervalType(Enum):
    """
    The type of a given interval.
    """

    Work = "work"
    ShortBreak = "shortBreak"
    LongBreak = "longBreak"

    @property
    def isBreak(self) -> bool:
        return self is not IntervalType.Work


class TimerState(Enum):
    """
    Is the countdown moving?
    """

    Idle = "idle"
    """
    Nothing is counting down; the current interval is waiting to be started.
    """

    Running = "running"
    """
    The countdown advances once per second.
    """

    Paused = "paused"
    """
    The countdown was started and then paused partway through.
    """


class Theme(Enum):
    light = "light"
    dark = "dark"


class UserInterface(Protocol):
    """
    The user interface is told about progress and completions; it never
    reports back to the engine.
    """

    def intervalProgress(self, percentComplete: float, remaining: str) -> None:
        """
        The running interval is now C{percentComplete} percent complete, with
        C{remaining} (formatted as C{MM:SS}) left on the clock.
        """

    def notify(self, title: str, body: str) -> None:
        """
        Show the user a notification.  Fire and forget.
        """

    def playSound(self) -> None:
        """
        Play the completion sound.
        """


@dataclass
class NoUserInterface(UserInterface):
    """
    Do-nothing implementation of a user interface.
    """

    def intervalProgress(self, percentComplete: float, remaining: str) -> None:
        ...

    def notify(self, title: str, body: str) -> None:
        ...

    def playSound(self) -> None:
        ...


# Not a protocol because https://github.com/python/mypy/issues/14544
UserInterfaceFactory: TypeAlias = "Callable[[EngineContext], UserInterface]"
