# -*- test-case-name: focusflow.model.test.test_storage -*-
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from json import dumps, loads
from os import environ
from os.path import expanduser
from typing import Sequence, TypeAlias, TypeVar

from twisted.logger import Logger
from twisted.python.filepath import FilePath

from .boundaries import IntervalType, Theme
from .configuration import SessionConfig, Settings
from .debugger import debug
from .ledger import CompletedSession, DailyProgressEntry, ProgressLedger
from .schema import (
    SavedDailyProgress,
    SavedSession,
    SavedSettings,
    SavedTodo,
)
from .tasks import Task, TaskList

log = Logger()
T = TypeVar("T")

JSON: TypeAlias = (
    "None | str | int | float | bool | dict[str, JSON] | list[JSON]"
)

TEST_MODE = bool(environ.get("TEST_MODE"))

defaultBaseLocation = FilePath(expanduser("~/.local/share/focusflow"))
if TEST_MODE:
    defaultBaseLocation = defaultBaseLocation.child("testing")


class StorageKey(Enum):
    """
    The things we persist, one file apiece.
    """

    todos = "pomodoro_todos"
    sessions = "pomodoro_sessions"
    progress = "pomodoro_progress"
    settings = "pomodoro_settings"


class PersistenceError(Exception):
    """
    Reading or writing the store failed.
    """


@dataclass
class JSONStore:
    """
    A key/value store that keeps one JSON document per L{StorageKey} in a
    directory.

    Failures never propagate: a failed save is logged and forgotten, a failed
    or absent load produces the caller's default.
    """

    baseLocation: FilePath = defaultBaseLocation

    def pathFor(self, key: StorageKey) -> FilePath:
        childPath: FilePath = self.baseLocation.child(key.value + ".json")
        return childPath

    def load(self, key: StorageKey, default: T) -> JSON | T:
        """
        Load the value saved under C{key}, or return C{default}.
        """
        path = self.pathFor(key)
        if not path.isfile():
            debug("nothing saved for", key)
            return default
        try:
            return self._read(path)
        except PersistenceError:
            log.failure("could not load {key}; using default", key=key.name)
            return default

    def save(self, key: StorageKey, value: JSON) -> bool:
        """
        Save C{value} under C{key}.

        @return: whether it was saved.
        """
        try:
            self._write(self.pathFor(key), value)
        except PersistenceError:
            log.failure("could not save {key}", key=key.name)
            return False
        return True

    def _read(self, path: FilePath) -> JSON:
        try:
            result: JSON = loads(path.getContent())
        except (OSError, ValueError) as e:
            raise PersistenceError(f"reading {path.path}") from e
        return result

    def _write(self, path: FilePath, value: JSON) -> None:
        try:
            content = dumps(value).encode("utf-8")
            if not self.baseLocation.isdir():
                self.baseLocation.makedirs(True)
            # setContent writes a sibling and renames it into place
            path.setContent(content)
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceError(f"writing {path.path}") from e


def settingsFromJSON(saved: SavedSettings) -> Settings:
    soundEnabled = saved["soundEnabled"]
    if not isinstance(soundEnabled, bool):
        raise ValueError(
            f"soundEnabled must be true or false, not {soundEnabled!r}"
        )
    return Settings(
        config=SessionConfig(
            workMinutes=saved["workDuration"],
            shortBreakMinutes=saved["shortBreakDuration"],
            longBreakMinutes=saved["longBreakDuration"],
            longBreakIntervalCount=saved["longBreakInterval"],
        ),
        soundEnabled=soundEnabled,
        theme=Theme(saved["theme"]),
    )


def settingsToJSON(settings: Settings) -> SavedSettings:
    return {
        "workDuration": settings.config.workMinutes,
        "shortBreakDuration": settings.config.shortBreakMinutes,
        "longBreakDuration": settings.config.longBreakMinutes,
        "longBreakInterval": settings.config.longBreakIntervalCount,
        "soundEnabled": settings.soundEnabled,
        "theme": settings.theme.value,
    }


def ledgerFromJSON(saved: list[SavedDailyProgress]) -> ProgressLedger:
    return ProgressLedger.fromEntries(
        DailyProgressEntry(
            date=each["date"],
            completedFocusIntervals=int(each["pomodoroSessions"]),
            focusMinutes=int(each["focusTime"]),
            tasksCompleted=int(each["tasksCompleted"]),
        )
        for each in saved
    )


def ledgerToJSON(ledger: ProgressLedger) -> list[SavedDailyProgress]:
    return [
        {
            "date": entry.date,
            "pomodoroSessions": entry.completedFocusIntervals,
            "focusTime": entry.focusMinutes,
            "tasksCompleted": entry.tasksCompleted,
        }
        for entry in ledger.entries
    ]


def tasksFromJSON(saved: list[SavedTodo]) -> TaskList:
    return TaskList(
        [
            Task(
                id=str(each["id"]),
                text=each["text"],
                createdAt=each["createdAt"],
                completed=bool(each["completed"]),
                pomodoroCount=int(each.get("pomodoroSessions", 0)),
                completedAt=each.get("completedAt"),
            )
            for each in saved
        ]
    )


def tasksToJSON(tasks: TaskList) -> list[SavedTodo]:
    return [
        {
            "id": task.id,
            "text": task.text,
            "completed": task.completed,
            "pomodoroSessions": task.pomodoroCount,
            "createdAt": task.createdAt,
            "completedAt": task.completedAt,
        }
        for task in tasks
    ]


def sessionsFromJSON(saved: list[SavedSession]) -> list[CompletedSession]:
    return [
        CompletedSession(
            id=str(each["id"]),
            intervalType=IntervalType(each["type"]),
            durationMinutes=int(each["duration"]),
            completedAt=each["completedAt"],
            taskID=each.get("todoId"),
        )
        for each in saved
    ]


def sessionsToJSON(sessions: Sequence[CompletedSession]) -> list[SavedSession]:
    return [
        {
            "id": session.id,
            "type": session.intervalType.value,
            "duration": session.durationMinutes,
            "completedAt": session.completedAt,
            "todoId": session.taskID,
        }
        for session in sessions
    ]
