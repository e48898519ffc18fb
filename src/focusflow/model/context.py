# -*- test-case-name: focusflow.model.test.test_context -*-
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import tzinfo
from typing import Callable, Sequence, TypeVar, cast
from uuid import uuid4

from twisted.internet.interfaces import IReactorTime
from twisted.logger import Logger

from .boundaries import (
    IntervalType,
    NoUserInterface,
    TimerState,
    UserInterface,
    UserInterfaceFactory,
)
from .clock import SecondTicker
from .configuration import Settings
from .dates import dateKey
from .debugger import debug
from .engine import SessionCompleted, SessionStateMachine
from .ledger import CompletedSession, ProgressLedger
from .schema import SavedDailyProgress, SavedSession, SavedSettings, SavedTodo
from .storage import (
    JSONStore,
    StorageKey,
    ledgerFromJSON,
    ledgerToJSON,
    sessionsFromJSON,
    sessionsToJSON,
    settingsFromJSON,
    settingsToJSON,
    tasksFromJSON,
    tasksToJSON,
)
from .streaks import bestStreak, currentStreak
from .tasks import Task, TaskList
from .util import interactionRoot

log = Logger()
T = TypeVar("T")

completionMessages: dict[IntervalType, tuple[str, str]] = {
    IntervalType.Work: ("Pomodoro Complete!", "Great job! Time for a break."),
    IntervalType.ShortBreak: ("Break Complete!", "Ready to focus again?"),
    IntervalType.LongBreak: ("Break Complete!", "Ready to focus again?"),
}


_theNoUserInterface: UserInterface = NoUserInterface()


def noUIFactory(context: EngineContext) -> UserInterface:
    return _theNoUserInterface


@dataclass
class EngineContext:
    """
    Owner of the timer, the settings, the progress ledger and the task list;
    everything the user does goes through here, and everything the timer
    finishes gets recorded here.
    """

    _reactor: IReactorTime
    "The source of time, for both ticking and timestamping."

    _interfaceFactory: UserInterfaceFactory
    "A factory to create a user interface the first time one is needed."

    _settings: Settings = field(default_factory=Settings)
    _ledger: ProgressLedger = field(default_factory=ProgressLedger)
    _tasks: TaskList = field(default_factory=TaskList)
    _sessions: list[CompletedSession] = field(default_factory=list)
    "Every interval that has run to completion, oldest first."

    _store: JSONStore | None = None
    "Where to save after every change; C{None} to keep everything in memory."

    _zone: tzinfo | None = None
    "The time zone that decides calendar days; C{None} for the local zone."

    _activeTaskID: str | None = None
    "The task that gets credit for completed work intervals, if any."

    _userInterface: UserInterface | None = field(default=None, init=False)
    _engine: SessionStateMachine = field(init=False)
    _ticker: SecondTicker = field(init=False)

    def __post_init__(self) -> None:
        self._engine = SessionStateMachine(self._settings.config)
        self._ticker = SecondTicker(self._reactor, self.advanceSeconds)

    @classmethod
    def load(
        cls,
        reactor: IReactorTime,
        interfaceFactory: UserInterfaceFactory,
        store: JSONStore,
        zone: tzinfo | None = None,
    ) -> EngineContext:
        """
        Load everything saved in C{store}, falling back to defaults for
        anything that is missing or unreadable.
        """
        return cls(
            reactor,
            interfaceFactory,
            _settings=_loadOrDefault(
                store,
                StorageKey.settings,
                lambda saved: settingsFromJSON(cast(SavedSettings, saved)),
                Settings,
            ),
            _ledger=_loadOrDefault(
                store,
                StorageKey.progress,
                lambda saved: ledgerFromJSON(
                    cast(list[SavedDailyProgress], saved)
                ),
                ProgressLedger,
            ),
            _tasks=_loadOrDefault(
                store,
                StorageKey.todos,
                lambda saved: tasksFromJSON(cast(list[SavedTodo], saved)),
                TaskList,
            ),
            _sessions=_loadOrDefault(
                store,
                StorageKey.sessions,
                lambda saved: sessionsFromJSON(cast(list[SavedSession], saved)),
                list,
            ),
            _store=store,
            _zone=zone,
        )

    def save(self) -> None:
        """
        Save everything to the store, if there is one.
        """
        if self._store is None:
            return
        self._store.save(StorageKey.settings, settingsToJSON(self._settings))
        self._store.save(StorageKey.progress, ledgerToJSON(self._ledger))
        self._store.save(StorageKey.todos, tasksToJSON(self._tasks))
        self._store.save(StorageKey.sessions, sessionsToJSON(self._sessions))

    @property
    def userInterface(self) -> UserInterface:
        """
        build the user interface on demand
        """
        if self._userInterface is None:
            debug("creating user interface for the first time")
            self._userInterface = self._interfaceFactory(self)
        return self._userInterface

    @property
    def engine(self) -> SessionStateMachine:
        return self._engine

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def ledger(self) -> ProgressLedger:
        return self._ledger

    @property
    def tasks(self) -> TaskList:
        return self._tasks

    @property
    def sessions(self) -> Sequence[CompletedSession]:
        return tuple(self._sessions)

    @property
    def activeTaskID(self) -> str | None:
        return self._activeTaskID

    @property
    def ticking(self) -> bool:
        return self._ticker.armed

    @property
    def today(self) -> str:
        """
        The ledger key for the current calendar day.
        """
        return dateKey(self._reactor.seconds(), self._zone)

    def currentStreak(self) -> int:
        return currentStreak(self._ledger.entries, self.today)

    def bestStreak(self) -> int:
        return bestStreak(self._ledger.entries)

    def start(self) -> None:
        """
        Start or resume the current interval.
        """
        self._engine.start()
        self._ticker.arm()

    def pause(self) -> None:
        self._engine.pause()
        self._ticker.disarm()

    def reset(self) -> None:
        """
        Rewind the current interval.  If the ticker is armed it stays armed;
        it just has nothing to do until the interval is started again.
        """
        self._engine.reset()
        self._reportProgress()

    def restart(self) -> None:
        """
        Throw away the current cycle of intervals and go back to an idle work
        interval.  Recorded progress is kept.
        """
        self._ticker.disarm()
        self._engine.restart()
        self._reportProgress()

    def shutdown(self) -> None:
        """
        Stop ticking for good.
        """
        self._ticker.disarm()

    def advanceSeconds(self, count: int) -> SessionCompleted | None:
        """
        C{count} seconds of real time have passed since the last tick.

        The countdown stops at the end of the current interval; any seconds
        left over are not carried into the next one.
        """
        for _ in range(count):
            if self._engine.timerState is not TimerState.Running:
                break
            event = self.advanceOneSecond()
            if event is not None:
                return event
        return None

    def advanceOneSecond(self) -> SessionCompleted | None:
        """
        One second of real time has passed.
        """
        if self._engine.timerState is not TimerState.Running:
            return None
        event = self._engine.tick()
        if event is not None:
            self._ticker.disarm()
            self._sessionCompleted(event)
        self._reportProgress()
        return event

    def _reportProgress(self) -> None:
        self.userInterface.intervalProgress(
            self._engine.progress, self._engine.formattedTime
        )

    def _sessionCompleted(self, event: SessionCompleted) -> None:
        log.info(
            "{intervalType} interval of {minutes} minutes complete",
            intervalType=event.intervalType.value,
            minutes=event.durationMinutes,
        )
        creditedTask = None
        if event.intervalType is IntervalType.Work:
            self._ledger.recordFocusCompletion(
                self.today, event.durationMinutes
            )
            if self._activeTaskID is not None:
                creditedTask = self._activeTaskID
                self._tasks.incrementPomodoroCount(creditedTask)
        self._sessions.append(
            CompletedSession(
                id=uuid4().hex,
                intervalType=event.intervalType,
                durationMinutes=event.durationMinutes,
                completedAt=self._reactor.seconds(),
                taskID=creditedTask,
            )
        )
        self.save()
        ui = self.userInterface
        if self._settings.soundEnabled:
            ui.playSound()
        ui.notify(*completionMessages[event.intervalType])

    def focusOn(self, taskID: str | None) -> None:
        """
        Make the given task the one that gets credit for completed work
        intervals, or stop crediting any task if C{taskID} is C{None}.
        """
        if taskID is not None:
            self._tasks.get(taskID)
        self._activeTaskID = taskID

    @interactionRoot
    def addTask(self, text: str) -> Task:
        return self._tasks.add(text, self._reactor.seconds())

    @interactionRoot
    def toggleTask(self, taskID: str) -> bool:
        """
        Complete or un-complete a task, and count it in today's progress.
        """
        nowCompleted = self._tasks.toggle(taskID, self._reactor.seconds())
        self._ledger.recordTaskCompletionDelta(
            self.today, 1 if nowCompleted else -1
        )
        return nowCompleted

    @interactionRoot
    def editTask(self, taskID: str, text: str) -> Task:
        return self._tasks.edit(taskID, text)

    @interactionRoot
    def removeTask(self, taskID: str) -> Task:
        removed = self._tasks.remove(taskID)
        if self._activeTaskID == taskID:
            self._activeTaskID = None
        return removed

    @interactionRoot
    def updateSettings(self, settings: Settings) -> None:
        """
        Switch to new settings.  Changing any interval length rewinds the
        current interval.
        """
        self._engine.reconfigure(settings.config)
        self._settings = settings
        log.info("settings updated: {settings}", settings=settings)
        self._reportProgress()


def _loadOrDefault(
    store: JSONStore,
    key: StorageKey,
    parse: Callable[[object], T],
    default: Callable[[], T],
) -> T:
    saved = store.load(key, None)
    if saved is None:
        return default()
    try:
        return parse(saved)
    except (AttributeError, KeyError, TypeError, ValueError):
        log.failure("saved {key} is malformed; using default", key=key.name)
        return default()
