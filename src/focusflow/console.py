# -*- test-case-name: focusflow.test.test_console -*-
"""
A line-oriented terminal front end, run on the Twisted reactor.
"""
from __future__ import annotations

import sys
from dataclasses import dataclass
from os import environ
from typing import Callable

from twisted.internet.defer import Deferred
from twisted.internet.interfaces import IReactorTime
from twisted.internet.protocol import connectionDone
from twisted.internet.stdio import StandardIO
from twisted.internet.task import react
from twisted.logger import (
    FilteringLogObserver,
    LogLevel,
    LogLevelFilterPredicate,
    globalLogBeginner,
    textFileLogObserver,
)
from twisted.protocols.basic import LineReceiver
from twisted.python.failure import Failure

from .model.boundaries import UserInterface
from .model.configuration import ConfigurationError
from .model.context import EngineContext
from .model.storage import JSONStore
from .model.streaks import streakMessage, totalFocusTime
from .model.tasks import UnknownTask
from .model.util import intervalSummary


usage = """\
commands:
  start | pause | reset | restart | status
  add <text> | done <id> | edit <id> <text> | rm <id> | tasks
  focus [<id>] | stats | set <name> <value> | quit"""

intervalLabels = {
    "work": "Focus Time",
    "shortBreak": "Short Break",
    "longBreak": "Long Break",
}


@dataclass
class ConsoleInterface(UserInterface):
    """
    Report progress and notifications by writing lines to the terminal.
    """

    write: Callable[[str], None]

    def intervalProgress(self, percentComplete: float, remaining: str) -> None:
        # once a minute is plenty for a terminal
        if remaining.endswith(":00"):
            self.write(f"{remaining} left ({percentComplete:.0f}% done)")

    def notify(self, title: str, body: str) -> None:
        self.write(f"*** {title} {body}")

    def playSound(self) -> None:
        self.write("\a")


class FocusFlowProtocol(LineReceiver):
    """
    Read commands, one per line, and apply them to an L{EngineContext}.
    """

    delimiter = b"\n"
    context: EngineContext

    def __init__(self) -> None:
        self.done: Deferred[None] = Deferred()

    def say(self, text: str) -> None:
        for line in text.splitlines() or [""]:
            self.sendLine(line.encode("utf-8"))

    def connectionMade(self) -> None:
        self.say("focusflow ready; type 'help' for commands")

    def connectionLost(self, reason: Failure = connectionDone) -> None:
        if not self.done.called:
            self.done.callback(None)

    def lineReceived(self, line: bytes) -> None:
        words = line.decode("utf-8", "replace").strip().split(None, 1)
        if not words:
            return
        command, rest = words[0].lower(), (words[1] if len(words) > 1 else "")
        method = getattr(self, f"do_{command}", None)
        if method is None:
            self.say(f"unknown command {command!r}\n{usage}")
            return
        try:
            method(rest)
        except UnknownTask as unknown:
            self.say(f"no task {unknown.args[0]!r}")
        except ValueError as error:
            # ConfigurationError included
            self.say(f"error: {error}")

    def do_help(self, rest: str) -> None:
        self.say(usage)

    def do_start(self, rest: str) -> None:
        self.context.start()
        self.do_status(rest)

    def do_pause(self, rest: str) -> None:
        self.context.pause()
        self.do_status(rest)

    def do_reset(self, rest: str) -> None:
        self.context.reset()
        self.do_status(rest)

    def do_restart(self, rest: str) -> None:
        self.context.restart()
        self.do_status(rest)

    def do_status(self, rest: str) -> None:
        engine = self.context.engine
        label = intervalLabels[engine.currentType.value]
        status = (
            f"{label}: {engine.formattedTime} "
            f"[{engine.timerState.value}] "
            f"{engine.completedWorkCount} completed"
        )
        active = self.context.activeTaskID
        if active is not None:
            status += f"; focusing on: {self.context.tasks.get(active).text}"
        self.say(status)

    def do_add(self, rest: str) -> None:
        task = self.context.addTask(rest)
        self.say(f"added task {task.id}: {task.text}")

    def do_done(self, rest: str) -> None:
        completed = self.context.toggleTask(rest.strip())
        self.say("completed" if completed else "reopened")

    def do_edit(self, rest: str) -> None:
        taskID, _, text = rest.partition(" ")
        task = self.context.editTask(taskID, text)
        self.say(f"task {task.id}: {task.text}")

    def do_rm(self, rest: str) -> None:
        task = self.context.removeTask(rest.strip())
        self.say(f"removed task {task.id}")

    def do_tasks(self, rest: str) -> None:
        if not len(self.context.tasks):
            self.say("no tasks")
            return
        for task in self.context.tasks:
            mark = "x" if task.completed else " "
            active = "*" if task.id == self.context.activeTaskID else " "
            self.say(
                f"{active}[{mark}] {task.id}: {task.text} "
                f"({task.pomodoroCount} pomodoros)"
            )

    def do_focus(self, rest: str) -> None:
        taskID = rest.strip() or None
        self.context.focusOn(taskID)
        self.say("focus cleared" if taskID is None else f"focusing on {taskID}")

    def do_stats(self, rest: str) -> None:
        totals = self.context.ledger.totals()
        current = self.context.currentStreak()
        self.say(
            f"sessions: {totals.focusIntervals}, "
            f"tasks done: {totals.tasksCompleted}, "
            f"focus time: {totalFocusTime(self.context.ledger.entries)}\n"
            f"current streak: {current}, "
            f"best streak: {self.context.bestStreak()}\n"
            f"{streakMessage(current)}"
        )
        for entry in self.context.ledger.lastDays(7):
            self.say(
                f"  {entry.date}: {entry.completedFocusIntervals} sessions, "
                f"{entry.tasksCompleted} tasks"
            )

    def do_set(self, rest: str) -> None:
        name, _, value = rest.strip().partition(" ")
        if not value:
            raise ConfigurationError("usage: set <name> <value>")
        self.context.updateSettings(
            self.context.settings.withOption(name, value.strip())
        )
        engine = self.context.engine
        length = intervalSummary(engine.durationFor(engine.currentType))
        label = intervalLabels[engine.currentType.value]
        self.say(f"{name} set to {value.strip()}; {label} is {length}")

    def do_quit(self, rest: str) -> None:
        self.transport.loseConnection()


def beginLogging() -> None:
    level = LogLevel.debug if environ.get("FOCUSFLOW_DEBUG") else LogLevel.info
    globalLogBeginner.beginLoggingTo(
        [
            FilteringLogObserver(
                textFileLogObserver(sys.stderr),
                [LogLevelFilterPredicate(defaultLogLevel=level)],
            )
        ]
    )


def buildProtocol(
    reactor: IReactorTime, store: JSONStore
) -> FocusFlowProtocol:
    """
    Create a protocol with a context loaded from C{store} whose notifications
    come back through the protocol.
    """
    protocol = FocusFlowProtocol()
    protocol.context = EngineContext.load(
        reactor,
        lambda context: ConsoleInterface(protocol.say),
        store,
    )
    return protocol


def main(reactor: IReactorTime) -> Deferred[None]:
    protocol = buildProtocol(reactor, JSONStore())
    StandardIO(protocol, reactor=reactor)

    def stopped(result: object) -> object:
        protocol.context.shutdown()
        protocol.context.save()
        return result

    return protocol.done.addBoth(stopped)


def run() -> None:
    beginLogging()
    react(main)
