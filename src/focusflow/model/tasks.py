# -*- test-case-name: focusflow.model.test.test_tasks -*-
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator


class UnknownTask(KeyError):
    """
    No task has the given identifier.
    """


@dataclass
class Task:
    """
    Something the user wants to get done.
    """

    id: str
    text: str
    createdAt: float
    completed: bool = False
    pomodoroCount: int = 0
    "How many work intervals were completed while this was the active task."
    completedAt: float | None = None


@dataclass
class TaskList:
    """
    The user's tasks, in the order they were added.
    """

    _tasks: list[Task] = field(default_factory=list)
    _lastTaskID: int = 0
    """
    The last numeric ID used for a task, incremented by 1 each time a new one
    is created.
    """

    def __post_init__(self) -> None:
        for task in self._tasks:
            if task.id.isdigit():
                self._lastTaskID = max(self._lastTaskID, int(task.id))

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def get(self, taskID: str) -> Task:
        for task in self._tasks:
            if task.id == taskID:
                return task
        raise UnknownTask(taskID)

    def add(self, text: str, now: float) -> Task:
        text = text.strip()
        if not text:
            raise ValueError("a task needs some text")
        self._lastTaskID += 1
        self._tasks.append(task := Task(str(self._lastTaskID), text, now))
        return task

    def toggle(self, taskID: str, now: float) -> bool:
        """
        Flip the given task between completed and not.

        @return: whether the task is now completed.
        """
        task = self.get(taskID)
        task.completed = not task.completed
        task.completedAt = now if task.completed else None
        return task.completed

    def edit(self, taskID: str, text: str) -> Task:
        text = text.strip()
        if not text:
            raise ValueError("a task needs some text")
        task = self.get(taskID)
        task.text = text
        return task

    def remove(self, taskID: str) -> Task:
        task = self.get(taskID)
        self._tasks.remove(task)
        return task

    def incrementPomodoroCount(self, taskID: str) -> int:
        task = self.get(taskID)
        task.pomodoroCount += 1
        return task.pomodoroCount
