from typing import Literal, TypedDict

SavedIntervalType = Literal["work", "shortBreak", "longBreak"]
SavedTheme = Literal["light", "dark"]

SavedSettings = TypedDict(
    "SavedSettings",
    {
        "workDuration": int,
        "shortBreakDuration": int,
        "longBreakDuration": int,
        "longBreakInterval": int,
        "soundEnabled": bool,
        "theme": SavedTheme,
    },
)

SavedDailyProgress = TypedDict(
    "SavedDailyProgress",
    {
        "date": str,
        "pomodoroSessions": int,
        # minutes
        "focusTime": int,
        "tasksCompleted": int,
    },
)

SavedTodo = TypedDict(
    "SavedTodo",
    {
        "id": str,
        "text": str,
        "completed": bool,
        "pomodoroSessions": int,
        "createdAt": float,
        "completedAt": float | None,
    },
)

SavedSession = TypedDict(
    "SavedSession",
    {
        "id": str,
        "type": SavedIntervalType,
        # minutes
        "duration": int,
        "completedAt": float,
        "todoId": str | None,
    },
)
