from json import dumps, loads

from twisted.internet.task import Clock
from twisted.python.filepath import FilePath
from twisted.trial.unittest import SynchronousTestCase as TC

from ..boundaries import IntervalType, Theme
from ..configuration import ConfigurationError, SessionConfig, Settings
from ..context import EngineContext, noUIFactory
from ..ledger import CompletedSession, DailyProgressEntry
from ..storage import (
    JSONStore,
    PersistenceError,
    StorageKey,
    ledgerFromJSON,
    ledgerToJSON,
    sessionsFromJSON,
    sessionsToJSON,
    settingsFromJSON,
    settingsToJSON,
    tasksFromJSON,
)


class JSONStoreTests(TC):
    """
    Tests for L{JSONStore}.
    """

    def setUp(self) -> None:
        self.base = FilePath(self.mktemp())
        self.store = JSONStore(self.base)

    def test_missingIsDefault(self) -> None:
        """
        Loading a key that was never saved produces the default, without
        creating anything.
        """
        self.assertEqual(self.store.load(StorageKey.todos, []), [])
        self.assertFalse(self.base.exists())

    def test_saveAndLoad(self) -> None:
        self.assertTrue(self.store.save(StorageKey.todos, [{"id": "1"}]))
        self.assertEqual(
            loads(self.base.child("pomodoro_todos.json").getContent()),
            [{"id": "1"}],
        )
        self.assertEqual(self.store.load(StorageKey.todos, []), [{"id": "1"}])

    def test_corruptIsDefault(self) -> None:
        """
        An unreadable file is logged and replaced by the default.
        """
        self.base.makedirs()
        self.store.pathFor(StorageKey.progress).setContent(b"{not json")
        self.assertEqual(self.store.load(StorageKey.progress, []), [])
        self.assertEqual(len(self.flushLoggedErrors(PersistenceError)), 1)

    def test_unserializableSaveIsLogged(self) -> None:
        self.assertFalse(self.store.save(StorageKey.settings, {"x": object()}))
        self.assertEqual(len(self.flushLoggedErrors(PersistenceError)), 1)
        self.assertFalse(self.store.pathFor(StorageKey.settings).exists())

    def test_unwritableSaveIsLogged(self) -> None:
        """
        If the base location can't be a directory, saving fails quietly.
        """
        self.base.setContent(b"in the way")
        self.assertFalse(self.store.save(StorageKey.todos, []))
        self.assertEqual(len(self.flushLoggedErrors(PersistenceError)), 1)


class SerializationTests(TC):
    def test_settings(self) -> None:
        settings = Settings(SessionConfig(50, 10, 30, 3), False, Theme.dark)
        saved = settingsToJSON(settings)
        self.assertEqual(
            saved,
            {
                "workDuration": 50,
                "shortBreakDuration": 10,
                "longBreakDuration": 30,
                "longBreakInterval": 3,
                "soundEnabled": False,
                "theme": "dark",
            },
        )
        self.assertEqual(settingsFromJSON(saved), settings)

    def test_invalidSettings(self) -> None:
        saved = settingsToJSON(Settings())
        saved["workDuration"] = 0
        with self.assertRaises(ConfigurationError):
            settingsFromJSON(saved)

    def test_soundEnabledMustBeBoolean(self) -> None:
        """
        A C{soundEnabled} that isn't a JSON boolean is rejected rather than
        coerced; the string C{"false"} would otherwise mean on.
        """
        saved = settingsToJSON(Settings())
        saved["soundEnabled"] = "false"  # type:ignore[typeddict-item]
        with self.assertRaises(ValueError):
            settingsFromJSON(saved)

    def test_ledgerFieldNames(self) -> None:
        ledger = ledgerFromJSON(
            [
                {
                    "date": "2024-03-02",
                    "pomodoroSessions": 2,
                    "focusTime": 50,
                    "tasksCompleted": 1,
                },
                {
                    "date": "2024-03-01",
                    "pomodoroSessions": 1,
                    "focusTime": 25,
                    "tasksCompleted": 0,
                },
            ]
        )
        self.assertEqual(
            ledger.entries,
            (
                DailyProgressEntry("2024-03-01", 1, 25, 0),
                DailyProgressEntry("2024-03-02", 2, 50, 1),
            ),
        )
        self.assertEqual(ledgerToJSON(ledger)[1]["focusTime"], 50)

    def test_tasksWithoutCounts(self) -> None:
        """
        Tasks saved without a pomodoro count or completion time load with
        neither.
        """
        [task] = tasksFromJSON(
            [
                {  # type:ignore[typeddict-item]
                    "id": "1712345678901",
                    "text": "write report",
                    "completed": False,
                    "createdAt": 1.0,
                }
            ]
        )
        self.assertEqual(task.pomodoroCount, 0)
        self.assertIs(task.completedAt, None)

    def test_sessions(self) -> None:
        sessions = [
            CompletedSession("a", IntervalType.Work, 25, 100.0, "1"),
            CompletedSession("b", IntervalType.ShortBreak, 5, 400.0),
        ]
        saved = sessionsToJSON(sessions)
        self.assertEqual(saved[1]["type"], "shortBreak")
        self.assertIs(saved[1]["todoId"], None)
        self.assertEqual(sessionsFromJSON(saved), sessions)


class ContextPersistenceTests(TC):
    """
    An L{EngineContext} saves itself to a L{JSONStore} and can be loaded back.
    """

    def setUp(self) -> None:
        self.clock = Clock()
        self.store = JSONStore(FilePath(self.mktemp()))

    def test_emptyStore(self) -> None:
        context = EngineContext.load(self.clock, noUIFactory, self.store)
        self.assertEqual(context.settings, Settings())
        self.assertEqual(context.ledger.entries, ())
        self.assertEqual(len(context.tasks), 0)
        self.assertEqual(context.sessions, ())

    def test_roundTrip(self) -> None:
        """
        Everything saved after a completed work interval is there when the
        context is loaded again.
        """
        context = EngineContext.load(self.clock, noUIFactory, self.store)
        context.updateSettings(Settings(SessionConfig(1, 1, 1, 2)))
        task = context.addTask("write report")
        context.focusOn(task.id)
        context.start()
        for _ in range(60):
            self.clock.advance(1.0)
        context.toggleTask(task.id)

        loaded = EngineContext.load(self.clock, noUIFactory, self.store)
        self.assertEqual(loaded.settings, context.settings)
        self.assertEqual(loaded.ledger.entries, context.ledger.entries)
        self.assertEqual(list(loaded.tasks), list(context.tasks))
        self.assertEqual(loaded.sessions, context.sessions)
        [entry] = loaded.ledger.entries
        self.assertEqual(
            (entry.completedFocusIntervals, entry.tasksCompleted), (1, 1)
        )
        self.assertEqual(loaded.tasks.get(task.id).pomodoroCount, 1)

    def test_malformedFallsBack(self) -> None:
        """
        Saved data that parses as JSON but doesn't make sense is logged and
        replaced by defaults, one key at a time.
        """
        self.store.save(StorageKey.settings, {"workDuration": 0})
        self.store.save(StorageKey.todos, ["not a task"])
        self.store.save(
            StorageKey.progress,
            [
                {
                    "date": "2024-03-01",
                    "pomodoroSessions": 1,
                    "focusTime": 25,
                    "tasksCompleted": 0,
                }
            ],
        )
        context = EngineContext.load(self.clock, noUIFactory, self.store)
        self.assertEqual(context.settings, Settings())
        self.assertEqual(len(context.tasks), 0)
        self.assertEqual(len(context.ledger.entries), 1)
        self.assertEqual(len(self.flushLoggedErrors(KeyError, TypeError)), 2)

    def test_invalidSavedDurations(self) -> None:
        saved = settingsToJSON(Settings())
        saved["longBreakInterval"] = -1
        self.store.save(StorageKey.settings, dict(saved))
        context = EngineContext.load(self.clock, noUIFactory, self.store)
        self.assertEqual(context.settings, Settings())
        self.assertEqual(len(self.flushLoggedErrors(ConfigurationError)), 1)

    def test_malformedSoundSetting(self) -> None:
        """
        A saved C{soundEnabled} of the wrong type falls back to the default
        settings instead of being guessed at.
        """
        saved = settingsToJSON(Settings(soundEnabled=True))
        self.store.save(
            StorageKey.settings,
            dict(saved, soundEnabled="false", workDuration=50),
        )
        context = EngineContext.load(self.clock, noUIFactory, self.store)
        self.assertEqual(context.settings, Settings())
        self.assertEqual(len(self.flushLoggedErrors(ValueError)), 1)

    def test_savedFileIsJSON(self) -> None:
        context = EngineContext.load(self.clock, noUIFactory, self.store)
        context.addTask("write report")
        self.assertEqual(
            loads(self.store.pathFor(StorageKey.todos).getContent())[0]["text"],
            "write report",
        )
        self.assertEqual(
            self.store.pathFor(StorageKey.settings).getContent(),
            dumps(settingsToJSON(Settings())).encode("utf-8"),
        )
