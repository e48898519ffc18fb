# -*- test-case-name: focusflow.model.test.test_util -*-
from __future__ import annotations

from contextlib import contextmanager
from functools import wraps
from typing import (
    Callable,
    Concatenate,
    Iterator,
    ParamSpec,
    Protocol,
    TypeVar,
)

from dateutil.relativedelta import relativedelta
from twisted.logger import Logger

from .debugger import debug

T = TypeVar("T")
log = Logger()


def formatRemaining(seconds: int) -> str:
    """
    Format a number of seconds as C{MM:SS}.  Minutes are not wrapped into
    hours, so an hour and a half is C{90:00}.
    """
    minutes, seconds = divmod(seconds, 60)
    return f"{minutes:02d}:{seconds:02d}"


def intervalSummary(seconds: int) -> str:
    """
    Produce a human-readable summary for a number of seconds.
    """
    delta = relativedelta(seconds=seconds)
    segments = [
        "%d %s" % (value, attr if value > 1 else attr[:-1])
        for attr in [
            "days",
            "hours",
            "minutes",
            "seconds",
        ]
        if (value := getattr(delta, attr))
    ]
    if not segments:
        segments = ["0 seconds"]
    if len(segments) > 1:
        segments[-2:] = [f"{segments[-2]} and {segments[-1]}"]
    return ", ".join(segments)


@contextmanager
def showFailures() -> Iterator[None]:
    """
    Log a traceback if the wrapped operation fails, then let the exception
    continue on its way.
    """
    try:
        yield
    except Exception:
        log.failure("interaction failed")
        raise


class Saveable(Protocol):
    def save(self) -> None:
        ...


P = ParamSpec("P")
S = TypeVar("S", bound=Saveable)


def interactionRoot(
    c: Callable[Concatenate[S, P], T]
) -> Callable[Concatenate[S, P], T]:
    """
    Decorator that should wrap every user-initiated operation that
    potentially mutates the model, saving it afterwards if it completes
    without raising an exception, or logging the exception if it does raise
    one.
    """

    @wraps(c)
    def showFailuresAndSave(self: S, *args: P.args, **kwargs: P.kwargs) -> T:
        with showFailures():
            debug("start action:", c.__name__)
            result = c(self, *args, **kwargs)
            self.save()
            debug("saved:", c.__name__)
            return result

    return showFailuresAndSave
