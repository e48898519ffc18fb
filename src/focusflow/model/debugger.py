from __future__ import annotations

from twisted.logger import Logger

_log = Logger(namespace="focusflow.debug")


def debug(*args: object) -> None:
    """
    Emit a terse debug trace built from C{args}, the way C{print} would join
    them.
    """
    _log.debug("{message}", message=" ".join(str(each) for each in args))
