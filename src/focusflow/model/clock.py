# -*- test-case-name: focusflow.model.test.test_clock -*-
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from twisted.internet.interfaces import IReactorTime
from twisted.internet.task import LoopingCall
from twisted.logger import Logger
from twisted.python.failure import Failure

from .debugger import debug

log = Logger()


@dataclass
class SecondTicker:
    """
    Call C{onTick} once per second of C{reactor} time, for as long as it's
    armed.

    C{onTick} is passed the number of whole seconds since it was last called.
    That is normally 1, but if the reactor was blocked (or the computer was
    asleep) several seconds are reported by a single call.
    """

    reactor: IReactorTime
    onTick: Callable[[int], object]
    _loop: LoopingCall | None = field(default=None, init=False)

    @property
    def armed(self) -> bool:
        return self._loop is not None

    def arm(self) -> None:
        """
        Start ticking, one second from now.  Arming an armed ticker does
        nothing.
        """
        if self._loop is not None:
            return
        debug("arming ticker at", self.reactor.seconds())
        loop = self._loop = LoopingCall.withCount(self.onTick)
        loop.clock = self.reactor
        loop.start(1.0, now=False).addErrback(self._tickFailed, loop)

    def disarm(self) -> None:
        """
        Stop ticking.  No further calls to C{onTick} will be made, including
        when this is called from within C{onTick} itself.
        """
        loop, self._loop = self._loop, None
        if loop is not None and loop.running:
            debug("disarming ticker at", self.reactor.seconds())
            loop.stop()

    def _tickFailed(self, failure: Failure, loop: LoopingCall) -> None:
        log.failure("tick failed; ticker disarmed", failure)
        if self._loop is loop:
            self._loop = None
