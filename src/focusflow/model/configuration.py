# -*- test-case-name: focusflow.model.test.test_configuration -*-
from __future__ import annotations

from dataclasses import dataclass, field, fields, replace

from .boundaries import IntervalType, Theme


class ConfigurationError(ValueError):
    """
    A duration or interval count was not a positive integer.
    """


@dataclass(frozen=True)
class SessionConfig:
    """
    How long each kind of interval lasts, and how often the long break comes
    around.
    """

    workMinutes: int = 25
    shortBreakMinutes: int = 5
    longBreakMinutes: int = 15
    longBreakIntervalCount: int = 4
    """
    Every Nth completed work interval is followed by a long break rather than
    a short one.
    """

    def __post_init__(self) -> None:
        for each in fields(self):
            value = getattr(self, each.name)
            # bool is an int, but 'True minutes' is not a duration
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(
                    f"{each.name} must be an integer, not {value!r}"
                )
            if value < 1:
                raise ConfigurationError(
                    f"{each.name} must be positive, not {value!r}"
                )

    def minutesFor(self, intervalType: IntervalType) -> int:
        if intervalType is IntervalType.Work:
            return self.workMinutes
        elif intervalType is IntervalType.ShortBreak:
            return self.shortBreakMinutes
        else:
            return self.longBreakMinutes

    def durationFor(self, intervalType: IntervalType) -> int:
        """
        The length of an interval of the given type, in seconds.
        """
        return self.minutesFor(intervalType) * 60

    def sameDurations(self, other: SessionConfig) -> bool:
        """
        Do C{self} and C{other} agree on the length of every interval type?
        """
        return all(
            self.minutesFor(each) == other.minutesFor(each)
            for each in IntervalType
        )


@dataclass(frozen=True)
class Settings:
    """
    Everything the user can configure.
    """

    config: SessionConfig = field(default_factory=SessionConfig)
    soundEnabled: bool = True
    theme: Theme = Theme.light

    def withOption(self, name: str, value: str) -> Settings:
        """
        Return a copy of these settings with the option C{name} (one of the
        persisted setting names, like C{workDuration}) set from the string
        C{value}.

        @raise ConfigurationError: if the name is unknown or the value does
            not make sense for it.
        """
        if name in configOptions:
            try:
                number = int(value)
            except ValueError:
                raise ConfigurationError(
                    f"{name} must be a whole number, not {value!r}"
                ) from None
            return replace(
                self,
                config=replace(self.config, **{configOptions[name]: number}),
            )
        if name == "soundEnabled":
            lowered = value.lower()
            if lowered not in truthy | falsey:
                raise ConfigurationError("soundEnabled must be on or off")
            return replace(self, soundEnabled=lowered in truthy)
        if name == "theme":
            try:
                return replace(self, theme=Theme(value))
            except ValueError:
                raise ConfigurationError(
                    f"theme must be one of "
                    f"{', '.join(each.value for each in Theme)}"
                ) from None
        raise ConfigurationError(f"unknown setting {name!r}")


configOptions = {
    "workDuration": "workMinutes",
    "shortBreakDuration": "shortBreakMinutes",
    "longBreakDuration": "longBreakMinutes",
    "longBreakInterval": "longBreakIntervalCount",
}
truthy = {"on", "true", "yes", "1"}
falsey = {"off", "false", "no", "0"}
