"""Exception type for capture configuration problems."""

from __future__ import annotations

from typing import Any


class ConfigurationError(RuntimeError):
    """A setting is missing, unparsable or out of range."""

    def __init__(self, message: str, *, setting: str | None = None) -> None:
        super().__init__(message)
        self.setting = setting

    @classmethod
    def missing_value(cls, setting: str) -> "ConfigurationError":
        return cls(f"Required setting {setting} is not set", setting=setting)

    @classmethod
    def invalid_value(cls, setting: str, value: Any, reason: str) -> "ConfigurationError":
        return cls(f"Invalid value for {setting}: {value!r} ({reason})", setting=setting)
