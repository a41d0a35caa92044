"""Error taxonomy for option declaration and construction-time validation."""

from __future__ import annotations

from enum import StrEnum


class InvalidValueReason(StrEnum):
    """Why a supplied option value was rejected."""

    TYPE_MISMATCH = "type_mismatch"
    DISALLOWED_VALUE = "disallowed_value"


class OptionsError(ValueError):
    """Base class for every error raised by declarative options."""


class OptionDeclarationError(OptionsError):
    """Raised when an option declaration itself is malformed."""


class UnknownOptionError(OptionsError):
    """Raised when a configuration bag carries a key with no declared option."""

    def __init__(self, option_name: object) -> None:
        self.option_name = option_name
        super().__init__(f"{option_name!r} is not a valid option")


class InvalidOptionValueError(OptionsError):
    """Raised when a supplied value fails its option's type or allow-list."""

    def __init__(
        self,
        option_name: str,
        value: object,
        reason: InvalidValueReason,
        *,
        detail: str | None = None,
    ) -> None:
        self.option_name = option_name
        self.value = value
        self.reason = reason
        if reason is InvalidValueReason.TYPE_MISMATCH:
            message = f"{option_name!r}:{value!r} has incorrect type"
        else:
            message = f"{option_name!r}:{value!r} has incorrect value"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


__all__ = [
    "InvalidOptionValueError",
    "InvalidValueReason",
    "OptionDeclarationError",
    "OptionsError",
    "UnknownOptionError",
]
