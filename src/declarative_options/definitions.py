"""Per-class registry of declared options."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, MutableMapping
from typing import Any

from declarative_options._logging import get_logger
from declarative_options.constants import READER_FIELD_PREFIX
from declarative_options.errors import (
    InvalidOptionValueError,
    InvalidValueReason,
    OptionDeclarationError,
    UnknownOptionError,
)
from declarative_options.option import Option

_LOGGER = get_logger(__name__)


class OptionDefinitions:
    """Ordered mapping of option name to :class:`Option`.

    Iteration follows declaration order, which keeps default filling
    deterministic. Redefining a name replaces the earlier option in place.
    """

    __slots__ = ("_options",)

    def __init__(self, options: Iterable[Option] = ()) -> None:
        self._options: dict[str, Option] = {}
        for option in options:
            self.define(option)

    def __copy__(self) -> OptionDefinitions:
        return self.copy()

    def __iter__(self) -> Iterator[Option]:
        return iter(tuple(self._options.values()))

    def __len__(self) -> int:
        return len(self._options)

    def __contains__(self, name: object) -> bool:
        return name in self._options

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({', '.join(self._options)})"

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._options)

    def get(self, name: str) -> Option | None:
        return self._options.get(name)

    def define(self, option: Option) -> Option:
        if not isinstance(option, Option):
            raise OptionDeclarationError(
                f"expected Option, got {type(option).__name__}"
            )
        self._options[option.name] = option
        return option

    def copy(self) -> OptionDefinitions:
        """Return a registry with an independent container and shared options."""

        duplicate = self.__class__()
        duplicate._options = dict(self._options)
        return duplicate

    def update(self, other: OptionDefinitions) -> None:
        for option in other:
            self.define(option)

    def set_defaults(self, owner: object, options: MutableMapping[str, Any]) -> None:
        """Fill in defaults for declared options missing from ``options``."""

        for name, option in self._options.items():
            if name in options or not option.has_default():
                continue
            options[name] = option.default_value(owner)

    def validate_options(self, options: Mapping[str, Any], *, owner: object = None) -> None:
        """Check every supplied key; stop at the first offending one.

        Raises
        ------
        UnknownOptionError
            A key has no declared option.
        InvalidOptionValueError
            A value has the wrong type or is outside the allow-list.
        """

        for name, value in options.items():
            self._validate_option_value(name, value, owner)

    def bind_values(self, owner: object, options: Mapping[str, Any]) -> None:
        for name, option in self._options.items():
            if option.reader:
                setattr(owner, reader_field(name), options.get(name))

    def _validate_option_value(self, name: str, value: object, owner: object) -> None:
        option = self._options.get(name)
        if option is None:
            _log_failure(owner, name, "unknown_option")
            raise UnknownOptionError(name)

        if not option.type_matches(value):
            _log_failure(owner, name, InvalidValueReason.TYPE_MISMATCH)
            raise InvalidOptionValueError(
                name,
                value,
                InvalidValueReason.TYPE_MISMATCH,
                detail=f"expected {option.describe_type()}",
            )

        if not option.allows(value):
            _log_failure(owner, name, InvalidValueReason.DISALLOWED_VALUE)
            raise InvalidOptionValueError(
                name,
                value,
                InvalidValueReason.DISALLOWED_VALUE,
                detail=f"allowed: {option.describe_allow()}",
            )


def reader_field(name: str) -> str:
    """Instance attribute backing the reader for option ``name``."""

    return f"{READER_FIELD_PREFIX}{name}"


def _log_failure(owner: object, name: object, reason: str) -> None:
    _LOGGER.debug(
        "option_validation_failed",
        owner=type(owner).__qualname__ if owner is not None else None,
        option=str(name),
        reason=str(reason),
    )


__all__ = ["OptionDefinitions", "reader_field"]
