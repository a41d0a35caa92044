"""
declarative-options — single option descriptor.

Purpose
- Represent the immutable contract for one named configuration value: its
  type constraint, optional allow-list, optional default and whether a reader
  is generated for it.

Defaults are modelled as three explicit states so that "no default" never
collides with a legitimate default of ``None``:

- ``NO_DEFAULT``: nothing is filled in when the option is missing.
- ``LiteralDefault(value)``: ``value`` is used as-is.
- ``ComputedDefault(factory)``: ``factory`` is called lazily during
  construction, receiving the owning instance when it takes a positional
  argument.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Final, TypeAlias

from declarative_options.constants import (
    SETTING_ALLOW,
    SETTING_DEFAULT,
    SETTING_KEYS,
    SETTING_READER,
    SETTING_TYPE,
)
from declarative_options.errors import OptionDeclarationError


class _NoDefault:
    __slots__ = ()

    def __repr__(self) -> str:
        return "NO_DEFAULT"

    def __reduce__(self) -> str:
        return "NO_DEFAULT"


NO_DEFAULT: Final = _NoDefault()


@dataclass(frozen=True, slots=True)
class LiteralDefault:
    """Default that is used verbatim."""

    value: Any

    def resolve(self, owner: object) -> Any:
        return self.value


@dataclass(frozen=True, slots=True)
class ComputedDefault:
    """Default produced on demand by ``factory``."""

    factory: Callable[..., Any]
    takes_owner: bool = field(init=False)

    def __post_init__(self) -> None:
        if not callable(self.factory):
            raise OptionDeclarationError("computed default factory must be callable")
        object.__setattr__(self, "takes_owner", _requires_positional_argument(self.factory))

    def resolve(self, owner: object) -> Any:
        if self.takes_owner:
            return self.factory(owner)
        return self.factory()


DefaultSpec: TypeAlias = _NoDefault | LiteralDefault | ComputedDefault


@dataclass(frozen=True, slots=True)
class Option:
    """Immutable description of one declared option."""

    name: str
    type: Any = object
    reader: bool = False
    allow: tuple[Any, ...] = ()
    default: DefaultSpec = NO_DEFAULT

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", _normalize_name(self.name))
        object.__setattr__(self, "type", _normalize_type(self.name, self.type))
        if not isinstance(self.reader, bool):
            raise OptionDeclarationError(f"option {self.name!r}: reader must be a bool")
        object.__setattr__(self, "allow", _normalize_allow(self.name, self.allow))
        object.__setattr__(self, "default", as_default(self.default))

    @classmethod
    def from_settings(cls, name: str, settings: Mapping[str, Any] | None = None) -> Option:
        """Build an option from a declaration settings record."""

        settings = dict(settings or {})
        unknown = sorted(str(key) for key in settings if key not in SETTING_KEYS)
        if unknown:
            allowed = ", ".join(SETTING_KEYS)
            raise OptionDeclarationError(
                f"option {name!r}: unknown settings {', '.join(unknown)} (allowed: {allowed})"
            )
        return cls(
            name,
            type=settings.get(SETTING_TYPE, object),
            reader=settings.get(SETTING_READER, False),
            allow=settings.get(SETTING_ALLOW, ()),
            default=settings.get(SETTING_DEFAULT, NO_DEFAULT),
        )

    def has_default(self) -> bool:
        return self.default is not NO_DEFAULT

    def default_value(self, owner: object) -> Any:
        """Resolve the declared default for ``owner``."""

        if isinstance(self.default, _NoDefault):
            raise OptionDeclarationError(f"option {self.name!r} has no default")
        return self.default.resolve(owner)

    def type_matches(self, value: object) -> bool:
        return isinstance(value, self.type)

    def allows(self, value: object) -> bool:
        return not self.allow or value in self.allow

    def describe_type(self) -> str:
        return _describe_type(self.type)

    def describe_allow(self) -> str:
        return ", ".join(repr(item) for item in self.allow)


def as_default(value: object) -> DefaultSpec:
    """Normalize a raw ``default`` setting into one of the default variants.

    Existing variants pass through. Callables other than classes become
    computed defaults; everything else, classes included, is a literal.
    """

    if isinstance(value, (_NoDefault, LiteralDefault, ComputedDefault)):
        return value
    if callable(value) and not isinstance(value, type):
        return ComputedDefault(value)
    return LiteralDefault(value)


def _normalize_name(value: object) -> str:
    if not isinstance(value, str):
        raise OptionDeclarationError(f"option name must be a string, got {type(value).__name__}")
    if not value.isidentifier():
        raise OptionDeclarationError(f"option name {value!r} is not a valid identifier")
    return value


def _normalize_type(name: str, value: object) -> Any:
    try:
        isinstance(None, value)  # type: ignore[arg-type]
    except TypeError as exc:
        raise OptionDeclarationError(
            f"option {name!r}: type {value!r} cannot be used for instance checks"
        ) from exc
    return value


def _normalize_allow(name: str, value: object) -> tuple[Any, ...]:
    if value is None:
        return ()
    if isinstance(value, (str, bytes, bytearray)) or not isinstance(value, Iterable):
        raise OptionDeclarationError(
            f"option {name!r}: allow must be a collection of values, got {type(value).__name__}"
        )
    return tuple(value)


def _requires_positional_argument(factory: Callable[..., Any]) -> bool:
    try:
        signature = inspect.signature(factory)
    except (TypeError, ValueError):
        return False
    for parameter in signature.parameters.values():
        if parameter.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ) and parameter.default is inspect.Parameter.empty:
            return True
        if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
            return True
    return False


def _describe_type(value: object) -> str:
    if isinstance(value, tuple):
        return " | ".join(_describe_type(item) for item in value)
    if isinstance(value, type):
        return value.__qualname__
    return repr(value)


__all__ = [
    "NO_DEFAULT",
    "ComputedDefault",
    "DefaultSpec",
    "LiteralDefault",
    "Option",
    "as_default",
]
