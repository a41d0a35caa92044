"""
declarative-options — the ``Options`` capability.

Purpose
- Let a class declare its construction options once, inherit them into
  subclasses without sharing state, and validate/bind a configuration bag on
  every instantiation.

Example
-------
>>> class User(Options):
...     name = option(type=str, reader=True)
...     admin = option(allow=(True, False), reader=True, default=False)
>>> user = User(name="Piotr")
>>> user.name, user.admin
('Piotr', False)

Options may also be declared after the class body with
``User.declare_option("email", type=str)``.

Subclasses adding constructor parameters forward the bag:

>>> class Command(Options):
...     def __init__(self, relation, options=None, /, **overrides):
...         self.relation = relation
...         super().__init__(options, **overrides)
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from declarative_options._logging import get_logger
from declarative_options.constants import (
    DECLARED_ATTR,
    DEFINITIONS_ATTR,
    OPTIONS_ATTR,
    READER_FIELD_PREFIX,
    RESERVED_READER_NAMES,
)
from declarative_options.definitions import OptionDefinitions, reader_field
from declarative_options.errors import OptionDeclarationError
from declarative_options.option import Option

_LOGGER = get_logger(__name__)

# Declarations may run while other threads import modules defining subclasses.
_DECLARATION_LOCK = threading.RLock()


@dataclass(frozen=True, slots=True)
class DeclaredOption:
    """Class-body placeholder, turned into a real declaration at class creation."""

    settings: Mapping[str, Any]


def option(**settings: Any) -> DeclaredOption:
    """Declare an option inside a class body; the attribute name is the option name."""

    return DeclaredOption(MappingProxyType(dict(settings)))


class Options:
    """Base class giving subclasses declarative construction options."""

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        with _DECLARATION_LOCK:
            bases = tuple(
                base
                for base in cls.__bases__
                if isinstance(base, type) and issubclass(base, Options)
            )
            definitions = _inherit_definitions(cls, bases)
            setattr(cls, DEFINITIONS_ATTR, definitions)
            _LOGGER.debug(
                "option_definitions_inherited",
                owner=cls.__qualname__,
                bases=[base.__qualname__ for base in bases],
                options=list(definitions.names),
            )

            for name, value in list(vars(cls).items()):
                if isinstance(value, DeclaredOption):
                    delattr(cls, name)
                    cls.declare_option(name, **value.settings)

    @classmethod
    def option_definitions(cls) -> OptionDefinitions:
        """Return this class's own registry, creating it on first access."""

        definitions = cls.__dict__.get(DEFINITIONS_ATTR)
        if definitions is None:
            with _DECLARATION_LOCK:
                definitions = cls.__dict__.get(DEFINITIONS_ATTR)
                if definitions is None:
                    definitions = OptionDefinitions()
                    setattr(cls, DEFINITIONS_ATTR, definitions)
        return definitions

    @classmethod
    def declare_option(cls, name: str, **settings: Any) -> Option:
        """Declare option ``name`` on this class.

        Parameters
        ----------
        name:
            Option name; also the reader name when ``reader=True``.
        type:
            Instance-check constraint. Default: ``object``.
        reader:
            Generate a read-only property. Default: ``False``.
        allow:
            Collection of permitted values. Default: anything.
        default:
            Value, or callable taking the instance, used when the option is
            missing. Default: none.
        """

        declared = Option.from_settings(name, settings)
        if declared.reader and (
            declared.name in RESERVED_READER_NAMES
            or declared.name.startswith(READER_FIELD_PREFIX)
        ):
            raise OptionDeclarationError(
                f"option {declared.name!r} cannot define a reader: name is reserved"
            )

        with _DECLARATION_LOCK:
            cls.option_definitions().define(declared)
            own = cls.__dict__.get(DECLARED_ATTR)
            if own is None:
                own = {}
                setattr(cls, DECLARED_ATTR, own)
            own[declared.name] = declared
            if declared.reader:
                setattr(cls, declared.name, _reader_property(declared.name))

        _LOGGER.debug(
            "option_declared",
            owner=cls.__qualname__,
            option=declared.name,
            reader=declared.reader,
            has_default=declared.has_default(),
        )
        return declared

    def __init__(self, options: Mapping[str, Any] | None = None, /, **overrides: Any) -> None:
        if options is not None and not isinstance(options, Mapping):
            raise TypeError(f"options must be a mapping, got {type(options).__name__}")

        resolved: dict[str, Any] = dict(options or {})
        resolved.update(overrides)

        definitions = type(self).option_definitions()
        definitions.set_defaults(self, resolved)
        definitions.validate_options(resolved, owner=self)
        definitions.bind_values(self, resolved)
        setattr(self, OPTIONS_ATTR, MappingProxyType(resolved))

    @property
    def options(self) -> Mapping[str, Any]:
        """Resolved configuration bag, after defaults and validation."""

        return getattr(self, OPTIONS_ATTR)


def _inherit_definitions(
    cls: type[Options], bases: tuple[type[Options], ...]
) -> OptionDefinitions:
    if not bases:
        return OptionDefinitions()
    if len(bases) == 1:
        return bases[0].option_definitions().copy()

    # Only options visible in some base's registry are inherited; among those,
    # the declaration from the class earliest in the MRO wins.
    visible: dict[str, list[Option]] = {}
    for base in bases:
        for candidate in base.option_definitions():
            visible.setdefault(candidate.name, []).append(candidate)

    definitions = OptionDefinitions()
    for name, candidates in visible.items():
        definitions.define(_resolve_inherited(cls, name, candidates))
    return definitions


def _resolve_inherited(cls: type[Options], name: str, candidates: list[Option]) -> Option:
    for klass in cls.__mro__[1:]:
        own = klass.__dict__.get(DECLARED_ATTR)
        if not own or name not in own:
            continue
        if any(candidate is own[name] for candidate in candidates):
            return own[name]
    return candidates[0]


def _reader_property(name: str) -> property:
    field_name = reader_field(name)

    def read(self: Options) -> Any:
        return getattr(self, field_name, None)

    read.__name__ = name
    read.__doc__ = f"Value of the {name!r} option."
    return property(read)


__all__ = ["DeclaredOption", "Options", "option"]
