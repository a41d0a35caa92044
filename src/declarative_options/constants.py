"""Stable names shared across the option declaration modules."""

from __future__ import annotations

from typing import Final

# Settings accepted by an option declaration.
SETTING_TYPE: Final[str] = "type"
SETTING_READER: Final[str] = "reader"
SETTING_ALLOW: Final[str] = "allow"
SETTING_DEFAULT: Final[str] = "default"

SETTING_KEYS: Final[tuple[str, ...]] = (
    SETTING_TYPE,
    SETTING_READER,
    SETTING_ALLOW,
    SETTING_DEFAULT,
)

# Class attribute holding the per-class registry.
DEFINITIONS_ATTR: Final[str] = "_option_definitions"

# Class attribute holding the options a class declared itself, by name.
DECLARED_ATTR: Final[str] = "_declared_options"

# Instance attribute holding the frozen configuration bag.
OPTIONS_ATTR: Final[str] = "_options"

# Reader values are stored on the instance under ``_<name>``.
READER_FIELD_PREFIX: Final[str] = "_"

# Readers may not shadow the capability's own surface. Names starting with
# READER_FIELD_PREFIX are rejected as well: they collide with backing fields.
RESERVED_READER_NAMES: Final[frozenset[str]] = frozenset(
    {
        "options",
        "declare_option",
        "option_definitions",
    }
)

__all__ = [
    "DECLARED_ATTR",
    "DEFINITIONS_ATTR",
    "OPTIONS_ATTR",
    "READER_FIELD_PREFIX",
    "RESERVED_READER_NAMES",
    "SETTING_ALLOW",
    "SETTING_DEFAULT",
    "SETTING_KEYS",
    "SETTING_READER",
    "SETTING_TYPE",
]
