"""
declarative-options — declare, validate and populate named construction options.

Classes adopt :class:`Options`, declare their options once (in the class body
with :func:`option` or afterwards with ``declare_option``) and accept a single
configuration bag in their constructor. Declarations are inherited by
subclasses as independent copies.

Importing the package has no side effects: no logging configuration, no
global state beyond the declaration lock.
"""

from declarative_options.definitions import OptionDefinitions
from declarative_options.errors import (
    InvalidOptionValueError,
    InvalidValueReason,
    OptionDeclarationError,
    OptionsError,
    UnknownOptionError,
)
from declarative_options.mixin import DeclaredOption, Options, option
from declarative_options.option import (
    NO_DEFAULT,
    ComputedDefault,
    LiteralDefault,
    Option,
)

__version__ = "0.1.0"

__all__ = [
    "NO_DEFAULT",
    "ComputedDefault",
    "DeclaredOption",
    "InvalidOptionValueError",
    "InvalidValueReason",
    "LiteralDefault",
    "Option",
    "OptionDeclarationError",
    "OptionDefinitions",
    "Options",
    "OptionsError",
    "UnknownOptionError",
    "__version__",
    "option",
]
