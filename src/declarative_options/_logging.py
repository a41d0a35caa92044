"""structlog loggers routed through the stdlib logging tree.

Events stay silent unless the host application enables the
``declarative_options`` logger, e.g. ``logging.getLogger("declarative_options").setLevel("DEBUG")``.
"""

from __future__ import annotations

import logging
from typing import Any

import structlog

_PROCESSORS = (
    structlog.stdlib.filter_by_level,
    structlog.processors.KeyValueRenderer(key_order=["event"], sort_keys=True),
)


def get_logger(name: str) -> Any:
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=list(_PROCESSORS),
        wrapper_class=structlog.stdlib.BoundLogger,
    )


__all__ = ["get_logger"]
