"""Logger helpers for the `nomad_api` package."""

from __future__ import annotations

import logging

ROOT_LOGGER_NAME = "nomad_api"

logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: str | None = None) -> logging.Logger:
    """Returns a logger nested under the `nomad_api` root logger.

    Module names that already start with the package name are used as-is so
    `get_logger(__name__)` yields `nomad_api.<module>`.
    """
    parent = logging.getLogger(ROOT_LOGGER_NAME)

    if not name:
        return parent

    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)

    return parent.getChild(name)
