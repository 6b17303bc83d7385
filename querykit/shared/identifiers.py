"""Allow-list coercion of externally supplied keys."""

from __future__ import annotations

import logging
from collections.abc import Collection
from typing import Any

from querykit.core.enums import ParamKey
from querykit.shared.exceptions import UnknownIdentifier

logger = logging.getLogger(__name__)


def to_param_key(key: str | ParamKey, fields: Collection[str] = ()) -> ParamKey | str:
    """Convert string to a param key, keep param keys.

    Names in `fields` are recognized too and come back as plain strings, so
    callers can drop them.
    """
    if isinstance(key, ParamKey):
        return key
    if isinstance(key, str):
        try:
            return ParamKey(key)
        except ValueError:
            if key in fields:
                return key
    logger.info("Rejected unknown param key %r", key)
    raise UnknownIdentifier(key, allowed=[*(member.value for member in ParamKey), *fields])


def to_field(name: Any, fields: Collection[str]) -> str:
    """Return `name` if it is one of the known `fields`."""
    if isinstance(name, str) and name in fields:
        return name
    logger.info("Rejected unknown field %r", name)
    raise UnknownIdentifier(name, allowed=fields)


def to_int(value: Any) -> Any:
    """Convert numeric strings to integers, keep everything else.

    Raises `ValueError` for strings that do not parse as integers.
    """
    if isinstance(value, str):
        return int(value.strip())
    return value
