"""Id generation and id-list normalization shared by the store and bound objects."""

from __future__ import annotations

import uuid
from collections.abc import Callable, Iterable
from typing import Any

IdFactory = Callable[[], str]


def default_id_factory() -> str:
    """Random UUID4 string."""
    return str(uuid.uuid4())


def as_id_list(value: Any) -> list[str]:
    """Normalize an edge endpoint argument to a list of node ids.

    A single id becomes a one-element list; sequences keep their order and
    repeated ids.
    """
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Iterable):
        return list(value)
    return [value]
