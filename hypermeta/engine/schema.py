"""Metadata sanitization against a type schema.

A schema maps metadata keys to a ``FieldSpec`` (type name + default). The
sanitizer fills defaults for missing keys, type-checks present keys and
decides whether keys the schema does not declare are kept.

Type names:
    - "string": str
    - "number": int or float (bool is not a number)
    - "boolean": bool
    - "array": list or tuple
    - "object": dict
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Mapping
from typing import Any

from hypermeta.exceptions import TypeMismatchError
from hypermeta.models import FieldSpec

_TYPE_CHECKS: dict[str, Callable[[Any], bool]] = {
    "string": lambda v: isinstance(v, str),
    "number": lambda v: isinstance(v, (int, float)) and not isinstance(v, bool),
    "boolean": lambda v: isinstance(v, bool),
    "array": lambda v: isinstance(v, (list, tuple)),
    "object": lambda v: isinstance(v, dict),
}


def describe_type(value: Any) -> str:
    """Name the schema type of a runtime value, for error messages."""
    if value is None:
        return "null"
    for name, check in _TYPE_CHECKS.items():
        if check(value):
            return name
    return type(value).__name__


def sanitize_metadata(
    schema: Mapping[str, FieldSpec],
    strict: bool,
    raw: Mapping[str, Any] | None = None,
    type_check_only: bool = False,
    type_name: str = "",
) -> dict[str, Any]:
    """Validate and normalize one metadata record.

    Args:
        schema: Field name -> FieldSpec, in declaration order
        strict: Whether the schema drops keys it does not declare
        raw: Caller-supplied metadata (None is treated as empty)
        type_check_only: When True, a strict schema drops undeclared keys.
            When False, undeclared keys are kept even for strict schemas.
        type_name: Type name used in error messages

    Returns:
        A new dict; ``raw`` is not modified.

    Raises:
        TypeMismatchError: If a declared key is present with the wrong type
    """
    raw = raw or {}
    result: dict[str, Any] = {}

    for key, spec in schema.items():
        if key in raw:
            value = raw[key]
            if not _TYPE_CHECKS[spec.type](value):
                raise TypeMismatchError(key, spec.type, describe_type(value), type_name)
            result[key] = value
        else:
            result[key] = copy.deepcopy(spec.default)

    # strict only drops extras on the write path
    if not strict or not type_check_only:
        for key, value in raw.items():
            if key not in schema:
                result[key] = value

    return result
