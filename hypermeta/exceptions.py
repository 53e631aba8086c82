"""Exceptions raised by hypermeta."""

from __future__ import annotations


class HypermetaError(Exception):
    """Base exception for hypergraph operations."""


class DuplicateIdError(HypermetaError, ValueError):
    """Raised when a node or edge id is already taken."""


class UnknownNodeError(HypermetaError, LookupError):
    """Raised when an operation references a node that is not in the graph."""


class UnknownEntityError(HypermetaError, LookupError):
    """Raised when a node or edge expected to exist cannot be found."""


class TypeMismatchError(HypermetaError, TypeError):
    """Raised when a metadata value does not match its schema type.

    Attributes:
        field: Metadata key that failed validation
        expected: Schema type name
        actual: Type name of the supplied value
    """

    def __init__(self, field: str, expected: str, actual: str, type_name: str = "") -> None:
        self.field = field
        self.expected = expected
        self.actual = actual
        where = f" in {type_name}" if type_name else ""
        super().__init__(f'Invalid type for "{field}"{where}: expected {expected}, got {actual}')


class InvalidTypeDescriptorError(HypermetaError, TypeError):
    """Raised when a type registration is not a descriptor of the expected kind."""


class InvalidGraphReferenceError(HypermetaError, TypeError):
    """Raised when a bound node or edge is given something that is not a graph."""
