"""Hypermeta — a directed hypergraph library with schema-validated metadata."""

__version__ = "0.1.0"

from hypermeta.bound import BoundEdge, BoundNode
from hypermeta.engine.core import Hyperedge, Hypergraph, Node
from hypermeta.engine.registry import TypeConfig, TypeRegistry
from hypermeta.exceptions import (
    DuplicateIdError,
    HypermetaError,
    InvalidGraphReferenceError,
    InvalidTypeDescriptorError,
    TypeMismatchError,
    UnknownEntityError,
    UnknownNodeError,
)
from hypermeta.models import (
    EdgeRelation,
    EntityKind,
    FieldSpec,
    GraphType,
    HypergraphStats,
    NodeType,
    TypeDescriptor,
)

__all__ = [
    "BoundEdge",
    "BoundNode",
    "DuplicateIdError",
    "EdgeRelation",
    "EntityKind",
    "FieldSpec",
    "GraphType",
    "Hyperedge",
    "Hypergraph",
    "HypergraphStats",
    "HypermetaError",
    "InvalidGraphReferenceError",
    "InvalidTypeDescriptorError",
    "Node",
    "NodeType",
    "TypeConfig",
    "TypeDescriptor",
    "TypeMismatchError",
    "TypeRegistry",
    "UnknownEntityError",
    "UnknownNodeError",
    "__version__",
]
