from hypermeta.engine.core import Hyperedge, Hypergraph, Node
from hypermeta.engine.persistence import (
    graph_from_document,
    load_graph,
    read_document,
    write_snapshot,
)
from hypermeta.engine.registry import DEFAULT_TAG, TypeConfig, TypeRegistry
from hypermeta.engine.schema import describe_type, sanitize_metadata
from hypermeta.ids import as_id_list, default_id_factory

__all__ = [
    "DEFAULT_TAG",
    "Node",
    "Hyperedge",
    "Hypergraph",
    "TypeConfig",
    "TypeRegistry",
    "as_id_list",
    "default_id_factory",
    "describe_type",
    "sanitize_metadata",
    "graph_from_document",
    "load_graph",
    "read_document",
    "write_snapshot",
]
