"""Graph documents: JSON snapshots and replaying them into a graph.

A graph document has the same shape as ``Hypergraph.to_dict()``, plus
optional type registrations:

    {
        "id": "g1", "label": "...", "type": "...", "directed": true,
        "metadata": {...},
        "node_types": {"task": {"isMetadataStrict": true, "metaSchema": {...}}},
        "edge_relations": {"dependsOn": {"metaSchema": {...}}},
        "nodes": {"n1": {"type": "task", "label": "...", "metadata": {...}}},
        "hyperedges": {"e1": {"source": ["n1"], "target": ["n2"], "relation": "..."}}
    }

``nodes`` and ``hyperedges`` may also be lists of records carrying their own
``id``. Loading never bypasses validation: every node and edge is replayed
through ``add_node`` / ``add_edge``.

Security:
    Paths are resolved to absolute paths; paths containing null bytes are
    rejected.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

from hypermeta.engine.core import Hypergraph
from hypermeta.ids import IdFactory

logger = logging.getLogger(__name__)


def _validate_path(path: str | Path) -> Path:
    """Validate and resolve a file path.

    Raises:
        ValueError: If the path contains null bytes
    """
    if "\x00" in str(path):
        raise ValueError(f"Invalid path (contains null bytes): {str(path)!r}")
    return Path(path).resolve()


def _check_record(name: str, record: Any) -> Mapping[str, Any]:
    if not isinstance(record, Mapping):
        raise ValueError(f"{name} record must be a JSON object, got {type(record).__name__}")
    metadata = record.get("metadata")
    if metadata is not None and not isinstance(metadata, Mapping):
        raise ValueError(
            f"{name} record metadata must be a JSON object, got {type(metadata).__name__}"
        )
    return record


def _records(name: str, section: Any) -> Iterator[dict[str, Any]]:
    """Yield node/edge records from a mapping keyed by id or from a list.

    Raises:
        ValueError: If the section or one of its records is malformed
    """
    if not section:
        return
    if isinstance(section, Mapping):
        for key, record in section.items():
            record = _check_record(name, record)
            yield {**record, "id": record.get("id") or key}
    elif isinstance(section, list):
        for record in section:
            yield dict(_check_record(name, record))
    else:
        raise ValueError(
            f"{name} section must be a JSON object or array, got {type(section).__name__}"
        )


def _registrations(name: str, section: Any) -> list[tuple[str, Any]]:
    if not section:
        return []
    if not isinstance(section, Mapping):
        raise ValueError(f"{name} must be a JSON object, got {type(section).__name__}")
    return list(section.items())


def read_document(path: str | Path) -> dict[str, Any]:
    """Read a graph document from a JSON file.

    Raises:
        ValueError: If the path is invalid or the file does not hold a JSON object
        FileNotFoundError: If the file does not exist
    """
    validated_path = _validate_path(path)
    with open(validated_path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Graph document must be a JSON object, got {type(data).__name__}")
    return data


def graph_from_document(
    document: Mapping[str, Any],
    id_factory: IdFactory | None = None,
    graph_class: type[Hypergraph] = Hypergraph,
) -> Hypergraph:
    """Build a graph by registering the document's types and replaying its records.

    Nodes are replayed before hyperedges. Derived fields in edge records
    (``nodes``) are ignored.

    Raises:
        InvalidTypeDescriptorError: If a type registration is invalid
        DuplicateIdError: If the document repeats an id
        UnknownNodeError: If an edge references a node the document lacks
        TypeMismatchError: If a record's metadata does not match its type
        ValueError: If a section or record is not shaped like a graph document
    """
    graph = graph_class(
        id=document.get("id"),
        label=document.get("label", ""),
        type=document.get("type", ""),
        directed=document.get("directed", True),
        metadata=document.get("metadata"),
        id_factory=id_factory,
    )

    for tag, descriptor in _registrations("node_types", document.get("node_types")):
        graph.register_node_type(tag, descriptor)
    for relation, descriptor in _registrations("edge_relations", document.get("edge_relations")):
        graph.register_edge_relation(relation, descriptor)

    for record in _records("Node", document.get("nodes")):
        graph.add_node(
            id=record.get("id"),
            type=record.get("type", ""),
            label=record.get("label", ""),
            metadata=record.get("metadata"),
        )

    for record in _records("Hyperedge", document.get("hyperedges")):
        graph.add_edge(
            id=record.get("id"),
            source=record.get("source"),
            target=record.get("target"),
            relation=record.get("relation", ""),
            metadata=record.get("metadata"),
        )

    logger.debug(
        "Replayed graph %r: %d nodes, %d hyperedges",
        graph.id,
        len(graph.nodes),
        len(graph.hyperedges),
    )
    return graph


def load_graph(path: str | Path, id_factory: IdFactory | None = None) -> Hypergraph:
    """Read a graph document from disk and replay it."""
    return graph_from_document(read_document(path), id_factory=id_factory)


def write_snapshot(graph: Hypergraph, path: str | Path) -> Path:
    """Write ``graph.to_dict()`` as JSON, creating parent directories.

    Returns:
        The resolved output path
    """
    validated_path = _validate_path(path)
    validated_path.parent.mkdir(parents=True, exist_ok=True)
    with open(validated_path, "w", encoding="utf-8") as f:
        json.dump(graph.to_dict(), f, indent=2, ensure_ascii=False)
    return validated_path
