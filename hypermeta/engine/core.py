"""Core directed-hypergraph store.

A hyperedge joins an ordered list of source nodes to an ordered list of
target nodes. Nodes and edges carry metadata validated by the type registered
for their tag (node ``type`` / edge ``relation``); unregistered tags use the
default, schema-less type.

Referential integrity:
    Edges are checked against the node map when they are added. Removing a
    node removes every edge that contains it, so edges never reference
    missing nodes.

Thread Safety:
    None. The store is single-threaded; callers sharing a graph between
    threads must hold their own lock around every call.

Example:
    graph = Hypergraph(label="My Family")
    dad = graph.add_node(id="dad")
    graph.add_node(id="sis")
    graph.add_node(id="me")
    graph.add_edge(source=dad, target=["sis", "me"], relation="children")
    graph.get_neighbors("dad")  # ["sis", "me"]
"""

from __future__ import annotations

import json
import logging
from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, ClassVar

from hypermeta.bound import BoundEdge, BoundNode
from hypermeta.engine.registry import TypeConfig, TypeRegistry
from hypermeta.exceptions import (
    DuplicateIdError,
    InvalidTypeDescriptorError,
    UnknownEntityError,
    UnknownNodeError,
)
from hypermeta.ids import IdFactory, as_id_list, default_id_factory
from hypermeta.models import EntityKind, GraphType, HypergraphStats

logger = logging.getLogger(__name__)


@dataclass
class Node:
    """A stored node record.

    Attributes:
        id: Unique identifier within the graph
        type: Node type tag ("" = default type)
        label: Display label
        metadata: Metadata as sanitized by the node type

    Raises:
        TypeError: If id or type is not a string
    """

    id: str
    type: str = ""
    label: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.id, str):
            raise TypeError(f"Node id must be a string, got: {type(self.id).__name__}")
        if not isinstance(self.type, str):
            raise TypeError(f"Node type must be a string, got: {type(self.type).__name__}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "label": self.label,
            "metadata": dict(self.metadata),
        }


@dataclass
class Hyperedge:
    """A stored hyperedge record.

    Source and target keep caller order and repeated ids; a node may appear
    on both sides (self loop).

    Attributes:
        id: Unique identifier within the graph
        relation: Edge relation tag ("" = default relation)
        source: Ordered source node ids
        target: Ordered target node ids
        metadata: Metadata as sanitized by the edge relation

    Raises:
        TypeError: If id or relation is not a string
    """

    id: str
    relation: str = ""
    source: list[str] = field(default_factory=list)
    target: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.id, str):
            raise TypeError(f"Hyperedge id must be a string, got: {type(self.id).__name__}")
        if not isinstance(self.relation, str):
            raise TypeError(
                f"Hyperedge relation must be a string, got: {type(self.relation).__name__}"
            )

    @property
    def nodes(self) -> list[str]:
        """All participating node ids: sources followed by targets."""
        return self.source + self.target

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "relation": self.relation,
            "source": list(self.source),
            "target": list(self.target),
            "nodes": self.nodes,
            "metadata": dict(self.metadata),
        }


class Hypergraph:
    """Directed hypergraph with typed, schema-validated metadata.

    Design principles:
    - Nodes and edges are stored by id in insertion order
    - Metadata handling is dispatched by tag through per-graph registries
    - Referential integrity is enforced eagerly on edge creation
    - Ids come from an injectable factory

    Subclasses may set ``type_descriptor`` to a ``GraphType`` to constrain the
    graph's own metadata, and may override ``generate_id``.
    """

    entity_kind: ClassVar[EntityKind] = EntityKind.GRAPH
    type_descriptor: ClassVar[GraphType] = GraphType()

    def __init__(
        self,
        id: str | None = None,
        label: str = "",
        type: str = "",
        directed: bool = True,
        metadata: dict[str, Any] | None = None,
        *,
        id_factory: IdFactory | None = None,
        node_types: TypeRegistry | None = None,
        edge_relations: TypeRegistry | None = None,
    ) -> None:
        self._id_factory = id_factory or default_id_factory
        self.id = id or self.generate_id()
        self.label = label
        self.type = type
        self.directed = directed

        self._nodes: dict[str, Node] = {}
        self._edges: dict[str, Hyperedge] = {}

        self.node_types = self._own_registry(node_types, EntityKind.NODE, BoundNode)
        self.edge_relations = self._own_registry(edge_relations, EntityKind.EDGE, BoundEdge)

        self.config = TypeConfig.from_descriptor(EntityKind.GRAPH, self.__class__)
        self.metadata = self.config.sanitize(metadata)

    @staticmethod
    def _own_registry(
        registry: TypeRegistry | None,
        kind: EntityKind,
        default: type,
    ) -> TypeRegistry:
        if registry is None:
            return TypeRegistry(kind, default=default)
        if registry.kind != kind:
            raise InvalidTypeDescriptorError(
                f"Expected a {kind.value} registry, got a {registry.kind.value} registry"
            )
        return registry

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}({self.id!r}, label={self.label!r}, "
            f"nodes={len(self._nodes)}, hyperedges={len(self._edges)})"
        )

    def generate_id(self) -> str:
        """Return a new id from the configured id factory."""
        return self._id_factory()

    # ========== Type Registration ==========

    def register_node_type(self, type: str, descriptor: Any) -> TypeConfig:
        """Register a node type under ``type``, replacing any previous one.

        Args:
            type: Node type tag
            descriptor: NodeType, mapping, or BoundNode subclass

        Raises:
            InvalidTypeDescriptorError: If descriptor is not a node type
        """
        return self.node_types.register(type, descriptor)

    def register_edge_relation(self, relation: str, descriptor: Any) -> TypeConfig:
        """Register an edge relation under ``relation``, replacing any previous one.

        Args:
            relation: Edge relation tag
            descriptor: EdgeRelation, mapping, or BoundEdge subclass

        Raises:
            InvalidTypeDescriptorError: If descriptor is not an edge relation
        """
        return self.edge_relations.register(relation, descriptor)

    def node_config(self, type: str) -> TypeConfig:
        """Config for a node type tag (default config if unregistered)."""
        return self.node_types.resolve(type)

    def edge_config(self, relation: str) -> TypeConfig:
        """Config for an edge relation tag (default config if unregistered)."""
        return self.edge_relations.resolve(relation)

    # ========== Node Operations ==========

    @property
    def nodes(self) -> Mapping[str, Node]:
        """Read-only view of stored nodes by id."""
        return MappingProxyType(self._nodes)

    def add_node(
        self,
        id: str | None = None,
        type: str = "",
        label: str = "",
        metadata: dict[str, Any] | None = None,
        **fields: Any,
    ) -> str:
        """Add a node and return its id.

        Extra keyword arguments are metadata shortcuts: they are merged into
        ``metadata``, and keys given in ``metadata`` win.

        Raises:
            DuplicateIdError: If a node with this id exists
            TypeMismatchError: If metadata does not match the node type's schema
        """
        node_id = id or self.generate_id()
        if node_id in self._nodes:
            raise DuplicateIdError(f"Node with id '{node_id}' already exists.")

        if fields:
            metadata = {**fields, **(metadata or {})}
        type = type or ""
        clean = self.node_config(type).sanitize(metadata, type_check_only=True)

        self._nodes[node_id] = Node(id=node_id, type=type, label=label, metadata=clean)
        return node_id

    def create_node(self, type: str = "", **kwargs: Any) -> BoundNode:
        """Create a bound node of the class registered for ``type`` and store it.

        Raises:
            DuplicateIdError: If a node with the resulting id exists
            TypeMismatchError: If metadata does not match the node type's schema
        """
        node_class = self.node_types.bound_class(type) or BoundNode
        bound = node_class(self, type=type, **kwargs)
        if bound.id in self._nodes:
            raise DuplicateIdError(f"Node with id '{bound.id}' already exists.")
        self._nodes[bound.id] = Node(
            id=bound.id, type=bound.type, label=bound.label, metadata=bound.metadata
        )
        return bound

    def get_node(self, node_id: str) -> Node | None:
        """Get a node by id, or None if not found."""
        return self._nodes.get(node_id)

    def get_nodes(self) -> list[Node]:
        """All nodes in insertion order."""
        return list(self._nodes.values())

    def has_node(self, node_id: str) -> bool:
        return node_id in self._nodes

    def update_node_metadata(
        self,
        node_id: str,
        new_metadata: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Merge ``new_metadata`` into a node's metadata and re-validate it.

        Returns:
            The node's new metadata

        Raises:
            UnknownEntityError: If the node does not exist
            TypeMismatchError: If the merged metadata does not match the schema;
                the stored metadata is left unchanged
        """
        node = self._nodes.get(node_id)
        if node is None:
            raise UnknownEntityError(f"Node '{node_id}' not found.")
        merged = {**node.metadata, **(new_metadata or {})}
        node.metadata = self.node_config(node.type).sanitize(merged, type_check_only=True)
        return node.metadata

    def remove_node(self, node_id: str) -> bool:
        """Remove a node and every hyperedge that contains it.

        Returns:
            True if the node was removed, False if not found
        """
        if node_id not in self._nodes:
            return False
        del self._nodes[node_id]

        incident = [eid for eid, edge in self._edges.items() if node_id in edge.nodes]
        for edge_id in incident:
            del self._edges[edge_id]

        logger.debug("Removed node %r with %d incident edges", node_id, len(incident))
        return True

    # ========== Edge Operations ==========

    @property
    def hyperedges(self) -> Mapping[str, Hyperedge]:
        """Read-only view of stored hyperedges by id."""
        return MappingProxyType(self._edges)

    def _require_nodes(self, node_ids: list[str]) -> None:
        for node_id in node_ids:
            if node_id not in self._nodes:
                raise UnknownNodeError(f"Node '{node_id}' not found in graph.")

    def add_edge(
        self,
        id: str | None = None,
        source: str | list[str] | None = None,
        target: str | list[str] | None = None,
        relation: str = "",
        metadata: dict[str, Any] | None = None,
    ) -> str:
        """Add a hyperedge and return its id.

        Args:
            id: Edge id (generated if omitted)
            source: A node id or ordered sequence of node ids
            target: A node id or ordered sequence of node ids
            relation: Edge relation tag
            metadata: Metadata validated by the relation's schema

        Raises:
            DuplicateIdError: If an edge with this id exists
            UnknownNodeError: If any source or target id is not a node
            TypeMismatchError: If metadata does not match the relation's schema
        """
        edge_id = id or self.generate_id()
        if edge_id in self._edges:
            raise DuplicateIdError(f"Edge with id '{edge_id}' already exists.")

        sources = as_id_list(source)
        targets = as_id_list(target)
        self._require_nodes(sources + targets)

        relation = relation or ""
        clean = self.edge_config(relation).sanitize(metadata, type_check_only=True)

        self._edges[edge_id] = Hyperedge(
            id=edge_id,
            relation=relation,
            source=sources,
            target=targets,
            metadata=clean,
        )
        return edge_id

    def create_edge(self, relation: str = "", **kwargs: Any) -> BoundEdge:
        """Create a bound edge of the class registered for ``relation`` and store it.

        Raises:
            DuplicateIdError: If an edge with the resulting id exists
            UnknownNodeError: If any source or target id is not a node
            TypeMismatchError: If metadata does not match the relation's schema
        """
        edge_class = self.edge_relations.bound_class(relation) or BoundEdge
        bound = edge_class(self, relation=relation, **kwargs)
        if bound.id in self._edges:
            raise DuplicateIdError(f"Edge with id '{bound.id}' already exists.")
        self._require_nodes(bound.nodes)
        self._edges[bound.id] = Hyperedge(
            id=bound.id,
            relation=bound.relation,
            source=list(bound.source),
            target=list(bound.target),
            metadata=bound.metadata,
        )
        return bound

    def get_edge(self, edge_id: str) -> Hyperedge | None:
        """Get a hyperedge by id, or None if not found."""
        return self._edges.get(edge_id)

    def get_edges(self) -> list[Hyperedge]:
        """All hyperedges in insertion order."""
        return list(self._edges.values())

    def has_edge(self, edge_id: str) -> bool:
        return edge_id in self._edges

    def _require_edge(self, edge_id: str) -> Hyperedge:
        edge = self._edges.get(edge_id)
        if edge is None:
            raise UnknownEntityError(f"Edge '{edge_id}' not found.")
        return edge

    def get_sources(self, edge_id: str) -> list[str]:
        """Source node ids of a hyperedge.

        Raises:
            UnknownEntityError: If the edge does not exist
        """
        return list(self._require_edge(edge_id).source)

    def get_targets(self, edge_id: str) -> list[str]:
        """Target node ids of a hyperedge.

        Raises:
            UnknownEntityError: If the edge does not exist
        """
        return list(self._require_edge(edge_id).target)

    def update_edge_metadata(
        self,
        edge_id: str,
        new_metadata: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Merge ``new_metadata`` into an edge's metadata and re-validate it.

        Raises:
            UnknownEntityError: If the edge does not exist
            TypeMismatchError: If the merged metadata does not match the schema
        """
        edge = self._require_edge(edge_id)
        merged = {**edge.metadata, **(new_metadata or {})}
        edge.metadata = self.edge_config(edge.relation).sanitize(merged, type_check_only=True)
        return edge.metadata

    def remove_edge(self, edge_id: str) -> bool:
        """Remove a hyperedge. Nodes are never touched.

        Returns:
            True if removed, False if not found
        """
        return self._edges.pop(edge_id, None) is not None

    # ========== Incidence Queries ==========

    def _require_node(self, node_id: str) -> None:
        if node_id not in self._nodes:
            raise UnknownNodeError(f"Node '{node_id}' not found.")

    def get_incoming_edges(self, node_id: str) -> list[Hyperedge]:
        """Hyperedges with ``node_id`` among their targets.

        Raises:
            UnknownNodeError: If the node does not exist
        """
        self._require_node(node_id)
        return [edge for edge in self._edges.values() if node_id in edge.target]

    def get_outgoing_edges(self, node_id: str) -> list[Hyperedge]:
        """Hyperedges with ``node_id`` among their sources.

        Raises:
            UnknownNodeError: If the node does not exist
        """
        self._require_node(node_id)
        return [edge for edge in self._edges.values() if node_id in edge.source]

    def get_incident_edges(self, node_id: str) -> list[Hyperedge]:
        """Hyperedges containing ``node_id`` on either side.

        Raises:
            UnknownNodeError: If the node does not exist
        """
        self._require_node(node_id)
        return [edge for edge in self._edges.values() if node_id in edge.nodes]

    def get_neighbors(self, node_id: str) -> list[str]:
        """Nodes one hyperedge away from ``node_id``.

        For edges where the node is a source, the edge's targets are
        neighbors; where it is a target, the edge's sources are. The node
        itself is never included, even through a self loop.

        Returns:
            De-duplicated node ids in first-seen order

        Raises:
            UnknownNodeError: If the node does not exist
        """
        self._require_node(node_id)
        neighbors: dict[str, None] = {}

        for edge in self._edges.values():
            if node_id in edge.source:
                neighbors.update(dict.fromkeys(edge.target))
            if node_id in edge.target:
                neighbors.update(dict.fromkeys(edge.source))

        neighbors.pop(node_id, None)
        return list(neighbors)

    # ========== Statistics ==========

    def stats(self) -> HypergraphStats:
        """Node and edge counts, broken down by type and relation."""
        return HypergraphStats(
            node_count=len(self._nodes),
            edge_count=len(self._edges),
            nodes_by_type=dict(Counter(node.type for node in self._nodes.values())),
            edges_by_relation=dict(Counter(edge.relation for edge in self._edges.values())),
        )

    # ========== Serialization ==========

    def to_dict(self) -> dict[str, Any]:
        """Export a JSON-compatible snapshot.

        Only the graph's own metadata is re-sanitized; node and edge records
        are emitted as stored. ``nodes`` and ``hyperedges`` are keyed by id in
        insertion order.
        """
        return {
            "id": self.id,
            "label": self.label,
            "type": self.type,
            "directed": self.directed,
            "metadata": self.config.sanitize(self.metadata),
            "nodes": {node_id: node.to_dict() for node_id, node in self._nodes.items()},
            "hyperedges": {edge_id: edge.to_dict() for edge_id, edge in self._edges.items()},
        }

    def to_json(self, **kwargs: Any) -> str:
        """Snapshot encoded with ``json.dumps``; keyword arguments are passed through."""
        return json.dumps(self.to_dict(), **kwargs)
