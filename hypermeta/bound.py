"""Bound node and edge objects.

The id-based ``Hypergraph.add_node`` / ``add_edge`` API stores plain records
and returns ids. Bound objects are the object-style alternative: each one
keeps an association to the graph it was created for, sanitizes its metadata
through that graph's registered type, and re-sanitizes when serialized.

Subclasses double as type registrations:

    class LocationNode(BoundNode):
        type_descriptor = NodeType(
            is_metadata_strict=True,
            meta_schema={"region": {"type": "string", "default": ""}},
        )

    graph.register_node_type("location", LocationNode)
    home = graph.create_node("location", label="Home", metadata={"region": "EU"})
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from hypermeta.exceptions import InvalidGraphReferenceError
from hypermeta.ids import as_id_list
from hypermeta.models import EdgeRelation, EntityKind, NodeType

if TYPE_CHECKING:
    from hypermeta.engine.core import Hypergraph
    from hypermeta.engine.registry import TypeConfig


def _require_graph(graph: Any) -> None:
    if isinstance(graph, type) or getattr(graph, "entity_kind", None) != EntityKind.GRAPH:
        raise InvalidGraphReferenceError(
            f"Invalid graph: expected a Hypergraph instance, got {type(graph).__name__}"
        )


class BoundNode:
    """A node object associated with a graph.

    Attributes:
        graph: The graph whose node types validate this node
        id: Node id (generated by the graph when not given)
        type: Node type tag ("" for the default type)
        label: Display label
        metadata: Metadata sanitized through the type's config

    Raises:
        InvalidGraphReferenceError: If graph is not a Hypergraph instance
        TypeMismatchError: If metadata does not match the type's schema
    """

    entity_kind: ClassVar[EntityKind] = EntityKind.NODE
    type_descriptor: ClassVar[NodeType] = NodeType()

    def __init__(
        self,
        graph: Hypergraph,
        *,
        id: str | None = None,
        type: str = "",
        label: str = "",
        metadata: dict[str, Any] | None = None,
    ) -> None:
        _require_graph(graph)
        self.graph = graph
        self.id = id or graph.generate_id()
        self.type = type or ""
        self.label = label
        self.metadata = graph.node_config(self.type).sanitize(metadata, type_check_only=True)

    @property
    def config(self) -> TypeConfig:
        return self.graph.node_config(self.type)

    def to_dict(self) -> dict[str, Any]:
        """Serialize without the graph reference."""
        return {
            "id": self.id,
            "type": self.type,
            "label": self.label,
            "metadata": self.config.sanitize(self.metadata),
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.id!r}, type={self.type!r})"


class BoundEdge:
    """A hyperedge object associated with a graph.

    ``source`` and ``target`` accept a single id or a sequence of ids.
    Referential integrity is checked when the edge is stored through
    ``Hypergraph.create_edge``, not by the constructor.
    """

    entity_kind: ClassVar[EntityKind] = EntityKind.EDGE
    type_descriptor: ClassVar[EdgeRelation] = EdgeRelation()

    def __init__(
        self,
        graph: Hypergraph,
        *,
        id: str | None = None,
        source: str | list[str] | None = None,
        target: str | list[str] | None = None,
        relation: str = "",
        metadata: dict[str, Any] | None = None,
    ) -> None:
        _require_graph(graph)
        self.graph = graph
        self.id = id or graph.generate_id()
        self.source = as_id_list(source)
        self.target = as_id_list(target)
        self.relation = relation or ""
        self.metadata = graph.edge_config(self.relation).sanitize(metadata, type_check_only=True)

    @property
    def nodes(self) -> list[str]:
        return self.source + self.target

    @property
    def config(self) -> TypeConfig:
        return self.graph.edge_config(self.relation)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "relation": self.relation,
            "source": list(self.source),
            "target": list(self.target),
            "metadata": self.config.sanitize(self.metadata),
        }

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.id!r}, relation={self.relation!r}: "
            f"{self.source} -> {self.target})"
        )
