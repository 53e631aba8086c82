"""Pydantic models for type registration and graph statistics.

Type descriptors are the declarative half of the type system: they describe
a node type, an edge relation or a graph type (schema, strictness, version).
The engine turns them into immutable ``TypeConfig`` objects (engine.registry).
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

SchemaType = Literal["string", "number", "boolean", "array", "object"]

DEFAULT_VERSION = "1.0"


class EntityKind(str, Enum):
    """The class of entity a type descriptor configures."""

    GRAPH = "graph"
    NODE = "node"
    EDGE = "edge"


class FieldSpec(BaseModel):
    """One metadata field of a schema: its type name and default value."""

    model_config = ConfigDict(frozen=True)

    type: SchemaType
    default: Any = None


class TypeDescriptor(BaseModel):
    """Declarative description of a node type, edge relation or graph type.

    Field names accept both snake_case and the camelCase spelling used in
    JSON documents (``isMetadataStrict``, ``metaSchema``). Unknown keys are
    ignored, so descriptive extras such as relationship constraints can ride
    along without affecting validation.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: EntityKind
    version: str = DEFAULT_VERSION
    is_metadata_strict: bool = Field(default=False, alias="isMetadataStrict")
    meta_schema: dict[str, FieldSpec] = Field(default_factory=dict, alias="metaSchema")
    name: str = ""

    @field_validator("version")
    @classmethod
    def _blank_version_is_default(cls, value: str) -> str:
        return value or DEFAULT_VERSION


class GraphType(TypeDescriptor):
    kind: EntityKind = EntityKind.GRAPH


class NodeType(TypeDescriptor):
    kind: EntityKind = EntityKind.NODE


class EdgeRelation(TypeDescriptor):
    kind: EntityKind = EntityKind.EDGE


DESCRIPTOR_MODELS: dict[EntityKind, type[TypeDescriptor]] = {
    EntityKind.GRAPH: GraphType,
    EntityKind.NODE: NodeType,
    EntityKind.EDGE: EdgeRelation,
}


class HypergraphStats(BaseModel):
    """Summary counts for a hypergraph.

    Reports total node and edge counts, broken down by node type and edge
    relation tag.
    """

    node_count: int
    edge_count: int
    nodes_by_type: dict[str, int]
    edges_by_relation: dict[str, int]
