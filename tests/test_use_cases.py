"""Real-world use case integration tests.

Each test class builds a small domain graph through the public hypermeta API
and checks the queries a user of that domain would run.
"""

import pytest

from hypermeta import (
    BoundEdge,
    BoundNode,
    EdgeRelation,
    Hypergraph,
    NodeType,
    TypeMismatchError,
    UnknownNodeError,
)
from hypermeta.engine import graph_from_document

# ---------------------------------------------------------------------------
# Family lineage
# ---------------------------------------------------------------------------


class TestFamilyLineage:
    @pytest.fixture()
    def family(self):
        g = Hypergraph(type="lineage", label="My Family")
        g.add_node(id="dad", label="Dad", metadata={"dob": "1987-06-05T10:09"})
        g.add_node(id="mom", label="Mom", metadata={"dob": "1988-07-05T05:04"})
        g.add_node(id="sis", label="Sister")
        g.add_node(id="me", label="Me")
        g.add_edge(id="dad_children", source="dad", target=["sis", "me"], relation="children")
        g.add_edge(id="mom_children", source="mom", target=["sis", "me"], relation="children")
        return g

    def test_parents_are_neighbors(self, family):
        assert family.get_neighbors("me") == ["dad", "mom"]

    def test_siblings_are_not_neighbors(self, family):
        assert "sis" not in family.get_neighbors("me")

    def test_children_of_each_parent(self, family):
        for parent in ("dad", "mom"):
            (edge,) = family.get_outgoing_edges(parent)
            assert edge.target == ["sis", "me"]

    def test_incoming_edges_name_both_parents(self, family):
        sources = [e.source[0] for e in family.get_incoming_edges("sis")]
        assert sources == ["dad", "mom"]

    def test_removing_a_parent_drops_their_edge(self, family):
        family.remove_node("dad")
        assert family.get_neighbors("me") == ["mom"]
        assert family.stats().edge_count == 1

    def test_metadata_kept_without_schema(self, family):
        assert family.get_node("dad").metadata == {"dob": "1987-06-05T10:09"}


# ---------------------------------------------------------------------------
# Project management
# ---------------------------------------------------------------------------


class Project(BoundNode):
    type_descriptor = NodeType(
        version="1.0",
        is_metadata_strict=True,
        meta_schema={
            "owner": {"type": "string", "default": ""},
            "deadline": {"type": "string", "default": ""},
        },
    )


class Task(BoundNode):
    type_descriptor = NodeType(
        is_metadata_strict=True,
        meta_schema={
            "status": {"type": "string", "default": "todo"},
            "estimate": {"type": "number", "default": 1},
            "tags": {"type": "array", "default": []},
        },
    )


class DependsOn(BoundEdge):
    type_descriptor = EdgeRelation(
        meta_schema={"critical": {"type": "boolean", "default": False}},
    )


class TestProjectManagement:
    @pytest.fixture()
    def board(self):
        g = Hypergraph(type="project-management", label="Launch")
        g.register_node_type("project", Project)
        g.register_node_type("task", Task)
        g.register_edge_relation("dependsOn", DependsOn)
        g.register_edge_relation("owns", EdgeRelation(is_metadata_strict=True))

        g.create_node("project", id="launch", metadata={"owner": "ana"})
        g.create_node("task", id="design", metadata={"estimate": 3})
        g.create_node("task", id="build", metadata={"estimate": 5, "tags": ["backend"]})
        g.create_node("task", id="ship")

        g.create_edge("owns", id="o1", source="launch", target=["design", "build", "ship"])
        g.create_edge("dependsOn", id="d1", source="build", target="design")
        g.create_edge(
            "dependsOn", id="d2", source="ship", target=["build", "design"],
            metadata={"critical": True},
        )
        return g

    def test_task_defaults(self, board):
        assert board.get_node("ship").metadata == {"status": "todo", "estimate": 1, "tags": []}

    def test_blockers_of_ship(self, board):
        blockers = [
            t for e in board.get_outgoing_edges("ship") if e.relation == "dependsOn"
            for t in e.target
        ]
        assert blockers == ["build", "design"]

    def test_critical_dependencies(self, board):
        critical = [e.id for e in board.get_edges() if e.metadata.get("critical")]
        assert critical == ["d2"]

    def test_strict_relation_drops_metadata(self, board):
        board.add_node(id="polish", type="task")
        edge_id = board.add_edge(
            source="launch", target="polish", relation="owns", metadata={"note": "later"}
        )
        assert board.get_edge(edge_id).metadata == {}

    def test_total_estimate(self, board):
        total = sum(n.metadata["estimate"] for n in board.get_nodes() if n.type == "task")
        assert total == 9

    def test_status_update(self, board):
        board.update_node_metadata("design", {"status": "done"})
        assert board.get_node("design").metadata["status"] == "done"
        assert board.get_node("design").metadata["estimate"] == 3

    def test_bad_estimate_rejected(self, board):
        with pytest.raises(TypeMismatchError):
            board.update_node_metadata("build", {"estimate": "large"})

    def test_dependency_on_missing_task(self, board):
        with pytest.raises(UnknownNodeError):
            board.create_edge("dependsOn", source="ship", target="qa")

    def test_deleting_task_drops_dependencies(self, board):
        board.remove_node("design")
        assert len(board.hyperedges) == 0
        assert board.get_outgoing_edges("ship") == []

    def test_deleting_project_keeps_dependencies(self, board):
        board.remove_node("launch")
        assert list(board.hyperedges) == ["d1", "d2"]

    def test_stats(self, board):
        s = board.stats()
        assert s.nodes_by_type == {"project": 1, "task": 3}
        assert s.edges_by_relation == {"owns": 1, "dependsOn": 2}


# ---------------------------------------------------------------------------
# Shared documents
# ---------------------------------------------------------------------------


class TestSharedDocument:
    def test_document_replays_with_types(self):
        doc = {
            "label": "Reading list",
            "node_types": {
                "book": {"metaSchema": {"pages": {"type": "number", "default": 0}}},
            },
            "nodes": [
                {"id": "sicp", "type": "book", "metadata": {"pages": 657}},
                {"id": "htdp", "type": "book"},
            ],
            "hyperedges": [{"id": "before", "source": "htdp", "target": "sicp"}],
        }
        g = graph_from_document(doc)
        assert g.get_node("htdp").metadata == {"pages": 0}
        assert g.get_neighbors("sicp") == ["htdp"]
