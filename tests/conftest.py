"""Shared fixtures for hypermeta tests."""

import itertools

import pytest

from hypermeta import Hypergraph, NodeType


@pytest.fixture()
def id_factory():
    """Deterministic id factory: id-1, id-2, ..."""
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture()
def graph(id_factory):
    """Fresh graph with deterministic ids."""
    return Hypergraph(label="test", id_factory=id_factory)


@pytest.fixture()
def person_type():
    """Strict person schema with one field of each common type."""
    return NodeType(
        version="0.1",
        is_metadata_strict=True,
        meta_schema={
            "age": {"type": "number", "default": 0},
            "occupation": {"type": "string", "default": "unemployed"},
            "skills": {"type": "array", "default": []},
        },
    )


@pytest.fixture()
def family_graph():
    """The family lineage graph.

    Nodes (3): dad, sis, me

    Edges (1):
        children: dad -> [sis, me]
    """
    g = Hypergraph(type="lineage", label="My Family")
    g.add_node(id="dad")
    g.add_node(id="sis")
    g.add_node(id="me")
    g.add_edge(id="children", source="dad", target=["sis", "me"], relation="children")
    return g
