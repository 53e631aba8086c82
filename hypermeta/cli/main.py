"""Hypermeta CLI — inspect graph documents from the command line."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Callable
from typing import Any, TypeVar

import click

from hypermeta.engine.core import Hypergraph
from hypermeta.engine.persistence import load_graph, write_snapshot
from hypermeta.exceptions import HypermetaError

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]

T = TypeVar("T")


def _load(document: str) -> Hypergraph:
    try:
        return load_graph(document)
    except (HypermetaError, ValueError, TypeError) as exc:
        raise click.ClickException(f"{type(exc).__name__}: {exc}") from exc


def _query(fn: Callable[..., T], *args: Any) -> T:
    try:
        return fn(*args)
    except HypermetaError as exc:
        raise click.ClickException(f"{type(exc).__name__}: {exc}") from exc


@click.group()
@click.option(
    "--log-level",
    default="WARNING",
    envvar="HYPERMETA_LOG_LEVEL",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Logging level (env: HYPERMETA_LOG_LEVEL).",
)
def cli(log_level: str) -> None:
    """Hypermeta CLI — check and query hypergraph documents."""
    # stdout carries command output; logs go to stderr
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, log_level.upper()),
        format="%(levelname)s: %(name)s: %(message)s",
    )


@cli.command()
@click.argument("document", type=click.Path(exists=True, dir_okay=False))
def check(document: str) -> None:
    """Replay a graph document and report whether it is valid."""
    graph = _load(document)
    click.echo(
        f"Document is valid: {len(graph.nodes)} nodes, {len(graph.hyperedges)} hyperedges"
    )


@cli.command()
@click.argument("document", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", default=None, help="Write the snapshot to this file.")
def snapshot(document: str, output: str | None) -> None:
    """Print the sanitized snapshot of a graph document."""
    graph = _load(document)
    if output:
        path = write_snapshot(graph, output)
        logger.info("Snapshot written to %s", path)
        click.echo(f"Wrote snapshot to {output}")
        return
    click.echo(graph.to_json(indent=2, ensure_ascii=False))


@cli.command()
@click.argument("document", type=click.Path(exists=True, dir_okay=False))
def stats(document: str) -> None:
    """Show node and edge counts."""
    s = _load(document).stats()
    click.echo(f"Nodes: {s.node_count}  Hyperedges: {s.edge_count}")
    if s.nodes_by_type:
        click.echo("Nodes by type:")
        for t, c in s.nodes_by_type.items():
            click.echo(f"  {t or '(default)'}: {c}")
    if s.edges_by_relation:
        click.echo("Hyperedges by relation:")
        for r, c in s.edges_by_relation.items():
            click.echo(f"  {r or '(default)'}: {c}")


@cli.command()
@click.argument("document", type=click.Path(exists=True, dir_okay=False))
@click.argument("node_id")
def neighbors(document: str, node_id: str) -> None:
    """List nodes one hyperedge away from NODE_ID."""
    graph = _load(document)
    result = _query(graph.get_neighbors, node_id)
    if not result:
        click.echo("No neighbors found.")
        return
    for neighbor in result:
        click.echo(neighbor)


@cli.command()
@click.argument("document", type=click.Path(exists=True, dir_okay=False))
@click.argument("node_id")
@click.option(
    "--direction",
    type=click.Choice(["incoming", "outgoing", "incident"]),
    default="incident",
    help="Which hyperedges to list.",
)
def edges(document: str, node_id: str, direction: str) -> None:
    """List hyperedges touching NODE_ID."""
    graph = _load(document)
    query = {
        "incoming": graph.get_incoming_edges,
        "outgoing": graph.get_outgoing_edges,
        "incident": graph.get_incident_edges,
    }[direction]
    results = _query(query, node_id)
    if not results:
        click.echo("No hyperedges found.")
        return
    for e in results:
        click.echo(
            f"  {e.id}  relation={e.relation or '(default)'}"
            f"  source={e.source}  target={e.target}  metadata={json.dumps(e.metadata)}"
        )


if __name__ == "__main__":
    cli()
