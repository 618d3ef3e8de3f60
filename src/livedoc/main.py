"""
Main entry point for the Livedoc CLI.

This module provides the command-line interface for querying feature
dependency graphs from a snapshot file or the Neo4j feature store.
"""

import json
import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Tuple

import click

from livedoc.core.interfaces import IFeatureCatalog, IInvocationLedger
from livedoc.models.feature import Invocation, graphs_to_dict
from livedoc.services.dependency import DependencyService
from livedoc.services.store import InMemoryFeatureStore, Neo4jFeatureStore, load_snapshot
from livedoc.utils.config import LivedocSettings, get_settings
from livedoc.utils.errors import LivedocError, ServiceUnavailableError
from livedoc.utils.logging import configure_logging

logger = logging.getLogger(__name__)


def _validated_settings() -> LivedocSettings:
    settings = get_settings()
    validation_result = settings.validate_settings()

    if not validation_result.valid:
        for error in validation_result.errors:
            click.echo(f"Error: {error}")
        sys.exit(1)

    return settings


@contextmanager
def _open_store(settings: LivedocSettings, snapshot: Optional[Path]) -> Iterator[Tuple[IFeatureCatalog, IInvocationLedger]]:
    """Yield (catalog, ledger) read from a snapshot file or from Neo4j."""
    if snapshot is not None:
        store = load_snapshot(snapshot)
        yield store, store
        return

    if not settings.graph_enabled:
        click.echo("Error: Graph database integration is disabled. Use --snapshot to query a snapshot file.")
        sys.exit(1)

    store = Neo4jFeatureStore(settings)
    try:
        yield store, store
    finally:
        store.close()


def _echo_json(payload) -> None:
    click.echo(json.dumps(payload, indent=2))


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Livedoc - feature dependency graphs from recorded call graphs."""
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose

    configure_logging(get_settings(), verbose=verbose)

    if verbose:
        logger.info("Verbose logging enabled")


@cli.command()
@click.option('--snapshot', type=click.Path(path_type=Path, exists=True, dir_okay=False),
              help='Read features and invocations from a snapshot file')
@click.option('--product', type=str, help='Restrict roots to this product (requires --version)')
@click.option('--version', 'version', type=str, help='Restrict roots to this version (requires --product)')
def roots(snapshot: Optional[Path], product: Optional[str], version: Optional[str]) -> None:
    """Print the graphs of all features without dependants."""
    if (product is None) != (version is None):
        click.echo("Error: --product and --version must be used together.")
        sys.exit(1)

    settings = _validated_settings()
    scopes = [(product, version)] if product is not None else settings.get_graph_scopes()

    try:
        with _open_store(settings, snapshot) as (catalog, ledger):
            service = DependencyService(
                catalog, ledger,
                scopes=scopes,
                strict_signatures=settings.strict_signature_ownership,
            )
            graphs = service.get_top_level_feature_graphs()
    except LivedocError as e:
        logger.error(f"Root graph query failed: {e}")
        click.echo(f"Error: {e}")
        sys.exit(1)

    _echo_json(graphs_to_dict(graphs))


@cli.command()
@click.argument('product')
@click.argument('feature_name')
@click.argument('version')
@click.option('--snapshot', type=click.Path(path_type=Path, exists=True, dir_okay=False),
              help='Read features and invocations from a snapshot file')
def graph(product: str, feature_name: str, version: str, snapshot: Optional[Path]) -> None:
    """Print the graph centered on a single feature."""
    settings = _validated_settings()

    try:
        with _open_store(settings, snapshot) as (catalog, ledger):
            service = DependencyService(catalog, ledger, strict_signatures=settings.strict_signature_ownership)
            feature_graph = service.get_feature_graph(product, feature_name, version)
    except LivedocError as e:
        logger.error(f"Feature graph query failed: {e}")
        click.echo(f"Error: {e}")
        sys.exit(1)

    _echo_json(feature_graph.to_dict())


@cli.command()
@click.argument('product')
@click.argument('version')
@click.option('--snapshot', type=click.Path(path_type=Path, exists=True, dir_okay=False),
              help='Read features and invocations from a snapshot file')
def cycles(product: str, version: str, snapshot: Optional[Path]) -> None:
    """Print the feature dependency cycles of a product version."""
    settings = _validated_settings()

    try:
        with _open_store(settings, snapshot) as (catalog, ledger):
            service = DependencyService(catalog, ledger, strict_signatures=settings.strict_signature_ownership)
            found = service.get_feature_cycles(product, version)
    except LivedocError as e:
        logger.error(f"Cycle query failed: {e}")
        click.echo(f"Error: {e}")
        sys.exit(1)

    if not found:
        click.echo(f"No feature dependency cycles in {product}@{version}.")
        return

    for cycle in found:
        titles = [key.title for key in cycle]
        click.echo(" -> ".join(titles + titles[:1]))


@cli.command('import-snapshot')
@click.argument('snapshot', type=click.Path(path_type=Path, exists=True, dir_okay=False))
def import_snapshot(snapshot: Path) -> None:
    """Store the features and invocations of a snapshot file in Neo4j."""
    settings = _validated_settings()

    if not settings.graph_enabled:
        click.echo("Error: Graph database integration is disabled in the settings.")
        sys.exit(1)

    try:
        source: InMemoryFeatureStore = load_snapshot(snapshot)
        target = Neo4jFeatureStore(settings)
        try:
            if not target.is_healthy:
                raise ServiceUnavailableError(
                    "Graph database is not available",
                    suggestions=["Check that Neo4j is running at the configured LIVEDOC_NEO4J_URI"],
                )
            feature_count = target.persist_features(source.list_features())
            for scope in source.list_scopes():
                invocations = [
                    Invocation(signature=signature, invoked_signatures=invoked)
                    for signature, invoked in source.get_invocations(scope.product, scope.version).items()
                ]
                target.persist_invocations(scope.product, scope.version, invocations)
        finally:
            target.close()
    except LivedocError as e:
        logger.error(f"Snapshot import failed: {e}")
        click.echo(f"Error: {e}")
        sys.exit(1)

    click.echo(f"Imported {feature_count} features from {snapshot}.")


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
