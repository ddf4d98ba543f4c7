"""Command-line interface for AniOrder."""

import asyncio
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from aniorder import __version__
from aniorder.catalog.client import CatalogClient
from aniorder.config import Config, load_config
from aniorder.core.reference import (
    parse_media_reference,
    parse_media_type,
    parse_relation_types,
)
from aniorder.core.report import format_release_order, open_report, write_report
from aniorder.core.resolver import RelationResolver
from aniorder.exceptions import CatalogTransportError, ConfigurationError
from aniorder.utils.logger import get_logger, setup_logging

EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (defaults to built-in defaults)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, config, verbose):
    """AniOrder - release order of anime and manga franchises from AniList."""
    try:
        cfg = load_config(config)
        if verbose:
            cfg.logging.level = "debug"
        ctx.ensure_object(dict)
        ctx.obj["config"] = cfg

        setup_logging(cfg.logging)

    except (OSError, ValueError, ValidationError) as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)


@cli.command()
@click.argument("reference")
@click.option(
    "--file",
    "-f",
    "file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the results to this file. If omitted no file is created.",
)
@click.option(
    "--relations",
    "-r",
    default=None,
    help=(
        "Relation types to follow, separated by commas. Allowed values: ADAPTATION, "
        "PREQUEL, SEQUEL, PARENT, SIDE_STORY, CHARACTER, SUMMARY, ALTERNATIVE, "
        "SPIN_OFF and OTHER"
    ),
)
@click.option(
    "--media-type",
    "-m",
    default=None,
    help="Media type allowed for searching. One of: ANY, ANIME, MANGA",
)
@click.option(
    "--use-end-date",
    is_flag=True,
    default=False,
    help="Order by end date instead of start date",
)
@click.option(
    "--max-requests",
    type=click.IntRange(min=1),
    default=None,
    help="Stop requesting after this many catalog calls",
)
@click.option(
    "--open/--no-open",
    "open_file",
    default=True,
    help="Open the written file with the default application (default: True)",
)
@click.pass_context
def resolve(ctx, reference, file, relations, media_type, use_end_date, max_requests, open_file):
    """Resolve the release order starting from REFERENCE.

    REFERENCE is an AniList URL (https://anilist.co/anime/<id>/...) or ID.
    """
    config: Config = ctx.obj["config"]
    logger = get_logger(__name__)

    try:
        media_id = parse_media_reference(reference)
        resolver_config = config.resolver
        if relations is not None:
            resolver_config.relations = sorted(r.value for r in parse_relation_types(relations))
        if media_type is not None:
            resolver_config.media_type = parse_media_type(media_type).value
        if use_end_date:
            resolver_config.use_end_date = True
        if max_requests is not None:
            resolver_config.max_requests = max_requests
    except ConfigurationError as e:
        click.secho(f"✗ {e}", fg="red", err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    async def _resolve():
        async with CatalogClient(config.catalog, config.rate_limit) as client:
            resolver = RelationResolver.from_config(client, resolver_config)
            media = await resolver.resolve(media_id)
            return media, resolver.unresolved

    try:
        media, unresolved = asyncio.run(_resolve())
    except CatalogTransportError as e:
        logger.error("Resolution aborted", error=str(e))
        click.secho(f"✗ {e}", fg="red", err=True)
        sys.exit(EXIT_FAILURE)

    listing = format_release_order(media)
    click.echo(listing, nl=False)

    if unresolved:
        ids = ", ".join(str(media_id) for media_id in unresolved)
        click.secho(f"⊘ Could not resolve: {ids}", fg="yellow", err=True)

    if file:
        try:
            path = write_report(file, listing)
        except OSError as e:
            click.secho(f"✗ Could not write {file}: {e}", fg="red", err=True)
            sys.exit(EXIT_FAILURE)
        if open_file:
            open_report(path)


@cli.command()
def version():
    """Show version information."""
    click.echo(f"AniOrder v{__version__}")


def main():
    """Entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
