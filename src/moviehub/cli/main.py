"""Main CLI entry point."""

import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Optional

import click

from .. import __version__
from ..config import ConfigManager
from ..core.interfaces import ISearchAggregator, IWorkflowOrchestrator
from ..infrastructure import CacheManager, Container, setup_logging
from ..utils import ConfigurationError, MovieHubError


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False, default=str))


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.version_option(version=__version__, prog_name="moviehub")
@click.pass_context
def cli(ctx: click.Context, config: Optional[Path], verbose: bool) -> None:
    """MovieHub - Search, merge and rate movies from several databases."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config

    # Skip configuration loading for commands that don't need it
    if ctx.invoked_subcommand == "init":
        return

    try:
        config_manager = ConfigManager(config)
        app_config = config_manager.load_config()

        if verbose:
            app_config.logging.level = "DEBUG"
        setup_logging(app_config.logging)

        container = Container(config_manager)
        container.configure_default_services()

        ctx.obj["config"] = app_config
        ctx.obj["container"] = container

    except (ConfigurationError, FileNotFoundError, ValueError) as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    except Exception as e:
        click.echo(f"Initialization error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=Path.cwd() / "config" / "config.yaml",
    help="Output path for configuration file",
)
def init(output: Path) -> None:
    """Initialize configuration file."""
    try:
        if output.exists():
            if not click.confirm(f"Configuration file {output} already exists. Overwrite?"):
                return

        ConfigManager.create_default_config(output)
        click.echo(f"Configuration file created at: {output}")
        click.echo("Please edit the configuration file with your API keys.")

    except Exception as e:
        click.echo(f"Failed to create configuration: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option("--host", help="Bind address (defaults to server.host)")
@click.option("--port", type=int, help="Port (defaults to server.port)")
@click.pass_context
def serve(ctx: click.Context, host: Optional[str], port: Optional[int]) -> None:
    """Run the HTTP API."""
    import uvicorn

    from ..api import create_app

    config = ctx.obj["config"]
    app = create_app(ctx.obj["container"])
    uvicorn.run(
        app,
        host=host or config.server.host,
        port=port or config.server.port,
        log_level=config.logging.level.lower(),
    )


@cli.command()
@click.argument("query")
@click.option("--year", "-y", type=int, help="Release year filter")
@click.option("--sort", "-s", help="Sort mode (relevance, year_desc, title_az, votes_desc, ...)")
@click.option("--limit", "-l", type=int, help="Maximum number of results")
@click.option("--page", type=int, default=1, show_default=True, help="Result page")
@click.pass_context
def search(
    ctx: click.Context,
    query: str,
    year: Optional[int],
    sort: Optional[str],
    limit: Optional[int],
    page: int,
) -> None:
    """Search every provider and print the merged ranking."""

    async def _search(container: Container) -> Any:
        aggregator = container.get(ISearchAggregator)  # type: ignore
        response = await aggregator.search(query, year=year, page=page, limit=limit, sort=sort)
        return response.to_dict()

    _run(ctx, _search)


@cli.command()
@click.argument("movie_id")
@click.pass_context
def details(ctx: click.Context, movie_id: str) -> None:
    """Show the merged record for a provider-prefixed id such as tmdb-27205."""

    async def _details(container: Container) -> Any:
        aggregator = container.get(ISearchAggregator)  # type: ignore
        movie = await aggregator.get_movie_details(movie_id)
        return movie.to_dict()

    _run(ctx, _details)


@cli.command()
@click.argument("query")
@click.option("--user", "-u", "user_id", help="User id for personalised recommendations")
@click.pass_context
def ask(ctx: click.Context, query: str, user_id: Optional[str]) -> None:
    """Answer a natural language movie question."""

    async def _ask(container: Container) -> Any:
        orchestrator = container.get(IWorkflowOrchestrator)  # type: ignore
        result = await orchestrator.execute(query, user_id)
        if not result.success:
            _echo_json(result.to_dict())
            raise MovieHubError(result.error or "Workflow failed")
        return result.to_dict()

    _run(ctx, _ask)


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show system status and configuration."""
    config = ctx.obj["config"]
    container = ctx.obj["container"]

    click.echo("MovieHub Status")
    click.echo("=" * 40)

    click.echo(f"LLM: {config.llm.provider}/{config.llm.model}")
    click.echo(f"LLM Configured: {'✓' if config.llm.usable else '✗'}")
    click.echo(f"TMDb Configured: {'✓' if config.tmdb.api_key else '✗'}")
    click.echo(f"OMDb Configured: {'✓' if config.omdb.api_key else '✗'}")
    click.echo(f"Cache Backend: {config.cache.backend}")
    click.echo(f"Tool Gateway: {config.workflow.gateway}")

    try:
        available = asyncio.run(_check_cache(container))
        click.echo(f"Cache Status: {'✓' if available else '✗ Unavailable'}")
    except Exception as e:
        click.echo(f"Service check failed: {e}")


@cli.command("clear-cache")
@click.option("--query", "-q", help="Only drop cached searches for this query")
@click.pass_context
def clear_cache(ctx: click.Context, query: Optional[str]) -> None:
    """Drop cached search results, or every cached entry."""

    async def _clear(container: Container) -> Any:
        cache = container.get(CacheManager)
        removed = await cache.invalidate_search(query) if query else await cache.clear_all()
        return {"removed": removed}

    _run(ctx, _clear)


def _run(ctx: click.Context, command: Any) -> None:
    """Run an async command against the container and print its JSON result."""
    container = ctx.obj["container"]

    async def _wrapped() -> Any:
        try:
            return await command(container)
        finally:
            await container.aclose()

    try:
        _echo_json(asyncio.run(_wrapped()))
    except KeyboardInterrupt:
        click.echo("\nOperation cancelled by user.")
        sys.exit(1)
    except MovieHubError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


async def _check_cache(container: Container) -> bool:
    cache = container.get(CacheManager)
    try:
        return await cache.is_available()
    finally:
        await cache.close()


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
