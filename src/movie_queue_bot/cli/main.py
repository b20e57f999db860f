"""Main CLI entry point."""

import asyncio
import sys
from pathlib import Path
from typing import List, Optional

import click
import yaml

from .. import __version__
from ..config import ConfigManager
from ..core.interfaces import ICommandRouter, IQueueStore
from ..core.models import IncomingMessage, Movie
from ..core.services import ConsoleMessenger
from ..infrastructure import Container, setup_logging
from ..utils import ConfigurationError, MovieQueueBotError, format_mention


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.version_option(version=__version__, prog_name="movie-queue-bot")
@click.pass_context
def cli(ctx: click.Context, config: Optional[Path], verbose: bool) -> None:
    """Movie Queue Bot - keep the movie night queue, look movies up on TMDb."""
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

        ctx.obj["config"] = app_config
        ctx.obj["config_manager"] = config_manager

    except (ConfigurationError, FileNotFoundError, ValueError, yaml.YAMLError) as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option("--user", "-u", default="U_CONSOLE", help="User id the messages are sent as")
@click.pass_context
def run(ctx: click.Context, user: str) -> None:
    """Chat with the bot from the terminal, one message per line."""
    try:
        asyncio.run(_run_console(ctx.obj["config_manager"], user))
    except KeyboardInterrupt:
        click.echo("\nBye!")
    except MovieQueueBotError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.pass_context
def queue(ctx: click.Context) -> None:
    """Show the movie queue."""
    try:
        movies = asyncio.run(_load_queue(ctx.obj["config_manager"]))
    except MovieQueueBotError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if not movies:
        click.echo("The queue is empty.")
        return

    for i, movie in enumerate(movies, 1):
        line = f"{i:>3}. {movie.title} (requested by {movie.requestor})"
        if movie.planned_movie_night:
            night = movie.planned_movie_night
            line += f" - movie night {night.date.isoformat()} hosted by {night.host}"
        click.echo(line)


@cli.command()
@click.pass_context
def validate(ctx: click.Context) -> None:
    """Validate configuration and the stored queue."""
    try:
        movies = asyncio.run(_load_queue(ctx.obj["config_manager"]))
    except MovieQueueBotError as e:
        click.echo(f"Validation failed: {e}", err=True)
        sys.exit(1)

    config = ctx.obj["config"]
    click.echo(f"Bot user: {config.bot.user_id}")
    click.echo(f"TMDb Configured: {'✓' if config.tmdb.api_token else '✗'}")
    click.echo(f"Queue: {config.queue.path} ({len(movies)} movie(s))")
    click.echo("All prerequisites validated successfully")


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
    if output.exists():
        if not click.confirm(f"Configuration file {output} already exists. Overwrite?"):
            return

    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        ConfigManager.create_default_config(output)
    except OSError as e:
        click.echo(f"Failed to create configuration: {e}", err=True)
        sys.exit(1)

    click.echo(f"Configuration file created at: {output}")
    click.echo("Please edit the configuration file with your tokens and preferences.")


async def _load_queue(config_manager: ConfigManager) -> List[Movie]:
    """Load the stored queue."""
    container = Container(config_manager)
    container.configure_default_services()
    store = container.get(IQueueStore)  # type: ignore
    await store.load()
    return store.list_movies()


async def _run_console(config_manager: ConfigManager, user: str) -> None:
    """Run the console chat loop until EOF."""
    messenger = ConsoleMessenger()
    container = Container(config_manager)
    container.configure_default_services(messenger)
    bot_user_id = container.get_config().bot.user_id
    mention = format_mention(bot_user_id)
    router: Optional[ICommandRouter] = None

    try:
        await container.get(IQueueStore).load()  # type: ignore
        router = container.get(ICommandRouter)  # type: ignore

        click.echo(f"Talking to {mention} as {user}. Ctrl-D to quit.")
        loop = asyncio.get_running_loop()
        while True:
            line = await loop.run_in_executor(None, sys.stdin.readline)
            if not line:
                break
            text = line.strip()
            if not text:
                continue
            if bot_user_id not in text:
                text = f"{mention} {text}"
            message = IncomingMessage(
                text=text, sender_id=user, ts=messenger.next_ts(), channel="console"
            )
            router.submit(message)
    finally:
        # Let in-flight messages finish their queue writes, even on Ctrl-C.
        if router is not None:
            await router.shutdown()
        await container.close()


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
