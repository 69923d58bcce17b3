"""Command line interface.

Usage::

    tunexport --library "iTunes Music Library.xml" print-playlists
    tunexport --config tunexport.yaml -v generate-playlists --output ~/Playlists
"""

import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from tunexport import __version__
from tunexport.config import Config
from tunexport.exceptions import ConfigError, TunexportError
from tunexport.library.models import Library
from tunexport.parsing.parser import LibraryParser
from tunexport.tasks.export_files import FileExporter
from tunexport.tasks.generate_playlists import PlaylistFileGenerator
from tunexport.tasks.printing import (
    print_library,
    print_multiply_listed_tracks,
    print_playlists,
    print_unlisted_tracks,
)

logger = logging.getLogger(__name__)

CONFIG_LOCATIONS = [
    Path("tunexport.yaml"),
    Path.home() / ".config" / "tunexport" / "config.yaml",
]


def setup_logging(verbosity: int = 0, default_level: str = "WARNING"):
    """Configure logging based on verbosity level."""
    log_level = getattr(logging, default_level)
    if verbosity == 1:
        log_level = min(log_level, logging.INFO)
    elif verbosity >= 2:
        log_level = logging.DEBUG

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from the given path or the standard locations.

    Without a settings file, the defaults are used.
    """
    if config_path is not None:
        config = Config.load_config(config_path)
        logger.info(f"Loaded configuration from {config_path}")
        return config

    for path in CONFIG_LOCATIONS:
        if path.exists():
            config = Config.load_config(path)
            logger.info(f"Loaded configuration from {path}")
            return config

    logger.info("No configuration file found, using default settings")
    return Config()


class Context:
    """State shared by the commands of one invocation."""

    def __init__(self, config: Config, console: Console):
        self.config = config
        self.console = console
        self._library: Optional[Library] = None

    @property
    def library(self) -> Library:
        if self._library is None:
            library_file = self.config.parsing.library_file
            if library_file is None:
                raise ConfigError("No library file specified, use --library or set parsing.library_file")
            self._library = LibraryParser(self.config.parsing).parse_file(library_file)
        return self._library


pass_context = click.make_pass_decorator(Context)


@click.group()
@click.version_option(__version__, prog_name="tunexport")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="YAML settings file")
@click.option("--library", "library_file", type=click.Path(dir_okay=False, path_type=Path),
              help="Library file exported by iTunes / Music, overrides parsing.library_file")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v, -vv)")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], library_file: Optional[Path], verbose: int):
    """Parse an iTunes / Apple Music library and export its playlists."""
    setup_logging(verbose)
    try:
        config = load_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    setup_logging(verbose, config.log_level)
    if library_file is not None:
        config.parsing.library_file = library_file
    ctx.obj = Context(config, Console())


def _run(action):
    try:
        return action()
    except TunexportError as e:
        logger.debug("Command failed", exc_info=True)
        raise click.ClickException(str(e)) from e


@cli.command("print-library")
@pass_context
def print_library_command(context: Context):
    """Print library metadata and counts."""
    _run(lambda: print_library(context.library, context.console))


@cli.command("print-playlists")
@pass_context
def print_playlists_command(context: Context):
    """Print the playlist hierarchy."""
    _run(lambda: print_playlists(context.library, context.console))


@cli.command("print-unlisted-tracks")
@pass_context
def print_unlisted_tracks_command(context: Context):
    """Print tracks that are in no playlist."""
    _run(lambda: print_unlisted_tracks(
        context.library, context.config.print_unlisted_tracks, context.console
    ))


@cli.command("print-multiply-listed-tracks")
@pass_context
def print_multiply_listed_tracks_command(context: Context):
    """Print tracks that are in more than one playlist."""
    _run(lambda: print_multiply_listed_tracks(
        context.library, context.config.print_multiply_listed_tracks, context.console
    ))


@cli.command("generate-playlists")
@click.option("--output", type=click.Path(file_okay=False, path_type=Path),
              help="Output folder, overrides tasks.generate_playlists.output_folder")
@click.option("--delete-folder", is_flag=True, help="Delete the output folder if it exists")
@pass_context
def generate_playlists_command(context: Context, output: Optional[Path], delete_folder: bool):
    """Write a playlist file for each playlist."""
    settings = context.config.generate_playlists
    if output is not None:
        settings.output_folder = output
    if delete_folder:
        settings.delete_folder = True
    _run(lambda: PlaylistFileGenerator(context.library, settings, context.console).run())


@cli.command("export-files")
@click.option("--output", type=click.Path(file_okay=False, path_type=Path),
              help="Output folder, overrides tasks.export_files.output_folder")
@click.option("--delete-folder", is_flag=True, help="Delete the output folder if it exists")
@pass_context
def export_files_command(context: Context, output: Optional[Path], delete_folder: bool):
    """Copy the files of each playlist into a folder of its own."""
    settings = context.config.export_files
    if output is not None:
        settings.output_folder = output
    if delete_folder:
        settings.delete_folder = True
    _run(lambda: FileExporter(context.library, settings, context.console).run())


if __name__ == "__main__":
    cli()
