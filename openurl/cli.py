from pathlib import Path
from typing import List, Optional

import typer

from .aliases import AliasStore
from .config import Settings, load_settings
from .errors import ConfigError, IncompatibleOptionsError, OpenurlError
from .handlers import gui_name, terminal_name
from .launcher import SystemLauncher
from .logging_utils import get_logger, setup_logger
from .options import CliOverride
from .presenters import create_presenter
from .resolver import Invocation, Resolver

logger = get_logger("cli")

app = typer.Typer(add_completion=False)


def load_store(settings: Settings) -> AliasStore:
    """Read the configured alias files in order; missing files are skipped."""
    paths = []
    for path in settings.alias_paths():
        if path.is_file():
            paths.append(path)
        else:
            logger.warning(f"alias file not found: {path}")
    try:
        return AliasStore.from_files(paths)
    except OSError as e:
        raise ConfigError(f"cannot read alias file: {e}") from e


def build_override(gui: Optional[int], term: Optional[int], dump: bool, page_forward: Optional[int]) -> CliOverride:
    if gui is not None and term is not None:
        raise IncompatibleOptionsError("--gui and --term cannot be combined")
    handler = None
    if gui is not None:
        handler = gui_name(gui)
    elif term is not None:
        handler = terminal_name(term)
    if dump or page_forward is not None:
        return CliOverride(handler_name=handler, dump=True, dump_page_forward=page_forward or 0)
    return CliOverride(handler_name=handler)


@app.command(context_settings={"allow_interspersed_args": False, "help_option_names": ["-h", "--help"]})
def run(
    ctx: typer.Context,
    args: Optional[List[str]] = typer.Argument(None, help="Alias name(s) followed by search terms, or URLs."),
    gui: Optional[int] = typer.Option(None, "--gui", "-g", min=1, max=9, help="Open with GUI handler N."),
    term: Optional[int] = typer.Option(None, "--term", "-t", min=1, max=7, help="Open with terminal handler N."),
    dump: bool = typer.Option(False, "--dump", "-d", help="Dump page text into a pager."),
    page_forward: Optional[int] = typer.Option(
        None, "--page-forward", "-f", min=0, help="Dump and skip N pages ahead in the pager."
    ),
    multi: bool = typer.Option(False, "--multi", "-m", help="Treat every leading argument as an alias."),
    clipboard: bool = typer.Option(False, "--clipboard", "-c", help="Copy the URLs instead of opening them."),
    search: Optional[bool] = typer.Option(
        None, "--search/--no-search", "-s/-S", help="Search when no alias matches."
    ),
    list_aliases: bool = typer.Option(False, "--list", "-l", help="List known aliases."),
    dry_run: bool = typer.Option(False, "--dry-run", "-n", help="Print actions without opening anything."),
    config: Optional[Path] = typer.Option(None, "--config", help="Config file (YAML)."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr."),
):
    """Open URLs, aliases and searches in the configured browsers."""
    try:
        settings = load_settings(config)
        setup_logger(level="DEBUG" if verbose else settings.log_level)
        if search is not None:
            settings = settings.model_copy(update={"search_if_not_found": search})

        store = load_store(settings)

        if list_aliases:
            aliases = [store.get(name) for name in store.names()]
            typer.echo(create_presenter("aliases").to_text(aliases))
            return

        if not args:
            typer.echo(ctx.get_help())
            return

        invocation = Invocation(
            args=tuple(args),
            multi_alias=multi,
            clipboard=clipboard,
            dry_run=dry_run,
            cli_override=build_override(gui, term, dump, page_forward),
        )
        resolver = Resolver(settings=settings, store=store, launcher=SystemLauncher(settings))
        result = resolver.run(invocation)
    except OpenurlError as e:
        typer.echo(f"openurl: error: {e}", err=True)
        raise typer.Exit(code=e.exit_code)

    if dry_run:
        typer.echo(create_presenter("actions").to_text(result))
    elif not result.found:
        typer.echo(f"openurl: alias not found: {args[0]}", err=True)


def main():
    app()


if __name__ == "__main__":
    main()
