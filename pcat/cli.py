# pcat/cli.py

from __future__ import annotations

import logging
from typing import Annotated, List, NoReturn, Optional

import typer

from . import __version__
from .config import DEF_PROCS, MAX_PROCS, Config
from .errors import PcatError
from .pool import WorkerPool

logger = logging.getLogger(__name__)

cli = typer.Typer(
    add_completion=False,
    help="stdin line-level parallelism.",
)

# ───────────────── Options ─────────────────

CmdArg = Annotated[
    List[str],
    typer.Argument(
        metavar="CMD",
        help="Command (and its arguments) run by every worker. Any %% in it is replaced by the worker number (01, 02, …).",
        show_default=False,
    ),
]
ProcsOpt = Annotated[
    Optional[int],
    typer.Option("--procs", "-p", help=f"Number of parallel processes (default: {DEF_PROCS}, max: {MAX_PROCS}).", show_default=False),
]
OutputOpt = Annotated[
    Optional[str],
    typer.Option("--output", "-o", help="Per-worker stdout file, e.g. 'out.%02d.txt'. Created if missing, never truncated.", show_default=False),
]
LogLevelOpt = Annotated[
    Optional[str],
    typer.Option("--log-level", help="Logging level for pcat's own messages (stderr).", show_default=False),
]


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"pcat {__version__}")
        raise typer.Exit()


VersionOpt = Annotated[
    bool,
    typer.Option("--version", callback=_version_callback, is_eager=True, help="Show the version and exit."),
]


def _fail(error: PcatError) -> NoReturn:
    typer.secho(f"pcat: {error}", fg=typer.colors.RED, err=True)
    raise typer.Exit(1)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)8s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.getLogger().setLevel(level)


# ─────────────── Command ───────────────

@cli.command(
    no_args_is_help=True,
    context_settings={
        "help_option_names": ["-h", "--help"],
        "allow_interspersed_args": False,
        "ignore_unknown_options": True,
    },
)
def run(
    cmd: CmdArg,
    procs: ProcsOpt = None,
    output: OutputOpt = None,
    log_level: LogLevelOpt = None,
    version: VersionOpt = False,
) -> None:
    """
    Run CMD in parallel processes, each fed a subset of the standard input
    lines. Options must come before CMD; everything after it is passed to CMD.
    """
    overrides: dict[str, object] = {"command": list(cmd)}
    if procs is not None:
        overrides["procs"] = procs
    if output is not None:
        overrides["output_template"] = output
    if log_level is not None:
        overrides["log_level"] = log_level

    try:
        cfg = Config(**overrides)
    except ValueError as e:
        typer.secho(f"pcat: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(2)

    _configure_logging(cfg.log_level)
    logger.debug("%r", cfg)

    pool = WorkerPool(cfg)
    try:
        pool.start()
    except PcatError as e:
        _fail(e)

    try:
        pool.feed(typer.get_binary_stream("stdin"))
        pool.shutdown()
    except PcatError as e:
        pool.abort()
        _fail(e)


def _main() -> None:
    cli()


if __name__ == "__main__":
    _main()
