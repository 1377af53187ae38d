"""Command line interface for btmeta.

Provides the ``decode`` and ``info`` commands. The core only returns values
or raises typed errors; this module prints results and maps errors to a
non-zero exit status.
"""

from __future__ import annotations

import os
from pathlib import Path

import click
from rich.console import Console

from btmeta import __version__
from btmeta.cli.render import info_json, info_lines, render_value
from btmeta.cli.verbosity import VerbosityManager, get_verbosity_from_ctx
from btmeta.config.config import ConfigManager, init_config
from btmeta.core.bencode import BencodeDecoder, encode
from btmeta.core.torrent import TorrentParser
from btmeta.utils.exceptions import BtMetaError
from btmeta.utils.logging_config import (
    LoggingContext,
    get_logger,
    log_exception,
)

logger = get_logger(__name__)


def _print_lines(lines: list[str]) -> None:
    for line in lines:
        click.echo(line)


def _fail(ctx: click.Context, exc: BtMetaError, context: str) -> None:
    """Report a core error on stderr and exit with status 1."""
    if get_verbosity_from_ctx(ctx.obj).should_show_stack_trace():
        log_exception(logger, exc, context)
    Console(stderr=True, highlight=False, emoji=False).print(
        f"Error: {exc}", markup=False, style="red", soft_wrap=True
    )
    ctx.exit(1)


def _config_manager(ctx: click.Context) -> ConfigManager:
    return ctx.obj["config_manager"]


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Configuration file path",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v: info, -vv: debug, -vvv: trace)",
)
@click.version_option(__version__, prog_name="btmeta")
@click.pass_context
def cli(ctx: click.Context, config: Path | None, verbose: int) -> None:
    """Decode bencoded data and inspect torrent files."""
    ctx.ensure_object(dict)
    ctx.obj["verbosity"] = verbose

    try:
        config_manager = init_config(config)
    except BtMetaError as e:
        raise click.ClickException(str(e)) from e
    ctx.obj["config_manager"] = config_manager

    # -v flags only ever make logging more verbose than the configured level
    verbosity_manager = VerbosityManager.from_count(verbose)
    config_manager.setup_logging(
        verbosity_manager.apply(config_manager.config.observability.log_level)
    )


@cli.command()
@click.argument("value")
@click.option(
    "--raw",
    is_flag=True,
    help="Print the canonical re-encoding instead of the decoded structure",
)
@click.pass_context
def decode(ctx: click.Context, value: str, raw: bool) -> None:
    """Decode a bencoded VALUE given on the command line."""
    # undo the filesystem decoding click applied to argv
    data = os.fsencode(value)
    decoder = BencodeDecoder(_config_manager(ctx).config.bencode.max_depth)
    try:
        with LoggingContext("decode", logger=logger, size=len(data)):
            decoded = decoder.decode(data)
    except BtMetaError as e:
        _fail(ctx, e, "Failed to decode value")
        return

    if raw:
        click.echo(encode(decoded))
    else:
        _print_lines([render_value(decoded)])


@cli.command()
@click.argument(
    "path",
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.option("--json", "as_json", is_flag=True, help="Print metadata as JSON")
@click.pass_context
def info(ctx: click.Context, path: Path, as_json: bool) -> None:
    """Show tracker, length, info hash and piece hashes of a torrent file."""
    parser = TorrentParser(_config_manager(ctx).config.bencode.max_depth)
    try:
        with LoggingContext("info", logger=logger, path=str(path)):
            torrent_info = parser.parse(path)
    except BtMetaError as e:
        _fail(ctx, e, f"Failed to read torrent {path}")
        return

    if as_json:
        _print_lines([info_json(torrent_info)])
    else:
        _print_lines(info_lines(torrent_info))


def main():
    """Main CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
