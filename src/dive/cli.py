"""CLI entrypoints for dive."""

from __future__ import annotations

import contextlib
import json
import os
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from dive.config.models import DEFAULT_EXCLUDES, SearchSettings
from dive.config.store import SettingsStore
from dive.runtime_logging import configure_runtime_logging
from dive.search.engine import search
from dive.search.pattern import Matcher, PatternError
from dive.version import __version__

SIGPIPE_EXIT = 141


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("pattern")
@click.argument("paths", nargs=-1, type=click.Path(path_type=Path))
@click.option("--name", "by_name", is_flag=True, help="Search for matching file name")
@click.option("--msize", type=int, help="Size of match buffer")
@click.option("--win", "carriage", is_flag=True, help="Force using carriage returns as line separator")
@click.option("-D", "--verbose", is_flag=True, help="Verbose logging output on stderr")
@click.option("--filemax", type=int, help="Maximum # of files to read at a time")
@click.option("-N", "--no-prefix", is_flag=True, help="Do not include file:line: prefix")
@click.option("--literal", is_flag=True, help="Do not interpret regex, be literal")
@click.option("--ms", type=int, help="Millisecond idle delay of the output collector")
@click.option("-a", "--all-dirs", is_flag=True, help="Don't skip directories like .git")
@click.option("-b", "--all-mimes", is_flag=True, help="Don't skip files sniffed as application/octet-stream")
@click.option("--workers", type=int, help="Number of concurrent traversal/scan workers")
@click.option("--exclude", "extra_excludes", multiple=True, help="Extra directory name glob to skip")
@click.option("--log-file", type=click.Path(path_type=Path), help="Append JSONL runtime log to this file")
@click.option("--log-level", help="Runtime log level (error, warning, info, debug, off)")
@click.version_option(__version__, prog_name="dive")
def main(
    pattern: str,
    paths: tuple[Path, ...],
    by_name: bool,
    msize: int | None,
    carriage: bool,
    verbose: bool,
    filemax: int | None,
    no_prefix: bool,
    literal: bool,
    ms: int | None,
    all_dirs: bool,
    all_mimes: bool,
    workers: int | None,
    extra_excludes: tuple[str, ...],
    log_file: Path | None,
    log_level: str | None,
) -> None:
    """Concurrently search PATHS (default: .) for lines matching PATTERN."""
    logger = configure_runtime_logging(level=log_level, log_file=log_file, verbose=verbose)
    defaults = SettingsStore().load()

    try:
        matcher = Matcher.compile(pattern, literal=literal)
    except PatternError as exc:
        raise click.ClickException(f"invalid regex provided → {exc}") from exc

    try:
        settings = SearchSettings(
            paths=paths,
            by_name=by_name,
            match_buffer=msize if msize is not None else defaults.msize,
            carriage=carriage,
            max_files=filemax if filemax is not None else defaults.filemax,
            no_prefix=no_prefix,
            literal=literal,
            poll_ms=ms if ms is not None else defaults.ms,
            all_dirs=all_dirs,
            all_mimes=all_mimes,
            verbose=verbose,
            workers=workers if workers is not None else defaults.workers,
            exclude=(*DEFAULT_EXCLUDES, *defaults.exclude, *extra_excludes),
        )
    except ValidationError as exc:
        raise click.ClickException(f"invalid settings → {exc}") from exc

    _raw_stdout()
    try:
        search(settings, matcher, sys.stdout, logger=logger)
    except BrokenPipeError:
        _silence_stdout()
        sys.exit(SIGPIPE_EXIT)


def _raw_stdout() -> None:
    # Non-UTF-8 path names decode to surrogates; write them back as raw bytes.
    reconfigure = getattr(sys.stdout, "reconfigure", None)
    if reconfigure is not None:
        reconfigure(errors="surrogateescape")


def _silence_stdout() -> None:
    # The reader went away; stop the interpreter from flushing into the closed pipe.
    with contextlib.suppress(OSError, ValueError):
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
def config_main() -> None:
    """Inspect and edit stored dive defaults."""


@config_main.command("path")
def config_path() -> None:
    """Print settings file path."""
    click.echo(str(SettingsStore().path))


@config_main.command("show")
def config_show() -> None:
    """Print the effective stored defaults."""
    defaults = SettingsStore().load()
    click.echo(json.dumps(defaults.model_dump(mode="json"), indent=2, sort_keys=True))


@config_main.command("set")
@click.argument("key")
@click.argument("value")
def config_set(key: str, value: str) -> None:
    """Set KEY to VALUE; VALUE is parsed as JSON when possible."""
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError:
        parsed = value

    try:
        updated = SettingsStore().update(key, parsed)
    except KeyError as exc:
        raise click.ClickException(str(exc.args[0])) from exc
    except ValidationError as exc:
        raise click.ClickException(f"invalid value for {key} → {exc}") from exc
    click.echo(json.dumps(updated.model_dump(mode="json"), indent=2, sort_keys=True))


if __name__ == "__main__":
    main()
