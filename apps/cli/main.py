"""Typer CLI entrypoint for the hydration parser."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated, Literal, cast

import typer

from apps.cli.format_human import render_parse_summary
from apps.cli.io import (
    build_output_paths,
    chunks_payload,
    existing_output_files,
    read_document,
    write_chunks_atomic,
)
from core.hydration.config import ParserConfig, load_config
from core.hydration.models import DecodedChunk
from core.orchestrator.pipeline import HydrationParser

app = typer.Typer(help="Next.js hydration data extractor", rich_markup_mode=None)
ReportMode = Literal["human", "json", "both"]

HtmlOption = Annotated[Path, typer.Option(..., exists=True, dir_okay=False, file_okay=True)]
ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", help="Parser config YAML (defaults to the bundled parser.yaml)."),
]


@app.callback()
def cli_callback(
    verbose: Annotated[
        bool, typer.Option("--verbose", help="Log scanner and pipeline events at DEBUG.")
    ] = False,
) -> None:
    """Extract hydration chunks from saved HTML documents."""

    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s %(message)s")


@app.command("parse")
def parse_command(
    html: HtmlOption,
    out_dir: Annotated[Path, typer.Option()] = Path("."),
    config: ConfigOption = None,
    report: Annotated[str, typer.Option()] = "human",
    force: Annotated[
        bool, typer.Option("--force", help="Overwrite outputs when they already exist.")
    ] = False,
    no_overwrite: Annotated[
        bool,
        typer.Option(
            "--no-overwrite",
            help="Fail when outputs already exist.",
        ),
    ] = False,
) -> None:
    """Parse one HTML document and write out.chunks.json."""

    normalized_report = report.lower().strip()
    if normalized_report not in {"human", "json", "both"}:
        typer.echo("ERROR: --report must be one of: human, json, both.")
        raise typer.Exit(code=2)
    report_typed = cast(ReportMode, normalized_report)

    if force and no_overwrite:
        typer.echo("ERROR: --force and --no-overwrite cannot be used together.")
        raise typer.Exit(code=2)

    paths = build_output_paths(out_dir)
    existing = existing_output_files(paths)
    if existing and no_overwrite:
        typer.echo("ERROR: outputs already exist and --no-overwrite is enabled.")
        raise typer.Exit(code=1)
    if existing:
        names = ", ".join(path.name for path in existing)
        typer.echo(f"INFO: overwriting existing outputs: {names}")

    parser_config = _load_config_or_exit(config)
    chunks = _parse_or_exit(html, HydrationParser(parser_config))

    try:
        write_chunks_atomic(paths, chunks)
    except Exception as exc:  # noqa: BLE001
        typer.echo(f"ERROR: write output failed: {exc}")
        raise typer.Exit(code=1) from exc

    if report_typed in {"human", "both"}:
        typer.echo(render_parse_summary(chunks))
    if report_typed in {"json", "both"}:
        typer.echo(json.dumps(chunks_payload(chunks), ensure_ascii=False, sort_keys=True))

    typer.echo(f"INFO: wrote {paths.chunks}")
    raise typer.Exit(code=0)


@app.command("keys")
def keys_command(
    html: HtmlOption,
    max_depth: Annotated[int | None, typer.Option(min=0)] = None,
    top: Annotated[int | None, typer.Option(min=1)] = None,
    config: ConfigOption = None,
) -> None:
    """Print object keys found in decoded chunks with their counts."""

    parser_config = _load_config_or_exit(config)
    parser = HydrationParser(parser_config)
    chunks = _parse_or_exit(html, parser)

    key_counts = parser.collect_keys(chunks, max_depth=max_depth)
    for index, (key, count) in enumerate(key_counts.items()):
        if top is not None and index >= top:
            break
        typer.echo(f"{key}\t{count}")


@app.command("find")
def find_command(
    html: HtmlOption,
    pattern: Annotated[str, typer.Option(...)],
    config: ConfigOption = None,
) -> None:
    """Print JSON lines for every key matching a case-insensitive pattern."""

    parser_config = _load_config_or_exit(config)
    parser = HydrationParser(parser_config)
    chunks = _parse_or_exit(html, parser)

    for match in parser.find_by_pattern(chunks, pattern):
        typer.echo(json.dumps(match.to_dict(), ensure_ascii=False, sort_keys=True))


def _load_config_or_exit(path: Path | None) -> ParserConfig:
    try:
        return load_config(path)
    except ValueError as exc:
        typer.echo(f"ERROR: {exc}")
        raise typer.Exit(code=2) from exc


def _parse_or_exit(html: Path, parser: HydrationParser) -> list[DecodedChunk]:
    try:
        document = read_document(html)
    except OSError as exc:
        typer.echo(f"ERROR: cannot read {html}: {exc}")
        raise typer.Exit(code=1) from exc

    try:
        return parser.parse(document)
    except Exception as exc:  # noqa: BLE001
        typer.echo(f"ERROR: {type(exc).__name__}: {exc}")
        raise typer.Exit(code=1) from exc


def main() -> None:
    """Poetry script entrypoint."""

    app()


if __name__ == "__main__":
    main()
