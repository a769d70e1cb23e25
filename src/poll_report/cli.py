"""Command-line interface for poll-report."""

from __future__ import annotations

import json
import sys
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path

import click

from .errors import ReportError
from .fonts import load_resources
from .log import setup_logging
from .models import DEFAULT_ANSWER_FILTERS, Language, ReportFilters, ReportRequest, VoteRecord
from .report.composer import compose, suggest_filename
from .sanitize import sanitize, sanitize_date
from .settings import PAGE_SIZES, Settings


def _matches(vote: dict, answer: str | None, search: str | None) -> bool:
    if answer and answer not in DEFAULT_ANSWER_FILTERS and vote.get("answer") != answer:
        return False
    if search:
        needle = search.casefold()
        fields = (vote.get("name"), vote.get("phone"))
        if not any(isinstance(f, str) and needle in f.casefold() for f in fields):
            return False
    return True


def _created_key(vote: dict) -> datetime:
    # Unparseable dates sort last instead of taking the current time
    epoch = datetime.min.replace(tzinfo=timezone.utc)
    ts = sanitize_date(vote.get("createdAt", vote.get("created_at")), now=epoch)
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


def build_request(
    votes: list[dict],
    language: str,
    answer: str | None = None,
    search: str | None = None,
) -> ReportRequest:
    """Filter and order raw votes newest-first, the way the export route does."""
    search = sanitize(search, "search") if search else None
    selected = [v for v in votes if isinstance(v, dict) and _matches(v, answer, search)]
    selected.sort(key=_created_key, reverse=True)
    return ReportRequest(
        language=language,
        records=tuple(VoteRecord.from_dict(v) for v in selected),
        filters=ReportFilters(answer=answer, search=search),
        total_count=len(votes),
        filtered_count=len(selected),
    )


def _load_input(path: str) -> object:
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        click.echo(f"Error: cannot read {path}: {exc}", err=True)
        sys.exit(2)


@click.group()
def main() -> None:
    """Render bilingual PDF reports of poll results."""


@main.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", default=None, type=click.Path(), help="PDF path (default: a dated name in the current directory).")
@click.option("--language", "-l", type=click.Choice([lang.value for lang in Language]), default=None, help="Report language (default: en, or the payload's).")
@click.option("--answer", default=None, help="Only include votes with this answer (Yes, No, all).")
@click.option("--search", default=None, help="Only include votes whose name or phone contains this text.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.option("--log-file", default=None, type=click.Path(), help="Also write log output to this file.")
def render(
    input_path: str,
    output: str | None,
    language: str | None,
    answer: str | None,
    search: str | None,
    verbose: bool,
    log_file: str | None,
) -> None:
    """Render INPUT_PATH (a JSON vote list or report request) to PDF."""
    setup_logging(verbose=verbose, log_file=log_file)
    settings = Settings.load()

    payload = _load_input(input_path)
    if isinstance(payload, list):
        request = build_request(payload, language or Language.EN.value, answer, search)
    elif isinstance(payload, dict):
        if language:
            payload = {**payload, "language": language}
        request = ReportRequest.from_dict(payload)
    else:
        click.echo("Error: input must be a JSON list of votes or a report request object", err=True)
        sys.exit(2)

    try:
        resources = load_resources(settings)
        result = compose(request, resources, settings)
    except ReportError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    out = Path(output) if output else Path(suggest_filename(request))
    try:
        out.write_bytes(result.data)
    except OSError as exc:
        click.echo(f"Error: cannot write {out}: {exc}", err=True)
        sys.exit(2)
    click.echo(f"PDF report saved to {out} ({result.page_count} pages, {result.byte_size} bytes)", err=True)


@main.command()
@click.option("--rtl-font", default=None, type=click.Path(dir_okay=False), help="TrueType/OpenType font used for Arabic text.")
@click.option("--page-size", type=click.Choice(sorted(PAGE_SIZES)), default=None)
@click.option("--repeat-header/--no-repeat-header", default=None, help="Repeat the table header on continuation pages.")
@click.option("--max-table-rows", type=click.IntRange(min=1), default=None)
@click.option("--show", is_flag=True, help="Print the effective settings.")
def config(
    rtl_font: str | None,
    page_size: str | None,
    repeat_header: bool | None,
    max_table_rows: int | None,
    show: bool,
) -> None:
    """Show or change persistent settings."""
    settings = Settings.load()
    changed = False
    if rtl_font is not None:
        settings.rtl_font_path = rtl_font
        changed = True
    if page_size is not None:
        settings.page_size = page_size
        changed = True
    if repeat_header is not None:
        settings.repeat_table_header = repeat_header
        changed = True
    if max_table_rows is not None:
        settings.max_table_rows = max_table_rows
        changed = True
    if changed:
        settings.save()
    if show or not changed:
        click.echo(json.dumps(asdict(settings), indent=2, ensure_ascii=False))
