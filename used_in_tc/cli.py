"""Typer-based CLI: find the test cases that use a code pattern."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Optional

import typer

from . import __version__
from .config_manager import ConfigError, Settings, load_settings
from .logging_setup import setup_logging
from .models import format_test_cases
from .report import write_report
from .scanner import RepositoryScanner
from .search_terms import InvalidSearchTermError, SearchTerm, make_term
from .styles import console, print_file_result
from .tracer import trace_usages
from .work_items import WorkItemsError, format_work_items, load_work_items

app = typer.Typer(
    help="🔎 used-in-tc — find the test cases that exercise a code pattern.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"used-in-tc v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    )
):
    """Trace code patterns up the call graph into test cases."""
    pass


def _load_settings(config_file: Optional[Path]) -> Settings:
    try:
        return load_settings(config_file)
    except ConfigError as exc:
        console.print(f"✗ {exc}", style="error", markup=False)
        raise typer.Exit(1)


def _make_term(pattern: str, use_regex: bool) -> SearchTerm:
    try:
        return make_term(pattern, use_regex)
    except InvalidSearchTermError as exc:
        raise typer.BadParameter(str(exc), param_hint="PATTERN")


def _scanner(settings: Settings, file_type: Optional[str], workers: Optional[int]) -> RepositoryScanner:
    try:
        return settings.scanner(file_type, workers)
    except ValueError as exc:
        console.print(f"✗ {exc}", style="error", markup=False)
        raise typer.Exit(1)


@app.command("search")
def search(
    pattern: str = typer.Argument(..., help="Pattern to search for."),
    directory: Path = typer.Argument(..., exists=True, file_okay=False, help="Directory to search in."),
    use_regex: bool = typer.Option(False, "--regex", "-r", help="Treat PATTERN as a regular expression."),
    file_type: Optional[str] = typer.Option(None, "--type", "-t", help="File type to search (i.e. '.py')."),
    distance: Optional[int] = typer.Option(None, "--dist", "-d", help="Levels of recursive search."),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", help="Number of scanner threads."),
    log_file: Optional[Path] = typer.Option(None, "--log", "-l", help="Log filename."),
    out_file: Optional[Path] = typer.Option(None, "--out", "-o", help="Output xml filename."),
    template: Optional[Path] = typer.Option(None, "--template", exists=True, dir_okay=False, help="Report template."),
    work_items_file: Optional[Path] = typer.Option(
        None, "--work-items", "-p", exists=True, dir_okay=False, help="Polarion work items export."
    ),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.toml."),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Debug logging."),
):
    """🔎 Find test cases that use PATTERN, following enclosing methods.

    Example:
      used-in-tc search "self.heater.set_disconnected" ./repo
      used-in-tc search -r "\\.set_(dis)?connected" ./repo --dist 3
    """
    settings = _load_settings(config_file)
    setup_logging(log_file or Path(settings.log_file), verbose=verbose)

    term = _make_term(pattern, use_regex)
    scanner = _scanner(settings, file_type, workers)
    depth = settings.depth if distance is None else distance

    work_items = None
    if work_items_file is not None:
        try:
            work_items = load_work_items(work_items_file)
        except WorkItemsError as exc:
            console.print(f"✗ {exc}", style="error", markup=False)
            raise typer.Exit(1)

    start = time.perf_counter()
    console.print(
        f"Searching for: R({use_regex}) |{term}| ({scanner.file_type}) {directory} D({depth})",
        style="important",
        markup=False,
    )

    test_cases = trace_usages(directory, term, depth, scanner=scanner, on_result=print_file_result)

    template_text = None
    template_path = template or (Path(settings.template) if settings.template else None)
    if template_path is not None:
        template_text = template_path.read_text(encoding="utf-8")

    out_path = write_report(
        out_file or Path(settings.out_file),
        term.text,
        test_cases,
        template=template_text,
        work_items=work_items,
        approved_statuses=settings.approved_statuses,
        project_id=settings.project_id,
        script_url=settings.script_url,
        directory=settings.directory,
    )

    console.print()
    console.print(f"Search results for: {term}", style="important", markup=False)
    console.print(f"Used in test cases ({len(test_cases)}):", style="info")
    console.print(format_test_cases(test_cases), style="info", markup=False)
    console.print(f"TC Xml created successfully: {out_path}", style="important", markup=False)
    console.print(f"Elapsed time {time.perf_counter() - start:.2f}s")


@app.command("scan")
def scan(
    pattern: str = typer.Argument(..., help="Pattern to search for."),
    directory: Path = typer.Argument(..., exists=True, file_okay=False, help="Directory to search in."),
    use_regex: bool = typer.Option(False, "--regex", "-r", help="Treat PATTERN as a regular expression."),
    file_type: Optional[str] = typer.Option(None, "--type", "-t", help="File type to search (i.e. '.py')."),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", help="Number of scanner threads."),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.toml."),
):
    """📄 List direct matches of PATTERN without following methods."""
    settings = _load_settings(config_file)
    term = _make_term(pattern, use_regex)
    scanner = _scanner(settings, file_type, workers)

    results = sorted(scanner.scan(directory, term), key=lambda r: r.file_path)
    if not results:
        console.print(f"No matches for {term}", style="warning", markup=False)
        return

    for result in results:
        print_file_result(result)
        if result.is_test_case:
            console.print(f"  TC: {result.test_case_id or '?'}", style="info", markup=False)
    total = sum(len(r.matches) for r in results)
    console.print(f"{total} matches in {len(results)} files", style="important")


@app.command("work-items")
def work_items(
    export_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Polarion work items export."),
):
    """📋 List the work items of a Polarion export."""
    try:
        items = load_work_items(export_file)
    except WorkItemsError as exc:
        console.print(f"✗ {exc}", style="error", markup=False)
        raise typer.Exit(1)

    if not items:
        console.print("No work items found.", style="warning")
        return
    console.print(format_work_items(items), markup=False, end="")
    invalid = [item.id for item in items.values() if not item.valid()]
    if invalid:
        console.print(f"Incomplete work items: {', '.join(invalid)}", style="warning", markup=False)
