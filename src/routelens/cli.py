from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from routelens.constants import DEFAULT_EXCLUDE_PATTERNS, DEFAULT_INCLUDE_PATTERNS
from routelens.domain.models import ParseOutcome, RouteDescriptor
from routelens.orchestrator.dispatch import RouteDispatcher
from routelens.orchestrator.pipeline import run_scan
from routelens.repo.scanner import read_source

app = typer.Typer(no_args_is_help=True, add_completion=False)

console = Console()

_FORMATS = ("table", "json")
_FRAMEWORKS = ("express", "nestjs")


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _check_format(format: str) -> str:
    fmt = format.lower().strip()
    if fmt not in _FORMATS:
        raise typer.BadParameter(f"format must be one of: {', '.join(_FORMATS)}")
    return fmt


def _routes_table(routes: Iterable[RouteDescriptor]) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("METHOD", no_wrap=True)
    table.add_column("PATH")
    table.add_column("HANDLER")
    table.add_column("MIDDLEWARE")
    table.add_column("CONTROLLER")
    table.add_column("FILE:LINE", no_wrap=True)
    table.add_column("FRAMEWORK", no_wrap=True)

    for r in routes:
        loc = r.source_location
        table.add_row(
            r.method,
            r.path,
            r.handler,
            ", ".join(r.middleware or ()),
            r.controller or "",
            f"{loc.file_path}:{loc.line}",
            r.framework,
        )
    return table


def _print_errors(outcomes: dict[str, ParseOutcome]) -> None:
    for file_path, outcome in outcomes.items():
        for err in outcome.errors:
            console.print(f"[yellow]{file_path}:{err.line}:{err.column}[/yellow] {err.message}")


def _payload(outcomes: dict[str, ParseOutcome]) -> dict:
    return {
        "routes": [r.to_record() for o in outcomes.values() for r in o.routes],
        "errors": {
            p: [e.model_dump(mode="json") for e in o.errors]
            for p, o in outcomes.items()
            if o.errors
        },
    }


@app.command()
def scan(
    repo: str = typer.Argument(..., help="Path to the project to scan"),
    include: Optional[List[str]] = typer.Option(None, help="Include glob (repeatable)"),
    exclude: Optional[List[str]] = typer.Option(None, help="Exclude glob (repeatable)"),
    framework: Optional[List[str]] = typer.Option(None, help="Restrict to express|nestjs (repeatable)"),
    format: str = typer.Option("table", help="Output format: table|json"),
    out: Optional[str] = typer.Option(None, help="Output path for json (default: print to stdout)"),
    max_files: Optional[int] = typer.Option(None, help="Limit scanned files (debug)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log diagnostics"),
) -> None:
    _setup_logging(verbose)
    fmt = _check_format(format)

    repo_path = Path(repo).expanduser().resolve()
    if not repo_path.exists():
        raise typer.BadParameter(f"Repo path does not exist: {repo_path}")
    if not repo_path.is_dir():
        raise typer.BadParameter(f"Repo path is not a directory: {repo_path}")
    for fw in framework or ():
        if fw not in _FRAMEWORKS:
            raise typer.BadParameter(f"framework must be one of: {', '.join(_FRAMEWORKS)}")

    result = run_scan(
        repo_path,
        include=include or DEFAULT_INCLUDE_PATTERNS,
        exclude=exclude if exclude is not None else DEFAULT_EXCLUDE_PATTERNS,
        frameworks=framework,
        max_files=max_files,
    )

    if fmt == "json":
        text = json.dumps(_payload(result.outcomes), indent=2)
        if out:
            out_path = Path(out).expanduser()
            out_path.parent.mkdir(parents=True, exist_ok=True)
            out_path.write_text(text, encoding="utf-8")
            console.print(f"[bold green]Wrote[/bold green] {len(result.routes)} routes to: {out_path}")
        else:
            console.print_json(text)
        return

    console.print(f"[bold green]routelens[/bold green] scan: {repo_path}")
    console.print(f"Files scanned: {result.files_scanned}")
    console.print(f"Routes found: [bold]{len(result.routes)}[/bold]")
    if result.routes:
        console.print(_routes_table(result.routes))
    if result.failed_files:
        console.print("")
        console.print(f"[bold]Files with errors:[/bold] {len(result.failed_files)}")
        _print_errors(result.failed_files)


@app.command()
def parse(
    file: str = typer.Argument(..., help="JS/TS file to parse"),
    format: str = typer.Option("table", help="Output format: table|json"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log diagnostics"),
) -> None:
    _setup_logging(verbose)
    fmt = _check_format(format)

    path = Path(file).expanduser().resolve()
    if not path.is_file():
        raise typer.BadParameter(f"Not a file: {path}")
    text = read_source(str(path))
    if text is None:
        raise typer.BadParameter(f"Cannot read: {path}")

    outcome = RouteDispatcher().dispatch(text, str(path))
    outcomes = {str(path): outcome}

    if fmt == "json":
        console.print_json(json.dumps({"framework": outcome.framework, **_payload(outcomes)}))
        return

    console.print(f"Framework: [bold]{outcome.framework}[/bold]")
    console.print(f"Routes found: [bold]{len(outcome.routes)}[/bold]")
    if outcome.routes:
        console.print(_routes_table(outcome.routes))
    _print_errors(outcomes)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
