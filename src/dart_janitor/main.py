"""Dart Janitor CLI - find unused classes, methods, packages and assets in Flutter projects."""
from contextlib import nullcontext
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape
from rich.table import Table

from .analyzer.models import AnalysisReport
from .analyzer.project import analyze_project
from .config import __version__, get_config
from .utils.logger import configure_logging
from .utils.safe_console import SafeConsole

# sysexits.h codes, distinct from "ran fine, found nothing"
EXIT_USAGE = 64
EXIT_NO_INPUT = 66

app = typer.Typer(
    name="dart-janitor",
    help="Find dead classes, methods, packages and assets in a Flutter/Dart project",
    add_completion=False,
)
console = SafeConsole()
err_console = SafeConsole(stderr=True)


def _symbol_table(title: str, findings) -> Table:
    table = Table(title=title)
    table.add_column("Name", style="cyan")
    table.add_column("File", style="magenta", no_wrap=False)
    table.add_column("Line", style="green", justify="right")
    for finding in findings:
        table.add_row(escape(finding.name), escape(finding.file), str(finding.line))
    return table


def print_report(report: AnalysisReport, project_path: Path):
    """Render the report as Rich tables."""
    if report.unused_classes:
        console.print(_symbol_table("Unused Classes", report.unused_classes))
    if report.unused_methods:
        console.print(_symbol_table("Unused Methods/Functions", report.unused_methods))

    if report.unused_packages:
        table = Table(title="Unused Packages")
        table.add_column("Package", style="cyan")
        table.add_column("pubspec.yaml line", style="green", justify="right")
        for package in report.unused_packages:
            table.add_row(escape(package.name), str(package.line))
        console.print(table)

    if report.unused_assets:
        table = Table(title="Unused Assets")
        table.add_column("Asset Path", style="cyan", no_wrap=False)
        for asset in report.unused_assets:
            table.add_row(escape(asset.path))
        console.print(table)

    if report.is_clean:
        console.print("[bold green]✓ Your project is clean![/bold green]")
        return

    console.print(f"\n[bold yellow]Summary for[/bold yellow] {escape(str(project_path))}")
    console.print(f"  Unused classes:  {len(report.unused_classes)}")
    console.print(f"  Unused methods:  {len(report.unused_methods)}")
    console.print(f"  Unused packages: {len(report.unused_packages)}")
    console.print(f"  Unused assets:   {len(report.unused_assets)}")


@app.command()
def audit(
    project_path: Optional[str] = typer.Argument(None, help="Flutter/Dart project root to analyze"),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the JSON report to a file"),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", min=1, help="Worker threads for parsing"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log skipped files and progress"),
):
    """Scan a project and list unused classes, methods, packages and assets."""
    configure_logging(verbose=verbose)

    if not project_path:
        err_console.print("[bold red]Usage:[/bold red] dart-janitor audit <project_path>")
        raise typer.Exit(EXIT_USAGE)

    root = Path(project_path).absolute()
    if not root.is_dir():
        err_console.print(f"[bold red]Error:[/bold red] Directory not found: {escape(project_path)}")
        raise typer.Exit(EXIT_NO_INPUT)

    try:
        config = get_config()
    except ValueError as e:
        err_console.print(f"[bold red]Configuration error:[/bold red] {escape(str(e))}")
        raise typer.Exit(EXIT_USAGE)

    if not (root / config.code_dir).is_dir():
        err_console.print(
            f"[yellow]{escape(config.code_dir)}/ directory not found in {escape(str(root))}. "
            "Make sure the target directory is a Flutter/Dart project.[/yellow]"
        )

    if not as_json and output is None:
        console.print(f"[bold blue]Analyzing project:[/bold blue] {escape(str(root))}\n")

    with err_console.status("Analyzing Dart sources...") if not as_json else nullcontext():
        report = analyze_project(
            root,
            code_dir=config.code_dir,
            manifest_name=config.manifest_name,
            extra_callbacks=config.extra_callbacks,
            max_workers=workers or config.max_workers,
        )

    if output is not None:
        output.write_text(report.to_json() + "\n", encoding="utf-8")
        if not as_json:
            console.print(f"[green]✓ Report written to {escape(str(output))}[/green]")
    if as_json:
        typer.echo(report.to_json())
    elif output is None:
        print_report(report, root)


@app.command()
def version():
    """Print the Dart Janitor version."""
    typer.echo(__version__)


if __name__ == "__main__":
    app()
