"""CLI entrypoints for mdmirror."""

import logging
import shutil
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .config import Config, ConfigError, load_config
from .paths import PathMappingError
from .pipeline import build_site
from .reporting import BuildReport, write_report

console = Console()
app = typer.Typer(help="Convert a tree of Markdown files into a mirrored tree of HTML pages.")

ConfigPathOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Path to mdmirror.yml or a directory containing it (default: current directory).",
    ),
]
InputOption = Annotated[
    Path | None,
    typer.Option("--input", "-i", help="Directory scanned for Markdown sources."),
]
OutputOption = Annotated[
    Path | None,
    typer.Option("--output", "-o", help="Directory receiving the generated HTML tree."),
]
VerboseFlag = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Log every file processed."),
]


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"mdmirror {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show the installed version and exit.",
        ),
    ] = False,
) -> None:
    """Convert a tree of Markdown files into a mirrored tree of HTML pages."""


@app.command()
def build(
    config_path: ConfigPathOption = None,
    input_dir: InputOption = None,
    output_dir: OutputOption = None,
    report_path: Annotated[
        Path | None,
        typer.Option("--report", help="Write a JSON build report to this path."),
    ] = None,
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Exit with an error when any page or asset was skipped."),
    ] = False,
    verbose: VerboseFlag = False,
) -> None:
    """Render every Markdown file and copy manifest assets."""
    _configure_logging(verbose)
    config = _load(config_path, input_dir=input_dir, output_dir=output_dir)

    try:
        report = build_site(config)
    except ConfigError as exc:
        console.print(f"[bold red]Configuration error[/]: {exc}")
        raise typer.Exit(code=1) from exc
    except PathMappingError as exc:
        console.print(f"[bold red]Path mapping failed[/]: {exc}")
        raise typer.Exit(code=1) from exc

    _print_summary(report)

    if report_path is not None:
        try:
            target = write_report(report, report_path)
        except OSError as exc:
            console.print(f"[bold red]Failed to write report[/]: {exc}")
            raise typer.Exit(code=1) from exc
        console.print(f"[bold green]Report written[/]: {_display_path(target)}")

    if strict and report.warnings:
        raise typer.Exit(code=1)


@app.command()
def clean(
    config_path: ConfigPathOption = None,
    input_dir: InputOption = None,
    output_dir: OutputOption = None,
) -> None:
    """Remove the generated output directory."""
    config = _load(config_path, input_dir=input_dir, output_dir=output_dir)
    target = config.output_dir.resolve()
    input_root = config.input_dir.resolve()
    if input_root.is_relative_to(target):
        console.print(f"[bold red]Refusing to remove a directory holding the sources[/]: {target}")
        raise typer.Exit(code=1)
    if not target.exists():
        console.print(f"[bold yellow]Skipping[/]: output ({_display_path(target)}) not found")
        return
    shutil.rmtree(target)
    console.print(f"[bold green]Removed[/]: {_display_path(target)}")


def _print_summary(report: BuildReport) -> None:
    console.print(
        "[bold green]Pages[/]: "
        f"{report.pages_written} written, {report.pages_skipped} skipped "
        f"into {_display_path(report.output_dir)}"
    )
    console.print(
        "[bold green]Assets[/]: "
        f"{report.assets_copied} copied, {report.assets_skipped} skipped"
    )
    if report.warnings:
        console.print("[bold yellow]Warnings:[/]")
        for warning in report.warnings:
            console.print(f"- {warning}")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load(config_path: Path | None, **overrides: Path | None) -> Config:
    try:
        return load_config(config_path, **overrides)
    except FileNotFoundError as exc:
        raise typer.BadParameter(f"Config file not found: {config_path}") from exc
    except ConfigError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _display_path(path: Path) -> str:
    try:
        return path.relative_to(Path.cwd()).as_posix()
    except ValueError:
        return path.as_posix()
