#!/usr/bin/env python3
"""
PDF Toolbox - CLI Interface

Merge, split, compress and extract text from PDFs, and count words.

Usage:
    pdftoolbox merge a.pdf b.pdf --output merged.pdf
    pdftoolbox split input.pdf
    pdftoolbox compress input.pdf -o smaller.pdf
    pdftoolbox extract-text input.pdf
    pdftoolbox stats "Some text to count."
    pdftoolbox stats --pdf input.pdf
"""

import json
import logging
import sys
from pathlib import Path
from typing import Callable, Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    BarColumn,
    TaskProgressColumn,
)
from rich.table import Table
from rich.traceback import Traceback

from pdftoolbox import (
    ErrorReporter,
    PDFAnalyzer,
    PipelineResult,
    SourceFile,
    compress_pdf,
    extract_text,
    merge_pdfs,
    pdf_text_stats,
    run_stats,
    split_pdf,
)
from pdftoolbox.utils import format_size, get_output_path

console = Console()
err_console = Console(stderr=True)


class ConsoleErrorReporter(ErrorReporter):
    """Prints pipeline failures to the terminal."""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def report(self, operation: str, error: BaseException) -> None:
        err_console.print(f"[red]{operation} failed: {error}[/red]")
        if self.verbose:
            err_console.print(Traceback.from_exception(type(error), error, error.__traceback__))


def configure_logging(verbose: bool):
    """Route library logging through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def create_progress_bar():
    """Create a rich progress bar."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
    )


def run_pipeline(
    pipeline: Callable[..., PipelineResult],
    source,
    json_output: bool,
    verbose: bool,
) -> PipelineResult:
    """Run a pipeline with a progress bar unless JSON output was requested."""
    reporter = ConsoleErrorReporter(verbose)

    if json_output:
        return pipeline(source, error_reporter=reporter)

    with create_progress_bar() as progress:
        task = progress.add_task("Starting...", total=100)

        def progress_callback(stage: str, percentage: int):
            progress.update(task, description=stage, completed=percentage)

        return pipeline(source, progress_callback=progress_callback, error_reporter=reporter)


def write_result(
    result: PipelineResult,
    output: Optional[str],
    json_output: bool,
):
    """Save the artifact and print a summary, or exit 1 on failure."""
    output_path = None
    if result.success and result.artifact is not None:
        output_path = get_output_path(output, result.artifact.filename)
        output_path.write_bytes(result.artifact.data)

    if json_output:
        payload = result.to_dict()
        payload["output_path"] = str(output_path) if output_path else None
        click.echo(json.dumps(payload, indent=2))
        if not result.success:
            sys.exit(1)
        return

    if not result.success:
        console.print(f"\n[bold red]Error: {result.error}[/bold red]")
        sys.exit(1)

    table = Table(title=f"{result.operation.capitalize()} Results")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Input Size", format_size(result.original_size))
    table.add_row("Output Size", format_size(result.output_size))
    table.add_row("Pages Processed", str(result.pages_processed))
    for key, value in result.details.items():
        if isinstance(value, list):
            value = ", ".join(str(v) for v in value)
        table.add_row(key.replace("_", " ").title(), str(value))

    console.print(table)
    if output_path:
        console.print(f"\n[bold green]Saved to: {output_path}[/bold green]")


def load_source(input_file: str) -> SourceFile:
    return SourceFile.from_path(input_file)


def print_stats(stats: dict, json_output: bool):
    if json_output:
        click.echo(json.dumps(stats, indent=2))
        return

    table = Table(title="Text Statistics")
    table.add_column("Metric", style="cyan")
    table.add_column("Count", style="green")
    for key, value in stats.items():
        table.add_row(key.title(), f"{value:,}")
    console.print(table)


@click.group(invoke_without_command=True)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output",
)
@click.pass_context
def cli(ctx, verbose: bool):
    """PDF Toolbox - Merge, split, compress and read PDFs."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


json_option = click.option(
    "--json-output", "-j",
    is_flag=True,
    help="Output results as JSON",
)


@cli.command()
@click.argument("input_files", nargs=-1, type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output", "-o",
    type=click.Path(),
    help="Output file path (default: merged_by_pdftoolbox.pdf)",
)
@json_option
@click.pass_context
def merge(ctx, input_files: tuple, output: Optional[str], json_output: bool):
    """Merge PDF files in the order given."""
    if len(input_files) < 2:
        console.print("[red]At least two PDF files are required to merge[/red]")
        sys.exit(1)

    sources = [load_source(f) for f in input_files]
    result = run_pipeline(merge_pdfs, sources, json_output, ctx.obj["verbose"])
    write_result(result, output, json_output)


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output", "-o",
    type=click.Path(),
    help="Output zip path (default: split_pdf_bundle.zip)",
)
@json_option
@click.pass_context
def split(ctx, input_file: str, output: Optional[str], json_output: bool):
    """Split a PDF into one document per page, bundled as a zip."""
    result = run_pipeline(split_pdf, load_source(input_file), json_output, ctx.obj["verbose"])
    write_result(result, output, json_output)


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output", "-o",
    type=click.Path(),
    help="Output file path (default: compressed_file.pdf)",
)
@json_option
@click.pass_context
def compress(ctx, input_file: str, output: Optional[str], json_output: bool):
    """Re-save a PDF with object streams to reduce its size."""
    result = run_pipeline(compress_pdf, load_source(input_file), json_output, ctx.obj["verbose"])
    write_result(result, output, json_output)


@cli.command("extract-text")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output", "-o",
    type=click.Path(),
    help="Output text file path (default: extracted_text.txt)",
)
@json_option
@click.pass_context
def extract_text_cmd(ctx, input_file: str, output: Optional[str], json_output: bool):
    """Extract text from a PDF file."""
    result = run_pipeline(extract_text, load_source(input_file), json_output, ctx.obj["verbose"])
    write_result(result, output, json_output)


@cli.command()
@click.argument("text", required=False)
@click.option(
    "--pdf",
    "pdf_file",
    type=click.Path(exists=True, dir_okay=False),
    help="Count the text of a PDF instead",
)
@json_option
@click.pass_context
def stats(ctx, text: Optional[str], pdf_file: Optional[str], json_output: bool):
    """Count words, characters, sentences and paragraphs.

    Reads TEXT, or standard input when TEXT is omitted.
    """
    if pdf_file:
        result = run_pipeline(pdf_text_stats, load_source(pdf_file), json_output, ctx.obj["verbose"])
        if not result.success:
            console.print(f"[red]Error: {result.error}[/red]")
            sys.exit(1)
        print_stats(result.details["statistics"], json_output)
        return

    if text is None:
        text = sys.stdin.read()

    print_stats(run_stats(text).to_dict(), json_output)


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@json_option
def info(input_file: str, json_output: bool):
    """Show page count and basic facts about a PDF."""
    input_path = Path(input_file)
    result = PDFAnalyzer(load_source(input_file)).analyze()

    if json_output:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.error:
            sys.exit(1)
        return

    if result.error:
        console.print(f"[red]Error: {result.error}[/red]")
        sys.exit(1)

    table = Table(title=f"PDF Info: {input_path.name}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Size", format_size(result.file_size))
    table.add_row("Pages", str(result.page_count))
    table.add_row("Text Detected", "Yes" if result.has_text else "No")
    table.add_row("Embedded Fonts", "Yes" if result.has_embedded_fonts else "No")
    table.add_row("Metadata", "Yes" if result.has_metadata else "No")

    console.print(table)


@cli.command()
@click.option("--host", default="127.0.0.1", help="Interface to bind")
@click.option("--port", default=5000, type=int, help="Port to listen on")
@click.option("--debug", is_flag=True, help="Run Flask in debug mode")
def serve(host: str, port: int, debug: bool):
    """Run the web interface."""
    from web.app import app

    console.print(f"[bold blue]PDF Toolbox[/bold blue] on http://{host}:{port}")
    app.run(host=host, port=port, debug=debug)


def main():
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
