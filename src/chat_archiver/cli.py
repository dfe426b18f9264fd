"""CLI entry point for chat archiver."""

import logging
from pathlib import Path

import click
from rich.logging import RichHandler

from .batch import run_conversion
from .config import (
    DEFAULT_INPUT_FILE,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_REPORT_FILE,
    DEFAULT_SCHEMA_FILE,
    AnalyzerConfig,
    ConverterConfig,
)
from .exceptions import ArchiverError, InputFileError
from .reports import (
    console,
    print_analysis_report,
    print_conversion_help,
    print_conversion_summary,
    print_schema_diff,
)
from .stats import analyze_export, write_report


def setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Show progress log messages")
@click.pass_context
def cli(ctx, verbose):
    """Archive your Claude.ai conversation exports as Markdown."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_logging(verbose)


@cli.command()
@click.option(
    "-i",
    "--input",
    "input_file",
    type=click.Path(),
    default=str(DEFAULT_INPUT_FILE),
    envvar="CHAT_ARCHIVER_INPUT",
    show_default=True,
    help="Exported conversations JSON file",
)
@click.option(
    "-o",
    "--output-dir",
    type=click.Path(file_okay=False),
    default=str(DEFAULT_OUTPUT_DIR),
    envvar="CHAT_ARCHIVER_OUTPUT_DIR",
    show_default=True,
    help="Directory for Markdown files",
)
@click.option(
    "--schema-file",
    type=click.Path(dir_okay=False),
    default=str(DEFAULT_SCHEMA_FILE),
    envvar="CHAT_ARCHIVER_SCHEMA_FILE",
    show_default=True,
    help="Where the JSON structure is tracked between runs",
)
@click.option("--strict", is_flag=True, help="Exit non-zero if any conversation fails")
@click.pass_context
def convert(ctx, input_file, output_dir, schema_file, strict):
    """Convert every conversation in the export to a Markdown file."""
    config = ConverterConfig(
        input_file=Path(input_file),
        output_dir=Path(output_dir),
        schema_file=Path(schema_file),
    )

    console.print("[bold]Claude Conversations Converter[/bold]\n")
    console.print(f"[cyan]Reading {config.input_file}...[/cyan]")

    def on_record(index, document, error):
        if document is not None:
            note = f" ({document.attachment_count} attachments)" if document.attachment_count else ""
            console.print(f"[green]✓[/green] {document.filename}{note}")
        else:
            console.print(f"[red]✗ Error processing conversation {index + 1}: {error}[/red]")

    try:
        summary = run_conversion(config, on_record=on_record)
    except ArchiverError as e:
        console.print(f"[red]Fatal error: {e.message}[/red]")
        print_conversion_help()
        ctx.exit(1)

    print_schema_diff(summary.schema_diff, config.schema_file)
    console.print()
    print_conversion_summary(summary, config)
    console.print("\n[green]Conversion complete![/green]")

    if strict and summary.error_count:
        ctx.exit(1)


@cli.command()
@click.argument("json_file", type=click.Path(), required=False)
@click.option(
    "--report",
    type=click.Path(dir_okay=False),
    default=str(DEFAULT_REPORT_FILE),
    envvar="CHAT_ARCHIVER_REPORT",
    show_default=True,
    help="Where to save the detailed JSON report",
)
@click.pass_context
def analyze(ctx, json_file, report):
    """Analyze an export's structure and content without converting it."""
    if not json_file:
        console.print("Claude Export Analyzer")
        console.print("Usage: chat-archiver analyze <conversations.json>")
        console.print()
        console.print("Examples:")
        console.print("  chat-archiver analyze conversations.json")
        console.print("  chat-archiver analyze /path/to/my_export.json")
        console.print()
        console.print("This tool analyzes Claude conversation exports to understand")
        console.print("their structure, content, and conversion opportunities.")
        ctx.exit(1)

    config = AnalyzerConfig(report_file=Path(report))
    console.print(f"[cyan]Analyzing file: {json_file}[/cyan]")

    try:
        results = analyze_export(Path(json_file), config)
    except ArchiverError as e:
        console.print(f"[red]Analysis failed: {e.message}[/red]")
        if isinstance(e, InputFileError) and "JSON" in e.message:
            console.print("\n[bold]Troubleshooting:[/bold]")
            console.print("- Verify the file is valid JSON")
            console.print("- Check for file corruption")
            console.print("- Ensure the file is a Claude conversation export")
        ctx.exit(1)

    console.print(f"File size: {results['file_info']['size_formatted']}")
    print_analysis_report(results)

    try:
        write_report(results, config.report_file)
    except OSError as e:
        console.print(f"[red]Could not save report to {config.report_file}: {e}[/red]")
        ctx.exit(1)

    console.print(f"\n[green]Detailed analysis saved to: {config.report_file}[/green]")


if __name__ == "__main__":
    cli()
