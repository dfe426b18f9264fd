"""Console output for conversion runs and export analysis."""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import ConverterConfig
from .models import ConversionSummary, SchemaDiff

console = Console()


def print_schema_diff(diff: SchemaDiff, schema_file):
    """Print how the export's structure compares to the previous run."""
    if diff.status == "first_run":
        console.print("[cyan]First run - saving current JSON structure for future comparison[/cyan]")
    elif diff.status == "unchanged":
        console.print("[green]JSON structure unchanged since last run[/green]")
    else:
        lines = []
        if diff.added:
            lines.append("[bold]New keys found:[/bold]")
            lines.extend(f"  [green]+ {key}[/green]" for key in diff.added)
        if diff.removed:
            lines.append("[bold]Keys no longer present:[/bold]")
            lines.extend(f"  [red]- {key}[/red]" for key in diff.removed)
        lines.append("")
        lines.append("This might mean:")
        lines.append("  - Anthropic added new features to the export")
        lines.append("  - The export format changed")
        lines.append("  - The converter might need updates")
        console.print(Panel("\n".join(lines), title="JSON STRUCTURE HAS CHANGED", border_style="yellow"))

    if diff.saved:
        console.print(f"[dim]Schema saved to {schema_file}[/dim]")


def print_conversion_summary(summary: ConversionSummary, config: ConverterConfig):
    """Print totals at the end of a conversion run."""
    table = Table(title="Conversion Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Successfully converted", f"{summary.success_count} conversations")
    table.add_row("Extracted attachments", f"{summary.attachment_count} files")
    if summary.error_count:
        table.add_row("Failed to convert", f"[red]{summary.error_count} conversations[/red]")
    table.add_row("Output directory", str(config.output_dir))
    table.add_row("Schema tracking", str(config.schema_file))

    console.print(table)


def print_conversion_help():
    """Remediation hints after a fatal conversion error."""
    console.print("\n[bold]Usage Instructions:[/bold]")
    console.print("1. Place your exported conversations.json file in the current directory (or pass --input)")
    console.print("2. Run: chat-archiver convert")
    console.print("3. Find your converted files in the output directory")
    console.print("\n[bold]Troubleshooting:[/bold]")
    console.print("- Ensure conversations.json is valid JSON")
    console.print("- Check file permissions in the current directory")
    console.print("- Make sure the output directory path is not an existing file")


def _frequency_table(title: str, label: str, counts: dict[str, int]) -> Table:
    table = Table(title=title)
    table.add_column(label, style="cyan")
    table.add_column("Count", style="green", justify="right")
    for key, count in counts.items():
        table.add_row(key, str(count))
    return table


def print_analysis_report(results: dict):
    """Print the analyzer's findings as tables."""
    basic = results["basic"]
    attachments = results["attachments"]
    artifacts = results["artifacts"]
    schema = results["schema"]
    assessment = results["conversion_assessment"]

    console.print()
    console.print(Panel("[bold cyan]CLAUDE EXPORT ANALYSIS REPORT[/bold cyan]"))

    table = Table(title="Basic Statistics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Conversations", str(basic["total_conversations"]))
    table.add_row("Total Messages", str(basic["total_messages"]))
    table.add_row("Avg Messages/Conversation", str(basic["avg_messages_per_conversation"]))
    table.add_row("Named Conversations", str(basic["named_conversations"]))
    table.add_row("Unnamed Conversations", str(basic["unnamed_conversations"]))
    table.add_row("With Summary", str(basic["conversations_with_summary"]))
    if basic["date_range"]:
        date_range = basic["date_range"]
        table.add_row("Date Range", f"{date_range['earliest']} to {date_range['latest']}")
        table.add_row("Span", f"{date_range['span_days']} days")
    console.print(table)

    table = Table(title="Attachments")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")
    table.add_row("Total Attachments", str(attachments["total_attachments"]))
    table.add_row("Conversations with Attachments", str(attachments["conversations_with_attachments"]))
    table.add_row("Messages with Attachments", str(attachments["messages_with_attachments"]))
    table.add_row("Total Size", f"{attachments['attachment_sizes']['total_bytes']:,} bytes")
    console.print(table)
    if attachments["attachment_types"]:
        console.print(_frequency_table("Attachment Types", "Type", attachments["attachment_types"]))

    table = Table(title="Artifacts & Content")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")
    table.add_row("Potential Artifacts", str(artifacts["potential_artifacts"]))
    table.add_row("Artifact Tool Calls", str(artifacts["tool_artifacts"]))
    table.add_row("Code Blocks", str(artifacts["code_blocks_found"]))
    table.add_row("Long Content Blocks", str(artifacts["long_content_blocks"]))
    console.print(table)
    if artifacts["content_types"]:
        console.print(_frequency_table("Content Types", "Type", artifacts["content_types"]))

    table = Table(title="Schema Analysis")
    table.add_column("Level", style="cyan")
    table.add_column("Fields", style="green", justify="right")
    table.add_row("Conversation", str(len(schema["conversation_fields"])))
    table.add_row("Message", str(len(schema["message_fields"])))
    table.add_row("Content", str(len(schema["content_fields"])))
    table.add_row("Attachment", str(len(schema["attachment_fields"])))
    table.add_row("Account", str(len(schema["account_fields"])))
    table.add_row("Total Unique", str(schema["total_unique_fields"]))
    table.add_row("Key Paths", str(len(schema["key_paths"])))
    console.print(table)

    console.print(f"\n[bold]Conversion Readiness:[/bold] {assessment['conversion_feasibility']}")
    console.print(f"  Estimated Output Files: {assessment['estimated_output_files']}")
    for issue in assessment["potential_issues"]:
        console.print(f"  [yellow]⚠ {issue}[/yellow]")
    for opportunity in assessment["opportunities"]:
        console.print(f"  [green]💡 {opportunity}[/green]")
    for recommendation in assessment["recommendations"]:
        console.print(f"  [cyan]🔧 {recommendation}[/cyan]")
