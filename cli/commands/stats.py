"""
Stats command: copy-paste analysis, editing summary, contributors
"""

import json
from dataclasses import asdict
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from timeline.log import RawContribution
from timeline.query import (
    contributions_per_day,
    contributors,
    copy_paste_stats,
    detailed_copy_paste_info,
    editing_summary,
)

from ._render import format_timestamp
from ._source import load_timeline, source_option

console = Console()


def stats_command(
    source: Optional[str] = source_option(),
    top: int = typer.Option(5, "--top", "-t", help="Number of largest copy-paste insertions to list"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Analyze how the document was written.

    Examples:
        timeline stats
        timeline stats --top 10 --json
    """
    data, timeline = load_timeline(source, json_output)
    ops = timeline.ops

    paste = copy_paste_stats(ops)
    summary = editing_summary(ops)
    pasted = detailed_copy_paste_info(ops)[: max(top, 0)]
    people = contributors(data.user_contribution)
    daily = contributions_per_day(data.user_contribution)
    raw_contribution = isinstance(data.user_contribution, RawContribution)

    if json_output:
        output = {
            "copy_paste": asdict(paste),
            "summary": asdict(summary),
            "largest_copy_paste": [asdict(d) for d in pasted],
            "contributors": [asdict(c) for c in people],
            "contributions_per_day": [asdict(d) for d in daily],
            "contributions_available": not raw_contribution,
            "dropped_entries": data.dropped_entries,
        }
        print(json.dumps(output, indent=2))
        return

    console.print(
        f"This document was created over [bold]{summary.editing_days} day(s)[/bold] with "
        f"[bold]{summary.total_changes} changes[/bold], including {summary.insertions} insertions "
        f"and {summary.deletions} deletions."
    )

    table = Table(title="Editing Summary", show_header=False)
    table.add_column("Metric", style="green")
    table.add_column("Value", style="cyan", justify="right")
    table.add_row("Mass insertions", str(summary.mass_insertions))
    table.add_row("Copy-paste operations", str(summary.copy_paste_operations))
    table.add_row("Small edits", str(summary.small_edits))
    table.add_row("Avg insert size", str(round(summary.avg_insertion_size)))
    table.add_row("Avg delete size", str(round(summary.avg_deletion_size)))
    table.add_row("Copy-paste share", f"{paste.copy_paste_percentage:.1f}%")
    table.add_row("Largest copy-paste", f"{paste.largest_copy_paste} chars")
    console.print(table)

    if pasted:
        table = Table(title="Largest Copy-Paste Insertions")
        table.add_column("Author", style="yellow")
        table.add_column("Time", style="dim")
        table.add_column("Chars", style="cyan", justify="right")
        table.add_column("Text")
        for d in pasted:
            preview = d.text.replace("\n", " ")
            table.add_row(Text(d.author.name), format_timestamp(d.timestamp), str(d.length), Text(preview[:60]))
        console.print(table)

    if raw_contribution:
        console.print("[yellow]Contribution data is not structured; contributors unavailable[/yellow]")
        return

    if not people:
        console.print("No contributors found.")
        return

    table = Table(title="Contributors")
    table.add_column("Contributor", style="yellow")
    table.add_column("Contributions", style="cyan", justify="right")
    for c in people:
        table.add_row(Text(c.name or c.id), f"{c.total_contributions:,}")
    console.print(table)

    if daily:
        table = Table(title="Contributions Per Day")
        table.add_column("Date")
        table.add_column("Contributor", style="yellow")
        table.add_column("Contributions", style="cyan", justify="right")
        for row in daily:
            table.add_row(row.date, Text(row.user_name or row.user_id), f"{row.count:,}")
        console.print(table)
