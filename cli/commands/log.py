"""
Document log commands: tail, inspect
"""

import json
from typing import List, Optional, Tuple

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from timeline.core.operations import Operation, OperationKind
from timeline.query import change_label

from ._render import format_timestamp
from ._source import fail, load_timeline, source_option

app = typer.Typer()
console = Console()

PREVIEW_CHARS = 40


def _preview(text: str) -> str:
    flat = text.replace("\n", "\\n")
    return flat if len(flat) <= PREVIEW_CHARS else flat[: PREVIEW_CHARS - 1] + "…"


def _print_operations(rows: List[Tuple[int, Operation]], title: str, json_output: bool) -> None:
    if json_output:
        ops = [{"index": idx, **op.to_dict()} for idx, op in rows]
        print(json.dumps({"operations": ops, "count": len(ops)}, indent=2))
        return

    table = Table(title=title)
    table.add_column("#", style="cyan", justify="right")
    table.add_column("Time", style="dim")
    table.add_column("Author", style="yellow")
    table.add_column("Change", style="green")
    table.add_column("Pos", justify="right")
    table.add_column("Len", justify="right")
    table.add_column("Text")

    for idx, op in rows:
        table.add_row(
            str(idx),
            format_timestamp(op.timestamp),
            Text(op.author.name or op.author.id),
            change_label(op),
            "end" if op.appends else str(op.position),
            str(op.length),
            Text(_preview(op.text)),
        )

    console.print(table)
    console.print(f"\n[bold]Total operations:[/bold] {len(rows)}")


@app.command()
def tail(
    source: Optional[str] = source_option(),
    lines: int = typer.Option(10, "--lines", "-n", help="Number of operations to show"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Show the last normalized operations.

    Examples:
        timeline log tail
        timeline log tail --lines 25 --json
    """
    _, timeline = load_timeline(source, json_output)

    if len(timeline) == 0:
        if json_output:
            print(json.dumps({"operations": [], "count": 0}))
        else:
            console.print("[yellow]Document log has no operations[/yellow]")
        return

    rows = list(enumerate(timeline.ops))
    if lines > 0:
        rows = rows[-lines:]
    _print_operations(rows, "Latest operations", json_output)


@app.command()
def inspect(
    source: Optional[str] = source_option(),
    from_index: Optional[int] = typer.Option(None, "--from", help="Start from operation index"),
    to_index: Optional[int] = typer.Option(None, "--to", help="End at operation index (inclusive)"),
    kind: Optional[str] = typer.Option(None, "--kind", "-k", help="Filter by kind (insert, delete)"),
    copy_paste: bool = typer.Option(False, "--copy-paste", help="Only copy-paste insertions"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Inspect normalized operations with filters.

    Examples:
        timeline log inspect --from 0 --to 10
        timeline log inspect --kind delete
        timeline log inspect --copy-paste --json
    """
    kind_filter = None
    if kind is not None:
        try:
            kind_filter = OperationKind(kind.lower())
        except ValueError:
            fail(f"Unknown operation kind: {kind}", json_output, allowed="insert, delete")

    _, timeline = load_timeline(source, json_output)

    rows = list(enumerate(timeline.ops))
    if from_index is not None:
        rows = [(idx, op) for idx, op in rows if idx >= from_index]
    if to_index is not None:
        rows = [(idx, op) for idx, op in rows if idx <= to_index]
    if kind_filter is not None:
        rows = [(idx, op) for idx, op in rows if op.kind == kind_filter]
    if copy_paste:
        rows = [(idx, op) for idx, op in rows if op.is_copy_paste]

    if not rows:
        if json_output:
            print(json.dumps({"operations": [], "count": 0}))
        else:
            console.print("[yellow]No operations match the filters[/yellow]")
        return

    _print_operations(rows, "Operations", json_output)
