"""
Replay command: reconstruct the document at an operation index
"""

import json
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from timeline.core.errors import ReplayIndexError
from timeline.query import change_label
from timeline.replay import compute_state_hash, state_to_dict

from ._render import document_panel, format_timestamp
from ._source import fail, load_timeline, source_option

console = Console()


def replay_command(
    source: Optional[str] = source_option(),
    at: Optional[int] = typer.Option(None, "--at", "-a", help="Operation index (default: last)"),
    show_content: bool = typer.Option(True, "--show-content/--no-content", help="Print document content"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Replay the document log up to an operation and show the document.

    Examples:
        timeline replay
        timeline replay --at 10
        timeline replay --no-content --json
    """
    _, timeline = load_timeline(source, json_output)

    if len(timeline) == 0:
        if json_output:
            print(json.dumps({"success": True, "operations": 0}))
        else:
            console.print("[yellow]Document log has no operations[/yellow]")
        return

    index = timeline.last_index if at is None else at
    try:
        state = timeline.state_at(index)
    except ReplayIndexError as e:
        fail(str(e), json_output, operations=len(timeline))

    op = timeline.ops[index]
    state_hash = compute_state_hash(state)

    if json_output:
        output = {
            "success": True,
            "operations": len(timeline),
            "state_hash": state_hash,
            "change": change_label(op),
            "author": op.author.to_dict(),
            **state_to_dict(state),
        }
        if not show_content:
            output.pop("content")
        print(json.dumps(output, indent=2))
        return

    console.print(f"[green]✓ Replayed {index + 1} of {len(timeline)} operations[/green]")

    table = Table(show_header=False, box=None)
    table.add_row("Change", f"{change_label(op)} by {op.author.name or op.author.id or 'unknown'}")
    table.add_row("Time", format_timestamp(state.timestamp))
    table.add_row("Cursor", str(state.cursor_position))
    table.add_row("Length", str(len(state.content)))
    table.add_row("State hash", f"[yellow]{state_hash}[/yellow]")
    console.print(table)

    if show_content:
        console.print(
            document_panel(
                state.content,
                state.cursor_position,
                title=f"Document @ {index}",
                subtitle=format_timestamp(state.timestamp),
            )
        )
