"""
Play command: animated terminal playback of the document timeline
"""

from typing import Optional

import typer
from rich.console import Console, Group
from rich.live import Live
from rich.text import Text

from timeline.config import Settings
from timeline.playback import Frame, Paused, PlaybackState, Player
from timeline.query import change_label

from ._render import document_panel, format_timestamp
from ._source import fail, load_timeline, source_option

console = Console()


def _view(player: Player, frame: Frame, state: PlaybackState):
    timeline = player.timeline
    op = timeline.ops[frame.index]
    status = "paused" if isinstance(state, Paused) else type(state).__name__.lower()
    header = Text.assemble(
        (f"{frame.index + 1}/{len(timeline)} ", "cyan"),
        (f"{change_label(op)} ", "green"),
        (op.author.name or op.author.id or "unknown", "yellow"),
        (f"  [{status} x{player.speed:g}]", "dim"),
    )
    panel = document_panel(
        frame.content,
        frame.cursor_position,
        title="Document",
        subtitle=format_timestamp(frame.timestamp),
        highlight=frame.highlight,
    )
    return Group(header, panel)


def play_command(
    source: Optional[str] = source_option(),
    speed: Optional[float] = typer.Option(None, "--speed", "-x", help="Playback speed (default: TIMELINE_PLAYBACK_SPEED or 1)"),
    start: int = typer.Option(0, "--from", "-f", help="Operation index to start from"),
):
    """
    Play the document history in the terminal.

    Examples:
        timeline play
        timeline play --speed 4 --from 100
    """
    _, timeline = load_timeline(source, json_output=False)

    if len(timeline) == 0:
        console.print("[yellow]Document log has no operations[/yellow]")
        return

    speed = speed if speed is not None else Settings.from_env().playback_speed
    if speed <= 0:
        fail(f"playback speed must be > 0, got {speed}", json_output=False)

    player = Player(timeline, speed=speed)
    with Live(_view(player, player.frame(), player.state), console=console, refresh_per_second=30) as live:
        player.on_frame = lambda frame, state: live.update(_view(player, frame, state))
        try:
            player.play_from(start)
        except KeyboardInterrupt:
            player.pause()

    console.print(f"[green]✓ Stopped at operation {player.state.index}[/green]")
