"""
Rich rendering of document content, cursor and highlights.
"""

from datetime import datetime, timezone
from typing import Optional

from rich.panel import Panel
from rich.text import Text

from timeline.core.operations import OperationKind
from timeline.playback import Highlight

CURSOR = "|"


def format_timestamp(timestamp_ms: int) -> str:
    try:
        return datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
    except (OverflowError, ValueError, OSError):
        return f"{timestamp_ms} ms"


def document_text(content: str, cursor: int, highlight: Optional[Highlight] = None) -> Text:
    """Content as rich Text (never parsed as markup) with a cursor mark."""
    text = Text()
    if highlight is None or highlight.end <= highlight.start:
        text.append(content[:cursor])
        text.append(CURSOR, style="bold magenta")
        text.append(content[cursor:])
        return text

    style = "black on green" if highlight.kind == OperationKind.INSERT else "strike white on red"
    text.append(content[: highlight.start])
    text.append(content[highlight.start : highlight.end], style=style)
    text.append(CURSOR, style="bold magenta")
    text.append(content[highlight.end :])
    return text


def document_panel(
    content: str,
    cursor: int,
    title: str,
    subtitle: str = "",
    highlight: Optional[Highlight] = None,
) -> Panel:
    return Panel(
        document_text(content, cursor, highlight),
        title=title,
        subtitle=subtitle or None,
        border_style="magenta",
    )
