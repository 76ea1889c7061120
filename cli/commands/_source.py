"""
Shared document log loading for CLI commands.
"""

import json
from typing import NoReturn, Optional, Tuple

import typer
from rich.console import Console

from timeline.config import Settings
from timeline.core.errors import LogFormatError, LogLoadError
from timeline.log import DocumentData, load_document_data
from timeline.normalize import normalize_document
from timeline.replay import Timeline

LOAD_FAILED_MESSAGE = "Failed to load document data. Please try again later."

console = Console()


def fail(message: str, json_output: bool, exit_code: int = 2, **fields) -> NoReturn:
    """Report an error the way every command does and exit."""
    if json_output:
        print(json.dumps({"error": message, **fields}))
    else:
        console.print(f"[red]Error:[/red] {message}")
        for key, value in fields.items():
            console.print(f"  {key}: {value}")
    raise typer.Exit(exit_code)


def load_timeline(source: Optional[str], json_output: bool) -> Tuple[DocumentData, Timeline]:
    """
    Load, normalize and wrap a document log.

    Exits with code 2 and the generic retryable message on any load failure.
    """
    settings = Settings.from_env()
    source = source or settings.source

    try:
        data = load_document_data(source)
    except FileNotFoundError:
        fail("Document log not found", json_output, path=source)
    except (LogLoadError, LogFormatError) as e:
        fail(LOAD_FAILED_MESSAGE, json_output, detail=str(e), path=source)

    ops = normalize_document(data)
    return data, Timeline(ops, checkpoint_interval=settings.checkpoint_interval)


def source_option():
    return typer.Option(
        None,
        "--source",
        "-s",
        help="Path or http(s) URL of the document log (default: TIMELINE_SOURCE or data.json)",
    )
