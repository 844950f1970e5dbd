# app_publisher/cli/utils/output.py
"""Output formatting utilities"""

import json
from typing import Any, Dict

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from ...api.exceptions import PublisherError
from ...constants import (
    MSG_BUNDLE_SUCCESS,
    MSG_PUBLISH_CANCELLED,
    MSG_PUBLISH_FAILED,
    MSG_PUBLISH_READY,
)
from ...models import BundleInfo, PublishStatus, StatusResponse
from ...utils.file_utils import format_size

console = Console()


def format_bundle_info(info: BundleInfo) -> None:
    """Display a created bundle"""
    lines = [
        MSG_BUNDLE_SUCCESS.format(
            path=info.archive_path,
            size=format_size(info.size_bytes),
            count=info.file_count,
        ),
        "",
        f"[bold]SHA256:[/bold] {info.content_hash}",
    ]
    console.print(Panel("\n".join(lines), title="Bundle", border_style="green"))


def format_status(response: StatusResponse) -> None:
    """Display the final status of a job"""
    if response.status == PublishStatus.READY:
        console.print(f"[green]{MSG_PUBLISH_READY.format(url=escape(str(response.live_url)))}[/green]")
    elif response.status == PublishStatus.CANCELLED:
        console.print(f"[yellow]{MSG_PUBLISH_CANCELLED}[/yellow]")
    elif response.status == PublishStatus.FAILED:
        error = escape(response.error_message or "unknown error")
        console.print(f"[red]{MSG_PUBLISH_FAILED.format(error=error)}[/red]")
    else:
        line = f"[bold]{response.status.value}[/bold]"
        if response.progress_percent is not None:
            line += f" {response.progress_percent}%"
        if response.message:
            line += f" - {escape(response.message)}"
        console.print(line)


def format_error(error: PublisherError, title: str = "Error") -> None:
    """Display an error with its remediation hint"""
    lines = [f"[red]{escape(str(error))}[/red]"]
    if error.hint:
        lines.extend(["", f"[bold]Hint:[/bold] {escape(error.hint)}"])
    if error.error_code:
        lines.append(f"[dim]Code: {error.error_code}[/dim]")

    console.print(Panel(
        "\n".join(lines),
        title=f"[bold red]{title}[/bold red]",
        border_style="red"
    ))


def format_diagnostics(data: Dict[str, Any]) -> None:
    """Display a diagnostics record as JSON"""
    console.print(Syntax(json.dumps(data, indent=2, default=str), "json"))


def format_broker_status(info: Dict[str, Any]) -> None:
    """Display transport selection as a two-column table"""
    table = Table(title="Publish Transport")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    for key, value in info.items():
        if isinstance(value, bool):
            cell = "[green]yes[/green]" if value else "[dim]no[/dim]"
        elif value is None:
            cell = "[dim]-[/dim]"
        else:
            cell = escape(str(value))
        table.add_row(key, cell)

    console.print(table)
