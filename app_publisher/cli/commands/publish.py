"""Publish command implementation"""

import asyncio
import sys
from pathlib import Path

import click
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn

from ...api.exceptions import PublisherError
from ...constants import MSG_PUBLISH_STARTED
from ...models import BundlePhase, BundleProgress, PublishStatus
from ...services import PublishService
from ...utils.async_utils import run_async
from ..utils.output import console, format_error, format_status


async def _publish(service: PublishService,
                   owner_id: int,
                   source_dir: Path,
                   owner_name: str,
                   interval: float,
                   wait: bool,
                   progress: Progress):
    """Start a publish and poll it until a terminal status"""
    task = progress.add_task("Bundling...", total=100)

    def on_progress(event: BundleProgress):
        if event.phase == BundlePhase.ARCHIVING and event.total_files:
            progress.update(task, description=f"Bundling {event.files_processed}/{event.total_files}")

    async with service:
        result = await service.publish_start(owner_id, source_dir, owner_name, on_progress)
        progress.console.print(MSG_PUBLISH_STARTED.format(job_id=result.job_id))
        if result.is_simulated:
            progress.console.print("[dim]No broker configured: publishing is simulated locally[/dim]")

        if not wait:
            return result, None

        try:
            while True:
                response = await service.publish_status(result.job_id)
                progress.update(
                    task,
                    description=response.message or response.status.value,
                    completed=response.progress_percent or 0,
                )
                if response.status.is_terminal:
                    return result, response
                await asyncio.sleep(interval)
        except asyncio.CancelledError:
            await service.publish_cancel(result.job_id)
            raise


@click.command()
@click.argument('source_dir', type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option('--owner-id', '-o', type=int, required=True, help='Id of the app being published')
@click.option('--owner-name', '-n', default=None, help='Display name of the app')
@click.option('--interval', '-i', type=float, default=1.0, show_default=True,
              help='Seconds between status polls')
@click.option('--wait/--no-wait', default=True, help='Poll until the publish finishes')
@click.pass_context
def publish(ctx, source_dir, owner_id, owner_name, interval, wait):
    """Bundle an app directory and publish it

    Examples:
        # Publish app 1 and wait for the live URL
        app-publisher publish ./my-app --owner-id 1

        # Submit only (requires a broker to poll later)
        app-publisher publish ./my-app --owner-id 1 --no-wait
    """
    try:
        service = ctx.obj.publish_service

        with Progress(
                SpinnerColumn(),
                TextColumn("[bold]{task.description}"),
                BarColumn(),
                "[progress.percentage]{task.percentage:>3.0f}%",
                console=console,
        ) as progress:
            result, response = run_async(
                _publish(service, owner_id, source_dir, owner_name, interval, wait, progress)
            )

    except PublisherError as e:
        format_error(e, "Publish Error")
        sys.exit(1)

    if response is None:
        console.print(f"Job id: [bold]{result.job_id}[/bold]")
        return

    format_status(response)
    if response.status != PublishStatus.READY:
        sys.exit(1)
