"""Bundle command implementation"""

import sys
import tempfile
from pathlib import Path

import click
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn

from ...api.exceptions import BundlingError
from ...constants import BUNDLE_DIR_NAME
from ...core.bundler import create_bundle
from ...models import BundlePhase, BundleProgress
from ..utils.output import console, format_bundle_info, format_error


@click.command()
@click.argument('source_dir', type=click.Path(file_okay=False, path_type=Path))
@click.option('--output', '-o', type=click.Path(dir_okay=False, path_type=Path), default=None,
              help='Archive path (default: temp directory)')
def bundle(source_dir, output):
    """Create a bundle of an app directory without publishing it

    Examples:
        # Bundle into the temp directory
        app-publisher bundle ./my-app

        # Bundle to a specific file
        app-publisher bundle ./my-app -o my-app.zip
    """
    if output is None:
        output = Path(tempfile.gettempdir()) / BUNDLE_DIR_NAME / f"{source_dir.resolve().name}.zip"

    with Progress(
            SpinnerColumn(),
            TextColumn("[bold]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            console=console,
    ) as progress:
        task = progress.add_task("Scanning...", total=None)

        def on_progress(event: BundleProgress):
            if event.phase == BundlePhase.ARCHIVING:
                progress.update(task, description="Archiving...",
                                completed=event.files_processed, total=event.total_files)
            elif event.phase == BundlePhase.HASHING:
                progress.update(task, description="Hashing...")
            elif event.phase == BundlePhase.COMPLETE:
                progress.update(task, description="Done")

        try:
            info = create_bundle(source_dir, output, on_progress)
        except BundlingError as e:
            progress.stop()
            format_error(e, "Bundle Error")
            sys.exit(1)

    format_bundle_info(info)
