# app_publisher/cli/main.py
"""Main CLI entry point for app-publisher"""

import sys
import logging
from pathlib import Path
from typing import Optional

import click
from rich.logging import RichHandler

from ..constants import APP_NAME, LOG_FORMAT
from ..services import ConfigService, PublishService
from .utils.output import console

# Import all commands
from .commands import (
    bundle,
    publish,
    jobs,
    diagnostics,
)


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Setup logging configuration

    Args:
        verbose: Enable verbose output (INFO level)
        debug: Enable debug output (DEBUG level)
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    # Configure rich handler
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            RichHandler(
                console=console,
                show_time=debug,
                show_path=debug,
                rich_tracebacks=True,
                tracebacks_suppress=[click]
            )
        ]
    )

    # Adjust third-party loggers
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


class Context:
    """CLI context object with lazy service initialization

    The publish service (and with it the transport) is only built when a
    command needs it, so ``--help`` and ``bundle`` work without settings.
    """

    def __init__(self, settings_path: Optional[Path] = None):
        """Initialize CLI context"""
        self.settings_path = settings_path
        self.verbose: bool = False
        self.debug: bool = False
        self._config_service: Optional[ConfigService] = None
        self._publish_service: Optional[PublishService] = None

    @property
    def config_service(self) -> ConfigService:
        """Get settings provider (lazy loading)"""
        if self._config_service is None:
            self._config_service = ConfigService(self.settings_path)
        return self._config_service

    @property
    def publish_service(self) -> PublishService:
        """Get publish service (lazy loading)

        Raises:
            ConfigError: Broker configured without a device token
        """
        if self._publish_service is None:
            self._publish_service = PublishService.from_config(self.config_service)
        return self._publish_service


@click.group(name=APP_NAME)
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose output')
@click.option('-d', '--debug', is_flag=True, help='Enable debug output')
@click.option('-q', '--quiet', is_flag=True, help='Suppress all output except errors')
@click.option('--settings', 'settings_path', type=click.Path(dir_okay=False, path_type=Path),
              default=None, help='Settings file (default: ~/.app-publisher.yaml)')
@click.pass_context
def cli(ctx, verbose, debug, quiet, settings_path):
    """App Publisher - Bundle an app directory and publish it

    Without a configured broker, publishing is simulated locally and the
    result is a file:// link to the app directory.
    """
    # Setup logging
    if quiet:
        logging.disable(logging.CRITICAL)
    else:
        setup_logging(verbose=verbose, debug=debug)

    ctx.obj = Context(settings_path)
    ctx.obj.verbose = verbose
    ctx.obj.debug = debug


# Register commands
cli.add_command(bundle.bundle)
cli.add_command(publish.publish)
cli.add_command(jobs.status)
cli.add_command(jobs.cancel)
cli.add_command(diagnostics.diagnostics)
cli.add_command(diagnostics.broker_status)


def main():
    """Main entry point for the CLI application"""
    try:
        cli(prog_name=APP_NAME)

    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)

    except Exception as e:
        console.print(f"[red]Unexpected error: {e}[/red]")
        if '--debug' in sys.argv or '-d' in sys.argv:
            console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    main()
