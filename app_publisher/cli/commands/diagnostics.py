"""Diagnostics commands"""

import sys

import click

from ...api.exceptions import PublisherError
from ...utils.async_utils import run_async
from ..utils.output import format_broker_status, format_diagnostics, format_error


@click.command()
@click.option('--owner-id', '-o', type=int, required=True, help='Id of the app')
@click.option('--job-id', '-j', default=None, help='Publish job id')
@click.pass_context
def diagnostics(ctx, owner_id, job_id):
    """Print a redacted diagnostic record (safe to share)"""
    try:
        record = run_async(ctx.obj.publish_service.publish_diagnostics(owner_id, job_id))
    except PublisherError as e:
        format_error(e, "Diagnostics Error")
        sys.exit(1)

    format_diagnostics(record.to_dict())


@click.command(name='broker-status')
@click.pass_context
def broker_status(ctx):
    """Show which transport is in use and how the broker is configured"""
    try:
        info = ctx.obj.publish_service.broker_status()
    except PublisherError as e:
        format_error(e, "Configuration Error")
        sys.exit(1)

    info.update(ctx.obj.config_service.get_diagnostics())
    format_broker_status(info)
