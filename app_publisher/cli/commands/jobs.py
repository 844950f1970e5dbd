"""Status and cancel commands"""

import sys

import click

from ...api.exceptions import PublisherError
from ...utils.async_utils import run_async
from ..utils.output import console, format_error, format_status


@click.command()
@click.argument('job_id')
@click.option('--json', 'as_json', is_flag=True, help='Print the raw status record')
@click.pass_context
def status(ctx, job_id, as_json):
    """Show the status of a publish job"""
    try:
        response = run_async(ctx.obj.publish_service.publish_status(job_id))
    except PublisherError as e:
        format_error(e, "Status Error")
        sys.exit(1)

    if as_json:
        console.print_json(data=response.to_dict())
    else:
        format_status(response)


@click.command()
@click.argument('job_id')
@click.pass_context
def cancel(ctx, job_id):
    """Cancel a publish job that has not finished"""
    try:
        response = run_async(ctx.obj.publish_service.publish_cancel(job_id))
    except PublisherError as e:
        format_error(e, "Cancel Error")
        sys.exit(1)

    if response.success:
        console.print(f"[green]Cancelled {job_id}[/green]")
    else:
        console.print(f"[yellow]Could not cancel {job_id}: job is {response.status.value}[/yellow]")
        sys.exit(1)
