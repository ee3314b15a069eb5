"""
Helpers shared by SnapShare CLI commands
"""

import sys

import click

from ..errors import SnapshareError
from ..services import Services, create_services


def get_services(ctx: click.Context) -> Services:
    """Build services lazily so keygen works without a key."""
    if 'services' not in ctx.obj:
        try:
            ctx.obj['services'] = create_services(ctx.obj['config'])
        except ValueError as e:
            raise click.ClickException(str(e))
    return ctx.obj['services']


def fail(error: SnapshareError) -> None:
    """Report a service error and exit non-zero."""
    message = f"{error.kind.value}: {error.message}"
    if error.detail:
        message += f" ({error.detail})"
    click.echo(message, err=True)
    sys.exit(1)
