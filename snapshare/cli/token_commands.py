"""
Token CLI commands for SnapShare
"""

import json

import click

from ..errors import SnapshareError
from .common import fail, get_services


@click.group()
def token():
    """Issue and inspect session tokens"""
    pass


@token.command()
@click.argument('subject_id', type=int)
@click.argument('subject_name')
@click.pass_context
def issue(ctx, subject_id, subject_name):
    """Issue a one-hour token for SUBJECT_ID"""
    services = get_services(ctx)
    try:
        click.echo(services.tokens.issue(subject_id, subject_name))
    except SnapshareError as e:
        fail(e)


@token.command()
@click.argument('value')
@click.option('--header', is_flag=True, help='VALUE is a full Authorization header')
@click.pass_context
def verify(ctx, value, header):
    """Verify a token and print its claim"""
    services = get_services(ctx)
    try:
        if header:
            click.echo(json.dumps({'subject_id': services.tokens.resolve_from_carrier(value)}))
            return
        claim = services.tokens.verify(value)
    except SnapshareError as e:
        fail(e)

    click.echo(json.dumps({
        'subject_id': claim.subject_id,
        'subject_name': claim.subject_name,
        'expires_at': claim.expires_at.isoformat(),
    }))
