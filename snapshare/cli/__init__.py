"""
SnapShare Command Line Interface

Operator tools for keys, tokens and the upload pipeline.
"""

import base64
import logging
from pathlib import Path
from typing import Optional

import click
from dotenv import load_dotenv

from ..config.security import generate_secure_secret_key
from ..config.settings import get_config_value, load_config
from ..errors import SnapshareError
from ..media.compositor import sniff_image_type
from ..utils.logging import DEFAULT_FORMAT, setup_console_logging
from .common import fail, get_services
from .token_commands import token

logger = logging.getLogger(__name__)


@click.group()
@click.option('--config', '-c', type=click.Path(exists=True, dir_okay=False),
              help='Configuration file path')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--quiet', '-q', is_flag=True, help='Suppress non-error output')
@click.pass_context
def main(ctx, config: Optional[str] = None, verbose: bool = False, quiet: bool = False):
    """
    SnapShare - session tokens and photo compositing
    """
    load_dotenv()

    if ctx.obj is None:
        ctx.obj = {}

    cfg = load_config(config)
    level = get_config_value(cfg, 'logging.level', 'INFO')
    if verbose:
        level = 'DEBUG'
    elif quiet:
        level = 'ERROR'
    setup_console_logging(level, fmt=get_config_value(cfg, 'logging.format', DEFAULT_FORMAT))

    ctx.obj['config'] = cfg
    ctx.obj['quiet'] = quiet


main.add_command(token)


@main.command()
def keygen():
    """Print a new random signing key."""
    click.echo(generate_secure_secret_key())


@main.command()
@click.argument('image', type=click.Path(exists=True, dir_okay=False))
@click.option('--filter', '-f', 'filter_name', help='Overlay to composite onto the image')
@click.option('--mime', help='Declared MIME type (detected from content by default)')
@click.pass_context
def compose(ctx, image: str, filter_name: Optional[str] = None, mime: Optional[str] = None):
    """
    Composite IMAGE with an optional overlay and store it.

    Prints the stored path.
    """
    services = get_services(ctx)
    data = Path(image).read_bytes()
    declared = mime or sniff_image_type(data) or 'application/octet-stream'
    envelope = f"data:{declared};base64,{base64.b64encode(data).decode('ascii')}"

    try:
        stored = services.compositor.compose(envelope, filter_name)
    except SnapshareError as e:
        fail(e)

    click.echo(stored)


@main.command()
@click.pass_context
def filters(ctx):
    """List overlays installed in the filter directory."""
    services = get_services(ctx)
    available = services.filters.available()
    if not available and not ctx.obj.get('quiet'):
        click.echo(f"No overlays found in {services.filters.directory}", err=True)
    for name in available:
        click.echo(name)
