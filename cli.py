#!/usr/bin/env python3
"""
Spotlight Command Line Interface

Applies the spotlight exposure mask to an image file: select a rectangle,
dim everything outside it, save the result and optionally send it to a
remote save endpoint.
"""

import json
import logging
from typing import Optional, Tuple

import click

from spotlight.config import load_config, get_config_value, validate_config
from spotlight.editing import MaskConfig, Point, Rectangle, Size
from spotlight.editing import scaling, selector
from spotlight.editing.crop import crop
from spotlight.io import load_image, ImageLoadError, EncodingFailure
from spotlight.io.encoder import save_image
from spotlight.session import EditSession
from spotlight.storage import PersistenceClient
from spotlight.utils.logging import setup_console_logging

logger = logging.getLogger(__name__)


@click.group()
@click.option('--config', '-c', type=click.Path(exists=True, dir_okay=False),
              help='Configuration file path')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--quiet', '-q', is_flag=True, help='Suppress non-error output')
@click.pass_context
def main(ctx, config: Optional[str] = None, verbose: bool = False, quiet: bool = False):
    """
    Spotlight - darken everything outside a selected rectangle
    """
    if ctx.obj is None:
        ctx.obj = {}

    cfg = load_config(config)
    try:
        validate_config(cfg)
    except ValueError as e:
        raise click.ClickException(f"Invalid configuration: {e}")

    level = get_config_value(cfg, 'logging.level', 'INFO')
    if verbose:
        level = 'DEBUG'
    elif quiet:
        level = 'ERROR'
    setup_console_logging(level, fmt=get_config_value(cfg, 'logging.format'))

    ctx.obj['config'] = cfg
    ctx.obj['verbose'] = verbose
    ctx.obj['quiet'] = quiet


def _selection(rect: Optional[Tuple[float, ...]],
               drag: Optional[Tuple[float, ...]]) -> Optional[Rectangle]:
    if rect and drag:
        raise click.UsageError("Use either --rect or --drag, not both")
    if rect:
        x, y, width, height = rect
        return Rectangle(x, y, width, height)
    if drag:
        x1, y1, x2, y2 = drag
        return selector.update(selector.begin(Point(x1, y1)), Point(x2, y2))
    return None


def _persistence_url(config, override: Optional[str]) -> Optional[str]:
    url = override or get_config_value(config, 'persistence.url')
    # Unset ${VAR} placeholders are left verbatim by the config loader
    if not url or str(url).startswith('${'):
        return None
    return url


@main.command()
@click.argument('image', type=click.Path(exists=True, dir_okay=False))
@click.option('--rect', type=float, nargs=4, default=None, metavar='X Y W H',
              help='Selection as origin and extent (extent may be negative)')
@click.option('--drag', type=float, nargs=4, default=None, metavar='X1 Y1 X2 Y2',
              help='Selection as a drag from one corner to the other')
@click.option('--display-size', type=float, nargs=2, default=None, metavar='W H',
              help='Coordinates refer to the image displayed at this size')
@click.option('--factor', '-f', type=click.FloatRange(0.0, 1.0), default=None,
              help='Brightness multiplier outside the selection')
@click.option('--output', '-o', type=click.Path(dir_okay=False), default=None,
              help='Where to write the edited image')
@click.option('--crop-output', type=click.Path(dir_okay=False), default=None,
              help='Also write the selected region as a separate image')
@click.option('--post-url', default=None, help='Send the result to this save endpoint')
@click.pass_context
def mask(ctx, image: str, rect, drag, display_size, factor: Optional[float],
         output: Optional[str], crop_output: Optional[str], post_url: Optional[str]):
    """
    Dim everything outside a rectangle of IMAGE.

    IMAGE: Path to the image to edit
    """
    config = ctx.obj.get('config', {})
    quiet = ctx.obj.get('quiet', False)

    try:
        source = load_image(image)
    except ImageLoadError as e:
        raise click.ClickException(str(e))

    mask_config = MaskConfig.from_config(config)
    if factor is not None:
        mask_config.factor = factor

    session = EditSession(
        source,
        mask_config=mask_config,
        outline_color=tuple(get_config_value(config, 'outline.color')),
        outline_width=get_config_value(config, 'outline.line_width', 2),
        output_format=get_config_value(config, 'output.format', 'PNG')
    )

    selection = _selection(rect or None, drag or None)
    if selection is not None:
        if display_size:
            selection = scaling.to_native_space(selection, Size(*display_size),
                                                session.native_size)
        session.pointer_down(Point(selection.x, selection.y))
        session.pointer_move(Point(selection.right, selection.bottom))

    result = session.pointer_up()
    if result.skipped:
        click.echo(f"⚠️  {result.message}", err=True)
        return
    if not result.encoded_ok:
        raise click.ClickException(result.message)

    output = output or get_config_value(config, 'output.filename')
    quality = get_config_value(config, 'output.jpeg_quality', 95)
    try:
        saved = save_image(result.buffer, output, quality=quality)
        if crop_output:
            region = None
            if result.rectangle is not None:
                region = crop(session.source, result.rectangle)
            if region is None:
                click.echo("⚠️  Selection lies outside the image, no crop written", err=True)
            else:
                save_image(region, crop_output, quality=quality)
    except EncodingFailure as e:
        raise click.ClickException(f"Could not save image: {e}")

    if not quiet:
        click.echo(f"✅ Saved {saved}")
        click.echo(json.dumps({
            'rectangle': result.rectangle.to_dict() if result.rectangle is not None else None,
            'imageWidth': source.width,
            'imageHeight': source.height
        }))

    url = _persistence_url(config, post_url)
    if url:
        timeout = get_config_value(config, 'persistence.timeout', 10)
        with PersistenceClient(url, timeout=timeout) as client:
            outcome = client.submit(session.build_payload()).result()
        if not outcome.success:
            raise click.ClickException(outcome.message)
        if not quiet:
            click.echo(f"☁️  {outcome.message}")


@main.command()
@click.argument('image', type=click.Path(exists=True, dir_okay=False))
@click.option('--viewport', type=float, nargs=2, required=True, metavar='W H',
              help='Available viewport size')
@click.option('--fraction', type=click.FloatRange(0.0, 1.0, min_open=True), default=None,
              help='Share of the viewport the image may use')
@click.option('--preview-output', type=click.Path(dir_okay=False), default=None,
              help='Write the image resized to its display size')
@click.pass_context
def fit(ctx, image: str, viewport, fraction: Optional[float], preview_output: Optional[str]):
    """
    Print the display size IMAGE would be rendered at.

    IMAGE: Path to the image
    """
    config = ctx.obj.get('config', {})
    if fraction is None:
        fraction = get_config_value(config, 'viewport.fraction', 0.9)

    try:
        source = load_image(image)
    except ImageLoadError as e:
        raise click.ClickException(str(e))

    try:
        display = scaling.fit_to_viewport(source.size, Size(*viewport), fraction)
        scale_x, scale_y = scaling.scale_factors(display, source.size)
    except ValueError as e:
        raise click.ClickException(str(e))
    click.echo(f"{display.width:.0f}x{display.height:.0f} "
               f"(native {source.width}x{source.height}, scale {scale_x:.3f}x{scale_y:.3f})")

    if preview_output:
        save_image(scaling.resize_for_display(source, display), preview_output)


if __name__ == '__main__':
    main()
