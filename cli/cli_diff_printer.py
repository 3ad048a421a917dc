import logging
import sys
from pathlib import Path

import click
from colorama import just_fix_windows_console

from core.binary_normalizer import normalize
from core.exceptions import RenderConfigError
from core.pretty_printer import pretty_multiline
from core.render_config import RenderConfig, load_render_config
from core.term_formatter import diff_terms

logger = logging.getLogger(__name__)

EXIT_DIFFERENCES = 1
EXIT_ERROR = 2


def setup_logging(verbose: bool = False) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    logging.basicConfig(level=log_level, format=log_format)


def _read_text(path: str) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        click.echo(f"❌ Error: Cannot read '{path}': {e.strerror}", err=True)
        sys.exit(EXIT_ERROR)


@click.group()
@click.option('--verbose', '-v', is_flag=True, help="Enable debug logging")
@click.option('--config', 'config_path', type=click.Path(dir_okay=False), help="YAML render configuration file")
@click.pass_context
def cli(ctx, verbose, config_path):
    """Structural diff printer for single-line literal text."""
    setup_logging(verbose)
    just_fix_windows_console()

    config = RenderConfig()
    if config_path:
        try:
            config = load_render_config(config_path)
        except RenderConfigError as e:
            click.echo(f"❌ Error: {e}", err=True)
            sys.exit(EXIT_ERROR)

    ctx.obj = config


@cli.command()
@click.argument('expected')
@click.argument('actual')
@click.option('--color/--no-color', default=None, help="Enable or disable color output (defaults to the config)")
@click.option('--from-files', is_flag=True, help="Treat EXPECTED and ACTUAL as paths to read")
@click.option('--exit-code', is_flag=True, help="Exit with status 1 when the inputs differ")
@click.pass_obj
def diff(config, expected, actual, color, from_files, exit_code):
    """Print the marked delta between EXPECTED and ACTUAL."""
    if from_files:
        expected, actual = _read_text(expected), _read_text(actual)

    use_color = config.color if color is None else color
    lines = diff_terms(expected, actual, use_color, config)
    logger.debug(f"Diff produced {len(lines)} line(s)")

    for line in lines:
        click.echo(line, color=use_color)

    if exit_code and lines:
        sys.exit(EXIT_DIFFERENCES)


@cli.command()
@click.argument('text')
@click.pass_obj
def pretty(config, text):
    """Expand a single-line map literal into indented lines."""
    for line in pretty_multiline(text, config):
        click.echo(line)


@cli.command('normalize')
@click.argument('text')
@click.option('--space-commas', is_flag=True, help="Add a space after commas of remaining byte lists")
def normalize_command(text, space_commas):
    """Rewrite printable byte lists and bit specifiers in TEXT."""
    click.echo(normalize(text, space_commas=space_commas))


if __name__ == '__main__':
    cli()
