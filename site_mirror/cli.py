# === FILE: site_mirror/cli.py ===
#!/usr/bin/env python3
"""
Command line entry point for SiteMirror.

Commands:
  mirror    Download a site recursively into a local mirror
  config    Show the effective configuration

Global options:
  --config PATH       YAML/JSON config file (options below override it)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stdout only when omitted)
  --log-format FORMAT Logging format string

mirror options:
  --url URL           Seed URL
  --depth INT         Maximum recursion depth for pages
  --concurrency INT   Maximum number of concurrent downloads
  --timeout SEC       Per-request timeout
  --output DIR        Mirror root directory
  --user-agent STR    User-Agent header
  --mkdir             Create the output directory if it is missing

Example:
  site-mirror mirror --url https://example.com --depth 2 --output mirror --mkdir
"""
import asyncio
import sys
from pathlib import Path
from typing import Any, NoReturn

import click

from site_mirror import __version__
from site_mirror.config import MirrorConfig, build_config, read_config_file
from site_mirror.engine import start_mirror
from site_mirror.logger import DEFAULT_FORMAT, init_logging

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])


def print_error(message: str) -> NoReturn:
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def resolve_config(ctx: click.Context, mkdir: bool = False, **overrides: Any) -> MirrorConfig:
    """Merge the config file (if any) with command line overrides and validate once."""
    config_path = ctx.obj.get('config_path')
    try:
        data = read_config_file(config_path) if config_path else {}
        data.update({k: v for k, v in overrides.items() if v is not None})
        if mkdir:
            output = data.get('output_dir') or MirrorConfig.model_fields['output_dir'].default
            Path(output).expanduser().mkdir(parents=True, exist_ok=True)
        return build_config(**data)
    except (ValueError, TypeError, OSError) as e:
        print_error(f'Configuration error: {e}')


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteMirror, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to a YAML/JSON configuration file.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Log file (stdout only when omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    help='Logging format string'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """SiteMirror command group."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path


@cli.command('mirror', context_settings=CONTEXT_SETTINGS)
@click.option('--url', '-u', 'seed_url', default=None, help='Seed URL')
@click.option('--depth', '-d', 'max_depth', type=int, default=None, help='Maximum recursion depth')
@click.option('--concurrency', '-n', 'max_concurrency', type=int, default=None,
              help='Maximum concurrent downloads')
@click.option('--timeout', 'timeout', type=float, default=None, help='Per-request timeout (seconds)')
@click.option(
    '--output', '-o', 'output_dir',
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help='Mirror root directory'
)
@click.option('--user-agent', 'user_agent', default=None, help='User-Agent header')
@click.option('--mkdir', is_flag=True, help='Create the output directory if it is missing')
@click.pass_context
def mirror(ctx, seed_url, max_depth, max_concurrency, timeout, output_dir, user_agent, mkdir):
    """Mirror a site into the output directory."""
    cfg = resolve_config(
        ctx,
        mkdir=mkdir,
        seed_url=seed_url,
        max_depth=max_depth,
        max_concurrency=max_concurrency,
        timeout=timeout,
        output_dir=output_dir,
        user_agent=user_agent,
    )
    click.echo(f'Mirroring {cfg.seed_url} into {cfg.output_dir}')
    try:
        report = asyncio.run(start_mirror(cfg))
    except Exception as e:
        print_error(f'Mirroring failed: {e}')
    click.echo(report.summary())


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the effective configuration as JSON."""
    cfg = resolve_config(ctx)
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
