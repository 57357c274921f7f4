# === FILE: logo_scout/cli.py ===
#!/usr/bin/env python3
"""
Command-line entry point of LogoScout.

Commands:
  run       Extract, hash and group the logos of every site in a list
  debug     Explain why sites of a list are missing from a groups file
  config    Show the effective configuration

Common options:
  --config PATH       YAML/JSON config (default: configs/default.yaml if present)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stdout only if omitted)
  --log-format FORMAT Logging format string

Options of run:
  --output PATH       Groups YAML document (default: groups.yaml)
  --json PATH         Also save a JSON report
  --html PATH         Also save an HTML gallery
  --template DIR      Directory with the Jinja2 template
  --stats PATH        Save the text statistics report
  --concurrency N     Sites processed at once (overrides config)
  --threshold N       Max Hamming distance inside a group (overrides config)
  --no-dynamic        Skip the headless-browser fallback
  --run-timeout SEC   Timeout of the whole run (seconds)

Example:
  logo-scout run sites.csv --output groups.yaml --html report.html --concurrency 10
"""
import asyncio
import sys
from pathlib import Path

import click

from logo_scout import __version__
from logo_scout.config import load_config, ScoutConfig
from logo_scout.diagnostics import diagnose_sites, find_missing
from logo_scout.engine import start_run
from logo_scout.errors import BrowserUnavailable
from logo_scout.logger import DEFAULT_FORMAT, init_logging
from logo_scout.report import load_groups, render_html, render_json, render_yaml
from logo_scout.utils import read_sites

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def _read_sites_or_exit(sites_file: Path) -> list[str]:
    try:
        sites = read_sites(sites_file)
    except (OSError, UnicodeDecodeError) as e:
        print_error(f'Cannot read site list: {e}')
    if not sites:
        print_error(f'Site list {sites_file} is empty')
    return sites


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='LogoScout, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to a YAML or JSON config file.'
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
    type=click.Path(dir_okay=False, path_type=Path),
    help='Log file (stdout only if omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Logging format string'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """LogoScout: group websites by visually similar logos."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Config error: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('run', context_settings=CONTEXT_SETTINGS)
@click.argument('sites_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    '--output', '-o', 'output',
    default='groups.yaml', show_default=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Groups YAML document'
)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Save a JSON report'
)
@click.option(
    '--html', 'html_output',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Save an HTML gallery'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Directory with the Jinja2 template'
)
@click.option(
    '--stats', 'stats_output',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Save the statistics report'
)
@click.option('--concurrency', type=click.IntRange(min=1), default=None, help='Sites processed at once')
@click.option('--threshold', type=click.IntRange(0, 64), default=None, help='Max Hamming distance inside a group')
@click.option('--no-dynamic', 'no_dynamic', is_flag=True, help='Skip the headless-browser fallback')
@click.option('--run-timeout', 'run_timeout', type=float, default=None, help='Timeout of the whole run (seconds)')
@click.pass_context
def run(ctx, sites_file, output, json_output, html_output, template_dir, stats_output,
        concurrency, threshold, no_dynamic, run_timeout):
    """Extract, hash and group the logos of SITES_FILE."""
    cfg: ScoutConfig = ctx.obj['config']
    overrides = {}
    if concurrency is not None:
        overrides['concurrency'] = concurrency
    if threshold is not None:
        overrides['threshold'] = threshold
    if no_dynamic:
        overrides['dynamic_fallback'] = False
    if overrides:
        cfg = ScoutConfig(**{**cfg.model_dump(), **overrides})

    sites = _read_sites_or_exit(sites_file)
    click.echo(f'Loaded {len(sites)} sites from {sites_file}')
    try:
        if run_timeout:
            result = asyncio.run(asyncio.wait_for(start_run(cfg, sites), timeout=run_timeout))
        else:
            result = asyncio.run(start_run(cfg, sites))
    except asyncio.TimeoutError:
        print_error(f'Run did not finish within {run_timeout} seconds')
    except BrowserUnavailable as e:
        print_error(f'{e} (run `playwright install chromium` or pass --no-dynamic)')
    except Exception as e:
        print_error(f'Run failed: {e}')

    try:
        click.echo(f'Groups: {render_yaml(result.groups, output)}')
        if json_output:
            click.echo(f'JSON report: {render_json(result, json_output)}')
        if html_output:
            click.echo(f'HTML report: {render_html(result, template_dir, html_output)}')
        if stats_output:
            stats_output.parent.mkdir(parents=True, exist_ok=True)
            stats_output.write_text(result.stats.render(), encoding='utf-8')
            click.echo(f'Statistics: {stats_output}')
    except Exception as e:
        print_error(f'Cannot save reports: {e}')

    click.echo(result.stats.render())


@cli.command('debug', context_settings=CONTEXT_SETTINGS)
@click.argument('sites_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument('groups_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--limit', '-n', type=click.IntRange(min=1), default=5, show_default=True,
              help='How many missing sites to analyse')
@click.pass_context
def debug(ctx, sites_file, groups_file, limit):
    """Explain why sites of SITES_FILE are absent from GROUPS_FILE."""
    cfg: ScoutConfig = ctx.obj['config']
    sites = _read_sites_or_exit(sites_file)
    try:
        groups = load_groups(groups_file)
    except (OSError, ValueError, TypeError) as e:
        print_error(f'Cannot read groups file: {e}')

    missing = find_missing(sites, groups)
    click.echo(f'Total input:     {len(sites)}')
    click.echo(f'Total grouped:   {len(sites) - len(missing)}')
    click.echo(f'Missing/failed:  {len(missing)}')
    if not missing:
        click.echo('Every site has a logo, nothing to debug.')
        return

    click.echo(f'\nAnalysing the first {min(limit, len(missing))} missing site(s)...')
    for diagnosis in asyncio.run(diagnose_sites(cfg, missing[:limit])):
        click.echo('')
        for line in diagnosis.narrate():
            click.echo(line)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the effective configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
