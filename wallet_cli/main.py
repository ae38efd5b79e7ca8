#!/usr/bin/env python3
"""
Descriptor Wallet - Command Line Interface

Expands descriptor generators into per-category output scripts and
addresses, and inspects the CLI configuration.
"""

import functools
import json
import logging
import sys
from typing import Any, Dict, List, Optional

import click
import yaml

from bitcoin_hd.exceptions import CryptoError
from bitcoin_scripts.category import Category
from bitcoin_scripts.exceptions import ScriptError
from descriptors.exceptions import DescriptorError
from descriptors.generator import Generator
from descriptors.variants import VARIANT_ORDER
from wallet_cli import __version__
from wallet_cli.config import ConfigurationError, ConfigurationManager, NETWORKS, OUTPUT_FORMATS

LOGGED_PACKAGES = ('bitcoin_scripts', 'bitcoin_hd', 'descriptors', 'psbt', 'wallet_cli')
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
HANDLER_NAME = "wallet_cli"


class CLIContext:
    """Global CLI context for sharing state across commands."""

    def __init__(self):
        self.config_file: Optional[str] = None
        self.profile: Optional[str] = None
        self.output_format: Optional[str] = None
        self.verbose: int = 0
        self.config: Optional[ConfigurationManager] = None
        self.logger = logging.getLogger('wallet_cli')

    def setup_logging(self):
        """Configure logging based on verbosity level."""
        log_levels = {
            0: logging.WARNING,
            1: logging.INFO,
            2: logging.DEBUG
        }
        level = log_levels[min(self.verbose, 2)]

        handler = logging.StreamHandler(sys.stderr)
        handler.set_name(HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))

        for name in LOGGED_PACKAGES:
            package_logger = logging.getLogger(name)
            for old_handler in list(package_logger.handlers):
                if old_handler.get_name() == HANDLER_NAME:
                    package_logger.removeHandler(old_handler)
            package_logger.addHandler(handler)
            package_logger.setLevel(level)

    def load_config(self):
        """Load layered configuration and apply it to unset options."""
        self.config = ConfigurationManager(self.config_file, self.profile)
        self.config.load()
        if self.output_format is None:
            self.output_format = self.config.get('cli.output_format', 'table')
        if not self.verbose:
            verbose = self.config.get('cli.verbose', 0)
            if isinstance(verbose, bool) or not isinstance(verbose, int) or verbose < 0:
                raise ConfigurationError(f"Invalid verbosity: {verbose!r}")
            self.verbose = verbose
        self.logger.debug("Configuration sources: %s", ', '.join(self.config.get_sources()))

    def output(self, data: Any, format_override: Optional[str] = None):
        """Output data in specified format."""
        format_type = format_override or self.output_format or 'table'

        if format_type == "json":
            click.echo(json.dumps(data, indent=2, default=str))
        elif format_type == "yaml":
            click.echo(yaml.safe_dump(data, default_flow_style=False, sort_keys=False), nl=False)
        else:
            self._output_table(data)

    def _output_table(self, data: Any):
        """Output data in table format."""
        if isinstance(data, dict):
            for key, value in data.items():
                click.echo(f"{key:20} {value}")
        elif isinstance(data, list) and data and isinstance(data[0], dict):
            headers = list(data[0].keys())
            widths = {h: max(len(h), *(len(str(item.get(h, ""))) for item in data)) for h in headers}
            click.echo(" | ".join(f"{h:{widths[h]}}" for h in headers))
            click.echo("-+-".join("-" * widths[h] for h in headers))
            for item in data:
                click.echo(" | ".join(f"{str(item.get(h, '')):{widths[h]}}" for h in headers))
        elif isinstance(data, list):
            for item in data:
                click.echo(item)
        else:
            click.echo(str(data))


pass_context = click.make_pass_decorator(CLIContext, ensure=True)


def handle_cli_error(func):
    """Report library errors as CLI errors instead of tracebacks."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (DescriptorError, ScriptError, CryptoError, ConfigurationError) as e:
            ctx = click.get_current_context().find_object(CLIContext)
            if ctx is not None:
                ctx.logger.debug("Command failed", exc_info=True)
            raise click.ClickException(str(e)) from e

    return wrapper


@click.group(context_settings={'help_option_names': ['-h', '--help']})
@click.option('--config-file', '-c', help='Path to configuration file')
@click.option('--profile', '-p', help='Configuration profile (mainnet, testnet, development)')
@click.option('--output-format', '-o', type=click.Choice(OUTPUT_FORMATS),
              default=None, help='Output format')
@click.option('--verbose', '-v', count=True,
              help='Increase verbosity (-v for INFO, -vv for DEBUG)')
@click.version_option(__version__, prog_name='descriptor-wallet')
@pass_context
def cli(ctx: CLIContext, config_file: Optional[str], profile: Optional[str],
        output_format: Optional[str], verbose: int):
    """
    Descriptor Wallet Command Line Interface

    Expands a key template into every requested output script variant.

    Examples:
        descriptor-wallet generate "HS<[d34db33f/84h/0h/0h]xpub.../0/*>" -i 0 --count 5
        descriptor-wallet variants
        descriptor-wallet config show
    """
    ctx.config_file = config_file
    ctx.profile = profile
    ctx.output_format = output_format
    ctx.verbose = verbose

    try:
        ctx.load_config()
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e

    ctx.setup_logging()
    ctx.logger.debug("CLI initialized with context")


@cli.command()
@click.argument('generator')
@click.option('--index', '-i', type=int, default=None, help='First derivation index')
@click.option('--count', '-n', type=int, default=None, help='Number of indexes to derive')
@click.option('--network', type=click.Choice(NETWORKS), default=None,
              help='Network used for address rendering')
@pass_context
@handle_cli_error
def generate(ctx: CLIContext, generator: str, index: Optional[int], count: Optional[int],
             network: Optional[str]):
    """
    Derive output scripts for a generator.

    GENERATOR uses the compact notation VARIANTS<TEMPLATE>, where VARIANTS
    is a combination of B (bare), H (hashed), N (nested), S (segwit) and
    T (taproot, currently skipped).
    """
    start = ctx.config.get('generator.start_index', 0) if index is None else index
    count = ctx.config.get('generator.default_count', 1) if count is None else count
    network = network or ctx.config.get('network.type', 'bitcoin')
    if count <= 0:
        raise click.BadParameter("count must be positive", param_hint='--count')

    parsed = Generator.parse(generator)
    ctx.logger.info("Generating %d index(es) from %d for %s", count, start, parsed)

    rows: List[Dict[str, Any]] = []
    for offset in range(count):
        for category, descriptor in parsed.descriptors(index=start + offset).items():
            script = descriptor.to_pubkey_script()
            rows.append({
                'index': start + offset,
                'category': str(category),
                'descriptor': str(descriptor),
                'script': script.hex(),
                'address': script.address(network),
            })

    ctx.output(rows)


@cli.command()
@pass_context
def variants(ctx: CLIContext):
    """List variant codes usable in generator notation."""
    ctx.output([
        {
            'code': category.code,
            'category': str(category),
            'supported': category is not Category.TAPROOT,
        }
        for category in VARIANT_ORDER
    ])


@cli.group()
@pass_context
def config(ctx: CLIContext):
    """Configuration management commands."""
    ctx.logger.debug("Config command group invoked")


@config.command('show')
@click.option('--key', '-k', default=None, help='Dot-separated key to show')
@pass_context
def config_show(ctx: CLIContext, key: Optional[str]):
    """Show the merged configuration."""
    if key:
        value = ctx.config.get(key)
        if value is None:
            raise click.ClickException(f"Configuration key not found: {key}")
        ctx.output({key: value})
        return
    ctx.output(ctx.config.load(), format_override=None if ctx.output_format != 'table' else 'yaml')


@config.command('validate')
@pass_context
def config_validate(ctx: CLIContext):
    """Validate the merged configuration."""
    errors = ctx.config.validate()
    if errors:
        for error in errors:
            click.echo(f"Error: {error}", err=True)
        sys.exit(1)
    click.echo("Configuration is valid")


def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == '__main__':
    main()
