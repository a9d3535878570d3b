import click
import functools
import logging
import signal
import traceback
from pathlib import Path

from .config import Config
from .controller import Dispatcher
from .datacls import BuildRequest, IntegrationContext
from .digest import compute_for_integration_context
from .docker import ImageBuilder
from .store import YamlResourceStore, load_resource
from .utils import setup_logger, parse_module_levels, CancelToken
from .exceptions import (
    CtxBuilderError,
    ConfigurationError,
    DefinitionError,
    BuildError,
    StoreError,
)
from . import __version__


def setup_logging(debug: bool, log_levels: str = None, log_file: str = None):
    """Setup logger with debug and module-level configuration"""
    setup_logger(debug=debug, module_levels=parse_module_levels(log_levels), log_file=log_file)


def handle_errors(func):
    """Decorator to handle common exceptions"""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ConfigurationError as e:
            _abort("Configuration error", e)
        except DefinitionError as e:
            _abort("Definition error", e)
        except BuildError as e:
            _abort("Build error", e)
        except StoreError as e:
            _abort("Store error", e)
        except CtxBuilderError as e:
            _abort("An unexpected application error occurred", e)
        except FileNotFoundError as e:
            _abort("A required file was not found", e)
    return wrapper


def _abort(prefix: str, e: Exception):
    logging.error(f"{prefix}: {e}")
    ctx = click.get_current_context()
    if ctx.obj.get('debug'):
        traceback.print_exc()
    raise click.Abort()


def load_config(config_file: str | None, **overrides) -> Config:
    return Config(config_file, overrides=overrides)


def cancel_on_signals(timeout: float | None = None) -> CancelToken:
    """A token fired by SIGINT/SIGTERM so a running builder gets terminated."""
    token = CancelToken(timeout=timeout)

    def _handler(signum, frame):
        logging.warning(f"Received signal {signum}, cancelling...")
        token.cancel()

    signal.signal(signal.SIGINT, _handler)
    signal.signal(signal.SIGTERM, _handler)
    return token


@handle_errors
def do_build(context_file: str, config_file: str, registry: str, image: str, base_only: bool):
    """Execute build command"""
    config = load_config(config_file, registry=registry)
    ctx = load_resource(Path(context_file), IntegrationContext)
    request = BuildRequest.from_context(ctx, config.registry, image_name=image, just_base_image=base_only)
    builder = ImageBuilder(config.builder, workspace_root=config.workspace_root)
    produced = builder.build(request, tag=ctx.name, cancel=cancel_on_signals(config.timeout))
    click.echo(produced)


@handle_errors
def do_run(image: str, config_file: str, registry: str):
    """Execute run command"""
    config = load_config(config_file, registry=registry)
    builder = ImageBuilder(config.builder, workspace_root=config.workspace_root)
    builder.run_integration_image(config.registry, image, cancel=cancel_on_signals())


@handle_errors
def do_digest(context_file: str):
    """Execute digest command"""
    ctx = load_resource(Path(context_file), IntegrationContext)
    click.echo(compute_for_integration_context(ctx))


@handle_errors
def do_reconcile(config_file: str, store_dir: str, namespace: str, once: bool, interval: float):
    """Execute reconcile command"""
    config = load_config(config_file, store_dir=store_dir, namespace=namespace, interval=interval)
    store = YamlResourceStore(config.store_dir)
    dispatcher = Dispatcher.from_config(config, store)
    cancel = cancel_on_signals()
    if once:
        failures = dispatcher.reconcile_all(config.namespace, cancel=cancel)
        if failures:
            logging.error(f"{len(failures)} context(s) failed: {', '.join(sorted(failures))}")
            raise click.Abort()
        return
    dispatcher.run_forever(config.namespace, config.interval, cancel=cancel)


@click.group(context_settings={'help_option_names': ['-h', '--help']})
@click.version_option(version=__version__, prog_name='ctxb')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('-l', '--log-levels', help='Per-module log levels (e.g., orch=DEBUG,ctrl=INFO)')
@click.option('-f', '--log-file', help='Path to log file')
@click.pass_context
def cli(ctx, debug, log_levels, log_file):
    """ctxb - Integration Context Builder

    \b
    Examples:
      ctxb build context.yml --registry example.io
      ctxb run my-integration --registry example.io
      ctxb reconcile --store .ctxb --once
    """
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug
    setup_logging(debug, log_levels, log_file)


@cli.command()
@click.argument('context_file', type=click.Path(exists=True, dir_okay=False))
@click.option('-c', '--config', 'config_file', type=click.Path(exists=True, dir_okay=False), help='Config file')
@click.option('-r', '--registry', help='Target registry (overrides config)')
@click.option('-i', '--image', help='Produced image name (default: context name)')
@click.option('--base-only', is_flag=True, help='Only build the base image')
@click.pass_context
def build(ctx, context_file, config_file, registry, image, base_only):
    """Build the images of an integration context file

    \b
    Examples:
      ctxb build context.yml -r example.io
      ctxb build context.yml --base-only
    """
    do_build(context_file, config_file, registry, image, base_only)


@cli.command()
@click.argument('image')
@click.option('-c', '--config', 'config_file', type=click.Path(exists=True, dir_okay=False), help='Config file')
@click.option('-r', '--registry', help='Registry of the image (overrides config)')
@click.pass_context
def run(ctx, image, config_file, registry):
    """Run a built integration image"""
    do_run(image, config_file, registry)


@cli.command()
@click.argument('context_file', type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def digest(ctx, context_file):
    """Print the digest of an integration context file"""
    do_digest(context_file)


@cli.command()
@click.option('-c', '--config', 'config_file', type=click.Path(exists=True, dir_okay=False), help='Config file')
@click.option('-s', '--store', 'store_dir', help='Resource store directory (overrides config)')
@click.option('-n', '--namespace', help='Namespace to reconcile (overrides config)')
@click.option('--once', is_flag=True, help='Run a single reconciliation pass and exit')
@click.option('--interval', type=float, help='Seconds between passes (overrides config)')
@click.pass_context
def reconcile(ctx, config_file, store_dir, namespace, once, interval):
    """Reconcile the integration contexts of a resource store

    \b
    Examples:
      ctxb reconcile -s .ctxb --once
      ctxb reconcile -c ctxbuilder.yml --interval 5
    """
    do_reconcile(config_file, store_dir, namespace, once, interval)
