"""Main CLI entrypoint for Cloudwrap."""

import logging
import sys
from pathlib import Path
from typing import Tuple

import click
from botocore.exceptions import BotoCoreError

from ..config import Config
from ..errors import CloudwrapError, ExecError, MissingFieldError
from ..models import RecordKind
from ..output import export, get_table, postgres_env, render_table
from ..pagination import DEFAULT_MAX_PAGES
from ..secretsmanager import SecretsManagerClient
from ..settings import DEFAULT_DB_CLIENT, DEFAULT_REGION, Settings, parse_max_pages
from ..sinks import exec_with_pairs, launch_db_shell, write_env_file, write_stdout
from ..ssm import SsmClient

logger = logging.getLogger(__name__)


def _build_clients(settings: Settings) -> Tuple[SsmClient, SecretsManagerClient]:
    try:
        return SsmClient.from_settings(settings), SecretsManagerClient.from_settings(settings)
    except BotoCoreError as e:
        raise CloudwrapError(f"could not create AWS clients: {e}") from e


def _max_pages_callback(ctx, param, value):
    try:
        return parse_max_pages(value)
    except ValueError as e:
        raise click.BadParameter(str(e))


def _exit_status(error: CloudwrapError) -> int:
    """Child exit status for exec failures, shell-style 128+N for signals, else 1."""
    if isinstance(error, ExecError) and error.returncode:
        if error.returncode < 0:
            return 128 + abs(error.returncode)
        return error.returncode
    return 1


def _fail(error: CloudwrapError) -> None:
    click.echo(f"❌ {error}", err=True)
    sys.exit(_exit_status(error))


@click.group()
@click.argument('environment')
@click.argument('service')
@click.option('--region', envvar='CLOUDWRAP_REGION', default=DEFAULT_REGION, show_default=True, help='AWS region')
@click.option('--profile', envvar='AWS_PROFILE', default=None, help='AWS credentials profile')
@click.option('--max-pages', envvar='CLOUDWRAP_MAX_PAGES', type=int, default=DEFAULT_MAX_PAGES,
              show_default=True, callback=_max_pages_callback, help='Page bound per listing call (0 = unbounded)')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
def main(ctx, environment, service, region, profile, max_pages, verbose):
    """Cloudwrap - resolve parameters and secrets for ENVIRONMENT/SERVICE."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj['config'] = Config(environment, service)
    logger.debug(f"Resolving namespace {ctx.obj['config'].as_path()} in {region}")
    ctx.obj['settings'] = Settings(region=region, profile=profile, max_pages=max_pages)


@main.command()
@click.pass_context
def describe(ctx):
    """Show parameter and secret metadata as tables."""
    config = ctx.obj['config']
    try:
        ssm, secrets = _build_clients(ctx.obj['settings'])
        parameters = ssm.describe_parameters(config)
        entries = secrets.list_secrets(config)
        click.echo(render_table(get_table(parameters, RecordKind.PARAMETER_METADATA, title="Parameters")))
        click.echo(render_table(get_table(entries, RecordKind.SECRET_ENTRY, title="Secrets")))
    except CloudwrapError as e:
        _fail(e)


@main.command()
@click.pass_context
def stdout(ctx):
    """Print KEY=VALUE lines for every parameter and secret."""
    config = ctx.obj['config']
    try:
        ssm, secrets = _build_clients(ctx.obj['settings'])
        parameters = ssm.get_parameters(config)
        values = secrets.get_secret_values(config)
        write_stdout(export(parameters, RecordKind.PARAMETER))
        write_stdout(export(values, RecordKind.SECRET_VALUE))
    except CloudwrapError as e:
        _fail(e)


@main.command('file')
@click.argument('path', type=click.Path(dir_okay=False, path_type=Path))
@click.pass_context
def file_cmd(ctx, path):
    """Write `export KEY=VALUE` lines to PATH."""
    config = ctx.obj['config']
    try:
        ssm, secrets = _build_clients(ctx.obj['settings'])
        parameters = ssm.get_parameters(config)
        values = secrets.get_secret_values(config)
        pairs = export(parameters, RecordKind.PARAMETER) + export(values, RecordKind.SECRET_VALUE, quote_secrets=True)
        write_env_file(path, pairs)
    except CloudwrapError as e:
        _fail(e)


@main.command('exec', context_settings={'ignore_unknown_options': True})
@click.argument('cmd')
@click.argument('args', nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def exec_cmd(ctx, cmd, args):
    """Run CMD with only the resolved values in its environment."""
    config = ctx.obj['config']
    try:
        ssm, secrets = _build_clients(ctx.obj['settings'])
        parameters = ssm.get_parameters(config)
        values = secrets.get_secret_values(config)
        exec_with_pairs(cmd, args, export(parameters, RecordKind.PARAMETER), export(values, RecordKind.SECRET_VALUE))
    except CloudwrapError as e:
        _fail(e)


@main.command()
@click.argument('key')
@click.option('--client', 'db_client', envvar='CLOUDWRAP_DB_CLIENT', default=DEFAULT_DB_CLIENT,
              show_default=True, help='Database client to launch')
@click.pass_context
def shell(ctx, key, db_client):
    """Open a database shell using the Postgres secret KEY."""
    config = ctx.obj['config']
    try:
        _, secrets = _build_clients(ctx.obj['settings'])
        secret = secrets.get_secret_value(config, key)
        if secret.value is None:
            raise MissingFieldError(f"secret {secret.name}", "value")
        launch_db_shell(db_client, postgres_env(secret.value))
    except CloudwrapError as e:
        _fail(e)


if __name__ == '__main__':
    main()
