# commands/cli.py
# -*- coding: utf-8 -*-
"""
Command-line entry point for envup.
"""

import subprocess
from typing import Optional, Tuple

import click

from bosh.errors import CreateEnvError, ManagerCreateError
from bosh.executor import Executor as BOSHExecutor
from bosh.manager import Manager as BOSHManager
from cloudconfig.manager import CloudConfigError
from cloudconfig.manager import Manager as CloudConfigManager
from commands.env_id_manager import EnvIDManager
from commands.errors import CommandError
from commands.lb_args_handler import LBArgsHandler
from commands.plan import Plan
from commands.up import Up
from common.command_utils import get_symbols
from common.config_loader import CONFIG_FILE_DEFAULT, load_app_settings
from common.config_models import AppSettings
from common.logging_config import setup_logging
from storage.errors import StateStoreError
from storage.state import State
from storage.store import StateStore
from terraform.errors import ManagerError, TemplateError
from terraform.executor import Executor as TerraformExecutor
from terraform.manager import Manager as TerraformManager

REPORTED_ERRORS = (
    CommandError,
    StateStoreError,
    ManagerError,
    ManagerCreateError,
    CreateEnvError,
    CloudConfigError,
    TemplateError,
    subprocess.CalledProcessError,
    OSError,
)

PASSTHROUGH_CONTEXT = {"ignore_unknown_options": True, "allow_extra_args": True}


def build_commands(
    app_settings: AppSettings, state_store: StateStore
) -> Tuple[Plan, Up]:
    """Wire the concrete collaborators for one state directory."""
    bosh_manager = BOSHManager(
        BOSHExecutor(app_settings), state_store, app_settings
    )
    cloud_config_manager = CloudConfigManager(
        BOSHExecutor(app_settings), state_store
    )
    terraform_manager = TerraformManager(
        TerraformExecutor(
            state_store.get_terraform_dir(),
            state_store.get_vars_dir(),
            app_settings,
        ),
        app_settings,
    )
    env_id_manager = EnvIDManager()
    lb_args_handler = LBArgsHandler()

    plan = Plan(
        bosh_manager,
        cloud_config_manager,
        state_store,
        env_id_manager,
        terraform_manager,
        lb_args_handler,
    )
    up = Up(
        plan,
        bosh_manager,
        cloud_config_manager,
        state_store,
        env_id_manager,
        terraform_manager,
        lb_args_handler,
    )
    return plan, up


def _load_state(app_settings: AppSettings, state_store: StateStore) -> State:
    state = state_store.get()
    if not state.iaas and app_settings.iaas:
        state = state.model_copy(update={"iaas": app_settings.iaas})
    return state


@click.group()
@click.option(
    "--state-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory holding the environment state.",
)
@click.option(
    "--config-file",
    type=click.Path(dir_okay=False),
    default=CONFIG_FILE_DEFAULT,
    show_default=True,
    help="YAML configuration file.",
)
@click.option("--iaas", default=None, help="Cloud provider for a new environment.")
@click.option("--debug", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(
    ctx: click.Context,
    state_dir: Optional[str],
    config_file: str,
    iaas: Optional[str],
    debug: bool,
):
    """
    envup provisions an environment's infrastructure, jumpbox and director.

    Progress is saved after every step; re-run the same command to resume.
    """
    app_settings = load_app_settings(
        cli_overrides={
            "state_dir": state_dir,
            "iaas": iaas,
            "log_level": "DEBUG" if debug else None,
        },
        config_file_path=config_file,
    )
    setup_logging(
        "envup",
        log_level=app_settings.log_level,
        log_format=app_settings.log_format,
        log_file_path=app_settings.log_file,
    )
    ctx.obj = app_settings


@cli.command(name="plan", context_settings=PASSTHROUGH_CONTEXT)
@click.argument("flags", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
def plan_command(app_settings: AppSettings, flags: Tuple[str, ...]):
    """
    Writes the templates and vars for an environment without deploying it.

    Accepts --name, --no-director, --ops-file and the --lb-* flags.
    """
    symbols = get_symbols(app_settings)
    try:
        state_store = StateStore(app_settings.state_dir)
        state = _load_state(app_settings, state_store)
        plan, _ = build_commands(app_settings, state_store)
        plan.check_fast_fails(list(flags), state)
        plan.execute(list(flags), state)
    except REPORTED_ERRORS as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"{symbols.get('success', '✅')} Plan written to {app_settings.state_dir}")


@cli.command(name="up", context_settings=PASSTHROUGH_CONTEXT)
@click.argument("flags", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
def up_command(app_settings: AppSettings, flags: Tuple[str, ...]):
    """
    Brings the environment up: infrastructure, jumpbox, director, cloud config.

    Flags are the same as for plan. On a directory that has not been planned
    yet, up only plans; run it again to deploy.
    """
    symbols = get_symbols(app_settings)
    try:
        state_store = StateStore(app_settings.state_dir)
        state = _load_state(app_settings, state_store)
        plan, up = build_commands(app_settings, state_store)
        up.check_fast_fails(list(flags), state)
        was_planned = plan.is_initialized(state)
        up.execute(list(flags), state)
    except REPORTED_ERRORS as e:
        raise click.ClickException(str(e)) from e
    if not was_planned:
        click.echo(
            f"{symbols.get('success', '✅')} Plan written to {app_settings.state_dir}; "
            "run up again to deploy it"
        )
        return
    click.echo(f"{symbols.get('rocket', '🚀')} up completed for {app_settings.state_dir}")


def main():
    cli()


if __name__ == "__main__":
    main()
