# commands/plan.py
# -*- coding: utf-8 -*-
"""
The ``plan`` command: prepare an environment's state directory.

Planning names the environment, records the director choice and load
balancer settings, and writes the terraform templates, create-env vars and
cloud config that ``up`` later applies. ``up`` delegates to planning when
the state directory has not been planned yet.
"""

import argparse
import logging
import re
from typing import List, Optional, Tuple

from commands.errors import (
    NO_DIRECTOR_WITH_EXISTING_DIRECTOR,
    CommandError,
    StageError,
)
from commands.interfaces import (
    BOSHManager,
    CloudConfigManager,
    EnvIDManager,
    LBArgsHandler,
    Planner,
    StateStore,
    TerraformManager,
)
from commands.plan_config import PlanConfig
from storage.state import State
from terraform.manager import TEMPLATE_FILE_NAME

module_logger = logging.getLogger(__name__)

MINIMUM_BOSH_VERSION = "2.0.24"
MINIMUM_STATE_VERSION = 3
SUPPORTED_IAAS = ("gcp", "aws", "azure", "vsphere", "openstack")


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting the process."""

    def error(self, message):
        raise CommandError(f"Invalid arguments: {message}")

    def exit(self, status=0, message=None):
        raise CommandError(message.strip() if message else "Invalid arguments")


def _build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(prog="plan", add_help=False)
    parser.add_argument("--name", default="", help="Name to assign to the environment.")
    parser.add_argument(
        "--no-director",
        action="store_true",
        help="Provision infrastructure only, without a jumpbox or director.",
    )
    parser.add_argument("--ops-file", default="", help="Ops file applied to the director deployment.")
    parser.add_argument("--lb-type", default="", help="Load balancer to create: cf or concourse.")
    parser.add_argument("--lb-cert", default="", help="Path to the load balancer certificate.")
    parser.add_argument("--lb-key", default="", help="Path to the load balancer private key.")
    parser.add_argument("--lb-domain", default="", help="Domain for the cf load balancer DNS zone.")
    return parser


def _version_tuple(version: str) -> Tuple[int, ...]:
    match = re.match(r"^v?(\d+(?:\.\d+)*)", version.strip())
    if not match:
        raise CommandError(f"Could not parse BOSH version: {version!r}")
    return tuple(int(part) for part in match.group(1).split("."))


class Plan(Planner):
    """Planning collaborator for ``up``."""

    def __init__(
        self,
        bosh_manager: BOSHManager,
        cloud_config_manager: CloudConfigManager,
        state_store: StateStore,
        env_id_manager: EnvIDManager,
        terraform_manager: TerraformManager,
        lb_args_handler: LBArgsHandler,
        logger: Optional[logging.Logger] = None,
    ):
        self.bosh_manager = bosh_manager
        self.cloud_config_manager = cloud_config_manager
        self.state_store = state_store
        self.env_id_manager = env_id_manager
        self.terraform_manager = terraform_manager
        self.lb_args_handler = lb_args_handler
        self.logger = logger or module_logger

    def check_fast_fails(self, subcommand_flags: List[str], state: State) -> None:
        """
        Reject invocations that cannot succeed, before anything is changed.

        Raises:
            CommandError: Describing the first problem found.
        """
        if not state.iaas:
            raise CommandError(
                f"--iaas [{', '.join(SUPPORTED_IAAS)}] must be provided or ENVUP_IAAS must be set"
            )

        if 0 < state.version < MINIMUM_STATE_VERSION:
            raise CommandError(
                "Existing environment state is too old, please re-create it"
            )

        config = self.parse_args(subcommand_flags, state)

        if state.env_id and config.name and config.name != state.env_id:
            raise CommandError(
                f"The director name cannot be changed for an existing environment. Current name is {state.env_id}."
            )

        if not (config.no_director or state.no_director):
            try:
                version = self.bosh_manager.version()
            except ValueError as e:
                raise CommandError(f"Could not determine BOSH version: {e}") from e
            if _version_tuple(version) < _version_tuple(MINIMUM_BOSH_VERSION):
                raise CommandError(
                    f"BOSH version must be at least v{MINIMUM_BOSH_VERSION}"
                )

    def parse_args(self, args: List[str], state: State) -> PlanConfig:
        """
        Parse command flags into a PlanConfig.

        Raises:
            CommandError: Unknown flags or invalid load balancer settings.
        """
        namespace = _build_parser().parse_args(list(args))
        config = PlanConfig(
            name=namespace.name,
            no_director=namespace.no_director,
            ops_file=namespace.ops_file,
            lb_type=namespace.lb_type,
            lb_cert=namespace.lb_cert,
            lb_key=namespace.lb_key,
            lb_domain=namespace.lb_domain,
        )
        self.lb_args_handler.get_lb_state(state.iaas, config)
        return config

    def is_initialized(self, state: State) -> bool:
        return (self.state_store.get_terraform_dir() / TEMPLATE_FILE_NAME).is_file()

    def execute(self, args: List[str], state: State) -> None:
        config = self.parse_args(args, state)
        self.initialize_plan(config, state)

    def initialize_plan(self, config: PlanConfig, state: State) -> State:
        """
        Write everything ``up`` needs and persist the planned state.

        Returns:
            The planned state, as saved.
        """
        if config.no_director and state.bosh.director_name:
            raise CommandError(NO_DIRECTOR_WITH_EXISTING_DIRECTOR)

        updates = {
            "lb": self.lb_args_handler.merge(
                self.lb_args_handler.get_lb_state(state.iaas, config), state.lb
            )
        }
        if config.no_director:
            updates["no_director"] = True
        state = state.model_copy(update=updates, deep=True)

        try:
            state = self.env_id_manager.sync(state, config.name)
        except Exception as e:
            raise StageError("Env id manager sync", e) from e

        try:
            self.state_store.set(state)
        except Exception as e:
            raise StageError("Save state after sync", e) from e

        try:
            self.terraform_manager.init(state)
        except Exception as e:
            raise StageError("Terraform manager init", e) from e

        if not state.no_director:
            try:
                self.bosh_manager.initialize_jumpbox(state)
            except Exception as e:
                raise StageError("Bosh manager initialize jumpbox", e) from e

            try:
                self.bosh_manager.initialize_director(state, config.ops_file)
            except Exception as e:
                raise StageError("Bosh manager initialize director", e) from e

            try:
                self.cloud_config_manager.initialize(state)
            except Exception as e:
                raise StageError("Cloud config manager initialize", e) from e

        self.logger.info(f"Plan written to {self.state_store.get_bbl_dir()}")
        return state
