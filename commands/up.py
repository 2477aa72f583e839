# commands/up.py
# -*- coding: utf-8 -*-
"""
The ``up`` command: bring an environment from planned to fully deployed.

Stages run strictly in order, each consuming the state produced by the one
before it:

    env id sync -> terraform apply -> jumpbox -> director -> cloud config

The state is checkpointed through the state store after every stage that
produces a new record, including failed stages that still carry partial
progress, so re-running ``up`` resumes instead of starting over.
"""

import logging
from typing import List, Optional

from bosh.errors import ManagerCreateError
from commands.errors import (
    NO_DIRECTOR_WITH_EXISTING_DIRECTOR,
    CommandError,
    CompoundError,
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
from terraform.errors import ManagerError

module_logger = logging.getLogger(__name__)


class Up:
    """Runs the staged ``up`` pipeline with a checkpoint after each stage."""

    def __init__(
        self,
        plan: Planner,
        bosh_manager: BOSHManager,
        cloud_config_manager: CloudConfigManager,
        state_store: StateStore,
        env_id_manager: EnvIDManager,
        terraform_manager: TerraformManager,
        lb_args_handler: LBArgsHandler,
        logger: Optional[logging.Logger] = None,
    ):
        self.plan = plan
        self.bosh_manager = bosh_manager
        self.cloud_config_manager = cloud_config_manager
        self.state_store = state_store
        self.env_id_manager = env_id_manager
        self.terraform_manager = terraform_manager
        # Carried for parity with plan; up takes LB settings from the state.
        self.lb_args_handler = lb_args_handler
        self.logger = logger or module_logger

    def check_fast_fails(self, subcommand_flags: List[str], state: State) -> None:
        self.plan.check_fast_fails(subcommand_flags, state)

    def parse_args(self, args: List[str], state: State) -> PlanConfig:
        return self.plan.parse_args(args, state)

    def execute(self, args: List[str], state: State) -> None:
        """
        Bring the environment up.

        If the environment has never been planned, the whole invocation is
        handed to the planner. Otherwise every stage is run in order.

        Raises:
            CommandError: A stage or a checkpoint failed. The message names
                the stage; earlier checkpoints have already been saved.
        """
        if not self.plan.is_initialized(state):
            self.logger.info("No plan found for this environment, running plan.")
            self.plan.execute(args, state)
            return None

        config = self.parse_args(args, state)

        if config.no_director:
            if state.bosh.director_name:
                raise CommandError(NO_DIRECTOR_WITH_EXISTING_DIRECTOR)
            state = state.model_copy(update={"no_director": True}, deep=True)

        self.logger.info("--- Stage 1: Syncing environment id ---")
        try:
            state = self.env_id_manager.sync(state, config.name)
        except Exception as e:
            raise StageError("Env id manager sync", e) from e
        self._checkpoint(state, "sync")

        self.logger.info("--- Stage 2: Applying terraform ---")
        try:
            state = self.terraform_manager.apply(state)
        except Exception as e:
            partial = e.bbl_state if isinstance(e, ManagerError) else state
            self.logger.error(f"Terraform apply failed: {e}")
            self._save_partial(partial, e)
            raise
        self._checkpoint(state, "terraform apply")

        if state.no_director:
            self.logger.info(
                "Environment has no director; skipping jumpbox, director and cloud config."
            )
            return None

        try:
            terraform_outputs = self.terraform_manager.get_outputs(state)
        except Exception as e:
            raise StageError("Parse terraform outputs", e) from e

        self.logger.info("--- Stage 3: Creating jumpbox ---")
        try:
            state = self.bosh_manager.create_jumpbox(state, terraform_outputs)
        except Exception as e:
            raise StageError("Create jumpbox", e) from e
        self._checkpoint(state, "create jumpbox")

        self.logger.info("--- Stage 4: Creating bosh director ---")
        try:
            state = self.bosh_manager.create_director(state, terraform_outputs)
        except ManagerCreateError as e:
            self.logger.error(f"Director creation failed: {e}")
            try:
                self.state_store.set(e.bbl_state)
            except Exception as save_error:
                raise StageError(
                    "Save state after bosh director create error",
                    f"{e}, {save_error}",
                ) from save_error
            raise StageError("Create bosh director", e) from e
        except Exception as e:
            raise StageError("Create bosh director", e) from e
        self._checkpoint(state, "create director")

        self.logger.info("--- Stage 5: Updating cloud config ---")
        try:
            self.cloud_config_manager.update(state)
        except Exception as e:
            raise StageError("Update cloud config", e) from e

        self.logger.info("Environment is up.")
        return None

    def _checkpoint(self, state: State, after: str) -> None:
        """Persist the state produced by a successful stage."""
        try:
            self.state_store.set(state)
        except Exception as e:
            raise StageError(f"Save state after {after}", e) from e
        self.logger.debug(f"Checkpoint saved after {after}.")

    def _save_partial(self, partial: State, stage_error: Exception) -> None:
        """
        Persist the partial state left by a failed stage.

        If that also fails, both failures are raised together. Otherwise the
        caller re-raises the stage error.
        """
        try:
            self.state_store.set(partial)
        except Exception as save_error:
            raise CompoundError([stage_error, save_error]) from save_error
