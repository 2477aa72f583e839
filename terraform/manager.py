# terraform/manager.py
# -*- coding: utf-8 -*-
"""
Provisioning collaborator: writes terraform templates and applies them.
"""

import json
import logging
import subprocess
from pathlib import Path
from typing import Optional

from commands.interfaces import TerraformManager
from common.command_utils import describe_failure
from common.config_models import AppSettings
from storage.state import State
from terraform.errors import ManagerError, TemplateError
from terraform.executor import Executor
from terraform.outputs import Outputs

module_logger = logging.getLogger(__name__)

TEMPLATE_FILE_NAME = "bbl-template.tf"


class Manager(TerraformManager):
    def __init__(
        self,
        executor: Executor,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
    ):
        self.executor = executor
        self.app_settings = app_settings
        self.logger = logger or module_logger

    def init(self, state: State) -> None:
        """
        Write the terraform template and variables for the environment.

        Every ``*.tf`` file under ``<templates_dir>/<iaas>/`` is concatenated,
        in name order, into ``bbl-template.tf``.

        Raises:
            TemplateError: There are no templates for the IaaS.
        """
        source_dir = Path(self.app_settings.templates_dir) / state.iaas
        templates = sorted(source_dir.glob("*.tf")) if source_dir.is_dir() else []
        if not templates:
            raise TemplateError(f"No terraform templates found in {source_dir}")

        template = "\n".join(
            path.read_text(encoding="utf-8") for path in templates
        )
        (self.executor.terraform_dir / TEMPLATE_FILE_NAME).write_text(
            template, encoding="utf-8"
        )
        self.executor.tfvars_path.write_text(
            json.dumps(self._variables(state), indent=2, sort_keys=True),
            encoding="utf-8",
        )
        self.logger.info(
            f"Wrote terraform template from {len(templates)} file(s) in {source_dir}"
        )

    def apply(self, state: State) -> State:
        """
        Apply the template and record the resulting terraform state.

        Raises:
            ManagerError: The apply failed; carries ``state`` updated with
                whatever terraform state was written before the failure.
        """
        try:
            self.executor.init()
            output = self.executor.apply(state.tf_state)
        except (subprocess.CalledProcessError, OSError) as e:
            partial = state.model_copy(
                update={
                    "tf_state": self.executor.read_state() or state.tf_state,
                    "latest_tf_output": self._failure_output(e),
                },
                deep=True,
            )
            raise ManagerError(partial, describe_failure(e)) from e

        return state.model_copy(
            update={
                "tf_state": self.executor.read_state(),
                "latest_tf_output": output,
            },
            deep=True,
        )

    def get_outputs(self, state: State) -> Outputs:
        return Outputs.from_terraform_json(self.executor.outputs(state.tf_state))

    def _variables(self, state: State) -> dict:
        variables = {"env_id": state.env_id}
        if state.lb.type:
            variables["lb_type"] = state.lb.type
            variables["lb_domain"] = state.lb.domain
            variables["lb_cert"] = state.lb.cert
            variables["lb_key"] = state.lb.key
        return variables

    def _failure_output(self, error: Exception) -> str:
        if isinstance(error, subprocess.CalledProcessError):
            return "\n".join(
                part
                for part in (error.stdout, error.stderr)
                if isinstance(part, str) and part
            )
        return str(error)
