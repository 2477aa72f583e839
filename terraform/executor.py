# terraform/executor.py
# -*- coding: utf-8 -*-
"""
Thin wrapper around the terraform CLI.

The terraform state is kept in the environment's state record rather than in
a backend; it is written to ``vars/terraform.tfstate`` before each command and
read back afterwards, including after a failed apply.
"""

import logging
import subprocess
from pathlib import Path
from typing import Optional

from common.command_utils import run_command
from common.config_models import AppSettings

module_logger = logging.getLogger(__name__)

TFSTATE_FILE_NAME = "terraform.tfstate"
TFVARS_FILE_NAME = "bbl.tfvars.json"


class Executor:
    def __init__(
        self,
        terraform_dir: Path,
        vars_dir: Path,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
    ):
        self.terraform_dir = Path(terraform_dir)
        self.vars_dir = Path(vars_dir)
        self.app_settings = app_settings
        self.logger = logger or module_logger

    @property
    def tfstate_path(self) -> Path:
        return self.vars_dir / TFSTATE_FILE_NAME

    @property
    def tfvars_path(self) -> Path:
        return self.vars_dir / TFVARS_FILE_NAME

    def init(self) -> None:
        self._run(["init", "-input=false", "-no-color"])

    def apply(self, tf_state: str) -> str:
        """
        Run ``terraform apply`` against the given serialized state.

        Returns:
            Captured stdout of the apply.

        Raises:
            subprocess.CalledProcessError: The apply failed. Whatever state
                terraform wrote is still available through read_state().
        """
        self.write_state(tf_state)
        result = self._run(
            [
                "apply",
                "-auto-approve",
                "-input=false",
                "-no-color",
                f"-state={self.tfstate_path}",
                f"-var-file={self.tfvars_path}",
            ]
        )
        return result.stdout or ""

    def outputs(self, tf_state: str) -> str:
        self.write_state(tf_state)
        result = self._run(
            ["output", "-json", "-no-color", f"-state={self.tfstate_path}"]
        )
        return result.stdout or ""

    def write_state(self, tf_state: str) -> None:
        if tf_state:
            self.tfstate_path.write_text(tf_state, encoding="utf-8")
        elif self.tfstate_path.exists():
            self.tfstate_path.unlink()

    def read_state(self) -> str:
        if not self.tfstate_path.is_file():
            return ""
        return self.tfstate_path.read_text(encoding="utf-8")

    def _run(self, args) -> subprocess.CompletedProcess:
        return run_command(
            [self.app_settings.terraform_binary, *args],
            self.app_settings,
            capture_output=True,
            current_logger=self.logger,
            cwd=self.terraform_dir,
        )
