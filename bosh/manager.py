# bosh/manager.py
# -*- coding: utf-8 -*-
"""
Director lifecycle collaborator: deploys the jumpbox and the director with
``bosh create-env``.

Each create-env deployment keeps its own state file and vars store in the
``vars/`` directory. The deployment state is also copied into the
environment state record, so it survives even if the state directory is
rebuilt from ``bbl-state.json``.
"""

import json
import logging
import shutil
import subprocess
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from bosh.errors import CreateEnvError, ManagerCreateError
from bosh.executor import Executor
from commands.interfaces import BOSHManager
from common.command_utils import describe_failure
from common.config_models import AppSettings
from storage.state import State
from storage.store import StateStore
from terraform.outputs import Outputs

module_logger = logging.getLogger(__name__)

DIRECTOR_PORT = 25555
DIRECTOR_USERNAME = "admin"
USER_OPS_FILE_NAME = "user-ops-file.yml"


class Manager(BOSHManager):
    def __init__(
        self,
        executor: Executor,
        state_store: StateStore,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
    ):
        self.executor = executor
        self.state_store = state_store
        self.app_settings = app_settings
        self.logger = logger or module_logger

    def version(self) -> str:
        return self.executor.version()

    def initialize_jumpbox(self, state: State) -> None:
        self._manifest(self.app_settings.jumpbox_manifest, "Jumpbox")
        self._write_yaml(
            self._vars_path("jumpbox-vars-file.yml"),
            {"env_id": state.env_id},
        )

    def create_jumpbox(self, state: State, terraform_outputs: Outputs) -> State:
        """
        Deploy the jumpbox.

        Raises:
            CreateEnvError: create-env failed. Nothing needs to be persisted.
        """
        manifest = self._manifest(self.app_settings.jumpbox_manifest, "Jumpbox")
        deployment_state = self._vars_path("jumpbox-state.json")
        self._write_json(deployment_state, state.jumpbox.state)
        outputs_file = self._vars_path("jumpbox-vars-from-terraform.yml")
        self._write_yaml(outputs_file, terraform_outputs.map)

        self.logger.info("Deploying jumpbox...")
        try:
            self.executor.create_env(
                manifest,
                deployment_state,
                self._vars_path("jumpbox-vars-store.yml"),
                vars_files=[self._vars_path("jumpbox-vars-file.yml"), outputs_file],
            )
        except (subprocess.CalledProcessError, OSError) as e:
            raise CreateEnvError(describe_failure(e)) from e

        jumpbox = state.jumpbox.model_copy(
            update={
                "url": terraform_outputs.get_string("jumpbox_url"),
                "state": self._read_json(deployment_state),
            }
        )
        self.logger.info(f"Jumpbox deployed at {jumpbox.url}")
        return state.model_copy(update={"jumpbox": jumpbox}, deep=True)

    def initialize_director(self, state: State, ops_file: str = "") -> None:
        self._manifest(self.app_settings.director_manifest, "Director")
        self._write_yaml(
            self._vars_path("director-vars-file.yml"),
            {"director_name": f"bosh-{state.env_id}"},
        )
        if ops_file:
            shutil.copyfile(
                ops_file,
                self.state_store.get_director_deployment_dir() / USER_OPS_FILE_NAME,
            )

    def create_director(self, state: State, terraform_outputs: Outputs) -> State:
        """
        Deploy the director and record its address and credentials.

        Raises:
            ManagerCreateError: create-env failed; the error carries the state
                with whatever deployment state create-env wrote.
        """
        manifest = self._manifest(self.app_settings.director_manifest, "Director")
        deployment_state = self._vars_path("bosh-state.json")
        self._write_json(deployment_state, state.bosh.state)
        vars_store = self._vars_path("director-vars-store.yml")
        outputs_file = self._vars_path("director-vars-from-terraform.yml")
        self._write_yaml(outputs_file, terraform_outputs.map)

        ops_files = []
        user_ops_file = (
            self.state_store.get_director_deployment_dir() / USER_OPS_FILE_NAME
        )
        if user_ops_file.is_file():
            ops_files.append(user_ops_file)

        self.logger.info("Deploying bosh director...")
        try:
            self.executor.create_env(
                manifest,
                deployment_state,
                vars_store,
                vars_files=[self._vars_path("director-vars-file.yml"), outputs_file],
                ops_files=ops_files,
            )
        except (subprocess.CalledProcessError, OSError) as e:
            bosh = state.bosh.model_copy(
                update={"state": self._read_json(deployment_state)}
            )
            partial = state.model_copy(update={"bosh": bosh}, deep=True)
            raise ManagerCreateError(partial, describe_failure(e)) from e

        credentials = self._read_yaml(vars_store)
        bosh = state.bosh.model_copy(
            update={
                "director_name": f"bosh-{state.env_id}",
                "director_username": DIRECTOR_USERNAME,
                "director_password": str(credentials.get("admin_password", "")),
                "director_address": self._director_address(terraform_outputs),
                "director_ssl_ca": str(
                    (credentials.get("director_ssl") or {}).get("ca", "")
                ),
                "state": self._read_json(deployment_state),
            }
        )
        self.logger.info(f"Director deployed at {bosh.director_address}")
        return state.model_copy(update={"bosh": bosh}, deep=True)

    def _director_address(self, terraform_outputs: Outputs) -> str:
        address = terraform_outputs.get_string("director_address")
        if address:
            return address
        internal_ip = terraform_outputs.get_string("director__internal_ip")
        return f"https://{internal_ip}:{DIRECTOR_PORT}" if internal_ip else ""

    def _manifest(self, configured: Path, label: str) -> Path:
        manifest = Path(configured)
        if not manifest.is_absolute():
            manifest = self.state_store.get_bbl_dir() / manifest
        if not manifest.is_file():
            raise FileNotFoundError(f"{label} manifest not found: {manifest}")
        return manifest

    def _vars_path(self, name: str) -> Path:
        return self.state_store.get_vars_dir() / name

    def _write_json(self, path: Path, content: Dict[str, Any]) -> None:
        if content:
            path.write_text(json.dumps(content, indent=2), encoding="utf-8")
        elif path.exists():
            path.unlink()

    def _read_json(self, path: Path) -> Dict[str, Any]:
        if not path.is_file():
            return {}
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            self.logger.warning(f"Ignoring unreadable deployment state {path}")
            return {}

    def _write_yaml(self, path: Path, content: Dict[str, Any]) -> None:
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(content, f, default_flow_style=False)

    def _read_yaml(self, path: Path) -> Dict[str, Any]:
        if not path.is_file():
            return {}
        with open(path, "r", encoding="utf-8") as f:
            content = yaml.safe_load(f)
        return content if isinstance(content, dict) else {}
