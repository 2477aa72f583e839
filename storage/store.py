# storage/store.py
# -*- coding: utf-8 -*-
"""
Durable persistence for the environment state.

The state lives in ``<state_dir>/bbl-state.json``. Every write goes through a
temporary file in the same directory followed by an atomic rename, so a crash
mid-write leaves the previous checkpoint intact.
"""

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from storage.errors import StateStoreError
from storage.state import STATE_VERSION, State

module_logger = logging.getLogger(__name__)

STATE_FILE_NAME = "bbl-state.json"

TERRAFORM_DIR = "terraform"
VARS_DIR = "vars"
CLOUD_CONFIG_DIR = "cloud-config"
JUMPBOX_DEPLOYMENT_DIR = "jumpbox-deployment"
DIRECTOR_DEPLOYMENT_DIR = "bosh-deployment"

MANAGED_DIRS = (
    TERRAFORM_DIR,
    VARS_DIR,
    CLOUD_CONFIG_DIR,
    JUMPBOX_DEPLOYMENT_DIR,
    DIRECTOR_DEPLOYMENT_DIR,
)


class StateStore:
    """Reads and writes the state file for a single state directory."""

    def __init__(
        self,
        state_dir: Union[str, Path],
        logger: Optional[logging.Logger] = None,
    ):
        self.state_dir = Path(state_dir)
        self.logger = logger or module_logger

    @property
    def state_file(self) -> Path:
        return self.state_dir / STATE_FILE_NAME

    def set(self, state: State) -> None:
        """
        Persist the given state.

        An empty state means the environment has been torn down: the state
        file and every managed subdirectory are removed instead.

        Raises:
            StateStoreError: If the state cannot be written.
        """
        if state.is_empty():
            self._clear()
            return

        to_write = state.model_copy(update={"version": STATE_VERSION})
        temp_file_path = ""
        try:
            self.state_dir.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                mode="w",
                delete=False,
                dir=self.state_dir,
                prefix="bbl-state_",
                suffix=".json.tmp",
                encoding="utf-8",
            ) as temp_f:
                temp_f.write(to_write.to_json())
                temp_file_path = temp_f.name
            os.chmod(temp_file_path, 0o640)
            os.replace(temp_file_path, self.state_file)
            temp_file_path = ""
        except OSError as e:
            raise StateStoreError(
                f"Failed to write state file {self.state_file}: {e}"
            ) from e
        finally:
            if temp_file_path and os.path.exists(temp_file_path):
                os.unlink(temp_file_path)

        self.logger.debug(f"State saved to {self.state_file}")

    def get(self) -> State:
        """
        Load the persisted state, or an empty state if none exists yet.

        Raises:
            StateStoreError: If the file exists but cannot be read or parsed.
        """
        if not self.state_file.is_file():
            return State()
        try:
            content = self.state_file.read_text(encoding="utf-8")
        except (IOError, UnicodeDecodeError) as e:
            raise StateStoreError(
                f"Failed to read state file {self.state_file}: {e}"
            ) from e
        try:
            return State.from_json(content)
        except ValidationError as e:
            raise StateStoreError(
                f"State file {self.state_file} is malformed: {e}"
            ) from e

    def get_bbl_dir(self) -> Path:
        return self._ensure_dir(self.state_dir)

    def get_terraform_dir(self) -> Path:
        return self._ensure_dir(self.state_dir / TERRAFORM_DIR)

    def get_vars_dir(self) -> Path:
        return self._ensure_dir(self.state_dir / VARS_DIR)

    def get_cloud_config_dir(self) -> Path:
        return self._ensure_dir(self.state_dir / CLOUD_CONFIG_DIR)

    def get_director_deployment_dir(self) -> Path:
        return self._ensure_dir(self.state_dir / DIRECTOR_DEPLOYMENT_DIR)

    def _ensure_dir(self, path: Path) -> Path:
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StateStoreError(f"Failed to create {path}: {e}") from e
        return path

    def _clear(self) -> None:
        try:
            if self.state_file.exists():
                self.state_file.unlink()
            for name in MANAGED_DIRS:
                shutil.rmtree(self.state_dir / name, ignore_errors=True)
        except OSError as e:
            raise StateStoreError(
                f"Failed to clear state in {self.state_dir}: {e}"
            ) from e
        self.logger.info(f"Cleared state in {self.state_dir}")
