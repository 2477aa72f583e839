# cloudconfig/manager.py
# -*- coding: utf-8 -*-
"""
Cloud config collaborator.

A provider-neutral base cloud config is generated from the state and
written to ``cloud-config/cloud-config.yml``. Provider specifics (subnets,
instance types, cloud properties) are layered on by ops files placed next to
it as ``ops*.yml``; they are applied in name order when the cloud config is
published to the director.
"""

import logging
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from bosh.executor import Executor
from commands.interfaces import CloudConfigManager
from common.command_utils import describe_failure
from storage.state import State
from storage.store import StateStore

module_logger = logging.getLogger(__name__)

CLOUD_CONFIG_FILE_NAME = "cloud-config.yml"

AZS = ("z1", "z2", "z3")
VM_TYPES = ("default", "minimal", "small", "medium", "large", "xlarge")
DISK_SIZES_GB = (1, 5, 10, 50, 100, 500, 1024)

LB_VM_EXTENSIONS = {
    "cf": ("cf-router-network-properties", "diego-ssh-proxy-network-properties", "cf-tcp-router-network-properties"),
    "concourse": ("lb",),
}


class CloudConfigError(Exception):
    """Raised when the cloud config cannot be published."""


class Manager(CloudConfigManager):
    def __init__(
        self,
        executor: Executor,
        state_store: StateStore,
        logger: Optional[logging.Logger] = None,
    ):
        self.executor = executor
        self.state_store = state_store
        self.logger = logger or module_logger

    def initialize(self, state: State) -> None:
        path = self._write(state)
        self.logger.info(f"Wrote cloud config to {path}")

    def update(self, state: State) -> None:
        """
        Publish the cloud config to the environment's director.

        Raises:
            CloudConfigError: The state has no director, or the upload failed.
        """
        if not state.bosh.director_address:
            raise CloudConfigError("Environment has no director address")

        path = self._write(state)
        ops_files = self._ops_files()
        self.logger.info(
            f"Updating cloud config on {state.bosh.director_address} with {len(ops_files)} ops file(s)"
        )
        try:
            self.executor.update_cloud_config(
                path, ops_files, self._director_env(state)
            )
        except (subprocess.CalledProcessError, OSError) as e:
            raise CloudConfigError(describe_failure(e)) from e

    def generate(self, state: State) -> Dict[str, Any]:
        """Build the base cloud config document."""
        document: Dict[str, Any] = {
            "azs": [{"name": az} for az in AZS],
            "vm_types": [{"name": name} for name in VM_TYPES],
            "disk_types": [
                {"name": f"{size}GB", "disk_size": size * 1024}
                for size in DISK_SIZES_GB
            ],
            "networks": [
                {"name": "default", "type": "manual", "subnets": []},
                {"name": "private", "type": "manual", "subnets": []},
            ],
            "compilation": {
                "workers": 5,
                "reuse_compilation_vms": True,
                "az": AZS[0],
                "vm_type": "default",
                "network": "default",
            },
        }
        extensions = LB_VM_EXTENSIONS.get(state.lb.type, ())
        if extensions:
            document["vm_extensions"] = [{"name": name} for name in extensions]
        return document

    def _write(self, state: State) -> Path:
        path = self.state_store.get_cloud_config_dir() / CLOUD_CONFIG_FILE_NAME
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(self.generate(state), f, default_flow_style=False, sort_keys=False)
        return path

    def _ops_files(self) -> List[Path]:
        return sorted(self.state_store.get_cloud_config_dir().glob("ops*.yml"))

    def _director_env(self, state: State) -> Dict[str, str]:
        return {
            "BOSH_ENVIRONMENT": state.bosh.director_address,
            "BOSH_CLIENT": state.bosh.director_username,
            "BOSH_CLIENT_SECRET": state.bosh.director_password,
            "BOSH_CA_CERT": state.bosh.director_ssl_ca,
        }
