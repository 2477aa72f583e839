# bosh/executor.py
# -*- coding: utf-8 -*-
"""
Thin wrapper around the bosh CLI.
"""

import logging
import os
import re
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from common.command_utils import command_exists, run_command
from common.config_models import AppSettings

module_logger = logging.getLogger(__name__)

VERSION_PATTERN = re.compile(r"version\s+(\d+(?:\.\d+)*)")


class Executor:
    def __init__(
        self,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
    ):
        self.app_settings = app_settings
        self.logger = logger or module_logger

    def version(self) -> str:
        """
        Return the bosh CLI version, e.g. ``"7.1.2"``.

        Raises:
            FileNotFoundError: The bosh CLI is not installed.
            ValueError: The version output could not be parsed.
        """
        binary = self.app_settings.bosh_binary
        if not command_exists(binary):
            raise FileNotFoundError(f"bosh CLI not found: {binary}")
        result = run_command(
            [binary, "--version"],
            self.app_settings,
            capture_output=True,
            current_logger=self.logger,
        )
        match = VERSION_PATTERN.search(result.stdout or "")
        if not match:
            raise ValueError(
                f"Unexpected output from {binary} --version: {result.stdout!r}"
            )
        return match.group(1)

    def create_env(
        self,
        manifest: Path,
        state_path: Path,
        vars_store: Path,
        vars_files: Sequence[Path] = (),
        ops_files: Sequence[Path] = (),
    ) -> subprocess.CompletedProcess:
        args: List[str] = [
            "create-env",
            str(manifest),
            "--state",
            str(state_path),
            "--vars-store",
            str(vars_store),
        ]
        for ops_file in ops_files:
            args.extend(["-o", str(ops_file)])
        for vars_file in vars_files:
            args.extend(["-l", str(vars_file)])
        return self._run(args)

    def update_cloud_config(
        self,
        cloud_config: Path,
        ops_files: Sequence[Path],
        director_env: Dict[str, str],
    ) -> subprocess.CompletedProcess:
        """
        Upload a cloud config to the director.

        ``director_env`` holds the BOSH_ENVIRONMENT / BOSH_CLIENT /
        BOSH_CLIENT_SECRET / BOSH_CA_CERT values for the target director.
        """
        args: List[str] = ["update-cloud-config", str(cloud_config), "--non-interactive"]
        for ops_file in ops_files:
            args.extend(["-o", str(ops_file)])
        return self._run(args, env={**os.environ, **director_env})

    def _run(
        self, args: List[str], env: Optional[Dict[str, str]] = None
    ) -> subprocess.CompletedProcess:
        return run_command(
            [self.app_settings.bosh_binary, *args],
            self.app_settings,
            capture_output=True,
            current_logger=self.logger,
            env=env,
        )
