# common/config_models.py
# -*- coding: utf-8 -*-
"""
Pydantic models for application configuration.

This module defines the structured settings for envup, including defaults,
type annotations, and descriptions. Values can be supplied by environment
variables (prefix ``ENVUP_``), a YAML configuration file, or the CLI.
"""

from pathlib import Path
from typing import Dict, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Default Static Values (can be overridden by config file/env/cli) ---
STATE_DIR_DEFAULT: str = "."
LOG_LEVEL_DEFAULT: str = "INFO"
LOG_FORMAT_DEFAULT: str = "text"
TERRAFORM_BINARY_DEFAULT: str = "terraform"
BOSH_BINARY_DEFAULT: str = "bosh"
TEMPLATES_DIR_DEFAULT: str = "templates"
JUMPBOX_MANIFEST_DEFAULT: str = "jumpbox-deployment/jumpbox.yml"
DIRECTOR_MANIFEST_DEFAULT: str = "bosh-deployment/bosh.yml"

SYMBOLS_DEFAULT: Dict[str, str] = {
    "success": "✅",
    "error": "❌",
    "warning": "⚠️",
    "info": "ℹ️",
    "step": "➡️",
    "gear": "⚙️",
    "rocket": "🚀",
    "sparkles": "✨",
    "critical": "🔥",
    "debug": "🐛",
}


class AppSettings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(env_prefix="ENVUP_", extra="ignore")

    state_dir: Path = Field(
        default=Path(STATE_DIR_DEFAULT),
        description="Directory holding bbl-state.json and generated files.",
    )
    iaas: str = Field(
        default="",
        description="Cloud provider for a new environment (gcp, aws, azure, vsphere, openstack).",
    )
    log_level: str = Field(
        default=LOG_LEVEL_DEFAULT, description="Logging level name."
    )
    log_format: str = Field(
        default=LOG_FORMAT_DEFAULT,
        description="Console log format: 'text' or 'json'.",
    )
    log_file: Optional[Path] = Field(
        default=None, description="Optional file to write JSON logs to."
    )
    terraform_binary: str = Field(
        default=TERRAFORM_BINARY_DEFAULT,
        description="Path or name of the terraform executable.",
    )
    bosh_binary: str = Field(
        default=BOSH_BINARY_DEFAULT,
        description="Path or name of the bosh CLI executable.",
    )
    templates_dir: Path = Field(
        default=Path(TEMPLATES_DIR_DEFAULT),
        description="Directory of per-IaaS terraform templates (<templates_dir>/<iaas>/*.tf).",
    )
    jumpbox_manifest: Path = Field(
        default=Path(JUMPBOX_MANIFEST_DEFAULT),
        description="Jumpbox create-env manifest, relative to the state directory if not absolute.",
    )
    director_manifest: Path = Field(
        default=Path(DIRECTOR_MANIFEST_DEFAULT),
        description="Director create-env manifest, relative to the state directory if not absolute.",
    )

    symbols: Dict[str, str] = Field(
        default_factory=lambda: dict(SYMBOLS_DEFAULT)
    )
