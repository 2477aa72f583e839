# common/command_utils.py
# -*- coding: utf-8 -*-
"""
Utilities for executing external tools (terraform, bosh) and logging their output.
"""

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Union

from common.config_models import SYMBOLS_DEFAULT, AppSettings

module_logger = logging.getLogger(__name__)


def log_message(
    message: str,
    level: str = "info",
    current_logger: Optional[logging.Logger] = None,
    app_settings: Optional[AppSettings] = None,
    exc_info: bool = False,
) -> None:
    """
    Log a message at the named level.

    Args:
        message: The log message to be recorded.
        level: "debug", "info", "success", "warning", "error" or "critical".
            "success" is logged at INFO.
        current_logger: Logger to use. Defaults to the module logger.
        app_settings: Application settings; accepted so callers can pass
            them through uniformly.
        exc_info: Include exception details in the log.
    """
    effective_logger = current_logger if current_logger else module_logger

    if level == "warning":
        effective_logger.warning(message, exc_info=exc_info)
    elif level == "error":
        effective_logger.error(message, exc_info=exc_info)
    elif level == "critical":
        effective_logger.critical(message, exc_info=exc_info)
    elif level == "debug":
        effective_logger.debug(message, exc_info=exc_info)
    else:
        effective_logger.info(message, exc_info=exc_info)


def get_symbols(app_settings: Optional[AppSettings]) -> Dict[str, str]:
    if app_settings and app_settings.symbols:
        return app_settings.symbols
    return SYMBOLS_DEFAULT


def run_command(
    command: List[str],
    app_settings: Optional[AppSettings],
    check: bool = True,
    capture_output: bool = False,
    text: bool = True,
    cmd_input: Optional[str] = None,
    current_logger: Optional[logging.Logger] = None,
    cwd: Optional[Union[str, Path]] = None,
    env: Optional[Dict[str, str]] = None,
) -> subprocess.CompletedProcess:
    """
    Execute an external command, logging what is run and how it ended.

    Args:
        command: The command and its arguments.
        app_settings: Application settings, used for log symbols.
        check: Raise CalledProcessError on a non-zero exit code.
        capture_output: Capture stdout and stderr.
        text: Decode output streams as text.
        cmd_input: Data passed to the command's standard input.
        current_logger: Logger to use. Defaults to the module logger.
        cwd: Working directory for the command.
        env: Environment for the command. Defaults to the inherited one.

    Returns:
        The completed process.

    Raises:
        subprocess.CalledProcessError: The command exited non-zero and check is True.
        FileNotFoundError: The executable could not be found.
    """
    effective_logger = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    command_to_log_str = subprocess.list2cmdline([str(c) for c in command])

    log_message(
        f"{symbols.get('gear', '⚙️')} Executing: {command_to_log_str} {f'(in {cwd})' if cwd else ''}",
        "debug",
        effective_logger,
        app_settings,
    )
    try:
        result = subprocess.run(
            command,
            check=check,
            capture_output=capture_output,
            text=text,
            input=cmd_input,
            cwd=cwd,
            env=env,
        )
        if capture_output:
            if result.stdout and result.stdout.strip():
                log_message(
                    f"   stdout: {result.stdout.strip()}",
                    "debug",
                    effective_logger,
                    app_settings,
                )
            if result.stderr and result.stderr.strip():
                log_message(
                    f"   stderr: {result.stderr.strip()}",
                    "debug",
                    effective_logger,
                    app_settings,
                )
        return result
    except subprocess.CalledProcessError as e:
        log_message(
            f"{symbols.get('error', '❌')} Command `{command_to_log_str}` failed (rc {e.returncode}).",
            "error",
            effective_logger,
            app_settings,
        )
        if e.stderr and hasattr(e.stderr, "strip") and e.stderr.strip():
            log_message(
                f"   stderr: {e.stderr.strip()}",
                "error",
                effective_logger,
                app_settings,
            )
        raise
    except FileNotFoundError as e:
        log_message(
            f"{symbols.get('error', '❌')} Command not found: {e.filename}. Ensure it's installed and in PATH.",
            "error",
            effective_logger,
            app_settings,
        )
        raise


def command_exists(command_name: str) -> bool:
    """Return True if the executable can be found on PATH."""
    return shutil.which(command_name) is not None


def describe_failure(error: Exception) -> str:
    """
    Produce a one-line description of a failed command.

    For CalledProcessError the captured stderr is preferred, since the
    exception's own text only carries the exit status.
    """
    if isinstance(error, subprocess.CalledProcessError):
        stderr = error.stderr.strip() if isinstance(error.stderr, str) else ""
        cmd = (
            subprocess.list2cmdline([str(c) for c in error.cmd])
            if isinstance(error.cmd, list)
            else str(error.cmd)
        )
        if stderr:
            return f"{cmd} exited with status {error.returncode}: {stderr}"
        return f"{cmd} exited with status {error.returncode}"
    return str(error)
