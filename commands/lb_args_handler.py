# commands/lb_args_handler.py
# -*- coding: utf-8 -*-
"""
Validation and merging of load balancer settings given on the command line.
"""

from pathlib import Path

from commands.errors import CommandError
from commands.interfaces import LBArgsHandler as LBArgsHandlerContract
from commands.plan_config import PlanConfig
from storage.state import LB

LB_TYPES = ("cf", "concourse")

# Providers whose cf load balancer terminates TLS and so needs a cert/key.
CERT_REQUIRED_IAAS = ("aws", "azure")


class LBArgsHandler(LBArgsHandlerContract):
    def get_lb_state(self, iaas: str, config: PlanConfig) -> LB:
        """
        Build the LB section of the state from parsed arguments.

        Cert and key values are paths; their contents are stored.

        Raises:
            CommandError: The flags are inconsistent or a file cannot be read.
        """
        if not config.lb_type:
            if config.lb_cert or config.lb_key or config.lb_domain:
                raise CommandError(
                    "--lb-type is required when other load balancer flags are given"
                )
            return LB()

        if config.lb_type not in LB_TYPES:
            raise CommandError(
                f'"{config.lb_type}" is not a valid lb type, valid lb types are: {", ".join(LB_TYPES)}'
            )

        if config.lb_type == "concourse" and config.lb_domain:
            raise CommandError("--lb-domain is not implemented for concourse load balancers")

        if (
            config.lb_type == "cf"
            and iaas in CERT_REQUIRED_IAAS
            and not (config.lb_cert and config.lb_key)
        ):
            raise CommandError("--lb-cert and --lb-key are required with --lb-type=cf")

        return LB(
            type=config.lb_type,
            cert=self._read(config.lb_cert, "--lb-cert"),
            key=self._read(config.lb_key, "--lb-key"),
            domain=config.lb_domain,
        )

    def merge(self, new_lb: LB, old_lb: LB) -> LB:
        """Keep the existing LB unless new settings were given."""
        if new_lb.type:
            return new_lb
        return old_lb

    def _read(self, path: str, flag: str) -> str:
        if not path:
            return ""
        try:
            return Path(path).read_text(encoding="utf-8")
        except (IOError, UnicodeDecodeError) as e:
            raise CommandError(f"{flag}: {e}") from e
