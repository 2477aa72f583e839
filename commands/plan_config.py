# commands/plan_config.py
# -*- coding: utf-8 -*-

from pydantic import BaseModel


class PlanConfig(BaseModel):
    """Parsed ``plan``/``up`` arguments. Produced per invocation, never persisted."""

    name: str = ""
    no_director: bool = False
    ops_file: str = ""
    lb_type: str = ""
    lb_cert: str = ""
    lb_key: str = ""
    lb_domain: str = ""
