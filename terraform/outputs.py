# terraform/outputs.py
# -*- coding: utf-8 -*-

import json
from typing import Any, Dict

from pydantic import BaseModel, Field


class Outputs(BaseModel):
    """Values produced by ``terraform output``, keyed by output name."""

    map: Dict[str, Any] = Field(default_factory=dict)

    def get_string(self, key: str) -> str:
        value = self.map.get(key)
        if value is None:
            return ""
        return str(value)

    @classmethod
    def from_terraform_json(cls, content: str) -> "Outputs":
        """
        Build Outputs from ``terraform output -json``.

        Terraform wraps each value as ``{"sensitive": ..., "type": ..., "value": ...}``.
        """
        raw = json.loads(content) if content.strip() else {}
        return cls(
            map={
                name: (
                    entry["value"]
                    if isinstance(entry, dict) and "value" in entry
                    else entry
                )
                for name, entry in raw.items()
            }
        )
