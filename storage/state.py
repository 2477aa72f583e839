# storage/state.py
# -*- coding: utf-8 -*-
"""
Pydantic models for the persisted environment state.

The state record is written to ``bbl-state.json`` in the state directory
after every stage of ``up`` so that a later invocation can resume from the
furthest point reached.
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

STATE_VERSION: int = 14


class _StateModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class BOSH(_StateModel):
    """Deployment director details. An empty name means no director exists."""

    director_name: str = Field(default="", alias="directorName")
    director_username: str = Field(default="", alias="directorUsername")
    director_password: str = Field(default="", alias="directorPassword")
    director_address: str = Field(default="", alias="directorAddress")
    director_ssl_ca: str = Field(default="", alias="directorSSLCA")
    state: Dict[str, Any] = Field(default_factory=dict, alias="state")


class Jumpbox(_StateModel):
    url: str = Field(default="", alias="url")
    state: Dict[str, Any] = Field(default_factory=dict, alias="state")


class LB(_StateModel):
    type: str = Field(default="", alias="type")
    cert: str = Field(default="", alias="cert")
    key: str = Field(default="", alias="key")
    domain: str = Field(default="", alias="domain")


class State(_StateModel):
    """The environment's durable record."""

    version: int = Field(default=0, alias="version")
    iaas: str = Field(default="", alias="iaas")
    id: str = Field(default="", alias="id")
    env_id: str = Field(default="", alias="envID")
    no_director: bool = Field(default=False, alias="noDirector")
    bosh: BOSH = Field(default_factory=BOSH, alias="bosh")
    jumpbox: Jumpbox = Field(default_factory=Jumpbox, alias="jumpbox")
    lb: LB = Field(default_factory=LB, alias="lb")
    latest_tf_output: str = Field(default="", alias="latestTFOutput")
    tf_state: str = Field(default="", alias="tfState")

    def is_empty(self) -> bool:
        return self == State()

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)

    @classmethod
    def from_json(cls, content: str) -> "State":
        return cls.model_validate_json(content)
