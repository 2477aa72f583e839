# commands/interfaces.py
# -*- coding: utf-8 -*-
"""
Collaborator contracts used by the commands.

Every operation that can fail raises; a normal return means success.
Operations that take a State return a new State and leave their input
untouched.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List

from commands.plan_config import PlanConfig
from storage.state import LB, State
from terraform.outputs import Outputs


class Planner(ABC):
    @abstractmethod
    def check_fast_fails(self, subcommand_flags: List[str], state: State) -> None:
        pass

    @abstractmethod
    def parse_args(self, args: List[str], state: State) -> PlanConfig:
        pass

    @abstractmethod
    def is_initialized(self, state: State) -> bool:
        pass

    @abstractmethod
    def execute(self, args: List[str], state: State) -> None:
        pass


class EnvIDManager(ABC):
    @abstractmethod
    def sync(self, state: State, name: str) -> State:
        pass


class TerraformManager(ABC):
    @abstractmethod
    def init(self, state: State) -> None:
        pass

    @abstractmethod
    def apply(self, state: State) -> State:
        """
        Provision the infrastructure.

        Raises:
            terraform.errors.ManagerError: carrying the partial state reached
                before the failure.
        """

    @abstractmethod
    def get_outputs(self, state: State) -> Outputs:
        pass


class BOSHManager(ABC):
    @abstractmethod
    def version(self) -> str:
        pass

    @abstractmethod
    def initialize_jumpbox(self, state: State) -> None:
        pass

    @abstractmethod
    def create_jumpbox(self, state: State, terraform_outputs: Outputs) -> State:
        pass

    @abstractmethod
    def initialize_director(self, state: State, ops_file: str = "") -> None:
        pass

    @abstractmethod
    def create_director(self, state: State, terraform_outputs: Outputs) -> State:
        """
        Deploy the director.

        Raises:
            bosh.errors.ManagerCreateError: when progress was recorded before
                the failure; its ``bbl_state`` must be persisted.
        """


class CloudConfigManager(ABC):
    @abstractmethod
    def initialize(self, state: State) -> None:
        pass

    @abstractmethod
    def update(self, state: State) -> None:
        pass


class StateStore(ABC):
    @abstractmethod
    def set(self, state: State) -> None:
        pass

    @abstractmethod
    def get_bbl_dir(self) -> Path:
        pass

    @abstractmethod
    def get_terraform_dir(self) -> Path:
        pass


class LBArgsHandler(ABC):
    @abstractmethod
    def get_lb_state(self, iaas: str, config: PlanConfig) -> LB:
        pass

    @abstractmethod
    def merge(self, new_lb: LB, old_lb: LB) -> LB:
        pass
