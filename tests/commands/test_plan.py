# tests/commands/test_plan.py
# -*- coding: utf-8 -*-
"""
Tests for the plan command.
"""

from unittest.mock import create_autospec

import pytest

from bosh.manager import Manager as BOSHManager
from cloudconfig.manager import Manager as CloudConfigManager
from commands.env_id_manager import EnvIDManager
from commands.errors import CommandError, StageError
from commands.lb_args_handler import LBArgsHandler
from commands.plan import Plan
from commands.plan_config import PlanConfig
from storage.errors import StateStoreError
from storage.state import BOSH, LB, State
from storage.store import StateStore
from terraform.manager import TEMPLATE_FILE_NAME
from terraform.manager import Manager as TerraformManager


@pytest.fixture
def bosh_manager():
    manager = create_autospec(BOSHManager, instance=True)
    manager.version.return_value = "2.0.48"
    return manager


@pytest.fixture
def cloud_config_manager():
    return create_autospec(CloudConfigManager, instance=True)


@pytest.fixture
def state_store(tmp_path):
    store = create_autospec(StateStore, instance=True)
    store.get_bbl_dir.return_value = tmp_path
    store.get_terraform_dir.return_value = tmp_path / "terraform"
    return store


@pytest.fixture
def env_id_manager():
    manager = create_autospec(EnvIDManager, instance=True)
    manager.sync.side_effect = lambda state, name: state.model_copy(
        update={"env_id": name or "generated"}
    )
    return manager


@pytest.fixture
def terraform_manager():
    return create_autospec(TerraformManager, instance=True)


@pytest.fixture
def lb_args_handler():
    handler = create_autospec(LBArgsHandler, instance=True)
    handler.get_lb_state.return_value = LB()
    handler.merge.side_effect = lambda new_lb, old_lb: new_lb if new_lb.type else old_lb
    return handler


@pytest.fixture
def command(
    bosh_manager,
    cloud_config_manager,
    state_store,
    env_id_manager,
    terraform_manager,
    lb_args_handler,
):
    return Plan(
        bosh_manager,
        cloud_config_manager,
        state_store,
        env_id_manager,
        terraform_manager,
        lb_args_handler,
    )


class TestParseArgs:
    def test_parses_all_flags(self, command, lb_args_handler):
        config = command.parse_args(
            [
                "--name", "my-env",
                "--no-director",
                "--ops-file", "ops.yml",
                "--lb-type", "concourse",
                "--lb-cert", "cert.pem",
                "--lb-key", "key.pem",
            ],
            State(iaas="gcp"),
        )

        assert config == PlanConfig(
            name="my-env",
            no_director=True,
            ops_file="ops.yml",
            lb_type="concourse",
            lb_cert="cert.pem",
            lb_key="key.pem",
        )
        lb_args_handler.get_lb_state.assert_called_once_with("gcp", config)

    def test_defaults_when_no_flags(self, command):
        assert command.parse_args([], State(iaas="gcp")) == PlanConfig()

    def test_unknown_flag_raises_command_error(self, command):
        with pytest.raises(CommandError, match="Invalid arguments"):
            command.parse_args(["--not-a-flag"], State(iaas="gcp"))

    def test_invalid_lb_settings_are_reported(self, command, lb_args_handler):
        lb_args_handler.get_lb_state.side_effect = CommandError("bad lb")

        with pytest.raises(CommandError, match="bad lb"):
            command.parse_args(["--lb-type", "nope"], State(iaas="gcp"))


class TestCheckFastFails:
    def test_requires_an_iaas(self, command):
        with pytest.raises(CommandError, match="must be provided or ENVUP_IAAS must be set"):
            command.check_fast_fails([], State())

    def test_rejects_old_state(self, command):
        with pytest.raises(CommandError, match="too old"):
            command.check_fast_fails([], State(iaas="gcp", version=2))

    def test_rejects_renaming_an_existing_environment(self, command):
        with pytest.raises(CommandError) as excinfo:
            command.check_fast_fails(
                ["--name", "other"], State(iaas="gcp", env_id="existing")
            )

        assert str(excinfo.value) == (
            "The director name cannot be changed for an existing environment. "
            "Current name is existing."
        )

    def test_same_name_is_accepted(self, command):
        command.check_fast_fails(
            ["--name", "existing"], State(iaas="gcp", env_id="existing", version=14)
        )

    def test_rejects_old_bosh_cli(self, command, bosh_manager):
        bosh_manager.version.return_value = "2.0.1"

        with pytest.raises(CommandError, match="BOSH version must be at least v2.0.24"):
            command.check_fast_fails([], State(iaas="gcp"))

    def test_unparseable_bosh_version_is_a_command_error(self, command, bosh_manager):
        bosh_manager.version.side_effect = ValueError(
            "Unexpected output from bosh --version: 'garbage'"
        )

        with pytest.raises(CommandError) as excinfo:
            command.check_fast_fails([], State(iaas="gcp"))

        assert str(excinfo.value) == (
            "Could not determine BOSH version: "
            "Unexpected output from bosh --version: 'garbage'"
        )

    def test_skips_bosh_version_check_without_a_director(self, command, bosh_manager):
        command.check_fast_fails(["--no-director"], State(iaas="gcp"))

        bosh_manager.version.assert_not_called()


class TestIsInitialized:
    def test_false_without_a_template(self, command):
        assert command.is_initialized(State()) is False

    def test_true_once_the_template_is_written(self, command, tmp_path):
        (tmp_path / "terraform").mkdir()
        (tmp_path / "terraform" / TEMPLATE_FILE_NAME).write_text("# template")

        assert command.is_initialized(State()) is True


class TestExecute:
    def test_initializes_every_collaborator(
        self,
        command,
        env_id_manager,
        state_store,
        terraform_manager,
        bosh_manager,
        cloud_config_manager,
    ):
        command.execute(["--name", "my-env", "--ops-file", "ops.yml"], State(iaas="gcp"))

        planned = State(iaas="gcp", env_id="my-env")
        env_id_manager.sync.assert_called_once_with(State(iaas="gcp"), "my-env")
        state_store.set.assert_called_once_with(planned)
        terraform_manager.init.assert_called_once_with(planned)
        bosh_manager.initialize_jumpbox.assert_called_once_with(planned)
        bosh_manager.initialize_director.assert_called_once_with(planned, "ops.yml")
        cloud_config_manager.initialize.assert_called_once_with(planned)

    def test_no_director_skips_director_initialization(
        self, command, state_store, terraform_manager, bosh_manager, cloud_config_manager
    ):
        command.execute(["--no-director"], State(iaas="gcp"))

        saved = state_store.set.call_args.args[0]
        assert saved.no_director is True
        terraform_manager.init.assert_called_once()
        bosh_manager.initialize_jumpbox.assert_not_called()
        bosh_manager.initialize_director.assert_not_called()
        cloud_config_manager.initialize.assert_not_called()

    def test_no_director_rejected_when_a_director_exists(self, command, state_store):
        state = State(iaas="gcp", bosh=BOSH(director_name="bosh-env"))

        with pytest.raises(CommandError, match="Director already exists"):
            command.execute(["--no-director"], state)

        state_store.set.assert_not_called()

    def test_keeps_the_existing_lb_when_none_is_given(self, command, state_store):
        existing_lb = LB(type="concourse")

        command.execute([], State(iaas="gcp", lb=existing_lb))

        assert state_store.set.call_args.args[0].lb == existing_lb

    def test_save_failure_is_reported(self, command, state_store, terraform_manager):
        state_store.set.side_effect = StateStoreError("kiwi")

        with pytest.raises(StageError) as excinfo:
            command.execute([], State(iaas="gcp"))

        assert str(excinfo.value) == "Save state after sync: kiwi"
        terraform_manager.init.assert_not_called()

    def test_terraform_init_failure_is_reported(self, command, terraform_manager):
        terraform_manager.init.side_effect = RuntimeError("no templates")

        with pytest.raises(StageError) as excinfo:
            command.execute([], State(iaas="gcp"))

        assert str(excinfo.value) == "Terraform manager init: no templates"
