# tests/cloudconfig/test_cloud_config_manager.py
# -*- coding: utf-8 -*-

import subprocess
from unittest.mock import create_autospec

import pytest
import yaml

from bosh.executor import Executor
from cloudconfig.manager import CLOUD_CONFIG_FILE_NAME, CloudConfigError, Manager
from storage.state import BOSH, LB, State
from storage.store import StateStore


@pytest.fixture
def executor():
    return create_autospec(Executor, instance=True)


@pytest.fixture
def manager(executor, tmp_path):
    return Manager(executor, StateStore(tmp_path))


@pytest.fixture
def director_state():
    return State(
        env_id="my-env",
        bosh=BOSH(
            director_name="bosh-my-env",
            director_username="admin",
            director_password="secret",
            director_address="https://10.0.0.6:25555",
            director_ssl_ca="some-ca",
        ),
    )


def test_initialize_writes_cloud_config(manager, tmp_path):
    manager.initialize(State(env_id="my-env"))

    document = yaml.safe_load((tmp_path / "cloud-config" / CLOUD_CONFIG_FILE_NAME).read_text())
    assert [az["name"] for az in document["azs"]] == ["z1", "z2", "z3"]
    assert document["compilation"]["network"] == "default"
    assert "vm_extensions" not in document


def test_generate_adds_lb_vm_extensions(manager):
    document = manager.generate(State(lb=LB(type="concourse")))

    assert document["vm_extensions"] == [{"name": "lb"}]


def test_update_uploads_with_director_credentials(
    manager, executor, director_state, tmp_path
):
    cloud_config_dir = tmp_path / "cloud-config"
    cloud_config_dir.mkdir()
    (cloud_config_dir / "ops-b.yml").write_text("[]\n")
    (cloud_config_dir / "ops-a.yml").write_text("[]\n")

    manager.update(director_state)

    path, ops_files, env = executor.update_cloud_config.call_args.args
    assert path == cloud_config_dir / CLOUD_CONFIG_FILE_NAME
    assert ops_files == [cloud_config_dir / "ops-a.yml", cloud_config_dir / "ops-b.yml"]
    assert env == {
        "BOSH_ENVIRONMENT": "https://10.0.0.6:25555",
        "BOSH_CLIENT": "admin",
        "BOSH_CLIENT_SECRET": "secret",
        "BOSH_CA_CERT": "some-ca",
    }


def test_update_without_director_fails(manager, executor):
    with pytest.raises(CloudConfigError, match="no director address"):
        manager.update(State(env_id="my-env"))

    executor.update_cloud_config.assert_not_called()


def test_update_failure_raises_cloud_config_error(manager, executor, director_state):
    executor.update_cloud_config.side_effect = subprocess.CalledProcessError(
        1, ["bosh", "update-cloud-config"], stderr="unauthorized"
    )

    with pytest.raises(CloudConfigError, match="unauthorized"):
        manager.update(director_state)
