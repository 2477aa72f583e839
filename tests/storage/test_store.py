# tests/storage/test_store.py
# -*- coding: utf-8 -*-
"""
Tests for the state store.
"""

import json
import os
import stat

import pytest

from storage.errors import StateStoreError
from storage.state import BOSH, STATE_VERSION, State
from storage.store import STATE_FILE_NAME, StateStore


@pytest.fixture
def store(tmp_path):
    return StateStore(tmp_path)


def test_get_returns_empty_state_when_nothing_saved(store):
    assert store.get() == State()


def test_set_writes_camel_case_json_with_current_version(store, tmp_path):
    store.set(State(iaas="gcp", env_id="my-env", no_director=True))

    written = json.loads((tmp_path / STATE_FILE_NAME).read_text())
    assert written["version"] == STATE_VERSION
    assert written["iaas"] == "gcp"
    assert written["envID"] == "my-env"
    assert written["noDirector"] is True
    assert "directorName" in written["bosh"]


def test_set_then_get_returns_the_saved_state(store):
    state = State(
        iaas="aws",
        env_id="my-env",
        bosh=BOSH(director_name="bosh-my-env", state={"current_vm_cid": "vm-1"}),
        tf_state='{"version": 4}',
    )

    store.set(state)

    assert store.get() == state.model_copy(update={"version": STATE_VERSION})


def test_set_leaves_no_temporary_files(store, tmp_path):
    store.set(State(iaas="gcp"))
    store.set(State(iaas="gcp", env_id="second"))

    assert sorted(p.name for p in tmp_path.iterdir()) == [STATE_FILE_NAME]


def test_state_file_is_not_world_readable(store, tmp_path):
    store.set(State(iaas="gcp"))

    mode = stat.S_IMODE(os.stat(tmp_path / STATE_FILE_NAME).st_mode)
    assert mode == 0o640


def test_set_empty_state_removes_state_and_managed_dirs(store, tmp_path):
    store.set(State(iaas="gcp"))
    store.get_terraform_dir()
    store.get_vars_dir()
    (tmp_path / "keep.txt").write_text("user file")

    store.set(State())

    assert not (tmp_path / STATE_FILE_NAME).exists()
    assert not (tmp_path / "terraform").exists()
    assert not (tmp_path / "vars").exists()
    assert (tmp_path / "keep.txt").exists()


def test_get_rejects_malformed_state(store, tmp_path):
    (tmp_path / STATE_FILE_NAME).write_text('{"version": "not-a-number"}')

    with pytest.raises(StateStoreError, match="malformed"):
        store.get()


def test_get_ignores_unknown_keys(store, tmp_path):
    (tmp_path / STATE_FILE_NAME).write_text(
        json.dumps({"version": 14, "iaas": "gcp", "somethingNew": True})
    )

    assert store.get() == State(version=14, iaas="gcp")


def test_set_failure_raises_state_store_error(store, mocker):
    mocker.patch("storage.store.os.replace", side_effect=OSError("disk full"))

    with pytest.raises(StateStoreError, match="disk full"):
        store.set(State(iaas="gcp"))


def test_directory_getters_create_directories(store, tmp_path):
    assert store.get_terraform_dir() == tmp_path / "terraform"
    assert store.get_vars_dir() == tmp_path / "vars"
    assert store.get_cloud_config_dir() == tmp_path / "cloud-config"
    assert store.get_director_deployment_dir() == tmp_path / "bosh-deployment"
    assert store.get_bbl_dir() == tmp_path
    for name in ("terraform", "vars", "cloud-config", "bosh-deployment"):
        assert (tmp_path / name).is_dir()
