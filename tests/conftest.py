# tests/conftest.py
import logging
import os

import pytest


@pytest.fixture(autouse=True)
def clean_envup_environment(monkeypatch):
    """Keep ENVUP_* variables from the developer's shell out of the tests."""
    for name in list(os.environ):
        if name.startswith("ENVUP_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)


@pytest.fixture
def mock_logger(mocker):
    return mocker.MagicMock(spec=logging.Logger)
