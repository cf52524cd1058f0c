"""
Shared fixtures for the agent action tests.
"""

import os

import pytest

from agent_actions.loader import discover_action_parsers
from agent_actions.parser import build_parser_utils
from agent_actions.registry import ParserRegistry
from agent_actions.settings import ENV_PREFIX, ActionSettings, reset_settings


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Every test starts from the packaged defaults, free of AGENT_ACTIONS_* overrides."""
    for name in list(os.environ):
        if name.startswith(ENV_PREFIX):
            monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def registry(tmp_path):
    """A fresh registry with every builtin parser family loaded."""
    registry = ParserRegistry()
    discover_action_parsers(registry, plugins_dir=tmp_path / "no-user-plugins")
    return registry


@pytest.fixture
def utils():
    """ParserUtils bound to the default thresholds."""
    return build_parser_utils(ActionSettings())
