"""
Pytest configuration and shared fixtures.
"""

import os
from pathlib import Path

import pytest

from unity_style_checker.config import StyleConfig, config_from_dict
from unity_style_checker.main_checker import StyleChecker


# =============================================================================
# PATH FIXTURES
# =============================================================================

@pytest.fixture
def fixtures_dir():
    """Path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def player_path(fixtures_dir):
    """A script that follows every rule."""
    return fixtures_dir / "Player.cs"


# =============================================================================
# CHECKER FIXTURES
# =============================================================================

@pytest.fixture
def config():
    """Default configuration."""
    return StyleConfig()


@pytest.fixture
def checker(config):
    """Checker running every rule with the defaults."""
    return StyleChecker(config)


@pytest.fixture
def run_rule():
    """Run a single rule on inline source: run_rule(text, "NamingCheck", path="Sample.cs", **options)."""
    def _run(text, rule_id, path="Sample.cs", **options):
        data = dict(options)
        data["rules"] = {"enabled": [rule_id]}
        return StyleChecker(config_from_dict(data)).check_text(text, path)
    return _run


@pytest.fixture
def write_cs(tmp_path):
    """Write a C# file under tmp_path and return its path."""
    def _write(name, text):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path
    return _write


@pytest.fixture
def lock_dir():
    """Make a directory unlistable for the duration of a test: lock_dir(path)."""
    if not hasattr(os, "geteuid") or os.geteuid() == 0:
        pytest.skip("directory permissions are not enforced for this user")
    locked = []

    def _lock(path):
        path.chmod(0)
        locked.append(path)
        return path

    yield _lock
    for path in locked:
        path.chmod(0o755)
