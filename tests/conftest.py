"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

import pytest

# Ensure src directory is in Python path for all tests
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point config lookup at an empty temp location so user files never leak in."""
    config_path = tmp_path / "config.yaml"
    monkeypatch.setenv("TODOTXT_CONFIG", str(config_path))
    return config_path


@pytest.fixture
def sample_text():
    """A small todo.txt buffer with mixed completed and pending tasks."""
    return (
        "(A) 2026-01-01 Call Mom +Family @phone\n"
        "Buy milk +GroceryShopping\n"
        "x (B) 2026-01-08 2026-01-01 Task completed due:2026-01-15"
    )
