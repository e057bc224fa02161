"""Global pytest fixtures and default marks for STURDY.

Tests are marked after the top-level directory they live in
(``tests/unit/...`` gets ``unit``, and so on) unless they already carry
that mark.
"""

from pathlib import Path

import pytest

# pylint: disable=unused-argument

pytest_plugins = [
    "tests.fixtures.decks",
]

TESTS_ROOT = Path(__file__).parent.resolve()
SUITE_MARKERS = frozenset({"unit", "functional", "integration", "e2e"})


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Mark each item with the suite named by its first directory under tests/."""
    for item in items:
        try:
            suite = item.path.resolve().relative_to(TESTS_ROOT).parts[0]
        except (ValueError, IndexError):
            continue
        if suite in SUITE_MARKERS and item.get_closest_marker(suite) is None:
            item.add_marker(getattr(pytest.mark, suite))


@pytest.fixture(autouse=True)
def _log_path_in_tmp(monkeypatch, tmp_path):
    """Keep the flight recorder out of the user's log directory."""
    monkeypatch.setenv("STURDY_LOG_PATH", str(tmp_path / "sturdy.log"))
