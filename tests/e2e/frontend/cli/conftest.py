"""Fixtures for end-to-end CLI tests.

Provides a test-only ``log-demo`` command that logs at every level, fixtures
to register it on the top-level group and to get a CliRunner, and an
isolated working directory per test.
"""

import logging

import click
import pytest
from click.testing import CliRunner

from sturdy.entrypoints.cli.main import sturdy

# pylint: disable=redefined-outer-name


@click.command()
def log_demo():
    """Log one message per level on 'sturdy.demo' and a few on 'some.thirdparty'."""
    logger = logging.getLogger("sturdy.demo")
    logger.debug("This is a debug-level test message.")
    logger.info("This is an info-level test message.")
    logger.warning("This is a warning-level test message.")
    logger.error("This is an error-level test message.")
    logger.critical("This is a critical-level test message.")
    third_party = logging.getLogger("some.thirdparty")
    third_party.debug("This is a debug-level third-party test message.")
    third_party.info("This is an info-level third-party test message.")
    third_party.warning("This is a warning-level third-party test message.")
    logger.debug("This is a final debug-level test message.")


def _unregister(group: click.Group, name: str) -> None:
    """Drop *name* from the group and from click-extra's help sections."""
    group.commands.pop(name, None)
    if hasattr(group, "_default_section"):
        group._default_section.commands.pop(name, None)  # pylint: disable=protected-access
    for section in getattr(group, "_sections", []):
        getattr(section, "commands", {}).pop(name, None)


@pytest.fixture
def registered_log_demo():
    """Add ``log-demo`` to the ``sturdy`` group for one test."""
    sturdy.add_command(log_demo, name="log-demo")
    try:
        yield
    finally:
        _unregister(sturdy, "log-demo")
        # -L overrides persist on logger objects between invocations
        logging.getLogger("some.thirdparty").setLevel(logging.NOTSET)


@pytest.fixture
def runner():
    """CliRunner for invoking the CLI in-process."""
    return CliRunner()


@pytest.fixture
def fs(runner):
    """Run the test inside an isolated temporary working directory."""
    with runner.isolated_filesystem():
        yield
