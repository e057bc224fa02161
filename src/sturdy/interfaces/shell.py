"""Interfaces for running commands and managing system services.

The watchdog routine in `sturdy.examples.watchdog` only talks to the system
through these two seams. Production code plugs in the adapters from
`sturdy.adapters.shell`; tests plug in fakes that record what happened and
report canned outcomes.
"""

import abc
from collections.abc import Sequence
from dataclasses import dataclass

# pylint: disable=too-few-public-methods


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a finished command.

    Attributes:
        returncode: Process exit status.
        stdout: Captured standard output.
        stderr: Captured standard error.
    """

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        """True if the command exited with status 0."""
        return self.returncode == 0


class Shell(abc.ABC):
    """Runs a command and reports how it went."""

    @abc.abstractmethod
    def run(self, args: Sequence[str]) -> CommandResult:
        """Run *args* (program first) and wait for it to finish.

        Args:
            args: Program and arguments. Never interpreted by a shell.

        Returns:
            CommandResult: Exit status and captured output. A command that
                does not finish in time is reported as a failed result.

        Raises:
            OSError: If the program cannot be started.
        """


class ServiceManager(abc.ABC):
    """Starts and inspects long-running system services."""

    @abc.abstractmethod
    def start(self, name: str) -> bool:
        """Start service *name*; return True if it is now running."""

    @abc.abstractmethod
    def is_active(self, name: str) -> bool:
        """Return True if service *name* is currently running."""
