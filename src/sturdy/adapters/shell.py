"""Subprocess- and systemctl-backed implementations of the shell interfaces."""

import logging
import subprocess
from collections.abc import Sequence

from sturdy.interfaces.shell import CommandResult, ServiceManager, Shell

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
# exit status reported for a command stopped by the timeout, as timeout(1) does
TIMEOUT_RETURNCODE = 124


class SubprocessShell(Shell):
    """Shell that runs commands with `subprocess.run` (no shell interpolation)."""

    def __init__(self, timeout: float | None = DEFAULT_TIMEOUT_SECONDS) -> None:
        self._timeout = timeout

    def run(self, args: Sequence[str]) -> CommandResult:
        logger.debug("Running %s", list(args))
        try:
            completed = subprocess.run(  # pylint: disable=subprocess-run-check
                list(args),
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired:
            logger.warning("%s timed out after %ss", args[0], self._timeout)
            return CommandResult(
                returncode=TIMEOUT_RETURNCODE,
                stderr=f"{args[0]} timed out after {self._timeout}s",
            )
        result = CommandResult(
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )
        if not result.ok:
            logger.debug("%s exited with %d", args[0], result.returncode)
        return result


class SystemctlServiceManager(ServiceManager):
    """Service manager that drives ``systemctl`` through a `Shell`."""

    def __init__(self, shell: Shell, systemctl: str = "systemctl") -> None:
        self._shell = shell
        self._systemctl = systemctl

    def start(self, name: str) -> bool:
        result = self._shell.run([self._systemctl, "start", name])
        if not result.ok:
            logger.warning(
                "systemctl could not start %s: %s", name, result.stderr.strip()
            )
            return False
        return self.is_active(name)

    def is_active(self, name: str) -> bool:
        result = self._shell.run([self._systemctl, "is-active", "--quiet", name])
        return result.ok
