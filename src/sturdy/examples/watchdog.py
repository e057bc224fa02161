"""Enable the Linux software CPU watchdog.

This is the routine the slide deck uses to contrast brittle and robust tests.
It loads the ``softdog`` kernel module and starts the watchdog daemon, going
through the `Shell` and `ServiceManager` seams so tests can substitute fakes.

Example:
    ```py
    shell = SubprocessShell()
    status = enable_cpu_watchdog(shell, SystemctlServiceManager(shell), timeout=30)
    ```
"""

import logging
from enum import Enum

from sturdy.interfaces.shell import ServiceManager, Shell

logger = logging.getLogger(__name__)

WATCHDOG_MODULE = "softdog"
DEFAULT_SERVICE = "watchdog"
DEFAULT_TIMEOUT_SECONDS = 60


class WatchdogStatus(Enum):
    """Outcome of `enable_cpu_watchdog`."""

    ENABLED = "enabled"
    ALREADY_ENABLED = "already-enabled"


class WatchdogError(Exception):
    """Raised when the watchdog cannot be enabled."""

    def __init__(self, message: str, detail: str = "") -> None:
        super().__init__(f"{message}: {detail}" if detail else message)
        self.detail = detail


def enable_cpu_watchdog(
    shell: Shell,
    services: ServiceManager,
    *,
    timeout: int = DEFAULT_TIMEOUT_SECONDS,
    service: str = DEFAULT_SERVICE,
) -> WatchdogStatus:
    """Load the software watchdog and start its daemon.

    Does nothing if the daemon is already running.

    Args:
        shell: Used to load the kernel module.
        services: Used to check and start the daemon.
        timeout: Seconds without a heartbeat before the machine reboots.
        service: Name of the watchdog daemon's service unit.

    Returns:
        WatchdogStatus: ``ENABLED`` or ``ALREADY_ENABLED``.

    Raises:
        ValueError: If *timeout* is not a positive integer.
        WatchdogError: If the module cannot be loaded or the daemon does not start.
    """
    if isinstance(timeout, bool) or not isinstance(timeout, int) or timeout <= 0:
        raise ValueError(f"timeout must be a positive integer, got {timeout!r}")

    if services.is_active(service):
        logger.info("Watchdog service %r already running", service)
        return WatchdogStatus.ALREADY_ENABLED

    result = shell.run(["modprobe", WATCHDOG_MODULE, f"soft_margin={timeout}"])
    if not result.ok:
        raise WatchdogError(
            f"could not load the {WATCHDOG_MODULE} module", result.stderr.strip()
        )
    logger.debug("Loaded %s with soft_margin=%d", WATCHDOG_MODULE, timeout)

    if not services.start(service):
        raise WatchdogError(f"service {service!r} failed to start")

    logger.info("CPU watchdog enabled (timeout %ds)", timeout)
    return WatchdogStatus.ENABLED
