"""Polling helper that waits for a service to converge."""

from __future__ import annotations

import time
from collections.abc import Callable

from shipctl.lib.errors import StabilizationTimeoutError
from shipctl.lib.logging_config import get_logger
from shipctl.models.service import StabilityStatus

logger = get_logger(__name__)

DEFAULT_POLL_INTERVAL = 15.0  # seconds
DEFAULT_TIMEOUT = 600.0  # seconds


def wait_until_stable(
    check: Callable[[], StabilityStatus],
    *,
    interval: float = DEFAULT_POLL_INTERVAL,
    timeout: float = DEFAULT_TIMEOUT,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
    on_poll: Callable[[StabilityStatus, int], None] | None = None,
) -> StabilityStatus:
    """Poll ``check`` until it reports a stable service.

    The first check happens immediately. After each unstable observation the
    helper sleeps ``interval`` seconds, unless doing so would exceed
    ``timeout``, in which case it gives up. Errors raised by ``check``
    propagate without retry.

    Args:
        check: Returns the current stability status
        interval: Seconds between checks
        timeout: Total wait budget in seconds
        sleep: Sleep function (injectable for tests)
        clock: Monotonic clock (injectable for tests)
        on_poll: Called with each unstable status and the attempt number

    Returns:
        The first stable status observed.

    Raises:
        StabilizationTimeoutError: If the budget elapses before convergence.
    """
    if interval <= 0:
        raise ValueError(f"interval must be positive, got {interval}")
    if timeout <= 0:
        raise ValueError(f"timeout must be positive, got {timeout}")

    deadline = clock() + timeout
    attempt = 0

    while True:
        attempt += 1
        status = check()
        if status.is_stable:
            logger.debug("Service stable after %d check(s)", attempt)
            return status

        if on_poll is not None:
            on_poll(status, attempt)

        remaining = deadline - clock()
        if remaining < interval:
            raise StabilizationTimeoutError(
                f"Service did not stabilize within {timeout:g}s after {attempt} "
                f"check(s) (deployments: {status.deployment_count}, "
                f"running: {status.running_count}/{status.desired_count})"
            )
        sleep(interval)
