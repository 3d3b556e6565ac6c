"""
Bounded polling for eventually-consistent API operations.

A check function is called at a fixed interval until it reports READY,
reports a FATAL error, or the overall timeout elapses.
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable

import tenacity

from cloudsmith_provider.errors import WaitTimeoutError
from cloudsmith_provider.logger import get_logger

logger = get_logger("waiter")

# Per-call-site waits; not user configurable
DEFAULT_CREATION_TIMEOUT_S = 60.0
DEFAULT_CREATION_INTERVAL_S = 2.0
DEFAULT_DELETION_TIMEOUT_S = 60.0
DEFAULT_DELETION_INTERVAL_S = 2.0


class CheckStatus(Enum):
    READY = "ready"
    RETRY = "retry"
    FATAL = "fatal"


@dataclass(frozen=True)
class CheckResult:
    """
    Tagged outcome of one check.

    Use the constructors rather than building instances directly:
    CheckResult.ready(), CheckResult.retry(), CheckResult.fatal(err).
    """
    status: CheckStatus
    error: Exception | None = None

    @classmethod
    def ready(cls) -> "CheckResult":
        return cls(CheckStatus.READY)

    @classmethod
    def retry(cls) -> "CheckResult":
        return cls(CheckStatus.RETRY)

    @classmethod
    def fatal(cls, error: Exception) -> "CheckResult":
        return cls(CheckStatus.FATAL, error)


class WaitState(Enum):
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FATAL_ERROR = "fatal_error"
    TIMED_OUT = "timed_out"


class Waiter:
    """
    Fixed-interval poll loop with an overall deadline, driven by tenacity.

    `clock` and `sleep` are injectable so tests can run without real time
    passing. The deadline is measured on `clock`, not tenacity's own timer.
    """

    def __init__(
        self,
        check: Callable[[], CheckResult],
        timeout_s: float,
        interval_s: float,
        *,
        resource_id: str = "",
        operation: str = "ready",
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if interval_s <= 0:
            raise ValueError("interval_s must be positive")
        self.check = check
        self.timeout_s = timeout_s
        self.interval_s = interval_s
        self.resource_id = resource_id
        self.operation = operation
        self._clock = clock
        self._sleep = sleep
        self.state = WaitState.RUNNING
        self.attempts = 0
        self._start = 0.0

    def run(self) -> int:
        """
        Poll until done.

        Returns:
            Number of times the check function was called

        Raises:
            The check's own error on FATAL (unwrapped)
            WaitTimeoutError: If still RETRY when the deadline has passed
        """
        self._start = self._clock()
        retrying = tenacity.Retrying(
            stop=self._deadline_passed,
            wait=tenacity.wait_fixed(self.interval_s),
            retry=tenacity.retry_if_result(lambda r: r.status is CheckStatus.RETRY),
            sleep=self._sleep,
            before_sleep=self._before_sleep,
            retry_error_callback=self._timed_out,
        )
        retrying(self._attempt)
        return self.attempts

    def _elapsed(self) -> float:
        return self._clock() - self._start

    def _attempt(self) -> CheckResult:
        self.attempts += 1
        result = self.check()
        if result.status is CheckStatus.FATAL:
            # retry_if_result never retries a raised error; it surfaces unwrapped
            self.state = WaitState.FATAL_ERROR
            raise result.error
        if result.status is CheckStatus.READY:
            self.state = WaitState.SUCCEEDED
        return result

    def _deadline_passed(self, retry_state: tenacity.RetryCallState) -> bool:
        return self._elapsed() >= self.timeout_s

    def _before_sleep(self, retry_state: tenacity.RetryCallState) -> None:
        logger.debug(
            "waiter.retry",
            resource_id=self.resource_id,
            operation=self.operation,
            attempt=retry_state.attempt_number,
            elapsed_s=round(self._elapsed(), 3),
        )

    def _timed_out(self, retry_state: tenacity.RetryCallState) -> None:
        self.state = WaitState.TIMED_OUT
        logger.error(
            "waiter.timeout",
            resource_id=self.resource_id,
            operation=self.operation,
            attempts=retry_state.attempt_number,
            timeout_s=self.timeout_s,
        )
        raise WaitTimeoutError(self.resource_id, self.operation, self.timeout_s)


def wait_for(
    check: Callable[[], CheckResult],
    timeout_s: float,
    interval_s: float,
    *,
    resource_id: str = "",
    operation: str = "ready",
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Run a Waiter and return the number of checks made."""
    return Waiter(
        check,
        timeout_s,
        interval_s,
        resource_id=resource_id,
        operation=operation,
        clock=clock,
        sleep=sleep,
    ).run()
