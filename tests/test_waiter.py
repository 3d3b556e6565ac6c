"""Tests for the bounded poller."""

import pytest

from cloudsmith_provider.errors import UnprocessableError, WaitTimeoutError
from cloudsmith_provider.resource.waiter import (
    CheckResult,
    CheckStatus,
    WaitState,
    Waiter,
    wait_for,
)


class CountingCheck:
    """Check function that replays a script of results, then repeats the last."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = 0

    def __call__(self):
        self.calls += 1
        index = min(self.calls, len(self.results)) - 1
        return self.results[index]


def test_check_result_constructors():
    assert CheckResult.ready().status is CheckStatus.READY
    assert CheckResult.retry().status is CheckStatus.RETRY
    err = ValueError("boom")
    fatal = CheckResult.fatal(err)
    assert fatal.status is CheckStatus.FATAL
    assert fatal.error is err


def test_ready_on_first_check_does_not_sleep(clock):
    check = CountingCheck(CheckResult.ready())

    attempts = wait_for(check, 10, 1, clock=clock.now, sleep=clock.sleep)

    assert attempts == 1
    assert clock.sleeps == []


def test_retries_until_ready(clock):
    check = CountingCheck(CheckResult.retry(), CheckResult.retry(), CheckResult.ready())
    waiter = Waiter(check, 10, 2, clock=clock.now, sleep=clock.sleep)

    assert waiter.run() == 3
    assert waiter.state is WaitState.SUCCEEDED
    assert clock.sleeps == [2, 2]


def test_fixed_interval_no_backoff(clock):
    check = CountingCheck(*([CheckResult.retry()] * 5), CheckResult.ready())

    wait_for(check, 60, 3, clock=clock.now, sleep=clock.sleep)

    assert set(clock.sleeps) == {3}


@pytest.mark.parametrize("timeout_s,interval_s", [(10, 1), (60, 2), (9, 3)])
def test_perpetual_retry_times_out(clock, timeout_s, interval_s):
    """Check count should be about timeout / interval (+/- 1)."""
    check = CountingCheck(CheckResult.retry())
    waiter = Waiter(
        check,
        timeout_s,
        interval_s,
        resource_id="slug0001",
        operation="created",
        clock=clock.now,
        sleep=clock.sleep,
    )

    with pytest.raises(WaitTimeoutError) as exc_info:
        waiter.run()

    assert waiter.state is WaitState.TIMED_OUT
    expected = timeout_s / interval_s
    assert expected - 1 <= check.calls <= expected + 1
    assert exc_info.value.resource_id == "slug0001"
    assert exc_info.value.operation == "created"
    assert "slug0001" in str(exc_info.value)
    assert "created" in str(exc_info.value)


def test_fatal_on_first_check_raises_unwrapped(clock):
    err = UnprocessableError("team does not exist")
    check = CountingCheck(CheckResult.fatal(err))
    waiter = Waiter(check, 60, 2, clock=clock.now, sleep=clock.sleep)

    with pytest.raises(UnprocessableError) as exc_info:
        waiter.run()

    assert exc_info.value is err
    assert check.calls == 1
    assert clock.sleeps == []
    assert waiter.state is WaitState.FATAL_ERROR


def test_fatal_after_retries_stops_immediately(clock):
    err = RuntimeError("boom")
    check = CountingCheck(CheckResult.retry(), CheckResult.fatal(err), CheckResult.ready())

    with pytest.raises(RuntimeError):
        wait_for(check, 60, 2, clock=clock.now, sleep=clock.sleep)

    assert check.calls == 2


def test_zero_timeout_checks_once(clock):
    check = CountingCheck(CheckResult.retry())

    with pytest.raises(WaitTimeoutError):
        wait_for(check, 0, 1, clock=clock.now, sleep=clock.sleep)

    assert check.calls == 1


def test_interval_must_be_positive():
    with pytest.raises(ValueError, match="interval_s"):
        Waiter(lambda: CheckResult.ready(), 10, 0)


def test_deadline_uses_injected_clock(clock):
    """Time spent inside slow checks counts toward the deadline."""
    calls = []

    def slow_check():
        calls.append(clock.now())
        clock.now_s += 5
        return CheckResult.retry()

    with pytest.raises(WaitTimeoutError):
        wait_for(slow_check, 10, 1, clock=clock.now, sleep=clock.sleep)

    assert calls == [0, 6]
    assert clock.sleeps == [1]
