# uicomponents/waits.py
"""
@file waits.py
@brief Wait and retry utilities for component waits.
"""

from __future__ import annotations

import time
from typing import Any, Callable, Optional, Tuple, TypeVar

from .exceptions import StaleElementError, TimeoutError
from .interfaces import ILogSink
from .sectionlogger import SECTION_LOGGER

T = TypeVar("T")

TRANSIENT_EXCEPTIONS: Tuple[type, ...] = (StaleElementError,)


def _now() -> float:
    """Monotonic time source for deterministic timeout calculations."""
    return time.monotonic()


def _emit(log: Optional[ILogSink], **event: Any) -> None:
    if log is not None:
        log.log(**event)


def _set_timeout_metadata(
    error: TimeoutError,
    *,
    description: str,
    timeout: float,
    attempt_count: int,
    elapsed: float,
) -> None:
    error.description = description
    error.timeout = timeout
    error.attempt_count = attempt_count
    error.elapsed_time = elapsed


def wait_until(
    predicate: Callable[[], T],
    timeout: float,
    interval: float = 0.5,
    description: str = "condition",
    ignored_exceptions: Tuple[type, ...] = TRANSIENT_EXCEPTIONS,
    log: Optional[ILogSink] = SECTION_LOGGER,
) -> T:
    """
    Repeatedly runs predicate until it returns a truthy value,
    or until timeout.

    Exceptions listed in ignored_exceptions count as "not yet satisfied";
    any other exception propagates immediately. Timing events go to log;
    pass None to wait silently.
    """
    start_time = _now()
    last_exception: Optional[BaseException] = None
    attempt_count = 0

    _emit(
        log,
        event="wait_start",
        message=description,
        metadata={"timeout_s": timeout, "interval_s": interval},
    )

    while True:
        attempt_count += 1
        elapsed = _now() - start_time

        try:
            result = predicate()
            if result:
                _emit(
                    log,
                    event="wait_success",
                    message=description,
                    status="success",
                    metadata={
                        "attempts": attempt_count,
                        "elapsed_s": round(_now() - start_time, 3),
                    },
                )
                return result
        except ignored_exceptions as e:
            last_exception = e

        elapsed = _now() - start_time
        time_left = timeout - elapsed
        if time_left <= 0:
            break
        time.sleep(min(interval, time_left))

    elapsed = _now() - start_time
    _emit(
        log,
        event="wait_timeout",
        message=description,
        status="error",
        metadata={
            "timeout_s": timeout,
            "attempts": attempt_count,
            "elapsed_s": round(elapsed, 3),
        },
    )

    if last_exception:
        error = TimeoutError(
            f"Timed out waiting for {description} after {timeout}s: "
            f"{type(last_exception).__name__}: {last_exception}"
        )
        error.original_exception = last_exception
    else:
        error = TimeoutError(
            f"Timed out waiting for {description} after {timeout}s "
            f"(condition kept returning falsy)"
        )

    _set_timeout_metadata(
        error,
        description=description,
        timeout=timeout,
        attempt_count=attempt_count,
        elapsed=elapsed,
    )
    raise error


def wait_until_passes(
    func: Callable[..., T],
    timeout: float,
    interval: float = 0.2,
    exceptions: Tuple[type, ...] = TRANSIENT_EXCEPTIONS,
    description: str = "operation",
    *args: Any,
    retry_count: Optional[int] = None,
    log: Optional[ILogSink] = SECTION_LOGGER,
    **kwargs: Any,
) -> T:
    """
    Wait until func(*args, **kwargs) succeeds without raising specified exceptions.

    Gives up when timeout elapses or, if retry_count is set, once func has
    been retried retry_count times.
    """
    start_time = _now()
    attempt_count = 0

    while True:
        attempt_count += 1
        try:
            return func(*args, **kwargs)
        except exceptions as e:
            elapsed = _now() - start_time
            time_left = timeout - elapsed
            retries_exhausted = retry_count is not None and attempt_count > retry_count

            if time_left <= 0 or retries_exhausted:
                _emit(
                    log,
                    event="retry_timeout",
                    message=description,
                    status="error",
                    metadata={"attempts": attempt_count, "elapsed_s": round(elapsed, 3)},
                )
                error = TimeoutError(
                    f"Timed out waiting for {description} after {timeout}s "
                    f"({attempt_count} attempts). "
                    f"Last error: {type(e).__name__}: {e}"
                )
                error.original_exception = e
                _set_timeout_metadata(
                    error,
                    description=description,
                    timeout=timeout,
                    attempt_count=attempt_count,
                    elapsed=elapsed,
                )
                raise error from e

            time.sleep(min(interval, time_left))
