"""Bounded waiting for real-system invocations.

The engine cannot preemptively cancel the system under test, so a timeout
only stops *waiting*: the call runs on a daemon thread and, if it has not
returned when the bound expires, InvocationTimeoutError is raised in the
caller while the worker is abandoned. Daemon threads never block
interpreter exit.

An abandoned worker may block forever and may still be using the handle
when the executor calls cleanup() on it. Each further timeout abandons
another worker; the driver shrinks timeout failures on the smaller
``RunConfig.max_timeout_shrink_executions`` budget.

Python 3.13+.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any

from seqcheck.diagnostics import ErrorTemplate, InvocationTimeoutError

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = ["call_with_timeout"]


def call_with_timeout(
    func: Callable[..., Any],
    args: tuple[Any, ...],
    timeout: float | None,
    *,
    command: str,
) -> Any:
    """Call ``func(*args)``, giving up after ``timeout`` seconds.

    Args:
        func: Callable to run
        args: Positional arguments
        timeout: Bound in seconds; None calls ``func`` directly on this thread
        command: Command name, for the error message and thread name

    Returns:
        Whatever ``func`` returned.

    Raises:
        InvocationTimeoutError: If ``func`` did not finish in time.
        Exception: Anything ``func`` raised, re-raised in the caller.
    """
    if timeout is None:
        return func(*args)

    outcome: list[tuple[bool, Any]] = []

    def target() -> None:
        try:
            outcome.append((True, func(*args)))
        except BaseException as e:  # noqa: BLE001 - re-raised in the calling thread
            outcome.append((False, e))

    worker = threading.Thread(target=target, name=f"seqcheck-invoke-{command}", daemon=True)
    worker.start()
    worker.join(timeout)

    if worker.is_alive() or not outcome:
        raise InvocationTimeoutError(
            ErrorTemplate.invocation_timeout(command, timeout), timeout
        )

    returned, value = outcome[0]
    if returned:
        return value
    raise value
