"""Sequence execution against a live system.

Replays a sequence against a freshly constructed real system while
threading the model state alongside it, and stops at the first divergence:

    handle := setup(); state := initial_state(handle)
    for each step:
        precondition(state), args_precondition(state, args)
                                               false   -> ContractViolationError
        result := invoke(handle, *args)        raised  -> INVOCATION_FAULTED
        postcondition(state, args, result)     false   -> POSTCONDITION_VIOLATED
        state := next_state(state, args, result)

Once the model and the real system disagree, later steps are meaningless,
so nothing past the failing step runs. Preconditions are re-checked against
the states execution actually reaches: a step that is not valid there means
the sequence or the model is broken, which is never blamed on the system
under test.

Resource discipline: every run owns exactly one handle and calls cleanup()
on it exactly once, on every exit path (pass, fault, postcondition
failure, contract violation). Handles are never reused between runs.

Python 3.13+.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

from seqcheck.diagnostics import ContractViolationError, ErrorTemplate, SetupError
from seqcheck.enums import FailureReason
from seqcheck.model import ExecutionResult, Failed, Passed, TraceEntry
from seqcheck.model.command import call_hook

from .timeout import call_with_timeout

if TYPE_CHECKING:
    from seqcheck.model import CommandSpec, Sequence, SystemSpec

__all__ = ["Executor"]

logger = logging.getLogger(__name__)


class Executor:
    """Runs sequences against fresh instances of the real system.

    Attributes:
        executions: Number of completed or aborted runs (for statistics)

    Thread Safety:
        ``run`` keeps all per-run state local; the execution counter is
        lock-protected. One Executor may serve several threads provided
        setup() returns isolated instances.

    Example:
        >>> executor = Executor(system, invoke_timeout=5.0)
        >>> result = executor.run((Step("push", (1,)), Step("pop")))
        >>> result.passed
        True
    """

    __slots__ = ("_executions", "_invoke_timeout", "_lock", "_system")

    def __init__(self, system: SystemSpec, *, invoke_timeout: float | None = None) -> None:
        """Initialize executor.

        Args:
            system: System to execute against
            invoke_timeout: Seconds before a blocking invoke is treated as
                a fault (None waits indefinitely)
        """
        self._system = system
        self._invoke_timeout = invoke_timeout
        self._executions = 0
        self._lock = threading.Lock()

    @property
    def executions(self) -> int:
        """Number of runs started so far."""
        with self._lock:
            return self._executions

    def run(self, sequence: Sequence) -> ExecutionResult:
        """Execute ``sequence`` and report the first divergence.

        Args:
            sequence: Steps to execute

        Returns:
            Trace of the executed steps and the verdict.

        Raises:
            SetupError: If setup() raised.
            ContractViolationError: If a step names an unknown command, a
                step's precondition or args_precondition does not hold in
                the model state execution reached, or a model hook
                (initial_state, next_state, postcondition, cleanup)
                misbehaves. cleanup() still runs first.
        """
        # Resolve dispatch before acquiring a handle so a malformed sequence
        # never costs a setup()/cleanup() cycle.
        specs = tuple(
            self._system.command(step.command, index) for index, step in enumerate(sequence)
        )

        with self._lock:
            self._executions += 1

        handle = self._setup()
        try:
            return self._execute(handle, sequence, specs)
        finally:
            self._cleanup(handle)

    def _setup(self) -> Any:
        try:
            return self._system.setup()
        except Exception as e:
            raise SetupError(ErrorTemplate.setup_failed(e)) from e

    def _cleanup(self, handle: Any) -> None:
        if self._system.cleanup is not None:
            call_hook("cleanup", None, self._system.cleanup, handle)

    def _execute(
        self, handle: Any, sequence: Sequence, specs: tuple[CommandSpec, ...]
    ) -> ExecutionResult:
        state = self._system.model_initial_state(handle)
        trace: list[TraceEntry] = []

        for index, (step, spec) in enumerate(zip(sequence, specs, strict=True)):
            prev_state = state
            self._require_valid(index, spec, prev_state, step.args)
            try:
                result = call_with_timeout(
                    spec.invoke,
                    (handle, *step.args),
                    self._invoke_timeout,
                    command=spec.name,
                )
            except Exception as e:
                trace.append(TraceEntry(step, None, prev_state, e))
                message = f"{step} raised {type(e).__name__}: {e}"
                logger.debug("Step %d faulted: %s", index, message)
                return ExecutionResult(
                    tuple(trace),
                    Failed(index, FailureReason.INVOCATION_FAULTED, message, e),
                )

            violation = spec.check_postcondition(prev_state, step.args, result)
            trace.append(TraceEntry(step, result, prev_state))
            if violation is not None:
                logger.debug("Step %d violated postcondition: %s", index, violation)
                return ExecutionResult(
                    tuple(trace),
                    Failed(index, FailureReason.POSTCONDITION_VIOLATED, violation),
                )

            state = spec.advance(prev_state, step.args, result)

        return ExecutionResult(tuple(trace), Passed())

    @staticmethod
    def _require_valid(
        index: int, spec: CommandSpec, state: Any, args: tuple[Any, ...]
    ) -> None:
        if not spec.check_precondition(state):
            hook = "precondition"
        elif not spec.check_args(state, args):
            hook = "args_precondition"
        else:
            return
        logger.debug("Step %d: %s of '%s' does not hold", index, hook, spec.name)
        raise ContractViolationError(ErrorTemplate.precondition_unsatisfied(spec.name, index, hook))
