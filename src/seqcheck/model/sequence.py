"""Steps, traces and verdicts.

The immutable values that flow between the sequence generator, the
executor and the shrinker:

    Step            one command invocation with concrete arguments
    Sequence        tuple of steps, the unit of generation/execution/shrinking
    TraceEntry      what happened when one step ran
    Passed/Failed   the verdict of one execution
    ExecutionResult trace + verdict

Python 3.13+.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypeAlias

from seqcheck.enums import FailureReason

__all__ = [
    "ExecutionResult",
    "Failed",
    "Passed",
    "Sequence",
    "Step",
    "TraceEntry",
    "Verdict",
    "format_sequence",
]


@dataclass(frozen=True, slots=True)
class Step:
    """One element of a sequence: a command name and its argument tuple.

    Example:
        >>> str(Step("push", (0,)))
        'push(0)'
        >>> str(Step("pop", ()))
        'pop()'
    """

    command: str
    args: tuple[Any, ...] = ()

    def __str__(self) -> str:
        rendered = ", ".join(repr(arg) for arg in self.args)
        return f"{self.command}({rendered})"


Sequence: TypeAlias = tuple[Step, ...]


def format_sequence(sequence: Sequence) -> str:
    """Render a sequence as ``[push(0), pop()]``."""
    return "[" + ", ".join(str(step) for step in sequence) + "]"


@dataclass(frozen=True, slots=True)
class TraceEntry:
    """Record of one executed step.

    Attributes:
        step: The step that ran
        result: Value returned by invoke (None when it faulted)
        prev_state: Model state before the step
        fault: Exception raised by invoke, if any
    """

    step: Step
    result: Any
    prev_state: Any
    fault: BaseException | None = None

    @property
    def faulted(self) -> bool:
        """True when invoke raised instead of returning."""
        return self.fault is not None


@dataclass(frozen=True, slots=True)
class Passed:
    """Every step ran and every postcondition held."""

    @property
    def failed(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class Failed:
    """Execution diverged from the model at ``failing_index``.

    Attributes:
        failing_index: Index of the step where the divergence was detected
        reason: Postcondition violation or invocation fault
        message: Human-readable description of the divergence
        fault: Exception raised by invoke (INVOCATION_FAULTED only)
    """

    failing_index: int
    reason: FailureReason
    message: str = ""
    fault: BaseException | None = None

    @property
    def failed(self) -> bool:
        return True


Verdict: TypeAlias = Passed | Failed


@dataclass(frozen=True, slots=True)
class ExecutionResult:
    """Outcome of running one sequence against a fresh real system."""

    trace: tuple[TraceEntry, ...]
    verdict: Verdict

    @property
    def passed(self) -> bool:
        return not self.verdict.failed

    @property
    def failed(self) -> bool:
        return self.verdict.failed
