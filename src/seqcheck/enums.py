"""Enumerations for SeqCheck type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import StrEnum


class FailureReason(StrEnum):
    """Why an execution diverged from the model.

    StrEnum provides automatic string conversion:
    str(FailureReason.INVOCATION_FAULTED) == "invocation_faulted"
    """

    POSTCONDITION_VIOLATED = "postcondition_violated"
    """The real result disagreed with the model's postcondition."""

    INVOCATION_FAULTED = "invocation_faulted"
    """The real operation raised (or timed out)."""


class EmptyPolicy(StrEnum):
    """What sequence generation does when no command is eligible.

    StrEnum provides automatic string conversion: str(EmptyPolicy.SHORTEN) == "shorten"
    """

    SHORTEN = "shorten"
    """Accept the sequence generated so far (must be non-empty)."""

    FAIL = "fail"
    """Abandon the generation attempt with GenerationExhaustedError."""


class ShrinkAcceptance(StrEnum):
    """Which re-executed shrink candidates count as "still failing".

    StrEnum provides automatic string conversion:
    str(ShrinkAcceptance.ANY_FAILURE) == "any_failure"
    """

    ANY_FAILURE = "any_failure"
    """Any failed verdict, even at another index or for another reason."""

    SAME_REASON = "same_reason"
    """Failed verdict with the same FailureReason as the original."""

    SAME_COMMAND = "same_command"
    """Same FailureReason and the failing step runs the same command."""


__all__ = [
    "EmptyPolicy",
    "FailureReason",
    "ShrinkAcceptance",
]
