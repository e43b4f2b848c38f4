"""Run configuration for the Driver.

Provides a single frozen dataclass that encapsulates every knob of a test
run: the trial budget, sequence lengths, seed, failure policy, and the
policies for the open questions of generation (what to do when no command
is eligible) and shrinking (which failures count as "still failing").

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeAlias

from seqcheck.constants import (
    DEFAULT_GENERATION_ATTEMPTS,
    DEFAULT_GENERATION_RETRIES,
    DEFAULT_MAX_SEQUENCE_LENGTH,
    DEFAULT_MAX_SHRINK_EXECUTIONS,
    DEFAULT_MAX_TIMEOUT_SHRINK_EXECUTIONS,
    DEFAULT_MIN_SEQUENCE_LENGTH,
    DEFAULT_TRIAL_COUNT,
)
from seqcheck.enums import EmptyPolicy, ShrinkAcceptance

if TYPE_CHECKING:
    from seqcheck.model import CommandSpec

__all__ = ["RunConfig", "Weighting"]

# Maps an eligible command and the current model state to a selection weight.
Weighting: TypeAlias = "Callable[[CommandSpec, Any], float]"


@dataclass(frozen=True, slots=True)
class RunConfig:
    """Immutable configuration for a Driver run.

    All fields have sensible defaults; ``RunConfig()`` runs 100 trials of up
    to 20 steps with a random root seed, stopping at the first failure.

    Attributes:
        trial_count: Number of trials (default: 100).
        max_sequence_length: Upper bound of the per-trial target length
            (default: 20).
        seed: Root seed. None draws one from the OS; the drawn seed is
            reported in RunResult.root_seed for reproduction.
        stop_on_first_failure: Stop after the first failing trial
            (default: True). If False, all trials run and every failure is
            reported.
        min_sequence_length: Lower bound of the target length (default: 0).
        empty_policy: What generation does when no command is eligible
            (default: SHORTEN, accept the shorter sequence).
        generation_retries: Argument draws rejected by args_precondition
            before generation gives up on a sequence (default: 100).
        generation_attempts: Generation attempts per trial before the trial
            is recorded as exhausted (default: 3).
        weighting: Optional command weighting; defaults to CommandSpec.weight.
        shrink: Shrink failing sequences (default: True).
        shrink_acceptance: Which candidate failures count as still failing
            (default: ANY_FAILURE).
        max_shrink_executions: Re-execution budget per shrink (default: 1000).
        invoke_timeout: Seconds before a blocking invoke counts as a fault
            (default: None, wait indefinitely). A timed-out invoke is not
            cancelled: its daemon worker thread keeps running, possibly
            forever, and cleanup(handle) runs while that worker may still
            be using the handle. Every timed-out shrink candidate abandons
            one more worker and costs a full timeout.
        max_timeout_shrink_executions: Re-execution budget when shrinking a
            failure whose fault is an invoke timeout (default: 10). The
            smaller of this and max_shrink_executions applies.
        workers: Trials run concurrently on this many threads (default: 1).
            Only use >1 when setup() returns isolated instances.

    Example:
        >>> config = RunConfig(trial_count=500, seed=1234, stop_on_first_failure=False)
        >>> result = Driver(system, config).run()
    """

    trial_count: int = DEFAULT_TRIAL_COUNT
    max_sequence_length: int = DEFAULT_MAX_SEQUENCE_LENGTH
    seed: int | None = None
    stop_on_first_failure: bool = True
    min_sequence_length: int = DEFAULT_MIN_SEQUENCE_LENGTH
    empty_policy: EmptyPolicy = EmptyPolicy.SHORTEN
    generation_retries: int = DEFAULT_GENERATION_RETRIES
    generation_attempts: int = DEFAULT_GENERATION_ATTEMPTS
    weighting: Weighting | None = None
    shrink: bool = True
    shrink_acceptance: ShrinkAcceptance = ShrinkAcceptance.ANY_FAILURE
    max_shrink_executions: int = DEFAULT_MAX_SHRINK_EXECUTIONS
    invoke_timeout: float | None = None
    max_timeout_shrink_executions: int = DEFAULT_MAX_TIMEOUT_SHRINK_EXECUTIONS
    workers: int = 1

    def __post_init__(self) -> None:
        """Validate configuration values at construction time.

        Raises:
            ValueError: If a count or bound is out of range.
        """
        if self.trial_count < 0:
            msg = "trial_count must be non-negative"
            raise ValueError(msg)
        if self.min_sequence_length < 0:
            msg = "min_sequence_length must be non-negative"
            raise ValueError(msg)
        if self.max_sequence_length < self.min_sequence_length:
            msg = "max_sequence_length must be >= min_sequence_length"
            raise ValueError(msg)
        if self.generation_retries <= 0:
            msg = "generation_retries must be positive"
            raise ValueError(msg)
        if self.generation_attempts <= 0:
            msg = "generation_attempts must be positive"
            raise ValueError(msg)
        if self.max_shrink_executions < 0:
            msg = "max_shrink_executions must be non-negative"
            raise ValueError(msg)
        if self.invoke_timeout is not None and self.invoke_timeout <= 0:
            msg = "invoke_timeout must be positive"
            raise ValueError(msg)
        if self.max_timeout_shrink_executions < 0:
            msg = "max_timeout_shrink_executions must be non-negative"
            raise ValueError(msg)
        if self.workers <= 0:
            msg = "workers must be positive"
            raise ValueError(msg)
