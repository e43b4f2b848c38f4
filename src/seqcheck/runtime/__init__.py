"""Runtime engine: generation, execution, shrinking and orchestration.

Exports:
    Driver, check: Run model-based tests of a SystemSpec
    RunConfig: Run configuration
    RunResult, RunStatistics, FailureReport, TrialOutcome: Run results
    SequenceGenerator, replay_states: Sequence synthesis and replay
    Executor: Sequence execution against a live system
    Shrinker, ShrinkResult: Failing-sequence minimization
    derive_seed: Deterministic seed derivation

Python 3.13+.
"""

from .config import RunConfig, Weighting
from .driver import (
    Driver,
    FailureReport,
    RunResult,
    RunStatistics,
    TrialOutcome,
    check,
    derive_seed,
)
from .executor import Executor
from .generation import SequenceGenerator, replay_states
from .shrinking import Shrinker, ShrinkResult, sequence_rank
from .timeout import call_with_timeout

__all__ = [
    "Driver",
    "Executor",
    "FailureReport",
    "RunConfig",
    "RunResult",
    "RunStatistics",
    "SequenceGenerator",
    "ShrinkResult",
    "Shrinker",
    "TrialOutcome",
    "Weighting",
    "call_with_timeout",
    "check",
    "derive_seed",
    "replay_states",
    "sequence_rank",
]
