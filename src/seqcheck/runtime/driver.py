"""Test-run orchestration.

The Driver repeats generate -> execute -> (on failure) shrink for a number
of trials and collects the results:

    root seed --derive_seed--> trial seed --Random--> SequenceGenerator
                                                        |
                                   Executor <-- sequence
                                      |
                    Passed: next trial | Failed: Shrinker -> FailureReport

Reproducibility: every trial's randomness comes from a seed derived from the
root seed and the trial index, never from shared generator state. A trial
therefore produces the same sequence whether it runs first, last, alone via
``run_trial``, or on a worker thread. With no explicit seed the root seed is
drawn from the OS and recorded in the RunResult.

Error policy:
    GenerationExhaustedError  retried with sub-seeds, then the trial is
                              recorded as exhausted; the run continues
    ContractViolationError    propagates; the system description is wrong
    SetupError                propagates; nothing can be tested
    Failed verdict            shrunk and reported, never raised

Python 3.13+.
"""

from __future__ import annotations

import hashlib
import logging
import random
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from seqcheck.constants import SEED_BITS
from seqcheck.diagnostics import GenerationExhaustedError, InvocationTimeoutError
from seqcheck.enums import FailureReason
from seqcheck.model import ExecutionResult, Failed, format_sequence

from .config import RunConfig
from .executor import Executor
from .generation import SequenceGenerator
from .shrinking import Shrinker, ShrinkResult

if TYPE_CHECKING:
    from collections.abc import Iterator

    from seqcheck.diagnostics import Diagnostic
    from seqcheck.model import Sequence, SystemSpec, TraceEntry

__all__ = [
    "Driver",
    "FailureReport",
    "RunResult",
    "RunStatistics",
    "TrialOutcome",
    "check",
    "derive_seed",
]

logger = logging.getLogger(__name__)


def derive_seed(root_seed: int, *path: int) -> int:
    """Derive an independent 64-bit seed from a root seed and a path.

    BLAKE2b over the decimal rendering of ``(root_seed, *path)``. Distinct
    paths give statistically independent seeds, and the result depends on
    nothing but the arguments.

    Example:
        >>> derive_seed(42, 0) == derive_seed(42, 0)
        True
        >>> derive_seed(42, 0) != derive_seed(42, 1)
        True
    """
    material = ":".join(str(part) for part in (root_seed, *path)).encode("ascii")
    digest = hashlib.blake2b(material, digest_size=SEED_BITS // 8).digest()
    return int.from_bytes(digest, "big")


# ============================================================================
# RESULT TYPES
# ============================================================================


@dataclass(frozen=True, slots=True)
class FailureReport:
    """Everything needed to understand and reproduce one failing trial.

    Attributes:
        root_seed: Root seed of the run
        trial_index: Index of the failing trial
        seed: The trial's derived seed
        original_sequence: Sequence as generated
        minimal_sequence: Sequence after shrinking (same as original when
            shrinking is disabled)
        trace: Trace of executing ``minimal_sequence``
        verdict: Verdict of executing ``minimal_sequence``
        original_verdict: Verdict of executing ``original_sequence``
        shrink_executions: Re-executions spent while shrinking
        shrink_exhausted: True if the shrink budget ran out
    """

    root_seed: int
    trial_index: int
    seed: int
    original_sequence: Sequence
    minimal_sequence: Sequence
    trace: tuple[TraceEntry, ...]
    verdict: Failed
    original_verdict: Failed
    shrink_executions: int = 0
    shrink_exhausted: bool = False

    @property
    def reason(self) -> FailureReason:
        """Failure reason of the minimal sequence."""
        return self.verdict.reason

    def __str__(self) -> str:
        return (
            f"Trial {self.trial_index} (seed {self.seed}) failed with {self.reason} "
            f"at step {self.verdict.failing_index}: {format_sequence(self.minimal_sequence)}"
        )

    def to_dict(self) -> dict[str, Any]:
        """Structured record for reporting collaborators.

        Values are JSON-serializable: steps and model values are rendered
        with ``str``/``repr``.
        """
        return {
            "seed": self.seed,
            "root_seed": self.root_seed,
            "trial_index": self.trial_index,
            "reason": str(self.reason),
            "failing_index": self.verdict.failing_index,
            "message": self.verdict.message,
            "minimal_sequence": [str(step) for step in self.minimal_sequence],
            "original_sequence": [str(step) for step in self.original_sequence],
            "trace": [
                {
                    "step": str(entry.step),
                    "prev_state": repr(entry.prev_state),
                    "result": repr(entry.result),
                    "fault": repr(entry.fault) if entry.fault is not None else None,
                }
                for entry in self.trace
            ],
            "shrink_executions": self.shrink_executions,
            "shrink_exhausted": self.shrink_exhausted,
        }


@dataclass(frozen=True, slots=True)
class TrialOutcome:
    """Result of one trial.

    Exactly one of ``execution`` (the trial ran) and ``exhausted`` (no
    sequence could be generated) is set. ``report`` is set when the
    execution failed.
    """

    index: int
    seed: int
    sequence: Sequence | None = None
    execution: ExecutionResult | None = None
    report: FailureReport | None = None
    exhausted: Diagnostic | None = None

    @property
    def passed(self) -> bool:
        return self.execution is not None and self.execution.passed

    @property
    def failed(self) -> bool:
        return self.report is not None


@dataclass(slots=True)
class RunStatistics:
    """Counters accumulated over a run.

    Attributes:
        trials_run: Trials started (passed + failed + exhausted)
        trials_passed: Trials whose execution passed
        trials_failed: Trials whose execution failed
        trials_exhausted: Trials where no sequence could be generated
        steps_executed: Steps executed across trials (shrinking excluded)
        command_counts: Steps executed per command name
        shrink_executions: Re-executions spent shrinking
    """

    trials_run: int = 0
    trials_passed: int = 0
    trials_failed: int = 0
    trials_exhausted: int = 0
    steps_executed: int = 0
    command_counts: Counter[str] = field(default_factory=Counter)
    shrink_executions: int = 0

    def record(self, outcome: TrialOutcome) -> None:
        """Fold one trial outcome into the counters."""
        self.trials_run += 1
        if outcome.exhausted is not None:
            self.trials_exhausted += 1
            return
        if outcome.report is not None:
            self.trials_failed += 1
            self.shrink_executions += outcome.report.shrink_executions
        else:
            self.trials_passed += 1
        if outcome.execution is not None:
            self.steps_executed += len(outcome.execution.trace)
            self.command_counts.update(entry.step.command for entry in outcome.execution.trace)


@dataclass(frozen=True, slots=True)
class RunResult:
    """Outcome of a Driver run.

    Attributes:
        root_seed: Root seed; pass it as RunConfig.seed to reproduce the run
        config: Configuration the run used
        failures: Failure reports in trial order
        exhausted_trials: Indices of trials where generation was exhausted
        statistics: Run counters
    """

    root_seed: int
    config: RunConfig
    failures: tuple[FailureReport, ...]
    exhausted_trials: tuple[int, ...]
    statistics: RunStatistics

    @property
    def ok(self) -> bool:
        """True when no trial failed. Exhausted trials are not failures."""
        return not self.failures

    @property
    def first_failure(self) -> FailureReport | None:
        return self.failures[0] if self.failures else None


# ============================================================================
# DRIVER
# ============================================================================


class Driver:
    """Runs model-based tests of one system.

    Thread Safety:
        With ``workers > 1`` trials run concurrently on a thread pool.
        Generation, shrinking and seeding are independent per trial; the
        real system must hand out isolated instances from setup(). Results
        are always reported in trial order.

    Example:
        >>> result = Driver(system, RunConfig(seed=7)).run()
        >>> result.ok
        False
        >>> str(result.first_failure.minimal_sequence[0])
        'push(0)'
    """

    __slots__ = (
        "_config",
        "_executor",
        "_generator",
        "_root_seed",
        "_shrinker",
        "_system",
        "_timeout_shrinker",
    )

    def __init__(self, system: SystemSpec, config: RunConfig | None = None) -> None:
        """Initialize driver.

        Args:
            system: System under test
            config: Run configuration (default: RunConfig())
        """
        self._system = system
        self._config = config if config is not None else RunConfig()
        self._root_seed = (
            self._config.seed
            if self._config.seed is not None
            else random.SystemRandom().getrandbits(SEED_BITS)
        )
        self._generator = SequenceGenerator(
            system,
            min_length=self._config.min_sequence_length,
            max_length=self._config.max_sequence_length,
            empty_policy=self._config.empty_policy,
            retries=self._config.generation_retries,
            weighting=self._config.weighting,
        )
        self._executor = Executor(system, invoke_timeout=self._config.invoke_timeout)
        self._shrinker = Shrinker(
            system,
            self._executor,
            acceptance=self._config.shrink_acceptance,
            max_executions=self._config.max_shrink_executions,
        )
        self._timeout_shrinker = Shrinker(
            system,
            self._executor,
            acceptance=self._config.shrink_acceptance,
            max_executions=min(
                self._config.max_shrink_executions,
                self._config.max_timeout_shrink_executions,
            ),
        )

    @property
    def root_seed(self) -> int:
        return self._root_seed

    @property
    def config(self) -> RunConfig:
        return self._config

    def run(self) -> RunResult:
        """Run ``trial_count`` trials.

        Returns:
            RunResult with failures in trial order and run statistics.

        Raises:
            ContractViolationError: If the system description is malformed.
            SetupError: If the real system cannot be constructed.
        """
        config = self._config
        logger.info(
            "Running %d trials of %s (root seed %d)",
            config.trial_count,
            ", ".join(self._system.names),
            self._root_seed,
        )

        statistics = RunStatistics()
        failures: list[FailureReport] = []
        exhausted: list[int] = []

        for outcome in self._outcomes():
            statistics.record(outcome)
            if outcome.exhausted is not None:
                exhausted.append(outcome.index)
            elif outcome.report is not None:
                failures.append(outcome.report)
                logger.info("%s", outcome.report)
                if config.stop_on_first_failure:
                    break

        logger.info(
            "Finished %d trials: %d passed, %d failed, %d exhausted",
            statistics.trials_run,
            statistics.trials_passed,
            statistics.trials_failed,
            statistics.trials_exhausted,
        )
        return RunResult(
            root_seed=self._root_seed,
            config=config,
            failures=tuple(failures),
            exhausted_trials=tuple(exhausted),
            statistics=statistics,
        )

    def _outcomes(self) -> Iterator[TrialOutcome]:
        """Yield trial outcomes in index order, sequentially or pooled."""
        count = self._config.trial_count
        if self._config.workers == 1:
            for index in range(count):
                yield self.run_trial(index)
            return

        pool = ThreadPoolExecutor(
            max_workers=self._config.workers, thread_name_prefix="seqcheck-trial"
        )
        try:
            futures = [pool.submit(self.run_trial, index) for index in range(count)]
            for future in futures:
                yield future.result()
        finally:
            # Stopping early (first failure, or an exception) drops trials
            # that have not started yet.
            pool.shutdown(wait=True, cancel_futures=True)

    def run_trial(self, index: int) -> TrialOutcome:
        """Run trial ``index`` exactly as ``run`` would.

        Raises:
            ContractViolationError: If the system description is malformed.
            SetupError: If the real system cannot be constructed.
        """
        seed = derive_seed(self._root_seed, index)
        sequence: Sequence | None = None
        last_error: GenerationExhaustedError | None = None

        for attempt in range(self._config.generation_attempts):
            attempt_seed = seed if attempt == 0 else derive_seed(seed, attempt)
            try:
                sequence = self._generator.generate(random.Random(attempt_seed))
                break
            except GenerationExhaustedError as e:
                last_error = e
                logger.debug("Trial %d generation attempt %d exhausted: %s", index, attempt, e)

        if sequence is None:
            assert last_error is not None  # noqa: S101 - generation_attempts >= 1
            logger.warning("Trial %d exhausted: %s", index, last_error)
            return TrialOutcome(index=index, seed=seed, exhausted=last_error.diagnostic)

        logger.debug("Trial %d: %s", index, format_sequence(sequence))
        execution = self._executor.run(sequence)
        if execution.passed:
            return TrialOutcome(index=index, seed=seed, sequence=sequence, execution=execution)

        report = self._report(index, seed, sequence, execution)
        return TrialOutcome(
            index=index, seed=seed, sequence=sequence, execution=execution, report=report
        )

    def replay(self, sequence: Sequence) -> ExecutionResult:
        """Execute a given sequence once, e.g. a reported minimal sequence."""
        return self._executor.run(sequence)

    def shrink(self, sequence: Sequence, execution: ExecutionResult) -> ShrinkResult:
        """Shrink a failing sequence with this run's acceptance and budget.

        Failures caused by an invoke timeout use the smaller
        ``max_timeout_shrink_executions`` budget.
        """
        verdict = execution.verdict
        if isinstance(verdict, Failed) and isinstance(verdict.fault, InvocationTimeoutError):
            return self._timeout_shrinker.shrink(sequence, execution)
        return self._shrinker.shrink(sequence, execution)

    def _report(
        self, index: int, seed: int, sequence: Sequence, execution: ExecutionResult
    ) -> FailureReport:
        original = execution.verdict
        assert isinstance(original, Failed)  # noqa: S101 - only called on failure

        if not self._config.shrink:
            return FailureReport(
                root_seed=self._root_seed,
                trial_index=index,
                seed=seed,
                original_sequence=sequence,
                minimal_sequence=sequence,
                trace=execution.trace,
                verdict=original,
                original_verdict=original,
            )

        shrunk = self.shrink(sequence, execution)
        logger.debug(
            "Trial %d shrunk from %d to %d steps",
            index,
            len(sequence),
            len(shrunk.sequence),
        )
        return FailureReport(
            root_seed=self._root_seed,
            trial_index=index,
            seed=seed,
            original_sequence=sequence,
            minimal_sequence=shrunk.sequence,
            trace=shrunk.execution.trace,
            verdict=shrunk.verdict,
            original_verdict=original,
            shrink_executions=shrunk.executions,
            shrink_exhausted=shrunk.exhausted,
        )


def check(system: SystemSpec, config: RunConfig | None = None, **options: Any) -> RunResult:
    """Run model-based tests of ``system`` and return the result.

    Keyword options override fields of ``config`` (or of the default
    RunConfig).

    Example:
        >>> result = check(system, trial_count=200, seed=1)
        >>> assert result.ok, result.first_failure
    """
    base = config if config is not None else RunConfig()
    if options:
        base = replace(base, **options)
    return Driver(system, base).run()
