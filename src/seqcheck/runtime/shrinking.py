"""Failing-sequence minimization.

Given a sequence whose execution failed, searches for a smaller sequence
that still fails. Candidates are proposed by three moves, tried in order:

    1. Truncation: drop every step after the failing index.
    2. Step removal: delete one step at an index in [0, failing_index].
    3. Argument shrink: replace one step's arguments with a candidate from
       its argument generator's shrink sequence.

Every candidate is re-validated by replaying the model transitions from
scratch (removing or changing a step changes the states later
preconditions see) and then re-executed on a fresh real system. Nothing is
inferred from the model alone: the real system has side effects the model
cannot predict. The first candidate that still fails becomes the current
sequence and the moves restart from the top. The search stops at a fixed
point where no move produces a failing candidate.

Termination and monotonicity: a candidate is only executed if its rank,
``(length, total argument size)``, is strictly smaller than the current
rank. Ranks are well-ordered, so the loop terminates, the result is never
longer or more complex than the input, and shrinking the result again finds
nothing to accept. The execution budget bounds the work regardless.

Acceptance policy is deliberately loose by default (ANY_FAILURE): a
candidate still fails if its verdict is any Failed, even at another step or
for another reason. This keeps shrinking effective at the cost of
occasionally drifting to a different bug; SAME_REASON and SAME_COMMAND
tighten it.

Python 3.13+.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeAlias

from seqcheck.constants import DEFAULT_MAX_SHRINK_EXECUTIONS
from seqcheck.diagnostics import ContractViolationError, ErrorTemplate
from seqcheck.enums import ShrinkAcceptance
from seqcheck.model import ExecutionResult, Failed, Sequence, Step, format_sequence
from seqcheck.model.command import call_hook

from .executor import Executor
from .generation import replay_states

if TYPE_CHECKING:
    from collections.abc import Iterator

    from seqcheck.generators import ValueGenerator
    from seqcheck.model import CommandSpec, SystemSpec

__all__ = ["ShrinkResult", "Shrinker", "sequence_rank"]

logger = logging.getLogger(__name__)

Rank: TypeAlias = tuple[int, int]


@dataclass(frozen=True, slots=True)
class ShrinkResult:
    """Outcome of one shrink.

    Attributes:
        sequence: Locally minimal failing sequence
        execution: Its execution result (verdict is always Failed)
        executions: Candidates re-executed against the real system
        moves: Candidates accepted on the way
        exhausted: True if the execution budget ran out before a fixed point
    """

    sequence: Sequence
    execution: ExecutionResult
    executions: int
    moves: int
    exhausted: bool = False

    @property
    def verdict(self) -> Failed:
        verdict = self.execution.verdict
        assert isinstance(verdict, Failed)  # noqa: S101 - only failing results are kept
        return verdict


def sequence_rank(system: SystemSpec, sequence: Sequence) -> Rank | None:
    """Well-ordered complexity measure of a sequence.

    Returns:
        ``(len(sequence), sum of argument sizes)`` where each step's size is
        measured by the argument generator for its replayed model state, or
        None when the sequence is not valid for ``system``.
    """
    states = replay_states(system, sequence)
    if states is None:
        return None
    size = 0
    for step, state in zip(sequence, states, strict=False):
        spec = system.commands[step.command]
        generator = spec.arguments(state)
        size += call_hook("size", spec.name, generator.size, step.args)
    return (len(sequence), size)


class Shrinker:
    """Minimizes failing sequences by re-execution.

    Each candidate execution is a full setup()/cleanup() cycle through the
    Executor; handles are never shared between candidates.

    Example:
        >>> shrinker = Shrinker(system)
        >>> result = shrinker.shrink(sequence, Executor(system).run(sequence))
        >>> format_sequence(result.sequence)
        '[push(0), pop()]'
    """

    __slots__ = ("_acceptance", "_executor", "_max_executions", "_system")

    def __init__(
        self,
        system: SystemSpec,
        executor: Executor | None = None,
        *,
        acceptance: ShrinkAcceptance = ShrinkAcceptance.ANY_FAILURE,
        max_executions: int = DEFAULT_MAX_SHRINK_EXECUTIONS,
    ) -> None:
        """Initialize shrinker.

        Args:
            system: System the sequences belong to
            executor: Executor for candidate runs (default: a new one
                without invoke timeout)
            acceptance: Which candidate failures count as still failing
            max_executions: Budget of candidate re-executions
        """
        if max_executions < 0:
            msg = "max_executions must be non-negative"
            raise ValueError(msg)
        self._system = system
        self._executor = executor if executor is not None else Executor(system)
        self._acceptance = acceptance
        self._max_executions = max_executions

    def shrink(self, sequence: Sequence, execution: ExecutionResult) -> ShrinkResult:
        """Shrink a failing sequence to a local minimum.

        Args:
            sequence: The failing sequence
            execution: Its execution result; the verdict must be Failed

        Returns:
            ShrinkResult with the smallest failing sequence found.

        Raises:
            ValueError: If ``execution`` did not fail.
            ContractViolationError: If a model hook or generator misbehaves.
        """
        original = execution.verdict
        if not isinstance(original, Failed):
            msg = "only failing executions can be shrunk"
            raise ValueError(msg)

        current, current_execution = sequence, execution
        current_rank = sequence_rank(self._system, current)
        if current_rank is None:
            # Not a sequence this system could have generated; measure by
            # length alone so removal moves can still make progress.
            current_rank = (len(current), 0)
            logger.debug("Shrinking a sequence that does not replay against the model")

        seen: set[str] = set()
        executions = 0
        moves = 0

        while True:
            accepted: tuple[Sequence, ExecutionResult, Rank] | None = None
            failing_index = _failing_index(current_execution)

            for candidate in self._candidates(current, failing_index):
                fingerprint = repr(candidate)
                if fingerprint in seen:
                    continue
                rank = sequence_rank(self._system, candidate)
                if rank is None or rank >= current_rank:
                    continue

                if executions >= self._max_executions:
                    logger.warning(
                        "Shrink budget of %d executions exhausted at %d steps",
                        self._max_executions,
                        len(current),
                    )
                    return ShrinkResult(current, current_execution, executions, moves, True)

                seen.add(fingerprint)
                executions += 1
                result = self._executor.run(candidate)
                if self._still_fails(result, candidate, original, sequence):
                    accepted = (candidate, result, rank)
                    break

            if accepted is None:
                logger.debug(
                    "Shrunk %d -> %d steps in %d executions: %s",
                    len(sequence),
                    len(current),
                    executions,
                    format_sequence(current),
                )
                return ShrinkResult(current, current_execution, executions, moves, False)

            current, current_execution, current_rank = accepted
            moves += 1
            logger.debug("Accepted candidate with rank %s", current_rank)

    # ------------------------------------------------------------------
    # Candidate moves
    # ------------------------------------------------------------------

    def _candidates(self, sequence: Sequence, failing_index: int) -> Iterator[Sequence]:
        """Lazily propose candidates: truncation, removals, argument shrinks."""
        last = min(failing_index, len(sequence) - 1)

        if len(sequence) > last + 1:
            yield sequence[: last + 1]

        for index in range(last + 1):
            yield sequence[:index] + sequence[index + 1 :]

        states = replay_states(self._system, sequence)
        if states is None:
            return
        for index in range(last + 1):
            step = sequence[index]
            spec = self._system.commands[step.command]
            generator = spec.arguments(states[index])
            for args in _shrink_args(spec, generator, step.args):
                yield (*sequence[:index], Step(step.command, args), *sequence[index + 1 :])

    def _still_fails(
        self,
        result: ExecutionResult,
        candidate: Sequence,
        original: Failed,
        original_sequence: Sequence,
    ) -> bool:
        verdict = result.verdict
        if not isinstance(verdict, Failed):
            return False
        match self._acceptance:
            case ShrinkAcceptance.ANY_FAILURE:
                return True
            case ShrinkAcceptance.SAME_REASON:
                return verdict.reason == original.reason
            case ShrinkAcceptance.SAME_COMMAND:
                return (
                    verdict.reason == original.reason
                    and candidate[verdict.failing_index].command
                    == original_sequence[original.failing_index].command
                )


def _failing_index(execution: ExecutionResult) -> int:
    verdict = execution.verdict
    assert isinstance(verdict, Failed)  # noqa: S101 - current is always failing
    return verdict.failing_index


def _shrink_args(
    spec: CommandSpec, generator: ValueGenerator[tuple[Any, ...]], args: tuple[Any, ...]
) -> Iterator[tuple[Any, ...]]:
    """Iterate a generator's shrink candidates with contract enforcement."""
    candidates = call_hook("shrink", spec.name, generator.shrink, args)
    while True:
        try:
            candidate = next(candidates)
        except StopIteration:
            return
        except Exception as e:
            raise ContractViolationError(ErrorTemplate.hook_raised("shrink", spec.name, e)) from e
        if not isinstance(candidate, tuple):
            raise ContractViolationError(ErrorTemplate.invalid_args_value(spec.name, candidate))
        yield candidate
