"""Shrinker tests.

Validates minimal results, monotonicity, idempotence, the acceptance
policies, the execution budget and generator contract enforcement.
"""

import random
from collections.abc import Iterator
from typing import Any

import pytest
from hypothesis import assume, given

from seqcheck import ContractViolationError, SystemSpec, command
from seqcheck.enums import FailureReason, ShrinkAcceptance
from seqcheck.generators import ValueGenerator
from seqcheck.model import Failed, Step
from seqcheck.runtime import Executor, SequenceGenerator, Shrinker, ShrinkResult, sequence_rank
from tests.helpers.systems import counting_system, queue_system, threshold_system
from tests.strategies import account_system, seeds


def _shrink(system: SystemSpec, sequence: tuple[Step, ...], **options: Any) -> ShrinkResult:
    execution = Executor(system).run(sequence)
    assert execution.failed
    return Shrinker(system, **options).shrink(sequence, execution)


class TestMinimalResults:
    """Shrinking reaches the expected minimal sequences."""

    def test_queue_shrinks_to_push_zero_pop(self) -> None:
        """Removal and argument moves reach [push(0), pop()]."""
        sequence = (
            Step("push", (17,)),
            Step("push", (42,)),
            Step("pop"),
            Step("push", (3,)),
            Step("pop"),
            Step("pop"),
        )
        result = _shrink(queue_system(buggy=True), sequence)
        assert result.sequence == (Step("push", (0,)), Step("pop"))
        assert result.verdict.reason == FailureReason.POSTCONDITION_VIOLATED
        assert result.moves > 0
        assert not result.exhausted

    def test_threshold_argument_shrinks_to_boundary(self) -> None:
        """Integer shrinking finds the smallest failing argument."""
        sequence = (Step("put", (3,)), Step("put", (900,)), Step("put", (5,)))
        result = _shrink(threshold_system(37), sequence)
        assert result.sequence == (Step("put", (37,)),)

    def test_truncates_after_failing_step(self) -> None:
        """Steps after the failing index are dropped first."""
        system, _ = counting_system(fault_at=1)
        result = _shrink(system, (Step("incr"),) * 6)
        assert result.sequence == (Step("incr"),)

    def test_shrunk_execution_matches_sequence(self) -> None:
        """The reported execution is the execution of the reported sequence."""
        sequence = (Step("push", (9,)), Step("push", (8,)), Step("pop"))
        result = _shrink(queue_system(buggy=True), sequence)
        assert [entry.step for entry in result.execution.trace] == list(result.sequence)


class TestShrinkProperties:
    """Monotonicity and idempotence over generated failures."""

    @given(seed=seeds)
    def test_never_grows_and_idempotent(self, seed: int) -> None:
        """Shrinking never increases rank, and shrinking twice changes nothing."""
        system = account_system(bug_threshold=5)
        sequence = SequenceGenerator(system, max_length=15).generate(random.Random(seed))
        execution = Executor(system).run(sequence)
        assume(execution.failed)

        shrinker = Shrinker(system)
        first = shrinker.shrink(sequence, execution)
        assert not first.exhausted
        original_rank = sequence_rank(system, sequence)
        shrunk_rank = sequence_rank(system, first.sequence)
        assert original_rank is not None
        assert shrunk_rank is not None
        assert shrunk_rank <= original_rank
        assert len(first.sequence) <= len(sequence)

        second = shrinker.shrink(first.sequence, first.execution)
        assert second.sequence == first.sequence
        assert second.moves == 0

    @given(seed=seeds)
    def test_result_still_fails_and_replays(self, seed: int) -> None:
        """The result is valid for the model and still fails."""
        system = account_system(bug_threshold=5)
        sequence = SequenceGenerator(system, max_length=15).generate(random.Random(seed))
        execution = Executor(system).run(sequence)
        assume(execution.failed)

        result = Shrinker(system).shrink(sequence, execution)
        assert sequence_rank(system, result.sequence) is not None
        assert Executor(system).run(result.sequence).failed


class TestAcceptance:
    """Test the still-fails acceptance policies.

    In the two-bug system the original sequence ``[a, a, b, a]`` faults at
    the third ``a``. Dropping the first step makes ``b`` observe one ``a``
    instead, which violates its postcondition: a smaller failure with a
    different reason.
    """

    ORIGINAL = (Step("a"), Step("a"), Step("b"), Step("a"))

    @staticmethod
    def _two_bug_system() -> SystemSpec:
        """``a`` faults on the third call; ``b`` misreports a count of one."""

        @command()
        def a(handle: list[str]) -> None:
            handle.append("a")
            if len(handle) >= 3:
                msg = "third a"
                raise RuntimeError(msg)

        @command(postcondition=lambda _prev, _args, result: result != 1)
        def b(handle: list[str]) -> int:
            return len(handle)

        return SystemSpec(commands=[a, b], setup=list, initial_state=lambda _h: 0)

    def test_original_faults(self) -> None:
        """The unshrunk sequence fails by fault at its last step."""
        verdict = Executor(self._two_bug_system()).run(self.ORIGINAL).verdict
        assert isinstance(verdict, Failed)
        assert verdict.reason == FailureReason.INVOCATION_FAULTED
        assert verdict.failing_index == 3

    def test_any_failure_may_switch_bug(self) -> None:
        """ANY_FAILURE follows the smaller postcondition failure."""
        result = _shrink(
            self._two_bug_system(), self.ORIGINAL, acceptance=ShrinkAcceptance.ANY_FAILURE
        )
        assert result.sequence == (Step("a"), Step("b"))
        assert result.verdict.reason == FailureReason.POSTCONDITION_VIOLATED

    def test_same_reason_keeps_reason(self) -> None:
        """SAME_REASON rejects candidates that fail differently."""
        result = _shrink(
            self._two_bug_system(), self.ORIGINAL, acceptance=ShrinkAcceptance.SAME_REASON
        )
        assert result.sequence == (Step("a"), Step("a"), Step("a"))
        assert result.verdict.reason == FailureReason.INVOCATION_FAULTED

    def test_same_command_keeps_failing_command(self) -> None:
        """SAME_COMMAND also requires the same command to fail."""
        result = _shrink(
            self._two_bug_system(), self.ORIGINAL, acceptance=ShrinkAcceptance.SAME_COMMAND
        )
        failing = result.sequence[result.verdict.failing_index]
        assert failing.command == "a"
        assert result.verdict.reason == FailureReason.INVOCATION_FAULTED


class TestBudgetAndContracts:
    """Test the execution budget and generator contract checks."""

    def test_budget_exhaustion_returns_best_so_far(self) -> None:
        """Running out of executions returns the current sequence."""
        sequence = (Step("push", (50,)), Step("push", (60,)), Step("pop"))
        result = _shrink(queue_system(buggy=True), sequence, max_executions=1)
        assert result.exhausted
        assert result.executions == 1
        assert result.execution.failed
        assert len(result.sequence) <= len(sequence)

    def test_zero_budget(self) -> None:
        """A zero budget returns the input untouched."""
        sequence = (Step("push", (50,)), Step("pop"))
        result = _shrink(queue_system(buggy=True), sequence, max_executions=0)
        assert result.sequence == sequence
        assert result.exhausted

    def test_negative_budget_rejected(self) -> None:
        """max_executions must be non-negative."""
        with pytest.raises(ValueError, match="max_executions"):
            Shrinker(queue_system(), max_executions=-1)

    def test_passing_execution_rejected(self) -> None:
        """Only failing executions can be shrunk."""
        system = queue_system()
        sequence = (Step("push", (1,)),)
        with pytest.raises(ValueError, match="failing"):
            Shrinker(system).shrink(sequence, Executor(system).run(sequence))

    def test_candidates_are_not_re_executed(self) -> None:
        """Each distinct candidate runs at most once."""
        system, recorder = counting_system(fail_at=3)
        sequence = (Step("incr"),) * 5
        result = _shrink(system, sequence)
        assert result.sequence == (Step("incr"),) * 3
        # One run for the original plus one per distinct candidate.
        assert recorder.setups == 1 + result.executions

    def test_raising_shrink_is_contract_violation(self) -> None:
        """A generator whose shrink raises mid-iteration is reported."""

        class Broken(ValueGenerator[tuple[Any, ...]]):
            def generate(self, rng: random.Random) -> tuple[Any, ...]:
                return (rng.randint(1, 9),)

            def shrink(self, value: tuple[Any, ...]) -> Iterator[tuple[Any, ...]]:
                yield (value[0] - 1,)
                msg = "broken shrink"
                raise RuntimeError(msg)

            def size(self, value: tuple[Any, ...]) -> int:
                return value[0]

        spec = command(
            name="put", args=Broken(), postcondition=lambda _p, args, _r: args[0] < 5
        )(lambda _h, _n: None)
        system = SystemSpec(commands=[spec], setup=object, initial_state=lambda _h: None)
        with pytest.raises(ContractViolationError) as exc_info:
            _shrink(system, (Step("put", (5,)),))
        assert exc_info.value.hook == "shrink"

    def test_non_tuple_shrink_candidate(self) -> None:
        """Shrink candidates must be argument tuples."""

        class Scalar(ValueGenerator[Any]):
            def generate(self, rng: random.Random) -> Any:
                return (1,)

            def shrink(self, value: Any) -> Iterator[Any]:
                yield 0

        spec = command(
            name="put", args=Scalar(), postcondition=lambda _p, _a, _r: False
        )(lambda _h, _n: None)
        system = SystemSpec(commands=[spec], setup=object, initial_state=lambda _h: None)
        with pytest.raises(ContractViolationError, match="must be a tuple"):
            _shrink(system, (Step("put", (1,)),))

    def test_rank_of_invalid_sequence(self) -> None:
        """Invalid sequences have no rank."""
        assert sequence_rank(queue_system(), (Step("pop"),)) is None
        assert sequence_rank(queue_system(), (Step("push", (3,)),)) == (1, 3)
