"""State Machine Fuzzer for Executor and Shrinker using Oracle Testing.

Hypothesis's RuleBasedStateMachine builds a bank-account command sequence
one valid step at a time. After every step the sequence is executed by the
real Executor and by the ShadowExecutor, and the verdicts must agree. When
the sequence fails, the Shrinker's result must be a valid, still-failing,
no-larger sequence that is a fixed point of shrinking.

Run with:
    pytest tests/fuzz/test_engine_oracle.py -v

Python 3.13+.
"""

from __future__ import annotations

import pytest
from hypothesis import settings
from hypothesis import strategies as st
from hypothesis.stateful import RuleBasedStateMachine, initialize, invariant, precondition, rule

from seqcheck import Step, SystemSpec
from seqcheck.runtime import Executor, Shrinker, replay_states, sequence_rank
from tests.strategies import account_system

from .shadow_executor import as_shadow, shadow_run

# Mark entire module as fuzz tests (excluded from normal test runs)
pytestmark = pytest.mark.fuzz


class EngineOracleStateMachine(RuleBasedStateMachine):
    """Differential testing of Executor vs shadow_run on a growing sequence.

    Invariants:
    - The sequence always replays against the model
    - Executor and shadow agree on pass/fail, reason and index
    - Shrunk failures are no larger, still fail and do not shrink further
    """

    def __init__(self) -> None:
        super().__init__()
        self.system: SystemSpec | None = None
        self.steps: list[Step] = []
        self.balance = 0

    @initialize(threshold=st.one_of(st.none(), st.integers(min_value=1, max_value=30)))
    def init_system(self, threshold: int | None) -> None:
        """Build an account system, optionally with the overdraft bug."""
        self.system = account_system(threshold)
        self.steps = []
        self.balance = 0

    @rule(amount=st.integers(min_value=0, max_value=50))
    def deposit(self, amount: int) -> None:
        """Append a deposit."""
        self.steps.append(Step("deposit", (amount,)))
        self.balance += amount

    @precondition(lambda self: self.balance > 0)
    @rule(fraction=st.floats(min_value=0.0, max_value=1.0))
    def withdraw(self, fraction: float) -> None:
        """Append a withdrawal of at most the model balance."""
        amount = int(self.balance * fraction)
        self.steps.append(Step("withdraw", (amount,)))
        self.balance -= amount

    @rule()
    def balance_query(self) -> None:
        """Append a balance query."""
        self.steps.append(Step("balance"))

    @invariant()
    def sequence_replays(self) -> None:
        """The built sequence is valid for the model."""
        if self.system is None:
            return
        assert replay_states(self.system, tuple(self.steps)) is not None

    @invariant()
    def executor_matches_shadow(self) -> None:
        """Executor and shadow agree on the verdict."""
        if self.system is None:
            return
        sequence = tuple(self.steps)
        real = as_shadow(Executor(self.system).run(sequence).verdict)
        shadow = shadow_run(self.system, sequence)
        assert real == shadow, f"Verdict mismatch: real={real}, shadow={shadow}"

    @invariant()
    def shrink_is_sound(self) -> None:
        """Shrinking a failure yields a smaller failing fixed point."""
        if self.system is None:
            return
        sequence = tuple(self.steps)
        execution = Executor(self.system).run(sequence)
        if execution.passed:
            return

        shrinker = Shrinker(self.system)
        result = shrinker.shrink(sequence, execution)
        original_rank = sequence_rank(self.system, sequence)
        shrunk_rank = sequence_rank(self.system, result.sequence)
        assert original_rank is not None
        assert shrunk_rank is not None
        assert shrunk_rank <= original_rank
        assert shadow_run(self.system, result.sequence) is not None

        again = shrinker.shrink(result.sequence, result.execution)
        assert again.sequence == result.sequence


TestEngineOracle = EngineOracleStateMachine.TestCase
TestEngineOracle.settings = settings(max_examples=200, stateful_step_count=25, deadline=None)
