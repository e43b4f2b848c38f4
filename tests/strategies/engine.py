"""Hypothesis strategies for SeqCheck engine inputs.

Seeds, run configurations, value generators with values they can produce,
and bank-account systems with a parametrized bug.
"""

from __future__ import annotations

import random
from typing import Any

from hypothesis import event
from hypothesis import strategies as st
from hypothesis.strategies import composite

from seqcheck import RunConfig, SystemSpec, command
from seqcheck.enums import ShrinkAcceptance
from seqcheck.generators import (
    ValueGenerator,
    booleans,
    integers,
    lists,
    naturals,
    sampled_from,
    tuples,
)

# Root seeds are unsigned 64-bit, but any int must be accepted.
seeds = st.integers(min_value=0, max_value=2**64 - 1)


@composite
def run_configs(draw: st.DrawFn, **overrides: Any) -> RunConfig:
    """Generate small, fast RunConfigs."""
    min_length = draw(st.integers(min_value=0, max_value=3))
    options: dict[str, Any] = {
        "trial_count": draw(st.integers(min_value=1, max_value=10)),
        "min_sequence_length": min_length,
        "max_sequence_length": draw(st.integers(min_value=min_length, max_value=12)),
        "seed": draw(seeds),
        "shrink_acceptance": draw(st.sampled_from(ShrinkAcceptance)),
    }
    options.update(overrides)
    return RunConfig(**options)


@composite
def generators_with_values(draw: st.DrawFn) -> tuple[ValueGenerator[Any], Any]:
    """A value generator and a value it generates."""
    kind = draw(st.sampled_from(["integers", "booleans", "sampled", "lists", "tuples"]))
    event(f"generator={kind}")
    match kind:
        case "integers":
            low = draw(st.integers(min_value=-1000, max_value=1000))
            high = draw(st.integers(min_value=low, max_value=low + 2000))
            generator: ValueGenerator[Any] = integers(low, high)
        case "booleans":
            generator = booleans()
        case "sampled":
            generator = sampled_from(draw(st.lists(st.text(max_size=3), min_size=1, max_size=5)))
        case "lists":
            generator = lists(naturals(20), max_size=draw(st.integers(0, 6)))
        case _:
            generator = tuples(naturals(50), booleans())
    seed = draw(seeds)
    return generator, generator.generate(random.Random(seed))


# =============================================================================
# BANK ACCOUNT SYSTEM
# =============================================================================


class Account:
    """Real system: a balance with an optional overdraft bug."""

    def __init__(self, bug_threshold: int | None) -> None:
        self.balance = 0
        self.bug_threshold = bug_threshold

    def deposit(self, amount: int) -> int:
        self.balance += amount
        return self.balance

    def withdraw(self, amount: int) -> int:
        if self.bug_threshold is not None and amount >= self.bug_threshold:
            # Large withdrawals forget to debit.
            return self.balance
        self.balance -= amount
        return self.balance


def account_system(bug_threshold: int | None) -> SystemSpec:
    """Account with deposit/withdraw/balance, buggy above ``bug_threshold``."""

    @command(
        args=tuples(naturals(50)),
        next_state=lambda state, args, _r: state + args[0],
        postcondition=lambda prev, args, result: result == prev + args[0],
    )
    def deposit(account: Account, amount: int) -> int:
        return account.deposit(amount)

    @command(
        args=lambda state: tuples(integers(0, state)),
        precondition=lambda state: state > 0,
        args_precondition=lambda state, args: args[0] <= state,
        next_state=lambda state, args, _r: state - args[0],
        postcondition=lambda prev, args, result: result == prev - args[0],
    )
    def withdraw(account: Account, amount: int) -> int:
        return account.withdraw(amount)

    @command(postcondition=lambda prev, _args, result: result == prev)
    def balance(account: Account) -> int:
        return account.balance

    return SystemSpec(
        commands=[deposit, withdraw, balance],
        setup=lambda: Account(bug_threshold),
        initial_state=lambda _handle: 0,
    )


account_systems = st.one_of(
    st.none(),
    st.integers(min_value=1, max_value=40),
).map(account_system)
