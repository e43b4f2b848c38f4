"""Hypothesis strategies for SeqCheck property-based testing.

Usage:
    from tests.strategies import seeds, run_configs, account_systems
"""

from .engine import (
    Account,
    account_system,
    account_systems,
    generators_with_values,
    run_configs,
    seeds,
)

__all__ = [
    "Account",
    "account_system",
    "account_systems",
    "generators_with_values",
    "run_configs",
    "seeds",
]
