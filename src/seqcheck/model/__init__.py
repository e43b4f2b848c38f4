"""Declarative model of a component under test.

Exports:
    CommandSpec, command: One operation and its model semantics
    SystemSpec: Commands plus setup/initial_state/cleanup hooks
    Step, Sequence, TraceEntry: Sequence and execution records
    Passed, Failed, Verdict, ExecutionResult: Execution outcomes
    SYMBOLIC_RESULT: Placeholder result used while generating

Python 3.13+.
"""

from .command import SYMBOLIC_RESULT, CommandSpec, SymbolicResult, command
from .sequence import (
    ExecutionResult,
    Failed,
    Passed,
    Sequence,
    Step,
    TraceEntry,
    Verdict,
    format_sequence,
)
from .system import SystemSpec

__all__ = [
    "SYMBOLIC_RESULT",
    "CommandSpec",
    "ExecutionResult",
    "Failed",
    "Passed",
    "Sequence",
    "Step",
    "SymbolicResult",
    "SystemSpec",
    "TraceEntry",
    "Verdict",
    "command",
    "format_sequence",
]
