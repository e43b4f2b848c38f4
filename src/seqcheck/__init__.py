"""SeqCheck - model-based state-machine testing.

Describe a component as a set of commands (preconditions, argument
generators, model-state transitions and postconditions), and SeqCheck
generates random command sequences, runs them against the real component,
checks every result against the model, and shrinks failing sequences to a
minimal reproduction.

Public API:
    command - Decorator turning an invoke function into a CommandSpec
    CommandSpec - One operation and its model semantics
    SystemSpec - Commands plus setup/initial_state/cleanup hooks
    Driver - Runs trials and collects failure reports
    check - Convenience wrapper around Driver
    RunConfig - Run configuration
    Step - One command invocation in a sequence

Exceptions:
    SeqCheckError - Base exception class
    ContractViolationError - The system description is malformed
    GenerationExhaustedError - No sequence could be generated
    SetupError - The real system could not be constructed

Submodules:
    seqcheck.generators - Value generators with shrinking
    seqcheck.model - Steps, traces and verdicts
    seqcheck.runtime - SequenceGenerator, Executor, Shrinker, Driver
    seqcheck.diagnostics - Error types, codes and formatting
"""

# Essential Public API - Minimal exports for clean namespace
from .diagnostics import (
    ContractViolationError,
    GenerationExhaustedError,
    InvocationTimeoutError,
    SeqCheckError,
    SetupError,
)
from .enums import EmptyPolicy, FailureReason, ShrinkAcceptance
from .model import CommandSpec, Step, SystemSpec, command
from .runtime import Driver, FailureReport, RunConfig, RunResult, check

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("seqcheck")
except PackageNotFoundError:
    # Running from a source checkout without installation
    __version__ = "0.0.0+dev"

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Model
    "CommandSpec",
    "Step",
    "SystemSpec",
    "command",
    # Running
    "Driver",
    "FailureReport",
    "RunConfig",
    "RunResult",
    "check",
    # Policies
    "EmptyPolicy",
    "FailureReason",
    "ShrinkAcceptance",
    # Errors
    "ContractViolationError",
    "GenerationExhaustedError",
    "InvocationTimeoutError",
    "SeqCheckError",
    "SetupError",
    # Metadata
    "__version__",
]
