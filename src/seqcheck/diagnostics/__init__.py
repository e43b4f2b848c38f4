"""Diagnostic system for SeqCheck errors.

Provides structured error diagnostics with codes, hints, and the command
and hook involved. Errors here describe problems with the engine's inputs,
never divergences of the system under test (those are verdicts).

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode
from .errors import (
    ContractViolationError,
    GenerationExhaustedError,
    InvocationTimeoutError,
    SeqCheckError,
    SetupError,
)
from .formatter import DiagnosticFormatter, OutputFormat
from .templates import ErrorTemplate

__all__ = [
    "ContractViolationError",
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticFormatter",
    "ErrorTemplate",
    "GenerationExhaustedError",
    "InvocationTimeoutError",
    "OutputFormat",
    "SeqCheckError",
    "SetupError",
]
