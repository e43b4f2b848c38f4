"""Diagnostic codes and data structures.

Defines error codes and the structured diagnostic carried by SeqCheck errors.
Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
]


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Generation errors (sequence synthesis could not proceed)
        2000-2999: Contract violations (the system description is malformed)
        3000-3999: Execution errors (the real system could not be driven)
    """

    # Generation errors (1000-1999)
    NO_ELIGIBLE_COMMAND = 1001
    RETRY_BUDGET_EXHAUSTED = 1002

    # Contract violations (2000-2999)
    HOOK_RAISED = 2001
    INVALID_ARGS_GENERATOR = 2002
    INVALID_ARGS_VALUE = 2003
    DUPLICATE_COMMAND = 2004
    UNKNOWN_COMMAND = 2005
    EMPTY_SYSTEM = 2006
    INVALID_COMMAND_NAME = 2007
    PRECONDITION_UNSATISFIED = 2008

    # Execution errors (3000-3999)
    SETUP_FAILED = 3001
    INVOCATION_TIMEOUT = 3002


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Attributes:
        code: Unique error code
        message: Human-readable error description
        hint: Suggestion for fixing the error
        command: Command name involved, if any
        hook: Name of the collaborator hook that misbehaved
            (precondition, next_state, setup, ...)
        step_index: Position in the sequence where the error surfaced
    """

    code: DiagnosticCode
    message: str
    hint: str | None = None
    command: str | None = None
    hook: str | None = None
    step_index: int | None = None

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format diagnostic like a compiler error.

        Example output:
            error[HOOK_RAISED]: next_state of command 'pop' raised IndexError
              --> step 3
              = command: pop
              = hook: next_state
              = help: Model hooks must be total over states where the precondition held

        Returns:
            Formatted error message
        """
        from .formatter import DiagnosticFormatter  # noqa: PLC0415 - circular

        return DiagnosticFormatter().format(self)
