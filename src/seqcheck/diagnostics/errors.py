"""SeqCheck exception hierarchy with structured diagnostics.

Hierarchy:
    SeqCheckError (base)
    ├─ GenerationExhaustedError (no sequence could be synthesized)
    ├─ ContractViolationError (the system description is malformed)
    ├─ SetupError (the real system could not be constructed)
    └─ InvocationTimeoutError (invoke exceeded its bound; recorded as a fault)

Test failures are NOT exceptions. Postcondition violations and faulting
invocations are verdicts (see ``seqcheck.model.sequence``). The errors here
mean the engine could not run a test, or the test itself is wrong.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic

__all__ = [
    "ContractViolationError",
    "GenerationExhaustedError",
    "InvocationTimeoutError",
    "SeqCheckError",
    "SetupError",
]


class SeqCheckError(Exception):
    """Base exception for all SeqCheck errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize SeqCheckError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)


class GenerationExhaustedError(SeqCheckError):
    """No command sequence could be generated for a trial.

    Raised when no command is eligible and the empty policy does not allow
    shortening, or when the argument retry budget runs out. The driver
    records the trial as exhausted; the run continues.
    """


class ContractViolationError(SeqCheckError):
    """The system description violates the collaborator contract.

    Examples:
    - next_state or precondition raised
    - args_generator returned something that is not a ValueGenerator
    - Duplicate command names

    This indicates the specification is malformed rather than the system
    under test, so it propagates immediately instead of becoming a verdict.

    Attributes:
        command: Command involved, if any
        hook: Hook that misbehaved, if any
    """

    def __init__(self, message: str | Diagnostic) -> None:
        super().__init__(message)
        self.command = self.diagnostic.command if self.diagnostic else None
        self.hook = self.diagnostic.hook if self.diagnostic else None


class SetupError(SeqCheckError):
    """The real system's setup() raised.

    Without a handle there is nothing to test or clean up, so the run stops.
    The original exception is chained as ``__cause__``.
    """


class InvocationTimeoutError(SeqCheckError):
    """A command's invoke did not return within the configured timeout.

    Never raised to callers of the driver: the executor records it as the
    fault of an INVOCATION_FAULTED verdict.

    Attributes:
        timeout: The bound that was exceeded, in seconds
    """

    def __init__(self, message: str | Diagnostic, timeout: float) -> None:
        super().__init__(message)
        self.timeout = timeout
