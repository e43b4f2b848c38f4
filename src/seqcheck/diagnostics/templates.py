"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors!
    Keeps messages testable and documents every error case in one place.
    """

    @staticmethod
    def no_eligible_command(step_index: int) -> Diagnostic:
        """No registered command's precondition holds.

        Args:
            step_index: Length of the sequence generated so far

        Returns:
            Diagnostic for NO_ELIGIBLE_COMMAND
        """
        msg = f"No command is eligible at step {step_index}"
        return Diagnostic(
            code=DiagnosticCode.NO_ELIGIBLE_COMMAND,
            message=msg,
            hint="At least one precondition must hold in every reachable model state",
            step_index=step_index,
        )

    @staticmethod
    def retry_budget_exhausted(step_index: int, retries: int) -> Diagnostic:
        """Every argument draw was rejected by args_precondition.

        Args:
            step_index: Length of the sequence generated so far
            retries: The exhausted retry budget

        Returns:
            Diagnostic for RETRY_BUDGET_EXHAUSTED
        """
        msg = f"Argument draws rejected {retries} times at step {step_index}"
        return Diagnostic(
            code=DiagnosticCode.RETRY_BUDGET_EXHAUSTED,
            message=msg,
            hint="Make args_generator produce values args_precondition accepts",
            step_index=step_index,
        )

    @staticmethod
    def hook_raised(hook: str, command: str | None, error: BaseException) -> Diagnostic:
        """A pure collaborator hook raised.

        Args:
            hook: Hook name (precondition, next_state, initial_state, ...)
            command: Owning command, or None for system-level hooks
            error: The exception raised by the hook

        Returns:
            Diagnostic for HOOK_RAISED
        """
        owner = f" of command '{command}'" if command is not None else ""
        msg = f"{hook}{owner} raised {type(error).__name__}: {error}"
        return Diagnostic(
            code=DiagnosticCode.HOOK_RAISED,
            message=msg,
            hint="Model hooks must be total over states where the precondition held",
            command=command,
            hook=hook,
        )

    @staticmethod
    def invalid_args_generator(command: str, received: object) -> Diagnostic:
        """args_generator returned something that is not a ValueGenerator.

        Args:
            command: Command name
            received: The object returned instead

        Returns:
            Diagnostic for INVALID_ARGS_GENERATOR
        """
        msg = (
            f"args_generator of command '{command}' returned "
            f"{type(received).__name__}, expected a ValueGenerator"
        )
        return Diagnostic(
            code=DiagnosticCode.INVALID_ARGS_GENERATOR,
            message=msg,
            hint="Return a generator such as tuples(naturals()) or no_args()",
            command=command,
            hook="args_generator",
        )

    @staticmethod
    def invalid_args_value(command: str, received: object) -> Diagnostic:
        """The argument generator produced a non-tuple value.

        Args:
            command: Command name
            received: The generated value

        Returns:
            Diagnostic for INVALID_ARGS_VALUE
        """
        msg = (
            f"Arguments for command '{command}' must be a tuple, "
            f"got {type(received).__name__}"
        )
        return Diagnostic(
            code=DiagnosticCode.INVALID_ARGS_VALUE,
            message=msg,
            hint="Wrap argument generators in tuples(...)",
            command=command,
            hook="args_generator",
        )

    @staticmethod
    def duplicate_command(command: str) -> Diagnostic:
        """Two commands registered under one name.

        Args:
            command: The duplicated name

        Returns:
            Diagnostic for DUPLICATE_COMMAND
        """
        msg = f"Command '{command}' is registered more than once"
        return Diagnostic(
            code=DiagnosticCode.DUPLICATE_COMMAND,
            message=msg,
            hint="Command names are unique keys within a SystemSpec",
            command=command,
        )

    @staticmethod
    def unknown_command(command: str, step_index: int | None = None) -> Diagnostic:
        """A step names a command the system does not define.

        Args:
            command: The unknown name
            step_index: Position of the offending step

        Returns:
            Diagnostic for UNKNOWN_COMMAND
        """
        msg = f"Command '{command}' is not defined by this system"
        return Diagnostic(
            code=DiagnosticCode.UNKNOWN_COMMAND,
            message=msg,
            hint="Sequences can only be replayed against the system that produced them",
            command=command,
            step_index=step_index,
        )

    @staticmethod
    def empty_system() -> Diagnostic:
        """SystemSpec constructed without commands.

        Returns:
            Diagnostic for EMPTY_SYSTEM
        """
        return Diagnostic(
            code=DiagnosticCode.EMPTY_SYSTEM,
            message="A system must define at least one command",
        )

    @staticmethod
    def invalid_command_name(command: object) -> Diagnostic:
        """Command name is empty or not a string.

        Args:
            command: The rejected name

        Returns:
            Diagnostic for INVALID_COMMAND_NAME
        """
        msg = f"Invalid command name: {command!r}"
        return Diagnostic(
            code=DiagnosticCode.INVALID_COMMAND_NAME,
            message=msg,
            hint="Command names must be non-empty strings",
        )

    @staticmethod
    def command_key_mismatch(key: str, name: str) -> Diagnostic:
        """Mapping key differs from the CommandSpec's own name.

        Args:
            key: The mapping key
            name: CommandSpec.name

        Returns:
            Diagnostic for INVALID_COMMAND_NAME
        """
        msg = f"Command registered under '{key}' is named '{name}'"
        return Diagnostic(
            code=DiagnosticCode.INVALID_COMMAND_NAME,
            message=msg,
            hint="Register commands under their own name, or pass a list of commands",
            command=name,
        )

    @staticmethod
    def precondition_unsatisfied(command: str, step_index: int, hook: str) -> Diagnostic:
        """A step's precondition fails against the executed model state.

        Args:
            command: Command name of the step
            step_index: Position of the offending step
            hook: "precondition" or "args_precondition"

        Returns:
            Diagnostic for PRECONDITION_UNSATISFIED
        """
        msg = f"{hook} of command '{command}' does not hold at step {step_index}"
        return Diagnostic(
            code=DiagnosticCode.PRECONDITION_UNSATISFIED,
            message=msg,
            hint="next_state must not depend on real results; replay only valid sequences",
            command=command,
            hook=hook,
            step_index=step_index,
        )

    @staticmethod
    def setup_failed(error: BaseException) -> Diagnostic:
        """The real system's setup() raised.

        Args:
            error: The exception raised by setup()

        Returns:
            Diagnostic for SETUP_FAILED
        """
        msg = f"setup() raised {type(error).__name__}: {error}"
        return Diagnostic(
            code=DiagnosticCode.SETUP_FAILED,
            message=msg,
            hint="setup() must create a fresh, isolated instance on every call",
            hook="setup",
        )

    @staticmethod
    def invocation_timeout(command: str, timeout: float) -> Diagnostic:
        """invoke did not return within the configured bound.

        Args:
            command: Command name
            timeout: The bound in seconds

        Returns:
            Diagnostic for INVOCATION_TIMEOUT
        """
        msg = f"Command '{command}' did not return within {timeout:g}s"
        return Diagnostic(
            code=DiagnosticCode.INVOCATION_TIMEOUT,
            message=msg,
            command=command,
            hook="invoke",
        )
