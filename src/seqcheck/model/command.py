"""Command specifications.

A CommandSpec describes one operation of the component under test:

    precondition(state) -> bool            may the command run in this model state?
    args_generator(state) -> ValueGenerator  how to draw its argument tuple
    args_precondition(state, args) -> bool   are concrete args still valid here?
    invoke(handle, *args) -> value           run it against the real system
    next_state(state, args, result) -> state the model's view of the effect
    postcondition(prev, args, result) -> bool does the real result match the model?

Only ``invoke`` may touch the real system. Everything else is a pure
function of the model state, and the engine calls it through the guarded
``check_*``/``draw_args``/``advance`` methods, which turn any exception into
ContractViolationError so an authoring mistake is never mistaken for a bug
in the system under test.

Model-state transitions must not depend on the real result: during
generation ``next_state`` receives SYMBOLIC_RESULT instead of a value.

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar, final

from seqcheck.diagnostics import ContractViolationError, ErrorTemplate
from seqcheck.generators import ValueGenerator, no_args

if TYPE_CHECKING:
    from random import Random

__all__ = [
    "SYMBOLIC_RESULT",
    "CommandSpec",
    "SymbolicResult",
    "call_hook",
    "command",
]


@final
class SymbolicResult:
    """Placeholder result passed to next_state while generating."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<symbolic result>"


SYMBOLIC_RESULT = SymbolicResult()


def _always(_state: Any) -> bool:
    return True


def _always_args(_state: Any, _args: tuple[Any, ...]) -> bool:
    return True


def _always_post(_prev: Any, _args: tuple[Any, ...], _result: Any) -> bool:
    return True


R = TypeVar("R")


def _same_state(state: Any, _args: tuple[Any, ...], _result: Any) -> Any:
    return state


def _no_args(_state: Any) -> ValueGenerator[tuple[Any, ...]]:
    return no_args()


def call_hook(hook: str, command: str | None, func: Callable[..., R], *args: Any) -> R:
    """Call a pure hook, converting any exception into a contract violation."""
    try:
        return func(*args)
    except Exception as e:
        raise ContractViolationError(ErrorTemplate.hook_raised(hook, command, e)) from e


@dataclass(frozen=True, slots=True)
class CommandSpec:
    """Immutable description of one operation.

    Attributes:
        name: Unique command name within its SystemSpec
        invoke: Real operation, called as ``invoke(handle, *args)``
        args_generator: Maps a model state to the argument-tuple generator
        precondition: Whether the command may be chosen in a model state
        next_state: Pure model transition
        postcondition: Checks the real result against the pre-step model state
        args_precondition: Re-validates concrete args against a model state;
            consulted while generating and when shrinking changes the states
            earlier steps produce
        weight: Relative selection weight under the default weighting
    """

    name: str
    invoke: Callable[..., Any]
    args_generator: Callable[[Any], ValueGenerator[tuple[Any, ...]]] = _no_args
    precondition: Callable[[Any], bool] = _always
    next_state: Callable[[Any, tuple[Any, ...], Any], Any] = _same_state
    postcondition: Callable[[Any, tuple[Any, ...], Any], bool] = _always_post
    args_precondition: Callable[[Any, tuple[Any, ...]], bool] = _always_args
    weight: int = 1

    def __post_init__(self) -> None:
        """Validate the command's shape at construction time.

        Raises:
            ContractViolationError: If the name is empty or not a string.
            ValueError: If weight is negative.
        """
        if not isinstance(self.name, str) or not self.name:
            raise ContractViolationError(ErrorTemplate.invalid_command_name(self.name))
        if self.weight < 0:
            msg = "weight must be non-negative"
            raise ValueError(msg)

    # ------------------------------------------------------------------
    # Guarded hook calls
    # ------------------------------------------------------------------

    def check_precondition(self, state: Any) -> bool:
        """Evaluate ``precondition(state)``."""
        return bool(call_hook("precondition", self.name, self.precondition, state))

    def check_args(self, state: Any, args: tuple[Any, ...]) -> bool:
        """Evaluate ``args_precondition(state, args)``."""
        return bool(
            call_hook("args_precondition", self.name, self.args_precondition, state, args)
        )

    def arguments(self, state: Any) -> ValueGenerator[tuple[Any, ...]]:
        """Return the validated argument generator for ``state``.

        Raises:
            ContractViolationError: If args_generator raises or returns
                something other than a ValueGenerator.
        """
        generator = call_hook("args_generator", self.name, self.args_generator, state)
        if not isinstance(generator, ValueGenerator):
            raise ContractViolationError(
                ErrorTemplate.invalid_args_generator(self.name, generator)
            )
        return generator

    def draw_args(
        self,
        state: Any,
        rng: Random,
        generator: ValueGenerator[tuple[Any, ...]] | None = None,
    ) -> tuple[Any, ...]:
        """Draw one argument tuple for ``state`` from ``rng``.

        Args:
            state: Model state the command will run in
            rng: Random source
            generator: Previously obtained ``arguments(state)``, if any
        """
        if generator is None:
            generator = self.arguments(state)
        args = call_hook("args_generator", self.name, generator.generate, rng)
        if not isinstance(args, tuple):
            raise ContractViolationError(ErrorTemplate.invalid_args_value(self.name, args))
        return args

    def advance(self, state: Any, args: tuple[Any, ...], result: Any) -> Any:
        """Evaluate ``next_state(state, args, result)``."""
        return call_hook("next_state", self.name, self.next_state, state, args, result)

    def check_postcondition(
        self, prev_state: Any, args: tuple[Any, ...], result: Any
    ) -> str | None:
        """Evaluate the postcondition.

        Returns:
            None when it holds, otherwise a description of the violation.
            A falsy return and a raised AssertionError both count as a
            violation; any other exception is a contract violation.
        """
        try:
            ok = self.postcondition(prev_state, args, result)
        except AssertionError as e:
            detail = str(e) or "assertion failed"
            return f"postcondition of '{self.name}' failed: {detail}"
        except Exception as e:
            raise ContractViolationError(
                ErrorTemplate.hook_raised("postcondition", self.name, e)
            ) from e
        if ok:
            return None
        return f"postcondition of '{self.name}' returned {ok!r} for result {result!r}"


def command(
    *,
    name: str | None = None,
    args: ValueGenerator[tuple[Any, ...]] | Callable[[Any], ValueGenerator[tuple[Any, ...]]]
    | None = None,
    precondition: Callable[[Any], bool] | None = None,
    next_state: Callable[[Any, tuple[Any, ...], Any], Any] | None = None,
    postcondition: Callable[[Any, tuple[Any, ...], Any], bool] | None = None,
    args_precondition: Callable[[Any, tuple[Any, ...]], bool] | None = None,
    weight: int = 1,
) -> Callable[[Callable[..., Any]], CommandSpec]:
    """Decorator turning an invoke function into a CommandSpec.

    ``args`` may be a ValueGenerator (same arguments in every state) or a
    callable mapping the model state to one.

    Example:
        >>> @command(
        ...     args=tuples(naturals()),
        ...     next_state=lambda s, args, _r: (*s, args[0]),
        ... )
        ... def push(queue, n):
        ...     queue.put(n)
        >>> push.name
        'push'
    """

    def decorate(func: Callable[..., Any]) -> CommandSpec:
        args_generator: Callable[[Any], ValueGenerator[tuple[Any, ...]]]
        if args is None:
            args_generator = _no_args
        elif isinstance(args, ValueGenerator):
            fixed = args
            args_generator = lambda _state: fixed  # noqa: E731
        else:
            args_generator = args

        return CommandSpec(
            name=name if name is not None else getattr(func, "__name__", ""),
            invoke=func,
            args_generator=args_generator,
            precondition=precondition or _always,
            next_state=next_state or _same_state,
            postcondition=postcondition or _always_post,
            args_precondition=args_precondition or _always_args,
            weight=weight,
        )

    return decorate
