"""System specifications.

A SystemSpec bundles the commands of one component under test with the
hooks that create, describe and dispose of a real instance:

    setup() -> handle               fresh, isolated real system
    initial_state(handle) -> state  model state matching a fresh system
    cleanup(handle)                 optional teardown

Command dispatch is resolved once, here: the commands are frozen into a
read-only name -> CommandSpec mapping at construction and looked up by
name for every step.

Generation is hypothetical and has no real handle, so ``initial_state`` is
called with ``None`` while generating and validating sequences, and with the
real handle while executing. It must return the same state in both cases.

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from seqcheck.diagnostics import ContractViolationError, ErrorTemplate

from .command import CommandSpec, call_hook

__all__ = ["SystemSpec"]


@dataclass(frozen=True, slots=True)
class SystemSpec:
    """Immutable description of a component under test.

    Attributes:
        commands: Read-only mapping of command name to CommandSpec. The
            constructor also accepts any iterable of CommandSpec.
        setup: Creates a fresh real system handle
        initial_state: Model state for a fresh system (handle may be None)
        cleanup: Optional teardown for a handle

    Example:
        >>> system = SystemSpec(
        ...     commands=[push, pop],
        ...     setup=queue.Queue,
        ...     initial_state=lambda _handle: (),
        ... )
        >>> system.names
        ('push', 'pop')
    """

    commands: Mapping[str, CommandSpec]
    setup: Callable[[], Any]
    initial_state: Callable[[Any], Any]
    cleanup: Callable[[Any], None] | None = None

    def __post_init__(self) -> None:
        """Freeze the command registry.

        Raises:
            ContractViolationError: If no commands are given, a name is
                registered twice, or a mapping key disagrees with the
                command's own name.
        """
        specs: Iterable[Any]
        if isinstance(self.commands, Mapping):
            for key, spec in self.commands.items():
                if isinstance(spec, CommandSpec) and key != spec.name:
                    raise ContractViolationError(
                        ErrorTemplate.command_key_mismatch(key, spec.name)
                    )
            specs = self.commands.values()
        else:
            specs = self.commands

        registry: dict[str, CommandSpec] = {}
        for spec in specs:
            if not isinstance(spec, CommandSpec):
                msg = f"commands must be CommandSpec instances, got {type(spec).__name__}"
                raise TypeError(msg)
            if spec.name in registry:
                raise ContractViolationError(ErrorTemplate.duplicate_command(spec.name))
            registry[spec.name] = spec

        if not registry:
            raise ContractViolationError(ErrorTemplate.empty_system())

        object.__setattr__(self, "commands", MappingProxyType(registry))

    @property
    def names(self) -> tuple[str, ...]:
        """Command names in registration order."""
        return tuple(self.commands)

    def command(self, name: str, step_index: int | None = None) -> CommandSpec:
        """Look up a command by name.

        Raises:
            ContractViolationError: If the system defines no such command.
        """
        try:
            return self.commands[name]
        except KeyError:
            raise ContractViolationError(
                ErrorTemplate.unknown_command(name, step_index)
            ) from None

    def model_initial_state(self, handle: Any = None) -> Any:
        """Evaluate ``initial_state(handle)`` with contract enforcement."""
        return call_hook("initial_state", None, self.initial_state, handle)
