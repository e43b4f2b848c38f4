"""Sequence generation.

Synthesizes command sequences whose every prefix is valid: each step's
command precondition (and args_precondition) holds in the model state
produced by replaying the steps before it.

Generation is hypothetical. It never touches the real system; next_state is
fed SYMBOLIC_RESULT in place of a real result, which is why model-state
transitions must not depend on real return values. Under that constraint
replaying a generated sequence with ``replay_states`` reproduces exactly the
states seen during generation.

All randomness comes from value generators driven by the caller's
``random.Random``: the target length from an ``integers`` generator, the
command choice from a ``weighted`` generator, and the arguments from each
command's own generator.

Python 3.13+.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from seqcheck.constants import (
    DEFAULT_GENERATION_RETRIES,
    DEFAULT_MAX_SEQUENCE_LENGTH,
    DEFAULT_MIN_SEQUENCE_LENGTH,
)
from seqcheck.diagnostics import Diagnostic, ErrorTemplate, GenerationExhaustedError
from seqcheck.enums import EmptyPolicy
from seqcheck.generators import ValueGenerator, integers, weighted
from seqcheck.model import SYMBOLIC_RESULT, Sequence, Step

if TYPE_CHECKING:
    from random import Random

    from seqcheck.model import CommandSpec, SystemSpec

    from .config import Weighting

__all__ = ["SequenceGenerator", "replay_states"]

logger = logging.getLogger(__name__)


class SequenceGenerator:
    """Generates precondition-respecting command sequences for one system.

    Thread Safety:
        Stateless between calls; all per-call state lives on the stack and
        randomness comes from the rng passed in. Safe to share across trial
        worker threads.

    Example:
        >>> generator = SequenceGenerator(system, max_length=10)
        >>> sequence = generator.generate(random.Random(42))
    """

    __slots__ = ("_empty_policy", "_lengths", "_retries", "_system", "_weighting")

    def __init__(
        self,
        system: SystemSpec,
        *,
        min_length: int = DEFAULT_MIN_SEQUENCE_LENGTH,
        max_length: int = DEFAULT_MAX_SEQUENCE_LENGTH,
        empty_policy: EmptyPolicy = EmptyPolicy.SHORTEN,
        retries: int = DEFAULT_GENERATION_RETRIES,
        weighting: Weighting | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            system: System whose commands are sequenced
            min_length: Smallest target length drawn per sequence
            max_length: Largest target length drawn per sequence
            empty_policy: Behaviour when no command is eligible
            retries: Rejected argument draws tolerated per sequence
            weighting: Command weighting; defaults to CommandSpec.weight
        """
        if retries <= 0:
            msg = "retries must be positive"
            raise ValueError(msg)
        self._system = system
        self._lengths: ValueGenerator[int] = integers(min_length, max_length)
        self._empty_policy = empty_policy
        self._retries = retries
        self._weighting = weighting

    def generate(self, rng: Random, length: int | None = None) -> Sequence:
        """Generate one sequence.

        Args:
            rng: Random source for length, command choice and arguments
            length: Target length; drawn from the length range when None

        Returns:
            A valid sequence of at most ``length`` steps. It is shorter only
            under EmptyPolicy.SHORTEN.

        Raises:
            GenerationExhaustedError: If no command is eligible and the
                policy is FAIL, if no step at all could be generated (even
                for a zero target), or if the argument retry budget ran out.
            ContractViolationError: If a model hook misbehaves.
        """
        target = self._lengths.generate(rng) if length is None else length
        state = self._system.model_initial_state(None)
        steps: list[Step] = []
        rejections = 0

        # Even a zero target needs some command eligible at the start.
        if target == 0 and not self._eligible(state):
            raise GenerationExhaustedError(ErrorTemplate.no_eligible_command(0))

        while len(steps) < target:
            choices = self._eligible(state)
            if not choices:
                self._give_up(steps, target, ErrorTemplate.no_eligible_command(len(steps)))
                break

            chooser = weighted(choices)
            # One args_generator call per command per step, reused across retries.
            arguments: dict[str, ValueGenerator[tuple[Any, ...]]] = {}
            step: Step | None = None
            while step is None and rejections < self._retries:
                spec = chooser.generate(rng)
                if spec.name not in arguments:
                    arguments[spec.name] = spec.arguments(state)
                args = spec.draw_args(state, rng, arguments[spec.name])
                if spec.check_args(state, args):
                    step = Step(spec.name, args)
                else:
                    rejections += 1
                    logger.debug("Rejected args %r for '%s'", args, spec.name)

            if step is None:
                self._give_up(
                    steps,
                    target,
                    ErrorTemplate.retry_budget_exhausted(len(steps), self._retries),
                )
                break

            steps.append(step)
            state = self._system.commands[step.command].advance(
                state, step.args, SYMBOLIC_RESULT
            )

        logger.debug("Generated %d/%d steps", len(steps), target)
        return tuple(steps)

    def _eligible(self, state: Any) -> list[tuple[float, CommandSpec]]:
        """Weighted commands whose precondition holds, in registration order."""
        choices: list[tuple[float, CommandSpec]] = []
        for spec in self._system.commands.values():
            if not spec.check_precondition(state):
                continue
            weight = spec.weight if self._weighting is None else self._weighting(spec, state)
            if weight < 0:
                msg = f"weighting returned negative weight {weight!r} for '{spec.name}'"
                raise ValueError(msg)
            if weight > 0:
                choices.append((weight, spec))
        return choices

    def _give_up(self, steps: list[Step], target: int, diagnostic: Diagnostic) -> None:
        """Apply the empty policy: accept the prefix or raise."""
        if self._empty_policy is EmptyPolicy.FAIL or (not steps and target > 0):
            raise GenerationExhaustedError(diagnostic)
        logger.debug(
            "Shortened sequence to %d of %d steps: %s", len(steps), target, diagnostic.message
        )


def replay_states(system: SystemSpec, sequence: Sequence) -> tuple[Any, ...] | None:
    """Replay model transitions over a sequence with fixed arguments.

    Args:
        system: System the sequence belongs to
        sequence: Steps to replay

    Returns:
        The model state before each step followed by the final state
        (``len(sequence) + 1`` states), or None if some step's precondition
        or args_precondition does not hold in its replayed state.

    Raises:
        ContractViolationError: If a step names an unknown command or a
            model hook misbehaves.
    """
    state = system.model_initial_state(None)
    states = [state]
    for index, step in enumerate(sequence):
        spec = system.command(step.command, index)
        if not spec.check_precondition(state) or not spec.check_args(state, step.args):
            return None
        state = spec.advance(state, step.args, SYMBOLIC_RESULT)
        states.append(state)
    return tuple(states)
