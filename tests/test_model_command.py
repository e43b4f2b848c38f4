"""CommandSpec and @command tests.

Validates construction-time checks, the guarded hook wrappers, and the
decorator's handling of argument generators.
"""

import random

import pytest

from seqcheck import CommandSpec, ContractViolationError, command
from seqcheck.diagnostics import DiagnosticCode
from seqcheck.generators import just, naturals, no_args, tuples
from seqcheck.model import SYMBOLIC_RESULT, Step, format_sequence


def _noop(_handle: object) -> None:
    return None


class TestCommandDecorator:
    """Test @command construction."""

    def test_name_defaults_to_function_name(self) -> None:
        """The invoke function's name becomes the command name."""

        @command()
        def reset(_handle: object) -> None:
            return None

        assert isinstance(reset, CommandSpec)
        assert reset.name == "reset"

    def test_explicit_name(self) -> None:
        """name= overrides the function name."""
        spec = command(name="clear")(_noop)
        assert spec.name == "clear"

    def test_fixed_generator_used_for_every_state(self) -> None:
        """A ValueGenerator passed as args ignores the state."""
        generator = tuples(naturals())
        spec = command(args=generator)(_noop)
        assert spec.arguments("any state") is generator
        assert spec.arguments(None) is generator

    def test_state_dependent_generator(self) -> None:
        """A callable args maps the state to a generator."""
        spec = command(args=lambda state: tuples(just(state)))(_noop)
        assert spec.draw_args(7, random.Random(0)) == (7,)

    def test_defaults(self) -> None:
        """Omitted hooks default to permissive, state-preserving behaviour."""
        spec = command()(_noop)
        assert spec.check_precondition("s") is True
        assert spec.check_args("s", ()) is True
        assert spec.advance("s", (), None) == "s"
        assert spec.check_postcondition("s", (), None) is None
        assert spec.arguments("s") is no_args()

    def test_empty_name_rejected(self) -> None:
        """Empty names are a contract violation."""
        with pytest.raises(ContractViolationError) as exc_info:
            CommandSpec(name="", invoke=_noop)
        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code == DiagnosticCode.INVALID_COMMAND_NAME

    def test_negative_weight_rejected(self) -> None:
        """Weights must be non-negative."""
        with pytest.raises(ValueError, match="weight"):
            CommandSpec(name="x", invoke=_noop, weight=-1)


class TestGuardedHooks:
    """Hook exceptions become ContractViolationError, never verdicts."""

    def test_precondition_raising(self) -> None:
        """A raising precondition names the hook and command."""
        spec = command(name="pop", precondition=lambda state: state[0] > 0)(_noop)
        with pytest.raises(ContractViolationError) as exc_info:
            spec.check_precondition(())
        assert exc_info.value.hook == "precondition"
        assert exc_info.value.command == "pop"
        assert isinstance(exc_info.value.__cause__, IndexError)

    def test_next_state_raising(self) -> None:
        """A raising next_state is a contract violation."""
        spec = command(next_state=lambda state, _a, _r: state[1:] + state["x"])(_noop)
        with pytest.raises(ContractViolationError, match="next_state"):
            spec.advance((), (), SYMBOLIC_RESULT)

    def test_args_generator_must_return_generator(self) -> None:
        """Returning a plain value from args_generator is rejected."""
        spec = command(args=lambda _state: (1, 2))(_noop)
        with pytest.raises(ContractViolationError) as exc_info:
            spec.arguments(None)
        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code == DiagnosticCode.INVALID_ARGS_GENERATOR

    def test_generated_args_must_be_tuple(self) -> None:
        """A generator producing a non-tuple is rejected."""
        spec = command(args=naturals())(_noop)
        with pytest.raises(ContractViolationError) as exc_info:
            spec.draw_args(None, random.Random(0))
        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code == DiagnosticCode.INVALID_ARGS_VALUE

    def test_postcondition_false(self) -> None:
        """A falsy postcondition describes the violation."""
        spec = command(name="get", postcondition=lambda _p, _a, result: result == 1)(_noop)
        message = spec.check_postcondition(None, (), 2)
        assert message is not None
        assert "get" in message
        assert "2" in message

    def test_postcondition_assertion(self) -> None:
        """An AssertionError in the postcondition is a violation, not a contract error."""

        def post(_prev: object, _args: tuple[object, ...], result: object) -> bool:
            assert result == 1, "expected one"
            return True

        spec = command(name="get", postcondition=post)(_noop)
        message = spec.check_postcondition(None, (), 2)
        assert message is not None
        assert "expected one" in message

    def test_postcondition_other_exception(self) -> None:
        """Any other exception in the postcondition is a contract violation."""
        spec = command(postcondition=lambda prev, _a, _r: prev["missing"])(_noop)
        with pytest.raises(ContractViolationError, match="postcondition"):
            spec.check_postcondition({}, (), None)


class TestSteps:
    """Test Step rendering."""

    def test_step_str(self) -> None:
        """Steps render like calls."""
        assert str(Step("push", (0,))) == "push(0)"
        assert str(Step("put", ("k", None))) == "put('k', None)"
        assert str(Step("pop")) == "pop()"

    def test_format_sequence(self) -> None:
        """Sequences render as bracketed lists of calls."""
        assert format_sequence((Step("push", (0,)), Step("pop"))) == "[push(0), pop()]"
        assert format_sequence(()) == "[]"

    def test_symbolic_result_repr(self) -> None:
        """The placeholder result is recognizable in traces."""
        assert repr(SYMBOLIC_RESULT) == "<symbolic result>"
