#!/usr/bin/env python3
"""Engine Invariant Fuzzer (Atheris).

Targets: seqcheck.runtime (SequenceGenerator, Executor, Shrinker, Driver)

Builds a register-machine system from fuzzer bytes (how many registers,
which operations exist, where the real implementation deviates from the
model) and runs a short Driver run against it. Checks engine invariants
that must hold for every system:

- Generated sequences replay against the model
- Minimal sequences are no longer than the originals and still fail
- Shrinking a minimal sequence again finds nothing to accept
- Every setup() is matched by exactly one cleanup()

Any other exception than a seqcheck error raised for a malformed system is
a finding.

Usage:
    python fuzz_atheris/fuzz_engine.py -max_total_time=300

Requires Python 3.13+ (uses PEP 695 type aliases).
"""

from __future__ import annotations

import atexit
import json
import logging
import sys
from typing import Any, TypeAlias

# --- PEP 695 Type Aliases ---
FuzzStats: TypeAlias = dict[str, int | str]

_fuzz_stats: FuzzStats = {"status": "incomplete", "iterations": 0, "findings": 0, "failures": 0}


def _emit_final_report() -> None:
    report = json.dumps(_fuzz_stats)
    print(f"\n[SUMMARY-JSON-BEGIN]{report}[SUMMARY-JSON-END]", file=sys.stderr)


atexit.register(_emit_final_report)

try:
    import atheris
except ImportError:
    sys.exit(1)

logging.getLogger("seqcheck").setLevel(logging.CRITICAL)

with atheris.instrument_imports(include=["seqcheck"]):
    from seqcheck import RunConfig, SystemSpec, command
    from seqcheck.generators import integers, tuples
    from seqcheck.runtime import Driver, Shrinker, replay_states

_OPERATIONS = ("set", "add", "get", "clear")


class Registers:
    """Real system: a list of integer registers with injectable deviations."""

    def __init__(self, count: int, skew: dict[str, int]) -> None:
        self.values = [0] * count
        self.skew = skew

    def apply(self, op: str, index: int, value: int) -> int:
        match op:
            case "set":
                self.values[index] = value
            case "add":
                self.values[index] += value
            case "clear":
                self.values = [0] * len(self.values)
        if op == "add" and value >= self.skew.get("add", 1 << 30):
            self.values[index] -= 1
        if op == "get" and self.values[index] >= self.skew.get("get", 1 << 30):
            return self.values[index] + 1
        return self.values[index]


def _model_apply(state: tuple[int, ...], op: str, index: int, value: int) -> tuple[int, ...]:
    values = list(state)
    match op:
        case "set":
            values[index] = value
        case "add":
            values[index] += value
        case "clear":
            values = [0] * len(values)
    return tuple(values)


def _build_system(fdp: Any) -> tuple[SystemSpec, list[int]]:
    count = fdp.ConsumeIntInRange(1, 4)
    enabled = [op for op in _OPERATIONS if fdp.ConsumeBool()] or ["set"]
    skew: dict[str, int] = {}
    if fdp.ConsumeBool():
        skew["add"] = fdp.ConsumeIntInRange(1, 20)
    if fdp.ConsumeBool():
        skew["get"] = fdp.ConsumeIntInRange(0, 40)
    balance = [0]

    def setup() -> Registers:
        balance[0] += 1
        return Registers(count, skew)

    def cleanup(_handle: Registers) -> None:
        balance[0] -= 1

    def make(op: str) -> Any:
        def invoke(handle: Registers, index: int, value: int) -> int:
            return handle.apply(op, index, value)

        return command(
            name=op,
            args=tuples(integers(0, count - 1), integers(0, 20)),
            next_state=lambda state, args, _r: _model_apply(state, op, *args),
            postcondition=lambda prev, args, result: (
                result == _model_apply(prev, op, *args)[args[0]]
            ),
        )(invoke)

    system = SystemSpec(
        commands=[make(op) for op in enabled],
        setup=setup,
        initial_state=lambda _handle: (0,) * count,
        cleanup=cleanup,
    )
    return system, balance


def test_one_input(data: bytes) -> None:
    """Atheris entry point: build a system, run it, check engine invariants."""
    _fuzz_stats["iterations"] = int(_fuzz_stats["iterations"]) + 1
    _fuzz_stats["status"] = "running"

    fdp = atheris.FuzzedDataProvider(data)
    system, balance = _build_system(fdp)
    config = RunConfig(
        trial_count=fdp.ConsumeIntInRange(1, 8),
        max_sequence_length=fdp.ConsumeIntInRange(0, 15),
        seed=fdp.ConsumeIntInRange(0, 2**32),
        stop_on_first_failure=fdp.ConsumeBool(),
        max_shrink_executions=200,
    )
    driver = Driver(system, config)
    result = driver.run()

    errors: list[str] = []
    for report in result.failures:
        _fuzz_stats["failures"] = int(_fuzz_stats["failures"]) + 1
        if replay_states(system, report.original_sequence) is None:
            errors.append(f"Generated sequence does not replay: {report.original_sequence}")
        if len(report.minimal_sequence) > len(report.original_sequence):
            errors.append("Shrinking grew the sequence")
        execution = driver.replay(report.minimal_sequence)
        if not execution.failed:
            errors.append(f"Minimal sequence passes on replay: {report.minimal_sequence}")
            continue
        if not report.shrink_exhausted:
            again = Shrinker(system).shrink(report.minimal_sequence, execution)
            if again.sequence != report.minimal_sequence:
                errors.append(f"Shrinking is not idempotent: {again.sequence}")

    if balance[0] != 0:
        errors.append(f"Unbalanced setup/cleanup: {balance[0]}")

    if errors:
        _fuzz_stats["findings"] = int(_fuzz_stats["findings"]) + 1
        raise RuntimeError("\n".join(errors))


if __name__ == "__main__":
    atheris.Setup(sys.argv, test_one_input)
    atheris.Fuzz()
