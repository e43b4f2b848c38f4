"""Quickstart example for seqcheck.

This example tests a small FIFO queue against a model: first a buggy
implementation (pop returns the queue instead of the value), then a correct
one, then a key-value store with state-dependent arguments.

Note: Examples print reports for brevity. In a test suite, assert on
``result.ok`` and include ``result.first_failure`` in the message.
"""

from collections import deque

from seqcheck import RunConfig, SystemSpec, check, command
from seqcheck.diagnostics import ContractViolationError
from seqcheck.generators import naturals, sampled_from, tuples

# Example 1: A buggy queue
print("=" * 50)
print("Example 1: Finding and Shrinking a Bug")
print("=" * 50)


def make_queue_system(*, buggy: bool) -> SystemSpec:
    @command(
        args=tuples(naturals()),
        next_state=lambda state, args, _result: (*state, args[0]),
    )
    def push(queue, n):
        queue.append(n)

    @command(
        precondition=lambda state: len(state) > 0,
        postcondition=lambda prev, _args, result: result == prev[0],
        next_state=lambda state, _args, _result: state[1:],
    )
    def pop(queue):
        value = queue.popleft()
        return queue if buggy else value

    return SystemSpec(commands=[push, pop], setup=deque, initial_state=lambda _handle: ())


result = check(make_queue_system(buggy=True), trial_count=100, seed=2024)
report = result.first_failure
print(report)
# Output: Trial 0 (seed ...) failed with postcondition_violated at step 1: [push(0), pop()]
print("original length:", len(report.original_sequence))
print("shrink executions:", report.shrink_executions)

# Example 2: The corrected queue
print("\n" + "=" * 50)
print("Example 2: A Passing Run")
print("=" * 50)

result = check(make_queue_system(buggy=False), RunConfig(trial_count=200, seed=2024))
print("ok:", result.ok)
print("steps executed:", result.statistics.steps_executed)
print("per command:", dict(result.statistics.command_counts))
# Output: ok: True

# Example 3: Arguments that depend on the model state
print("\n" + "=" * 50)
print("Example 3: State-Dependent Arguments")
print("=" * 50)

KEYS = ("a", "b", "c")


@command(
    args=tuples(sampled_from(KEYS), naturals(9)),
    next_state=lambda state, args, _result: {**state, args[0]: args[1]},
)
def put(store, key, value):
    store[key] = value


@command(
    # Only keys the model knows about can be read.
    args=lambda state: tuples(sampled_from(sorted(state))),
    precondition=lambda state: len(state) > 0,
    args_precondition=lambda state, args: args[0] in state,
    postcondition=lambda prev, args, result: result == prev[args[0]],
)
def get(store, key):
    return store[key]


@command(
    args=lambda state: tuples(sampled_from(sorted(state))),
    precondition=lambda state: len(state) > 0,
    args_precondition=lambda state, args: args[0] in state,
    next_state=lambda state, args, _result: {k: v for k, v in state.items() if k != args[0]},
)
def delete(store, key):
    # Bug: deleting "c" is silently ignored.
    if key != "c":
        del store[key]


@command(postcondition=lambda prev, _args, result: result == len(prev))
def size(store):
    return len(store)


store_system = SystemSpec(
    commands=[put, get, delete, size],
    setup=dict,
    initial_state=lambda _handle: {},
)
result = check(store_system, trial_count=300, seed=7)
print(result.first_failure)
# Output: Trial ... failed with postcondition_violated at step 2: [put('c', 0), delete('c'), size()]
print(result.first_failure.to_dict()["trace"])

# Example 4: Malformed descriptions are errors, not verdicts
print("\n" + "=" * 50)
print("Example 4: Contract Violations")
print("=" * 50)

try:
    SystemSpec(commands=[put, put], setup=dict, initial_state=lambda _handle: {})
except ContractViolationError as e:
    print(e)
# Output:
# error[DUPLICATE_COMMAND]: Command 'put' is registered more than once
#   = command: put
#   = help: Command names are unique keys within a SystemSpec
