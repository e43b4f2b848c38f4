"""Fuzz testing infrastructure for SeqCheck.

This package contains:
- shadow_executor: Simple reference implementation of sequence execution
- test_engine_oracle: State machine fuzzer comparing Executor to the shadow
- test_driver_properties: Whole-run properties over generated systems

Python 3.13+.
"""
