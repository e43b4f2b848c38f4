"""Shared constants for SeqCheck.

Centralized defaults used across the model and runtime packages. Placing
them here avoids circular imports between ``runtime.config`` and the
components that fall back to these values when used standalone.

Constants are grouped by domain:
- Trial limits: How many trials a run performs and how long sequences get
- Generation limits: Retry budgets for sequence synthesis
- Shrink limits: Upper bound on re-executions while minimizing

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Trial limits
    "DEFAULT_TRIAL_COUNT",
    "DEFAULT_MAX_SEQUENCE_LENGTH",
    "DEFAULT_MIN_SEQUENCE_LENGTH",
    # Generation limits
    "DEFAULT_GENERATION_RETRIES",
    "DEFAULT_GENERATION_ATTEMPTS",
    # Shrink limits
    "DEFAULT_MAX_SHRINK_EXECUTIONS",
    "DEFAULT_MAX_TIMEOUT_SHRINK_EXECUTIONS",
    # Value generation
    "DEFAULT_MAX_NATURAL",
    "DEFAULT_MAX_LIST_SIZE",
    # Seed derivation
    "SEED_BITS",
]

# ============================================================================
# TRIAL LIMITS
# ============================================================================

# Number of generate/execute cycles per run.
DEFAULT_TRIAL_COUNT: int = 100

# Upper bound for the target length drawn per trial. Twenty steps is enough
# to reach most interesting states of small components while keeping a
# hundred trials well under a second for in-memory systems.
DEFAULT_MAX_SEQUENCE_LENGTH: int = 20

DEFAULT_MIN_SEQUENCE_LENGTH: int = 0

# ============================================================================
# GENERATION LIMITS
# ============================================================================

# Argument draws rejected by args_precondition before a trial gives up.
# Bounds generation even when every draw is rejected.
DEFAULT_GENERATION_RETRIES: int = 100

# Fresh generation attempts (with sub-seeds) before a trial is recorded as
# exhausted.
DEFAULT_GENERATION_ATTEMPTS: int = 3

# ============================================================================
# SHRINK LIMITS
# ============================================================================

# Every shrink candidate is a full setup()/cleanup() cycle against the real
# system, so the budget is expressed in executions rather than candidates.
DEFAULT_MAX_SHRINK_EXECUTIONS: int = 1000

# Shrinking a timed-out invoke costs a full timeout per candidate and leaves
# one abandoned worker thread behind for every candidate that times out again.
DEFAULT_MAX_TIMEOUT_SHRINK_EXECUTIONS: int = 10

# ============================================================================
# VALUE GENERATION
# ============================================================================

DEFAULT_MAX_NATURAL: int = 100

DEFAULT_MAX_LIST_SIZE: int = 10

# ============================================================================
# SEED DERIVATION
# ============================================================================

# Root and derived seeds are unsigned 64-bit integers.
SEED_BITS: int = 64
