"""
Contracts Module — runtime checks on analysis output.

- invariants.py: Semantic correctness checks

The analysis engine runs these on every comprehensive analysis before
returning it.
"""

from .invariants import (
    ALL_INVARIANTS,
    InvariantViolation,
    enforce_invariants,
    enforce_invariants_strict,
)

__all__ = [
    "ALL_INVARIANTS",
    "InvariantViolation",
    "enforce_invariants",
    "enforce_invariants_strict",
]
