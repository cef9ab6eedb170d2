"""
analogical/errors.py - Exceptions raised by the core

Two kinds of failure exist:
- InvalidArgumentError: the caller asked for something impossible
  (more evidence than objects, a non-positive grid size, a negative alpha)
- DegenerateStateError: a grid ended up with zero total mass

Both are terminal for the trial they occur in and are never retried.
"""


class AnalogicalError(Exception):
    """Base class for all errors raised by the analogical core."""


class InvalidArgumentError(AnalogicalError, ValueError):
    """An argument is outside the range the operation supports."""


class DegenerateStateError(AnalogicalError, ArithmeticError):
    """A belief grid has no mass left to normalize."""
