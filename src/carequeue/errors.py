"""
Exceptions raised at the scheduler's call boundary.
"""


class CarequeueError(Exception):
    """Base class for scheduler errors."""


class ValidationError(CarequeueError, ValueError):
    """A booking request or configuration value was rejected."""
