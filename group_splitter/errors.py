"""
Errors raised by the group splitter.

InvalidInputError subclasses ValueError and NotFoundError subclasses
LookupError, so callers that already catch the built-ins keep working.
"""


class InvalidInputError(ValueError):
    """Input violates the contract of the called operation."""


class NotFoundError(LookupError):
    """A group, expense or split does not exist."""
