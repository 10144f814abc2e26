"""
Error taxonomy for type generation.

Fatal errors abort the whole run; UnsupportedSchemaConstructError is the only
recoverable one and is normally downgraded to a warning by the rule engine.
"""

from typing import Optional


class TypegenError(Exception):
    """Base exception for all type generation errors."""

    def __init__(self, message: str, location: Optional[str] = None):
        self.location = location
        if location:
            message = f"{message} (at {location})"
        super().__init__(message)


class UnresolvableReferenceError(TypegenError):
    """A $ref (or root document) cannot be fetched, parsed or navigated."""

    pass


class CyclicLoadError(TypegenError):
    """Fetching a document re-entered the load of that same document."""

    pass


class AmbiguousTypeError(TypegenError):
    """Two schema nodes claim the same identifier and cannot be told apart."""

    pass


class UnsupportedSchemaConstructError(TypegenError):
    """A keyword combination the rule set cannot represent."""

    recoverable = True
