"""Errors raised by the family graph engine.

All failures are local and synchronous. Nothing is retried internally and a
rejected connect leaves the graph untouched.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .validation import RelationClaim


class FamilyConnectError(Exception):
    """Base class for all family-connect errors."""


class UnknownPersonError(FamilyConnectError, LookupError):
    """A person id or reference is not present in the family."""

    def __init__(self, person: Any) -> None:
        self.person = person
        super().__init__(f"Person {person} not found in family")


class InvalidRelationError(FamilyConnectError, ValueError):
    """The validator pipeline rejected a proposed direct connection."""

    def __init__(self, claim: RelationClaim, validator: str | None = None) -> None:
        self.claim = claim
        self.validator = validator
        message = f"{claim} is NOT a valid relation"
        if validator:
            message += f" (rejected by {validator})"
        super().__init__(message)


class NotConnectedError(FamilyConnectError, LookupError):
    """Disconnection requested for a pair without a direct connection."""

    def __init__(self, source: Any, target: Any) -> None:
        self.source = source
        self.target = target
        super().__init__(f"{source} is NOT directly connected to {target}")


class UnparseableRelationError(FamilyConnectError, ValueError):
    """A free-text relation token matches no known relation."""

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(f"Unknown relation: {text!r}")


class FamilyDocumentError(FamilyConnectError, ValueError):
    """A family document could not be read or is malformed."""
