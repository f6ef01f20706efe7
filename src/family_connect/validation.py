"""Validators for proposed direct connections.

Each validator is a plain predicate ``(claim, family) -> bool``. The pipeline
runs them in order and stops at the first rejection:

- Gender: spouses differ in gender, specific labels match the claimant
- Age: ancestors are older, descendants younger
- Relationship: the claim agrees with whatever the graph already infers

Only the relationship validator reads the graph, through
:class:`ConnectionLookup`, so each one can be tested against a stub.
"""
from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Protocol

import structlog

from .models import ConnectionEdge, Person
from .relations import Relation, RelationKind, SpecificRelation, as_kind

logger = structlog.get_logger(__name__)

_OLDER_KINDS = frozenset({RelationKind.PARENT, RelationKind.KIN, RelationKind.GRANDPARENT})
_YOUNGER_KINDS = frozenset({RelationKind.CHILD, RelationKind.NIBLING, RelationKind.GRANDCHILD})


@dataclass(frozen=True)
class RelationClaim:
    """A proposed direct connection: ``source`` is ``relation`` of ``target``."""
    source: Person
    relation: Relation
    target: Person
    level: int

    @property
    def kind(self) -> RelationKind:
        return as_kind(self.relation)

    def __str__(self) -> str:
        return f"{self.source} -[{self.relation.value}:{self.level}]-> {self.target}"


class ConnectionLookup(Protocol):
    """The slice of the family graph validators may consult."""

    def get_connection(
        self,
        p1: Person,
        p2: Person,
        memoize: bool = False,
    ) -> ConnectionEdge | None:
        ...


Validator = Callable[[RelationClaim, ConnectionLookup], bool]


def validate_gender(claim: RelationClaim, family: ConnectionLookup) -> bool:
    """Spouses must differ in gender; a gendered label must fit the claimant.

    HUSBAND and WIFE fall under SPOUSE and so also need differing genders.
    The gender-neutral COUSIN label fits anyone.
    """
    if claim.kind is RelationKind.SPOUSE and claim.source.is_male == claim.target.is_male:
        return False

    relation = claim.relation
    if isinstance(relation, SpecificRelation) and relation.is_male is not None:
        return relation.is_male == claim.source.is_male
    return True


def validate_age(claim: RelationClaim, family: ConnectionLookup) -> bool:
    """Ancestor-class claims need an older source, descendant-class a younger one."""
    if claim.kind in _OLDER_KINDS:
        return claim.source.age > claim.target.age
    if claim.kind in _YOUNGER_KINDS:
        return claim.source.age < claim.target.age
    return True


def validate_relationship(claim: RelationClaim, family: ConnectionLookup) -> bool:
    """The claim must agree with the relationship already inferred, if any.

    GRANDPARENT and GRANDCHILD mean "at least N generations up/down", so
    their levels only need to be on the right side of the existing one.
    """
    existing = family.get_connection(claim.source, claim.target, memoize=False)
    if existing is None:
        # Not connected at all, directly or indirectly.
        return True

    kind = claim.kind
    if kind is RelationKind.GRANDPARENT:
        level_ok = claim.level >= existing.level
    elif kind is RelationKind.GRANDCHILD:
        level_ok = claim.level <= existing.level
    else:
        level_ok = claim.level == existing.level

    return level_ok and existing.kind in (kind, kind.alternate)


DEFAULT_VALIDATORS: tuple[Validator, ...] = (
    validate_gender,
    validate_age,
    validate_relationship,
)


def _name(validator: Validator) -> str:
    return getattr(validator, "__name__", repr(validator))


def all_of(validators: Iterable[Validator]) -> Validator:
    """Combine validators with a short-circuiting logical AND."""
    chain = tuple(validators)

    def combined(claim: RelationClaim, family: ConnectionLookup) -> bool:
        return all(validator(claim, family) for validator in chain)

    return combined


class ValidatorPipeline:
    """Ordered chain of validators evaluated left to right.

    Example:
        >>> pipeline = ValidatorPipeline()
        >>> pipeline.validate(claim, graph)
        True
    """

    def __init__(self, validators: Iterable[Validator] = DEFAULT_VALIDATORS) -> None:
        self.validators: tuple[Validator, ...] = tuple(validators)

    def first_failure(self, claim: RelationClaim, family: ConnectionLookup) -> str | None:
        """Name of the first validator rejecting ``claim``, ``None`` if all accept."""
        for validator in self.validators:
            if not validator(claim, family):
                name = _name(validator)
                logger.debug("validation.rejected", claim=str(claim), validator=name)
                return name
        return None

    def validate(self, claim: RelationClaim, family: ConnectionLookup) -> bool:
        return self.first_failure(claim, family) is None

    __call__ = validate
