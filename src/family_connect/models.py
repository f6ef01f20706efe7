"""Value types for the family graph: people and the edges between them."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field

from .relations import RelationKind, SpecificRelation, describe


class Person(BaseModel):
    """A member of the family.

    Immutable. Two people are the same person when their ids match,
    ignoring case, whatever their other attributes say. Use
    :meth:`attributes_match` for the strict comparison.
    """
    model_config = ConfigDict(frozen=True)

    id: Annotated[str, Field(min_length=1)]
    name: str
    age: Annotated[int, Field(ge=0)]
    is_male: bool

    @property
    def key(self) -> str:
        """Case-insensitive identity key."""
        return self.id.casefold()

    def attributes_match(self, other: Person) -> bool:
        """Check that every attribute matches, not just the id."""
        return (
            self.key == other.key
            and self.name.casefold() == other.name.casefold()
            and self.age == other.age
            and self.is_male == other.is_male
        )

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Person):
            return self.key == other.key
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        return f"({self.id}){self.name}"


@dataclass(frozen=True)
class ConnectionEdge:
    """Directed, labeled edge between two people.

    ``ConnectionEdge(a, RelationKind.PARENT, b, 1)`` means "a is b's parent".
    ``level`` is the signed generation offset from ``source`` to ``target``.
    """
    source: Person
    kind: RelationKind
    target: Person
    level: int

    def reversed(self) -> ConnectionEdge:
        """The mirror edge, seen from ``target``."""
        return ConnectionEdge(self.target, self.kind.reverse, self.source, -self.level)

    @property
    def specific_relation(self) -> SpecificRelation:
        return self.kind.specific(self.source.is_male)

    @property
    def label(self) -> str:
        """Human-readable relation of ``source`` to ``target``."""
        return describe(self.kind, self.level, self.source.is_male)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "from": self.source.id,
            "relation": self.kind.value,
            "specific_relation": self.specific_relation.value,
            "to": self.target.id,
            "level": self.level,
            "label": self.label,
        }

    def __str__(self) -> str:
        return f"{self.source} -[{self.kind.value}:{self.level}]-> {self.target}"
