"""Relation algebra for the family graph.

Provides:
- The nine generic relation kinds and their generation offsets
- Gender-specific labels bound to each kind
- Reverse and alternate lookups
- The composition table used to fold a path of relations into one

The composition table is not derived from generation arithmetic. SPOUSE
followed by PARENT gives KIN, not PARENT, so every pair is spelled out.
"""
from __future__ import annotations

from enum import Enum

from .errors import UnparseableRelationError


class RelationKind(str, Enum):
    """Generic relation between two people.

    ``(A, PARENT, B)`` reads "A is B's parent".
    """
    PARENT = "PARENT"
    CHILD = "CHILD"
    SIBLING = "SIBLING"
    SPOUSE = "SPOUSE"
    KIN = "KIN"  # uncle / aunt
    NIBLING = "NIBLING"  # nephew / niece
    COUSIN = "COUSIN"
    GRANDPARENT = "GRANDPARENT"
    GRANDCHILD = "GRANDCHILD"

    @property
    def generation_level(self) -> int:
        return _GENERATION_LEVELS[self]

    @property
    def male_relation(self) -> SpecificRelation:
        return _GENDERED[self][0]

    @property
    def female_relation(self) -> SpecificRelation:
        return _GENDERED[self][1]

    @property
    def reverse(self) -> RelationKind:
        """Kind seen from the other end of the edge."""
        return _REVERSE[self]

    @property
    def alternate(self) -> RelationKind:
        """Coarser equivalence class, used only when validating claims."""
        return _ALTERNATE[self]

    def specific(self, is_male: bool) -> SpecificRelation:
        """Gender-specific label for this kind."""
        return self.male_relation if is_male else self.female_relation

    def next(self, prior: RelationKind) -> RelationKind | None:
        """Compose this edge kind onto an already composed ``prior`` kind."""
        return compose(self, prior)


class SpecificRelation(str, Enum):
    """Gender-bound label under a generic kind."""
    FATHER = "FATHER"
    MOTHER = "MOTHER"
    SON = "SON"
    DAUGHTER = "DAUGHTER"
    UNCLE = "UNCLE"
    AUNT = "AUNT"
    NEPHEW = "NEPHEW"
    NIECE = "NIECE"
    GRANDFATHER = "GRANDFATHER"
    GRANDMOTHER = "GRANDMOTHER"
    GRANDSON = "GRANDSON"
    GRANDDAUGHTER = "GRANDDAUGHTER"
    HUSBAND = "HUSBAND"
    WIFE = "WIFE"
    BROTHER = "BROTHER"
    SISTER = "SISTER"
    COUSIN = "COUSIN"

    @property
    def kind(self) -> RelationKind:
        return _SPECIFIC[self][0]

    @property
    def is_male(self) -> bool | None:
        """Gender of the label, ``None`` when gender-neutral."""
        return _SPECIFIC[self][1]

    @property
    def generation_level(self) -> int:
        return self.kind.generation_level


Relation = RelationKind | SpecificRelation

P = RelationKind.PARENT
C = RelationKind.CHILD
SIB = RelationKind.SIBLING
SP = RelationKind.SPOUSE
KIN = RelationKind.KIN
NIB = RelationKind.NIBLING
COU = RelationKind.COUSIN
GP = RelationKind.GRANDPARENT
GC = RelationKind.GRANDCHILD

_GENERATION_LEVELS: dict[RelationKind, int] = {
    P: 1,
    C: -1,
    SIB: 0,
    SP: 0,
    KIN: 1,
    NIB: -1,
    COU: 0,
    GP: 2,
    GC: -2,
}

_GENDERED: dict[RelationKind, tuple[SpecificRelation, SpecificRelation]] = {
    P: (SpecificRelation.FATHER, SpecificRelation.MOTHER),
    C: (SpecificRelation.SON, SpecificRelation.DAUGHTER),
    SIB: (SpecificRelation.BROTHER, SpecificRelation.SISTER),
    SP: (SpecificRelation.HUSBAND, SpecificRelation.WIFE),
    KIN: (SpecificRelation.UNCLE, SpecificRelation.AUNT),
    NIB: (SpecificRelation.NEPHEW, SpecificRelation.NIECE),
    COU: (SpecificRelation.COUSIN, SpecificRelation.COUSIN),
    GP: (SpecificRelation.GRANDFATHER, SpecificRelation.GRANDMOTHER),
    GC: (SpecificRelation.GRANDSON, SpecificRelation.GRANDDAUGHTER),
}

_SPECIFIC: dict[SpecificRelation, tuple[RelationKind, bool | None]] = {
    SpecificRelation.COUSIN: (COU, None),
}
for _kind, (_male, _female) in _GENDERED.items():
    if _male is not _female:
        _SPECIFIC[_male] = (_kind, True)
        _SPECIFIC[_female] = (_kind, False)
del _kind, _male, _female

_REVERSE: dict[RelationKind, RelationKind] = {
    P: C,
    C: P,
    KIN: NIB,
    NIB: KIN,
    GP: GC,
    GC: GP,
    SP: SP,
    SIB: SIB,
    COU: COU,
}

_ALTERNATE: dict[RelationKind, RelationKind] = {
    P: P,
    KIN: P,
    C: C,
    NIB: C,
    SIB: COU,
    COU: COU,
    GP: GP,
    GC: GC,
    SP: SP,
}

# _COMPOSITION[current][prior]: ``prior`` is the relation of the search root
# to X, ``current`` the edge kind X -> Y; the result is the root's relation
# to Y.
_COMPOSITION: dict[RelationKind, dict[RelationKind, RelationKind]] = {
    P: {
        P: GP, KIN: GP, C: SIB, NIB: COU, SP: P,
        SIB: KIN, COU: KIN, GP: GP, GC: NIB,
    },
    KIN: {
        P: GP, KIN: GP, C: COU, NIB: COU, SP: KIN,
        SIB: KIN, COU: KIN, GP: GP, GC: NIB,
    },
    C: {
        P: SP, C: GC, NIB: GC,
        # Without a direct connection this is either COUSIN or SIBLING.
        # COUSIN is an approximation, not a proven kinship rule.
        KIN: COU,
        SP: NIB, COU: NIB, SIB: C, GP: KIN, GC: GC,
    },
    NIB: {
        P: COU, KIN: COU, C: GC, NIB: GC, SP: NIB,
        SIB: NIB, COU: NIB, GP: KIN, GC: GC,
    },
    GP: {
        P: GP, KIN: GP, GP: GP, SIB: GP, SP: GP,
        COU: GP, C: KIN, NIB: KIN, GC: COU,
    },
    GC: {
        P: NIB, KIN: NIB, C: GC, NIB: GC, GC: GC,
        SP: GC, SIB: GC, COU: GC, GP: COU,
    },
    SP: {
        P: KIN, C: C, NIB: NIB, GP: GP, GC: GC,
        KIN: KIN, COU: COU, SP: COU, SIB: COU,
    },
    SIB: {
        P: P, NIB: NIB, KIN: KIN, GP: GP, GC: GC,
        COU: COU, SIB: SIB, C: NIB, SP: COU,
    },
    COU: {
        GP: GP, GC: GC, KIN: KIN, NIB: NIB, COU: COU,
        P: KIN, C: NIB, SP: COU, SIB: COU,
    },
}


def compose(current: RelationKind, prior: RelationKind) -> RelationKind | None:
    """Combine an edge kind with the relation composed so far.

    Returns ``None`` when the pair has no defined result.
    """
    return _COMPOSITION.get(current, {}).get(prior)


def as_kind(relation: Relation) -> RelationKind:
    """Collapse a specific relation to its generic kind."""
    if isinstance(relation, SpecificRelation):
        return relation.kind
    return relation


def parse_relation(text: str) -> Relation:
    """Parse a generic or gender-specific relation token.

    Matching ignores case and surrounding whitespace. A token naming both a
    generic and a specific relation (``cousin``) resolves to the generic one.

    Raises:
        UnparseableRelationError: If the token names no known relation
    """
    token = (text or "").strip().upper()
    if token in RelationKind.__members__:
        return RelationKind[token]
    if token in SpecificRelation.__members__:
        return SpecificRelation[token]
    raise UnparseableRelationError(text)


def parse_kind(text: str) -> RelationKind:
    """Parse a relation token straight to its generic kind."""
    return as_kind(parse_relation(text))


def _removal_label(removal: int) -> str:
    if removal == 1:
        return "once removed"
    elif removal == 2:
        return "twice removed"
    return f"{removal} times removed"


def describe(kind: RelationKind, level: int, is_male: bool) -> str:
    """Human-readable label for a composed relation.

    Uses standard genealogical terminology, e.g. ``great-grandfather``,
    ``grand-niece`` or ``cousin once removed``.
    """
    base = kind.specific(is_male).value.lower()
    distance = abs(level)

    if kind in (GP, GC):
        if distance > 2:
            return f"{'great-' * (distance - 2)}{base}"
        return base
    elif kind in (KIN, NIB):
        if distance == 2:
            return f"grand-{base}"
        elif distance > 2:
            return f"{'great-' * (distance - 2)}grand-{base}"
        return base
    elif kind is COU and distance:
        return f"{base} {_removal_label(distance)}"
    return base
