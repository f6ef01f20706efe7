"""Tests for the relation algebra."""
from __future__ import annotations

import pytest

from family_connect.errors import UnparseableRelationError
from family_connect.relations import (
    RelationKind,
    SpecificRelation,
    compose,
    describe,
    parse_kind,
    parse_relation,
)

ALL_KINDS = list(RelationKind)

P = RelationKind.PARENT
C = RelationKind.CHILD
SIB = RelationKind.SIBLING
SP = RelationKind.SPOUSE
KIN = RelationKind.KIN
NIB = RelationKind.NIBLING
COU = RelationKind.COUSIN
GP = RelationKind.GRANDPARENT
GC = RelationKind.GRANDCHILD

# (current edge kind, prior composed kind, result)
COMPOSITION_TABLE = [
    (P, P, GP), (P, KIN, GP), (P, C, SIB), (P, NIB, COU), (P, SP, P),
    (P, SIB, KIN), (P, COU, KIN), (P, GP, GP), (P, GC, NIB),

    (KIN, P, GP), (KIN, KIN, GP), (KIN, C, COU), (KIN, NIB, COU), (KIN, SP, KIN),
    (KIN, SIB, KIN), (KIN, COU, KIN), (KIN, GP, GP), (KIN, GC, NIB),

    (C, P, SP), (C, C, GC), (C, NIB, GC), (C, KIN, COU), (C, SP, NIB),
    (C, COU, NIB), (C, SIB, C), (C, GP, KIN), (C, GC, GC),

    (NIB, P, COU), (NIB, KIN, COU), (NIB, C, GC), (NIB, NIB, GC), (NIB, SP, NIB),
    (NIB, SIB, NIB), (NIB, COU, NIB), (NIB, GP, KIN), (NIB, GC, GC),

    (GP, P, GP), (GP, KIN, GP), (GP, GP, GP), (GP, SIB, GP), (GP, SP, GP),
    (GP, COU, GP), (GP, C, KIN), (GP, NIB, KIN), (GP, GC, COU),

    (GC, P, NIB), (GC, KIN, NIB), (GC, C, GC), (GC, NIB, GC), (GC, GC, GC),
    (GC, SP, GC), (GC, SIB, GC), (GC, COU, GC), (GC, GP, COU),

    (SP, P, KIN), (SP, C, C), (SP, NIB, NIB), (SP, GP, GP), (SP, GC, GC),
    (SP, KIN, KIN), (SP, COU, COU), (SP, SP, COU), (SP, SIB, COU),

    (SIB, P, P), (SIB, NIB, NIB), (SIB, KIN, KIN), (SIB, GP, GP), (SIB, GC, GC),
    (SIB, COU, COU), (SIB, SIB, SIB), (SIB, C, NIB), (SIB, SP, COU),

    (COU, GP, GP), (COU, GC, GC), (COU, KIN, KIN), (COU, NIB, NIB), (COU, COU, COU),
    (COU, P, KIN), (COU, C, NIB), (COU, SP, COU), (COU, SIB, COU),
]


class TestRelationKind:
    """Tests for RelationKind lookups."""

    @pytest.mark.parametrize("kind", ALL_KINDS)
    def test_reverse_is_involution(self, kind):
        """Reversing twice gives the original kind."""
        assert kind.reverse.reverse is kind

    @pytest.mark.parametrize("kind", ALL_KINDS)
    def test_alternate_is_idempotent(self, kind):
        """The alternate of an alternate is itself."""
        assert kind.alternate.alternate is kind.alternate

    def test_reverse_pairs(self):
        """Test the reverse table."""
        assert RelationKind.PARENT.reverse is RelationKind.CHILD
        assert RelationKind.KIN.reverse is RelationKind.NIBLING
        assert RelationKind.GRANDCHILD.reverse is RelationKind.GRANDPARENT
        assert RelationKind.SPOUSE.reverse is RelationKind.SPOUSE
        assert RelationKind.COUSIN.reverse is RelationKind.COUSIN

    def test_alternate_aliases(self):
        """Several kinds share one alternate class."""
        assert RelationKind.KIN.alternate is RelationKind.PARENT
        assert RelationKind.NIBLING.alternate is RelationKind.CHILD
        assert RelationKind.SIBLING.alternate is RelationKind.COUSIN
        assert RelationKind.SPOUSE.alternate is RelationKind.SPOUSE

    def test_generation_levels(self):
        """Test generation offsets."""
        levels = {kind: kind.generation_level for kind in RelationKind}
        assert levels == {
            RelationKind.PARENT: 1,
            RelationKind.CHILD: -1,
            RelationKind.SIBLING: 0,
            RelationKind.SPOUSE: 0,
            RelationKind.KIN: 1,
            RelationKind.NIBLING: -1,
            RelationKind.COUSIN: 0,
            RelationKind.GRANDPARENT: 2,
            RelationKind.GRANDCHILD: -2,
        }

    @pytest.mark.parametrize("kind", ALL_KINDS)
    def test_reverse_negates_level(self, kind):
        """Mirrored kinds sit at opposite generation offsets."""
        assert kind.reverse.generation_level == -kind.generation_level

    def test_specific_labels(self):
        """Test gender-specific labels."""
        assert RelationKind.PARENT.specific(True) is SpecificRelation.FATHER
        assert RelationKind.PARENT.specific(False) is SpecificRelation.MOTHER
        assert RelationKind.KIN.specific(False) is SpecificRelation.AUNT
        assert RelationKind.COUSIN.specific(True) is SpecificRelation.COUSIN
        assert RelationKind.COUSIN.specific(False) is SpecificRelation.COUSIN


class TestSpecificRelation:
    """Tests for SpecificRelation."""

    @pytest.mark.parametrize("specific", list(SpecificRelation))
    def test_bound_to_its_kind(self, specific):
        """Every label is one of its kind's two labels."""
        kind = specific.kind
        assert specific in (kind.male_relation, kind.female_relation)

    def test_gender(self):
        """Test label genders."""
        assert SpecificRelation.HUSBAND.is_male is True
        assert SpecificRelation.NIECE.is_male is False
        assert SpecificRelation.COUSIN.is_male is None

    def test_delegates_level(self):
        """Test level comes from the kind."""
        assert SpecificRelation.GRANDDAUGHTER.generation_level == -2
        assert SpecificRelation.UNCLE.kind is RelationKind.KIN


class TestCompose:
    """Tests for the composition table."""

    def test_parent_of_parent_is_grandparent(self):
        assert compose(RelationKind.PARENT, RelationKind.PARENT) is RelationKind.GRANDPARENT

    def test_spouse_after_parent_is_kin(self):
        """Not derivable from generation levels."""
        assert compose(RelationKind.SPOUSE, RelationKind.PARENT) is RelationKind.KIN

    def test_parent_after_spouse_is_parent(self):
        assert compose(RelationKind.PARENT, RelationKind.SPOUSE) is RelationKind.PARENT

    def test_child_after_kin_is_cousin(self):
        """The ambiguous case keeps the COUSIN resolution."""
        assert compose(RelationKind.CHILD, RelationKind.KIN) is RelationKind.COUSIN

    def test_not_commutative(self):
        """Order of traversal matters."""
        assert compose(RelationKind.PARENT, RelationKind.CHILD) is RelationKind.SIBLING
        assert compose(RelationKind.CHILD, RelationKind.PARENT) is RelationKind.SPOUSE

    def test_sibling_keeps_prior(self):
        assert compose(RelationKind.SIBLING, RelationKind.GRANDPARENT) is RelationKind.GRANDPARENT
        assert compose(RelationKind.SIBLING, RelationKind.CHILD) is RelationKind.NIBLING

    def test_table_covers_every_pair(self):
        """The expected table lists each of the 81 pairs once."""
        pairs = {(current, prior) for current, prior, _ in COMPOSITION_TABLE}
        assert len(COMPOSITION_TABLE) == 81
        assert pairs == {(current, prior) for current in RelationKind for prior in RelationKind}

    @pytest.mark.parametrize(("current", "prior", "expected"), COMPOSITION_TABLE)
    def test_table(self, current, prior, expected):
        assert compose(current, prior) is expected

    def test_next_delegates_to_compose(self):
        for current in RelationKind:
            for prior in RelationKind:
                assert current.next(prior) is compose(current, prior)


class TestParse:
    """Tests for relation parsing."""

    def test_generic(self):
        assert parse_relation("PARENT") is RelationKind.PARENT
        assert parse_relation(" parent ") is RelationKind.PARENT

    def test_specific(self):
        assert parse_relation("father") is SpecificRelation.FATHER
        assert parse_relation("GrandDaughter") is SpecificRelation.GRANDDAUGHTER

    def test_generic_wins(self):
        """COUSIN names both a kind and a label."""
        assert parse_relation("cousin") is RelationKind.COUSIN

    def test_parse_kind_collapses_specific(self):
        assert parse_kind("niece") is RelationKind.NIBLING
        assert parse_kind("Husband") is RelationKind.SPOUSE

    @pytest.mark.parametrize("token", ["FATHHER", "", "step-father"])
    def test_unknown_token(self, token):
        with pytest.raises(UnparseableRelationError):
            parse_relation(token)

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_kind("godfather")


class TestDescribe:
    """Tests for human-readable labels."""

    @pytest.mark.parametrize(
        ("kind", "level", "is_male", "expected"),
        [
            (RelationKind.PARENT, 1, True, "father"),
            (RelationKind.SPOUSE, 0, False, "wife"),
            (RelationKind.GRANDPARENT, 2, True, "grandfather"),
            (RelationKind.GRANDPARENT, 3, True, "great-grandfather"),
            (RelationKind.GRANDCHILD, -4, False, "great-great-granddaughter"),
            (RelationKind.KIN, 1, False, "aunt"),
            (RelationKind.NIBLING, -2, False, "grand-niece"),
            (RelationKind.KIN, 3, True, "great-grand-uncle"),
            (RelationKind.COUSIN, 0, True, "cousin"),
            (RelationKind.COUSIN, 1, False, "cousin once removed"),
            (RelationKind.COUSIN, -2, True, "cousin twice removed"),
            (RelationKind.COUSIN, 3, True, "cousin 3 times removed"),
        ],
    )
    def test_labels(self, kind, level, is_male, expected):
        assert describe(kind, level, is_male) == expected
