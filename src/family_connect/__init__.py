"""family-connect - relationship inference over a family graph.

Models a family as a directed, labeled graph of people and infers unknown
relationships ("second cousin", "grand-niece") by composing known ones along
graph paths. Proposed connections are checked against gender, age and the
relationships already established.
"""
from .errors import (
    FamilyConnectError,
    FamilyDocumentError,
    InvalidRelationError,
    NotConnectedError,
    UnknownPersonError,
    UnparseableRelationError,
)
from .graph import FamilyGraph
from .models import ConnectionEdge, Person
from .relations import (
    RelationKind,
    SpecificRelation,
    compose,
    describe,
    parse_kind,
    parse_relation,
)
from .validation import (
    DEFAULT_VALIDATORS,
    RelationClaim,
    ValidatorPipeline,
    all_of,
    validate_age,
    validate_gender,
    validate_relationship,
)

__version__ = "0.1.0"

__all__ = [
    # Graph
    "FamilyGraph",
    "Person",
    "ConnectionEdge",
    # Relations
    "RelationKind",
    "SpecificRelation",
    "compose",
    "describe",
    "parse_kind",
    "parse_relation",
    # Validation
    "RelationClaim",
    "ValidatorPipeline",
    "DEFAULT_VALIDATORS",
    "all_of",
    "validate_gender",
    "validate_age",
    "validate_relationship",
    # Errors
    "FamilyConnectError",
    "UnknownPersonError",
    "InvalidRelationError",
    "NotConnectedError",
    "UnparseableRelationError",
    "FamilyDocumentError",
]
