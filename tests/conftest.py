"""Shared fixtures for family-connect tests."""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from family_connect.graph import FamilyGraph
from family_connect.models import Person
from family_connect.relations import RelationKind


FAMILY_DOCUMENT = {
    "persons": [
        {"id": "g", "name": "Grandpa", "age": 70, "is_male": True},
        {"id": "d", "name": "Dave", "age": 40, "is_male": True},
        {"id": "s", "name": "Sam", "age": 10, "is_male": True},
        {"id": "u", "name": "Uncle", "age": 38, "is_male": True},
        {"id": "x", "name": "Xena", "age": 30, "is_male": False},
    ],
    "relations": [
        {"from": "g", "relation": "PARENT", "to": "d"},
        {"from": "d", "relation": "father", "to": "s"},
        {"from": "d", "relation": "SIBLING", "to": "u"},
    ],
}


@pytest.fixture
def family_document() -> dict:
    return json.loads(json.dumps(FAMILY_DOCUMENT))


@pytest.fixture
def family_file(tmp_path: Path, family_document: dict) -> Path:
    """Family document written to disk."""
    path = tmp_path / "family.json"
    path.write_text(json.dumps(family_document))
    return path


@pytest.fixture
def family() -> FamilyGraph:
    """Grandpa -> Dave -> Sam, with Dave's brother and an unrelated Xena."""
    graph = FamilyGraph()
    for record in FAMILY_DOCUMENT["persons"]:
        graph.add_person(Person(**record))

    g, d, s, u = (graph.get_person_by_id(i) for i in "gdsu")
    graph.connect_persons(g, RelationKind.PARENT, d)
    graph.connect_persons(d, RelationKind.PARENT, s)
    graph.connect_persons(d, RelationKind.SIBLING, u)
    return graph
