"""JSON family documents.

Reads a family from a JSON document and writes one back out:

    {
        "persons": [{"id": "a", "name": "Arthur", "age": 40, "is_male": true}],
        "relations": [{"from": "a", "relation": "father", "to": "b"}]
    }

``relation`` accepts generic or specific spellings. ``level`` is optional
and defaults to the relation's own generation level.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .config import load_settings
from .errors import FamilyDocumentError
from .graph import FamilyGraph
from .models import Person
from .relations import parse_relation

logger = structlog.get_logger(__name__)


class PersonRecord(BaseModel):
    """A person entry in a family document."""
    id: Annotated[str, Field(min_length=1)]
    name: str
    age: Annotated[int, Field(ge=0)]
    is_male: bool

    def to_person(self) -> Person:
        return Person(id=self.id, name=self.name, age=self.age, is_male=self.is_male)


class RelationRecord(BaseModel):
    """A relation entry: ``source`` is ``relation`` of ``target``."""
    model_config = ConfigDict(populate_by_name=True)

    source: str = Field(alias="from")
    relation: str
    target: str = Field(alias="to")
    level: int | None = None


class FamilyDocument(BaseModel):
    """Complete family document."""
    persons: list[PersonRecord] = Field(default_factory=list)
    relations: list[RelationRecord] = Field(default_factory=list)


def read_document(path: str | Path) -> FamilyDocument:
    """Read and validate a family document.

    Raises:
        FamilyDocumentError: If the file is missing, not JSON, or malformed
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise FamilyDocumentError(f"Cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise FamilyDocumentError(f"{path} is not valid JSON: {e}") from e

    try:
        return FamilyDocument.model_validate(data)
    except ValidationError as e:
        raise FamilyDocumentError(f"{path} is not a valid family document: {e}") from e


def build_family(
    document: FamilyDocument,
    strict: bool = True,
    graph: FamilyGraph | None = None,
) -> FamilyGraph:
    """Populate a graph from a document.

    Args:
        document: Parsed family document
        strict: Validate every relation, gender-specific labels against
            the source's gender included; otherwise relations are trusted
        graph: Graph to populate, a new one by default

    Returns:
        The populated graph
    """
    graph = graph if graph is not None else FamilyGraph()

    for record in document.persons:
        graph.add_person(record.to_person())

    for record in document.relations:
        graph.connect_persons(
            graph.get_person_by_id(record.source),
            parse_relation(record.relation),
            graph.get_person_by_id(record.target),
            record.level,
            validate=strict,
        )

    logger.info(
        "family.loaded",
        persons=len(document.persons),
        relations=len(document.relations),
        strict=strict,
    )
    return graph


def load_family(path: str | Path, strict: bool | None = None) -> FamilyGraph:
    """Read a family document and build its graph."""
    if strict is None:
        strict = load_settings().strict_load
    return build_family(read_document(path), strict=strict)


def dump_family(graph: FamilyGraph) -> dict[str, Any]:
    """Serialize a graph to a family document dict.

    Each mirrored edge pair is written once, from the side stored first.
    """
    persons = [
        {"id": p.id, "name": p.name, "age": p.age, "is_male": p.is_male}
        for p in graph.get_all_persons()
    ]

    relations: list[dict[str, Any]] = []
    mirrors = set()
    for person in graph.get_all_persons():
        for edge in graph.neighbour_connections(person):
            if edge in mirrors:
                continue
            mirrors.add(edge.reversed())
            relations.append({
                "from": edge.source.id,
                "relation": edge.kind.value,
                "to": edge.target.id,
                "level": edge.level,
            })

    return {"persons": persons, "relations": relations}
