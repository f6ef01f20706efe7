"""Family graph: people, direct connections and relationship inference.

Provides:
- Validated connection of two people (stored as a mirrored edge pair)
- Breadth-first inference of indirect relationships
- Shortest relation chains and their aggregate relation
- Query helpers layered on the full relationship closure

The graph is single-owner and synchronous. Concurrent callers must guard the
whole graph, reads included, with one external lock: connecting writes the
edge sets of two people, and a traversal must never observe half of a
mirrored pair.
"""
from __future__ import annotations

from collections import deque
from collections.abc import Iterable

import structlog

from .errors import InvalidRelationError, NotConnectedError, UnknownPersonError
from .models import ConnectionEdge, Person
from .relations import Relation, SpecificRelation, as_kind, compose, parse_kind
from .validation import ConnectionLookup, RelationClaim, Validator, ValidatorPipeline

logger = structlog.get_logger(__name__)


class _KnownPersonsLookup:
    """Connection lookup that treats people not yet in the graph as unrelated.

    Lets a claim about a new person be validated before anything is stored.
    """

    def __init__(self, graph: FamilyGraph) -> None:
        self._graph = graph

    def get_connection(
        self,
        p1: Person,
        p2: Person,
        memoize: bool = False,
    ) -> ConnectionEdge | None:
        if p1 not in self._graph or p2 not in self._graph:
            return None
        return self._graph.get_connection(p1, p2, memoize=memoize)


class FamilyGraph:
    """Directed, labeled graph of the people in a family.

    Every connection is stored twice: the forward edge on the source and its
    mirror on the target, so the graph is never asymmetric.

    Usage:
        graph = FamilyGraph()
        graph.connect_persons(dad, RelationKind.PARENT, son)
        graph.connect_persons(son, RelationKind.PARENT, grandson)
        graph.get_connection(dad, grandson)  # GRANDPARENT, level 2
    """

    def __init__(self, validator: ValidatorPipeline | Validator | None = None) -> None:
        self.validator = validator if validator is not None else ValidatorPipeline()
        self._persons: dict[str, Person] = {}
        # Person -> outgoing edges. Dicts keep insertion order, which makes
        # "first discovered" deterministic.
        self._relations: dict[Person, dict[ConnectionEdge, None]] = {}

    def __contains__(self, person: object) -> bool:
        return isinstance(person, Person) and person.key in self._persons

    def __len__(self) -> int:
        return len(self._persons)

    # ─────────────────────────────────────────
    # People
    # ─────────────────────────────────────────

    def add_person(self, person: Person) -> None:
        """Add a person, ignoring people already in the family."""
        if person not in self._relations:
            self._persons[person.key] = person
            self._relations[person] = {}

    def add_person_from_attributes(
        self,
        person_id: str,
        name: str,
        age: int | str,
        is_male: bool | str,
    ) -> Person:
        """Build a person from raw attributes and add them.

        String ages and genders (``"40"``, ``"true"``) are accepted.
        """
        person = Person(id=person_id, name=name, age=age, is_male=is_male)
        self.add_person(person)
        return self._persons[person.key]

    def get_person_by_id(self, person_id: str) -> Person:
        """Get a person by id, ignoring case.

        Raises:
            UnknownPersonError: If no person has that id
        """
        person = self._persons.get(person_id.casefold())
        if person is None:
            raise UnknownPersonError(person_id)
        return person

    def get_all_persons(self) -> list[Person]:
        return list(self._persons.values())

    @property
    def persons(self) -> list[Person]:
        return self.get_all_persons()

    def _require(self, person: Person) -> Person:
        stored = self._persons.get(person.key)
        if stored is None:
            raise UnknownPersonError(person)
        return stored

    # ─────────────────────────────────────────
    # Direct connections
    # ─────────────────────────────────────────

    def neighbour_connections(self, person: Person) -> list[ConnectionEdge]:
        """Direct outgoing connections of a person."""
        return list(self._relations[self._require(person)])

    def are_directly_connected(self, p1: Person, p2: Person) -> bool:
        return any(edge.target == p2 for edge in self._relations.get(p1, ()))

    def connect_persons_by_id(self, p1_id: str, relation: str, p2_id: str) -> ConnectionEdge:
        """Connect two people already in the family, by id.

        ``relation`` may be generic (``"PARENT"``) or specific (``"father"``);
        either way it is reduced to its generic kind. Never creates people.

        Raises:
            UnknownPersonError: If either id is not in the family
            UnparseableRelationError: If the relation token is unknown
            InvalidRelationError: If validation rejects the connection
        """
        p1 = self.get_person_by_id(p1_id)
        p2 = self.get_person_by_id(p2_id)
        kind = parse_kind(relation)
        return self.connect_persons(p1, kind, p2, kind.generation_level, validate=True)

    def connect_persons(
        self,
        p1: Person,
        relation: Relation,
        p2: Person,
        level: int | None = None,
        validate: bool = True,
    ) -> ConnectionEdge:
        """Connect ``p1`` as ``relation`` of ``p2``.

        New people are added. A person already in the family is validated
        and stored with the attributes it was first added with, whatever the
        argument carries. When ``validate`` is set the validator pipeline
        runs first and a rejection leaves the graph untouched. Pass
        ``validate=False`` only for relations already proven consistent.

        Args:
            p1: From person
            relation: Generic kind or gender-specific label
            p2: To person
            level: Generation offset, defaults to the kind's own level
            validate: Run the validator pipeline first

        Returns:
            The forward edge stored on ``p1``

        Raises:
            InvalidRelationError: If validation rejects the connection, or
                ``p1`` and ``p2`` are the same person
        """
        kind = as_kind(relation)
        if level is None:
            level = kind.generation_level

        # Validate the people that will actually be stored.
        source = self._persons.get(p1.key, p1)
        target = self._persons.get(p2.key, p2)
        claim = RelationClaim(source, relation, target, level)

        if source == target:
            logger.info("connect.rejected", claim=str(claim), validator="distinct_persons")
            raise InvalidRelationError(claim, "distinct_persons")

        if validate:
            failure = self._first_failure(claim)
            if failure is not None:
                logger.info("connect.rejected", claim=str(claim), validator=failure)
                raise InvalidRelationError(claim, failure)

        self.add_person(source)
        self.add_person(target)

        forward = ConnectionEdge(source, kind, target, level)
        self._relations[source][forward] = None
        self._relations[target][forward.reversed()] = None
        logger.debug("connect.stored", edge=str(forward), validated=validate)
        return forward

    def _first_failure(self, claim: RelationClaim) -> str | None:
        lookup: ConnectionLookup = _KnownPersonsLookup(self)
        if isinstance(self.validator, ValidatorPipeline):
            return self.validator.first_failure(claim, lookup)
        if self.validator(claim, lookup):
            return None
        return getattr(self.validator, "__name__", "validator")

    def batch_connect_persons(self, connections: Iterable[ConnectionEdge]) -> int:
        """Connect every pair not already directly connected, without validation.

        Used to store relations found by a traversal. Calling it twice with
        the same edges changes nothing the second time.

        Returns:
            Number of new connections made
        """
        made = 0
        for connection in connections:
            if not self.are_directly_connected(connection.source, connection.target):
                # Already validated when the underlying connections were made.
                self.connect_persons(
                    connection.source,
                    connection.kind,
                    connection.target,
                    connection.level,
                    validate=False,
                )
                made += 1
        if made:
            logger.debug("batch_connect.stored", count=made)
        return made

    def remove_direct_connection(self, p1: Person, p2: Person) -> None:
        """Remove the direct connection between two people.

        Both the forward edges from ``p1`` to ``p2`` and their mirrors are
        removed, so the graph stays symmetric.

        Raises:
            UnknownPersonError: If either person is not in the family
            NotConnectedError: If the two are not directly connected
        """
        p1 = self._require(p1)
        p2 = self._require(p2)
        forward = [edge for edge in self._relations[p1] if edge.target == p2]
        if not forward:
            raise NotConnectedError(p1, p2)

        source_edges = self._relations[p1]
        target_edges = self._relations[p2]
        for edge in forward:
            del source_edges[edge]
            target_edges.pop(edge.reversed(), None)
        logger.info("connect.removed", source=str(p1), target=str(p2), edges=len(forward))

    # ─────────────────────────────────────────
    # Inference
    # ─────────────────────────────────────────

    @staticmethod
    def _extend(prior: ConnectionEdge | None, root: Person, edge: ConnectionEdge) -> ConnectionEdge | None:
        """Fold ``edge`` onto the relation composed so far from ``root``."""
        if prior is None:
            return ConnectionEdge(root, edge.kind, edge.target, edge.level)
        kind = compose(edge.kind, prior.kind)
        if kind is None:
            return None
        return ConnectionEdge(root, kind, edge.target, prior.level + edge.level)

    def _traverse(
        self,
        source: Person,
        target: Person | None = None,
    ) -> tuple[ConnectionEdge | None, list[ConnectionEdge]]:
        """Breadth-first search from ``source``.

        Each person is visited once, so the first discovery wins and paths
        are shortest by hop count. With a ``target`` the search stops when it
        is reached; otherwise the whole reachable family is explored.

        Returns:
            Tuple of (connection to target or None, every composed
            connection discovered in order)
        """
        source = self._require(source)
        if target is not None:
            target = self._require(target)

        composed: dict[Person, ConnectionEdge] = {}
        discovered: list[ConnectionEdge] = []
        visited: set[Person] = {source}
        queue: deque[Person] = deque([source])

        while queue:
            person = queue.popleft()
            prior = composed.get(person)

            for edge in self._relations[person]:
                neighbour = edge.target
                if neighbour in visited:
                    continue

                connection = self._extend(prior, source, edge)
                if connection is None:
                    logger.debug(
                        "traverse.undefined_composition",
                        edge=edge.kind.value,
                        prior=prior.kind.value if prior else None,
                    )
                    continue

                discovered.append(connection)
                if neighbour == target:
                    return connection, discovered

                composed[neighbour] = connection
                visited.add(neighbour)
                queue.append(neighbour)

        return None, discovered

    def _memoize(self, connections: list[ConnectionEdge]) -> None:
        made = self.batch_connect_persons(connections)
        logger.debug("traverse.memoized", discovered=len(connections), stored=made)

    def get_connection(self, p1: Person, p2: Person, memoize: bool = False) -> ConnectionEdge | None:
        """Direct or inferred connection from ``p1`` to ``p2``.

        Args:
            p1: From person
            p2: To person
            memoize: Store every relation found on the way as a direct
                connection, to speed up later searches

        Returns:
            Composed edge, or None if the two are not related

        Raises:
            UnknownPersonError: If either person is not in the family
        """
        connection, discovered = self._traverse(p1, p2)
        if memoize:
            self._memoize(discovered)
        return connection

    def get_all_connections_for_person(
        self,
        person: Person,
        memoize: bool = False,
    ) -> list[ConnectionEdge]:
        """Composed connections from ``person`` to everyone reachable."""
        _, discovered = self._traverse(person)
        if memoize:
            self._memoize(discovered)
        return discovered

    def _connection_path(self, p1: Person, p2: Person) -> list[ConnectionEdge]:
        p1 = self._require(p1)
        p2 = self._require(p2)

        reached_by: dict[Person, ConnectionEdge] = {}
        visited: set[Person] = {p1}
        queue: deque[Person] = deque([p1])

        while queue and p2 not in reached_by:
            person = queue.popleft()
            for edge in self._relations[person]:
                if edge.target in visited:
                    continue
                reached_by[edge.target] = edge
                if edge.target == p2:
                    break
                visited.add(edge.target)
                queue.append(edge.target)

        if p2 not in reached_by:
            return []

        chain: list[ConnectionEdge] = []
        person = p2
        while person != p1:
            edge = reached_by[person]
            chain.append(edge)
            person = edge.source
        chain.reverse()
        return chain

    def get_shortest_relation_chain(self, p1: Person, p2: Person) -> list[ConnectionEdge]:
        """Direct connections on the first shortest path, in path order.

        Empty when the two are not related.
        """
        return self._connection_path(p1, p2)

    def get_aggregate_connection(self, p1: Person, p2: Person) -> ConnectionEdge | None:
        """Single relation for the shortest chain, folded left to right."""
        aggregate: ConnectionEdge | None = None
        for edge in self._connection_path(p1, p2):
            aggregate = self._extend(aggregate, p1, edge)
            if aggregate is None:
                return None
        return aggregate

    # ─────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────

    def get_members_at_generation(self, person: Person, generation_level: int) -> list[ConnectionEdge]:
        """Connections to everyone ``generation_level`` generations above ``person``.

        Use negative levels for descendants' generations and 0 for the
        person's own generation.
        """
        # Edges read from ``person``, so the level is inverted.
        return [
            connection
            for connection in self.get_all_connections_for_person(person)
            if connection.level == -generation_level
        ]

    def get_family_in_order_of_age(self, ascending: bool = True) -> list[Person]:
        return sorted(self._persons.values(), key=lambda p: p.age, reverse=not ascending)

    def get_members_of_gender(self, is_male: bool) -> list[Person]:
        return [p for p in self._persons.values() if p.is_male == is_male]

    def get_persons_by_relation(
        self,
        person: Person,
        relation: Relation,
        level: int | None = None,
    ) -> list[Person]:
        """Everyone who is ``relation`` of ``person``.

        ``get_persons_by_relation(son, SpecificRelation.FATHER)`` returns the
        son's fathers. Specific relations also filter on gender.
        """
        kind = as_kind(relation)
        if level is None:
            level = kind.generation_level
        is_male = relation.is_male if isinstance(relation, SpecificRelation) else None
        reverse = kind.reverse

        return [
            connection.target
            for connection in self.get_all_connections_for_person(person)
            if connection.kind is reverse
            and connection.level == -level
            and (is_male is None or connection.target.is_male == is_male)
        ]

    def is_person_related_with_relation(
        self,
        person: Person,
        relation: Relation,
        level: int | None = None,
    ) -> bool:
        """Check whether ``person`` is ``relation`` of anyone at ``level``.

        Direct connections are checked before running a full traversal.
        """
        kind = as_kind(relation)
        if level is None:
            level = kind.generation_level
        if isinstance(relation, SpecificRelation) and relation.is_male is not None:
            if self._require(person).is_male != relation.is_male:
                return False

        def matches(connections: Iterable[ConnectionEdge]) -> bool:
            return any(c.kind is kind and c.level == level for c in connections)

        return matches(self.neighbour_connections(person)) or matches(
            self.get_all_connections_for_person(person)
        )
