# Copyright Rand Arete @ Ananke 2025
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================
"""Per-entity solver state.

A Node holds what the solver currently knows about one entity:

- ``has``: requirements the entity is known to have (grows monotonically)
- ``subset_bound``: requirements it must end up having
- ``superset_bound``: requirements it is allowed to have (None = unbounded)
- the edges connecting it to related entities

Each requirement in ``has`` remembers the chain of keys it travelled along,
which becomes the provenance of any error it later causes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Hashable, Iterator, List, Optional, Sequence, Tuple

from .errors import FrozenNodeError
from .subject import RelationKind, Subject


@dataclass(eq=False)
class Edge:
    """A compiled relation, recorded on both of its endpoints.

    Attributes:
        source: Node named first in the relation
        target: Node named second in the relation
        kind: Relation kind, kept as metadata
        index: Position of the relation in the caller's input
    """

    source: Node
    target: Node
    kind: RelationKind
    index: int = 0

    def flows(self) -> Tuple[Tuple[Node, Node], ...]:
        """Ordered ``(lower, upper)`` pairs along which requirements travel."""
        if self.kind is RelationKind.SUBSET:
            return ((self.source, self.target),)
        if self.kind is RelationKind.SUPERSET:
            return ((self.target, self.source),)
        return ((self.source, self.target), (self.target, self.source))

    def other(self, node: Node) -> Node:
        """The endpoint opposite ``node``."""
        return self.target if node is self.source else self.source

    @property
    def is_loop(self) -> bool:
        return self.source is self.target

    def __repr__(self) -> str:
        return f"Edge({self.source.key!r} {self.kind.value} {self.target.key!r})"


class Node:
    """Solver state for a single entity.

    Nodes are created by the relation graph and mutated only by the
    propagator. Identity fields (key, definite, value, order) are read-only.
    After solving the node is frozen: edges become a tuple and adding a
    requirement or edge raises FrozenNodeError.
    """

    def __init__(
        self,
        key: Hashable,
        requirements: Tuple[Any, ...] = (),
        definite: bool = False,
        subset_bound: Optional[Tuple[Any, ...]] = None,
        superset_bound: Optional[Tuple[Any, ...]] = None,
        value: Any = None,
        order: int = 0,
    ):
        """Initialize a node.

        Args:
            key: Entity key
            requirements: Initial requirements, in caller order
            definite: Whether the requirement set is fixed
            subset_bound: Ordered lower bound, or None
            superset_bound: Ordered upper bound, or None for unbounded
            value: Concrete literal, if any
            order: Position of the subject in the caller's input
        """
        self._key = key
        self._definite = definite
        self._value = value
        self._order = order
        self._edges: Sequence[Edge] = []
        self._required = subset_bound
        self._allowed = superset_bound
        self._allowed_set = frozenset(superset_bound) if superset_bound is not None else None
        # requirement -> keys it travelled through; insertion ordered
        self._has: Dict[Any, Tuple[Hashable, ...]] = {r: () for r in requirements}
        self._frozen = False

    @classmethod
    def from_subject(cls, subject: Subject, order: int = 0) -> Node:
        return cls(
            key=subject.key,
            requirements=subject.requirements,
            definite=subject.is_definite,
            subset_bound=subject.subset_bound,
            superset_bound=subject.superset_bound,
            value=subject.value,
            order=order,
        )

    @property
    def key(self) -> Hashable:
        return self._key

    @property
    def definite(self) -> bool:
        """Whether the requirement set is fixed."""
        return self._definite

    @property
    def value(self) -> Any:
        return self._value

    @property
    def order(self) -> int:
        """Position of the subject in the caller's input."""
        return self._order

    @property
    def edges(self) -> Sequence[Edge]:
        """Incident edges in relation order; a tuple once frozen."""
        return self._edges

    @property
    def has(self) -> FrozenSet[Any]:
        """Requirements currently known to hold."""
        return frozenset(self._has)

    @property
    def subset_bound(self) -> Optional[FrozenSet[Any]]:
        return frozenset(self._required) if self._required is not None else None

    @property
    def superset_bound(self) -> Optional[FrozenSet[Any]]:
        return self._allowed_set

    @property
    def required(self) -> Tuple[Any, ...]:
        """Subset bound in declaration order (empty when unbounded)."""
        return self._required or ()

    @property
    def allowed(self) -> Optional[Tuple[Any, ...]]:
        """Superset bound in declaration order."""
        return self._allowed

    @property
    def frozen(self) -> bool:
        return self._frozen

    def requirements(self) -> Iterator[Any]:
        """Iterate ``has`` in insertion order."""
        return iter(list(self._has))

    def provenance(self, requirement: Any) -> Tuple[Hashable, ...]:
        """Keys a requirement travelled through before reaching this node.

        Empty for requirements the node started with.
        """
        return self._has[requirement]

    def chain(self, requirement: Any) -> Tuple[Hashable, ...]:
        """Provenance of a requirement as seen by this node's neighbors."""
        return self._has[requirement] + (self.key,)

    def add_requirement(self, requirement: Any, provenance: Tuple[Hashable, ...] = ()) -> bool:
        """Record a newly learned requirement.

        Args:
            requirement: The requirement to add
            provenance: Keys it travelled through to get here

        Returns:
            True if ``has`` changed
        """
        if self._frozen:
            raise FrozenNodeError(f"Node {self.key!r} is frozen")
        if requirement in self._has:
            return False
        self._has[requirement] = tuple(provenance)
        return True

    def attach(self, edge: Edge) -> None:
        """Record an incident edge.

        Raises:
            FrozenNodeError: The node has been solved
        """
        if self._frozen:
            raise FrozenNodeError(f"Node {self.key!r} is frozen")
        self._edges.append(edge)

    def freeze(self) -> None:
        """Make the node read-only: no new requirements, no new edges."""
        self._edges = tuple(self._edges)
        self._frozen = True

    @property
    def upper_neighbors(self) -> List[Node]:
        """Nodes this one is related to as ``self ≤ neighbor``."""
        return self._neighbors(lower=True)

    @property
    def lower_neighbors(self) -> List[Node]:
        """Nodes related to this one as ``neighbor ≤ self``."""
        return self._neighbors(lower=False)

    def neighbors(self) -> List[Node]:
        """Every adjacent node regardless of direction."""
        seen: Dict[int, Node] = {}
        for edge in self.edges:
            other = edge.other(self)
            if other is not self:
                seen.setdefault(id(other), other)
        return list(seen.values())

    def _neighbors(self, lower: bool) -> List[Node]:
        seen: Dict[int, Node] = {}
        for edge in self.edges:
            for low, high in edge.flows():
                mine, theirs = (low, high) if lower else (high, low)
                if mine is self and theirs is not self:
                    seen.setdefault(id(theirs), theirs)
        return list(seen.values())

    def __contains__(self, requirement: Any) -> bool:
        return requirement in self._has

    def __repr__(self) -> str:
        flag = ", definite" if self.definite else ""
        return f"Node({self.key!r}, has={set(self._has)!r}{flag})"
