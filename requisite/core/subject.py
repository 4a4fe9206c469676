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
"""Caller-facing input types: subjects to solve and the relations between them.

Example (``let a = 2; var c = a; return c``):

    >>> subjects = [
    ...     Subject("a", [ExactType("int")], value=2),
    ...     Subject("c"),
    ...     Subject("return"),
    ... ]
    >>> relations = [Relation.subset("a", "c"), Relation.subset("c", "return")]
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Hashable, Iterable, Optional, Tuple, Union

from .requirement import ordered_unique


class RelationKind(Enum):
    """Direction of a relation between two entities.

    SUBSET: source ≤ target, requirements flow source → target
    SUPERSET: source ≥ target, requirements flow target → source
    EQUAL: both directions
    """

    SUBSET = "subset"
    SUPERSET = "superset"
    EQUAL = "equal"

    @property
    def inverse(self) -> RelationKind:
        if self is RelationKind.SUBSET:
            return RelationKind.SUPERSET
        if self is RelationKind.SUPERSET:
            return RelationKind.SUBSET
        return RelationKind.EQUAL


@dataclass(frozen=True, slots=True)
class Subject:
    """An entity to solve: a variable, expression or return slot.

    Attributes:
        key: Unique, hashable identifier
        requirements: Requirements the entity is known to have
        definite: If True, ``requirements`` is the complete, fixed set
        subset_bound: Requirements the entity must end up having (None = none)
        superset_bound: Requirements the entity may have (None = unbounded)
        value: Concrete literal, if the entity is a value rather than a type
    """

    key: Hashable
    requirements: Tuple[Any, ...] = ()
    definite: bool = False
    subset_bound: Optional[Tuple[Any, ...]] = None
    superset_bound: Optional[Tuple[Any, ...]] = None
    value: Any = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "requirements", ordered_unique(self.requirements))
        object.__setattr__(self, "subset_bound", ordered_unique(self.subset_bound))
        object.__setattr__(self, "superset_bound", ordered_unique(self.superset_bound))

    @property
    def is_definite(self) -> bool:
        """A subject with a concrete value has a fixed requirement set."""
        return self.definite or self.value is not None


@dataclass(frozen=True, slots=True)
class Relation:
    """A declared relation between two subjects.

    Attributes:
        source: Key of the first subject
        target: Key of the second subject
        kind: How the two requirement sets relate
    """

    source: Hashable
    target: Hashable
    kind: RelationKind = RelationKind.SUBSET

    def __post_init__(self) -> None:
        if not isinstance(self.kind, RelationKind):
            object.__setattr__(self, "kind", RelationKind(self.kind))

    @classmethod
    def subset(cls, source: Hashable, target: Hashable) -> Relation:
        """``source ≤ target``."""
        return cls(source, target, RelationKind.SUBSET)

    @classmethod
    def superset(cls, source: Hashable, target: Hashable) -> Relation:
        """``source ≥ target``."""
        return cls(source, target, RelationKind.SUPERSET)

    @classmethod
    def equal(cls, source: Hashable, target: Hashable) -> Relation:
        return cls(source, target, RelationKind.EQUAL)

    def reversed(self) -> Relation:
        """The same relation stated from the other endpoint."""
        return Relation(self.target, self.source, self.kind.inverse)


RelationLike = Union[Relation, Tuple[Hashable, Hashable, Union[RelationKind, str]]]


def as_relations(relations: Iterable[RelationLike]) -> Tuple[Relation, ...]:
    """Accept ``Relation`` objects or ``(source, target, kind)`` triples."""
    result = []
    for relation in relations:
        if isinstance(relation, Relation):
            result.append(relation)
        else:
            source, target, kind = relation
            result.append(Relation(source, target, kind))
    return tuple(result)
