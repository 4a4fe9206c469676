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
"""Errors raised and reported by the solver.

Two families live here:

- Exceptions (``SolverError`` and subclasses) for malformed input. These are
  fatal and raised before any propagation runs.
- ``TypeCheckError`` reports for contradictions found during propagation.
  These are plain values collected on the result, never raised, so a single
  solve reports every inconsistency.

A report's provenance is the chain of entity keys along which the offending
requirement travelled, starting at the definite entity it came from and
ending at the entity on the near side of the colliding edge. Together with
``target_key`` it tells the presentation layer every place to point at.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Hashable, Optional, Tuple


class SolverError(Exception):
    """Base class for fatal solver errors."""


class GraphBuildError(SolverError):
    """The subjects and relations do not describe a valid graph.

    Attributes:
        key: The offending entity key
    """

    def __init__(self, key: Hashable, message: str):
        super().__init__(message)
        self.key = key


class DuplicateKeyError(GraphBuildError):
    """Two subjects share the same key."""

    def __init__(self, key: Hashable):
        super().__init__(key, f"Duplicate subject key: {key!r}")


class UnknownKeyError(GraphBuildError):
    """A relation references a key that no subject declares.

    Attributes:
        relation: The relation containing the unknown key
    """

    def __init__(self, key: Hashable, relation: Any = None):
        message = f"Relation references undeclared key: {key!r}"
        if relation is not None:
            message += f" (in {relation!r})"
        super().__init__(key, message)
        self.relation = relation


class FrozenNodeError(SolverError):
    """A solved node was mutated after ``solve()`` returned."""


class ErrorKind(Enum):
    """What kind of contradiction a report describes.

    EXCLUDED: requirement blocked by the target's superset bound
    CONFLICT: definite target does not have the requirement
    MISSING: requirement in the subset bound was never supplied
    UNPERMITTED: entity's own requirement is outside its superset bound
    """

    EXCLUDED = "excluded"
    CONFLICT = "conflict"
    MISSING = "missing"
    UNPERMITTED = "unpermitted"


@dataclass(frozen=True, slots=True)
class TypeCheckError:
    """A contradiction found during propagation.

    Attributes:
        requirement: The requirement the two entities disagree on
        source_key: Entity the requirement came from
        target_key: Entity that cannot accept it
        provenance: Keys from the nearest definite origin to ``source_key``
        kind: Classification of the contradiction
    """

    requirement: Any
    source_key: Hashable
    target_key: Hashable
    provenance: Tuple[Hashable, ...] = ()
    kind: ErrorKind = ErrorKind.EXCLUDED

    @property
    def identity(self) -> Tuple[Any, Hashable, Hashable]:
        """Errors with the same identity describe the same collision."""
        return (self.requirement, self.source_key, self.target_key)

    @property
    def origin(self) -> Optional[Hashable]:
        """Key of the definite entity the requirement started from."""
        return self.provenance[0] if self.provenance else None

    @property
    def path(self) -> Tuple[Hashable, ...]:
        """Full chain of keys, ending at the entity that rejected the requirement."""
        return self.provenance + (self.target_key,)

    def involves(self, key: Hashable) -> bool:
        """Check whether a key appears anywhere in this report."""
        return key == self.source_key or key == self.target_key or key in self.provenance

    def describe(self) -> str:
        """One-line human readable message."""
        requirement = str(self.requirement)
        if self.kind is ErrorKind.MISSING:
            message = f"{self.target_key!r} requires {requirement} but nothing supplies it"
        elif self.kind is ErrorKind.UNPERMITTED:
            message = f"{self.target_key!r} has {requirement}, which its own bound excludes"
        elif self.kind is ErrorKind.CONFLICT:
            message = (
                f"{requirement} flows from {self.source_key!r} into "
                f"{self.target_key!r}, which is definite and lacks it"
            )
        else:
            message = (
                f"{requirement} flows from {self.source_key!r} into "
                f"{self.target_key!r}, whose bound excludes it"
            )
        if len(self.path) > 2:
            message += f" (via {' > '.join(repr(k) for k in self.path)})"
        return message

    def __str__(self) -> str:
        return self.describe()
