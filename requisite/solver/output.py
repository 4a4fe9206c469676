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
"""Result of a solve.

The output is immutable: solutions are held in a persistent
``immutables.Map`` and every node is frozen, so the result can be read from
any number of threads without synchronization.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, FrozenSet, Hashable, Iterator, List, Tuple

from immutables import Map as ImmutableMap

from requisite.core.errors import ErrorKind, TypeCheckError
from requisite.core.node import Node
from requisite.propagation.worklist import FixpointResult


@dataclass(frozen=True)
class SolverOutput:
    """Solutions and errors of one solve.

    Attributes:
        solutions: Solved node per entity key, in subject order
        errors: Deduplicated errors in discovery order
        components: Per-component fixpoint results
    """

    solutions: ImmutableMap
    errors: Tuple[TypeCheckError, ...] = ()
    components: Tuple[FixpointResult, ...] = ()

    @property
    def is_consistent(self) -> bool:
        """True if no contradiction was found."""
        return len(self.errors) == 0

    @property
    def converged(self) -> bool:
        """True if every component reached its fixpoint."""
        return all(c.converged for c in self.components)

    def has(self, key: Hashable) -> FrozenSet[Any]:
        """Final requirement set of an entity.

        Raises:
            KeyError: Unknown key
        """
        return self.solutions[key].has

    def errors_for(self, key: Hashable) -> List[TypeCheckError]:
        """Errors in which ``key`` is the source, target or on the provenance path."""
        return [e for e in self.errors if e.involves(key)]

    def errors_of_kind(self, kind: ErrorKind) -> List[TypeCheckError]:
        return [e for e in self.errors if e.kind is kind]

    def keys(self) -> List[Hashable]:
        """Entity keys in subject order."""
        return [node.key for node in sorted(self.solutions.values(), key=lambda n: n.order)]

    def summary(self) -> str:
        """Short multi-line description, one line per error."""
        status = "consistent" if self.is_consistent else f"{len(self.errors)} error(s)"
        lines = [f"{len(self.solutions)} entities, {len(self.components)} components: {status}"]
        lines.extend(f"  {error.describe()}" for error in self.errors)
        return "\n".join(lines)

    def __getitem__(self, key: Hashable) -> Node:
        return self.solutions[key]

    def __contains__(self, key: Hashable) -> bool:
        return key in self.solutions

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self.solutions)
