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
"""Requirement domain interface.

A requirement is an opaque value describing one obligation or capability
an entity must satisfy ("implements Add<int>", "is exactly String", ...).
The solver never inspects requirements; it only needs two operations from
the domain that owns them:

- membership: is requirement r in a collection of requirements?
- difference: which members of one collection are absent from another?

Requirements must be hashable, since nodes index their known set by
requirement. Domains whose equality is coarser than ``==``/``hash`` should
canonicalize values before handing them to the solver.

Two small requirement types are provided for front-ends that do not bring
their own: ``ExactType`` (literal type identity) and ``Capability`` (trait
or interface membership).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Collection, Hashable, Iterable, List, Optional, Tuple

Requirement = Hashable


class RequirementDomain(ABC):
    """External contract for requirement comparison.

    Implementations must be pure: the solver may call them from several
    threads at once when components are solved in parallel.
    """

    @abstractmethod
    def contains(self, requirements: Collection[Any], requirement: Any) -> bool:
        """Check whether a requirement is a member of a collection.

        Args:
            requirements: Collection to search
            requirement: Requirement to look for

        Returns:
            True if an equal requirement is present
        """
        pass

    def difference(
        self,
        requirements: Iterable[Any],
        other: Collection[Any],
    ) -> List[Any]:
        """Members of ``requirements`` absent from ``other``.

        Order follows ``requirements``, so callers that pass ordered input
        get deterministic output.

        Args:
            requirements: Requirements to filter
            other: Requirements to subtract

        Returns:
            List of requirements not contained in ``other``
        """
        return [r for r in requirements if not self.contains(other, r)]

    def permits(self, bound: Optional[Collection[Any]], requirement: Any) -> bool:
        """Check a requirement against an upper bound.

        A bound of None is unbounded and permits everything.
        """
        if bound is None:
            return True
        return self.contains(bound, requirement)


class HashableDomain(RequirementDomain):
    """Default domain: requirements compare with ``==`` and ``hash``."""

    def contains(self, requirements: Collection[Any], requirement: Any) -> bool:
        return requirement in requirements

    def __repr__(self) -> str:
        return "HashableDomain()"


@dataclass(frozen=True, slots=True)
class ExactType:
    """Requirement that a value is exactly the named type.

    Attributes:
        name: Type name, e.g. "int" or "String"
    """

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class Capability:
    """Requirement that a type provides a capability (trait, interface, protocol).

    Attributes:
        name: Capability name, e.g. "Add"
        args: Type arguments of the capability, e.g. ("int",) for Add<int>
    """

    name: str
    args: Tuple[str, ...] = ()

    def __str__(self) -> str:
        if not self.args:
            return self.name
        return f"{self.name}<{', '.join(self.args)}>"


def ordered_unique(requirements: Optional[Iterable[Any]]) -> Optional[Tuple[Any, ...]]:
    """Deduplicate requirements while keeping first-seen order.

    None passes through unchanged so that "no bound" stays distinguishable
    from "empty bound".
    """
    if requirements is None:
        return None
    return tuple(dict.fromkeys(requirements))
