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
"""Deduplication and ordering of type check errors.

The same collision (requirement, source, target) can be discovered more
than once when a requirement reaches the source along several paths. The
collector keeps one report per collision: the one with the shortest
provenance, or the earliest discovered among equally short ones. Reports
are listed in the order their collision was first discovered.
"""

from __future__ import annotations

from typing import Any, Dict, Hashable, Iterable, Iterator, List, Tuple

from requisite.core.errors import TypeCheckError


class ErrorCollector:
    """Append-only store of deduplicated TypeCheckErrors."""

    def __init__(self) -> None:
        self._errors: Dict[Tuple[Any, Hashable, Hashable], TypeCheckError] = {}
        self._discovered = 0

    def add(self, error: TypeCheckError) -> bool:
        """Record an error.

        Args:
            error: The error to record

        Returns:
            True if the error was new or replaced a longer report
        """
        self._discovered += 1
        identity = error.identity
        existing = self._errors.get(identity)
        if existing is None:
            self._errors[identity] = error
            return True
        if len(error.provenance) < len(existing.provenance):
            # Replacing keeps the original position. The propagator never gets
            # here: a node's chain is fixed at insertion, so its repeats match.
            self._errors[identity] = error
            return True
        return False

    def extend(self, errors: Iterable[TypeCheckError]) -> None:
        for error in errors:
            self.add(error)

    def merge(self, other: ErrorCollector) -> None:
        """Append another collector's errors after this one's."""
        self.extend(other)
        self._discovered += other.discovered - len(other)

    def errors(self) -> Tuple[TypeCheckError, ...]:
        return tuple(self._errors.values())

    def errors_for(self, key: Hashable) -> List[TypeCheckError]:
        """Errors whose source or target is ``key``."""
        return [
            e for e in self._errors.values()
            if e.source_key == key or e.target_key == key
        ]

    @property
    def discovered(self) -> int:
        """Total reports received, duplicates included."""
        return self._discovered

    def __iter__(self) -> Iterator[TypeCheckError]:
        return iter(list(self._errors.values()))

    def __len__(self) -> int:
        return len(self._errors)

    def __bool__(self) -> bool:
        return bool(self._errors)
