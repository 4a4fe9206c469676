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
"""Worklist scheduling for fixpoint propagation.

The worklist manages the order in which nodes are processed:
- First-in-first-out, so processing follows discovery order
- Deduplication (each node appears at most once)
- Fixpoint detection (empty worklist = fixed point)
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Hashable, Optional, Set, Tuple

from requisite.core.node import Node


class FIFOWorklist:
    """First-in-first-out worklist of nodes.

    A node already waiting is not queued twice; once popped it may be
    queued again.

    Example:
        >>> worklist = FIFOWorklist()
        >>> worklist.add(a)
        True
        >>> worklist.add(a)
        False
        >>> worklist.pop() is a
        True
    """

    def __init__(self) -> None:
        self._queue: Deque[Node] = deque()
        self._in_worklist: Set[int] = set()

    def add(self, node: Node) -> bool:
        """Queue a node.

        Args:
            node: Node to process

        Returns:
            True if added, False if already queued
        """
        if id(node) in self._in_worklist:
            return False
        self._queue.append(node)
        self._in_worklist.add(id(node))
        return True

    def pop(self) -> Optional[Node]:
        """Remove and return the oldest queued node, or None if empty."""
        if not self._queue:
            return None
        node = self._queue.popleft()
        self._in_worklist.discard(id(node))
        return node

    def contains(self, node: Node) -> bool:
        return id(node) in self._in_worklist

    def is_empty(self) -> bool:
        return not self._queue

    def __len__(self) -> int:
        return len(self._queue)

    def __bool__(self) -> bool:
        return not self.is_empty()

    def clear(self) -> None:
        self._queue.clear()
        self._in_worklist.clear()


class IterationLimiter:
    """Caps the number of worklist pops.

    A limit of None never exhausts.

    Example:
        >>> limiter = IterationLimiter(max_iterations=100)
        >>> while not limiter.is_exhausted():
        ...     limiter.increment()
        ...     # do work
    """

    def __init__(self, max_iterations: Optional[int] = None):
        self._max = max_iterations
        self._count = 0

    @property
    def count(self) -> int:
        return self._count

    @property
    def max_iterations(self) -> Optional[int]:
        return self._max

    @property
    def remaining(self) -> Optional[int]:
        """Iterations left, or None when unlimited."""
        if self._max is None:
            return None
        return max(0, self._max - self._count)

    def increment(self) -> bool:
        """Count one iteration.

        Returns:
            True if still within the limit
        """
        self._count += 1
        return self._max is None or self._count <= self._max

    def is_exhausted(self) -> bool:
        return self._max is not None and self._count >= self._max

    def reset(self) -> None:
        self._count = 0


@dataclass(frozen=True)
class FixpointResult:
    """Outcome of propagating one component.

    Attributes:
        keys: Keys of the component's nodes, in subject order
        converged: True if the worklist emptied before the iteration limit
        iterations: Number of nodes popped
        insertions: Number of requirements added to ``has`` sets
        error_count: Number of distinct errors found in the component
    """

    keys: Tuple[Hashable, ...]
    converged: bool
    iterations: int
    insertions: int = 0
    error_count: int = 0

    @property
    def is_success(self) -> bool:
        """True if converged without errors."""
        return self.converged and self.error_count == 0
