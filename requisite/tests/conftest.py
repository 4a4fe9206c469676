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
"""Shared fixtures for requisite tests."""

import pytest

from requisite.core.requirement import Capability, ExactType
from requisite.core.subject import Relation, Subject


INT = ExactType("Int")
STRING = ExactType("String")
BOOL = ExactType("Bool")
FLOAT = ExactType("Float")
ADD_INT = Capability("Add", ("Int",))


@pytest.fixture
def chain_input():
    """a (definite Int) ≤ b ≤ c ≤ d, all unbounded."""
    subjects = [
        Subject("a", [INT], definite=True),
        Subject("b"),
        Subject("c"),
        Subject("d"),
    ]
    relations = [
        Relation.subset("a", "b"),
        Relation.subset("b", "c"),
        Relation.subset("c", "d"),
    ]
    return subjects, relations


@pytest.fixture
def sketch_input():
    """``let a = 2; let b = 2.5; var c = a; c = b; c = "gammo"; return c``."""
    subjects = [
        Subject("a", ["num"], value=2),
        Subject("b", ["float"], value=2.5),
        Subject("gammo", ["String"], value="gammo"),
        Subject("c"),
        Subject("return"),
    ]
    relations = [
        Relation.subset("a", "c"),
        Relation.subset("b", "c"),
        Relation.subset("gammo", "c"),
        Relation.subset("c", "return"),
    ]
    return subjects, relations
