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
"""Property-based tests for requirement propagation using Hypothesis.

The solver computes a least fixpoint: each entity ends with its own
requirements plus everything that can reach it through the relation graph
without crossing a bound or a definite entity that lacks it. These tests
check the consequences of that characterization:

1. Monotonicity: ``has`` only grows, definite entities never change, and
   adding relations never removes requirements.

2. Order independence: the final sets and the set of reported collisions
   do not depend on the order of subjects or relations.

3. Soundness and completeness: the result is consistent exactly when the
   unrestricted reachability closure satisfies every bound and leaves every
   definite entity unchanged.

4. Termination: every solve converges, popping each node at most once per
   insertion plus once when seeded.
"""

from typing import Dict, FrozenSet, List, Tuple

from hypothesis import given, settings, strategies as st

from requisite import Relation, RelationKind, SolverConfig, Subject, solve


# ============================================================================
# Hypothesis Strategies
# ============================================================================


REQUIREMENTS = ["Int", "String", "Eq", "Add"]
KINDS = [RelationKind.SUBSET, RelationKind.SUPERSET, RelationKind.EQUAL]


requirement_sets = st.lists(st.sampled_from(REQUIREMENTS), max_size=3, unique=True)


@st.composite
def bound_strategy(draw):
    """Generate an optional bound; None means unbounded."""
    if draw(st.booleans()):
        return None
    return draw(requirement_sets)


@st.composite
def subjects_strategy(draw, bounded: bool = True, definites: bool = True):
    """Generate between 1 and 6 subjects with distinct keys."""
    count = draw(st.integers(min_value=1, max_value=6))
    subjects = []
    for i in range(count):
        subjects.append(
            Subject(
                key=f"n{i}",
                requirements=draw(requirement_sets),
                definite=draw(st.booleans()) if definites else False,
                subset_bound=draw(bound_strategy()) if bounded else None,
                superset_bound=draw(bound_strategy()) if bounded else None,
            )
        )
    return subjects


@st.composite
def relations_strategy(draw, subjects: List[Subject]):
    """Generate relations between the given subjects, self-loops included."""
    keys = [s.key for s in subjects]
    count = draw(st.integers(min_value=0, max_value=len(keys) * 2))
    return [
        Relation(draw(st.sampled_from(keys)), draw(st.sampled_from(keys)), draw(st.sampled_from(KINDS)))
        for _ in range(count)
    ]


@st.composite
def problem_strategy(draw, bounded: bool = True, definites: bool = True):
    """Generate a (subjects, relations) pair."""
    subjects = draw(subjects_strategy(bounded=bounded, definites=definites))
    relations = draw(relations_strategy(subjects))
    return subjects, relations


# ============================================================================
# Reference model
# ============================================================================


def _flows(relations: List[Relation]) -> List[Tuple[str, str]]:
    """Expand relations into (lower, upper) pairs."""
    flows = []
    for relation in relations:
        if relation.kind in (RelationKind.SUBSET, RelationKind.EQUAL):
            flows.append((relation.source, relation.target))
        if relation.kind in (RelationKind.SUPERSET, RelationKind.EQUAL):
            flows.append((relation.target, relation.source))
    return flows


def reachability_closure(
    subjects: List[Subject], relations: List[Relation]
) -> Dict[str, FrozenSet[str]]:
    """Own requirements plus everything reachable, ignoring bounds and definiteness."""
    closure = {s.key: set(s.requirements) for s in subjects}
    flows = _flows(relations)
    changed = True
    while changed:
        changed = False
        for lower, upper in flows:
            missing = closure[lower] - closure[upper]
            if missing:
                closure[upper] |= missing
                changed = True
    return {key: frozenset(reqs) for key, reqs in closure.items()}


def closure_is_consistent(subjects: List[Subject], relations: List[Relation]) -> bool:
    closure = reachability_closure(subjects, relations)
    for subject in subjects:
        reqs = closure[subject.key]
        if subject.superset_bound is not None and not reqs <= set(subject.superset_bound):
            return False
        if subject.subset_bound is not None and not set(subject.subset_bound) <= reqs:
            return False
        if subject.is_definite and reqs != set(subject.requirements):
            return False
    return True


def _final_sets(output) -> Dict[str, FrozenSet[str]]:
    return {key: output.has(key) for key in output}


def _collisions(output) -> FrozenSet[Tuple[object, ...]]:
    return frozenset((e.identity, e.kind) for e in output.errors)


# ============================================================================
# Property Tests: Monotonicity
# ============================================================================


class TestMonotonicity:
    """``has`` only grows and definite entities stay fixed."""

    @given(problem=problem_strategy())
    @settings(max_examples=200)
    def test_has_contains_own_requirements(self, problem):
        subjects, relations = problem
        output = solve(subjects, relations)
        for subject in subjects:
            assert set(subject.requirements) <= output.has(subject.key)

    @given(problem=problem_strategy())
    @settings(max_examples=200)
    def test_definite_entities_unchanged(self, problem):
        subjects, relations = problem
        output = solve(subjects, relations)
        for subject in subjects:
            if subject.is_definite:
                assert output.has(subject.key) == frozenset(subject.requirements)

    @given(problem=problem_strategy(), data=st.data())
    @settings(max_examples=100)
    def test_more_relations_never_remove_requirements(self, problem, data):
        subjects, relations = problem
        extra = data.draw(relations_strategy(subjects))
        before = _final_sets(solve(subjects, relations))
        after = _final_sets(solve(subjects, relations + extra))
        for key, reqs in before.items():
            assert reqs <= after[key]

    @given(problem=problem_strategy())
    @settings(max_examples=100)
    def test_has_within_closure(self, problem):
        subjects, relations = problem
        closure = reachability_closure(subjects, relations)
        output = solve(subjects, relations)
        for key, reqs in _final_sets(output).items():
            assert reqs <= closure[key]


# ============================================================================
# Property Tests: Unrestricted graphs
# ============================================================================


class TestUnrestrictedPropagation:
    """Without bounds or definite entities, propagation is plain reachability."""

    @given(problem=problem_strategy(bounded=False, definites=False))
    @settings(max_examples=200)
    def test_has_equals_closure(self, problem):
        subjects, relations = problem
        output = solve(subjects, relations)
        assert output.is_consistent
        assert _final_sets(output) == reachability_closure(subjects, relations)

    @given(problem=problem_strategy(bounded=False, definites=False))
    @settings(max_examples=100)
    def test_equal_entities_end_equal(self, problem):
        subjects, relations = problem
        output = solve(subjects, relations)
        for relation in relations:
            if relation.kind is RelationKind.EQUAL:
                assert output.has(relation.source) == output.has(relation.target)


# ============================================================================
# Property Tests: Consistency
# ============================================================================


class TestConsistency:
    """Errors are reported exactly when the closure violates a constraint."""

    @given(problem=problem_strategy())
    @settings(max_examples=300)
    def test_consistent_iff_closure_satisfies_bounds(self, problem):
        subjects, relations = problem
        output = solve(subjects, relations)
        assert output.is_consistent == closure_is_consistent(subjects, relations)

    @given(problem=problem_strategy())
    @settings(max_examples=100)
    def test_errors_unique(self, problem):
        output = solve(*problem)
        identities = [e.identity for e in output.errors]
        assert len(identities) == len(set(identities))

    @given(problem=problem_strategy())
    @settings(max_examples=100)
    def test_provenance_ends_at_source(self, problem):
        output = solve(*problem)
        for error in output.errors:
            if error.provenance:
                assert error.provenance[-1] == error.source_key


# ============================================================================
# Property Tests: Order independence
# ============================================================================


class TestOrderIndependence:
    """Input order does not change what is solved."""

    @given(problem=problem_strategy(), data=st.data())
    @settings(max_examples=100)
    def test_permuted_input_same_result(self, problem, data):
        subjects, relations = problem
        shuffled_subjects = data.draw(st.permutations(subjects))
        shuffled_relations = data.draw(st.permutations(relations))

        original = solve(subjects, relations)
        shuffled = solve(shuffled_subjects, shuffled_relations)

        assert _final_sets(original) == _final_sets(shuffled)
        assert original.is_consistent == shuffled.is_consistent
        assert _collisions(original) == _collisions(shuffled)

    @given(left=problem_strategy(), right=problem_strategy())
    @settings(max_examples=100)
    def test_disjoint_problems_are_independent(self, left, right):
        right_subjects = [_renamed(s, "m") for s in right[0]]
        right_relations = [Relation(f"m{r.source}", f"m{r.target}", r.kind) for r in right[1]]

        combined = solve(left[0] + right_subjects, left[1] + right_relations)
        alone = solve(*left)

        for key in alone:
            assert combined.has(key) == alone.has(key)
        assert _collisions(alone) <= _collisions(combined)

    @given(problem=problem_strategy())
    @settings(max_examples=50)
    def test_parallel_matches_sequential(self, problem):
        subjects, relations = problem
        sequential = solve(subjects, relations)
        parallel = solve(subjects, relations, SolverConfig(max_workers=3))
        assert parallel.errors == sequential.errors
        assert _final_sets(parallel) == _final_sets(sequential)


def _renamed(subject: Subject, prefix: str) -> Subject:
    return Subject(
        key=f"{prefix}{subject.key}",
        requirements=subject.requirements,
        definite=subject.definite,
        subset_bound=subject.subset_bound,
        superset_bound=subject.superset_bound,
    )


# ============================================================================
# Property Tests: Termination
# ============================================================================


class TestTermination:
    """Every solve converges within a bounded number of iterations."""

    @given(problem=problem_strategy())
    @settings(max_examples=200)
    def test_always_converges(self, problem):
        output = solve(*problem)
        assert output.converged

    @given(problem=problem_strategy())
    @settings(max_examples=100)
    def test_iterations_bounded_by_insertions(self, problem):
        output = solve(*problem)
        for component in output.components:
            assert component.iterations <= len(component.keys) + component.insertions

    @given(problem=problem_strategy(), limit=st.integers(min_value=1, max_value=3))
    @settings(max_examples=100)
    def test_limit_respected(self, problem, limit: int):
        output = solve(*problem, config=SolverConfig(max_iterations=limit))
        for component in output.components:
            assert component.iterations <= limit
