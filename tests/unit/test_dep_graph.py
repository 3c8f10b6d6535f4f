"""Unit tests for dep_graph module: cycle detection and validation.

Creates Task objects directly (pure functions, no mocks needed).
"""

from __future__ import annotations

from gantt_scheduler.dep_graph import (
    build_dependency_graph,
    find_cycle,
    get_available_predecessors,
    get_dependent_tasks,
    has_cyclic_dependency,
    known_predecessors,
    validate_dependencies,
)
from gantt_scheduler.models import DependencyEdge, Task


def _make_task(
    task_id: int,
    depends_on: list[int] | None = None,
    duration: int = 1,
) -> Task:
    """Create a minimal Task for testing."""
    return Task(
        id=task_id,
        name=f"Task {task_id}",
        start_date="2025-08-04",
        duration=duration,
        dependencies=depends_on or [],
    )


# ---------------------------------------------------------------------------
# build_dependency_graph
# ---------------------------------------------------------------------------


class TestBuildDependencyGraph:
    """Tests for build_dependency_graph()."""

    def test_maps_every_task_to_predecessors(self) -> None:
        tasks = [_make_task(1), _make_task(2, [1]), _make_task(3, [1, 2])]

        graph = build_dependency_graph(tasks)

        assert graph == {1: [], 2: [1], 3: [1, 2]}

    def test_duplicate_predecessors_collapse(self) -> None:
        graph = build_dependency_graph([_make_task(1), _make_task(2, [1, 1, 1])])
        assert graph[2] == [1]

    def test_hypothetical_edge_is_merged(self) -> None:
        tasks = [_make_task(1), _make_task(2, [1])]

        graph = build_dependency_graph(tasks, DependencyEdge(successor_id=1, predecessor_id=2))

        assert graph == {1: [2], 2: [1]}

    def test_hypothetical_edge_for_unknown_successor(self) -> None:
        graph = build_dependency_graph([_make_task(1)], DependencyEdge(9, 1))
        assert graph[9] == [1]

    def test_does_not_mutate_tasks(self) -> None:
        tasks = [_make_task(1), _make_task(2, [1])]
        build_dependency_graph(tasks, DependencyEdge(1, 2))
        assert tasks[0].dependencies == []


class TestKnownPredecessors:
    """Tests for known_predecessors()."""

    def test_skips_missing_and_repeated_ids(self) -> None:
        tasks = [_make_task(1), _make_task(2), _make_task(3, [2, 99, 1, 2])]
        by_id = {task.id: task for task in tasks}

        assert known_predecessors(tasks[2], by_id) == [2, 1]

    def test_root_task(self) -> None:
        task = _make_task(1)
        assert known_predecessors(task, {1: task}) == []


# ---------------------------------------------------------------------------
# has_cyclic_dependency / find_cycle
# ---------------------------------------------------------------------------


class TestHasCyclicDependency:
    """Tests for has_cyclic_dependency() and find_cycle()."""

    def test_linear_chain_has_no_cycle(self) -> None:
        tasks = [_make_task(1), _make_task(2, [1]), _make_task(3, [2])]
        assert has_cyclic_dependency(tasks) is False
        assert find_cycle(tasks) is None

    def test_empty_collection(self) -> None:
        assert has_cyclic_dependency([]) is False

    def test_self_dependency_is_cycle(self) -> None:
        tasks = [_make_task(1, [1])]
        assert has_cyclic_dependency(tasks) is True
        assert find_cycle(tasks) == [1, 1]

    def test_two_node_cycle(self) -> None:
        tasks = [_make_task(1, [2]), _make_task(2, [1])]
        assert find_cycle(tasks) == [1, 2, 1]

    def test_three_node_cycle_reported_closed(self) -> None:
        tasks = [_make_task(1, [3]), _make_task(2, [1]), _make_task(3, [2])]

        cycle = find_cycle(tasks)

        assert cycle is not None
        assert cycle[0] == cycle[-1]
        assert set(cycle) == {1, 2, 3}

    def test_diamond_is_not_a_cycle(self) -> None:
        """Two paths to the same node share it without looping."""
        tasks = [
            _make_task(1),
            _make_task(2, [1]),
            _make_task(3, [1]),
            _make_task(4, [2, 3]),
        ]
        assert has_cyclic_dependency(tasks) is False

    def test_hypothetical_edge_closing_loop(self) -> None:
        """1 <- 2 <- 3; proposing 1 depends on 3 closes the loop."""
        tasks = [_make_task(1), _make_task(2, [1]), _make_task(3, [2])]

        assert has_cyclic_dependency(tasks, DependencyEdge(successor_id=1, predecessor_id=3))
        assert not has_cyclic_dependency(tasks, DependencyEdge(successor_id=3, predecessor_id=1))

    def test_hypothetical_self_edge(self) -> None:
        tasks = [_make_task(1)]
        assert has_cyclic_dependency(tasks, DependencyEdge(1, 1)) is True

    def test_missing_predecessor_is_not_a_cycle(self) -> None:
        tasks = [_make_task(1, [99])]
        assert has_cyclic_dependency(tasks) is False

    def test_cycle_in_disconnected_component(self) -> None:
        tasks = [
            _make_task(1),
            _make_task(2, [1]),
            _make_task(3, [4]),
            _make_task(4, [3]),
        ]
        assert find_cycle(tasks) == [3, 4, 3]

    def test_long_chain_does_not_overflow(self) -> None:
        """Traversal is iterative, so depth is not bounded by recursion limits."""
        tasks = [_make_task(1)] + [_make_task(i, [i - 1]) for i in range(2, 5001)]
        assert has_cyclic_dependency(tasks) is False
        assert has_cyclic_dependency(tasks, DependencyEdge(1, 5000)) is True


# ---------------------------------------------------------------------------
# validate_dependencies
# ---------------------------------------------------------------------------


class TestValidateDependencies:
    """Tests for validate_dependencies()."""

    def test_valid_collection(self) -> None:
        tasks = [_make_task(1), _make_task(2, [1]), _make_task(3, [1, 2])]

        result = validate_dependencies(tasks)

        assert result.is_valid is True
        assert result.errors == []
        assert result.first_error is None

    def test_empty_collection_is_valid(self) -> None:
        assert validate_dependencies([]).is_valid is True

    def test_missing_reference_names_task_and_id(self) -> None:
        tasks = [_make_task(1), _make_task(2, [1, 42])]

        result = validate_dependencies(tasks)

        assert result.is_valid is False
        assert result.errors == ['Task "Task 2" depends on non-existent task with ID 42']

    def test_duplicate_missing_reference_reported_once(self) -> None:
        result = validate_dependencies([_make_task(1, [7, 7])])
        assert len(result.errors) == 1

    def test_self_dependency_rejected(self) -> None:
        result = validate_dependencies([_make_task(1, [1])])

        assert result.is_valid is False
        assert result.errors == ['Cyclic dependency detected involving task "Task 1": 1 -> 1']

    def test_cycle_reported_once(self) -> None:
        tasks = [_make_task(1, [3]), _make_task(2, [1]), _make_task(3, [2])]

        result = validate_dependencies(tasks)

        assert result.is_valid is False
        assert len(result.errors) == 1
        assert result.errors[0].startswith("Cyclic dependency detected")

    def test_cycle_error_names_a_task_on_the_cycle(self) -> None:
        """Task 1 has dependencies but is not part of the 2 <-> 3 loop."""
        tasks = [
            _make_task(5),
            _make_task(1, [5]),
            _make_task(2, [3]),
            _make_task(3, [2]),
        ]

        result = validate_dependencies(tasks)

        assert 'task "Task 2"' in result.errors[0]

    def test_missing_and_cycle_both_reported(self) -> None:
        tasks = [_make_task(1, [2, 99]), _make_task(2, [1])]

        result = validate_dependencies(tasks)

        assert len(result.errors) == 2
        assert "non-existent task with ID 99" in result.errors[0]
        assert "Cyclic dependency" in result.errors[1]

    def test_removed_task_leaves_dangling_reference(self) -> None:
        tasks = [_make_task(1), _make_task(2, [1]), _make_task(3, [2])]
        remaining = [task for task in tasks if task.id != 2]

        result = validate_dependencies(remaining)

        assert result.first_error == 'Task "Task 3" depends on non-existent task with ID 2'

    def test_duplicate_task_ids_rejected(self) -> None:
        result = validate_dependencies([_make_task(1), _make_task(1)])
        assert result.is_valid is False
        assert "Duplicate task ID 1" in result.errors[0]

    def test_valid_collection_has_no_cyclic_existing_edge(self) -> None:
        """Every edge of an accepted collection passes the hypothetical check."""
        tasks = [
            _make_task(1),
            _make_task(2, [1]),
            _make_task(3, [1]),
            _make_task(4, [2, 3]),
            _make_task(5, [4, 1]),
        ]
        assert validate_dependencies(tasks).is_valid

        for task in tasks:
            for dep_id in task.dependencies:
                assert not has_cyclic_dependency(tasks, DependencyEdge(task.id, dep_id))


# ---------------------------------------------------------------------------
# get_available_predecessors / get_dependent_tasks
# ---------------------------------------------------------------------------


class TestAvailablePredecessors:
    """Tests for get_available_predecessors()."""

    def test_excludes_self(self) -> None:
        tasks = [_make_task(1), _make_task(2)]
        assert [t.id for t in get_available_predecessors(tasks, 1)] == [2]

    def test_excludes_direct_dependent(self) -> None:
        """A depends on B, so A cannot become B's predecessor."""
        tasks = [_make_task(1, [2]), _make_task(2), _make_task(3)]

        available = get_available_predecessors(tasks, 2)

        assert [t.id for t in available] == [3]

    def test_excludes_transitive_dependents(self) -> None:
        tasks = [
            _make_task(1),
            _make_task(2, [1]),
            _make_task(3, [2]),
            _make_task(4),
        ]

        available = get_available_predecessors(tasks, 1)

        assert [t.id for t in available] == [4]

    def test_includes_upstream_and_unrelated_tasks(self) -> None:
        tasks = [_make_task(1), _make_task(2, [1]), _make_task(3, [2]), _make_task(4)]

        available = get_available_predecessors(tasks, 3)

        assert [t.id for t in available] == [1, 2, 4]

    def test_every_candidate_is_safe(self) -> None:
        tasks = [
            _make_task(1),
            _make_task(2, [1]),
            _make_task(3, [1]),
            _make_task(4, [2, 3]),
            _make_task(5),
        ]
        for task in tasks:
            for candidate in get_available_predecessors(tasks, task.id):
                edge = DependencyEdge(task.id, candidate.id)
                assert not has_cyclic_dependency(tasks, edge)

    def test_unknown_task_id_returns_everything(self) -> None:
        tasks = [_make_task(1), _make_task(2)]
        assert get_available_predecessors(tasks, 99) == tasks


class TestDependentTasks:
    """Tests for get_dependent_tasks()."""

    def test_direct_dependents_only(self) -> None:
        tasks = [_make_task(1), _make_task(2, [1]), _make_task(3, [2]), _make_task(4, [1])]

        dependents = get_dependent_tasks(tasks, 1)

        assert [t.id for t in dependents] == [2, 4]

    def test_no_dependents(self) -> None:
        assert get_dependent_tasks([_make_task(1)], 1) == []
