"""Tests for the Hungarian assignment solver."""

import numpy as np
import pytest
from scipy import optimize
from scipy.sparse import coo_matrix

from algorithms_core.assignment import (
    UNASSIGNED,
    AssignmentSolver,
    assignment_cost,
    linear_sum_assignment,
)
from algorithms_core.multiarray import MultiArray


def compute_cost(matrix, match):
    """Sum the matched costs, asserting no job is used twice."""
    visited = set()
    total = 0.0
    for worker, job in enumerate(match):
        if job == UNASSIGNED:
            continue
        assert job not in visited
        visited.add(job)
        total += matrix[worker][job]
    return total


def test_three_by_three():
    """Fractional costs on a square matrix."""
    matrix = [[4.0, 1.5, 4.0], [4.0, 4.5, 6.0], [3.0, 2.25, 3.0]]
    match = AssignmentSolver(matrix).solve()

    assert match == [1, 0, 2]
    assert compute_cost(matrix, match) == pytest.approx(8.5)


def test_three_by_three_fractional():
    """Small fractional costs still resolve to the unique optimum."""
    matrix = [[1.0, 1.0, 0.8], [0.9, 0.8, 0.1], [0.9, 0.7, 0.4]]
    match = AssignmentSolver(matrix).solve()

    assert match == [0, 2, 1]
    assert compute_cost(matrix, match) == pytest.approx(1.8)


def test_four_by_four():
    """Square matrix needing augmentation beyond the greedy seed."""
    matrix = [
        [6.0, 0.0, 7.0, 5.0],
        [2.0, 6.0, 2.0, 6.0],
        [2.0, 7.0, 2.0, 1.0],
        [9.0, 4.0, 7.0, 1.0],
    ]
    match = AssignmentSolver(matrix).solve()

    assert match == [1, 0, 2, 3]
    assert compute_cost(matrix, match) == pytest.approx(5.0)


def test_unassigned_job():
    """More jobs than workers leaves a job free but every worker assigned."""
    matrix = [
        [6.0, 0.0, 7.0, 5.0, 2.0],
        [2.0, 6.0, 2.0, 6.0, 7.0],
        [2.0, 7.0, 2.0, 1.0, 1.0],
        [9.0, 4.0, 7.0, 1.0, 0.0],
    ]
    match = AssignmentSolver(matrix).solve()

    assert match == [1, 0, 3, 4]
    assert compute_cost(matrix, match) == pytest.approx(3.0)


def test_unassigned_worker():
    """More workers than jobs marks the surplus worker as unassigned."""
    matrix = [
        [6.0, 0.0, 7.0, 5.0],
        [2.0, 6.0, 2.0, 6.0],
        [2.0, 7.0, 2.0, 1.0],
        [9.0, 4.0, 7.0, 1.0],
        [0.0, 0.0, 0.0, 0.0],
    ]
    match = AssignmentSolver(matrix).solve()

    assert match == [1, UNASSIGNED, 2, 3, 0]
    assert compute_cost(matrix, match) == pytest.approx(3.0)


def test_single_row_and_column():
    """Degenerate one-dimensional problems."""
    assert AssignmentSolver([[5.0]]).solve() == [0]
    assert AssignmentSolver([[3.0, 1.0, 2.0]]).solve() == [1]
    assert AssignmentSolver([[3.0], [1.0], [2.0]]).solve() == [UNASSIGNED, 0, UNASSIGNED]


def test_accepts_multiarray_numpy_and_sparse_inputs():
    """Every supported container yields the same assignment."""
    nested = [[4.0, 1.5, 4.0], [4.0, 4.5, 6.0], [3.0, 2.25, 3.0]]
    sparse = coo_matrix(np.array([[0.0, 3.0], [2.0, 0.0], [5.0, 5.0]]))

    assert AssignmentSolver(MultiArray.from_nested(nested)).solve() == [1, 0, 2]
    assert AssignmentSolver(np.array(nested)).solve() == [1, 0, 2]
    assert AssignmentSolver(sparse).solve() == [0, 1, UNASSIGNED]


def test_invalid_matrices_rejected():
    """Empty, ragged, non-2-D and non-finite inputs are refused."""
    with pytest.raises(ValueError):
        AssignmentSolver([])
    with pytest.raises(ValueError):
        AssignmentSolver([[]])
    with pytest.raises(ValueError):
        AssignmentSolver([1.0, 2.0])
    with pytest.raises(ValueError):
        AssignmentSolver([[1.0, 2.0], [3.0]])
    with pytest.raises(ValueError):
        AssignmentSolver([[1.0, np.inf], [0.0, 1.0]])


def test_solver_is_single_use():
    """A second solve warns and returns the first result unchanged."""
    solver = AssignmentSolver([[1.0, 2.0], [2.0, 1.0]])
    first = solver.solve()

    with pytest.warns(RuntimeWarning):
        second = solver.solve()
    assert first == second == [0, 1]
    assert (solver.rows, solver.cols, solver.dim) == (2, 2, 2)


def test_does_not_mutate_input():
    """The caller's matrix is copied into the padded working matrix."""
    matrix = np.array([[4.0, 1.5], [4.0, 4.5]])
    AssignmentSolver(matrix).solve()

    assert matrix.tolist() == [[4.0, 1.5], [4.0, 4.5]]


@pytest.mark.parametrize("rows, cols", [(1, 1), (3, 3), (4, 7), (7, 4), (6, 6), (2, 9), (9, 2)])
def test_matches_scipy_optimum(rows, cols):
    """Random rectangular problems reach scipy's optimal total cost."""
    rng = np.random.default_rng(rows * 31 + cols)
    for _ in range(25):
        matrix = rng.integers(-20, 50, size=(rows, cols)).astype(float)
        match = AssignmentSolver(matrix).solve()

        assert len(match) == rows
        assigned = [job for job in match if job != UNASSIGNED]
        assert len(assigned) == min(rows, cols)
        assert len(set(assigned)) == len(assigned)
        assert all(0 <= job < cols for job in assigned)

        row_ind, col_ind = optimize.linear_sum_assignment(matrix)
        assert compute_cost(matrix, match) == pytest.approx(matrix[row_ind, col_ind].sum())


def test_assignment_cost_helper():
    """Totals skip unassigned workers and reject duplicate jobs."""
    matrix = [[6.0, 0.0], [2.0, 6.0], [0.0, 0.0]]

    assert assignment_cost(matrix, [1, 0, UNASSIGNED]) == 2.0
    with pytest.raises(ValueError):
        assignment_cost(matrix, [0, 0, UNASSIGNED])
    with pytest.raises(ValueError):
        assignment_cost(matrix, [0, 1])


def test_scipy_style_wrapper():
    """Row and column indices cover only assigned workers."""
    matrix = [
        [6.0, 0.0, 7.0, 5.0],
        [2.0, 6.0, 2.0, 6.0],
        [2.0, 7.0, 2.0, 1.0],
        [9.0, 4.0, 7.0, 1.0],
        [0.0, 0.0, 0.0, 0.0],
    ]
    row_ind, col_ind = linear_sum_assignment(matrix)

    assert row_ind.tolist() == [0, 2, 3, 4]
    assert col_ind.tolist() == [1, 2, 3, 0]
