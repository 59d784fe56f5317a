"""Hungarian (Kuhn–Munkres) solver for the rectangular assignment problem.

An instance of the assignment problem consists of a number of workers, a
number of jobs and a cost matrix giving the cost of assigning worker ``i`` to
job ``j`` at position ``(i, j)``. The goal is to assign workers to jobs so that
no job gets more than one worker and no worker more than one job, minimising
the total cost.

A cost matrix with more workers than jobs necessarily leaves workers
unassigned, reported as ``UNASSIGNED``; in no other case is a worker left
unassigned. With more jobs than workers some jobs stay unassigned, and a square
matrix gives every job exactly one worker.

The solver pads the matrix to N x N with zero-cost fictitious workers/jobs,
where N is the larger dimension, and runs in O(N^3).
"""

from __future__ import annotations

import logging
import warnings
from typing import Any, List, Sequence, Tuple, Union

import numpy as np
from scipy import sparse

from .multiarray import MultiArray

logger = logging.getLogger(__name__)

UNASSIGNED = -1

CostMatrix = Union[MultiArray, np.ndarray, sparse.spmatrix, Sequence[Sequence[float]]]


def _to_matrix(cost_matrix: Any) -> np.ndarray:
    """Convert supported cost matrix inputs into a dense float array."""

    if isinstance(cost_matrix, MultiArray):
        matrix = np.asarray(cost_matrix.array, dtype=float)
    elif sparse.issparse(cost_matrix):
        matrix = cost_matrix.toarray().astype(float)
    else:
        matrix = np.asarray(cost_matrix, dtype=float)
    if matrix.ndim != 2:
        raise ValueError(f"cost matrix must be two dimensional, got {matrix.ndim} dimensions")
    if matrix.shape[0] == 0 or matrix.shape[1] == 0:
        raise ValueError(f"cost matrix needs at least one row and one column, got {matrix.shape}")
    if not np.all(np.isfinite(matrix)):
        raise ValueError("cost matrix entries must be finite")
    return matrix


class AssignmentSolver:
    """Minimum cost assignment of workers (rows) to jobs (columns).

    The solver is single use: :meth:`solve` reduces the internal working
    matrix in place. Create one instance per cost matrix.
    """

    UNASSIGNED = UNASSIGNED

    def __init__(self, cost_matrix: CostMatrix) -> None:
        costs = _to_matrix(cost_matrix)
        self._rows, self._cols = costs.shape
        self._dim = max(self._rows, self._cols)
        dim = self._dim

        self._cost_matrix = MultiArray(dim, dim)
        self._cost_matrix.array[: self._rows, : self._cols] = costs

        self._label_by_worker = MultiArray(dim)
        self._label_by_job = MultiArray(dim)
        self._min_slack_by_job = MultiArray(dim)
        self._min_slack_worker_by_job = MultiArray(dim, dtype=np.int64, fill=UNASSIGNED)
        self._match_job_by_worker = MultiArray(dim, dtype=np.int64, fill=UNASSIGNED)
        self._match_worker_by_job = MultiArray(dim, dtype=np.int64, fill=UNASSIGNED)
        self._parent_worker_by_committed_job = MultiArray(dim, dtype=np.int64, fill=UNASSIGNED)
        self._committed_workers = MultiArray(dim, dtype=bool, fill=False)
        self._result: List[int] | None = None

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def dim(self) -> int:
        return self._dim

    def solve(self) -> List[int]:
        """Return the job assigned to each worker, ``UNASSIGNED`` if none."""

        if self._result is not None:
            warnings.warn(
                "AssignmentSolver is single use; returning the assignment from the first solve()",
                RuntimeWarning,
                stacklevel=2,
            )
            return list(self._result)

        logger.debug(
            "solving %dx%d assignment padded to %dx%d",
            self._rows,
            self._cols,
            self._dim,
            self._dim,
        )
        # Heuristics: reduce rows and columns by their smallest element, start
        # from a non-zero dual feasible labeling and greedily match zero-cost
        # edges before augmenting.
        self._reduce()
        self._compute_initial_feasible_solution()
        self._greedy_match()

        w = self._fetch_unmatched_worker()
        while w < self._dim:
            logger.debug("phase rooted at worker %d", w)
            self._initialize_phase(w)
            self._execute_phase()
            w = self._fetch_unmatched_worker()

        matches = self._match_job_by_worker.array[: self._rows].tolist()
        self._result = [job if job < self._cols else UNASSIGNED for job in matches]
        return list(self._result)

    def _reduce(self) -> None:
        """Subtract each row's minimum from the row, then each column's from the column.

        An optimal assignment for the reduced matrix is optimal for the
        original one.
        """

        cost = self._cost_matrix.array
        cost -= cost.min(axis=1)[:, np.newaxis]
        cost -= cost.min(axis=0)

    def _compute_initial_feasible_solution(self) -> None:
        """Label workers with zero and each job with its cheapest incident edge."""

        self._label_by_job.array[:] = self._cost_matrix.array.min(axis=0)

    def _greedy_match(self) -> None:
        for w in range(self._dim):
            for j in range(self._dim):
                if (
                    self._match_job_by_worker[w] == UNASSIGNED
                    and self._match_worker_by_job[j] == UNASSIGNED
                    and self._reduced_cost(w, j) == 0
                ):
                    self._match(w, j)

    def _fetch_unmatched_worker(self) -> int:
        """Return the first unmatched worker, or ``dim`` if every worker is matched."""

        for w in range(self._dim):
            if self._match_job_by_worker[w] == UNASSIGNED:
                return w
        return self._dim

    def _initialize_phase(self, w: int) -> None:
        """Clear the committed sets and seed the slack from root worker ``w``."""

        self._committed_workers.fill(False)
        self._parent_worker_by_committed_job.fill(UNASSIGNED)
        self._committed_workers[w] = True
        self._min_slack_by_job.array[:] = (
            self._cost_matrix.array[w] - self._label_by_worker[w] - self._label_by_job.array
        )
        self._min_slack_worker_by_job.fill(w)

    def _execute_phase(self) -> None:
        """Grow committed workers and jobs from the root until the matching grows.

        Committed vertices are reached from the root along alternating
        unmatched/matched zero-slack edges. Reaching an unmatched job yields an
        augmenting path. When the zero-slack edges are exhausted the labels of
        committed workers rise (and those of committed jobs fall) by the
        minimum slack, which keeps the labeling feasible and creates a new
        zero-slack edge. Each iteration is O(N) so a phase is O(N^2).
        """

        parents = self._parent_worker_by_committed_job.array
        min_slack = self._min_slack_by_job.array
        min_slack_workers = self._min_slack_worker_by_job.array
        while True:
            uncommitted = parents == UNASSIGNED
            min_slack_job = int(np.argmin(np.where(uncommitted, min_slack, np.inf)))
            min_slack_value = min_slack[min_slack_job]
            min_slack_worker = int(min_slack_workers[min_slack_job])
            if min_slack_value > 0:
                self._update_labeling(min_slack_value)
            parents[min_slack_job] = min_slack_worker

            if self._match_worker_by_job[min_slack_job] == UNASSIGNED:
                # augmenting path: flip matched and unmatched edges back to the root
                committed_job = min_slack_job
                parent_worker = min_slack_worker
                while True:
                    previous_job = self._match_job_by_worker[parent_worker]
                    self._match(parent_worker, committed_job)
                    committed_job = previous_job
                    if committed_job == UNASSIGNED:
                        break
                    parent_worker = self._parent_worker_by_committed_job[committed_job]
                return

            worker = self._match_worker_by_job[min_slack_job]
            self._committed_workers[worker] = True
            uncommitted = parents == UNASSIGNED
            slack = (
                self._cost_matrix.array[worker]
                - self._label_by_worker[worker]
                - self._label_by_job.array
            )
            improved = uncommitted & (min_slack > slack)
            min_slack[improved] = slack[improved]
            min_slack_workers[improved] = worker

    def _update_labeling(self, slack: float) -> None:
        """Raise committed worker labels and lower committed job labels by ``slack``."""

        committed_jobs = self._parent_worker_by_committed_job.array != UNASSIGNED
        self._label_by_worker.array[self._committed_workers.array] += slack
        self._label_by_job.array[committed_jobs] -= slack
        self._min_slack_by_job.array[~committed_jobs] -= slack

    def _reduced_cost(self, w: int, j: int) -> float:
        return self._cost_matrix[w, j] - self._label_by_worker[w] - self._label_by_job[j]

    def _match(self, w: int, j: int) -> None:
        self._match_job_by_worker[w] = j
        self._match_worker_by_job[j] = w


def assignment_cost(cost_matrix: CostMatrix, assignment: Sequence[int]) -> float:
    """Total original cost of ``assignment``, skipping unassigned workers."""

    matrix = _to_matrix(cost_matrix)
    if len(assignment) != matrix.shape[0]:
        raise ValueError(
            f"assignment has {len(assignment)} entries for {matrix.shape[0]} workers"
        )
    seen = set()
    total = 0.0
    for worker, job in enumerate(assignment):
        if job == UNASSIGNED:
            continue
        if job in seen:
            raise ValueError(f"job {job} is assigned to more than one worker")
        seen.add(job)
        total += matrix[worker, job]
    return total


def linear_sum_assignment(cost_matrix: CostMatrix) -> Tuple[np.ndarray, np.ndarray]:
    """Solve ``cost_matrix`` and return ``(row_ind, col_ind)`` for assigned workers.

    Mirrors the return convention of :func:`scipy.optimize.linear_sum_assignment`
    so the solver can stand in where that interface is expected.
    """

    assignment = AssignmentSolver(cost_matrix).solve()
    pairs = [(worker, job) for worker, job in enumerate(assignment) if job != UNASSIGNED]
    row_ind = np.array([worker for worker, _ in pairs], dtype=np.int64)
    col_ind = np.array([job for _, job in pairs], dtype=np.int64)
    return row_ind, col_ind
