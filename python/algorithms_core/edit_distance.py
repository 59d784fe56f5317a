"""Damerau–Levenshtein edit distance with client supplied operation costs.

The distance between a source and a target sequence is the minimum total cost
of the following edits:

* inserting a unit,
* deleting a unit,
* replacing one unit with another,
* swapping two adjacent units.

The swap edit only applies where two adjacent units of the source match two
adjacent units of the target in reverse order (possibly after deleting the
units between them in the source and inserting units between them in the
target); it is not a general licence to permute. Costs must satisfy
``2 * swap >= insert + delete``, which rules out optimal solutions that swap
the same unit twice and keeps the dynamic programme exact.

Both running time and space are O(n*m) for inputs of length n and m.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Hashable, Optional, Sequence, Tuple

import numpy as np

from .exceptions import ConfigurationError
from .multiarray import MultiArray

Units = Sequence[Hashable]


@dataclass(frozen=True)
class EditCosts:
    """Immutable cost of each edit operation."""

    insert: int = 1
    delete: int = 1
    replace: int = 1
    swap: int = 1

    def __post_init__(self) -> None:
        for name in ("insert", "delete", "replace", "swap"):
            if getattr(self, name) < 0:
                raise ConfigurationError(
                    f"{name} cost must be non-negative, got {getattr(self, name)}"
                )
        if 2 * self.swap < self.insert + self.delete:
            raise ConfigurationError(
                "2 * swap cost must be at least insert cost + delete cost "
                f"(swap={self.swap}, insert={self.insert}, delete={self.delete})"
            )


class EditDistance:
    """Damerau–Levenshtein distance engine.

    Parameters
    ----------
    insert / delete / replace / swap
        Cost of each edit operation. The constructor raises
        :class:`~algorithms_core.exceptions.ConfigurationError` unless
        ``2 * swap >= insert + delete``.

    Instances hold no mutable state and may be shared freely.
    """

    __slots__ = ("_costs",)

    def __init__(self, insert: int = 1, delete: int = 1, replace: int = 1, swap: int = 1) -> None:
        self._costs = EditCosts(insert, delete, replace, swap)

    @classmethod
    def from_costs(cls, costs: EditCosts) -> "EditDistance":
        return cls(costs.insert, costs.delete, costs.replace, costs.swap)

    @property
    def costs(self) -> EditCosts:
        return self._costs

    @property
    def insert_cost(self) -> int:
        return self._costs.insert

    @property
    def delete_cost(self) -> int:
        return self._costs.delete

    @property
    def replace_cost(self) -> int:
        return self._costs.replace

    @property
    def swap_cost(self) -> int:
        return self._costs.swap

    def distance(self, source: Units, target: Units) -> int:
        """Return the minimum cost of transforming ``source`` into ``target``."""

        costs = self._costs
        if len(source) == 0:
            return len(target) * costs.insert
        if len(target) == 0:
            return len(source) * costs.delete

        # table[i][j] aligns source[:i + 1] with target[:j + 1]
        table = MultiArray(len(source), len(target), dtype=np.int64)
        if source[0] == target[0]:
            table[0][0] = 0
        else:
            table[0][0] = min(costs.insert + costs.delete, costs.replace)

        for i in range(1, len(source)):
            deletion = table[i - 1][0] + costs.delete
            insertion = (i + 1) * costs.delete + costs.insert
            replacement = i * costs.delete + (0 if source[i] == target[0] else costs.replace)
            table[i][0] = min(deletion, insertion, replacement)

        for j in range(1, len(target)):
            deletion = (j + 1) * costs.insert + costs.delete
            insertion = table[0][j - 1] + costs.insert
            replacement = j * costs.insert + (0 if source[0] == target[j] else costs.replace)
            table[0][j] = min(deletion, insertion, replacement)

        source_index_by_unit: Dict[Hashable, int] = {source[0]: 0}
        for i in range(1, len(source)):
            last_match: Optional[int] = 0 if source[i] == target[0] else None
            for j in range(1, len(target)):
                j_swap = last_match
                deletion = table[i - 1][j] + costs.delete
                insertion = table[i][j - 1] + costs.insert
                replacement = table[i - 1][j - 1]
                if source[i] != target[j]:
                    replacement += costs.replace
                else:
                    last_match = j

                best = min(deletion, insertion, replacement)
                i_swap = source_index_by_unit.get(target[j])
                if i_swap is not None and j_swap is not None:
                    swap = (
                        self._pre_swap_cost(table, i_swap, j_swap)
                        + (i - i_swap - 1) * costs.delete
                        + (j - j_swap - 1) * costs.insert
                        + costs.swap
                    )
                    best = min(best, swap)
                table[i][j] = best
            source_index_by_unit[source[i]] = i

        return int(table[len(source) - 1][len(target) - 1])

    def normalised_distance(self, source: Units, target: Units) -> float:
        """Return the distance divided by the length of the longer input.

        With unit costs the result lies in ``[0, 1]``; other cost schemes may
        exceed 1.
        """

        longest = max(len(source), len(target))
        if longest == 0:
            return 0.0
        return self.distance(source, target) / longest

    def _pre_swap_cost(self, table: MultiArray, i_swap: int, j_swap: int) -> int:
        """Cost of aligning ``source[:i_swap]`` with ``target[:j_swap]``."""

        if i_swap == 0:
            return j_swap * self._costs.insert
        if j_swap == 0:
            return i_swap * self._costs.delete
        return table[i_swap - 1][j_swap - 1]

    def __repr__(self) -> str:
        costs = self._costs
        return (
            f"EditDistance(insert={costs.insert}, delete={costs.delete}, "
            f"replace={costs.replace}, swap={costs.swap})"
        )


def normalised_damerau_levenshtein_distance(
    suffix: Units,
    prefix: Units,
    engine: EditDistance | None = None,
) -> Tuple[float, int]:
    """Return the normalised distance between an overlapping suffix and prefix.

    The last ``k`` units of ``suffix`` are compared with the first ``k`` units
    of ``prefix`` where ``k`` is the shorter length. The metric is normalised by
    ``k`` so overlaps of different lengths are comparable, and the companion
    integer ``k - d`` counts the matching positions.
    """

    engine = engine or EditDistance()
    overlap_len = min(len(suffix), len(prefix))
    if overlap_len == 0:
        return 0.0, 0
    distance = engine.distance(suffix[len(suffix) - overlap_len :], prefix[:overlap_len])
    return distance / overlap_len, overlap_len - distance
