"""Knuth–Morris–Pratt substring search.

An engine is built around a needle of length m in O(m) time and space and can
then search any number of haystacks in O(n) time each. Needles and haystacks
are sequences of opaque units compared only for equality: ``str``, ``bytes``
or any indexable sequence.
"""

from __future__ import annotations

from typing import Hashable, Iterator, Sequence, Tuple

from .exceptions import ConfigurationError

NOT_FOUND = -1

Units = Sequence[Hashable]


def build_failure_table(needle: Units) -> Tuple[Tuple[int, ...], int]:
    """Return the failure table of ``needle`` and the border of the full needle.

    Entry 0 is ``NOT_FOUND`` ("no prior state"). Entry ``i`` is the state to
    fall back to when ``needle[i]`` fails to match: the longest proper border
    of ``needle[:i]``, skipping borders that would compare ``needle[i]`` again.
    """

    table = [NOT_FOUND] * len(needle)
    # length of the longest proper border of needle[:i]
    state = 0
    for i in range(1, len(needle)):
        transition = state
        if needle[transition] == needle[i]:
            transition = table[transition]
        table[i] = transition
        while state != NOT_FOUND and needle[i] != needle[state]:
            state = table[state]
        state += 1
    return tuple(table), state


def _check_start(start: int) -> None:
    if start < 0:
        raise ValueError(f"start must be non-negative, got {start}")


class SubstringSearch:
    """Search engine for a fixed, non-empty needle."""

    NOT_FOUND = NOT_FOUND

    __slots__ = ("_needle", "_table", "_overlap")

    def __init__(self, needle: Units) -> None:
        if len(needle) == 0:
            raise ConfigurationError("needle must contain at least one unit")
        self._needle = needle if isinstance(needle, (str, bytes)) else tuple(needle)
        self._table, self._overlap = build_failure_table(self._needle)

    @property
    def needle(self) -> Units:
        return self._needle

    @property
    def failure_table(self) -> Tuple[int, ...]:
        return self._table

    def search(self, haystack: Units, start: int = 0) -> int:
        """Return the index of the first occurrence at or after ``start``.

        Returns ``NOT_FOUND`` when the needle does not occur, including when
        ``start > len(haystack) - len(needle)``.
        """

        _check_start(start)
        return next(self._scan(haystack, start), NOT_FOUND)

    def search_from(self, haystack: Units, start: int) -> int:
        return self.search(haystack, start)

    def search_all(self, haystack: Units, start: int = 0) -> Iterator[int]:
        """Yield the index of every, possibly overlapping, occurrence."""

        _check_start(start)
        return self._scan(haystack, start)

    def _scan(self, haystack: Units, start: int) -> Iterator[int]:
        needle, table = self._needle, self._table
        m = len(needle)
        if start > len(haystack) - m:
            return
        state = 0
        for i in range(start, len(haystack)):
            unit = haystack[i]
            if unit == needle[state]:
                state += 1
            else:
                state = table[state]
                while state != NOT_FOUND and unit != needle[state]:
                    state = table[state]
                state += 1
            if state == m:
                yield i - m + 1
                state = self._overlap

    def __len__(self) -> int:
        return len(self._needle)

    def __repr__(self) -> str:
        return f"SubstringSearch({self._needle!r})"

