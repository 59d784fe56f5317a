"""Dense multi-dimensional arrays with bounds-checked subscripting.

A :class:`MultiArray` stores its elements in a single row-major numpy buffer.
Indexing one level at a time returns :class:`MultiArrayView` objects so that a
two dimensional table reads naturally as ``table[i][j]``; a tuple subscript
(``table[i, j]``) addresses an element directly. Every index is checked against
the extent of its dimension and out of range access raises
:class:`~algorithms_core.exceptions.BoundsError`.
"""

from __future__ import annotations

from typing import Any, List, Sequence, Tuple, Union

import numpy as np

from .exceptions import BoundsError

Extents = Tuple[int, ...]
Index = Union[int, Tuple[int, ...]]


def _multipliers(extents: Extents) -> Extents:
    """Return the row-major stride of every dimension."""

    multipliers = [1] * len(extents)
    for dim in range(len(extents) - 2, -1, -1):
        multipliers[dim] = multipliers[dim + 1] * extents[dim + 1]
    return tuple(multipliers)


def _check_index(index: Any, extent: int, dim: int) -> int:
    if isinstance(index, bool) or not isinstance(index, (int, np.integer)):
        raise TypeError(f"indices must be integers, not {type(index).__name__}")
    if index < 0 or index >= extent:
        raise BoundsError(
            f"index {index} is out of range for dimension {dim} with extent {extent}"
        )
    return int(index)


class MultiArray:
    """Fixed-shape, heap allocated, row-major array of ``len(extents)`` dimensions."""

    __slots__ = ("_extents", "_multipliers", "_buffer")

    def __init__(self, *extents: int, dtype: Any = float, fill: Any = 0) -> None:
        if not extents:
            raise ValueError("a MultiArray needs at least one extent")
        if any(int(extent) < 0 for extent in extents):
            raise ValueError(f"extents must be non-negative, got {extents}")
        self._extents: Extents = tuple(int(extent) for extent in extents)
        self._multipliers = _multipliers(self._extents)
        total = 1
        for extent in self._extents:
            total *= extent
        self._buffer = np.full(total, fill, dtype=dtype)

    @classmethod
    def from_nested(cls, data: Any, dtype: Any = None) -> "MultiArray":
        """Build an array from nested sequences, e.g. ``[[1.1, 2.2], [3.3, 4.4]]``.

        The extents are taken from the nesting depth and lengths of ``data``;
        ragged input is rejected with :class:`ValueError`.
        """

        values = np.array(data, dtype=dtype)
        if values.ndim == 0:
            raise ValueError("nested data must have at least one dimension")
        if values.dtype == object:
            raise ValueError("nested data must be rectangular")
        result = cls(*values.shape, dtype=values.dtype)
        result._buffer[:] = values.ravel(order="C")
        return result

    def copy(self) -> "MultiArray":
        result = MultiArray(*self._extents, dtype=self._buffer.dtype)
        result._buffer[:] = self._buffer
        return result

    @property
    def shape(self) -> Extents:
        return self._extents

    @property
    def ndim(self) -> int:
        return len(self._extents)

    @property
    def dtype(self) -> np.dtype:
        return self._buffer.dtype

    @property
    def data(self) -> np.ndarray:
        """The flat row-major backing buffer."""
        return self._buffer

    @property
    def array(self) -> np.ndarray:
        """A ``shape``-dimensional numpy view sharing the backing buffer."""
        return self._buffer.reshape(self._extents)

    def size(self, dim: int = 0) -> int:
        """Return the extent of dimension ``dim``."""
        if dim < 0 or dim >= len(self._extents):
            raise BoundsError(f"dimension {dim} does not exist in a {self.ndim}-D array")
        return self._extents[dim]

    def fill(self, value: Any) -> None:
        self._buffer.fill(value)

    def tolist(self) -> List[Any]:
        return self.array.tolist()

    def _offset(self, indices: Sequence[Any], first_dim: int, base: int) -> int:
        if first_dim + len(indices) != len(self._extents):
            raise BoundsError(
                f"expected {len(self._extents) - first_dim} indices, got {len(indices)}"
            )
        offset = base
        for dim, index in enumerate(indices, start=first_dim):
            offset += _check_index(index, self._extents[dim], dim) * self._multipliers[dim]
        return offset

    def _subscript(self, key: Index, dim: int, base: int) -> Any:
        if isinstance(key, tuple):
            return self._buffer[self._offset(key, dim, base)].item()
        offset = base + _check_index(key, self._extents[dim], dim) * self._multipliers[dim]
        if dim == len(self._extents) - 1:
            return self._buffer[offset].item()
        return MultiArrayView(self, dim + 1, offset)

    def _assign(self, key: Index, value: Any, dim: int, base: int) -> None:
        if isinstance(key, tuple):
            self._buffer[self._offset(key, dim, base)] = value
            return
        if dim != len(self._extents) - 1:
            raise TypeError("only single elements can be assigned; index every dimension")
        self._buffer[base + _check_index(key, self._extents[dim], dim)] = value

    def __getitem__(self, key: Index) -> Any:
        return self._subscript(key, 0, 0)

    def __setitem__(self, key: Index, value: Any) -> None:
        self._assign(key, value, 0, 0)

    def __len__(self) -> int:
        return self._extents[0]

    def __repr__(self) -> str:
        return f"MultiArray({self.tolist()!r})"


class MultiArrayView:
    """A view into one slab of a :class:`MultiArray` at dimension ``dim``."""

    __slots__ = ("_multi", "_dim", "_base")

    def __init__(self, multi: MultiArray, dim: int, base: int) -> None:
        self._multi = multi
        self._dim = dim
        self._base = base

    def size(self) -> int:
        return self._multi.shape[self._dim]

    def tolist(self) -> List[Any]:
        shape = self._multi.shape[self._dim :]
        count = 1
        for extent in shape:
            count *= extent
        return self._multi.data[self._base : self._base + count].reshape(shape).tolist()

    def __getitem__(self, key: Index) -> Any:
        return self._multi._subscript(key, self._dim, self._base)

    def __setitem__(self, key: Index, value: Any) -> None:
        self._multi._assign(key, value, self._dim, self._base)

    def __len__(self) -> int:
        return self.size()

    def __repr__(self) -> str:
        return repr(self.tolist())
