"""Dense row-major matrix of floats with a plain matrix product."""

from __future__ import annotations

import sys
from typing import Iterable

ELEMENT_SIZE = 4
"""Size in bytes of one stored element (single precision)."""


class Matrix:
    """A ``dim_h`` x ``dim_w`` matrix stored row-major in a flat list.

    Storage is not created until :meth:`allocate_memory`, :meth:`initialize`
    or :meth:`fill` is called; until then ``data`` is ``None``.
    """

    def __init__(self, dim_h: int, dim_w: int) -> None:
        if dim_h < 0 or dim_w < 0:
            raise ValueError("Matrix dimensions must be non-negative")
        self.dim_h = dim_h
        self.dim_w = dim_w
        self.data: list[float] | None = None

    def __repr__(self) -> str:
        return f"Matrix({self.dim_h}, {self.dim_w})"

    def size(self) -> int:
        """Number of elements in the matrix."""
        return self.dim_h * self.dim_w

    def allocate_memory(self) -> None:
        """Create zeroed storage if none exists yet."""
        if self.data is None:
            self.data = [0.0] * self.size()

    def fill(self, value: float) -> None:
        """Set every element to ``value``."""
        self.allocate_memory()
        self.data[:] = [float(value)] * self.size()

    def initialize(self, data: Iterable[float]) -> None:
        """Copy ``data`` (row-major) into the matrix."""
        values = [float(v) for v in data]
        if len(values) != self.size():
            raise ValueError("Invalid data size")
        self.allocate_memory()
        self.data[:] = values

    def _flat_index(self, index: tuple[int, int]) -> int:
        if self.data is None:
            raise RuntimeError("Matrix data is not allocated")
        try:
            row, col = index
        except (TypeError, ValueError):
            raise TypeError("Matrix index must be a (row, col) pair") from None
        if not (0 <= row < self.dim_h and 0 <= col < self.dim_w):
            raise IndexError("Matrix index error")
        return row * self.dim_w + col

    def __getitem__(self, index: tuple[int, int]) -> float:
        return self.data[self._flat_index(index)]

    def __setitem__(self, index: tuple[int, int], value: float) -> None:
        flat = self._flat_index(index)
        self.data[flat] = float(value)

    def render(self, name: str = "") -> str:
        """Return the textual dump that :meth:`print` writes."""
        if self.data is None:
            raise RuntimeError("Print: memory is not allocated")
        lines = [
            f"Matrix {name} dims are {self.dim_h}x{self.dim_w}",
            f"Element size is {ELEMENT_SIZE} bytes",
        ]
        for row in self._rows():
            lines.append("".join(f"{elem:g} " for elem in row))
        return "\n".join(lines) + "\n"

    def print(self, name: str = "") -> None:
        """Write the matrix dimensions and contents to standard output."""
        sys.stdout.write(self.render(name))

    def _rows(self) -> list[list[float]]:
        width = self.dim_w
        return [self.data[start:start + width] for start in range(0, self.size(), width)] if width else [
            [] for _ in range(self.dim_h)
        ]

    def _columns(self) -> list[list[float]]:
        return [self.data[col::self.dim_w] for col in range(self.dim_w)]

    @staticmethod
    def gemm(a: Matrix, b: Matrix, c: Matrix) -> None:
        """Store the product ``a @ b`` in ``c``."""
        if a.dim_w != b.dim_h:
            raise ValueError("gemm: Matrix A to B dimension mismatch")
        if a.dim_h != c.dim_h:
            raise ValueError("gemm: Matrix C to A dimension mismatch")
        if b.dim_w != c.dim_w:
            raise ValueError("gemm: Matrix C to B dimension mismatch")
        for operand in (a, b):
            if operand.data is None:
                raise RuntimeError("Matrix data is not allocated")

        c.allocate_memory()
        columns = b._columns()
        c.data[:] = [
            sum((x * y for x, y in zip(row, col)), 0.0)
            for row in a._rows()
            for col in columns
        ]