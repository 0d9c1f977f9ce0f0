"""Four-dimensional tensor with im2col/col2im, element-wise ops and reductions."""

from __future__ import annotations

import sys
from itertools import product
from typing import Iterable, Sequence

from tensorconv.matrix import ELEMENT_SIZE, Matrix

Shape4 = tuple[int, int, int, int]


def calculate_hw_out(
    h_in: int,
    w_in: int,
    kh: int,
    kw: int,
    h_pad: int,
    w_pad: int,
    h_stride: int,
    w_stride: int,
) -> tuple[int, int]:
    """Return the output height and width of a strided, padded sliding window."""
    if h_stride <= 0 or w_stride <= 0:
        raise ValueError("Strides must be positive")
    padded_h = h_in + 2 * h_pad
    padded_w = w_in + 2 * w_pad
    if kh > padded_h or kw > padded_w:
        raise ValueError("Kernel is larger than the padded input")
    return (padded_h - kh) // h_stride + 1, (padded_w - kw) // w_stride + 1


class Tensor4D:
    """A ``dim_w`` x ``dim_x`` x ``dim_y`` x ``dim_z`` tensor stored row-major.

    The axes are usually batch, channel, height and width. Storage is not
    created until :meth:`allocate_memory`, :meth:`initialize` or :meth:`fill`
    is called; until then ``data`` is ``None``.
    """

    def __init__(self, dim_w: int, dim_x: int, dim_y: int, dim_z: int) -> None:
        if min(dim_w, dim_x, dim_y, dim_z) < 0:
            raise ValueError("Tensor dimensions must be non-negative")
        self.dim_w = dim_w
        self.dim_x = dim_x
        self.dim_y = dim_y
        self.dim_z = dim_z
        self.data: list[float] | None = None

    def __repr__(self) -> str:
        return f"Tensor4D({self.dim_w}, {self.dim_x}, {self.dim_y}, {self.dim_z})"

    def shape(self) -> Shape4:
        """The four dimensions as a tuple."""
        return (self.dim_w, self.dim_x, self.dim_y, self.dim_z)

    def size(self) -> int:
        """Number of elements in the tensor."""
        return self.dim_w * self.dim_x * self.dim_y * self.dim_z

    def clear(self) -> None:
        """Release the storage."""
        self.data = None

    def allocate_memory(self) -> None:
        """Create zeroed storage if none exists yet."""
        if self.data is None:
            self.data = [0.0] * self.size()

    def fill(self, value: float) -> None:
        """Set every element to ``value``."""
        self.allocate_memory()
        self.data[:] = [float(value)] * self.size()

    def initialize(self, data: Iterable[float]) -> None:
        """Copy ``data`` (row-major) into the tensor."""
        values = [float(v) for v in data]
        if len(values) != self.size():
            raise ValueError("Invalid data size")
        self.allocate_memory()
        self.data[:] = values

    def _flat_index(self, index: Sequence[int]) -> int:
        if self.data is None:
            raise RuntimeError("Tensor data is not allocated")
        try:
            w, x, y, z = index
        except (TypeError, ValueError):
            raise TypeError("Tensor index must have four components") from None
        if not (
            0 <= w < self.dim_w
            and 0 <= x < self.dim_x
            and 0 <= y < self.dim_y
            and 0 <= z < self.dim_z
        ):
            raise IndexError("Tensor index error")
        return ((w * self.dim_x + x) * self.dim_y + y) * self.dim_z + z

    def __getitem__(self, index: Sequence[int]) -> float:
        return self.data[self._flat_index(index)]

    def __setitem__(self, index: Sequence[int], value: float) -> None:
        flat = self._flat_index(index)
        self.data[flat] = float(value)

    def render(self, name: str = "") -> str:
        """Return the textual dump that :meth:`print` writes.

        Each line shows one row of every channel side by side, separated by
        ``|``; batches are separated by a line of dashes.
        """
        if self.data is None:
            raise RuntimeError("Print: memory is not allocated")
        lines = [
            f"Tensor {name} dims are "
            f"{self.dim_w}x{self.dim_x}x{self.dim_y}x{self.dim_z}",
            f"Element size is {ELEMENT_SIZE} bytes",
        ]
        total_cols = self.dim_y * self.dim_z + (self.dim_y - 1)
        for batch in range(self.dim_w):
            for row in range(self.dim_y):
                channels = [
                    "".join(
                        f"{self[batch, channel, row, col]:g} "
                        for col in range(self.dim_z)
                    )
                    for channel in range(self.dim_x)
                ]
                lines.append("| ".join(channels))
            if batch != self.dim_w - 1:
                lines.append("-" * max(total_cols * 2, 0))
        return "\n".join(lines) + "\n"

    def print(self, name: str = "") -> None:
        """Write the tensor dimensions and contents to standard output."""
        sys.stdout.write(self.render(name))

    def _require_data(self) -> list[float]:
        if self.data is None:
            raise RuntimeError("Tensor data is not allocated")
        return self.data

    @staticmethod
    def im2col(
        a: Tensor4D,
        b: Matrix,
        kh: int,
        kw: int,
        h_pad: int,
        w_pad: int,
        h_stride: int,
        w_stride: int,
    ) -> None:
        """Unfold the patches of ``a`` into the columns of ``b``.

        ``b`` must be ``(channels * kh * kw) x (batch * h_out * w_out)``;
        positions falling into the padding are zero.
        """
        batches, channels, height, width = a.shape()
        h_out, w_out = calculate_hw_out(
            height, width, kh, kw, h_pad, w_pad, h_stride, w_stride
        )
        n_patches = batches * h_out * w_out
        if b.dim_h != channels * kh * kw or b.dim_w != n_patches:
            raise ValueError("Matrix dimensions mismatch")
        a._require_data()
        b.allocate_memory()

        patches = product(range(batches), range(h_out), range(w_out))
        for col, (bi, i, j) in enumerate(patches):
            rows = product(range(channels), range(kh), range(kw))
            for row, (ci, ih, iw) in enumerate(rows):
                y = i * h_stride + ih - h_pad
                x = j * w_stride + iw - w_pad
                inside = 0 <= y < height and 0 <= x < width
                b.data[row * n_patches + col] = a[bi, ci, y, x] if inside else 0.0

    @staticmethod
    def col2im(
        a: Matrix,
        b: Tensor4D,
        kh: int,
        kw: int,
        h_pad: int,
        w_pad: int,
        h_stride: int,
        w_stride: int,
    ) -> None:
        """Fold the columns of ``a`` back into ``b``, summing overlapping patches."""
        batches, channels, height, width = b.shape()
        if a.dim_h != channels * kh * kw:
            raise ValueError("Input matrix dimensions mismatch")
        h_out, w_out = calculate_hw_out(
            height, width, kh, kw, h_pad, w_pad, h_stride, w_stride
        )
        b.fill(0.0)

        patches = product(range(batches), range(h_out), range(w_out))
        for col, (bi, i, j) in enumerate(patches):
            rows = product(range(channels), range(kh), range(kw))
            for row, (ci, ih, iw) in enumerate(rows):
                y = i * h_stride + ih - h_pad
                x = j * w_stride + iw - w_pad
                if 0 <= y < height and 0 <= x < width:
                    b[bi, ci, y, x] += a[row, col]

    @staticmethod
    def add(a: Tensor4D, b: Tensor4D | float, c: Tensor4D) -> None:
        """Store ``a + b`` in ``c``; ``b`` is a tensor of equal shape or a scalar."""
        if isinstance(b, Tensor4D):
            if a.shape() != b.shape():
                raise ValueError("Tensor dimensions A & B mismatch")
            if a.shape() != c.shape():
                raise ValueError("Tensor dimensions A & C mismatch")
            values = [x + y for x, y in zip(a._require_data(), b._require_data())]
        else:
            if a.shape() != c.shape():
                raise ValueError("Tensor dimensions A & C mismatch")
            scalar = float(b)
            values = [x + scalar for x in a._require_data()]
        c.allocate_memory()
        c.data[:] = values

    @staticmethod
    def scale(a: Tensor4D, b: float, c: Tensor4D) -> None:
        """Store ``a * b`` in ``c`` for a scalar ``b``."""
        if a.shape() != c.shape():
            raise ValueError("Tensor dimensions A & C mismatch")
        factor = float(b)
        values = [x * factor for x in a._require_data()]
        c.allocate_memory()
        c.data[:] = values

    @staticmethod
    def _check_reduction(a: Tensor4D, index: int, c: Tensor4D) -> None:
        if not 0 <= index < 4:
            raise IndexError("Reduction axis must be between 0 and 3")
        reduced = list(a.shape())
        reduced[index] = 1
        if tuple(reduced) != c.shape():
            raise ValueError("Tensor dimensions A & C mismatch")
        a._require_data()

    @staticmethod
    def _reduced_positions(a: Tensor4D, index: int, c: Tensor4D):
        """Yield (output flat index, input value) pairs for a reduction."""
        for position, value in zip(product(*map(range, a.shape())), a.data):
            target = list(position)
            target[index] = 0
            yield c._flat_index(target), value

    @staticmethod
    def sum(a: Tensor4D, index: int, c: Tensor4D) -> None:
        """Sum ``a`` along axis ``index`` into ``c`` (that axis has size 1 in ``c``)."""
        Tensor4D._check_reduction(a, index, c)
        c.fill(0.0)
        for flat, value in Tensor4D._reduced_positions(a, index, c):
            c.data[flat] += value

    @staticmethod
    def max(a: Tensor4D, index: int, c: Tensor4D) -> None:
        """Maximum of ``a`` along axis ``index`` into ``c``.

        The running maximum starts at zero, so results are never negative.
        """
        Tensor4D._check_reduction(a, index, c)
        c.fill(0.0)
        for flat, value in Tensor4D._reduced_positions(a, index, c):
            if value > c.data[flat]:
                c.data[flat] = value

    @staticmethod
    def mean(a: Tensor4D, index: int, c: Tensor4D) -> None:
        """Mean of ``a`` along axis ``index`` into ``c``."""
        Tensor4D._check_reduction(a, index, c)
        count = a.shape()[index]
        if count == 0:
            raise ValueError("Cannot average over an empty axis")
        Tensor4D.sum(a, index, c)
        Tensor4D.scale(c, 1.0 / count, c)


def matrix_to_tensor_reshape(matrix: Matrix, tensor: Tensor4D, copy: bool = True) -> None:
    """Give ``tensor`` the contents of ``matrix``, which must have as many elements.

    With ``copy`` the values are copied; otherwise the storage is handed over
    and ``matrix`` is left without data.
    """
    if matrix.size() != tensor.size():
        raise ValueError("Tensor dimensions mismatch")
    if matrix.data is None:
        raise RuntimeError("Matrix data is not allocated")
    if copy:
        tensor.allocate_memory()
        tensor.data[:] = matrix.data
    else:
        tensor.clear()
        tensor.data = matrix.data
        matrix.data = None