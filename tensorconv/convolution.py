"""2-D convolution over 4-D tensors, through im2col + gemm or directly."""

from __future__ import annotations

from itertools import product

from tensorconv.matrix import Matrix
from tensorconv.tensor import Tensor4D, calculate_hw_out, matrix_to_tensor_reshape


class Convolution:
    """A convolution with a fixed ``out x in x kh x kw`` kernel.

    Padding defaults to half the kernel size on each axis and strides
    default to 1.
    """

    def __init__(
        self,
        kernel: Tensor4D,
        h_pad: int | None = None,
        w_pad: int | None = None,
        h_stride: int | None = None,
        w_stride: int | None = None,
    ) -> None:
        self.kernel = kernel
        self.h_pad = kernel.dim_y // 2 if h_pad is None else h_pad
        self.w_pad = kernel.dim_z // 2 if w_pad is None else w_pad
        self.h_stride = 1 if h_stride is None else h_stride
        self.w_stride = 1 if w_stride is None else w_stride
        self._flat_kernel: Matrix | None = None

    def __repr__(self) -> str:
        return (
            f"Convolution({self.kernel!r}, h_pad={self.h_pad}, w_pad={self.w_pad}, "
            f"h_stride={self.h_stride}, w_stride={self.w_stride})"
        )

    def flatten_kernel(self) -> Matrix:
        """Return the kernel as an ``out x (in * kh * kw)`` matrix, built once."""
        if self._flat_kernel is None:
            if self.kernel.data is None:
                raise RuntimeError("Tensor data is not allocated")
            out_ch, in_ch, kh, kw = self.kernel.shape()
            flat = Matrix(out_ch, in_ch * kh * kw)
            flat.initialize(self.kernel.data)
            self._flat_kernel = flat
        return self._flat_kernel

    def _check_channels(self, input: Tensor4D) -> None:
        if input.dim_x != self.kernel.dim_x:
            raise ValueError("Tensor to kernel dimensions mismatch")

    def _output_hw(self, input: Tensor4D) -> tuple[int, int]:
        return calculate_hw_out(
            input.dim_y,
            input.dim_z,
            self.kernel.dim_y,
            self.kernel.dim_z,
            self.h_pad,
            self.w_pad,
            self.h_stride,
            self.w_stride,
        )

    def forward(self, input: Tensor4D, output: Tensor4D) -> None:
        """Convolve ``input`` into ``output`` by unfolding patches and one product."""
        self._check_channels(input)
        flat_kernel = self.flatten_kernel()
        out_ch, in_ch, kh, kw = self.kernel.shape()
        h_out, w_out = self._output_hw(input)
        n_patches = input.dim_w * h_out * w_out

        columns = Matrix(in_ch * kh * kw, n_patches)
        Tensor4D.im2col(
            input, columns, kh, kw, self.h_pad, self.w_pad, self.h_stride, self.w_stride
        )
        product_matrix = Matrix(out_ch, n_patches)
        product_matrix.allocate_memory()
        Matrix.gemm(flat_kernel, columns, product_matrix)
        matrix_to_tensor_reshape(product_matrix, output, True)

    def forward_simple(self, input: Tensor4D, output: Tensor4D) -> None:
        """Convolve ``input`` into ``output`` with a direct sliding window."""
        self._check_channels(input)
        out_ch, in_ch, kh, kw = self.kernel.shape()
        batches, _, h_in, w_in = input.shape()
        h_out, w_out = self._output_hw(input)
        if output.shape() != (batches, out_ch, h_out, w_out):
            raise ValueError("Output tensor dimensions mismatch")
        if input.data is None or self.kernel.data is None:
            raise RuntimeError("Tensor data is not allocated")

        output.fill(0.0)
        for bi, oi, ci, oh, ow in product(
            range(batches), range(out_ch), range(in_ch), range(h_out), range(w_out)
        ):
            acc = 0.0
            for khi, kwi in product(range(kh), range(kw)):
                y = oh * self.h_stride + khi - self.h_pad
                x = ow * self.w_stride + kwi - self.w_pad
                if 0 <= y < h_in and 0 <= x < w_in:
                    acc += input[bi, ci, y, x] * self.kernel[oi, ci, khi, kwi]
            output[bi, oi, oh, ow] += acc

    def in_channels(self) -> int:
        """Size of the kernel's first axis."""
        return self.kernel.dim_w

    def out_channels(self) -> int:
        """Size of the kernel's second axis."""
        return self.kernel.dim_x

    def rows(self) -> int:
        """Kernel height."""
        return self.kernel.dim_y

    def cols(self) -> int:
        """Kernel width."""
        return self.kernel.dim_z