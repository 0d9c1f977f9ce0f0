# tensorconv

Dense row-major matrices, four-dimensional tensors laid out as
batch × channels × height × width, and a 2-D convolution that runs either
through im2col followed by a matrix product or through a direct nested loop.
Everything is plain Python with no third-party dependencies.

## Install

    pip install .

For running the tests:

    pip install ".[test]"
    pytest

## Matrices

`tensorconv.matrix.Matrix(dim_h, dim_w)` holds its elements in a flat
row-major list, `data`. The list is `None` until `allocate_memory()` (zeroed
storage), `initialize(values)` or `fill(value)` is called.

```python
from tensorconv.matrix import Matrix

a = Matrix(2, 2)
a.initialize([1.0, 2.0, 3.0, 4.0])
b = Matrix(2, 2)
b.initialize([5.0, 6.0, 7.0, 8.0])
c = Matrix(2, 2)
Matrix.gemm(a, b, c)       # c becomes the product of a and b
print(c[0, 1])             # 22.0
c.print("product")
```

- `initialize` raises `ValueError` if the number of values differs from
  `size()`.
- Elements are read and written as `m[row, col]`; an out-of-range index raises
  `IndexError`, and access before storage exists raises `RuntimeError`.
- `gemm(a, b, c)` raises `ValueError` if the three shapes do not fit together
  and allocates `c` if needed.
- `render(name)` returns the text dump that `print(name)` writes to standard
  output.

## Tensors

`tensorconv.tensor.Tensor4D(dim_w, dim_x, dim_y, dim_z)` works the same way,
indexed as `t[w, x, y, z]`, with `shape()` returning the four dimensions and
`clear()` dropping the storage.

```python
from tensorconv.tensor import Tensor4D

t = Tensor4D(1, 2, 3, 2)
t.initialize(range(12))
m = Tensor4D(1, 2, 1, 2)
Tensor4D.mean(t, 2, m)     # reduce over axis 2 (height)
print(m[0, 1, 0, 0])       # 8.0
```

Static operations, each writing into its last argument:

- `add(a, b, c)` — `b` is a tensor of the same shape or a scalar.
- `scale(a, b, c)` — multiply by a scalar.
- `sum(a, index, c)`, `max(a, index, c)`, `mean(a, index, c)` — reduce along
  axis `index` (0–3); `c` must have size 1 on that axis. The running maximum
  in `max` starts at zero, so its results are never negative.
- `im2col(a, b, kh, kw, h_pad, w_pad, h_stride, w_stride)` — unfold patches of
  tensor `a` into the columns of matrix `b`, which must be
  `(channels * kh * kw) x (batch * h_out * w_out)`; padded positions are zero.
- `col2im(a, b, kh, kw, h_pad, w_pad, h_stride, w_stride)` — fold matrix
  columns back into tensor `b`, summing where patches overlap.

Module functions:

- `calculate_hw_out(h_in, w_in, kh, kw, h_pad, w_pad, h_stride, w_stride)`
  returns `(h_out, w_out)` for a sliding window; it raises `ValueError` for a
  non-positive stride or a kernel larger than the padded input.
- `matrix_to_tensor_reshape(matrix, tensor, copy=True)` copies the matrix
  values into a tensor of the same size, or with `copy=False` hands the
  storage over and leaves the matrix without data.

## Convolution

```python
from tensorconv.convolution import Convolution
from tensorconv.tensor import Tensor4D

image = Tensor4D(1, 1, 2, 2)
image.initialize([1.0, 2.0, 3.0, 4.0])
kernel = Tensor4D(1, 1, 2, 2)
kernel.initialize([1.0, 0.0, 0.0, 1.0])

conv = Convolution(kernel, 0, 0, 1, 1)
out = Tensor4D(1, 1, 1, 1)
out.allocate_memory()
conv.forward(image, out)         # im2col + gemm
conv.forward_simple(image, out)  # direct loop, same result: 5.0
```

The kernel is laid out as output channels × input channels × height × width.
Padding left as `None` defaults to half the kernel size on that axis, and
stride to 1. Both `forward` methods raise `ValueError` when the input's
channel count differs from the kernel's; `forward_simple` also checks the
output shape. `flatten_kernel()` returns the kernel as a matrix, built once
and reused.

## Command line

    tensorconv

convolves a 2×2 image with a 2×2 diagonal kernel by both methods and prints
each result next to the expected value, 5.

## Limitations

All computation runs on Python lists on the CPU; there is no GPU offload or
half-precision storage, and no backward pass for the convolution.