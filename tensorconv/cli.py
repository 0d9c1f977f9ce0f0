"""Command that runs a small convolution and compares both methods."""

from __future__ import annotations

import argparse

from tensorconv.convolution import Convolution
from tensorconv.tensor import Tensor4D

EXPECTED = 5.0


def main(argv: list[str] | None = None) -> int:
    """Convolve a 2x2 input with a 2x2 diagonal kernel and print the results."""
    parser = argparse.ArgumentParser(
        prog="tensorconv",
        description="Run a 2x2 convolution with im2col and with a direct loop.",
    )
    parser.parse_args(argv)

    print("Running TensorMultiply application...", flush=True)
    print("Using CPU implementation", flush=True)

    inp = Tensor4D(1, 1, 2, 2)
    inp.initialize([1.0, 2.0, 3.0, 4.0])

    kernel = Tensor4D(1, 1, 2, 2)
    kernel.initialize([1.0, 0.0, 0.0, 1.0])
    conv = Convolution(kernel, 0, 0, 1, 1)

    out_im2col = Tensor4D(1, 1, 1, 1)
    out_direct = Tensor4D(1, 1, 1, 1)
    out_im2col.allocate_memory()
    out_direct.allocate_memory()

    conv.forward(inp, out_im2col)
    conv.forward_simple(inp, out_direct)

    print(f"Compare {out_im2col.data[0]:g} to {EXPECTED:g}")
    print(f"Compare {out_direct.data[0]:g} to {EXPECTED:g}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())