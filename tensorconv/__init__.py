"""Dense matrices, 4-D tensors and 2-D convolution in pure Python."""

__version__ = "0.1.0"
__all__ = ["matrix", "tensor", "convolution", "cli"]