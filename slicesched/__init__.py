"""Time-sliced task scheduling with FIFO and SRTF strategies, served over HTTP."""

__version__ = "0.1.0"
__all__ = ["__version__"]