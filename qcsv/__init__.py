"""Command-line toolkit for reshaping, joining, counting and partitioning CSV data."""

__version__ = "0.1.0"
__all__ = ["__version__"]