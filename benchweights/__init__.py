"""
Benchmark weight writer package.

This package turns raw benchmark batches into fitted cost models and renders
them into generated weight source files or HTML reports.
"""

from .__version__ import __version__

__all__ = ["__version__"]
