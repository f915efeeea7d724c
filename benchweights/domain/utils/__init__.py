"""
Shared numeric helpers for the analysis layer.

Modules
-------
statistics
    Order statistics on integer samples (median, inter-quartile trimming,
    modal points) and the half-up rounding used for fitted coefficients.
"""

__all__ = []
