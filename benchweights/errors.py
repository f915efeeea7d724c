"""Exception hierarchy for the weight writer pipeline.

Errors raised by configuration, analysis and rendering all derive from
``BenchweightsError``. The I/O flavored errors additionally subclass
``OSError`` so callers that only care about "could not produce the artifact"
can catch a single builtin type.
"""

from __future__ import annotations


class BenchweightsError(Exception):
    """Base class for all package errors."""


class ConfigError(BenchweightsError, ValueError):
    """Unknown or invalid configuration option or input document."""


class AnalysisError(BenchweightsError):
    """The fitting strategy could not produce a cost model."""


class RenderError(BenchweightsError):
    """Template substitution failed (syntax error or missing field)."""


class TemplateIOError(BenchweightsError, OSError):
    """A template or header file could not be read."""


class ArtifactWriteError(BenchweightsError, OSError):
    """An output artifact could not be produced."""
