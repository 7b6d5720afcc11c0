"""Public exception types for tracegraph."""

from __future__ import annotations


class TracegraphError(Exception):
    """Base class for all tracegraph exceptions."""


class TracegraphLoadError(TracegraphError):
    """Raised when a trace file cannot be loaded or parsed."""


class CircularTraceError(TracegraphError):
    """Raised when an engine is passed as an input of one of its own calls."""


class ExtractionError(TracegraphError):
    """Raised when a user-supplied extractor fails on a call's data."""


class EngineNotBoundError(TracegraphError):
    """Raised when a traced method runs on an instance with no engine attached."""
