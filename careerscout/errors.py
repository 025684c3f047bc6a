"""Exception taxonomy for the discovery pipeline."""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for all pipeline errors."""


class ServiceError(PipelineError):
    """Completion service unreachable, unauthorized, or returned a bad envelope."""


class ParseError(PipelineError):
    """Model response did not contain valid JSON for the expected schema."""


class NavigationError(PipelineError):
    """A page failed to load within its timeout."""


class ExtractionError(PipelineError):
    """DOM evaluation on a loaded page failed."""


class BrowserSessionError(PipelineError):
    """The shared browser session is unusable. Fatal for the rest of the run."""


class DeadlineExceeded(PipelineError):
    """A cooperative time budget ran out before the next suspend point."""


class ValidationError(PipelineError):
    """Malformed run request. Raised before any browsing resource is acquired."""
