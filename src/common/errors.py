"""Exception hierarchy shared by the pipeline stages."""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for pipeline errors."""


class SourceFetchError(PipelineError):
    """A feed request timed out, failed in transport, or returned non-2xx."""

    def __init__(self, source_id: str, message: str):
        super().__init__(message)
        self.source_id = source_id


class FeedParseError(PipelineError):
    """A feed body was malformed or not RSS/Atom."""

    def __init__(self, source_id: str, message: str):
        super().__init__(message)
        self.source_id = source_id


class ContentExtractionError(PipelineError):
    """Article HTML could not be fetched or yielded no usable body."""


class PersistenceError(PipelineError):
    """Base class for database write failures."""

    def __init__(self, operation: str, message: str):
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation


class TransientPersistenceError(PersistenceError):
    """Deadlock, serialization failure or lock timeout; safe to retry."""


class SchemaDriftError(PersistenceError):
    """The target table is missing optional columns the write referenced."""


class FatalPersistenceError(PersistenceError):
    """Any other database failure; never retried."""
