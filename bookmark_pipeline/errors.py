"""Exceptions that end a run (everything else is contained per item)."""


class PipelineError(Exception):
    """Base class for bookmarks pipeline errors"""
    pass


class CollectionError(PipelineError):
    """Raised when the bookmarks list shows no items at all"""
    pass


class LedgerError(PipelineError):
    """Raised when the ledger schema cannot be migrated"""
    pass


class SessionError(PipelineError):
    """Raised when the browser session cannot be started"""
    pass
