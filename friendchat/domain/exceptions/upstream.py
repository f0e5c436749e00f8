"""
UpstreamError - A collaborator the operation depends on (document store,
attachment upload service) failed. The operation is aborted.
Maps to: HTTP 500 Internal Server Error (detail logged, not exposed)
"""


class UpstreamError(Exception):
    """Base class for failures of external collaborators."""

    def __init__(self, message: str):
        super().__init__(message)


class AttachmentUploadError(UpstreamError):
    """The attachment upload service rejected or failed the upload."""


class PersistenceError(UpstreamError):
    """A document store read or write failed."""
