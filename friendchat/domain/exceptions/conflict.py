"""
ConflictError - Raised when a write would duplicate existing state
(e.g. adding a user who is already a friend).
Maps to: HTTP 400 Bad Request
"""


class ConflictError(Exception):
    def __init__(self, message: str = "The resource already exists."):
        super().__init__(message)
