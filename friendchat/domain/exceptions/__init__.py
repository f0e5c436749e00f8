"""
DOMAIN EXCEPTIONS - Business rule violations

These exceptions are raised by domain logic and caught by presentation layer.
Presentation layer maps them to HTTP status codes.
"""

from friendchat.domain.exceptions.entity_not_found import EntityNotFoundError
from friendchat.domain.exceptions.validation_error import DomainValidationError
from friendchat.domain.exceptions.conflict import ConflictError
from friendchat.domain.exceptions.upstream import (
    UpstreamError,
    AttachmentUploadError,
    PersistenceError,
)
from friendchat.domain.exceptions.presence_delivery import PresenceDeliveryError

__all__ = [
    "EntityNotFoundError",
    "DomainValidationError",
    "ConflictError",
    "UpstreamError",
    "AttachmentUploadError",
    "PersistenceError",
    "PresenceDeliveryError",
]
