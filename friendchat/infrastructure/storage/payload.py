"""Shared checks for incoming attachment payloads."""

from friendchat.domain.exceptions import DomainValidationError
from friendchat.domain.value_objects.attachment import AttachmentPayload


def decode_payload(payload: AttachmentPayload, max_bytes: int) -> bytes:
    """
    Decode the base64 payload and enforce the size limit.

    Raises:
        DomainValidationError: invalid base64, empty or oversized content
    """
    try:
        content = payload.decode()
    except ValueError as e:
        raise DomainValidationError(str(e)) from e
    if not content:
        raise DomainValidationError("Attachment is empty")
    if len(content) > max_bytes:
        raise DomainValidationError(
            f"Attachment exceeds the {max_bytes // (1024 * 1024)} MB limit"
        )
    return content
