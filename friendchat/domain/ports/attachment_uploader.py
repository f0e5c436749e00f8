"""
Attachment Uploader Port - Stores a raw attachment and returns its descriptor.
Implementations: friendchat/infrastructure/storage/
"""

from abc import ABC, abstractmethod

from friendchat.domain.value_objects.attachment import Attachment, AttachmentPayload


class AttachmentUploader(ABC):
    @abstractmethod
    async def upload(self, payload: AttachmentPayload) -> Attachment:
        """
        Store the payload and return a descriptor with a stable URL.

        Raises:
            AttachmentUploadError: if the payload cannot be stored
        """
        ...
