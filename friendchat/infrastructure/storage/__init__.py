"""
Storage Layer - AttachmentUploader implementations.

- local_attachment_storage.py: files on local disk, served by the app
- cloudinary_uploader.py:      Cloudinary signed uploads over httpx
"""

from friendchat.infrastructure.storage.local_attachment_storage import (
    LocalAttachmentStorage,
)
from friendchat.infrastructure.storage.cloudinary_uploader import (
    CloudinaryAttachmentUploader,
)

__all__ = [
    "LocalAttachmentStorage",
    "CloudinaryAttachmentUploader",
]
