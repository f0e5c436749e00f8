"""
LocalAttachmentStorage - Stores chat attachments on local disk.

Files land in {upload_base}/{folder}/ and are served by the app's static mount
at {public_url}/{folder}/{filename}. Used when ATTACHMENT_BACKEND=local
(development, single-node deployments).
"""

import asyncio
import logging
import os
import re
from datetime import datetime
from typing import Optional

from friendchat.config.settings import Config
from friendchat.domain.exceptions import AttachmentUploadError
from friendchat.domain.ports.attachment_uploader import AttachmentUploader
from friendchat.domain.value_objects.attachment import Attachment, AttachmentPayload
from friendchat.infrastructure.storage.payload import decode_payload

logger = logging.getLogger(__name__)


class LocalAttachmentStorage(AttachmentUploader):
    def __init__(
        self,
        upload_base: Optional[str] = None,
        public_url: Optional[str] = None,
        folder: str = Config.ATTACHMENT_FOLDER,
        max_bytes: int = int(Config.MAX_ATTACHMENT_MB * 1024 * 1024),
    ):
        self.upload_base = upload_base or Config.UPLOAD_BASE
        self.public_url = (public_url or Config.UPLOAD_PUBLIC_URL).rstrip("/")
        self.folder = folder
        self.max_bytes = max_bytes

    async def upload(self, payload: AttachmentPayload) -> Attachment:
        content = decode_payload(payload, self.max_bytes)
        directory = os.path.join(self.upload_base, self.folder)
        try:
            filename = await asyncio.to_thread(
                self._write, directory, payload.name or "attachment", content
            )
        except OSError as e:
            raise AttachmentUploadError(f"Could not store attachment: {e}") from e

        return Attachment(
            url=f"{self.public_url}/{self.folder}/{filename}",
            type=payload.type or payload.mime_type,
            name=payload.name,
            size=payload.size if payload.size is not None else len(content),
        )

    def _write(self, directory: str, original_name: str, content: bytes) -> str:
        os.makedirs(directory, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S%f")
        filename = f"{timestamp}_{self._sanitize_filename(original_name)}"
        with open(os.path.join(directory, filename), "wb") as f:
            f.write(content)
        logger.debug(f"[LocalAttachmentStorage] Saved {filename} ({len(content)} bytes)")
        return filename

    def _sanitize_filename(self, filename: str) -> str:
        # Replace unsafe characters with underscore
        safe = re.sub(r"[^\w\-_\.]", "_", os.path.basename(filename)).strip("._")
        return safe or "unnamed_file"
