"""
CloudinaryAttachmentUploader - Uploads chat attachments to Cloudinary.

Uses the signed upload REST endpoint directly over httpx:
    POST https://api.cloudinary.com/v1_1/{cloud_name}/auto/upload
    form: file (data URI), api_key, timestamp, folder, signature

signature = sha1("folder=<folder>&timestamp=<ts>" + api_secret)

resource_type "auto" lets Cloudinary detect image / video / raw files.
"""

import hashlib
import logging
import time
from typing import Optional

import httpx

from friendchat.config.settings import Config
from friendchat.domain.exceptions import AttachmentUploadError
from friendchat.domain.ports.attachment_uploader import AttachmentUploader
from friendchat.domain.value_objects.attachment import Attachment, AttachmentPayload
from friendchat.infrastructure.storage.payload import decode_payload

logger = logging.getLogger(__name__)

CLOUDINARY_API_BASE = "https://api.cloudinary.com/v1_1"


class CloudinaryAttachmentUploader(AttachmentUploader):
    def __init__(
        self,
        http_client: httpx.AsyncClient,
        cloud_name: str = Config.CLOUDINARY_CLOUD_NAME,
        api_key: str = Config.CLOUDINARY_API_KEY,
        api_secret: str = Config.CLOUDINARY_API_SECRET,
        folder: str = Config.ATTACHMENT_FOLDER,
        max_bytes: int = int(Config.MAX_ATTACHMENT_MB * 1024 * 1024),
        timeout: float = Config.UPLOAD_TIMEOUT_SECONDS,
    ):
        if not (cloud_name and api_key and api_secret):
            raise ValueError("Cloudinary cloud name, API key and secret are required")
        self._http = http_client
        self._cloud_name = cloud_name
        self._api_key = api_key
        self._api_secret = api_secret
        self._folder = folder
        self._max_bytes = max_bytes
        self._timeout = timeout

    @property
    def upload_url(self) -> str:
        return f"{CLOUDINARY_API_BASE}/{self._cloud_name}/auto/upload"

    def _sign(self, params: dict[str, str]) -> str:
        to_sign = "&".join(f"{k}={params[k]}" for k in sorted(params))
        return hashlib.sha1((to_sign + self._api_secret).encode("utf-8")).hexdigest()

    def _as_data_uri(self, payload: AttachmentPayload) -> str:
        if payload.is_data_uri:
            return payload.data
        mime = payload.type if payload.type and "/" in payload.type else None
        return f"data:{mime or 'application/octet-stream'};base64,{payload.data}"

    async def upload(self, payload: AttachmentPayload) -> Attachment:
        content = decode_payload(payload, self._max_bytes)

        params = {"folder": self._folder, "timestamp": str(int(time.time()))}
        form = {
            **params,
            "file": self._as_data_uri(payload),
            "api_key": self._api_key,
            "signature": self._sign(params),
        }
        try:
            response = await self._http.post(
                self.upload_url, data=form, timeout=self._timeout
            )
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as e:
            raise AttachmentUploadError(
                f"Cloudinary rejected upload ({e.response.status_code}): "
                f"{self._error_message(e.response)}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise AttachmentUploadError(f"Cloudinary upload failed: {e}") from e

        url: Optional[str] = body.get("secure_url") or body.get("url")
        if not url:
            raise AttachmentUploadError("Cloudinary response has no URL")

        logger.info(f"[Cloudinary] Uploaded {payload.name or 'attachment'} → {url}")
        return Attachment(
            url=url,
            type=payload.type or payload.mime_type,
            name=payload.name,
            size=payload.size if payload.size is not None else len(content),
        )

    def _error_message(self, response: httpx.Response) -> str:
        try:
            return response.json().get("error", {}).get("message", response.text)
        except ValueError:
            return response.text
