import base64
from urllib.parse import parse_qs

import httpx
import pytest

from friendchat.domain.exceptions import AttachmentUploadError, DomainValidationError
from friendchat.domain.value_objects.attachment import AttachmentPayload
from friendchat.infrastructure.storage import (
    CloudinaryAttachmentUploader,
    LocalAttachmentStorage,
)

HELLO_B64 = base64.b64encode(b"hello").decode()


@pytest.mark.asyncio
async def test_local_storage_writes_file_and_returns_public_url(tmp_path):
    storage = LocalAttachmentStorage(
        upload_base=str(tmp_path), public_url="/uploads/", folder="chat_files"
    )

    attachment = await storage.upload(
        AttachmentPayload(data=f"data:text/plain;base64,{HELLO_B64}", name="../notes.txt")
    )

    stored = list((tmp_path / "chat_files").iterdir())
    assert len(stored) == 1
    assert stored[0].read_bytes() == b"hello"
    assert stored[0].name.endswith("_notes.txt")
    assert attachment.url == f"/uploads/chat_files/{stored[0].name}"
    assert attachment.type == "text/plain"
    assert attachment.size == 5


@pytest.mark.asyncio
async def test_local_storage_rejects_oversize(tmp_path):
    storage = LocalAttachmentStorage(upload_base=str(tmp_path), max_bytes=4)

    with pytest.raises(DomainValidationError):
        await storage.upload(AttachmentPayload(data=HELLO_B64))


@pytest.mark.asyncio
async def test_local_storage_rejects_invalid_base64(tmp_path):
    storage = LocalAttachmentStorage(upload_base=str(tmp_path))

    with pytest.raises(DomainValidationError):
        await storage.upload(AttachmentPayload(data="not base64!!"))


@pytest.mark.asyncio
async def test_local_storage_rejects_empty_payload(tmp_path):
    storage = LocalAttachmentStorage(upload_base=str(tmp_path))

    with pytest.raises(DomainValidationError, match="empty"):
        await storage.upload(AttachmentPayload(data="data:text/plain;base64,"))


def _cloudinary(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return CloudinaryAttachmentUploader(
        client, cloud_name="demo", api_key="key", api_secret="secret", folder="chat_app_files"
    )


@pytest.mark.asyncio
async def test_cloudinary_signed_upload():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["form"] = parse_qs(request.content.decode())
        return httpx.Response(200, json={"secure_url": "https://res.cloudinary.com/demo/x.png"})

    uploader = _cloudinary(handler)
    attachment = await uploader.upload(
        AttachmentPayload(data=HELLO_B64, type="image", name="x.png", size=5)
    )

    assert seen["url"] == "https://api.cloudinary.com/v1_1/demo/auto/upload"
    form = seen["form"]
    assert form["api_key"] == ["key"]
    assert form["folder"] == ["chat_app_files"]
    assert form["file"] == [f"data:application/octet-stream;base64,{HELLO_B64}"]
    assert form["signature"] == [
        uploader._sign({"folder": "chat_app_files", "timestamp": form["timestamp"][0]})
    ]
    assert attachment.url == "https://res.cloudinary.com/demo/x.png"
    assert attachment.type == "image"
    assert attachment.size == 5


@pytest.mark.asyncio
async def test_cloudinary_rejection_is_upload_error():
    uploader = _cloudinary(
        lambda request: httpx.Response(401, json={"error": {"message": "Invalid Signature"}})
    )

    with pytest.raises(AttachmentUploadError, match="Invalid Signature"):
        await uploader.upload(AttachmentPayload(data=HELLO_B64))


@pytest.mark.asyncio
async def test_cloudinary_network_failure_is_upload_error():
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    with pytest.raises(AttachmentUploadError):
        await _cloudinary(handler).upload(AttachmentPayload(data=HELLO_B64))


def test_cloudinary_requires_credentials():
    with pytest.raises(ValueError):
        CloudinaryAttachmentUploader(httpx.AsyncClient(), cloud_name="", api_key="", api_secret="")
