# app/services/media_uploader.py
"""
Media uploader — pushes KYC images (licence, ID front/back, photo) to ImageKit
and returns the public URL.

Endpoint: POST {IMAGEKIT_UPLOAD_URL}  (multipart, HTTP basic auth with the private key)
Names:    {prefix}-{epoch_millis}.{ext}

An attachment that is missing, empty, too large, or fails to upload resolves
to an empty URL. Callers treat "" as "no media attached", never as an error.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Optional

import httpx
from fastapi import Request

from app.config import settings
from app.utils.constants import UploadIssueReason
from app.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_EXTENSION = "jpg"


@dataclass
class UploadedFile:
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"
    size_bytes: Optional[int] = None   # declared size when the content was not read in full

    @property
    def size(self) -> int:
        return self.size_bytes if self.size_bytes is not None else len(self.content)


@dataclass
class UploadOutcome:
    url: str = ""
    reason: Optional[str] = None     # None when uploaded or when nothing was attached
    detail: Optional[str] = None
    filename: Optional[str] = None
    size_bytes: Optional[int] = None

    @property
    def degraded(self) -> bool:
        return self.reason is not None


class MediaUploader:
    """ImageKit client configured once per process and shared by all requests."""

    def __init__(self, private_key: str, url_endpoint: str,
                 upload_url: str = "https://upload.imagekit.io/api/v1/files/upload",
                 public_key: str = "", folder: str = "/", max_bytes: int = 20 * 1024 * 1024,
                 timeout: float = 60.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.private_key = private_key
        self.public_key = public_key
        self.url_endpoint = url_endpoint
        self.upload_url = upload_url
        self.folder = folder
        self.max_bytes = max_bytes
        self.timeout = timeout
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.private_key and self.url_endpoint)

    @classmethod
    def from_settings(cls, cfg=settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> "MediaUploader":
        if not cfg.MEDIA_CONFIGURED:
            logger.warning("[UPLOAD] ImageKit credentials not set — attachments will be skipped")
        return cls(
            private_key=cfg.IMAGEKIT_PRIVATE_KEY,
            public_key=cfg.IMAGEKIT_PUBLIC_KEY,
            url_endpoint=cfg.IMAGEKIT_URL_ENDPOINT,
            upload_url=cfg.IMAGEKIT_UPLOAD_URL,
            folder=cfg.IMAGEKIT_FOLDER,
            max_bytes=cfg.MAX_UPLOAD_BYTES,
            timeout=cfg.UPLOAD_TIMEOUT_SECONDS,
            transport=transport,
        )

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            auth=httpx.BasicAuth(self.private_key, ""),
            timeout=self.timeout,
            transport=self._transport,
        )

    @staticmethod
    def destination_name(filename: str, prefix: str, now_ms: Optional[int] = None) -> str:
        """Build `{prefix}-{millis}.{ext}`; ext falls back to jpg."""
        ext = ""
        if "." in (filename or ""):
            ext = filename.rsplit(".", 1)[1].strip()
        millis = now_ms if now_ms is not None else int(time.time() * 1000)
        return f"{prefix}-{millis}.{ext or DEFAULT_EXTENSION}"

    async def upload(self, file: Optional[UploadedFile], prefix: str,
                     client: Optional[httpx.AsyncClient] = None) -> UploadOutcome:
        if file is None or file.size == 0:
            return UploadOutcome()

        if file.size > self.max_bytes:
            logger.warning(
                f"[UPLOAD] {prefix}: file too large ({file.size} bytes) — skipped",
                extra={"attachment": prefix, "reason": UploadIssueReason.TOO_LARGE, "size_bytes": file.size},
            )
            return UploadOutcome(reason=UploadIssueReason.TOO_LARGE,
                                 detail=f"{file.size} bytes exceeds {self.max_bytes}",
                                 filename=file.filename, size_bytes=file.size)

        if not self.configured:
            logger.warning(
                f"[UPLOAD] {prefix}: media host not configured — skipped",
                extra={"attachment": prefix, "reason": UploadIssueReason.NOT_CONFIGURED},
            )
            return UploadOutcome(reason=UploadIssueReason.NOT_CONFIGURED,
                                 filename=file.filename, size_bytes=file.size)

        if client is None:
            async with self._client() as own_client:
                return await self._send(own_client, file, prefix)
        return await self._send(client, file, prefix)

    async def _send(self, client: httpx.AsyncClient, file: UploadedFile, prefix: str) -> UploadOutcome:
        name = self.destination_name(file.filename, prefix)
        try:
            response = await client.post(
                self.upload_url,
                data={"fileName": name, "useUniqueFileName": "true", "folder": self.folder},
                files={"file": (name, file.content, file.content_type)},
            )
            if response.status_code not in (200, 201):
                logger.error(
                    f"[UPLOAD] {prefix}: media host returned HTTP {response.status_code}",
                    extra={"attachment": prefix, "reason": UploadIssueReason.UPLOAD_FAILED},
                )
                return UploadOutcome(reason=UploadIssueReason.UPLOAD_FAILED,
                                     detail=f"HTTP {response.status_code}",
                                     filename=file.filename, size_bytes=file.size)
            url = response.json().get("url") or ""
        except Exception as e:
            logger.error(
                f"[UPLOAD] {prefix}: upload failed for {file.filename}: {e}",
                extra={"attachment": prefix, "reason": UploadIssueReason.UPLOAD_FAILED},
            )
            return UploadOutcome(reason=UploadIssueReason.UPLOAD_FAILED, detail=str(e)[:500],
                                 filename=file.filename, size_bytes=file.size)

        if not url:
            logger.error(f"[UPLOAD] {prefix}: media host response had no url",
                         extra={"attachment": prefix, "reason": UploadIssueReason.NO_URL})
            return UploadOutcome(reason=UploadIssueReason.NO_URL, filename=file.filename, size_bytes=file.size)

        logger.info(f"[UPLOAD] {prefix}: stored {name} ({file.size} bytes)")
        return UploadOutcome(url=url, filename=file.filename, size_bytes=file.size)

    async def upload_all(self, items: dict) -> dict:
        """
        Upload every `{key: (file_or_None, prefix)}` concurrently over one client.
        Waits for all of them; each key resolves to its own UploadOutcome.
        """
        keys = list(items)
        async with self._client() as client:
            outcomes = await asyncio.gather(
                *(self.upload(items[k][0], items[k][1], client=client) for k in keys)
            )
        return dict(zip(keys, outcomes))


def get_media_uploader(request: Request) -> MediaUploader:
    """FastAPI dependency — the uploader built at startup (see app.main)."""
    uploader = getattr(request.app.state, "media_uploader", None)
    if uploader is None:
        uploader = MediaUploader.from_settings()
        request.app.state.media_uploader = uploader
    return uploader
