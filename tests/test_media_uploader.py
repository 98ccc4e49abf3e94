"""Unit tests for the ImageKit media uploader."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import base64
import httpx
import pytest
from app.services.media_uploader import MediaUploader, UploadedFile

MB = 1024 * 1024


def make_uploader(handler, calls):
    def recording(request):
        calls.append(request)
        return handler(request)

    return MediaUploader(
        private_key="private_test_key",
        url_endpoint="https://ik.imagekit.io/demo",
        folder="/kyc",
        transport=httpx.MockTransport(recording),
    )


def ok(request):
    return httpx.Response(200, json={"url": "https://ik.imagekit.io/demo/kyc/licence.png"})


class TestDestinationName:
    def test_keeps_original_extension(self):
        assert MediaUploader.destination_name("scan.PNG", "license-front", now_ms=1700000000000) == \
            "license-front-1700000000000.PNG"

    def test_defaults_to_jpg(self):
        assert MediaUploader.destination_name("scan", "photo", now_ms=42) == "photo-42.jpg"
        assert MediaUploader.destination_name("scan.", "photo", now_ms=42) == "photo-42.jpg"

    def test_uses_last_extension(self):
        assert MediaUploader.destination_name("id.front.jpeg", "id-front", now_ms=1) == "id-front-1.jpeg"


class TestUpload:
    @pytest.mark.asyncio
    async def test_missing_file_is_not_an_issue(self):
        calls = []
        outcome = await make_uploader(ok, calls).upload(None, "photo")
        assert outcome.url == ""
        assert not outcome.degraded
        assert calls == []

    @pytest.mark.asyncio
    async def test_empty_file_is_skipped(self):
        calls = []
        outcome = await make_uploader(ok, calls).upload(UploadedFile("a.jpg", b""), "photo")
        assert outcome.url == ""
        assert not outcome.degraded
        assert calls == []

    @pytest.mark.asyncio
    async def test_oversize_file_never_reaches_network(self):
        calls = []
        big = UploadedFile("licence.jpg", b"\x00" * (25 * MB), "image/jpeg")
        outcome = await make_uploader(ok, calls).upload(big, "license-front")
        assert outcome.url == ""
        assert outcome.reason == "too_large"
        assert outcome.size_bytes == 25 * MB
        assert calls == []

    @pytest.mark.asyncio
    async def test_exactly_at_limit_is_uploaded(self):
        calls = []
        uploader = make_uploader(ok, calls)
        uploader.max_bytes = 10
        outcome = await uploader.upload(UploadedFile("a.jpg", b"x" * 10), "photo")
        assert outcome.url.startswith("https://")
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_successful_upload_returns_url(self):
        calls = []
        outcome = await make_uploader(ok, calls).upload(UploadedFile("licence.png", b"png-bytes", "image/png"),
                                                        "license-front")
        assert outcome.url == "https://ik.imagekit.io/demo/kyc/licence.png"
        assert outcome.reason is None

        request = calls[0]
        expected = "Basic " + base64.b64encode(b"private_test_key:").decode()
        assert request.headers["authorization"] == expected
        body = request.content
        assert b"license-front-" in body
        assert b".png" in body
        assert b"useUniqueFileName" in body
        assert b"png-bytes" in body

    @pytest.mark.asyncio
    async def test_http_error_degrades_to_empty(self):
        calls = []
        uploader = make_uploader(lambda r: httpx.Response(500, json={"message": "boom"}), calls)
        outcome = await uploader.upload(UploadedFile("a.jpg", b"data"), "photo")
        assert outcome.url == ""
        assert outcome.reason == "upload_failed"
        assert outcome.detail == "HTTP 500"

    @pytest.mark.asyncio
    async def test_network_exception_degrades_to_empty(self):
        def explode(request):
            raise httpx.ConnectError("no route to host", request=request)

        outcome = await make_uploader(explode, []).upload(UploadedFile("a.jpg", b"data"), "photo")
        assert outcome.url == ""
        assert outcome.reason == "upload_failed"
        assert "no route" in outcome.detail

    @pytest.mark.asyncio
    async def test_response_without_url(self):
        outcome = await make_uploader(lambda r: httpx.Response(200, json={}), []).upload(
            UploadedFile("a.jpg", b"data"), "photo")
        assert outcome.url == ""
        assert outcome.reason == "no_url"

    @pytest.mark.asyncio
    async def test_declared_size_counts_without_content(self):
        calls = []
        marker = UploadedFile("huge.jpg", b"", "image/jpeg", size_bytes=500 * MB)
        outcome = await make_uploader(ok, calls).upload(marker, "photo")
        assert outcome.reason == "too_large"
        assert outcome.size_bytes == 500 * MB
        assert calls == []

    @pytest.mark.asyncio
    async def test_unconfigured_uploader_skips_network(self):
        calls = []
        uploader = make_uploader(ok, calls)
        uploader.private_key = ""
        outcome = await uploader.upload(UploadedFile("a.jpg", b"data"), "photo")
        assert outcome.url == ""
        assert outcome.reason == "not_configured"
        assert outcome.filename == "a.jpg"
        assert calls == []


class TestUploadAll:
    @pytest.mark.asyncio
    async def test_each_attachment_resolves_independently(self):
        def handler(request):
            if b"id-back-" in request.content:
                return httpx.Response(502)
            return httpx.Response(200, json={"url": "https://ik.imagekit.io/demo/ok.jpg"})

        calls = []
        outcomes = await make_uploader(handler, calls).upload_all({
            "license_front": (UploadedFile("l.jpg", b"l"), "license-front"),
            "id_front": (UploadedFile("f.jpg", b"f"), "id-front"),
            "id_back": (UploadedFile("b.jpg", b"b"), "id-back"),
            "photo": (None, "photo"),
        })

        assert list(outcomes) == ["license_front", "id_front", "id_back", "photo"]
        assert outcomes["license_front"].url == "https://ik.imagekit.io/demo/ok.jpg"
        assert outcomes["id_front"].url == "https://ik.imagekit.io/demo/ok.jpg"
        assert outcomes["id_back"].url == ""
        assert outcomes["id_back"].reason == "upload_failed"
        assert outcomes["photo"].url == ""
        assert not outcomes["photo"].degraded
        assert len(calls) == 3
