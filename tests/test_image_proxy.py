import httpx
import pytest

from catalog_display.error_handler import BadRequestError, UpstreamError
from catalog_display.integrations.clients.real_http.image_proxy import ImageProxyClient

DRIVE_ID = "1AbCdEfGhIj_kLmN-op"


def _proxy(handler):
    calls = []

    def recording(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return handler(request)

    return ImageProxyClient(transport=httpx.MockTransport(recording)), calls


@pytest.mark.asyncio
@pytest.mark.parametrize("bad_id", ["bad id!", "short", "", "../../etc/passwd", "ñññññññññññ"])
async def test_malformed_id_fails_without_network(bad_id):
    proxy, calls = _proxy(lambda request: httpx.Response(200))

    with pytest.raises(BadRequestError):
        await proxy.fetch_remote_image(bad_id)
    assert calls == []


@pytest.mark.asyncio
async def test_success_passes_body_and_content_type():
    proxy, calls = _proxy(lambda request: httpx.Response(200, content=b"\x89PNG", headers={"content-type": "image/png"}))

    image = await proxy.fetch_remote_image(DRIVE_ID)

    assert image.content == b"\x89PNG"
    assert image.content_type == "image/png"
    assert str(calls[0].url) == f"https://drive.google.com/uc?export=view&id={DRIVE_ID}"


@pytest.mark.asyncio
async def test_missing_content_type_defaults_to_jpeg():
    proxy, _ = _proxy(lambda request: httpx.Response(200, content=b"jpg-bytes"))

    image = await proxy.fetch_remote_image(DRIVE_ID)

    assert image.content_type == "image/jpeg"


@pytest.mark.asyncio
async def test_redirects_are_followed():
    def handler(request):
        if request.url.host == "drive.google.com":
            return httpx.Response(302, headers={"location": "https://lh3.googleusercontent.com/final"})
        return httpx.Response(200, content=b"final", headers={"content-type": "image/webp"})

    proxy, calls = _proxy(handler)

    image = await proxy.fetch_remote_image(DRIVE_ID)

    assert image.content == b"final"
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_upstream_error_status():
    proxy, _ = _proxy(lambda request: httpx.Response(404))

    with pytest.raises(UpstreamError) as exc_info:
        await proxy.fetch_remote_image(DRIVE_ID)
    assert exc_info.value.code == 404


@pytest.mark.asyncio
async def test_transport_failure_is_upstream_error():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    proxy, _ = _proxy(handler)

    with pytest.raises(UpstreamError):
        await proxy.fetch_remote_image(DRIVE_ID)
