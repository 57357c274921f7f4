# File: tests/conftest.py
import io
import random
from typing import Awaitable, Callable, List

import pytest
import pytest_asyncio
from aiohttp import web
from PIL import Image

from logo_scout.config import ScoutConfig
from logo_scout.errors import BrowserUnavailable
from logo_scout.extractor.dynamic import RenderEngine
from logo_scout.models import Method, SiteRecord


def pytest_configure(config):
    config.addinivalue_line("markers", "browser: needs a launchable headless Chromium (skipped otherwise)")


def _encode(img: Image.Image, fmt: str) -> bytes:
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture()
def gradient_bmp() -> Callable[[bool], bytes]:
    """
    Horizontal grayscale ramp saved as an uncompressed BMP (well above the size floor).
    ``descending=True`` goes from white on the left to black on the right.
    """
    def _make(descending: bool = True) -> bytes:
        width, height = 288, 64
        row = bytes(int(x * 255 / (width - 1)) for x in range(width))
        if descending:
            row = row[::-1]
        img = Image.frombytes("L", (width, height), row * height).convert("RGB")
        return _encode(img, "BMP")

    return _make


@pytest.fixture()
def noise_png() -> Callable[[int], bytes]:
    """Seeded random RGB noise as PNG; noise does not compress, so the file stays large."""
    def _make(seed: int = 0) -> bytes:
        rnd = random.Random(seed)
        width, height = 48, 48
        data = bytes(rnd.randrange(256) for _ in range(width * height * 3))
        return _encode(Image.frombytes("RGB", (width, height), data), "PNG")

    return _make


@pytest.fixture()
def split_images() -> dict:
    """
    Two encodings of the same logo: left half white, right half black.
    One is opaque RGB, the other leaves the left half fully transparent.
    """
    width, height = 288, 64
    opaque = Image.new("RGB", (width, height), (255, 255, 255))
    opaque.paste((0, 0, 0), (width // 2, 0, width, height))
    transparent = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    transparent.paste((0, 0, 0, 255), (width // 2, 0, width, height))
    return {"opaque": _encode(opaque, "BMP"), "transparent": _encode(transparent, "TIFF")}


@pytest.fixture()
def basic_config() -> ScoutConfig:
    """Fast settings for tests against local servers, without the browser fallback."""
    return ScoutConfig(
        concurrency=4,
        http_timeout=2.0,
        hash_timeout=5.0,
        render_timeout=2.0,
        dynamic_fallback=False,
        progress_every=1,
    )


@pytest.fixture()
def make_record() -> Callable[..., SiteRecord]:
    def _make(site: str, hash_value: int, method: Method = Method.STATIC_TIER1) -> SiteRecord:
        return SiteRecord(
            site=f"https://{site}",
            logo_url=f"https://{site}/logo.png",
            hash=f"{hash_value:016x}",
            method=method,
        )

    return _make


@pytest_asyncio.fixture
async def serve_app(unused_tcp_port_factory) -> Callable[[web.Application], Awaitable[str]]:
    """Start aiohttp applications on free ports; return their base URLs; clean up afterwards."""
    runners: List[web.AppRunner] = []

    async def _serve(app: web.Application) -> str:
        port = unused_tcp_port_factory()
        runner = web.AppRunner(app)
        await runner.setup()
        await web.TCPSite(runner, "127.0.0.1", port).start()
        runners.append(runner)
        return f"http://127.0.0.1:{port}"

    yield _serve
    for runner in runners:
        await runner.cleanup()


@pytest_asyncio.fixture
async def chromium():
    """A real headless Chromium; tests using it are skipped where it cannot be launched."""
    engine = RenderEngine()
    try:
        browser = await engine.__aenter__()
    except BrowserUnavailable as exc:
        pytest.skip(f"headless Chromium unavailable: {exc}")
    yield browser
    await engine.close()
