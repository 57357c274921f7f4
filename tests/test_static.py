# File: tests/test_static.py
"""Static extraction: tier ordering, resolution rules and network failure handling."""
from __future__ import annotations

import asyncio

import pytest
from aiohttp import web

from logo_scout.config import ScoutConfig
from logo_scout.errors import NetworkFailure, UnsupportedContent
from logo_scout.extractor.fetcher import Fetcher, open_session
from logo_scout.extractor.models import CandidateKind
from logo_scout.extractor.static import collect_candidates, extract_static, find_logo

BASE = "https://example.com/"


def page(head: str = "", body: str = "") -> str:
    return f"<html><head>{head}</head><body>{body}</body></html>"


# --------------------------------------------------------------------------- #
#                               find_logo (pure)                              #
# --------------------------------------------------------------------------- #


def test_apple_touch_icon_wins_over_later_tags():
    html = page(
        '<link rel="icon" href="/icon.png">'
        '<meta property="og:image" content="/og.png">'
        '<link rel="apple-touch-icon" href="/apple.png">'
    )
    found = find_logo(html, BASE)
    assert found.kind is CandidateKind.APPLE_ICON
    assert found.url == "https://example.com/apple.png"


def test_og_image_before_generic_icon():
    html = page('<link rel="icon" href="/icon.png"><meta property="og:image" content="https://cdn.example.net/og.jpg">')
    found = find_logo(html, BASE)
    assert found.kind is CandidateKind.OG_IMAGE
    assert found.url == "https://cdn.example.net/og.jpg"


def test_ico_metadata_is_skipped():
    html = page('<link rel="apple-touch-icon" href="/favicon.ico"><link rel="icon" href="//static.example.com/i.png">')
    found = find_logo(html, BASE)
    assert found.kind is CandidateKind.FAVICON
    assert found.url == "https://static.example.com/i.png"


def test_shortcut_icon_is_not_a_tier1_signal():
    html = page('<link rel="shortcut icon" href="/brand.png">')
    assert find_logo(html, BASE) is None


def test_data_uri_metadata_falls_through_to_tier2():
    html = page(
        '<meta property="og:image" content="data:image/png;base64,AAAA">',
        '<img class="site-Logo" src="/img/brand.svg">',
    )
    found = find_logo(html, BASE)
    assert found.kind is CandidateKind.CLASS_HEURISTIC
    assert found.url == "https://example.com/img/brand.svg"


@pytest.mark.parametrize(
    "img",
    [
        '<img class="header LOGO" src="a.png">',
        '<img id="main-logo" src="a.png">',
        '<img alt="ACME Logo" src="a.png">',
        '<img src="/assets/logo-dark.png">',
    ],
)
def test_tier2_matches_class_id_alt_or_src(img):
    html = page(body='<img src="/banner.jpg">' + img)
    found = find_logo(html, "https://example.com/shop/")
    assert found.kind is CandidateKind.CLASS_HEURISTIC
    assert found.url.startswith("https://example.com/")
    assert "banner" not in found.url


def test_tier2_skips_ico_and_takes_first_qualifying():
    html = page(body='<img class="logo" src="/logo.ico"><img class="logo" src="/first.png"><img class="logo" src="/second.png">')
    assert find_logo(html, BASE).url == "https://example.com/first.png"


def test_home_link_image_is_last_resort():
    html = page(body='<a href="/about"><img src="/team.png"></a><a href="/"><img src="/brand.png"></a>')
    found = find_logo(html, BASE)
    assert found.kind is CandidateKind.HOME_LINK
    assert found.url == "https://example.com/brand.png"


def test_home_link_by_absolute_final_url():
    html = page(body='<a href="https://example.com"><img src="img/mark.webp"></a>')
    found = find_logo(html, "https://example.com/")
    assert found.kind is CandidateKind.HOME_LINK
    assert found.url == "https://example.com/img/mark.webp"


def test_nothing_found():
    assert find_logo(page(body="<p>hello</p><img src='/photo.jpg'>"), BASE) is None


def test_collect_candidates_lists_every_tier_in_order():
    html = page(
        '<link rel="apple-touch-icon" href="/apple.png">'
        '<link rel="icon" href="/favicon.ico">'
        '<link rel="shortcut icon" href="/short.png">',
        '<img class="logo" src="data:image/gif;base64,R0lG">'
        '<a href="/"><img src="/home.png"></a>',
    )
    found = collect_candidates(html, BASE)
    assert [c.kind for c in found] == [
        CandidateKind.APPLE_ICON,
        CandidateKind.FAVICON,
        CandidateKind.SHORTCUT_ICON,
        CandidateKind.CLASS_HEURISTIC,
        CandidateKind.HOME_LINK,
    ]
    assert found[1].url == "https://example.com/favicon.ico"
    assert found[3].url is None


# --------------------------------------------------------------------------- #
#                         extract_static against a server                     #
# --------------------------------------------------------------------------- #


@pytest.mark.asyncio()
async def test_extract_static_resolves_against_redirect_target(serve_app, basic_config):
    app = web.Application()

    async def root(_):
        raise web.HTTPFound("/en/home/")

    async def home(_):
        return web.Response(text=page('<meta property="og:image" content="media/og.png">'), content_type="text/html")

    app.router.add_get("/", root)
    app.router.add_get("/en/home/", home)
    base = await serve_app(app)

    async with open_session(basic_config) as session:
        found = await extract_static(base + "/", Fetcher(session, basic_config))

    assert found.url == f"{base}/en/home/media/og.png"


@pytest.mark.asyncio()
async def test_404_page_with_head_is_still_inspected(serve_app, basic_config):
    app = web.Application()

    async def missing(_):
        html = page('<link rel="apple-touch-icon" href="/touch.png">', "<h1>Not found</h1>")
        return web.Response(text=html, status=404, content_type="text/html")

    app.router.add_get("/", missing)
    base = await serve_app(app)

    async with open_session(basic_config) as session:
        found = await extract_static(base, Fetcher(session, basic_config))

    assert found.url == f"{base}/touch.png"


@pytest.mark.asyncio()
async def test_404_without_tags_yields_none(serve_app, basic_config):
    app = web.Application()

    async def missing(_):
        return web.Response(text="<html><body>Not Found</body></html>", status=404, content_type="text/html")

    app.router.add_get("/", missing)
    base = await serve_app(app)

    async with open_session(basic_config) as session:
        assert await extract_static(base, Fetcher(session, basic_config)) is None


@pytest.mark.asyncio()
async def test_server_error_is_network_failure(serve_app, basic_config):
    app = web.Application()

    async def broken(_):
        return web.Response(text=page('<link rel="apple-touch-icon" href="/x.png">'), status=503, content_type="text/html")

    app.router.add_get("/", broken)
    base = await serve_app(app)

    async with open_session(basic_config) as session:
        fetcher = Fetcher(session, basic_config)
        with pytest.raises(NetworkFailure):
            await fetcher.fetch_document(base)
        assert await extract_static(base, fetcher) is None


@pytest.mark.asyncio()
async def test_non_html_body_is_rejected(serve_app, basic_config):
    app = web.Application()

    async def binary(_):
        return web.Response(body=b"\x89PNG\r\n" + b"\0" * 50, content_type="image/png")

    app.router.add_get("/", binary)
    base = await serve_app(app)

    async with open_session(basic_config) as session:
        fetcher = Fetcher(session, basic_config)
        with pytest.raises(UnsupportedContent):
            await fetcher.fetch_document(base)
        assert await extract_static(base, fetcher) is None


@pytest.mark.asyncio()
async def test_redirect_loop_and_refused_connection(serve_app, basic_config, unused_tcp_port):
    app = web.Application()

    async def loop(request):
        raise web.HTTPFound("/loop?n=" + str(int(request.query.get("n", "0")) + 1))

    app.router.add_get("/loop", loop)
    base = await serve_app(app)

    async with open_session(basic_config) as session:
        fetcher = Fetcher(session, basic_config)
        assert await extract_static(base + "/loop", fetcher) is None
        assert await extract_static(f"http://127.0.0.1:{unused_tcp_port}/", fetcher) is None


@pytest.mark.asyncio()
async def test_slow_site_times_out(serve_app):
    cfg = ScoutConfig(http_timeout=0.3, dynamic_fallback=False)
    app = web.Application()

    async def slow(_):
        await asyncio.sleep(1)
        return web.Response(text=page('<link rel="icon" href="/i.png">'), content_type="text/html")

    app.router.add_get("/", slow)
    base = await serve_app(app)

    async with open_session(cfg) as session:
        fetcher = Fetcher(session, cfg)
        with pytest.raises(NetworkFailure) as info:
            await fetcher.fetch_document(base)
        assert info.value.reason == "timeout"
