# File: tests/test_utils.py
import pytest

from logo_scout.utils import is_ico, normalize_site_url, read_sites, resolve_url, site_root

BASE = "https://example.com/products/list.html"


@pytest.mark.parametrize(
    "reference,expected",
    [
        ("/img/logo.png", "https://example.com/img/logo.png"),
        ("logo.png", "https://example.com/products/logo.png"),
        ("../logo.png", "https://example.com/logo.png"),
        ("//cdn.example.net/l.svg", "https://cdn.example.net/l.svg"),
        ("http://other.org/a.png", "http://other.org/a.png"),
        ("  /padded.png  ", "https://example.com/padded.png"),
    ],
)
def test_resolve_url(reference, expected):
    assert resolve_url(BASE, reference) == expected


@pytest.mark.parametrize(
    "reference",
    [None, "", "   ", "data:image/png;base64,iVBOR", "DATA:image/gif;base64,R0", "javascript:void(0)", "mailto:x@y.z", "http://[::1"],
)
def test_resolve_url_rejects(reference):
    assert resolve_url(BASE, reference) is None


def test_resolve_url_is_idempotent_on_absolute_results():
    once = resolve_url(BASE, "../a/b.png?x=1")
    assert resolve_url("https://unrelated.org/", once) == once


def test_scheme_relative_under_http_base_is_forced_to_https():
    assert resolve_url("http://example.com/", "//cdn.example.com/x.png") == "https://cdn.example.com/x.png"


@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://e.com/favicon.ico", True),
        ("https://e.com/FAVICON.ICO?v=2", True),
        ("/favicon.ico#x", True),
        ("https://e.com/icon.png", False),
        ("https://e.com/ico/logo.svg", False),
    ],
)
def test_is_ico(url, expected):
    assert is_ico(url) is expected


def test_site_root():
    assert site_root("https://example.com:8443/a/b?c") == "https://example.com:8443/"


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("example.com", "https://example.com"),
        ("  'www.example.com/' ", "https://www.example.com"),
        ('"http://example.com/shop/"', "http://example.com/shop"),
        ("HTTPS://Example.com", "HTTPS://Example.com"),
        ("   ", None),
    ],
)
def test_normalize_site_url(raw, expected):
    assert normalize_site_url(raw) == expected


def test_read_sites_plain_list(tmp_path):
    path = tmp_path / "sites.txt"
    path.write_text("example.com\n\nhttps://example.org/\nexample.com\n", encoding="utf-8")
    assert read_sites(path) == ["https://example.com", "https://example.org"]


def test_read_sites_csv_with_header(tmp_path):
    path = tmp_path / "sites.csv"
    path.write_text("\ufeffdomain,rank\nalpha.com,1\n\"beta.net\",2\n", encoding="utf-8")
    assert read_sites(path) == ["https://alpha.com", "https://beta.net"]


def test_read_sites_header_only_skipped_on_first_row(tmp_path):
    path = tmp_path / "sites.txt"
    path.write_text("alpha.com\nsite\n", encoding="utf-8")
    assert read_sites(path) == ["https://alpha.com", "https://site"]


def test_read_sites_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_sites(tmp_path / "nope.txt")
