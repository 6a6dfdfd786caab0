"""Tests for the reverse-proxy Caddyfile: rendering, parsing and routing."""

from pathlib import Path

import pytest

from server_setup.actions.generate import GenerateAction
from server_setup.config import ProxySettings
from server_setup.model.proxy import expand_placeholders
from server_setup.parser.caddyfile import CaddyfileParser

SHIPPED = Path(__file__).parent.parent / "Caddyfile"


@pytest.fixture
def proxy():
    parser = CaddyfileParser()
    config = parser.parse(SHIPPED.read_text(encoding="utf-8"))
    assert parser.errors == []
    return config


def test_rendered_default_matches_shipped_file():
    assert GenerateAction().render_caddyfile(ProxySettings()) == SHIPPED.read_text(encoding="utf-8")


def test_global_and_site_blocks(proxy):
    assert proxy.email == "{$EMAIL}"
    assert proxy.site_address == "{$DOMAIN}"
    assert proxy.matchers == {"@cover": r"^/static/media/cover\.[0-9a-f]{16,}\.jpg$"}


def test_two_routes_in_file_order(proxy):
    assert [r.kind for r in proxy.routes] == ["file_server", "reverse_proxy"]
    cover, catch_all = proxy.routes
    assert cover.matcher == "@cover"
    assert cover.rewrite == "/cover.jpg"
    assert cover.root == "/srv/cover"
    assert catch_all.matcher is None
    assert catch_all.upstream == "web:3000"


@pytest.mark.parametrize(
    "path",
    [
        "/static/media/cover.0123456789abcdef.jpg",
        "/static/media/cover.0123456789abcdef0123456789abcdef.jpg",
    ],
)
def test_cover_images_served_from_disk(proxy, path):
    route = proxy.resolve(path)
    assert route.kind == "file_server"
    assert route.local_file(path) == "/srv/cover/cover.jpg"


@pytest.mark.parametrize(
    "path",
    [
        "/",
        "/api/books",
        "/static/media/cover.0123456789abcde.jpg",  # 15 hex digits
        "/static/media/cover.0123456789ABCDEF.jpg",  # upper case
        "/static/media/cover.0123456789abcdef.png",
        "/static/media/cover.0123456789abcdef.jpg.map",
        "/other/static/media/cover.0123456789abcdef.jpg",
        "/static/media/logo.0123456789abcdef.jpg",
    ],
)
def test_everything_else_is_proxied(proxy, path):
    route = proxy.resolve(path)
    assert route.kind == "reverse_proxy"
    assert route.upstream == "web:3000"
    assert route.local_file(path) is None


def test_custom_settings_round_through_parser():
    settings = ProxySettings(upstream="app:8080", cover_root="/var/www/covers", domain_env="SITE")
    config = GenerateAction().build(settings)

    assert config.site_address == "{$SITE}"
    assert config.resolve("/").upstream == "app:8080"
    assert config.resolve("/static/media/cover.aaaaaaaaaaaaaaaa.jpg").local_file("/x") == "/var/www/covers/cover.jpg"


def test_unbalanced_braces_are_reported():
    parser = CaddyfileParser()
    parser.parse("example.com {\n\treverse_proxy web:3000\n")
    assert parser.errors == ["unclosed block(s): site"]


def test_site_level_reverse_proxy_is_a_catch_all():
    config = CaddyfileParser().parse("example.com {\n\treverse_proxy localhost:8000\n}\n")
    assert config.resolve("/anything").upstream == "localhost:8000"


def test_no_route_when_nothing_matches():
    config = CaddyfileParser().parse("example.com {\n\t@img path_regexp \\.png$\n\thandle @img {\n\t\tfile_server\n\t}\n}\n")
    assert config.resolve("/index.html") is None


def test_expand_placeholders():
    env = {"DOMAIN": "books.example.com"}
    assert expand_placeholders("{$DOMAIN}", env) == "books.example.com"
    assert expand_placeholders("{$EMAIL:ops@example.com}", env) == "ops@example.com"
    assert expand_placeholders("{$EMAIL}", env) == ""
