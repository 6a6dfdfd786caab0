"""Reverse-proxy routing table model."""

import os
import posixpath
import re
from dataclasses import dataclass, field

_PLACEHOLDER_RE = re.compile(r"\{\$([A-Za-z_][A-Za-z0-9_]*)(?::([^}]*))?\}")


def expand_placeholders(value: str, env: dict[str, str] | None = None) -> str:
    """Substitute Caddy `{$VAR}` / `{$VAR:default}` placeholders."""
    source = os.environ if env is None else env

    def _sub(match: re.Match[str]) -> str:
        return source.get(match.group(1), match.group(2) or "")

    return _PLACEHOLDER_RE.sub(_sub, value)


@dataclass
class ProxyRoute:
    """One `handle` block (or a bare site-level directive set)."""

    matcher: str | None = None  # "@cover", None for catch-all
    pattern: str | None = None
    rewrite: str | None = None
    root: str | None = None
    file_server: bool = False
    upstream: str | None = None
    line_number: int = 0

    @property
    def kind(self) -> str:
        if self.upstream:
            return "reverse_proxy"
        if self.file_server:
            return "file_server"
        return "none"

    def matches(self, path: str) -> bool:
        if self.matcher is None:
            return True
        if self.pattern is None:
            return False
        return re.search(self.pattern, path) is not None

    def local_file(self, path: str) -> str | None:
        """Filesystem path a file_server route would serve for `path`."""
        if self.kind != "file_server" or not self.root:
            return None
        served = self.rewrite or path
        return posixpath.join(self.root, served.lstrip("/"))


@dataclass
class ProxyConfig:
    """Parsed Caddyfile: global email, one site and its routes."""

    email: str | None = None
    site_address: str | None = None
    matchers: dict[str, str] = field(default_factory=dict)
    routes: list[ProxyRoute] = field(default_factory=list)

    def resolve(self, path: str) -> ProxyRoute | None:
        """Return the route that handles `path`.

        Matched handles are tried first, in file order; the catch-all
        handle only sees what none of them took.
        """
        for route in self.routes:
            if route.matcher is not None and route.matches(path):
                return route
        return next((r for r in self.routes if r.matcher is None), None)
