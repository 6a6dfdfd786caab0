"""Caddyfile Parser.

Understands the subset of Caddyfile syntax the shipped reverse-proxy
config uses: a global options block, one site block, named
`path_regexp` matchers and `handle` blocks containing `rewrite`,
`root`, `file_server` and `reverse_proxy`.

A line opens a block when it ends with `{` and closes one when it is
exactly `}`. Braces elsewhere on a line (placeholders, regex
quantifiers) are content.
"""

import re
import shlex

from server_setup.model.proxy import ProxyConfig, ProxyRoute


class CaddyfileParser:
    """Parser for the reverse-proxy Caddyfile."""

    MATCHER_RE = re.compile(r"^(@\w+)\s+(\w+)\s+(.+)$")

    def __init__(self) -> None:
        self.errors: list[str] = []

    def parse(self, text: str) -> ProxyConfig:
        config = ProxyConfig()
        stack: list[str] = []
        current: ProxyRoute | None = None
        site_route: ProxyRoute | None = None

        for line_num, raw in enumerate(text.splitlines(), start=1):
            line = raw.strip()
            if not line or line.startswith("#"):
                continue

            if line == "}":
                if not stack:
                    self.errors.append(f"line {line_num}: unbalanced '}}'")
                    continue
                closed = stack.pop()
                if closed == "handle" and current is not None:
                    config.routes.append(current)
                    current = None
                elif closed == "site" and site_route is not None and site_route.kind != "none":
                    config.routes.append(site_route)
                continue

            if line.endswith("{"):
                head = line[:-1].strip()
                if not stack and not head:
                    stack.append("global")
                elif not stack:
                    config.site_address = head
                    site_route = ProxyRoute(line_number=line_num)
                    stack.append("site")
                elif stack[-1] == "site" and head.split()[0] == "handle":
                    parts = head.split()
                    matcher = parts[1] if len(parts) > 1 else None
                    current = ProxyRoute(
                        matcher=matcher,
                        pattern=config.matchers.get(matcher) if matcher else None,
                        line_number=line_num,
                    )
                    stack.append("handle")
                else:
                    stack.append(head.split()[0])
                continue

            context = stack[-1] if stack else None
            if context == "global":
                parts = line.split(None, 1)
                if parts[0] == "email" and len(parts) == 2:
                    config.email = parts[1]
            elif context == "site" and line.startswith("@"):
                self._parse_matcher(line, line_num, config)
            elif context == "handle" and current is not None:
                self._parse_directive(line, current)
            elif context == "site" and site_route is not None:
                self._parse_directive(line, site_route)

        if stack:
            self.errors.append(f"unclosed block(s): {', '.join(stack)}")
        return config

    def _parse_matcher(self, line: str, line_num: int, config: ProxyConfig) -> None:
        match = self.MATCHER_RE.match(line)
        if not match:
            self.errors.append(f"line {line_num}: cannot parse matcher")
            return
        name, kind, args = match.groups()
        if kind != "path_regexp":
            self.errors.append(f"line {line_num}: unsupported matcher type {kind}")
            return
        parts = args.split()
        # path_regexp [name] <regexp>
        config.matchers[name] = parts[-1]

    def _parse_directive(self, line: str, route: ProxyRoute) -> None:
        parts = shlex.split(line)
        directive, args = parts[0], parts[1:]
        if directive == "rewrite" and args:
            route.rewrite = args[-1]
        elif directive == "root" and args:
            route.root = args[-1]
        elif directive == "file_server":
            route.file_server = True
        elif directive == "reverse_proxy" and args:
            route.upstream = args[-1]
