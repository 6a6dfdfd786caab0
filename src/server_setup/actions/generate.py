"""Generate Action - Render the reverse-proxy Caddyfile.

CONTRACT:
- read_only: True (writes only the local output file it is given)
- requires_backup: False
- rollback_support: N/A
- prerequisites: None
"""

from pathlib import Path

from server_setup.actions.report import ActionContract
from server_setup.config import ProxySettings
from server_setup.model.proxy import ProxyConfig
from server_setup.parser.caddyfile import CaddyfileParser


class GenerateAction:
    """Renders the Caddy routing table from ProxySettings.

    Layout:
        global block   -> ACME contact email
        site block     -> domain, cover-image matcher, two handles
    """

    CONTRACT = ActionContract(
        read_only=True,
        requires_backup=False,
        rollback_support=False,
        prerequisites=[],
    )

    def render_caddyfile(self, settings: ProxySettings) -> str:
        return (
            "{\n"
            f"\temail {{${settings.email_env}}}\n"
            "}\n"
            "\n"
            f"{{${settings.domain_env}}} {{\n"
            f"\t@cover path_regexp cover {settings.cover_pattern}\n"
            "\n"
            "\thandle @cover {\n"
            f"\t\trewrite * {settings.cover_file}\n"
            f"\t\troot * {settings.cover_root}\n"
            "\t\tfile_server\n"
            "\t}\n"
            "\n"
            "\thandle {\n"
            f"\t\treverse_proxy {settings.upstream}\n"
            "\t}\n"
            "}\n"
        )

    def build(self, settings: ProxySettings) -> ProxyConfig:
        """The routing table the rendered file describes."""
        return CaddyfileParser().parse(self.render_caddyfile(settings))

    def write_config(self, content: str, output: Path) -> None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(content, encoding="utf-8")
