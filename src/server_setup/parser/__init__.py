"""Parser package - Structures raw text from the host and the repo.

Parsers do NOT run commands; they rewrite or read text handed to them.
"""

from server_setup.parser.caddyfile import CaddyfileParser
from server_setup.parser.sshd_config import read_directives, set_directives
from server_setup.parser.ufw import allowed_ports, parse_status

__all__ = ["CaddyfileParser", "allowed_ports", "parse_status", "read_directives", "set_directives"]
