"""Connector package - Command execution on the target host.

Both connectors expose the same surface: run, run_interactive,
read_file, write_file, file_exists, dir_exists and supports_tty.
"""

from typing import Protocol

from server_setup.connector.local import LocalConnector
from server_setup.connector.ssh import CommandResult, SSHConfig, SSHConnector


class Connector(Protocol):
    """Structural type shared by LocalConnector and SSHConnector."""

    target: str

    @property
    def supports_tty(self) -> bool: ...

    def run(self, command: str, *, input_text: str | None = None, timeout: float | None = None) -> CommandResult: ...

    def run_interactive(self, command: str) -> int: ...

    def read_file(self, path: str) -> str | None: ...

    def write_file(self, path: str, content: str) -> CommandResult: ...

    def file_exists(self, path: str) -> bool: ...

    def dir_exists(self, path: str) -> bool: ...


__all__ = ["CommandResult", "Connector", "LocalConnector", "SSHConfig", "SSHConnector"]
