"""Local Connector - Provision the machine the tool runs on.

Same contract as SSHConnector so steps and the executor never care
where the host is. Commands run through the shell with stdout/stderr
captured; interactive commands inherit the terminal.
"""

import logging
import shlex
import subprocess
import sys
from pathlib import Path

from server_setup.connector.ssh import CommandResult

logger = logging.getLogger(__name__)


class LocalConnector:
    """Runs provisioning commands on the local host."""

    target = "localhost"

    def __init__(self, timeout: float | None = None) -> None:
        self.timeout = timeout

    @property
    def supports_tty(self) -> bool:
        return sys.stdin.isatty()

    def __enter__(self) -> "LocalConnector":
        return self

    def __exit__(self, *args: object) -> None:
        return None

    def run(
        self,
        command: str,
        *,
        input_text: str | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        """Execute a shell command line and capture its output."""
        logger.debug("CMD %s", command)
        try:
            proc = subprocess.run(
                command,
                shell=True,
                input=input_text,
                text=True,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                timeout=timeout if timeout is not None else self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            return CommandResult(command=command, stdout="", stderr=f"Timed out after {e.timeout}s", exit_code=124)

        if proc.stdout:
            logger.debug("STDOUT %s", proc.stdout.strip())
        if proc.stderr:
            logger.debug("STDERR %s", proc.stderr.strip())

        return CommandResult(
            command=command,
            stdout=proc.stdout,
            stderr=proc.stderr,
            exit_code=proc.returncode,
        )

    def run_interactive(self, command: str) -> int:
        """Run a command attached to the operator's terminal."""
        logger.debug("CMD (interactive) %s", command)
        return subprocess.run(shlex.split(command)).returncode

    def read_file(self, path: str) -> str | None:
        try:
            return Path(path).read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def file_exists(self, path: str) -> bool:
        return Path(path).is_file()

    def dir_exists(self, path: str) -> bool:
        return Path(path).is_dir()

    def write_file(self, path: str, content: str) -> CommandResult:
        """Replace a local file's content."""
        command = f"write {path}"
        try:
            Path(path).write_text(content, encoding="utf-8")
        except OSError as e:
            return CommandResult(command=command, stdout="", stderr=str(e), exit_code=1)
        return CommandResult(command=command, stdout="", stderr="", exit_code=0)
