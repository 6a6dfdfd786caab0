"""SSH Connector - Provision a remote server over SSH.

This module handles all SSH communication with the target host.
Commands run through sudo unless the profile logs in as root, and
file writes are streamed over stdin into `tee` so no content ever
passes through shell quoting.
"""

import logging
import shlex
from dataclasses import dataclass, field
from pathlib import Path

import paramiko
from paramiko.ssh_exception import AuthenticationException, SSHException

logger = logging.getLogger(__name__)


@dataclass
class SSHConfig:
    """SSH connection configuration."""

    host: str
    user: str = "root"
    port: int = 22
    key_path: str | None = None
    password: str | None = None  # Fallback, prefer keys
    use_sudo: bool = True
    timeout: int = 30
    command_timeout: int = 1800


@dataclass
class CommandResult:
    """Result of a command execution."""

    command: str
    stdout: str
    stderr: str
    exit_code: int
    success: bool = field(init=False)

    def __post_init__(self) -> None:
        self.success = self.exit_code == 0


class SSHConnector:
    """SSH connection manager for remote provisioning.

    Example:
        >>> config = SSHConfig(host="203.0.113.10", user="root")
        >>> with SSHConnector(config) as ssh:
        ...     result = ssh.run("id -u")
        ...     print(result.stdout)
    """

    # passwd needs a real terminal; remote passwords go through chpasswd
    supports_tty = False

    def __init__(self, config: SSHConfig) -> None:
        self.config = config
        self._client: paramiko.SSHClient | None = None
        self._sudo_password = False

    @property
    def target(self) -> str:
        return f"{self.config.user}@{self.config.host}"

    def connect(self) -> None:
        """Establish SSH connection."""
        self._client = paramiko.SSHClient()
        self._client.set_missing_host_key_policy(paramiko.AutoAddPolicy())

        connect_kwargs: dict = {
            "hostname": self.config.host,
            "port": self.config.port,
            "username": self.config.user,
            "timeout": self.config.timeout,
        }

        # Prefer key-based authentication
        if self.config.key_path:
            key_path = Path(self.config.key_path).expanduser()
            if key_path.exists():
                connect_kwargs["key_filename"] = str(key_path)
        elif self.config.password:
            connect_kwargs["password"] = self.config.password
        logger.debug("Connecting to %s:%s", self.config.host, self.config.port)
        try:
            self._client.connect(**connect_kwargs)
        except AuthenticationException as e:
            raise ConnectionError(f"Authentication failed: {e}") from e
        except SSHException as e:
            raise ConnectionError(f"SSH error: {e}") from e

        self._sudo_password = self._sudo_needs_password()

    def disconnect(self) -> None:
        """Close SSH connection."""
        if self._client:
            self._client.close()
            self._client = None

    def __enter__(self) -> "SSHConnector":
        self.connect()
        return self

    def __exit__(self, *args: object) -> None:
        self.disconnect()

    def _sudo_needs_password(self) -> bool:
        """True when sudo will actually read a password from stdin.

        sudo -S only consumes stdin when it prompts, so with NOPASSWD or a
        cached ticket the password line would reach the command itself.
        """
        if not (self.config.use_sudo and self.config.user != "root" and self.config.password):
            return False
        result = self._exec("sudo -n true", "sudo -n true", "", self.config.timeout)
        logger.debug("sudo -n true on %s exited %s", self.target, result.exit_code)
        return not result.success

    def _wrap(self, command: str, use_sudo: bool | None) -> tuple[str, str]:
        """Return the command line to send and a prefix for its stdin."""
        if use_sudo is None:
            use_sudo = self.config.use_sudo
        if use_sudo and self.config.user != "root":
            if self._sudo_password and self.config.password:
                # sudo -S consumes the first stdin line as the password
                return f"sudo -S -p '' sh -c {shlex.quote(command)}", self.config.password + "\n"
            return f"sudo -n sh -c {shlex.quote(command)}", ""
        return command, ""

    def run(
        self,
        command: str,
        *,
        input_text: str | None = None,
        use_sudo: bool | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        """Execute a command on the remote server.

        Args:
            command: Shell command line to execute.
            input_text: Optional text written to the command's stdin.
            use_sudo: Whether to use sudo. Defaults to config setting.
            timeout: Command timeout in seconds. Defaults to the
                profile's provisioning command timeout.

        Returns:
            CommandResult with stdout, stderr, and exit_code.
        """
        if not self._client:
            raise RuntimeError("Not connected. Use 'with SSHConnector(config):' context.")

        wrapped, stdin_prefix = self._wrap(command, use_sudo)
        cmd_timeout = timeout if timeout is not None else self.config.command_timeout
        logger.debug("SSH %s: %s", self.target, command)
        return self._exec(command, wrapped, stdin_prefix + (input_text or ""), cmd_timeout)

    def _exec(self, command: str, wrapped: str, payload: str, timeout: float) -> CommandResult:
        try:
            stdin, stdout, stderr = self._client.exec_command(wrapped, timeout=timeout)
            if payload:
                stdin.write(payload)
            stdin.channel.shutdown_write()
            exit_code = stdout.channel.recv_exit_status()

            return CommandResult(
                command=command,
                stdout=stdout.read().decode("utf-8", errors="replace"),
                stderr=stderr.read().decode("utf-8", errors="replace"),
                exit_code=exit_code,
            )
        except (SSHException, OSError) as e:
            # Timeouts and dropped channels surface as a failed command
            return CommandResult(
                command=command,
                stdout="",
                stderr=f"SSH Execution Error: {e}",
                exit_code=255,
            )

    def run_interactive(self, command: str) -> int:
        raise NotImplementedError("Interactive commands need a local terminal")

    def read_file(self, path: str) -> str | None:
        """Read file contents from the remote server, None if missing."""
        result = self.run(f"cat {shlex.quote(path)}", timeout=self.config.timeout)
        if result.success:
            return result.stdout
        return None

    def file_exists(self, path: str) -> bool:
        result = self.run(f"test -f {shlex.quote(path)}", timeout=self.config.timeout)
        return result.success

    def dir_exists(self, path: str) -> bool:
        result = self.run(f"test -d {shlex.quote(path)}", timeout=self.config.timeout)
        return result.success

    def write_file(self, path: str, content: str) -> CommandResult:
        """Replace a remote file's content.

        ⚠️  WARNING: This modifies the server!
        """
        return self.run(f"tee {shlex.quote(path)} >/dev/null", input_text=content)
