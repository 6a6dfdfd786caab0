"""Pytest configuration and fixtures for server-setup tests."""

import shlex
from unittest.mock import MagicMock

import pytest
from rich.console import Console

from server_setup.actions.report import ReportAction
from server_setup.connector.ssh import CommandResult, SSHConnector

ROOT_KEYS = "ssh-ed25519 AAAAC3NzaC1lZDI1NTE5AAAAIOperator operator@laptop\n"

SAMPLE_SSHD_CONFIG = """\
Include /etc/ssh/sshd_config.d/*.conf

Port 22
#PermitRootLogin prohibit-password
#PasswordAuthentication yes
KbdInteractiveAuthentication no
ChallengeResponseAuthentication yes
UsePAM yes
X11Forwarding yes
"""


class FakeHost:
    """In-memory stand-in for a Debian host behind a connector.

    Understands just enough of the provisioning commands to keep
    users, groups, files and ufw rules consistent across a run.
    """

    target = "fake-host"
    supports_tty = False

    def __init__(self, *, uid="0", files=None, users=None, fail_on=()):
        self.uid = uid
        self.files = {
            "/root/.ssh/authorized_keys": ROOT_KEYS,
            "/etc/ssh/sshd_config": SAMPLE_SSHD_CONFIG,
        }
        if files is not None:
            self.files = dict(files)
        self.users = {name: list(groups) for name, groups in (users or {}).items()}
        self.fail_on = tuple(fail_on)
        self.commands: list[str] = []
        self.stdin: dict[str, str] = {}
        self.writes: list[str] = []
        self.ufw_ports: list[int] = []
        self.ufw_active = False
        self.ufw_installed = False

    def __enter__(self):
        return self

    def __exit__(self, *args):
        return None

    @property
    def mutations(self) -> list[str]:
        """Commands that change the host, plus file writes."""
        read_only = ("id ", "test ", "which ", "ufw status", "systemctl is-active")
        return [c for c in self.commands if not c.startswith(read_only)] + [f"write {p}" for p in self.writes]

    def _ufw_status(self) -> str:
        if not self.ufw_active:
            return "Status: inactive\n"
        lines = ["Status: active", "", "To                         Action      From", "--                         ------      ----"]
        lines += [f"{p:<27}ALLOW       Anywhere" for p in self.ufw_ports]
        lines += [f"{str(p) + ' (v6)':<27}ALLOW       Anywhere (v6)" for p in self.ufw_ports]
        return "\n".join(lines) + "\n"

    def run(self, command, *, input_text=None, timeout=None):
        self.commands.append(command)
        if input_text is not None:
            self.stdin[command] = input_text
        if any(pattern in command for pattern in self.fail_on):
            return CommandResult(command=command, stdout="", stderr="simulated failure", exit_code=100)

        argv = shlex.split(command)
        out, code = "", 0
        if argv[:2] == ["id", "-u"]:
            out = f"{self.uid}\n"
        elif argv[:2] == ["id", "--"]:
            code = 0 if argv[2] in self.users else 1
        elif argv[:2] == ["id", "-nG"]:
            user = argv[-1]
            if user in self.users:
                out = " ".join([user, *self.users[user]]) + "\n"
            else:
                code = 1
        elif argv[0] == "adduser":
            self.users[argv[-1]] = []
        elif argv[:2] == ["usermod", "-aG"]:
            if argv[3] not in self.users:
                code = 6
            elif argv[2] not in self.users[argv[3]]:
                self.users[argv[3]].append(argv[2])
        elif argv[0] == "cp":
            if argv[1] in self.files:
                self.files[argv[2]] = self.files[argv[1]]
            else:
                code = 1
        elif "apt-get" in argv and "ufw" in argv:
            self.ufw_installed = True
        elif argv[:2] == ["ufw", "allow"]:
            if int(argv[2]) not in self.ufw_ports:
                self.ufw_ports.append(int(argv[2]))
        elif argv[:3] == ["ufw", "--force", "enable"]:
            self.ufw_active = True
        elif argv[:2] == ["ufw", "status"]:
            out = self._ufw_status()
        elif argv[0] == "which":
            code = 0 if argv[1] == "ufw" and self.ufw_installed else 1
        elif argv[:2] == ["systemctl", "is-active"]:
            out = "active\n"
        return CommandResult(command=command, stdout=out, stderr="", exit_code=code)

    def run_interactive(self, command):
        raise AssertionError("FakeHost has no terminal")

    def read_file(self, path):
        return self.files.get(path)

    def write_file(self, path, content):
        self.writes.append(path)
        self.files[path] = content
        return CommandResult(command=f"write {path}", stdout="", stderr="", exit_code=0)

    def file_exists(self, path):
        return path in self.files

    def dir_exists(self, path):
        return any(p.startswith(path.rstrip("/") + "/") for p in self.files)


@pytest.fixture
def make_host():
    """Factory for FakeHost instances."""
    return FakeHost


@pytest.fixture
def quiet_reporter():
    return ReportAction(Console(quiet=True))


@pytest.fixture
def mock_ssh_connector():
    """Create a mock SSH connector for testing."""
    connector = MagicMock(spec=SSHConnector)

    # Default behavior: commands succeed
    connector.run.return_value = CommandResult(
        command="test",
        stdout="",
        stderr="",
        exit_code=0,
    )
    connector.file_exists.return_value = True
    connector.dir_exists.return_value = True
    connector.supports_tty = False
    return connector
