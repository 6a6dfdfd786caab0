"""Tests for OperationExecutor."""

from unittest.mock import MagicMock

import pytest

from server_setup.connector.ssh import CommandResult
from server_setup.engine.executor import OperationExecutor
from server_setup.errors import CommandError
from server_setup.inputs import ScriptedInputProvider
from server_setup.model.plan import (
    Announce,
    CopyFile,
    EnsureDirectory,
    EnsureLine,
    RunCommand,
    SetDirectives,
    SetPassword,
    WriteFile,
)


def _ok(command="", stdout=""):
    return CommandResult(command=command, stdout=stdout, stderr="", exit_code=0)


def test_run_command_output_only_when_asked(mock_ssh_connector):
    mock_ssh_connector.run.return_value = _ok("ufw status", "Status: active\n")
    executor = OperationExecutor(mock_ssh_connector, ScriptedInputProvider())

    assert executor.execute(RunCommand("ufw status")) == []
    assert executor.execute(RunCommand("ufw status", show_output=True)) == ["Status: active"]


def test_failing_command_raises(mock_ssh_connector):
    mock_ssh_connector.run.return_value = CommandResult(
        command="apt-get update -y", stdout="", stderr="E: Could not get lock", exit_code=100
    )
    executor = OperationExecutor(mock_ssh_connector, ScriptedInputProvider())

    with pytest.raises(CommandError) as exc:
        executor.execute(RunCommand("apt-get update -y"))
    assert exc.value.exit_code == 100
    assert "Could not get lock" in exc.value.message


def test_announce_does_not_touch_host(mock_ssh_connector):
    seen = []
    executor = OperationExecutor(mock_ssh_connector, ScriptedInputProvider(), announce=seen.append)
    executor.execute(Announce("Installing ufw..."))

    assert seen == ["Installing ufw..."]
    mock_ssh_connector.run.assert_not_called()


def test_ensure_directory_and_copy(make_host):
    host = make_host()
    executor = OperationExecutor(host, ScriptedInputProvider())
    executor.execute(EnsureDirectory("/home/deploy/.ssh", mode=0o700, owner="deploy"))
    executor.execute(CopyFile("/root/.ssh/authorized_keys", "/home/deploy/.ssh/authorized_keys", mode=0o600, owner="deploy"))

    assert host.commands == [
        "mkdir -p /home/deploy/.ssh",
        "chmod 700 /home/deploy/.ssh",
        "chown deploy:deploy /home/deploy/.ssh",
        "cp /root/.ssh/authorized_keys /home/deploy/.ssh/authorized_keys",
        "chown deploy:deploy /home/deploy/.ssh/authorized_keys",
        "chmod 600 /home/deploy/.ssh/authorized_keys",
    ]


def test_copy_of_missing_file_fails(make_host):
    host = make_host(files={})
    executor = OperationExecutor(host, ScriptedInputProvider())
    with pytest.raises(CommandError):
        executor.execute(CopyFile("/root/.ssh/authorized_keys", "/home/deploy/.ssh/authorized_keys"))


def test_write_file_failure_raises(mock_ssh_connector):
    mock_ssh_connector.write_file.return_value = CommandResult(
        command="write /etc/fail2ban/jail.local", stdout="", stderr="Permission denied", exit_code=1
    )
    executor = OperationExecutor(mock_ssh_connector, ScriptedInputProvider())
    with pytest.raises(CommandError):
        executor.execute(WriteFile("/etc/fail2ban/jail.local", "[sshd]\nenabled = true\n"))


def test_set_directives_writes_only_on_change(make_host):
    host = make_host()
    executor = OperationExecutor(host, ScriptedInputProvider())
    op = SetDirectives("/etc/ssh/sshd_config", (("PermitRootLogin", "no"),))

    executor.execute(op)
    executor.execute(op)

    assert host.writes == ["/etc/ssh/sshd_config"]
    assert "PermitRootLogin no" in host.files["/etc/ssh/sshd_config"].splitlines()


def test_set_directives_missing_file(make_host):
    executor = OperationExecutor(make_host(files={}), ScriptedInputProvider())
    with pytest.raises(CommandError) as exc:
        executor.execute(SetDirectives("/etc/ssh/sshd_config", (("PermitRootLogin", "no"),)))
    assert exc.value.command == "read /etc/ssh/sshd_config"


def test_ensure_line_appends_once(make_host):
    host = make_host(files={"/etc/apt/apt.conf.d/50unattended-upgrades": "// stock config"})
    executor = OperationExecutor(host, ScriptedInputProvider())
    op = EnsureLine("/etc/apt/apt.conf.d/50unattended-upgrades", 'Unattended-Upgrade::Mail "ops@example.com";')

    executor.execute(op)
    executor.execute(op)

    assert host.files["/etc/apt/apt.conf.d/50unattended-upgrades"] == (
        '// stock config\nUnattended-Upgrade::Mail "ops@example.com";\n'
    )
    assert len(host.writes) == 1


def test_password_via_chpasswd_without_tty(make_host):
    host = make_host()
    inputs = ScriptedInputProvider(password="hunter2")
    OperationExecutor(host, inputs).execute(SetPassword("deploy"))

    assert host.stdin == {"chpasswd": "deploy:hunter2\n"}
    assert inputs.asked == ["password"]


def test_password_via_passwd_with_tty():
    connector = MagicMock()
    connector.supports_tty = True
    connector.run_interactive.return_value = 0
    inputs = ScriptedInputProvider(password="unused")

    OperationExecutor(connector, inputs).execute(SetPassword("deploy"))

    connector.run_interactive.assert_called_once_with("passwd deploy")
    assert inputs.asked == []


def test_passwd_failure_raises():
    connector = MagicMock()
    connector.supports_tty = True
    connector.run_interactive.return_value = 10

    with pytest.raises(CommandError) as exc:
        OperationExecutor(connector, ScriptedInputProvider()).execute(SetPassword("deploy"))
    assert exc.value.exit_code == 10
