"""Tests for the SSH and local connectors."""

from unittest.mock import MagicMock, patch

import pytest
from paramiko.ssh_exception import AuthenticationException, SSHException

from server_setup.connector import LocalConnector, SSHConfig, SSHConnector


def _channel(stdout=b"", stderr=b"", exit_code=0):
    stdin = MagicMock()
    out = MagicMock()
    out.read.return_value = stdout
    out.channel.recv_exit_status.return_value = exit_code
    err = MagicMock()
    err.read.return_value = stderr
    return stdin, out, err


@pytest.fixture
def client():
    with patch("server_setup.connector.ssh.paramiko.SSHClient") as client_cls:
        yield client_cls.return_value


def test_root_runs_commands_as_is(client):
    client.exec_command.return_value = _channel(b"0\n")
    with SSHConnector(SSHConfig(host="203.0.113.10")) as ssh:
        result = ssh.run("id -u")

    assert result.success
    assert result.stdout == "0\n"
    assert client.exec_command.call_args.args[0] == "id -u"
    client.close.assert_called_once()


def _by_command(channels, sudo_check_exit):
    """exec_command side effect: `sudo -n true` exits as given, the rest use `channels`."""

    def _exec(command, timeout=None):
        if command == "sudo -n true":
            return _channel(exit_code=sudo_check_exit)
        return channels

    return _exec


def test_sudo_password_precedes_stdin(client):
    stdin, out, err = _channel()
    client.exec_command.side_effect = _by_command((stdin, out, err), sudo_check_exit=1)
    with SSHConnector(SSHConfig(host="203.0.113.10", user="admin", password="pw")) as ssh:
        ssh.run("chpasswd", input_text="deploy:s3cret\n")

    assert client.exec_command.call_args.args[0] == "sudo -S -p '' sh -c chpasswd"
    stdin.write.assert_called_once_with("pw\ndeploy:s3cret\n")
    stdin.channel.shutdown_write.assert_called_once()


def test_nopasswd_sudo_never_sends_password(client):
    stdin, out, err = _channel()
    client.exec_command.side_effect = _by_command((stdin, out, err), sudo_check_exit=0)
    with SSHConnector(SSHConfig(host="203.0.113.10", user="ubuntu", password="hunter2")) as ssh:
        ssh.write_file("/etc/fail2ban/jail.local", "[sshd]\nenabled = true\n")

    sent = [c.args[0] for c in client.exec_command.call_args_list]
    assert sent == ["sudo -n true", "sudo -n sh -c 'tee /etc/fail2ban/jail.local >/dev/null'"]
    stdin.write.assert_called_once_with("[sshd]\nenabled = true\n")


def test_sudo_check_skipped_for_root(client):
    client.exec_command.return_value = _channel()
    with SSHConnector(SSHConfig(host="203.0.113.10", password="pw")) as ssh:
        ssh.run("id -u")

    assert [c.args[0] for c in client.exec_command.call_args_list] == ["id -u"]


def test_sudo_without_password_is_non_interactive(client):
    client.exec_command.return_value = _channel()
    with SSHConnector(SSHConfig(host="203.0.113.10", user="admin", key_path="~/.ssh/id_ed25519")) as ssh:
        ssh.run("ufw allow 22")

    assert client.exec_command.call_args.args[0] == "sudo -n sh -c 'ufw allow 22'"


def test_write_file_streams_content(client):
    stdin, out, err = _channel()
    client.exec_command.return_value = (stdin, out, err)
    with SSHConnector(SSHConfig(host="203.0.113.10")) as ssh:
        result = ssh.write_file("/etc/fail2ban/jail.local", "[sshd]\nenabled = true\n")

    assert result.success
    assert client.exec_command.call_args.args[0] == "tee /etc/fail2ban/jail.local >/dev/null"
    stdin.write.assert_called_once_with("[sshd]\nenabled = true\n")


def test_missing_file_reads_as_none(client):
    client.exec_command.return_value = _channel(stderr=b"No such file", exit_code=1)
    with SSHConnector(SSHConfig(host="203.0.113.10")) as ssh:
        assert ssh.read_file("/etc/ssh/sshd_config") is None
        assert ssh.file_exists("/root/.ssh/authorized_keys") is False


def test_channel_error_is_a_failed_command(client):
    client.exec_command.side_effect = SSHException("channel closed")
    with SSHConnector(SSHConfig(host="203.0.113.10")) as ssh:
        result = ssh.run("apt-get update -y")

    assert result.exit_code == 255
    assert "channel closed" in result.stderr


def test_auth_failure_raises_connection_error(client):
    client.connect.side_effect = AuthenticationException("bad key")
    with pytest.raises(ConnectionError):
        SSHConnector(SSHConfig(host="203.0.113.10")).connect()


def test_run_requires_connection():
    with pytest.raises(RuntimeError):
        SSHConnector(SSHConfig(host="203.0.113.10")).run("id -u")


def test_local_connector_round_trip(tmp_path):
    local = LocalConnector()
    target = tmp_path / "jail.local"

    assert local.write_file(str(target), "[sshd]\nenabled = true\n").success
    assert local.read_file(str(target)) == "[sshd]\nenabled = true\n"
    assert local.file_exists(str(target))
    assert local.dir_exists(str(tmp_path))
    assert local.read_file(str(tmp_path / "missing")) is None


def test_local_connector_run(tmp_path):
    local = LocalConnector()

    echoed = local.run("cat", input_text="hello\n")
    failed = local.run("exit 3")

    assert echoed.stdout == "hello\n"
    assert failed.exit_code == 3
    assert not failed.success
