"""Tests for settings loading and server profiles."""

from unittest.mock import patch

import pytest
from keyring.errors import NoKeyringError

from server_setup.config import ConfigManager, SetupSettings, load_settings
from server_setup.connector.ssh import SSHConfig
from server_setup.errors import ConfigError


def test_defaults():
    settings = SetupSettings()
    assert settings.firewall.ports == [22, 80, 443]
    assert settings.admin_group == "sudo"
    assert settings.home_of("deploy") == "/home/deploy"
    assert settings.proxy.upstream == "web:3000"


def test_load_settings_none_gives_defaults():
    assert load_settings(None) == SetupSettings()


def test_load_settings_overrides(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("admin_group: wheel\nfirewall:\n  ports: [22, 8443]\nupdates:\n  mail: root\n")

    settings = load_settings(path)

    assert settings.admin_group == "wheel"
    assert settings.firewall.ports == [22, 8443]
    assert settings.updates.mail == "root"
    assert settings.ssh.service == "ssh"


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("")
    assert load_settings(path) == SetupSettings()


@pytest.mark.parametrize(
    "text",
    [
        "firewall: [unclosed\n",
        "- just\n- a list\n",
        "firewall:\n  ports: [70000]\n",
        "firewall:\n  ports: http\n",
    ],
)
def test_bad_settings_raise_config_error(tmp_path, text):
    path = tmp_path / "settings.yaml"
    path.write_text(text)
    with pytest.raises(ConfigError):
        load_settings(path)


def test_unreadable_settings(tmp_path):
    with pytest.raises(ConfigError):
        load_settings(tmp_path / "missing.yaml")


def test_config_dir_from_env(tmp_path, monkeypatch):
    monkeypatch.setenv("SERVER_SETUP_CONFIG", str(tmp_path))
    assert ConfigManager().config_dir == tmp_path.resolve()


def test_manager_prefers_settings_file(tmp_path):
    (tmp_path / "settings.yaml").write_text("admin_group: wheel\n")
    mgr = ConfigManager(tmp_path)

    assert mgr.load_settings().admin_group == "wheel"


def test_profile_password_goes_to_keyring(tmp_path):
    mgr = ConfigManager(tmp_path)
    with patch("server_setup.config.keyring") as kr:
        kr.get_password.return_value = "s3cret"
        mgr.add_profile("web1", SSHConfig(host="203.0.113.10", password="s3cret"))
        cfg = mgr.get_profile("web1")

    kr.set_password.assert_called_once_with("server-setup", "web1", "s3cret")
    assert "s3cret" not in mgr.profiles_file.read_text()
    assert cfg.host == "203.0.113.10"
    assert cfg.user == "root"
    assert cfg.password == "s3cret"


def test_profile_without_keyring_backend(tmp_path):
    mgr = ConfigManager(tmp_path)
    with patch("server_setup.config.keyring.set_password", side_effect=NoKeyringError()):
        mgr.add_profile("web1", SSHConfig(host="203.0.113.10", password="s3cret"))

    assert mgr.get_profile("web1").password == "s3cret"


def test_remove_profile(tmp_path):
    mgr = ConfigManager(tmp_path)
    mgr.add_profile("web1", SSHConfig(host="203.0.113.10", key_path="~/.ssh/id_ed25519"))

    assert list(mgr.list_profiles()) == ["web1"]
    assert mgr.remove_profile("web1") is True
    assert mgr.remove_profile("web1") is False
    assert mgr.get_profile("web1") is None
