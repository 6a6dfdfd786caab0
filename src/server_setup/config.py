"""Configuration for server-setup.

Two concerns live here:
- SetupSettings: what gets provisioned (paths, ports, packages, proxy).
  Defaults reproduce the stock hardening run; a YAML file may override
  any field.
- ConfigManager: remote server profiles in YAML, with SSH passwords kept
  in the system keyring when one is available.
"""

import os
from pathlib import Path
from typing import Any

import keyring
import yaml
from keyring.errors import KeyringError
from pydantic import BaseModel, Field, ValidationError, field_validator

from server_setup.connector.ssh import SSHConfig
from server_setup.errors import ConfigError


class SSHSettings(BaseModel):
    config_path: str = "/etc/ssh/sshd_config"
    service: str = "ssh"
    directives: dict[str, str] = Field(
        default_factory=lambda: {
            "PermitRootLogin": "no",
            "PasswordAuthentication": "no",
            "ChallengeResponseAuthentication": "no",
        }
    )


class Fail2banSettings(BaseModel):
    jail_path: str = "/etc/fail2ban/jail.local"
    jails: dict[str, dict[str, str]] = Field(default_factory=lambda: {"sshd": {"enabled": "true"}})


class FirewallSettings(BaseModel):
    ports: list[int] = Field(default_factory=lambda: [22, 80, 443])

    @field_validator("ports")
    @classmethod
    def _valid_ports(cls, ports: list[int]) -> list[int]:
        for port in ports:
            if not 0 < port < 65536:
                raise ValueError(f"invalid port {port}")
        return ports


class DockerSettings(BaseModel):
    install_url: str = "https://get.docker.com"
    script_path: str = "/tmp/get-docker.sh"
    compose_package: str = "docker-compose-plugin"
    group: str = "docker"


class AutoUpdateSettings(BaseModel):
    periodic_path: str = "/etc/apt/apt.conf.d/20auto-upgrades"
    unattended_path: str = "/etc/apt/apt.conf.d/50unattended-upgrades"
    remove_unused_dependencies: bool = False
    mail: str | None = None


class ProxySettings(BaseModel):
    email_env: str = "EMAIL"
    domain_env: str = "DOMAIN"
    cover_pattern: str = r"^/static/media/cover\.[0-9a-f]{16,}\.jpg$"
    cover_root: str = "/srv/cover"
    cover_file: str = "/cover.jpg"
    upstream: str = "web:3000"


class SetupSettings(BaseModel):
    """Everything a provisioning run can be told."""

    admin_group: str = "sudo"
    home_base: str = "/home"
    root_authorized_keys: str = "/root/.ssh/authorized_keys"
    ssh: SSHSettings = Field(default_factory=SSHSettings)
    fail2ban: Fail2banSettings = Field(default_factory=Fail2banSettings)
    firewall: FirewallSettings = Field(default_factory=FirewallSettings)
    docker: DockerSettings = Field(default_factory=DockerSettings)
    updates: AutoUpdateSettings = Field(default_factory=AutoUpdateSettings)
    proxy: ProxySettings = Field(default_factory=ProxySettings)

    def home_of(self, username: str) -> str:
        return f"{self.home_base.rstrip('/')}/{username}"


def load_settings(path: Path | None) -> SetupSettings:
    """Load settings from a YAML file; defaults when path is None."""
    if path is None:
        return SetupSettings()
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"Cannot read settings file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping")
    try:
        return SetupSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {path}:\n{e}") from e


class ConfigManager:
    """Manages the config directory: server profiles and default settings."""

    SERVICE_ID = "server-setup"
    KEYRING_MARKER = "__keyring__"

    def __init__(self, config_dir: Path | None = None) -> None:
        if config_dir is None:
            env_config = os.getenv("SERVER_SETUP_CONFIG")
            if env_config:
                config_dir = Path(env_config).expanduser().resolve()
            else:
                config_dir = Path.home() / ".server-setup"

        self.config_dir = config_dir
        self.profiles_file = config_dir / "profiles.yaml"
        self.settings_file = config_dir / "settings.yaml"

    def _ensure_config_dir(self) -> None:
        self.config_dir.mkdir(parents=True, exist_ok=True)

    def _load_profiles(self) -> dict[str, Any]:
        if not self.profiles_file.exists():
            return {}
        try:
            with open(self.profiles_file, "r") as f:
                return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {self.profiles_file}: {e}") from e

    def _save_profiles(self, profiles: dict[str, Any]) -> None:
        """Save profiles to the YAML file, readable by the owner only."""
        self._ensure_config_dir()
        self.profiles_file.touch(mode=0o600)
        with open(self.profiles_file, "w") as f:
            yaml.safe_dump(profiles, f)

    def load_settings(self, path: Path | None = None) -> SetupSettings:
        """Explicit path wins, then <config_dir>/settings.yaml, then defaults."""
        if path is None and self.settings_file.exists():
            path = self.settings_file
        return load_settings(path)

    def add_profile(self, name: str, config: SSHConfig) -> None:
        """Add or update a server profile."""
        profiles = self._load_profiles()

        password_ref = None
        if config.password:
            try:
                keyring.set_password(self.SERVICE_ID, name, config.password)
                password_ref = self.KEYRING_MARKER
            except KeyringError:
                # No keyring backend (headless box): keep it in the 0600 file
                password_ref = config.password

        profiles[name] = {
            "host": config.host,
            "user": config.user,
            "port": config.port,
            "key_path": config.key_path,
            "use_sudo": config.use_sudo,
            "password": password_ref,
        }
        self._save_profiles(profiles)

    def get_profile(self, name: str) -> SSHConfig | None:
        """Get an SSHConfig by profile name."""
        data = self._load_profiles().get(name)
        if not data:
            return None

        password = data.get("password")
        if password == self.KEYRING_MARKER:
            try:
                password = keyring.get_password(self.SERVICE_ID, name)
            except KeyringError:
                password = None

        return SSHConfig(
            host=data["host"],
            user=data.get("user", "root"),
            port=data.get("port", 22),
            key_path=data.get("key_path"),
            use_sudo=data.get("use_sudo", True),
            password=password,
        )

    def list_profiles(self) -> dict[str, Any]:
        return self._load_profiles()

    def remove_profile(self, name: str) -> bool:
        """Remove a server profile and its keyring entry."""
        profiles = self._load_profiles()
        if name not in profiles:
            return False

        if profiles[name].get("password") == self.KEYRING_MARKER:
            try:
                keyring.delete_password(self.SERVICE_ID, name)
            except KeyringError:
                pass  # entry already gone

        del profiles[name]
        self._save_profiles(profiles)
        return True
