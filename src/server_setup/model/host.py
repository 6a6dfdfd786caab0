"""Host posture - Read-only snapshot of what provisioning left behind."""

from dataclasses import dataclass, field


@dataclass
class SSHPosture:
    """Effective sshd settings (lower-cased values)."""

    permit_root_login: str | None = None
    password_authentication: str | None = None
    challenge_response_authentication: str | None = None
    source: str = "unknown"  # "sshd -T" or the config file path


@dataclass
class FirewallPosture:
    """ufw state."""

    installed: bool = False
    active: bool | None = None
    rules: list[str] = field(default_factory=list)
    allowed_ports: list[int] = field(default_factory=list)


@dataclass
class AccountPosture:
    """The provisioned account."""

    username: str
    exists: bool = False
    groups: list[str] = field(default_factory=list)
    has_authorized_keys: bool = False


@dataclass
class HostPosture:
    """Everything `check` looks at."""

    ssh: SSHPosture = field(default_factory=SSHPosture)
    firewall: FirewallPosture = field(default_factory=FirewallPosture)
    account: AccountPosture | None = None
    services: dict[str, str] = field(default_factory=dict)  # unit -> is-active output
