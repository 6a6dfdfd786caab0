"""Service Scanner - systemd unit activity."""

from server_setup.connector import Connector

DEFAULT_UNITS = ("ssh", "fail2ban", "docker", "unattended-upgrades")


class ServiceScanner:
    def __init__(self, ssh: Connector) -> None:
        self.ssh = ssh

    def scan(self, units: tuple[str, ...] = DEFAULT_UNITS) -> dict[str, str]:
        """Map unit -> `systemctl is-active` answer ("active", "inactive", ...)."""
        states: dict[str, str] = {}
        for unit in units:
            res = self.ssh.run(f"systemctl is-active {unit}")
            # is-active exits non-zero for anything but active; stdout still names the state
            states[unit] = res.stdout.strip() or "unknown"
        return states
