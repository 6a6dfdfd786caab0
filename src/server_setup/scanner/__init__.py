"""Scanner package - Read-only probes of a provisioned host.

Scanners run commands and collect raw state.
They do NOT judge it - that's the analyzer's job.
"""

from server_setup.config import SetupSettings
from server_setup.connector import Connector
from server_setup.model.host import HostPosture
from server_setup.scanner.accounts import AccountScanner
from server_setup.scanner.firewall import FirewallScanner
from server_setup.scanner.security_baseline import SecurityBaselineScanner
from server_setup.scanner.services import ServiceScanner


def scan_host(ssh: Connector, settings: SetupSettings, username: str | None = None) -> HostPosture:
    """Collect everything the provisioning audit needs."""
    posture = HostPosture(
        ssh=SecurityBaselineScanner(ssh, settings.ssh.config_path).scan(),
        firewall=FirewallScanner(ssh).scan(),
        services=ServiceScanner(ssh).scan((settings.ssh.service, "fail2ban", "docker", "unattended-upgrades")),
    )
    if username:
        posture.account = AccountScanner(ssh, settings.home_base).scan(username)
    return posture


__all__ = [
    "AccountScanner",
    "FirewallScanner",
    "SecurityBaselineScanner",
    "ServiceScanner",
    "scan_host",
]
