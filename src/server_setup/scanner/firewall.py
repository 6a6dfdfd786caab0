"""Firewall Scanner - ufw presence, state and allowed ports."""

from server_setup.connector import Connector
from server_setup.model.host import FirewallPosture
from server_setup.parser.ufw import allowed_ports, parse_status


class FirewallScanner:
    """Scanner for the ufw firewall the provisioner installs."""

    def __init__(self, ssh: Connector) -> None:
        self.ssh = ssh

    def scan(self) -> FirewallPosture:
        posture = FirewallPosture()
        if not self.ssh.run("which ufw").success:
            return posture
        posture.installed = True

        res = self.ssh.run("ufw status")
        if res.success:
            posture.active, posture.rules = parse_status(res.stdout)
            posture.allowed_ports = allowed_ports(posture.rules)
        return posture
