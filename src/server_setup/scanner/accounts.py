"""Account Scanner - The provisioned user's groups and keys."""

import shlex

from server_setup.connector import Connector
from server_setup.model.host import AccountPosture


class AccountScanner:
    def __init__(self, ssh: Connector, home_base: str = "/home") -> None:
        self.ssh = ssh
        self.home_base = home_base.rstrip("/")

    def scan(self, username: str) -> AccountPosture:
        posture = AccountPosture(username=username)
        res = self.ssh.run(f"id -nG -- {shlex.quote(username)}")
        if not res.success:
            return posture
        posture.exists = True
        posture.groups = res.stdout.split()
        posture.has_authorized_keys = self.ssh.file_exists(f"{self.home_base}/{username}/.ssh/authorized_keys")
        return posture
