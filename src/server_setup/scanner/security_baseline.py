"""Security Baseline Scanner - Effective SSH daemon settings."""

from server_setup.connector import Connector
from server_setup.model.host import SSHPosture
from server_setup.parser.sshd_config import read_directives

KEYS = ("permitrootlogin", "passwordauthentication", "challengeresponseauthentication")


class SecurityBaselineScanner:
    """Scanner for SSH hardening posture."""

    def __init__(self, ssh: Connector, config_path: str = "/etc/ssh/sshd_config") -> None:
        self.ssh = ssh
        self.config_path = config_path

    def scan(self) -> SSHPosture:
        posture = SSHPosture()

        # Effective config first: it resolves Include drop-ins and defaults.
        if self.ssh.run("which sshd 2>/dev/null").success:
            res = self.ssh.run("sshd -T 2>/dev/null")
            if res.success and res.stdout.strip():
                self._apply(posture, read_directives(res.stdout))
                posture.source = "sshd -T"
                return posture

        # Fallback to raw file parse (best-effort, not fully effective config).
        cfg = self.ssh.read_file(self.config_path)
        if cfg:
            self._apply(posture, read_directives(cfg))
            posture.source = self.config_path
        return posture

    def _apply(self, posture: SSHPosture, values: dict[str, str]) -> None:
        posture.permit_root_login = values.get("permitrootlogin")
        posture.password_authentication = values.get("passwordauthentication")
        # Newer OpenSSH reports it as kbdinteractiveauthentication
        posture.challenge_response_authentication = values.get(
            "challengeresponseauthentication", values.get("kbdinteractiveauthentication")
        )
