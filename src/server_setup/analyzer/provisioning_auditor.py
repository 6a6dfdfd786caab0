"""Provisioning Auditor - Checks that the hardening postconditions hold."""

from server_setup.config import SetupSettings
from server_setup.model.evidence import Evidence, Severity
from server_setup.model.finding import Finding
from server_setup.model.host import HostPosture
from server_setup.parser.ufw import allowed_ports

OFF_VALUES = {"no", "off", "false"}


class ProvisioningAuditor:
    """Auditor for a host that went through `server-setup run`."""

    def __init__(self, posture: HostPosture, settings: SetupSettings) -> None:
        self.posture = posture
        self.settings = settings

    def audit(self) -> list[Finding]:
        findings: list[Finding] = []
        findings.extend(self._check_ssh())
        findings.extend(self._check_firewall())
        findings.extend(self._check_account())
        findings.extend(self._check_services())
        return findings

    def _check_ssh(self) -> list[Finding]:
        ssh = self.posture.ssh
        command = "sshd -T" if ssh.source == "sshd -T" else None
        findings = []

        if (ssh.permit_root_login or "").lower() not in OFF_VALUES:
            findings.append(
                Finding(
                    id="SSH-1",
                    severity=Severity.CRITICAL,
                    condition="SSH root login is not disabled",
                    evidence=[Evidence(ssh.source, f"permitrootlogin {ssh.permit_root_login or '(unset)'}", command)],
                    treatment="Set `PermitRootLogin no` and restart ssh.",
                )
            )
        if (ssh.password_authentication or "").lower() not in OFF_VALUES:
            findings.append(
                Finding(
                    id="SSH-2",
                    severity=Severity.CRITICAL,
                    condition="SSH password authentication is not disabled",
                    evidence=[
                        Evidence(ssh.source, f"passwordauthentication {ssh.password_authentication or '(unset)'}", command)
                    ],
                    treatment="Set `PasswordAuthentication no`; check /etc/ssh/sshd_config.d/ drop-ins too.",
                )
            )
        # With UsePAM, keyboard-interactive can still prompt for a password
        if (ssh.challenge_response_authentication or "").lower() not in OFF_VALUES:
            findings.append(
                Finding(
                    id="SSH-3",
                    severity=Severity.WARNING,
                    condition="SSH challenge-response (keyboard-interactive) authentication is not disabled",
                    evidence=[
                        Evidence(
                            ssh.source,
                            f"challengeresponseauthentication {ssh.challenge_response_authentication or '(unset)'}",
                            command,
                        )
                    ],
                    treatment="Set `ChallengeResponseAuthentication no` (KbdInteractiveAuthentication on newer OpenSSH).",
                )
            )
        return findings

    def _check_firewall(self) -> list[Finding]:
        fw = self.posture.firewall
        if not fw.installed or not fw.active:
            state = "not installed" if not fw.installed else "Status: inactive"
            return [
                Finding(
                    id="FW-1",
                    severity=Severity.CRITICAL,
                    condition="ufw firewall is not active",
                    evidence=[Evidence("ufw", state, "ufw status")],
                    treatment="Run `ufw --force enable` after allowing the required ports.",
                )
            ]

        findings = []
        expected = set(self.settings.firewall.ports)
        actual = set(fw.allowed_ports)
        for port in sorted(expected - actual):
            findings.append(
                Finding(
                    id="FW-2",
                    severity=Severity.WARNING,
                    condition=f"Port {port} is not allowed through ufw",
                    evidence=[Evidence("ufw", f"allowed: {sorted(actual) or 'none'}", "ufw status")],
                    treatment=f"Run `ufw allow {port}`.",
                )
            )
        for port in sorted(actual - expected):
            findings.append(
                Finding(
                    id="FW-3",
                    severity=Severity.WARNING,
                    condition=f"Unexpected port {port} is allowed through ufw",
                    evidence=[Evidence("ufw", next((r for r in fw.rules if port in allowed_ports([r])), str(port)), "ufw status")],
                    treatment=f"Remove it with `ufw delete allow {port}` if it is not needed.",
                )
            )
        return findings

    def _check_account(self) -> list[Finding]:
        account = self.posture.account
        if account is None:
            return []
        if not account.exists:
            return [
                Finding(
                    id="USER-1",
                    severity=Severity.CRITICAL,
                    condition=f"Account '{account.username}' does not exist",
                    evidence=[Evidence("/etc/passwd", f"id: '{account.username}': no such user", "id -nG")],
                    treatment="Re-run provisioning before closing the root session.",
                )
            ]

        findings = []
        for group in (self.settings.admin_group, self.settings.docker.group):
            if group not in account.groups:
                findings.append(
                    Finding(
                        id="USER-2",
                        severity=Severity.WARNING,
                        condition=f"Account '{account.username}' is not in group '{group}'",
                        evidence=[Evidence("/etc/group", " ".join(account.groups), "id -nG")],
                        treatment=f"Run `usermod -aG {group} {account.username}`.",
                    )
                )
        if not account.has_authorized_keys:
            keys = f"{self.settings.home_of(account.username)}/.ssh/authorized_keys"
            findings.append(
                Finding(
                    id="USER-3",
                    severity=Severity.CRITICAL,
                    condition=f"Account '{account.username}' has no authorized_keys",
                    evidence=[Evidence(keys, "missing")],
                    treatment="Copy a public key in before disabling root login, or you will be locked out.",
                )
            )
        return findings

    def _check_services(self) -> list[Finding]:
        findings = []
        for unit, state in self.posture.services.items():
            if state == "active":
                continue
            findings.append(
                Finding(
                    id="SVC-1",
                    severity=Severity.WARNING,
                    condition=f"Service '{unit}' is not running",
                    evidence=[Evidence(f"{unit}.service", state, f"systemctl is-active {unit}")],
                    treatment=f"Run `systemctl enable --now {unit}`.",
                )
            )
        return findings
