"""Disable root login and password authentication for SSH."""

from server_setup.model.plan import Announce, Operation, SetDirectives
from server_setup.steps.base import ProvisionContext, Step, systemctl


class HardenSSHStep(Step):
    step_id = "ssh"
    title = "SSH hardening"
    banner = "Disable root login & password auth in SSH"
    postconditions = [
        "sshd_config states PermitRootLogin no",
        "sshd_config states PasswordAuthentication no",
        "sshd_config states ChallengeResponseAuthentication no",
    ]

    def operations(self, ctx: ProvisionContext) -> list[Operation]:
        ssh = ctx.settings.ssh
        return [
            Announce("Hardening SSH (disabling root login & password auth)..."),
            SetDirectives(ssh.config_path, tuple(ssh.directives.items())),
            systemctl("restart", ssh.service),
            Announce("SSH hardened. Root login & password auth disabled."),
        ]
