"""Install fail2ban with an SSH jail."""

from server_setup.model.plan import Announce, Operation, WriteFile
from server_setup.steps.base import ProvisionContext, Step, apt_install, apt_update, systemctl


def render_jail(jails: dict[str, dict[str, str]]) -> str:
    """Render jail.local; sections in insertion order."""
    sections = []
    for name, options in jails.items():
        body = "".join(f"{key} = {value}\n" for key, value in options.items())
        sections.append(f"[{name}]\n{body}")
    return "\n".join(sections)


class Fail2banStep(Step):
    step_id = "fail2ban"
    title = "Intrusion prevention"
    banner = "Install & configure fail2ban"
    postconditions = ["fail2ban installed, enabled and running with the sshd jail"]

    def operations(self, ctx: ProvisionContext) -> list[Operation]:
        settings = ctx.settings.fail2ban
        return [
            Announce("Installing fail2ban..."),
            apt_update(),
            apt_install("fail2ban"),
            WriteFile(settings.jail_path, render_jail(settings.jails)),
            systemctl("enable", "fail2ban"),
            systemctl("restart", "fail2ban"),
        ]
