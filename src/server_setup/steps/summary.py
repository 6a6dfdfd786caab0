"""Completion report."""

from server_setup.model.plan import Announce, Operation
from server_setup.steps.base import ProvisionContext, Step

RULE = "-" * 78


def render_summary(ctx: ProvisionContext) -> str:
    user = ctx.username
    ports = ",".join(str(p) for p in ctx.settings.firewall.ports)
    return "\n".join(
        [
            RULE,
            "Setup Complete!",
            f"  - New user '{user}' with sudo privileges (SSH key copied from root).",
            "  - Root login & password-based SSH disabled.",
            "  - fail2ban installed & configured (SSH jail enabled).",
            f"  - ufw firewall active (ports {ports} open).",
            "  - Docker + Docker Compose installed.",
            "  - Unattended upgrades for security updates enabled.",
            RULE,
            f"IMPORTANT: Open a new terminal and SSH in as '{user}' to test your login.",
            f"           e.g., ssh {user}@<server_ip>",
            "If successful, you can safely close your root session.",
            "You're ready to pull and run your Docker Compose projects. Enjoy!",
            RULE,
        ]
    )


class SummaryStep(Step):
    step_id = "summary"
    title = "Summary"

    def operations(self, ctx: ProvisionContext) -> list[Operation]:
        return [Announce(render_summary(ctx))]
