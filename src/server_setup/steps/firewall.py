"""ufw firewall: allow SSH, HTTP and HTTPS, then enforce."""

from server_setup.config import SetupSettings
from server_setup.model.plan import Announce, Operation, RunCommand
from server_setup.steps.base import ProvisionContext, Step, apt_install


class FirewallStep(Step):
    step_id = "firewall"
    title = "Firewall setup"
    postconditions = ["ufw active, allowing exactly the configured ports"]

    def banner_line(self, settings: SetupSettings) -> str:
        ports = ",".join(str(p) for p in settings.firewall.ports)
        return f"Setup ufw firewall (ports {ports} allowed)"

    def operations(self, ctx: ProvisionContext) -> list[Operation]:
        ports = ctx.settings.firewall.ports
        listed = ", ".join(str(p) for p in ports)
        ops: list[Operation] = [
            Announce("Installing ufw..."),
            apt_install("ufw"),
            Announce(f"Allowing ports {listed}..."),
        ]
        ops += [RunCommand(f"ufw allow {port}") for port in ports]
        ops += [
            Announce("Enabling ufw..."),
            RunCommand("ufw --force enable"),
            RunCommand("ufw status", show_output=True),
        ]
        return ops
