"""Unattended security upgrades."""

from server_setup.model.plan import Announce, EnsureLine, Operation, WriteFile
from server_setup.steps.base import ProvisionContext, Step, apt_install, systemctl

PERIODIC_CONFIG = 'APT::Periodic::Update-Package-Lists "1";\nAPT::Periodic::Unattended-Upgrade "1";\n'


class AutoUpdatesStep(Step):
    step_id = "auto_updates"
    title = "Automatic updates"
    banner = "Enable unattended upgrades for security updates"
    postconditions = ["unattended-upgrades installed, enabled and running", "periodic list updates and upgrades on"]

    def operations(self, ctx: ProvisionContext) -> list[Operation]:
        updates = ctx.settings.updates
        ops: list[Operation] = [
            Announce("Installing unattended-upgrades..."),
            apt_install("unattended-upgrades"),
            Announce("Enabling automatic security updates..."),
            WriteFile(updates.periodic_path, PERIODIC_CONFIG),
        ]
        if updates.remove_unused_dependencies:
            ops.append(EnsureLine(updates.unattended_path, 'Unattended-Upgrade::Remove-Unused-Dependencies "true";'))
        if updates.mail:
            ops.append(EnsureLine(updates.unattended_path, f'Unattended-Upgrade::Mail "{updates.mail}";'))
        ops += [
            systemctl("enable", "unattended-upgrades"),
            systemctl("start", "unattended-upgrades"),
        ]
        return ops
