"""Steps package - The ordered provisioning procedure."""

from server_setup.steps.auto_updates import AutoUpdatesStep
from server_setup.steps.base import ProvisionContext, Step
from server_setup.steps.docker import DockerStep
from server_setup.steps.fail2ban import Fail2banStep
from server_setup.steps.firewall import FirewallStep
from server_setup.steps.preflight import PreflightStep
from server_setup.steps.ssh_hardening import HardenSSHStep
from server_setup.steps.summary import SummaryStep
from server_setup.steps.user import CreateUserStep


def default_steps() -> list[Step]:
    """The procedure in execution order."""
    return [
        PreflightStep(),
        CreateUserStep(),
        HardenSSHStep(),
        Fail2banStep(),
        FirewallStep(),
        DockerStep(),
        AutoUpdatesStep(),
        SummaryStep(),
    ]


__all__ = [
    "AutoUpdatesStep",
    "CreateUserStep",
    "DockerStep",
    "Fail2banStep",
    "FirewallStep",
    "HardenSSHStep",
    "PreflightStep",
    "ProvisionContext",
    "Step",
    "SummaryStep",
    "default_steps",
]
