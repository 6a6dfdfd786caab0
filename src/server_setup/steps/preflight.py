"""Precondition check: the run must be privileged."""

from server_setup.errors import NotPrivilegedError
from server_setup.model.plan import Operation
from server_setup.steps.base import ProvisionContext, Step


class PreflightStep(Step):
    step_id = "preflight"
    title = "Precondition check"
    postconditions = ["Running as root"]
    gate = True

    def check(self, ctx: ProvisionContext) -> None:
        result = ctx.connector.run("id -u")
        uid = result.stdout.strip()
        if not result.success or uid != "0":
            raise NotPrivilegedError(uid)

    def operations(self, ctx: ProvisionContext) -> list[Operation]:
        return []
