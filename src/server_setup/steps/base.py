"""Step base class and shared helpers.

A step has three parts:
- check(): read-only preconditions; raises PreconditionError.
- operations(): the ordered operations it will run.
- postconditions: what holds on the host once it succeeded.

Steps never execute anything themselves; the runner does.
"""

import shlex
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from server_setup.config import SetupSettings
from server_setup.connector import Connector
from server_setup.model.plan import Operation, RunCommand, StepPlan

q = shlex.quote


@dataclass
class ProvisionContext:
    """State shared by all steps of one run."""

    connector: Connector
    settings: SetupSettings
    username: str = ""
    facts: dict[str, Any] = field(default_factory=dict)


class Step(ABC):
    step_id: str = ""
    title: str = ""
    # One line for the confirmation banner; empty to leave it out
    banner: str = ""
    postconditions: list[str] = []
    # Checked before the operator is prompted for anything
    gate: bool = False

    def check(self, ctx: ProvisionContext) -> None:
        """Raise PreconditionError if the step cannot start."""

    @abstractmethod
    def operations(self, ctx: ProvisionContext) -> list[Operation]:
        ...

    def banner_line(self, settings: SetupSettings) -> str:
        return self.banner

    def plan(self, ctx: ProvisionContext, *, checked: bool = False) -> StepPlan:
        if not checked:
            self.check(ctx)
        return StepPlan(
            step_id=self.step_id,
            title=self.title,
            operations=self.operations(ctx),
            postconditions=list(self.postconditions),
        )


def apt_update() -> RunCommand:
    return RunCommand("apt-get update -y")


def apt_install(*packages: str) -> RunCommand:
    return RunCommand(f"DEBIAN_FRONTEND=noninteractive apt-get install -y {' '.join(q(p) for p in packages)}")


def systemctl(action: str, unit: str) -> RunCommand:
    return RunCommand(f"systemctl {action} {q(unit)}")
