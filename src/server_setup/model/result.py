"""Step and run results."""

from dataclasses import dataclass, field
from enum import Enum

from server_setup.errors import PreconditionError, ProvisionError


class StepStatus(str, Enum):
    """Step execution status."""

    PLANNED = "planned"
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class StepResult:
    """Outcome of a single step."""

    step_id: str
    status: StepStatus
    error: ProvisionError | None = None
    outputs: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status in (StepStatus.SUCCESS, StepStatus.PLANNED)


@dataclass
class RunResult:
    """Outcome of a whole provisioning run.

    Attributes:
        steps: One result per step, in plan order.
        username: The account being provisioned (None if never asked).
        dry_run: True when nothing was executed.
        error: Failure raised before any step ran (privileges, input).
    """

    steps: list[StepResult] = field(default_factory=list)
    username: str | None = None
    dry_run: bool = False
    error: ProvisionError | None = None

    @property
    def failed_step(self) -> StepResult | None:
        return next((s for s in self.steps if s.status == StepStatus.FAILED), None)

    @property
    def failure(self) -> ProvisionError | None:
        if self.error:
            return self.error
        failed = self.failed_step
        return failed.error if failed else None

    @property
    def success(self) -> bool:
        return self.failure is None

    @property
    def precondition_failed(self) -> bool:
        return isinstance(self.failure, PreconditionError)

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1
