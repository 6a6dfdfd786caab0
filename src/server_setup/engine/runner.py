"""Provision runner - plan, then execute, stopping at the first failure.

Public API:
    ProvisionRunner(connector, settings, inputs).run() -> RunResult

Phases:
1. prepare: gate checks (privileges), banner, confirmation, username.
2. plan:    every step's preconditions and operations, read-only.
3. execute: operations in order; the first error fails its step and
            every later step is reported as skipped.
"""

import logging
import re
from typing import Callable

from server_setup.actions.report import ReportAction
from server_setup.config import SetupSettings
from server_setup.connector import Connector
from server_setup.engine.executor import OperationExecutor
from server_setup.errors import (
    ConfirmationDeclinedError,
    EmptyUsernameError,
    InvalidUsernameError,
    PreconditionError,
    ProvisionError,
)
from server_setup.inputs import InputProvider
from server_setup.model.plan import StepPlan
from server_setup.model.result import RunResult, StepResult, StepStatus
from server_setup.steps import ProvisionContext, Step, default_steps

logger = logging.getLogger(__name__)

# adduser's default NAME_REGEX, plus the 32 character limit
USERNAME_RE = re.compile(r"^[a-z_][a-z0-9_-]*\$?$")
USERNAME_MAX = 32


def validate_username(username: str) -> str:
    username = username.strip()
    if not username:
        raise EmptyUsernameError()
    if len(username) > USERNAME_MAX or not USERNAME_RE.match(username):
        raise InvalidUsernameError(username)
    return username


class ProvisionRunner:
    """Runs the provisioning procedure against one host."""

    def __init__(
        self,
        connector: Connector,
        settings: SetupSettings,
        inputs: InputProvider,
        *,
        steps: list[Step] | None = None,
        dry_run: bool = False,
        reporter: ReportAction | None = None,
        log_fn: Callable[[str], None] | None = None,
    ) -> None:
        self.connector = connector
        self.settings = settings
        self.inputs = inputs
        self.steps = steps if steps is not None else default_steps()
        self.dry_run = dry_run
        self.reporter = reporter or ReportAction()
        self.log_fn = log_fn
        self._checked: set[str] = set()

    def _log(self, msg: str) -> None:
        logger.info(msg)
        if self.log_fn:
            self.log_fn(msg)

    def run(self) -> RunResult:
        result = RunResult(dry_run=self.dry_run)
        ctx = ProvisionContext(connector=self.connector, settings=self.settings)

        try:
            self.prepare(ctx)
        except PreconditionError as e:
            self._log(f"Precondition failed: {e.message}")
            result.error = e
            return result
        result.username = ctx.username

        plans = self.plan(ctx, result)
        if plans is None:
            return result

        if self.dry_run:
            self.reporter.plan(plans)
            result.steps = [StepResult(p.step_id, StepStatus.PLANNED) for p in plans]
            return result

        self.execute(plans, result)
        return result

    def prepare(self, ctx: ProvisionContext) -> None:
        """Gate checks, then the operator prompts."""
        for step in self.steps:
            if step.gate:
                self._log(f"Checking {step.step_id}")
                step.check(ctx)
                self._checked.add(step.step_id)

        self.reporter.banner(self.steps, self.settings, getattr(self.connector, "target", "host"))
        if not self.inputs.confirm("Press ENTER to continue, or Ctrl+C to abort..."):
            raise ConfirmationDeclinedError()

        ctx.username = validate_username(self.inputs.username())
        self._log(f"Provisioning account '{ctx.username}'")

    def plan(self, ctx: ProvisionContext, result: RunResult) -> list[StepPlan] | None:
        """Plan every step; on failure record it and return None."""
        plans: list[StepPlan] = []
        for index, step in enumerate(self.steps):
            try:
                plans.append(step.plan(ctx, checked=step.step_id in self._checked))
            except ProvisionError as e:
                e.step_id = e.step_id or step.step_id
                self._log(f"Planning failed at {step.step_id}: {e.message}")
                result.steps = [StepResult(p.step_id, StepStatus.PLANNED) for p in plans]
                result.steps.append(StepResult(step.step_id, StepStatus.FAILED, error=e))
                result.steps += [StepResult(s.step_id, StepStatus.SKIPPED) for s in self.steps[index + 1 :]]
                return None
        return plans

    def execute(self, plans: list[StepPlan], result: RunResult) -> None:
        executor = OperationExecutor(self.connector, self.inputs, announce=self.reporter.announce)
        failed = False

        for plan in plans:
            if failed:
                result.steps.append(StepResult(plan.step_id, StepStatus.SKIPPED))
                continue

            self.reporter.step_header(plan)
            self._log(f"Running step {plan.step_id}")
            step_result = StepResult(plan.step_id, StepStatus.SUCCESS)
            try:
                for op in plan.operations:
                    for output in executor.execute(op):
                        self.reporter.command_output(output)
                        step_result.outputs.append(output)
            except ProvisionError as e:
                e.step_id = e.step_id or plan.step_id
                step_result.status = StepStatus.FAILED
                step_result.error = e
                failed = True
                self._log(f"Step {plan.step_id} failed: {e.message}")

            result.steps.append(step_result)
