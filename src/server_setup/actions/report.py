"""Report Action - Everything the operator reads on the console.

CONTRACT:
- read_only: True
- requires_backup: False
- rollback_support: N/A
- prerequisites: None
"""

from dataclasses import dataclass

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from server_setup.config import SetupSettings
from server_setup.model.evidence import Severity
from server_setup.model.finding import Finding
from server_setup.model.plan import StepPlan
from server_setup.model.result import RunResult, StepStatus
from server_setup.steps.base import Step


@dataclass
class ActionContract:
    """Explicit contract for an action."""

    read_only: bool
    requires_backup: bool
    rollback_support: bool
    prerequisites: list[str]


class ReportAction:
    """Console output for banners, plans, run results and audits."""

    CONTRACT = ActionContract(
        read_only=True,
        requires_backup=False,
        rollback_support=False,
        prerequisites=[],
    )

    STATUS_STYLE = {
        StepStatus.SUCCESS: "[green]done[/]",
        StepStatus.FAILED: "[bold red]FAILED[/]",
        StepStatus.SKIPPED: "[dim]skipped[/]",
        StepStatus.PLANNED: "[cyan]planned[/]",
    }

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def banner(self, steps: list[Step], settings: SetupSettings, target: str) -> None:
        """What the run is about to do, shown before confirmation."""
        lines = [f"   - {line}" for step in steps if (line := step.banner_line(settings))]
        self.console.print(
            Panel(
                "\n".join(["This script will:", *lines]),
                title=f"server-setup → {target}",
                border_style="yellow",
            )
        )

    def step_header(self, plan: StepPlan) -> None:
        self.console.print(f"\n[bold blue]==> {plan.title}[/]")

    def announce(self, message: str) -> None:
        self.console.print(message, highlight=False, markup=False)

    def command_output(self, output: str) -> None:
        self.console.print(output, style="dim", highlight=False, markup=False)

    def plan(self, plans: list[StepPlan]) -> None:
        """Dry-run listing of every operation."""
        for index, plan in enumerate(plans, start=1):
            self.console.print(f"\n[bold]{index}. {plan.title}[/] [dim]({plan.step_id})[/]")
            if not plan.operations:
                self.console.print("   [dim](checks only)[/]")
            for op in plan.operations:
                self.console.print(f"   - {op.describe()}", highlight=False, markup=False)
            for post in plan.postconditions:
                self.console.print(f"   [green]✓[/] {post}", highlight=False)

    def run_result(self, result: RunResult) -> None:
        """Per-step status table, then the failure if any."""
        if result.steps:
            table = Table(title="Dry run" if result.dry_run else "Provisioning")
            table.add_column("Step")
            table.add_column("Status")
            for step in result.steps:
                table.add_row(step.step_id, self.STATUS_STYLE.get(step.status, step.status.value))
            self.console.print(table)

        failure = result.failure
        if failure is not None:
            where = f" in step '{failure.step_id}'" if failure.step_id else ""
            self.console.print(f"[bold red]ERROR{where}:[/] {escape(failure.message)}", highlight=False)
        elif result.dry_run:
            self.console.print("[green]Plan complete. Nothing was changed.[/]")

    def report_findings(self, findings: list[Finding]) -> int:
        """Print audit findings; return the exit code for them."""
        if not findings:
            self.console.print("   [green][bold]PASS:[/] Host matches the provisioned baseline.[/]")
            return 0

        severity_order = {Severity.CRITICAL: 0, Severity.WARNING: 1, Severity.INFO: 2}
        sorted_findings = sorted(findings, key=lambda f: severity_order.get(f.severity, 99))
        colors = {Severity.CRITICAL: "red", Severity.WARNING: "yellow", Severity.INFO: "blue"}

        self.console.print("\n[bold]Audit Results[/]")
        for finding in sorted_findings:
            color = colors.get(finding.severity, "white")
            self.console.print(f"[{color}]{finding.severity_icon}[/] [bold]{finding.id}[/]: {finding.condition}")
            for ev in finding.evidence:
                cmd = f" [dim]({ev.command})[/]" if ev.command else ""
                self.console.print(f"      {ev.source}: {ev.excerpt}{cmd}", highlight=False)
            if finding.treatment:
                self.console.print(f"      [green]Fix:[/] {finding.treatment}")

        blocking = [f for f in findings if f.severity in (Severity.CRITICAL, Severity.WARNING)]
        return 1 if blocking else 0
