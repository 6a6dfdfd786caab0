"""Model package - Core data structures for server-setup."""

from server_setup.model.evidence import Evidence, Severity
from server_setup.model.finding import Finding
from server_setup.model.host import AccountPosture, FirewallPosture, HostPosture, SSHPosture
from server_setup.model.plan import (
    Announce,
    CopyFile,
    EnsureDirectory,
    EnsureLine,
    Operation,
    RunCommand,
    SetDirectives,
    SetPassword,
    StepPlan,
    WriteFile,
)
from server_setup.model.proxy import ProxyConfig, ProxyRoute
from server_setup.model.result import RunResult, StepResult, StepStatus

__all__ = [
    "AccountPosture",
    "Announce",
    "CopyFile",
    "EnsureDirectory",
    "EnsureLine",
    "Evidence",
    "Finding",
    "FirewallPosture",
    "HostPosture",
    "Operation",
    "ProxyConfig",
    "ProxyRoute",
    "RunCommand",
    "RunResult",
    "SSHPosture",
    "SetDirectives",
    "SetPassword",
    "Severity",
    "StepPlan",
    "StepResult",
    "StepStatus",
    "WriteFile",
]
