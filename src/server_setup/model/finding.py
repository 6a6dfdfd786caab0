"""Finding dataclass - Audit results with evidence."""

from dataclasses import dataclass, field

from server_setup.model.evidence import Evidence, Severity


@dataclass
class Finding:
    """A postcondition that does not hold on the host.

    Every Finding MUST have at least one Evidence entry.

    Attributes:
        id: Stable identifier, e.g. "SSH-1".
        severity: How critical this finding is.
        condition: Short description of the problem.
        evidence: What was observed. Never empty!
        treatment: Recommended fix.
    """

    id: str
    severity: Severity
    condition: str
    evidence: list[Evidence] = field(default_factory=list)
    treatment: str = ""

    def __post_init__(self) -> None:
        if not self.evidence:
            raise ValueError("Finding must have at least one Evidence entry")

    @property
    def severity_icon(self) -> str:
        icons = {
            Severity.CRITICAL: "[CRITICAL]",
            Severity.WARNING: "[WARNING]",
            Severity.INFO: "[INFO]",
        }
        return icons.get(self.severity, "[FINDING]")
