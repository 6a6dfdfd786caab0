"""Evidence dataclass - Every audit finding must point at what was seen."""

from dataclasses import dataclass
from enum import Enum


class Severity(Enum):
    """Severity levels for findings."""

    CRITICAL = "critical"  # Host is exposed or locked out
    WARNING = "warning"  # Hardening step did not stick
    INFO = "info"  # Advisory


@dataclass(frozen=True)
class Evidence:
    """Where a finding came from.

    Attributes:
        source: File path or probe name the value was read from.
        excerpt: The observed value or line.
        command: Command that produced it (e.g. 'sshd -T').
    """

    source: str
    excerpt: str
    command: str | None = None

    def __str__(self) -> str:
        return f"{self.source}: {self.excerpt}"
