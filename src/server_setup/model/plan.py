"""Plan operations - What a step intends to do to the host.

Operations are inert data. Steps produce them, the OperationExecutor
turns them into host commands, and dry runs only print describe().
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class RunCommand:
    """Run a shell command on the host; non-zero exit is fatal."""

    command: str
    show_output: bool = False

    def describe(self) -> str:
        return f"run: {self.command}"


@dataclass(frozen=True)
class WriteFile:
    """Replace a file's whole content."""

    path: str
    content: str

    def describe(self) -> str:
        lines = self.content.count("\n") or 1
        return f"write: {self.path} ({lines} line{'s' if lines != 1 else ''})"


@dataclass(frozen=True)
class EnsureDirectory:
    """Create a directory (with parents) and set mode/owner."""

    path: str
    mode: int = 0o755
    owner: str | None = None

    def describe(self) -> str:
        owner = f", owner {self.owner}" if self.owner else ""
        return f"mkdir: {self.path} (mode {self.mode:o}{owner})"


@dataclass(frozen=True)
class CopyFile:
    """Copy a file and set mode/owner on the copy."""

    source: str
    destination: str
    mode: int = 0o644
    owner: str | None = None

    def describe(self) -> str:
        owner = f", owner {self.owner}" if self.owner else ""
        return f"copy: {self.source} -> {self.destination} (mode {self.mode:o}{owner})"


@dataclass(frozen=True)
class SetDirectives:
    """Rewrite `Key value` directives in a line-oriented config file."""

    path: str
    directives: tuple[tuple[str, str], ...]

    def describe(self) -> str:
        pairs = ", ".join(f"{k} {v}" for k, v in self.directives)
        return f"edit: {self.path} ({pairs})"


@dataclass(frozen=True)
class EnsureLine:
    """Append a line to a file unless it is already present."""

    path: str
    line: str

    def describe(self) -> str:
        return f"ensure line: {self.path} <- {self.line}"


@dataclass(frozen=True)
class SetPassword:
    """Set the local console password of an account."""

    username: str

    def describe(self) -> str:
        return f"password: set console password for '{self.username}'"


@dataclass(frozen=True)
class Announce:
    """Print a message to the operator."""

    message: str

    def describe(self) -> str:
        first = self.message.splitlines()[0] if self.message else ""
        return f"note: {first}"


Operation = RunCommand | WriteFile | EnsureDirectory | CopyFile | SetDirectives | EnsureLine | SetPassword | Announce


@dataclass
class StepPlan:
    """The operations one step will run, in order."""

    step_id: str
    title: str
    operations: list[Operation] = field(default_factory=list)
    postconditions: list[str] = field(default_factory=list)

    @property
    def mutating(self) -> bool:
        return any(not isinstance(op, Announce) for op in self.operations)
