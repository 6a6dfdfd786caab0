"""Error taxonomy for provisioning.

Two families matter to the operator:
- PreconditionError: the host or the input is not fit for the step.
  Raised before the step mutates anything.
- CommandError: a host command returned non-zero.

Both are fatal. The runner turns them into a failed StepResult and stops.
"""


class ProvisionError(Exception):
    """Base class for every provisioning failure."""

    def __init__(self, message: str, step_id: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.step_id = step_id


class PreconditionError(ProvisionError):
    """A step cannot start on this host or with this input."""


class NotPrivilegedError(PreconditionError):
    def __init__(self, uid: str = "") -> None:
        detail = f" (uid {uid})" if uid else ""
        super().__init__(f"Please run as root (or with sudo){detail}.", step_id="preflight")


class ConfirmationDeclinedError(PreconditionError):
    def __init__(self) -> None:
        super().__init__("Provisioning aborted by operator.", step_id="preflight")


class EmptyUsernameError(PreconditionError):
    def __init__(self) -> None:
        super().__init__("No username entered.", step_id="preflight")


class InvalidUsernameError(PreconditionError):
    def __init__(self, username: str) -> None:
        super().__init__(f"'{username}' is not a valid account name.", step_id="preflight")
        self.username = username


class MissingRootKeyError(PreconditionError):
    def __init__(self, path: str) -> None:
        super().__init__(
            f"{path} not found! Make sure root has an SSH key. "
            "Aborting to avoid locking you out.",
            step_id="user",
        )
        self.path = path


class CommandError(ProvisionError):
    """A host command exited with a non-zero status."""

    def __init__(self, command: str, exit_code: int, stderr: str = "") -> None:
        message = f"Command failed ({exit_code}): {command}"
        if stderr.strip():
            message += f"\n{stderr.strip()}"
        super().__init__(message)
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr


class ConfigError(Exception):
    """Settings file is unreadable or invalid."""
