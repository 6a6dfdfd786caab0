"""Operation executor - Turns plan operations into host commands.

Every failing command raises CommandError; nothing is retried and
nothing is undone.
"""

import logging
from typing import Callable

from server_setup.connector import CommandResult, Connector
from server_setup.errors import CommandError
from server_setup.inputs import InputProvider
from server_setup.model.plan import (
    Announce,
    CopyFile,
    EnsureDirectory,
    EnsureLine,
    Operation,
    RunCommand,
    SetDirectives,
    SetPassword,
    WriteFile,
)
from server_setup.parser.sshd_config import set_directives
from server_setup.steps.base import q

logger = logging.getLogger(__name__)


class OperationExecutor:
    """Executes operations against one connector."""

    def __init__(
        self,
        connector: Connector,
        inputs: InputProvider,
        announce: Callable[[str], None] | None = None,
    ) -> None:
        self.connector = connector
        self.inputs = inputs
        self.announce = announce or (lambda message: None)

    def execute(self, op: Operation) -> list[str]:
        """Run one operation; return output worth showing the operator."""
        logger.info("%s", op.describe())
        if isinstance(op, Announce):
            self.announce(op.message)
            return []
        if isinstance(op, RunCommand):
            result = self._run(op.command)
            return [result.stdout.rstrip()] if op.show_output and result.stdout.strip() else []
        if isinstance(op, WriteFile):
            self._check(self.connector.write_file(op.path, op.content))
        elif isinstance(op, EnsureDirectory):
            self._run(f"mkdir -p {q(op.path)}")
            self._run(f"chmod {op.mode:o} {q(op.path)}")
            if op.owner:
                self._run(f"chown {q(op.owner)}:{q(op.owner)} {q(op.path)}")
        elif isinstance(op, CopyFile):
            self._run(f"cp {q(op.source)} {q(op.destination)}")
            if op.owner:
                self._run(f"chown {q(op.owner)}:{q(op.owner)} {q(op.destination)}")
            self._run(f"chmod {op.mode:o} {q(op.destination)}")
        elif isinstance(op, SetDirectives):
            self._set_directives(op)
        elif isinstance(op, EnsureLine):
            self._ensure_line(op)
        elif isinstance(op, SetPassword):
            self._set_password(op.username)
        else:
            raise TypeError(f"Unknown operation: {op!r}")
        return []

    def _run(self, command: str, input_text: str | None = None) -> CommandResult:
        if input_text is None:
            result = self.connector.run(command)
        else:
            result = self.connector.run(command, input_text=input_text)
        return self._check(result)

    def _check(self, result: CommandResult) -> CommandResult:
        if not result.success:
            raise CommandError(result.command, result.exit_code, result.stderr)
        return result

    def _read(self, path: str) -> str:
        content = self.connector.read_file(path)
        if content is None:
            raise CommandError(f"read {path}", 1, f"{path}: No such file")
        return content

    def _set_directives(self, op: SetDirectives) -> None:
        current = self._read(op.path)
        updated = set_directives(current, op.directives)
        if updated != current:
            self._check(self.connector.write_file(op.path, updated))
        else:
            logger.debug("%s already up to date", op.path)

    def _ensure_line(self, op: EnsureLine) -> None:
        current = self.connector.read_file(op.path) or ""
        if op.line in current.splitlines():
            return
        if current and not current.endswith("\n"):
            current += "\n"
        self._check(self.connector.write_file(op.path, current + op.line + "\n"))

    def _set_password(self, username: str) -> None:
        if self.connector.supports_tty:
            # passwd owns the prompt and its confirmation
            command = f"passwd {q(username)}"
            exit_code = self.connector.run_interactive(command)
            if exit_code != 0:
                raise CommandError(command, exit_code)
            return
        password = self.inputs.password(username)
        self._run("chpasswd", input_text=f"{username}:{password}\n")
