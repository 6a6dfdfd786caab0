"""Operator input.

The runner never reads the terminal itself; it asks an InputProvider.
ConsoleInputProvider prompts through click, ScriptedInputProvider
replays canned answers (tests, `--yes`, `--user`).
"""

from typing import Protocol

import click


class InputProvider(Protocol):
    def confirm(self, message: str) -> bool: ...

    def username(self) -> str: ...

    def password(self, username: str) -> str: ...


class ConsoleInputProvider:
    """Interactive prompts on the controlling terminal."""

    def confirm(self, message: str) -> bool:
        # Enter continues, Ctrl+C aborts (click.Abort propagates)
        click.prompt(message, default="", show_default=False, prompt_suffix="")
        return True

    def username(self) -> str:
        return click.prompt(
            "Enter the new user name (e.g., 'myuser')",
            default="",
            show_default=False,
        ).strip()

    def password(self, username: str) -> str:
        return click.prompt(
            f"New password for '{username}'",
            hide_input=True,
            confirmation_prompt=True,
        )


class ScriptedInputProvider:
    """Canned answers; records what was asked.

    Any answer left as None is asked of `fallback` instead (so `--yes`
    without `--user` still prompts for the name).
    """

    def __init__(
        self,
        *,
        confirm: bool | None = True,
        username: str | None = None,
        password: str | None = None,
        fallback: InputProvider | None = None,
    ) -> None:
        self._confirm = confirm
        self._username = username
        self._password = password
        self._fallback = fallback
        self.asked: list[str] = []

    def confirm(self, message: str) -> bool:
        self.asked.append("confirm")
        if self._confirm is None and self._fallback is not None:
            return self._fallback.confirm(message)
        return bool(self._confirm)

    def username(self) -> str:
        self.asked.append("username")
        if self._username is None and self._fallback is not None:
            return self._fallback.username()
        return (self._username or "").strip()

    def password(self, username: str) -> str:
        self.asked.append("password")
        if self._password is None:
            if self._fallback is None:
                raise RuntimeError(f"No password scripted for '{username}'")
            return self._fallback.password(username)
        return self._password
