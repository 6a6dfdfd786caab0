"""Create the administrative user and hand it root's SSH key."""

from server_setup.errors import MissingRootKeyError
from server_setup.model.plan import Announce, CopyFile, EnsureDirectory, Operation, RunCommand, SetPassword
from server_setup.steps.base import ProvisionContext, Step, q


class CreateUserStep(Step):
    step_id = "user"
    title = "User creation"
    banner = "Create a new sudo user, copy root's authorized_keys"
    postconditions = [
        "Account exists and belongs to the admin group",
        "~/.ssh is 700 and authorized_keys is 600, both owned by the account",
        "authorized_keys is a copy of root's",
    ]

    def check(self, ctx: ProvisionContext) -> None:
        # Without a key to copy the account could never log in once
        # password SSH is disabled
        keys = ctx.settings.root_authorized_keys
        if not ctx.connector.file_exists(keys):
            raise MissingRootKeyError(keys)
        ctx.facts["user_exists"] = ctx.connector.run(f"id -- {q(ctx.username)}").success

    def operations(self, ctx: ProvisionContext) -> list[Operation]:
        user = ctx.username
        settings = ctx.settings
        ssh_dir = f"{settings.home_of(user)}/.ssh"
        ops: list[Operation] = []

        if ctx.facts.get("user_exists"):
            ops.append(Announce(f"User '{user}' already exists. Skipping creation."))
        else:
            ops += [
                Announce(f"Creating user '{user}'..."),
                RunCommand(f"adduser --disabled-password --gecos '' {q(user)}"),
                RunCommand(f"usermod -aG {q(settings.admin_group)} {q(user)}"),
            ]

        ops += [
            EnsureDirectory(ssh_dir, mode=0o700, owner=user),
            CopyFile(settings.root_authorized_keys, f"{ssh_dir}/authorized_keys", mode=0o600, owner=user),
            Announce(f"User '{user}' created, and root's SSH key copied to {user}."),
            Announce(
                f"Now let's set a password for '{user}' (this is *not* for SSH logins, since those are disabled).\n"
                "This password is for 'sudo' usage or local console access."
            ),
            SetPassword(user),
        ]
        return ops
