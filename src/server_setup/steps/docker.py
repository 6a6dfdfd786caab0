"""Docker engine via the upstream convenience script, plus Compose."""

from server_setup.model.plan import Announce, Operation, RunCommand
from server_setup.steps.base import ProvisionContext, Step, apt_install, q


class DockerStep(Step):
    step_id = "docker"
    title = "Container runtime install"
    banner = "Install Docker + Docker Compose plugin"
    postconditions = ["docker and the compose plugin installed", "account is in the docker group"]

    def operations(self, ctx: ProvisionContext) -> list[Operation]:
        docker = ctx.settings.docker
        script = q(docker.script_path)
        return [
            Announce(f"Installing Docker using {docker.install_url}..."),
            RunCommand(f"curl -fsSL {q(docker.install_url)} -o {script}"),
            RunCommand(f"sh {script}"),
            Announce("Installing Docker Compose plugin..."),
            apt_install(docker.compose_package),
            Announce(f"Adding '{ctx.username}' to the '{docker.group}' group..."),
            RunCommand(f"usermod -aG {q(docker.group)} {q(ctx.username)}"),
        ]
