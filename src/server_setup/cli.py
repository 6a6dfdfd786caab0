"""
Click-based CLI for server-setup.

IMPORTANT: This module only ORCHESTRATES. It never decides what to run.
- Resolves the target host (local or a saved profile)
- Loads settings
- Invokes the runner / scanners
- Formats output
"""

import contextlib
import logging
from pathlib import Path
from typing import Iterator

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel

from server_setup import __version__
from server_setup.actions.generate import GenerateAction
from server_setup.actions.report import ReportAction
from server_setup.analyzer.provisioning_auditor import ProvisioningAuditor
from server_setup.config import ConfigManager, SetupSettings
from server_setup.connector import Connector, LocalConnector, SSHConfig, SSHConnector
from server_setup.engine.runner import ProvisionRunner
from server_setup.errors import ConfigError
from server_setup.inputs import ConsoleInputProvider, ScriptedInputProvider
from server_setup.parser.caddyfile import CaddyfileParser
from server_setup.scanner import scan_host

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)],
        force=True,
    )


@click.group()
@click.version_option(version=__version__, prog_name="server-setup")
@click.option("--config", "-c", type=click.Path(), help="Path to config directory")
@click.option("--verbose", "-v", is_flag=True, help="Log every command and its output")
@click.pass_context
def main(ctx: click.Context, config: str | None, verbose: bool) -> None:
    """🛡️ server-setup: one-shot provisioning for fresh Debian/Ubuntu servers.

    Creates a sudo user, hardens SSH, installs fail2ban, ufw, Docker and
    unattended upgrades.
    """
    _configure_logging(verbose)
    ctx.ensure_object(dict)
    config_dir = Path(config) if config else None
    ctx.obj["config_mgr"] = ConfigManager(config_dir)


def _resolve_config(ctx: click.Context, server: str) -> SSHConfig:
    """Resolve server string to SSHConfig (profile name or IP)."""
    config_mgr = ctx.obj["config_mgr"]
    cfg = config_mgr.get_profile(server)
    if cfg:
        return cfg

    # Otherwise treat as hostname/IP with default root user
    return SSHConfig(host=server, user="root")


def _load_settings(ctx: click.Context, settings_file: str | None) -> SetupSettings:
    try:
        return ctx.obj["config_mgr"].load_settings(Path(settings_file) if settings_file else None)
    except ConfigError as e:
        console.print(f"[bold red]Error:[/] {escape(str(e))}")
        ctx.exit(1)


@contextlib.contextmanager
def _connect(ctx: click.Context, server: str | None) -> Iterator[Connector]:
    """Local host when no server is given, SSH otherwise."""
    if server is None:
        with LocalConnector() as local:
            yield local
        return

    cfg = _resolve_config(ctx, server)
    try:
        ssh = SSHConnector(cfg)
        ssh.connect()
    except ConnectionError as e:
        console.print(f"[bold red]Connection failed:[/] {escape(str(e))}")
        ctx.exit(1)
    try:
        yield ssh
    finally:
        ssh.disconnect()


def _audit(ssh: Connector, settings: SetupSettings, username: str | None, reporter: ReportAction) -> int:
    with console.status("[bold blue]🔍 Checking host...[/]"):
        posture = scan_host(ssh, settings, username)
    findings = ProvisioningAuditor(posture, settings).audit()
    return reporter.report_findings(findings)


@main.command()
@click.argument("server", required=False)
@click.option("--user", "-u", "username", help="Account to create (skips the prompt)")
@click.option("--yes", "-y", is_flag=True, help="Skip the confirmation prompt")
@click.option("--dry-run", is_flag=True, help="Print the plan without changing anything")
@click.option("--verify", is_flag=True, help="Audit the host after a successful run")
@click.option("--settings", "settings_file", type=click.Path(exists=True), help="YAML settings file")
@click.pass_context
def run(
    ctx: click.Context,
    server: str | None,
    username: str | None,
    yes: bool,
    dry_run: bool,
    verify: bool,
    settings_file: str | None,
) -> None:
    """Provision SERVER (profile or host), or this machine if omitted.

    ⚠️  WARNING: This modifies the server!
    """
    settings = _load_settings(ctx, settings_file)
    inputs = ScriptedInputProvider(
        confirm=True if yes else None,
        username=username,
        fallback=ConsoleInputProvider(),
    )
    reporter = ReportAction(console)

    with _connect(ctx, server) as ssh:
        runner = ProvisionRunner(ssh, settings, inputs, dry_run=dry_run, reporter=reporter)
        result = runner.run()
        reporter.run_result(result)

        if verify and result.success and not dry_run:
            _audit(ssh, settings, result.username, reporter)

    ctx.exit(result.exit_code)


@main.command()
@click.argument("server", required=False)
@click.option("--user", "-u", "username", help="Provisioned account to verify")
@click.option("--settings", "settings_file", type=click.Path(exists=True), help="YAML settings file")
@click.pass_context
def check(ctx: click.Context, server: str | None, username: str | None, settings_file: str | None) -> None:
    """Audit SERVER (or this machine) against the provisioned baseline."""
    settings = _load_settings(ctx, settings_file)
    with _connect(ctx, server) as ssh:
        exit_code = _audit(ssh, settings, username, ReportAction(console))
    ctx.exit(exit_code)


@main.group()
def caddyfile() -> None:
    """Reverse-proxy configuration."""
    pass


@caddyfile.command("render")
@click.option("--output", "-o", type=click.Path(), help="Output file path")
@click.option("--settings", "settings_file", type=click.Path(exists=True), help="YAML settings file")
@click.pass_context
def caddyfile_render(ctx: click.Context, output: str | None, settings_file: str | None) -> None:
    """Render the Caddyfile from settings."""
    settings = _load_settings(ctx, settings_file)
    gen = GenerateAction()
    text = gen.render_caddyfile(settings.proxy)
    if output:
        gen.write_config(text, Path(output))
        console.print(f"[green]✓ Caddyfile written to:[/] {output}")
    else:
        click.echo(text, nl=False)


@caddyfile.command("route")
@click.argument("path")
@click.option("--file", "-f", "caddy_file", type=click.Path(exists=True), default="Caddyfile", show_default=True)
@click.pass_context
def caddyfile_route(ctx: click.Context, path: str, caddy_file: str) -> None:
    """Show which rule in the Caddyfile serves PATH."""
    parser = CaddyfileParser()
    proxy = parser.parse(Path(caddy_file).read_text(encoding="utf-8"))
    for error in parser.errors:
        console.print(f"[yellow]Warning:[/] {error}")

    route = proxy.resolve(path)
    if route is None:
        console.print(f"[bold red]No rule handles {path}[/]")
        ctx.exit(1)

    if route.kind == "file_server":
        console.print(f"[bold]{path}[/] → file_server {route.local_file(path)} [dim]({route.matcher})[/]")
    else:
        console.print(f"[bold]{path}[/] → reverse_proxy {route.upstream}")


@main.group()
def config() -> None:
    """Manage server profiles and settings."""
    pass


@config.command("add")
@click.argument("name")
@click.option("--host", "-h", required=True, help="Server hostname or IP")
@click.option("--user", "-u", default="root", help="SSH username")
@click.option("--port", "-p", default=22, help="SSH port")
@click.option("--password", "-pass", help="SSH password")
@click.option("--key", "-k", type=click.Path(), help="Path to SSH private key")
@click.option("--sudo/--no-sudo", default=True, help="Use sudo for commands")
@click.pass_context
def config_add(
    ctx: click.Context, name: str, host: str, user: str, port: int, password: str | None, key: str | None, sudo: bool
) -> None:
    """Add a new server profile."""
    config_mgr = ctx.obj["config_mgr"]
    cfg = SSHConfig(host=host, user=user, port=port, password=password, key_path=key, use_sudo=sudo)
    config_mgr.add_profile(name, cfg)
    console.print(f"[bold green]✓ Added server profile:[/] {name}")


@config.command("list")
@click.pass_context
def config_list(ctx: click.Context) -> None:
    """List all server profiles."""
    profiles = ctx.obj["config_mgr"].list_profiles()
    if not profiles:
        console.print("[dim]No profiles configured yet.[/]")
        return

    for name, data in profiles.items():
        console.print(f"[bold green]{name}[/]: {data['user']}@{data['host']}:{data['port']}")


@config.command("remove")
@click.argument("name")
@click.pass_context
def config_remove(ctx: click.Context, name: str) -> None:
    """Remove a server profile."""
    if ctx.obj["config_mgr"].remove_profile(name):
        console.print(f"[bold green]✓ Removed profile:[/] {name}")
    else:
        console.print(f"[bold red]Error:[/] Profile {name} not found.")
        ctx.exit(1)


@config.command("show")
@click.option("--settings", "settings_file", type=click.Path(exists=True), help="YAML settings file")
@click.pass_context
def config_show(ctx: click.Context, settings_file: str | None) -> None:
    """Print the effective settings as YAML."""
    import yaml

    settings = _load_settings(ctx, settings_file)
    console.print(Panel(yaml.safe_dump(settings.model_dump(), sort_keys=False), title="Settings", style="cyan"))


if __name__ == "__main__":
    main()
