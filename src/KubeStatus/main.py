from __future__ import annotations
import asyncio
import os
import shlex
import sys
import tempfile
from pathlib import Path
from typing import Optional

import click
import yaml
from libtmux import Server
from libtmux.exc import LibTmuxException, TmuxCommandNotFound

from KubeStatus.app import main as run_app
from KubeStatus.config import AppConfig
from KubeStatus.core.exceptions import ConfigurationError, ResourceNotFoundError
from KubeStatus.core.resource_registry import REGISTRY
from KubeStatus.logger import setup_logging

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _app_command() -> str:
    if getattr(sys, "frozen", False):
        return shlex.join([sys.executable, "tui"])
    return "kubestatus tui"


def _launch_logic(config: AppConfig) -> None:
    """Creates the tmux session that hosts the dashboard and attaches to it."""
    log = setup_logging(config, "launcher")
    click.echo("Launching KubeStatus in tmux session...")

    if not config.log_file:
        config = config.with_overrides(
            log_file=str(Path(tempfile.gettempdir()) / "kubestatus.log")
        )

    window_command = (
        f"{_app_command()}; "
        "exit_code=$?; "
        "if [ $exit_code -ne 0 ]; then "
        'echo; echo "--- KubeStatus has crashed (exit code: $exit_code) ---"; '
        "read -p 'Press Enter to close this pane...' _; "
        "fi"
    )

    session_env = os.environ.copy()
    session_env.update(config.session_environment())
    if config.log_level == "DEBUG":
        session_env["PYTHONASYNCIODEBUG"] = "1"

    try:
        server = Server(socket_path=config.tmux_socket_path)
        existing = server.sessions.get(session_name=config.session_name, default=None)
        if existing is not None:
            click.echo(f"Tmux session '{config.session_name}' already exists. Attaching...")
            existing.attach_session()
            return

        session = server.new_session(
            session_name=config.session_name,
            attach=False,
            window_name="KubeStatus",
            window_command=window_command,
            environment=session_env,
        )
        log.info("Created tmux session %s; log file %s", session.name, config.log_file)
        click.echo(f"Tmux session '{session.name}' created. Attaching...")
        session.attach_session()
        click.echo("Session ended.")
    except TmuxCommandNotFound:
        click.secho("ERROR: Application binary for tmux not found.", fg="red", err=True)
        sys.exit(1)
    except LibTmuxException as e:
        click.secho(f"ERROR: tmux failed: {e}", fg="red", err=True)
        sys.exit(1)


def validate_kubeconfig(ctx, param, value):
    if not value:
        return value
    paths = [Path(p).expanduser() for p in value.split(os.pathsep) if p]
    # Like kubectl, missing entries in a KUBECONFIG list are skipped.
    existing = [p for p in paths if p.is_file()]
    if not existing:
        listed = ", ".join(str(p) for p in paths) or value
        raise click.BadParameter(f"Kubeconfig path is not a file: {listed}")
    return os.pathsep.join(str(p) for p in existing)


def validate_context(ctx, param, value):
    if not value:
        return value
    kubeconfig_path = ctx.params.get("kubeconfig") or os.environ.get("KUBECONFIG")
    if not kubeconfig_path:
        kubeconfig_path = Path.home() / ".kube" / "config"
    # KUBECONFIG may list several files; contexts can live in any of them.
    config_paths = [Path(p).expanduser() for p in str(kubeconfig_path).split(os.pathsep) if p]
    contexts: list[str] = []
    for config_path in config_paths:
        if not config_path.exists():
            continue
        try:
            config_data = yaml.safe_load(config_path.read_text()) or {}
        except (OSError, yaml.YAMLError) as e:
            raise click.BadParameter(f"Failed to read kubeconfig {config_path}: {e}")
        contexts.extend(c["name"] for c in config_data.get("contexts") or [] if "name" in c)
    if not contexts:
        raise click.BadParameter(f"No contexts found in kubeconfig: {kubeconfig_path}")
    if value not in contexts:
        raise click.BadParameter(f"Context '{value}' not found. Available: {', '.join(contexts)}")
    return value


def validate_resource(ctx, param, value):
    if not value:
        return value
    try:
        return REGISTRY.resolve_kind(value)
    except ResourceNotFoundError as e:
        raise click.BadParameter(str(e))


def _build_config(
    kubeconfig: Optional[str],
    context: Optional[str],
    namespace: Optional[str],
    resource: Optional[str],
    log_level: Optional[str],
) -> AppConfig:
    try:
        base = AppConfig.from_env()
    except ConfigurationError as e:
        raise click.UsageError(str(e))
    config = base.with_overrides(
        kubeconfig=kubeconfig,
        kube_context=context,
        initial_namespace=namespace,
        initial_resource=resource,
        log_level=log_level.upper() if log_level else None,
    )
    AppConfig.set_instance(config)
    return config


@click.group(
    invoke_without_command=True,
    context_settings=dict(help_option_names=["-h", "--help"]),
)
@click.option(
    "--kubeconfig",
    envvar="KUBECONFIG",
    callback=validate_kubeconfig,
    help="Path to the kubeconfig file.",
)
@click.option(
    "--context",
    envvar="KUBE_CONTEXT",
    callback=validate_context,
    help="The name of the kubeconfig context to use.",
)
@click.option(
    "-n",
    "--namespace",
    envvar="KUBESTATUS_NAMESPACE",
    help="Initial namespace; 'all' or empty for every namespace.",
)
@click.option(
    "-r",
    "--resource",
    envvar="KUBESTATUS_RESOURCE",
    callback=validate_resource,
    help="Initial resource kind, e.g. pod, svc, deploy.",
)
@click.option(
    "--log_level",
    envvar="LOG_LEVEL",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
)
@click.pass_context
def main(
    ctx: click.Context,
    kubeconfig: Optional[str],
    context: Optional[str],
    namespace: Optional[str],
    resource: Optional[str],
    log_level: Optional[str],
) -> None:
    """A kubectl-backed status dashboard for Kubernetes.

    This command acts as a launcher. By default (with no sub-command),
    it sets up a tmux session and launches the dashboard inside it.
    """
    ctx.obj = _build_config(kubeconfig, context, namespace, resource, log_level)
    if ctx.invoked_subcommand is None:
        _launch_logic(ctx.obj)


@main.command(hidden=True)
@click.pass_obj
def tui(config: AppConfig) -> None:
    """Run the dashboard directly.

    This is intended to be run inside the tmux session created by the main launcher.
    """
    asyncio.run(run_app(config))


@main.command("kinds")
def kinds() -> None:
    """List the resource kinds the dashboard knows about."""
    for kind in sorted(REGISTRY.list_kinds()):
        resource_type = REGISTRY.lookup(kind)
        scope = "namespaced" if resource_type.has_namespace else "cluster"
        ops = ", ".join(sorted(op.value for op in resource_type.allowed_ops))
        click.echo(f"{kind:<26} {scope:<11} {ops}")


if __name__ == "__main__":
    main()
