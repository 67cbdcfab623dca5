"""pmctl CLI entrypoint.

Command-line control client for the pmgo process supervisor daemon.
"""

from __future__ import annotations

import dataclasses
import functools
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click

from pmctl.core.dispatcher import CommandDispatcher, CommandOutcome, Severity
from pmctl.core.errors import (
    PmctlCliError,
    config_exists_error,
    invalid_start_arguments_error,
)
from pmctl.core.presentation.colors import style_severity_label
from pmctl.domain.exceptions import LogsNotFoundError, PmctlError
from pmctl.version import __version__

if TYPE_CHECKING:
    from pmctl.domain.config import PmctlConfig

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def handle_cli_errors(command_name: str):
    """Decorator to handle common CLI errors.

    PmctlCliError propagates unchanged. Domain errors (daemon unavailable,
    fatal command outcomes) become PmctlCliError so they exit with status 1.
    Anything else is reported as unexpected, with a traceback in verbose mode.

    Args:
        command_name: Name of the command for error messages.
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except (PmctlCliError, click.exceptions.Exit, click.Abort):
                raise
            except PmctlError as e:
                raise PmctlCliError(e.message, hint=e.hint) from e
            except Exception as e:
                ctx = click.get_current_context()
                if ctx.obj.get("verbose", False):
                    import traceback

                    traceback.print_exc()
                raise PmctlCliError(
                    f"Unexpected error in {command_name}: {e}",
                    hint="Run with --verbose for more details",
                ) from e

        return wrapper

    return decorator


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def _load_config(config_path: Path | None) -> PmctlConfig:
    from pmctl.adapters.config.toml_config_provider import TomlConfigProvider

    return TomlConfigProvider(config_path).load()


def _create_dispatcher(ctx: click.Context) -> CommandDispatcher:
    """Connect to the daemon and wrap the client in a dispatcher.

    Raises:
        DaemonUnavailableError: If the daemon cannot be reached; this ends
            the invocation before any command logic runs.
    """
    from pmctl.adapters.daemon.client import RemoteClient

    config: PmctlConfig = ctx.obj["config"]
    client = RemoteClient.connect(
        config.daemon.resolved_socket_path,
        connect_timeout=config.daemon.connect_timeout,
        call_timeout=config.daemon.call_timeout,
    )
    return CommandDispatcher(client)


def _report(ctx: click.Context, outcome: CommandOutcome) -> None:
    """Print an outcome; warnings and errors go to stderr."""
    for item in outcome.items:
        _report(ctx, item)
    if outcome.severity is Severity.INFO:
        if not ctx.obj.get("quiet", False):
            click.echo(f"{style_severity_label(outcome.severity)} {outcome.message}")
        return
    click.echo(f"{style_severity_label(outcome.severity)} {outcome.message}", err=True)


@click.group()
@click.version_option(version=__version__, prog_name="pmctl")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file to use instead of the global one.",
)
@click.option(
    "--socket",
    "socket_path",
    type=str,
    default=None,
    help="Daemon socket path (overrides config).",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Seconds to wait for the daemon when connecting (overrides config).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    config_path: Path | None,
    socket_path: str | None,
    timeout: float | None,
) -> None:
    """pmctl - control client for the pmgo process supervisor.

    Starts, stops and inspects supervised processes and reads their logs.
    """
    _configure_logging(verbose)
    config = _load_config(config_path)

    overrides = {}
    if socket_path:
        overrides["socket_path"] = socket_path
    if timeout is not None:
        overrides["connect_timeout"] = timeout
    if overrides:
        config = dataclasses.replace(
            config, daemon=dataclasses.replace(config.daemon, **overrides)
        )

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config"] = config
    ctx.obj["config_path"] = config_path
    ctx.color = config.display.color_flag()


@cli.command()
@click.pass_context
@handle_cli_errors("save")
def save(ctx: click.Context) -> None:
    """Save the current process list on the daemon."""
    _report(ctx, _create_dispatcher(ctx).save())


@cli.command(context_settings={"ignore_unknown_options": True})
@click.argument("target")
@click.argument("name", required=False, default=None)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.option("--keep-alive", is_flag=True, help="Restart the process when it exits.")
@click.option("--bin", "is_binary", is_flag=True, help="TARGET is a prebuilt binary.")
@click.pass_context
@handle_cli_errors("start")
def start(
    ctx: click.Context,
    target: str,
    name: str | None,
    args: tuple[str, ...],
    keep_alive: bool,
    is_binary: bool,
) -> None:
    """Start a process.

    With one argument, starts the already registered process TARGET.
    With two, registers and starts NAME from the source path TARGET,
    passing any remaining ARGS to it.
    """
    if name is None:
        if keep_alive or is_binary or args:
            invalid_start_arguments_error()
        _report(ctx, _create_dispatcher(ctx).start(target))
        return

    outcome = _create_dispatcher(ctx).start_from_source(
        target, name, keep_alive=keep_alive, args=list(args), is_binary=is_binary
    )
    _report(ctx, outcome)


@cli.command()
@click.argument("name")
@click.pass_context
@handle_cli_errors("restart")
def restart(ctx: click.Context, name: str) -> None:
    """Restart the process NAME."""
    _report(ctx, _create_dispatcher(ctx).restart(name))


@cli.command()
@click.argument("name")
@click.pass_context
@handle_cli_errors("stop")
def stop(ctx: click.Context, name: str) -> None:
    """Stop the process NAME."""
    _report(ctx, _create_dispatcher(ctx).stop(name))


@cli.command()
@click.argument("name")
@click.pass_context
@handle_cli_errors("delete")
def delete(ctx: click.Context, name: str) -> None:
    """Stop the process NAME and remove it permanently."""
    _report(ctx, _create_dispatcher(ctx).delete(name))


@cli.command(name="delete-all")
@click.pass_context
@handle_cli_errors("delete-all")
def delete_all(ctx: click.Context) -> None:
    """Stop and remove every supervised process."""
    _report(ctx, _create_dispatcher(ctx).delete_all())


@cli.command()
@click.option("--json", "json_output", is_flag=True, help="Output as JSON.")
@click.pass_context
@handle_cli_errors("status")
def status(ctx: click.Context, json_output: bool) -> None:
    """Show the status of every supervised process."""
    from pmctl.core.presentation import format_status_json, format_status_table

    outcome = _create_dispatcher(ctx).status()
    if json_output:
        click.echo(format_status_json(outcome.payload))
    else:
        click.echo(format_status_table(outcome.payload))


@cli.command()
@click.argument("name")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON.")
@click.pass_context
@handle_cli_errors("info")
def info(ctx: click.Context, name: str, json_output: bool) -> None:
    """Show everything the daemon knows about the process NAME."""
    from pmctl.core.presentation import format_detail_json, format_detail_table

    outcome = _create_dispatcher(ctx).info(name)
    if outcome.payload is None:
        _report(ctx, outcome)
        return
    if json_output:
        click.echo(format_detail_json(outcome.payload))
    else:
        click.echo(format_detail_table(outcome.payload))


@cli.command()
@click.argument("name")
@click.option("--follow", "-f", is_flag=True, help="Keep printing new log lines.")
@click.pass_context
@handle_cli_errors("logs")
def logs(ctx: click.Context, name: str, follow: bool) -> None:
    """Print the stderr and stdout logs of the process NAME.

    Logs are read from ~/.pmgo/NAME/ without contacting the daemon. With
    --follow, runs until interrupted or until a stream cannot be read.
    """
    from pmctl.core.logs import LogFollower

    config: PmctlConfig = ctx.obj["config"]
    follower = LogFollower(
        Path.home(),
        emit=functools.partial(click.echo, color=ctx.color),
        poll_interval=config.logs.poll_interval,
    )
    try:
        follower.logs(name, follow=follow)
    except LogsNotFoundError as e:
        click.echo(f"{style_severity_label(Severity.ERROR)} {e.message}", err=True)
    except KeyboardInterrupt:
        pass


@cli.group()
def config() -> None:
    """Manage pmctl configuration."""
    pass


def _config_target(ctx: click.Context) -> Path:
    from pmctl.shared.config_io import get_global_config_path

    return ctx.obj.get("config_path") or get_global_config_path()


@config.command(name="init")
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing config file.")
@click.pass_context
@handle_cli_errors("config init")
def config_init(ctx: click.Context, force: bool) -> None:
    """Write a config file with the default settings."""
    from pmctl.domain.config import PmctlConfig
    from pmctl.shared.config_io import save_config

    path = _config_target(ctx)
    if path.exists() and not force:
        config_exists_error(str(path))
    save_config(PmctlConfig.default(), path)
    click.echo(f"✓ Created config at {path}")


@config.command(name="path")
@click.pass_context
@handle_cli_errors("config path")
def config_path_cmd(ctx: click.Context) -> None:
    """Print the config file path for use in scripts."""
    click.echo(_config_target(ctx))


@config.command(name="show")
@click.pass_context
@handle_cli_errors("config show")
def config_show(ctx: click.Context) -> None:
    """Print the effective configuration as TOML."""
    import tomli_w

    from pmctl.shared.config_io import config_to_data

    click.echo(tomli_w.dumps(config_to_data(ctx.obj["config"])), nl=False)


def main() -> int:
    """Main entrypoint for the CLI."""
    try:
        cli(obj={})
        return 0
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
