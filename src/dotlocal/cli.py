"""Click-based command line interface (`dotlocalctl`)."""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import click

from .common.exceptions import DotLocalError
from .common.logging import get_logger, setup_logging
from .common.settings import PROXY_BINARY_NAME, PROXY_COMMON_PATHS, DotLocalSettings
from .common.utils import find_binary
from .daemon.client import ControlClient
from .daemon.daemon import build_daemon, spawn_detached
from .proxy.caddyfile import CaddyfileBuilder
from .proxy.supervisor import ProcessSupervisor
from .records import operations
from .records.store import ConfigStore

logger = get_logger(__name__)


@contextmanager
def fatal_errors() -> Iterator[None]:
    """Turn dotlocal errors into a clean CLI failure."""
    try:
        yield
    except DotLocalError as e:
        raise click.ClickException(str(e)) from e


def _store(ctx: click.Context) -> ConfigStore:
    settings: DotLocalSettings = ctx.obj
    return ConfigStore(settings.config_path)


@click.group()
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding dotlocal.json and the Caddyfile (default: ~/.dotlocal)",
)
@click.option(
    "--log-level",
    type=click.Choice(
        ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False
    ),
    default=None,
    help="Logging level",
)
@click.version_option(package_name="dotlocal")
@click.pass_context
def main(ctx: click.Context, root: Path | None, log_level: str | None) -> None:
    """Run .local DNS resolution for apps in development."""
    try:
        settings = DotLocalSettings.from_env(root=root, log_level=log_level)
    except ValueError as e:
        raise click.ClickException(f"Invalid settings: {e}") from e
    setup_logging(level=settings.log_level)
    ctx.obj = settings


@main.command()
@click.pass_context
def configure(ctx: click.Context) -> None:
    """Set up caddy so it can serve local HTTPS requests."""
    settings: DotLocalSettings = ctx.obj
    click.echo("Configure dotlocalctl to allow server accept requests")
    click.echo(
        "You may need to grant permissions to trust a local certificate "
        "for [local] HTTPS requests."
    )
    with fatal_errors():
        proxy_binary = find_binary(
            PROXY_BINARY_NAME, settings.proxy_binary, PROXY_COMMON_PATHS
        )
        supervisor = ProcessSupervisor(
            proxy_binary,
            CaddyfileBuilder(settings.caddyfile_path),
            helper_binary=settings.helper_binary,
            cwd=settings.root,
        )
        returncode = supervisor.trust(_store(ctx).load())
    if returncode != 0:
        raise click.ClickException("caddy trust failed")


@main.command()
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write logs to this file",
)
@click.pass_context
def run(ctx: click.Context, log_file: Path | None) -> None:
    """Run the dotlocal server in the foreground."""
    settings: DotLocalSettings = ctx.obj
    settings.root.mkdir(parents=True, exist_ok=True)
    if log_file is not None:
        setup_logging(level=settings.log_level, log_file=str(log_file))

    with fatal_errors():
        daemon = build_daemon(settings)
        try:
            daemon.bind()
        except OSError as e:
            raise click.ClickException(
                f"Cannot listen on {settings.control_url}: {e}"
            ) from e
        daemon.run()


@main.command()
@click.pass_context
def start(ctx: click.Context) -> None:
    """Start the dotlocal server in the background."""
    settings: DotLocalSettings = ctx.obj
    try:
        spawn_detached(settings)
    except OSError as e:
        raise click.ClickException(f"Failed to start dotlocal: {e}") from e
    click.echo("Started dotlocal in the background")


@main.command()
@click.pass_context
def restart(ctx: click.Context) -> None:
    """Restart the running server with the current configuration."""
    settings: DotLocalSettings = ctx.obj
    with fatal_errors():
        ControlClient(settings.control_url).restart()
    click.echo("Restarted dotlocal")


@main.command()
@click.pass_context
def stop(ctx: click.Context) -> None:
    """Stop the running server."""
    settings: DotLocalSettings = ctx.obj
    with fatal_errors():
        ControlClient(settings.control_url).stop()
    click.echo("Stopped dotlocal")


@main.command()
@click.argument("proxies", nargs=-1, required=True)
@click.pass_context
def add(ctx: click.Context, proxies: tuple[str, ...]) -> None:
    """Add proxy entries in the format `<domain>[/path]:<port>`.

    Eg. `dotlocalctl add adeton.local:3000 mangobase.local/api:3003`
    """
    with fatal_errors():
        operations.add_proxies(_store(ctx), list(proxies))
    click.echo("Added proxies successfully")


@main.command()
@click.argument("proxies", nargs=-1, required=True)
@click.pass_context
def remove(ctx: click.Context, proxies: tuple[str, ...]) -> None:
    """Remove one or more proxy entries.

    Eg. `dotlocalctl remove adeton.local:3000 mangobase.local/api:3003`
    """
    with fatal_errors():
        operations.remove_proxies(_store(ctx), list(proxies))
    click.echo("Removed proxies successfully")


@main.command("remove-all")
@click.pass_context
def remove_all(ctx: click.Context) -> None:
    """Remove all proxy entries."""
    with fatal_errors():
        operations.remove_all_proxies(_store(ctx))
    click.echo("Removed all proxies successfully")


@main.command()
@click.argument("option", type=click.Choice(["local", "lan"]))
@click.pass_context
def access(ctx: click.Context, option: str) -> None:
    """Serve on your local network (lan) or just this machine (local)."""
    with fatal_errors():
        operations.set_lan_access(_store(ctx), option == "lan")
    click.echo(f"Access set to {option}")


@main.command()
@click.argument("option", type=click.Choice(["auto", "off"]))
@click.pass_context
def https(ctx: click.Context, option: str) -> None:
    """Switch automatic HTTPS redirect on (auto) or off."""
    with fatal_errors():
        operations.set_https_redirect(_store(ctx), option == "auto")
    click.echo(f"Automatic HTTPS redirect {option}")


if __name__ == "__main__":
    main()
