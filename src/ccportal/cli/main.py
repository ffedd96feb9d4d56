"""ccportal CLI - scripted access to the Commerce Cloud portal.

Logs in through the portal's SSO chain once, keeps the cookies, and exposes
the build, deployment and configuration endpoints as commands.
"""

import os
from typing import Annotated

import click
import typer
from rich.console import Console
from rich.panel import Panel

import ccportal
from ccportal import console as cc_console
from ccportal.cli.boundary import portal_client
from ccportal.cli.portal_commands import builds_app, deployments_app, passwords, properties_app
from ccportal.config import get_settings
from ccportal.logging import configure_logging, enable_network_debug, get_logger

# Configure logging early using env vars directly; get_settings() creates the
# config directory as a side effect. -v/-vv and --log-format may reconfigure.
configure_logging(
    level=os.environ.get("CCPORTAL_LOG_LEVEL", "WARNING"),
    json_output=os.environ.get("CCPORTAL_LOG_FORMAT", "console") == "json",
)

LOG = get_logger(__name__)

app = typer.Typer(
    name="ccportal",
    help="""
    ccportal - scripted access to the Commerce Cloud portal

    \b
    Quick start:
      ccportal login                 Log in and store the session cookies
      ccportal builds list           Show recent builds
      ccportal deployments list d1   Show recent deployments of d1
      ccportal config                Show current configuration
    """,
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)
app.add_typer(builds_app)
app.add_typer(deployments_app)
app.add_typer(properties_app)
app.command("passwords")(passwords)
console = Console()


@app.callback(invoke_without_command=True)
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            count=True,
            help="Increase verbosity (-v for info, -vv for debug)",
        ),
    ] = 0,
    log_format: Annotated[
        str | None,
        typer.Option(
            "--log-format",
            click_type=click.Choice(["console", "json"]),
            help="Log output format: console (human-readable) or json (structured)",
        ),
    ] = None,
    network_debug: Annotated[
        bool,
        typer.Option(
            "--network-debug",
            help="Enable urllib3 / http.client wire logging",
        ),
    ] = False,
) -> None:
    """ccportal - scripted access to the Commerce Cloud portal."""
    settings = get_settings()
    json_output = (log_format or settings.log_format) == "json"

    if verbose >= 2:
        configure_logging(level="DEBUG", json_output=json_output)
    elif verbose >= 1:
        configure_logging(level="INFO", json_output=json_output)
    elif log_format is not None:
        configure_logging(level=settings.log_level, json_output=json_output)

    if network_debug:
        enable_network_debug()


@app.command("version")
def version() -> None:
    """Show ccportal version and installation info."""
    settings = get_settings()
    console.print(
        Panel(
            f"[bold cyan]ccportal[/bold cyan] v{ccportal.__version__}\n\n"
            f"[dim]Portal:[/dim]  {settings.portal_url}\n"
            f"[dim]Cookies:[/dim] {settings.cookie_path}",
            title="Commerce Cloud portal client",
            border_style="cyan",
        )
    )


@app.command("config")
def config() -> None:
    """Show current ccportal configuration."""
    settings = get_settings()

    info = f"""
[dim]Portal URL:[/dim]        {settings.portal_url}
[dim]Subscription:[/dim]      {settings.subscription or "[yellow]not set[/yellow]"}
[dim]Certificate:[/dim]       {settings.cert_file or "[yellow]not set[/yellow]"}
[dim]Private key:[/dim]       {settings.key_file or "[yellow]not set[/yellow]"}
[dim]Cookie file:[/dim]       {settings.cookie_path}
[dim]Login header:[/dim]      {settings.login_header}
[dim]Login steps:[/dim]       {settings.login_steps}
[dim]Verify login:[/dim]      {settings.verify_login}
[dim]Log level:[/dim]         {settings.log_level}
[dim]Log format:[/dim]        {settings.log_format}"""

    console.print(Panel(info.strip(), title="Configuration", border_style="cyan"))


@app.command("login")
def login() -> None:
    """Establish a portal session and save its cookies."""
    with portal_client() as client:
        logged_in = client.bootstrapper.logged_in
    if logged_in:
        cc_console.success("Logged in, session cookies saved")
    else:
        cc_console.success("Existing session is still valid")


if __name__ == "__main__":
    app()
