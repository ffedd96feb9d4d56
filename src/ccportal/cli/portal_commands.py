"""Portal resource commands: builds, deployments, passwords, properties."""

from __future__ import annotations

import sys
from typing import Annotated

import typer
from pydantic import BaseModel
from rich.table import Table

from ccportal import api
from ccportal.cli.boundary import portal_client
from ccportal.console import out_console
from ccportal.models import BuildMeta, Deployment

builds_app = typer.Typer(
    name="builds", help="List, inspect and start builds.", no_args_is_help=True
)
deployments_app = typer.Typer(
    name="deployments", help="Schedule and inspect deployments.", no_args_is_help=True
)
properties_app = typer.Typer(
    name="properties", help="Read and replace customer properties.", no_args_is_help=True
)


def _print_model(model: BaseModel) -> None:
    out_console.print_json(model.model_dump_json(by_alias=True))


def _builds_table(builds: list[BuildMeta]) -> Table:
    table = Table(title="Builds", title_style="bold", header_style="bold cyan", border_style="dim")
    table.add_column("Code", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Branch")
    table.add_column("Status", justify="center")
    table.add_column("Started", style="dim")
    for build in builds:
        table.add_row(
            build.code,
            build.name,
            build.branch,
            build.status,
            (build.build_start_timestamp or "")[:16].replace("T", " "),
        )
    return table


def _deployments_table(deployments: list[Deployment]) -> Table:
    table = Table(
        title="Deployments", title_style="bold", header_style="bold cyan", border_style="dim"
    )
    table.add_column("Code", style="cyan", no_wrap=True)
    table.add_column("Build")
    table.add_column("Environment")
    table.add_column("Status", justify="center")
    table.add_column("Scheduled", style="dim")
    for deployment in deployments:
        table.add_row(
            deployment.code,
            deployment.build_code,
            deployment.environment_code,
            deployment.status,
            (deployment.scheduled_timestamp or "")[:16].replace("T", " "),
        )
    return table


JsonOption = Annotated[bool, typer.Option("--json", "-j", help="Output as JSON for scripting")]


@builds_app.command("list")
def builds_list(json_output: JsonOption = False) -> None:
    """Show the 20 most recent builds."""
    with portal_client() as client:
        builds = api.get_all_builds(client)
    if json_output:
        out_console.print_json(data=[b.model_dump(by_alias=True) for b in builds])
        return
    out_console.print(_builds_table(builds))


@builds_app.command("show")
def builds_show(
    code: Annotated[str, typer.Argument(help="Build code", metavar="CODE")],
) -> None:
    """Show one build."""
    with portal_client() as client:
        build = api.get_build(client, code)
    _print_model(build)


@builds_app.command("create")
def builds_create(
    name: Annotated[str, typer.Argument(help="Build name")],
    branch: Annotated[str, typer.Argument(help="Git branch or tag to build")],
) -> None:
    """Start a new build and print its code."""
    with portal_client() as client:
        response = api.create_build(client, name, branch)
    out_console.print(response.code)


@builds_app.command("logs")
def builds_logs(
    code: Annotated[str, typer.Argument(help="Build code", metavar="CODE")],
) -> None:
    """Print the build log."""
    with portal_client() as client:
        log = api.get_build_log(client, code)
    sys.stdout.write(log)


@deployments_app.command("create")
def deployments_create(
    environment: Annotated[str, typer.Argument(help="Environment code, e.g. d1")],
    release: Annotated[str, typer.Argument(help="Build code to deploy")],
    migration_mode: Annotated[
        str,
        typer.Option("--migration-mode", "-m", help="NONE, UPDATE or INITIALIZE"),
    ] = "NONE",
    deployment_mode: Annotated[
        str,
        typer.Option("--deployment-mode", "-d", help="ROLLING_UPDATE or RECREATE"),
    ] = "ROLLING_UPDATE",
) -> None:
    """Schedule a deployment and print its code."""
    with portal_client() as client:
        response = api.create_deployment(
            client, environment, migration_mode.upper(), deployment_mode.upper(), release
        )
    out_console.print(response.code)


@deployments_app.command("list")
def deployments_list(
    environment: Annotated[str, typer.Argument(help="Environment code")],
    json_output: JsonOption = False,
) -> None:
    """Show the 12 most recent deployments of an environment."""
    with portal_client() as client:
        page = api.get_deployments(client, environment)
    if json_output:
        _print_model(page)
        return
    out_console.print(_deployments_table(page.value))


@deployments_app.command("running")
def deployments_running(
    environment: Annotated[str, typer.Argument(help="Environment code")],
) -> None:
    """Show the latest deployment of an environment."""
    with portal_client() as client:
        page = api.get_running_deployments(client, environment)
    _print_model(page)


def passwords(
    environment: Annotated[str, typer.Argument(help="Environment code")],
) -> None:
    """Show the initial admin passwords of an environment."""
    with portal_client() as client:
        result = api.get_initial_passwords(client, environment)
    _print_model(result)


@properties_app.command("get")
def properties_get(
    environment: Annotated[str, typer.Argument(help="Environment code")],
    aspect: Annotated[str, typer.Argument(help="Service aspect, e.g. hcs_common")],
) -> None:
    """Print the customer properties of an aspect."""
    with portal_client() as client:
        properties = api.get_customer_properties(client, environment, aspect)
    sys.stdout.write(properties.value)


@properties_app.command("set")
def properties_set(
    environment: Annotated[str, typer.Argument(help="Environment code")],
    aspect: Annotated[str, typer.Argument(help="Service aspect, e.g. hcs_common")],
    filename: Annotated[str, typer.Argument(help="Properties file, or - for stdin")],
) -> None:
    """Replace the customer properties of an aspect."""
    with portal_client() as client:
        properties = api.set_customer_properties(client, environment, aspect, filename)
    _print_model(properties)
