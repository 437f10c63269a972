"""CLI: wss update|check-policies|check-compliance|dependency-data"""

import asyncio
import json
from typing import Any, Callable

import click
from pydantic import TypeAdapter, ValidationError
from rich.console import Console
from rich.table import Table

from wss_agent.client import AsyncWhitesourceService
from wss_agent.errors import WssError
from wss_agent.models.project import AgentProjectInfo
from wss_agent.models.requests import UpdateType
from wss_agent.models.results import CheckPoliciesResult, UpdateInventoryResult

console = Console()
err_console = Console(stderr=True)


def _load_projects(path: str) -> list[AgentProjectInfo]:
    try:
        with open(path, "rb") as f:
            return TypeAdapter(list[AgentProjectInfo]).validate_json(f.read())
    except (OSError, ValidationError) as e:
        raise click.BadParameter(f"cannot load projects from {path}: {e}", param_hint="PROJECTS")


def service_options(fn: Callable) -> Callable:
    fn = click.option("--json-output", "--json", is_flag=True, help="Print the raw result as JSON.")(fn)
    fn = click.option("--url", envvar="WSS_URL", default=None, help="Service URL.")(fn)
    fn = click.option("--product-version", default=None)(fn)
    fn = click.option("--product", default=None, help="Product name or token.")(fn)
    fn = click.option("--token", envvar="WSS_ORG_TOKEN", required=True, help="Organization token.")(fn)
    fn = click.argument("projects_file", metavar="PROJECTS", type=click.Path(exists=True, dir_okay=False))(fn)
    return fn


def _call(url, method: str, *args: Any, **kwargs: Any) -> Any:
    async def _go():
        async with AsyncWhitesourceService(service_url=url) as service:
            with err_console.status("Calling service..."):
                return await getattr(service, method)(*args, **kwargs)

    try:
        return asyncio.run(_go())
    except WssError as e:
        err_console.print(f"[red]{type(e).__name__}: {e}[/red]")
        raise SystemExit(1)


def _print_json(result) -> None:
    click.echo(json.dumps(result.to_wire(), indent=2))


def _print_policy_result(result: CheckPoliciesResult) -> None:
    table = Table(title=f"Policy check ({result.organization})")
    table.add_column("Project", style="bold")
    table.add_column("Status")
    table.add_column("Rejections")
    for label, projects in (("existing", result.existing_projects), ("new", result.new_projects)):
        for name, node in projects.items():
            rejected = node.has_rejections()
            table.add_row(name, label, "[red]yes[/red]" if rejected else "[green]no[/green]")
    console.print(table)


@click.command("update")
@service_options
@click.option("--requester-email", default=None)
@click.option("--append", is_flag=True, help="Append to the inventory instead of overriding it.")
def update(projects_file, token, product, product_version, url, json_output, requester_email, append):
    """Update the organization inventory."""
    result: UpdateInventoryResult = _call(
        url, "update", token, product, product_version, _load_projects(projects_file),
        requester_email=requester_email, update_type=UpdateType.APPEND if append else UpdateType.OVERRIDE,
    )
    if json_output:
        _print_json(result)
        return
    console.print(f"[green]Inventory updated for {result.organization}[/green]")
    for name in result.created_projects:
        console.print(f"  created: {name}")
    for name in result.updated_projects:
        console.print(f"  updated: {name}")
    if result.request_token:
        console.print(f"[dim]Request token: {result.request_token}[/dim]")


@click.command("check-policies")
@service_options
def check_policies(projects_file, token, product, product_version, url, json_output):
    """Check policies (deprecated, prefer check-compliance)."""
    result = _call(url, "check_policies", token, product, product_version, _load_projects(projects_file))
    if json_output:
        _print_json(result)
    else:
        _print_policy_result(result)
    if result.has_rejections():
        raise SystemExit(2)


@click.command("check-compliance")
@service_options
@click.option("--force-check-all", is_flag=True, help="Check all dependencies, not only new ones.")
def check_compliance(projects_file, token, product, product_version, url, json_output, force_check_all):
    """Check policy compliance of the projects."""
    result = _call(
        url, "check_policy_compliance", token, product, product_version, _load_projects(projects_file),
        force_check_all_dependencies=force_check_all,
    )
    if json_output:
        _print_json(result)
    else:
        _print_policy_result(result)
    if result.has_rejections():
        raise SystemExit(2)


@click.command("dependency-data")
@service_options
def dependency_data(projects_file, token, product, product_version, url, json_output):
    """Fetch additional data (licenses, vulnerabilities...) for the dependencies."""
    result = _call(url, "get_dependency_data", token, product, product_version, _load_projects(projects_file))
    if json_output:
        _print_json(result)
        return
    console.print(f"[green]{len(result.projects)} project(s) for {result.organization}[/green]")
