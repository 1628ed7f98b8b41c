# src/athena/cli/app.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
import yaml

from athena.api.client import AthenaAPIClient
from athena.api.errors import AthenaError
from athena.binding.ipam_policy import IPAMPolicyDataSource
from athena.binding.ipam_reservation import IPAMReservationResource
from athena.config.loader import load_config
from athena.logging.log import init_logging
from athena.observers.console import ConsoleObserver
from athena.observers.logger import LoggerObserver


# ------------------------------------------------------------------------------
# CLI setup
# ------------------------------------------------------------------------------

app = typer.Typer(help="OneFuse IPAM reservation CLI")
reservation_app = typer.Typer(help="Create, read and delete IPAM reservations")
policy_app = typer.Typer(help="Look up IPAM policies")
template_app = typer.Typer(help="Render OneFuse templates")

app.add_typer(reservation_app, name="reservation")
app.add_typer(policy_app, name="policy")
app.add_typer(template_app, name="template")


class CliState:
    def __init__(self, config_path: Optional[Path], verbose: bool, progress: bool, log_dir: Optional[Path]):
        self.config_path = config_path
        self.verbose = verbose
        self.progress = progress
        self.log_dir = log_dir

    def client(self) -> AthenaAPIClient:
        logger, run_id, _ = init_logging(base_dir=self.log_dir, verbose=self.verbose)
        observers: List = [LoggerObserver(logger)]
        if self.progress:
            observers.append(ConsoleObserver())
        return AthenaAPIClient(load_config(self.config_path), observers=observers, run_id=run_id)


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="YAML config file (defaults to ATHENA_* environment variables)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="DEBUG output on the console"),
    progress: bool = typer.Option(False, "--progress", help="Print job events to stderr"),
    log_dir: Optional[Path] = typer.Option(None, "--log-dir", help="Where run logs go (default ~/.athena/logs)"),
):
    ctx.obj = CliState(config, verbose, progress, log_dir)


# ------------------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------------------

def parse_properties(items: Optional[List[str]]) -> Dict[str, Any]:
    """
    ``-p key=value`` pairs. Values are read as YAML so numbers, booleans and
    lists keep their type. Anything YAML reads as a non-JSON type (dates,
    timestamps) stays the string that was typed.
    """
    props: Dict[str, Any] = {}
    for item in items or []:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise typer.BadParameter(f"Expected key=value, got '{item}'")
        props[key.strip()] = _property_value(key.strip(), value)
    return props


def _property_value(key: str, value: str) -> Any:
    if not value:
        return ""
    try:
        parsed = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise typer.BadParameter(f"Property '{key}' is not valid YAML: {exc}")
    try:
        json.dumps(parsed)
    except (TypeError, ValueError):
        return value
    return parsed


def _emit(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2, sort_keys=True, default=str))


def _fail(exc: Exception) -> None:
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(code=1)


# ------------------------------------------------------------------------------
# reservation
# ------------------------------------------------------------------------------

@reservation_app.command("create")
def reservation_create(
    ctx: typer.Context,
    hostname: str = typer.Option(..., help="Hostname or hostname template"),
    policy_id: int = typer.Option(..., help="IPAM policy id"),
    workspace_url: Optional[str] = typer.Option(None, help="Workspace URL (default: the 'Default' workspace)"),
    ip_address: Optional[str] = typer.Option(None),
    netmask: Optional[str] = typer.Option(None),
    gateway: Optional[str] = typer.Option(None),
    network: Optional[str] = typer.Option(None),
    subnet: Optional[str] = typer.Option(None),
    primary_dns: Optional[str] = typer.Option(None),
    secondary_dns: Optional[str] = typer.Option(None),
    dns_suffix: Optional[str] = typer.Option(None),
    dns_search_suffix: Optional[List[str]] = typer.Option(None, help="Repeatable"),
    nic_label: Optional[str] = typer.Option(None),
    prop: Optional[List[str]] = typer.Option(None, "--property", "-p", help="Template property key=value"),
):
    """Reserve an IP and wait for the job to finish."""
    record = {
        "hostname": hostname,
        "policy_id": policy_id,
        "workspace_url": workspace_url,
        "ip_address": ip_address,
        "netmask": netmask,
        "gateway": gateway,
        "network": network,
        "subnet": subnet,
        "primary_dns": primary_dns,
        "secondary_dns": secondary_dns,
        "dns_suffix": dns_suffix,
        "dns_search_suffix": dns_search_suffix or [],
        "nic_label": nic_label,
        "template_properties": parse_properties(prop),
    }
    try:
        resource = IPAMReservationResource(ctx.obj.client())
        id, bound = resource.create(record)
    except AthenaError as exc:
        _fail(exc)
    _emit({"id": id, **bound})


@reservation_app.command("get")
def reservation_get(ctx: typer.Context, id: str = typer.Argument(..., help="Reservation id")):
    try:
        bound = IPAMReservationResource(ctx.obj.client()).read(id, {})
    except AthenaError as exc:
        _fail(exc)
    _emit({"id": id, **bound})


@reservation_app.command("delete")
def reservation_delete(ctx: typer.Context, id: str = typer.Argument(..., help="Reservation id")):
    """Release the reservation and wait for the job to finish."""
    try:
        IPAMReservationResource(ctx.obj.client()).delete(id)
    except AthenaError as exc:
        _fail(exc)
    typer.echo(f"Deleted IPAM reservation {id}")


# ------------------------------------------------------------------------------
# policy
# ------------------------------------------------------------------------------

@policy_app.command("get")
def policy_get(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, help="Policy name"),
    id: Optional[int] = typer.Option(None, help="Policy id"),
):
    if (name is None) == (id is None):
        raise typer.BadParameter("Pass exactly one of --name or --id")
    try:
        client = ctx.obj.client()
        if name is not None:
            _emit(IPAMPolicyDataSource(client).read({"name": name}))
        else:
            _emit(client.get_ipam_policy(id).model_dump(by_alias=True, exclude_none=True))
    except AthenaError as exc:
        _fail(exc)


# ------------------------------------------------------------------------------
# template
# ------------------------------------------------------------------------------

@template_app.command("render")
def template_render(
    ctx: typer.Context,
    template: str = typer.Argument(..., help="Template text, e.g. '{{ name }}-01'"),
    prop: Optional[List[str]] = typer.Option(None, "--property", "-p", help="Template property key=value"),
):
    try:
        rendered = ctx.obj.client().render_template(template, parse_properties(prop))
    except AthenaError as exc:
        _fail(exc)
    typer.echo(rendered)


if __name__ == "__main__":
    app()
