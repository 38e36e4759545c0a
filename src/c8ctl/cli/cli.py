"""c8ctl CLI - deploy resources and start process instances."""

import json
import os
from pathlib import Path
from typing import Dict, List, NoReturn, Optional, Sequence

import typer
from dotenv import load_dotenv

from c8ctl import __version__
from c8ctl.core.client import create_client
from c8ctl.core.config import resolve_tenant_id
from c8ctl.core.deployment import (
    classify_error,
    deploy_resolved,
    format_duplicate_error,
    format_error_report,
    resolve_resources,
)
from c8ctl.core.deployment.definitions import extract_process_id
from c8ctl.core.deployment.errors import INSTANCE_HEADING
from c8ctl.core.exceptions import (
    ApiError,
    DuplicateDefinitionError,
    PreconditionError,
    TransportError,
    UnknownError,
)
from c8ctl.core.models import DeploymentReportRow, ResourceFile
from c8ctl.core.utils import setup_logger

# Load environment variables
load_dotenv()

app = typer.Typer(
    invoke_without_command=True,
    no_args_is_help=True,
    help="c8ctl - Camunda 8 deployment CLI",
)

REPORT_COLUMNS = ("File", "Type", "ID", "Version", "Key")


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"c8ctl version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """c8ctl - Camunda 8 deployment CLI."""
    pass


def _fail(lines: Sequence[str]) -> NoReturn:
    """Print a diagnosis to stderr and exit with status 1."""
    for line in lines:
        typer.echo(line, err=True)
    raise typer.Exit(1)


def render_table(rows: List[Dict[str, str]]) -> List[str]:
    """Render report rows as a plain aligned text table."""
    widths = {col: len(col) for col in REPORT_COLUMNS}
    for row in rows:
        for col in REPORT_COLUMNS:
            widths[col] = max(widths[col], len(row[col]))

    def line(values: Dict[str, str]) -> str:
        return "  ".join(values[col].ljust(widths[col]) for col in REPORT_COLUMNS).rstrip()

    header = line({col: col for col in REPORT_COLUMNS})
    separator = "  ".join("-" * widths[col] for col in REPORT_COLUMNS)
    return [header, separator] + [line(row) for row in rows]


def _print_report(deployment_key: str, rows: List[DeploymentReportRow], json_output: bool) -> None:
    columns = [row.as_columns() for row in rows]
    if json_output:
        typer.echo(json.dumps({"deploymentKey": deployment_key, "resources": columns}, indent=2))
        return
    if columns:
        for text in render_table(columns):
            typer.echo(text)


def _resolve(paths: Sequence[str], base_path: str) -> List[ResourceFile]:
    try:
        return resolve_resources(paths, base_path)
    except PreconditionError as e:
        _fail([f"✗ {e}"])
    except DuplicateDefinitionError as e:
        _fail(format_duplicate_error(e))
    except OSError as e:
        _fail([f"✗ Failed to read resource file: {e}"])


@app.command()
def deploy(
    paths: Optional[List[str]] = typer.Argument(
        None, help="Files or directories containing .bpmn, .dmn and .form resources"
    ),
    tenant_id: Optional[str] = typer.Option(
        None, "--tenant-id", help="Tenant to deploy into (default: CAMUNDA_DEFAULT_TENANT_ID)"
    ),
    json_output: bool = typer.Option(False, "--json", help="Print the report as JSON"),
):
    """Deploy BPMN, DMN and form resources in a single deployment.

    Building-block folders (names containing "_bb-") are deployed first,
    then process applications (folders with a .process-application file),
    then everything else.

    Example:
        c8ctl deploy ./processes
        c8ctl deploy main.bpmn forms/ --tenant-id tenant-a
    """
    setup_logger("deploy")
    resources = _resolve(paths or [], os.getcwd())

    try:
        client = create_client()
    except ValueError as e:
        _fail([f"✗ {e}"])

    try:
        with client:
            outcome = deploy_resolved(client, resolve_tenant_id(tenant_id), resources)
    except (TransportError, ApiError, UnknownError) as e:
        _fail(format_error_report(classify_error(e, resources)))

    _print_report(outcome.result.deployment_key, outcome.rows, json_output)


@app.command()
def run(
    path: Path = typer.Argument(..., help="BPMN file to deploy and start"),
    variables: Optional[str] = typer.Option(
        None, "--variables", help="Process variables as a JSON object"
    ),
    tenant_id: Optional[str] = typer.Option(
        None, "--tenant-id", help="Tenant to deploy into (default: CAMUNDA_DEFAULT_TENANT_ID)"
    ),
):
    """Deploy a BPMN file and create a process instance of it.

    Example:
        c8ctl run order-process.bpmn
        c8ctl run order-process.bpmn --variables '{"orderId": 42}'
    """
    logger = setup_logger("run")

    parsed_variables = None
    if variables:
        try:
            parsed_variables = json.loads(variables)
        except json.JSONDecodeError as e:
            _fail([f"✗ Invalid JSON for variables: {e}"])
        if not isinstance(parsed_variables, dict):
            _fail(["✗ Invalid JSON for variables: expected a JSON object"])

    if path.suffix.lower() != ".bpmn":
        _fail([f"✗ Not a BPMN file: {path}"])

    resources = _resolve([str(path)], os.getcwd())
    process_id = extract_process_id(resources[0].content)
    if not process_id:
        _fail(["✗ Could not extract process ID from BPMN file"])

    try:
        client = create_client()
    except ValueError as e:
        _fail([f"✗ {e}"])

    tenant = resolve_tenant_id(tenant_id)
    with client:
        try:
            deploy_resolved(client, tenant, resources)
        except (TransportError, ApiError, UnknownError) as e:
            _fail(format_error_report(classify_error(e, resources)))

        logger.info(f"Creating process instance for {process_id}...")
        try:
            instance_key = client.create_process_instance(process_id, tenant, parsed_variables)
        except (TransportError, ApiError, UnknownError) as e:
            _fail(format_error_report(classify_error(e, []), heading=INSTANCE_HEADING))

    typer.echo(f"✓ Process instance created [Key: {instance_key}]")


if __name__ == "__main__":
    app()
