"""
d2-models command line.

Commands:
- inspect: compile a schema JSON file and show its properties and validations
- fetch: load one model from a running api
- version: print the package version
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import asdict
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from d2_models import __version__
from d2_models.config import ApiConfig
from d2_models.errors import D2ModelError
from d2_models.runtime.api import HttpApi
from d2_models.runtime.logging import setup_logging
from d2_models.runtime.model_definition import ModelDefinition, load_model_definitions

app = typer.Typer(
    help="Compile remote schemas into model definitions",
    no_args_is_help=True,
)
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    log_json: bool = typer.Option(False, "--log-json", help="Log as JSON Lines"),
) -> None:
    setup_logging(logging.DEBUG if verbose else logging.WARNING, json_format=log_json)


def _load_definition(schema_file: Path) -> ModelDefinition:
    try:
        payload = json.loads(schema_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        typer.secho(f"Cannot read {schema_file}: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    try:
        return ModelDefinition.create_from_schema(payload)
    except D2ModelError as e:
        typer.secho(f"Invalid schema: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


@app.command()
def inspect(
    schema_file: Path = typer.Argument(..., help="Schema JSON file", exists=True),
    as_json: bool = typer.Option(False, "--json", help="Print validations as JSON"),
) -> None:
    """
    Compile a schema file and show the resulting definition.

    Examples:
        d2-models inspect dataElement.json
        d2-models inspect dataElement.json --json
    """
    definition = _load_definition(schema_file)

    if as_json:
        output = {
            "name": definition.name,
            "isMetaData": definition.is_metadata,
            "apiEndpoint": definition.api_endpoint,
            "modelValidations": {
                key: asdict(validation)
                for key, validation in definition.model_validations.items()
            },
        }
        typer.echo(json.dumps(output, indent=2))
        return

    table = Table(title=f"{definition.name} ({definition.api_endpoint or 'no endpoint'})")
    table.add_column("Property", no_wrap=True)
    table.add_column("Type")
    table.add_column("Required")
    table.add_column("Persisted")
    table.add_column("Owner")
    table.add_column("Writable")
    table.add_column("Max")

    for key, validation in definition.model_validations.items():
        descriptor = definition.model_properties[key]
        table.add_row(
            key,
            validation.type,
            _flag(validation.required),
            _flag(validation.persisted),
            _flag(validation.owner),
            _flag(descriptor.writable),
            "" if validation.max is None else f"{validation.max:g}",
        )

    console.print(table)


@app.command()
def fetch(
    model: str = typer.Argument(..., help="Model name, e.g. dataElement"),
    identifier: str = typer.Argument(..., help="Model identifier"),
) -> None:
    """
    Fetch one model from the api configured by D2_API_* environment variables.
    """

    async def _fetch() -> dict:
        async with HttpApi(ApiConfig.from_env()) as api:
            definitions = await load_model_definitions(api)
            if model not in definitions:
                raise D2ModelError(f"No model definition named {model!r}")
            instance = await definitions[model].get(identifier)
            return instance.data_values

    try:
        data_values = asyncio.run(_fetch())
    except D2ModelError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.echo(json.dumps(data_values, indent=2, default=str))


@app.command()
def version() -> None:
    """Print the d2-models version."""
    typer.echo(__version__)


def _flag(value: bool) -> str:
    return "yes" if value else ""


if __name__ == "__main__":
    app()
