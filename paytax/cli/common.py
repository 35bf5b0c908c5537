"""Shared helpers for CLI commands."""

import json
from contextlib import contextmanager
from pathlib import Path

import click
import yaml

from paytax.sdk import NoMatchingBracket, get_setting, load_registry


@contextmanager
def sdk_errors():
    """Convert SDK errors into click errors with a clean message."""
    try:
        yield
    except NoMatchingBracket as e:
        raise click.ClickException(f"Tax table error: {e}")
    except (LookupError, ValueError) as e:
        # UnsupportedTaxYear, UnsupportedPayFrequency, InvalidAmountError,
        # pydantic ValidationError
        raise click.ClickException(str(e))


def load_input_file(path: str):
    """Load a YAML or JSON input file."""
    input_path = Path(path)
    if not input_path.exists():
        raise click.ClickException(f"Input file not found: {input_path}")
    with open(input_path, "r") as f:
        try:
            return yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise click.ClickException(f"Cannot parse {input_path}: {e}")


def get_registry():
    with sdk_errors():
        return load_registry()


def resolve_fallback(fallback: bool) -> bool:
    """--fallback flag, else the fallback_to_latest_year setting."""
    return fallback or bool(get_setting("fallback_to_latest_year", False))


def echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


def echo_model(model, output_format: str) -> None:
    """Print a pydantic model as JSON, or as indented key/value text."""
    data = model.model_dump(mode="json")
    if output_format == "json":
        echo_json(data)
        return
    _echo_text(data)


def _echo_text(data, indent: int = 0) -> None:
    pad = "  " * indent
    for key, value in data.items():
        if isinstance(value, dict):
            click.echo(f"{pad}{key}:")
            _echo_text(value, indent + 1)
        elif isinstance(value, list):
            click.echo(f"{pad}{key}:")
            for item in value:
                if isinstance(item, dict):
                    click.echo(f"{pad}  -")
                    _echo_text(item, indent + 2)
                else:
                    click.echo(f"{pad}  - {item}")
        elif isinstance(value, float):
            click.echo(f"{pad}{key}: {value:,.2f}")
        else:
            click.echo(f"{pad}{key}: {value}")
