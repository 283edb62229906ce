"""Output helpers for the didsol CLI."""

import json
from enum import Enum
from typing import Any, NoReturn

import typer


class OutputFormat(str, Enum):
    json = "json"
    pretty = "pretty"


def _render_pretty(data: Any, indent: int = 0) -> str:
    pad = "  " * indent
    if isinstance(data, dict):
        lines = []
        for key, value in data.items():
            if isinstance(value, (dict, list)) and value:
                lines.append(f"{pad}{key}:")
                lines.append(_render_pretty(value, indent + 1))
            else:
                lines.append(f"{pad}{key}: {value if value != [] else '-'}")
        return "\n".join(lines)
    if isinstance(data, list):
        return "\n".join(
            _render_pretty(item, indent + 1) if isinstance(item, (dict, list))
            else f"{pad}- {item}"
            for item in data
        )
    return f"{pad}{data}"


def output(data: Any, format: OutputFormat = OutputFormat.json) -> None:
    """Print a result to stdout."""
    if format == OutputFormat.pretty:
        typer.echo(_render_pretty(data))
    else:
        typer.echo(json.dumps(data, indent=2, ensure_ascii=False))


def output_error(code: str, message: str, exit_code: int) -> NoReturn:
    """Print an error object to stdout and exit."""
    typer.echo(json.dumps({"error": {"code": code, "message": message}}, indent=2))
    raise typer.Exit(code=exit_code)
