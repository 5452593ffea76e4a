"""CLI helper functions for logging setup and error handling."""

import logging
from typing import Any

from rich.console import Console

from colmapper.config.settings import Settings
from colmapper.core.exceptions import MapperConfigurationError, MapperError
from colmapper.core.services import ConfigLoadError, TargetNotFoundError

err_console = Console(stderr=True)


def configure_logging(settings: Settings) -> None:
    """Configure root logging from settings."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def handle_error(error: Exception) -> int:
    """Handle an exception and print appropriate error message.

    Args:
        error: The exception to handle.

    Returns:
        Exit code (1 for handled errors, 2 for unexpected errors).
    """
    if isinstance(error, TargetNotFoundError):
        err_console.print(f"[red]Error:[/red] Target not found: {error.target!r}")
        err_console.print(f"[dim]{error.reason}[/dim]")
        return 1

    elif isinstance(error, MapperConfigurationError):
        err_console.print(f"[red]Mapping error:[/red] {error.message}")
        return 1

    elif isinstance(error, MapperError):
        err_console.print(f"[red]Error:[/red] {error.message}")
        return 1

    elif isinstance(error, ConfigLoadError):
        err_console.print(f"[red]Configuration error:[/red] {error}")
        return 1

    elif isinstance(error, FileNotFoundError):
        err_console.print(f"[red]Error:[/red] File not found: {error.filename}")
        return 1

    else:
        err_console.print(f"[red]Unexpected error:[/red] {error}")
        err_console.print("[dim]This may be a bug. Please report it.[/dim]")
        return 2


def serialize_for_json(obj: Any) -> Any:
    """Serialize an object to JSON-compatible format.

    Handles pydantic models, column maps and column types.
    """
    if hasattr(obj, "model_dump"):
        return obj.model_dump(mode="json")
    elif hasattr(obj, "to_dict"):
        return obj.to_dict()
    elif hasattr(obj, "cql"):
        return obj.cql()
    elif isinstance(obj, dict):
        return {k: serialize_for_json(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [serialize_for_json(item) for item in obj]
    elif isinstance(obj, type):
        return obj.__qualname__
    elif obj is None or isinstance(obj, (str, int, float, bool)):
        return obj
    else:
        return repr(obj)
