"""Loading of JSON settings files.

File system problems, malformed JSON and schema violations all surface as
``ConfigError`` with an ``error_type`` the CLI can report on. Scene and
template readers reuse ``read_json_file`` with their own error subclasses.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from openings.application.config.schema import OpeningConfiguration


class ConfigError(Exception):
    """A settings, scene or template file could not be used.

    Attributes:
        message: Human readable summary.
        error_type: One of file_not_found, permission_denied, file_read_error,
            json_parse or validation.
        path: Offending file, when there is one.
        details: Line and column for JSON errors, one entry per field for
            validation errors.
    """

    def __init__(
        self,
        message: str,
        error_type: str = "unknown",
        path: Path | None = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        self.message = message
        self.error_type = error_type
        self.path = path
        self.details = details or []
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


def _format_json_path(loc: tuple[str | int, ...]) -> str:
    """Render a pydantic error location the way it reads in the JSON file.

    Examples:
        >>> _format_json_path(("settings", "protrusion"))
        'settings.protrusion'
        >>> _format_json_path(("models", 0, "elements", 2, "category"))
        'models[0].elements[2].category'
    """
    parts: list[str] = []
    for segment in loc:
        if isinstance(segment, int):
            if parts:
                parts[-1] = f"{parts[-1]}[{segment}]"
            else:
                parts.append(f"[{segment}]")
        else:
            parts.append(str(segment))
    return ".".join(parts)


def extract_validation_errors(
    error: PydanticValidationError,
) -> list[dict[str, Any]]:
    """Extract path, message, value and error_type from a ValidationError."""
    details: list[dict[str, Any]] = []
    for err in error.errors():
        details.append(
            {
                "path": _format_json_path(err["loc"]),
                "message": err["msg"],
                "value": err.get("input"),
                "error_type": err["type"],
            }
        )
    return details


def format_validation_error_message(
    details: list[dict[str, Any]], heading: str = "Configuration validation failed:"
) -> str:
    lines = [heading]
    for detail in details:
        path = detail["path"]
        message = detail["message"]
        value = detail.get("value")
        if value is not None and not isinstance(value, (dict, list)):
            lines.append(f"  - {path}: {message} (got: {value!r})")
        else:
            lines.append(f"  - {path}: {message}")
    return "\n".join(lines)


def read_json_file(
    path: Path, error_cls: type[ConfigError] = ConfigError, kind: str = "config"
) -> Any:
    """Read and parse a JSON file.

    Args:
        path: File to read.
        error_cls: ConfigError subclass raised on failure.
        kind: Word used in error messages ("config", "scene", ...).

    Returns:
        The parsed JSON document.

    Raises:
        ConfigError: (or ``error_cls``) with error_type file_not_found,
            permission_denied, file_read_error or json_parse.
    """
    if not path.exists():
        raise error_cls(
            message=f"{kind.capitalize()} file not found: {path}",
            error_type="file_not_found",
            path=path,
        )

    try:
        content = path.read_text(encoding="utf-8")
    except PermissionError:
        raise error_cls(
            message=f"Permission denied reading {kind} file: {path}",
            error_type="permission_denied",
            path=path,
        )
    except OSError as e:
        raise error_cls(
            message=f"Error reading {kind} file: {path}: {e}",
            error_type="file_read_error",
            path=path,
        )

    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise error_cls(
            message=(
                f"Invalid JSON in {kind} file: {path} "
                f"(line {e.lineno}, column {e.colno}): {e.msg}"
            ),
            error_type="json_parse",
            path=path,
            details=[{"line": e.lineno, "column": e.colno, "message": e.msg}],
        )


def load_config(path: Path) -> OpeningConfiguration:
    """Load and validate an opening configuration from a JSON file.

    Args:
        path: Path to the JSON configuration file

    Returns:
        A validated OpeningConfiguration instance

    Raises:
        ConfigError: If the file cannot be loaded or validated. The
            error_type attribute indicates the specific error category.

    Example:
        >>> try:
        ...     config = load_config(Path("openings.json"))
        ... except ConfigError as e:
        ...     print(f"Error: {e}")
    """
    data = read_json_file(path)
    try:
        return OpeningConfiguration.model_validate(data)
    except PydanticValidationError as e:
        details = extract_validation_errors(e)
        raise ConfigError(
            message=format_validation_error_message(details),
            error_type="validation",
            path=path,
            details=details,
        )


def load_config_from_dict(data: dict[str, Any]) -> OpeningConfiguration:
    """Load and validate an opening configuration from a dictionary.

    Raises:
        ConfigError: If the data fails validation.
    """
    try:
        return OpeningConfiguration.model_validate(data)
    except PydanticValidationError as e:
        details = extract_validation_errors(e)
        raise ConfigError(
            message=format_validation_error_message(details),
            error_type="validation",
            details=details,
        )
