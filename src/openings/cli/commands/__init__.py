"""CLI command implementations for the openings application.

This package contains subcommands for the openings CLI, including:
- validate: Validate a configuration file
- templates: List the box templates a batch expects
"""

from openings.cli.commands.templates import templates_command
from openings.cli.commands.validate import validate_command

__all__ = ["templates_command", "validate_command"]
