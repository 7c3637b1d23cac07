"""Configuration schema and loading system for opening box placement.

Public API:
    - OpeningConfiguration: Root configuration model
    - PlacementSettingsConfig: Sizing settings in millimeters
    - TemplateCatalogConfig: Template folder and names
    - ParameterBindingsConfig: Template parameter bindings
    - load_config: Load configuration from a JSON file
    - load_config_from_dict: Load configuration from a dictionary
    - ConfigError: Exception for configuration errors
    - config_to_settings: Convert settings to the model unit
    - config_to_bindings: Convert parameter bindings to domain objects
    - config_to_filters: Convert element filters to domain objects
    - merge_config_with_cli: Apply CLI overrides

Example:
    >>> from pathlib import Path
    >>> from openings.application.config import load_config, ConfigError
    >>>
    >>> try:
    ...     config = load_config(Path("openings.json"))
    ...     print(f"Protrusion: {config.settings.protrusion} mm")
    ... except ConfigError as e:
    ...     print(f"Error: {e}")
"""

from openings.application.config.adapter import (
    config_to_bindings,
    config_to_filters,
    config_to_settings,
    template_folder,
)
from openings.application.config.loader import (
    ConfigError,
    load_config,
    load_config_from_dict,
    read_json_file,
)
from openings.application.config.merger import merge_config_with_cli
from openings.application.config.schema import (
    SUPPORTED_VERSIONS,
    ElementFilterConfig,
    FiltersConfig,
    OpeningConfiguration,
    ParameterBindingConfig,
    ParameterBindingsConfig,
    PlacementSettingsConfig,
    TemplateCatalogConfig,
)

__all__ = [
    "ConfigError",
    "ElementFilterConfig",
    "FiltersConfig",
    "OpeningConfiguration",
    "ParameterBindingConfig",
    "ParameterBindingsConfig",
    "PlacementSettingsConfig",
    "SUPPORTED_VERSIONS",
    "TemplateCatalogConfig",
    "config_to_bindings",
    "config_to_filters",
    "config_to_settings",
    "load_config",
    "load_config_from_dict",
    "merge_config_with_cli",
    "read_json_file",
    "template_folder",
]
