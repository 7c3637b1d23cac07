"""Unit tests for configuration merging.

These tests verify:
- CLI args override config values when provided
- CLI args are ignored when None
- Fields the file left unset stay unset
"""

import pytest

from openings.application.config import (
    ElementFilterConfig,
    FiltersConfig,
    OpeningConfiguration,
    ParameterBindingConfig,
    ParameterBindingsConfig,
    PlacementSettingsConfig,
    TemplateCatalogConfig,
    merge_config_with_cli,
)
from openings.domain.value_objects import LengthUnit


class TestMergeConfigWithCli:
    """Tests for merge_config_with_cli function."""

    @pytest.fixture
    def base_config(self) -> OpeningConfiguration:
        return OpeningConfiguration(
            model_unit=LengthUnit.CENTIMETER,
            settings=PlacementSettingsConfig(
                rounding_granularity=25.0, minimum_clearance=20.0, protrusion=50.0
            ),
            templates=TemplateCatalogConfig(wall_round="Custom_Wall_Round"),
            parameters=ParameterBindingsConfig(
                identity_tag=ParameterBindingConfig(name="Mark")
            ),
            filters=FiltersConfig(runs=ElementFilterConfig(type_names=["Steel Pipe"])),
        )

    def test_no_overrides_returns_equivalent_config(
        self, base_config: OpeningConfiguration
    ) -> None:
        merged = merge_config_with_cli(base_config)

        assert merged.model_dump() == base_config.model_dump()
        assert merged is not base_config

    def test_override_protrusion(self, base_config: OpeningConfiguration) -> None:
        """CLI protrusion overrides the file value; the rest is unchanged."""
        merged = merge_config_with_cli(base_config, protrusion=0.0)

        assert merged.settings.protrusion == 0.0
        assert merged.settings.rounding_granularity == 25.0
        assert merged.settings.minimum_clearance == 20.0
        assert base_config.settings.protrusion == 50.0

    def test_override_rounding_and_clearance(
        self, base_config: OpeningConfiguration
    ) -> None:
        merged = merge_config_with_cli(
            base_config, rounding_granularity=10.0, minimum_clearance=5.0
        )

        assert merged.settings.rounding_granularity == 10.0
        assert merged.settings.minimum_clearance == 5.0

    def test_override_round_preferences(
        self, base_config: OpeningConfiguration
    ) -> None:
        merged = merge_config_with_cli(
            base_config,
            use_round_box_for_round_pipe=False,
            use_round_box_for_round_duct=True,
        )

        assert merged.settings.use_round_box_for_round_pipe is False
        assert merged.settings.use_round_box_for_round_duct is True

    def test_override_template_folder(
        self, base_config: OpeningConfiguration
    ) -> None:
        merged = merge_config_with_cli(base_config, template_folder="/srv/boxes")

        assert merged.templates.folder == "/srv/boxes"
        assert merged.templates.wall_round == "Custom_Wall_Round"
        assert "folder" in merged.templates.model_fields_set

    def test_unset_folder_stays_unset(self, base_config: OpeningConfiguration) -> None:
        """Callers fall back to bundled templates when no folder was given."""
        merged = merge_config_with_cli(base_config, protrusion=10.0)

        assert "folder" not in merged.templates.model_fields_set
        assert merged.templates.folder == "templates"

    def test_invalid_override_rejected(
        self, base_config: OpeningConfiguration
    ) -> None:
        with pytest.raises(ValueError):
            merge_config_with_cli(base_config, protrusion=-1.0)

    def test_unit_and_parameters_carried(
        self, base_config: OpeningConfiguration
    ) -> None:
        merged = merge_config_with_cli(base_config, protrusion=10.0)

        assert merged.model_unit is LengthUnit.CENTIMETER
        assert merged.parameters.identity_tag.name == "Mark"
        assert merged.filters.runs.type_names == ["Steel Pipe"]
