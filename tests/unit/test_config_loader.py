"""Unit tests for configuration schema and loader.

These tests verify:
- Valid configurations are loaded correctly
- Defaults apply to omitted sections
- Unknown fields are rejected (extra="forbid")
- Negative lengths and unsupported versions are rejected
- Loader error handling (file not found, JSON parse errors)
"""

from pathlib import Path

import pytest
from pydantic import ValidationError as PydanticValidationError

from openings.application.config import (
    ConfigError,
    OpeningConfiguration,
    PlacementSettingsConfig,
    TemplateCatalogConfig,
    load_config,
    load_config_from_dict,
)
from openings.domain.value_objects import HostType, LengthUnit, SectionShape

FIXTURES_PATH = Path(__file__).parent.parent / "fixtures" / "configs"


class TestOpeningConfiguration:
    """Tests for the root configuration model."""

    def test_defaults(self) -> None:
        config = OpeningConfiguration()

        assert config.schema_version == "1.0"
        assert config.model_unit is None
        assert config.settings.rounding_granularity == 50.0
        assert config.settings.minimum_clearance == 30.0
        assert config.settings.protrusion == 100.0
        assert config.settings.use_round_box_for_round_pipe is True
        assert config.settings.use_round_box_for_round_duct is False
        assert config.parameters.identity_tag.name == "Comments"

    def test_newer_minor_version_accepted(self) -> None:
        assert OpeningConfiguration(schema_version="1.3").schema_version == "1.3"

    def test_unsupported_major_version_rejected(self) -> None:
        with pytest.raises(PydanticValidationError, match="Unsupported schema"):
            OpeningConfiguration(schema_version="2.0")

    def test_malformed_version_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            OpeningConfiguration(schema_version="one")

    @pytest.mark.parametrize(
        "field", ["rounding_granularity", "minimum_clearance", "protrusion"]
    )
    def test_negative_lengths_rejected(self, field: str) -> None:
        with pytest.raises(PydanticValidationError):
            PlacementSettingsConfig(**{field: -1.0})

    def test_zero_rounding_allowed(self) -> None:
        assert PlacementSettingsConfig(rounding_granularity=0).rounding_granularity == 0


class TestTemplateCatalogConfig:
    """Tests for template names per host and shape."""

    @pytest.mark.parametrize(
        "host_type,shape,expected",
        [
            (HostType.WALL, SectionShape.RECTANGULAR, "OpeningBox_Wall_Rectangular"),
            (HostType.WALL, SectionShape.ROUND, "OpeningBox_Wall_Round"),
            (HostType.FLOOR, SectionShape.RECTANGULAR, "OpeningBox_Floor_Rectangular"),
            (HostType.FLOOR, SectionShape.ROUND, "OpeningBox_Floor_Round"),
        ],
    )
    def test_family_names(self, host_type, shape, expected) -> None:
        assert TemplateCatalogConfig().family_name(host_type, shape) == expected

    def test_extension_must_start_with_dot(self) -> None:
        with pytest.raises(PydanticValidationError):
            TemplateCatalogConfig(extension="json")


class TestLoadConfig:
    """Tests for load_config."""

    def test_valid_file(self) -> None:
        config = load_config(FIXTURES_PATH / "valid.json")

        assert config.model_unit is LengthUnit.MILLIMETER
        assert config.settings.rounding_granularity == 25.0
        assert config.settings.use_round_box_for_round_duct is True
        assert config.parameters.identity_tag.name == "Mark"
        assert config.parameters.identity_tag.identifier is None

    def test_file_not_found(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path / "missing.json")

        assert exc_info.value.error_type == "file_not_found"
        assert exc_info.value.path == tmp_path / "missing.json"

    def test_invalid_json(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config(FIXTURES_PATH / "invalid_json.json")

        error = exc_info.value
        assert error.error_type == "json_parse"
        assert error.details[0]["line"] == 5
        assert "Invalid JSON" in str(error)

    def test_unknown_field(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config(FIXTURES_PATH / "unknown_field.json")

        error = exc_info.value
        assert error.error_type == "validation"
        assert error.details[0]["path"] == "settings.offset"

    def test_negative_protrusion(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config(FIXTURES_PATH / "negative_protrusion.json")

        detail = exc_info.value.details[0]
        assert detail["path"] == "settings.protrusion"
        assert detail["value"] == -20
        assert "(got: -20)" in exc_info.value.message


class TestLoadConfigFromDict:
    """Tests for load_config_from_dict."""

    def test_empty_dict_gives_defaults(self) -> None:
        assert load_config_from_dict({}) == OpeningConfiguration()

    def test_invalid_unit(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config_from_dict({"model_unit": "furlong"})

        assert exc_info.value.details[0]["path"] == "model_unit"
        assert exc_info.value.path is None
