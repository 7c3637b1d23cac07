"""Unit tests for box parameter write-back."""

import pytest

from openings.domain.services import DimensionCalculator, ParameterWriter
from openings.domain.value_objects import (
    HostType,
    PlacementSettings,
    RectangularSection,
    SectionShape,
    Vec3,
)
from openings.infrastructure import BoxTemplate, TemplateParameter


@pytest.fixture
def place(document):
    """Create an instance of ``template`` inside an open session."""

    def run(template):
        document.load_template(template)
        document.activate_template(template)
        return document.create_instance(template, Vec3(0.0, 0.0, 0.0))

    return run


class TestParameterWriter:
    """Tests for ParameterWriter."""

    def test_writes_every_parameter(
        self, document, place, make_record, make_template
    ) -> None:
        record = make_record(
            section=RectangularSection(width=300.0, height=200.0), host_thickness=250.0
        )
        spec = DimensionCalculator(PlacementSettings.from_millimeters()).calculate(
            record
        )

        with document.mutation_session("test"):
            instance = place(make_template("wall_box"))
            failed = ParameterWriter(document).write(instance, record, spec)

        assert failed == []
        assert document.get_parameter(instance, "Width") == 400.0
        assert document.get_parameter(instance, "Height") == 300.0
        assert document.get_parameter(instance, "Wall Thickness") == 250.0
        assert document.get_parameter(instance, "Additional Thickness 1") == 100.0
        assert document.get_parameter(instance, "Additional Thickness 2") == 100.0
        assert document.get_parameter(instance, "Comments") == record.identity_tag

    def test_floor_uses_length_and_slab_thickness(
        self, document, place, make_record, make_template
    ) -> None:
        record = make_record(host_type=HostType.FLOOR)
        spec = DimensionCalculator(PlacementSettings.from_millimeters()).calculate(
            record
        )

        with document.mutation_session("test"):
            instance = place(make_template("floor_box", HostType.FLOOR))
            failed = ParameterWriter(document).write(instance, record, spec)

        assert failed == []
        assert document.get_parameter(instance, "Length") == 200.0
        assert document.get_parameter(instance, "Slab Thickness") == 200.0

    def test_falls_back_to_name_when_identifier_unknown(
        self, document, place, make_record
    ) -> None:
        """Templates authored without shared identifiers are written by name."""
        template = BoxTemplate(
            name="legacy",
            host_type=HostType.WALL,
            shape=SectionShape.ROUND,
            parameters=[
                TemplateParameter(name="Width"),
                TemplateParameter(name="Height"),
                TemplateParameter(name="Wall Thickness"),
                TemplateParameter(name="Additional Thickness 1"),
                TemplateParameter(name="Additional Thickness 2"),
                TemplateParameter(name="Comments", kind="text"),
            ],
        )
        record = make_record()
        spec = DimensionCalculator(PlacementSettings.from_millimeters()).calculate(
            record
        )

        with document.mutation_session("test"):
            instance = place(template)
            failed = ParameterWriter(document).write(instance, record, spec)

        assert failed == []
        assert document.get_parameter(instance, "Width") == 200.0

    def test_read_only_and_missing_parameters_reported(
        self, document, place, make_record, make_template
    ) -> None:
        """Unwritable parameters are returned by name; the rest are written."""
        template = make_template("wall_box", read_only=frozenset({"Width"}))
        template.parameters = [
            parameter
            for parameter in template.parameters
            if parameter.name != "Comments"
        ]
        record = make_record()
        spec = DimensionCalculator(PlacementSettings.from_millimeters()).calculate(
            record
        )

        with document.mutation_session("test"):
            instance = place(template)
            failed = ParameterWriter(document).write(instance, record, spec)

        assert failed == ["Width", "Comments"]
        assert document.get_parameter(instance, "Width") is None
        assert document.get_parameter(instance, "Height") == 200.0

    def test_write_one_rejects_wrong_type(
        self, document, place, make_template
    ) -> None:
        writer = ParameterWriter(document)

        with document.mutation_session("test"):
            instance = place(make_template("wall_box"))
            written = writer.write_one(
                instance, writer.bindings.identity_tag, 42.0
            )

        assert not written
