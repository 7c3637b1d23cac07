"""Unit tests for the in-memory target document."""

import math

import pytest

from openings.domain.exceptions import ParameterWriteFailure
from openings.domain.value_objects import X_AXIS, Y_AXIS, Z_AXIS, Vec3
from openings.infrastructure import InMemoryDocument, MutationSessionError
from openings.infrastructure.scene import DocumentSchema, InstanceSchema


@pytest.fixture
def template(document, make_template):
    template = make_template("OpeningBox_Wall_Round")
    with document.mutation_session("load"):
        document.load_template(template)
    document.activate_template(template)
    return template


class TestMutationSession:
    """Tests for mutation sessions."""

    def test_mutation_outside_session_rejected(self, document, template) -> None:
        with pytest.raises(MutationSessionError):
            document.create_instance(template, Vec3(0.0, 0.0, 0.0))

    def test_nested_sessions_rejected(self, document) -> None:
        with document.mutation_session("outer"):
            with pytest.raises(MutationSessionError, match="already open"):
                with document.mutation_session("inner"):
                    pass

    def test_commit_records_session(self, document, template) -> None:
        with document.mutation_session("place"):
            document.create_instance(template, Vec3(0.0, 0.0, 0.0))

        assert document.committed_sessions == ["load", "place"]
        assert len(document.instances) == 1

    def test_error_rolls_back_created_instances(self, document, template) -> None:
        with document.mutation_session("keep"):
            document.create_instance(template, Vec3(0.0, 0.0, 0.0))

        with pytest.raises(RuntimeError):
            with document.mutation_session("discard"):
                document.create_instance(template, Vec3(1.0, 0.0, 0.0))
                document.create_instance(template, Vec3(2.0, 0.0, 0.0))
                raise RuntimeError("boom")

        assert list(document.instances) == ["box-1"]
        assert document.committed_sessions == ["load", "keep"]

    def test_session_closed_after_error(self, document) -> None:
        with pytest.raises(ValueError):
            with document.mutation_session("first"):
                raise ValueError("boom")

        with document.mutation_session("second"):
            pass
        assert document.committed_sessions == ["second"]


class TestInstances:
    """Tests for creating and moving instances."""

    def test_inactive_template_rejected(self, document, make_template) -> None:
        inactive = make_template("inactive")
        with document.mutation_session("test"):
            with pytest.raises(ValueError, match="not active"):
                document.create_instance(inactive, Vec3(0.0, 0.0, 0.0))

    def test_load_template_is_idempotent(
        self, document, template, make_template
    ) -> None:
        with document.mutation_session("test"):
            again = document.load_template(make_template("OpeningBox_Wall_Round"))

        assert again is template

    def test_new_instance_is_unrotated(self, document, template) -> None:
        with document.mutation_session("test"):
            instance = document.create_instance(template, Vec3(1.0, 2.0, 3.0))

        frame = document.instance_frame(instance)
        assert frame.origin == Vec3(1.0, 2.0, 3.0)
        assert (frame.x_axis, frame.y_axis, frame.z_axis) == (X_AXIS, Y_AXIS, Z_AXIS)
        assert document.get_parameter(instance, "Width") is None

    def test_rotation_about_external_point(self, document, template) -> None:
        with document.mutation_session("test"):
            instance = document.create_instance(template, Vec3(10.0, 0.0, 0.0))
            document.rotate_instance(instance, Vec3(0.0, 0.0, 0.0), Z_AXIS, math.pi)

        assert document.instance_location(instance).is_close(Vec3(-10.0, 0.0, 0.0))
        assert document.instance_frame(instance).x_axis.is_close(-X_AXIS)

    def test_move(self, document, template) -> None:
        with document.mutation_session("test"):
            instance = document.create_instance(template, Vec3(0.0, 0.0, 0.0))
            document.move_instance(instance, Vec3(0.0, 5.0, 0.0))

        assert document.instance_location(instance) == Vec3(0.0, 5.0, 0.0)

    def test_ids_skip_stored_instances(self) -> None:
        schema = DocumentSchema(
            instances=[
                InstanceSchema(id="box-2", template="t", location=(0.0, 0.0, 0.0)),
            ]
        )
        document = InMemoryDocument.from_schema(schema)

        assert document._new_id() == "box-1"
        assert document._new_id() == "box-3"


class TestParameters:
    """Tests for parameter assignment."""

    def test_set_by_identifier(self, document, template) -> None:
        with document.mutation_session("test"):
            instance = document.create_instance(template, Vec3(0.0, 0.0, 0.0))
            document.set_parameter_by_id(
                instance, "6f459bf2-cf72-4223-9ee8-78e8252046a0", 250.0
            )

        assert document.get_parameter(instance, "Width") == 250.0

    def test_unknown_identifier(self, document, template) -> None:
        with document.mutation_session("test"):
            instance = document.create_instance(template, Vec3(0.0, 0.0, 0.0))
            with pytest.raises(ParameterWriteFailure, match="identifier"):
                document.set_parameter_by_id(instance, "no-such-guid", 1.0)

    @pytest.mark.parametrize(
        "name,value,reason",
        [
            ("Width", "wide", "expected a length"),
            ("Width", True, "expected a length"),
            ("Comments", 12.0, "expected text"),
            ("Mark", "x", "no parameter"),
        ],
    )
    def test_rejected_values(self, document, template, name, value, reason) -> None:
        with document.mutation_session("test"):
            instance = document.create_instance(template, Vec3(0.0, 0.0, 0.0))
            with pytest.raises(ParameterWriteFailure, match=reason):
                document.set_parameter_by_name(instance, name, value)

    def test_read_only_parameter(self, document, make_template) -> None:
        locked = make_template("locked", read_only=frozenset({"Height"}))
        document.activate_template(locked)
        with document.mutation_session("test"):
            instance = document.create_instance(locked, Vec3(0.0, 0.0, 0.0))
            with pytest.raises(ParameterWriteFailure, match="read-only"):
                document.set_parameter_by_name(instance, "Height", 100.0)


class TestSchemaRoundTrip:
    """Tests for reading and writing stored instances."""

    def test_stored_parameters_become_instance_parameters(self) -> None:
        schema = DocumentSchema(
            title="Stored",
            read_only=True,
            instances=[
                InstanceSchema(
                    id="box-1",
                    template="OpeningBox_Wall_Round",
                    location=(0.0, 0.0, 1400.0),
                    facing=(1.0, 0.0, 0.0),
                    parameters={"Width": 200.0, "Comments": "mep:p1|arch:w1"},
                )
            ],
        )
        document = InMemoryDocument.from_schema(schema)
        [instance] = document.iter_box_instances()

        assert document.is_read_only
        assert document.get_parameter(instance, "Comments") == "mep:p1|arch:w1"
        assert instance.parameters["Comments"].definition.kind == "text"
        stored = [instance.model_dump() for instance in schema.instances]
        assert [i.model_dump() for i in document.to_schema()] == stored
