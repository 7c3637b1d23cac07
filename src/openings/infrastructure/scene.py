"""JSON scene files describing a federated model and its target document.

A scene lists linked sub-models (each placed in working space by an origin
and a rotation about Z) with their run, wall and floor elements, plus the
target document that boxes are placed into. Element geometry is given as
axis-aligned boxes in the element's sub-model coordinates.

Example scene::

    {
      "schema_version": "1.0",
      "unit": "mm",
      "models": [
        {"id": "mep", "name": "MEP", "elements": [
          {"id": "p1", "category": "pipes",
           "parameters": {"pipe_diameter": 100},
           "curve": {"start": [-1000, 0, 1500], "end": [1000, 0, 1500]},
           "solids": [{"min": [-1000, -50, 1450], "max": [1000, 50, 1550]}]}
        ]}
      ],
      "document": {"title": "Coordination", "instances": []}
    }
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import TYPE_CHECKING, Any, Sequence

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError

from openings.application.config.loader import (
    ConfigError,
    extract_validation_errors,
    format_validation_error_message,
    read_json_file,
)
from openings.contracts.dtos import PathCurve
from openings.domain.value_objects import (
    DimensionParameter,
    ElementCategory,
    ElementDescriptor,
    Frame,
    LengthUnit,
    LinkedModel,
    Transform,
    Vec3,
)

if TYPE_CHECKING:
    from openings.infrastructure.memory_document import InMemoryDocument

logger = logging.getLogger(__name__)

Point = tuple[float, float, float]


class SceneError(ConfigError):
    """Raised when a scene file cannot be read or validated."""


class SolidSchema(BaseModel):
    """Axis-aligned box in element coordinates."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    min_corner: Point = Field(..., alias="min")
    max_corner: Point = Field(..., alias="max")

    @model_validator(mode="after")
    def validate_corners(self) -> SolidSchema:
        if any(lo > hi for lo, hi in zip(self.min_corner, self.max_corner)):
            raise ValueError("min corner must not exceed max corner")
        return self


class CurveSchema(BaseModel):
    """Straight path curve in element coordinates."""

    model_config = ConfigDict(extra="forbid")

    start: Point
    end: Point


class FrameSchema(BaseModel):
    """Connector frame: x = section width, y = section height, z = flow."""

    model_config = ConfigDict(extra="forbid")

    origin: Point = (0.0, 0.0, 0.0)
    x_axis: Point
    y_axis: Point
    z_axis: Point


class ElementSchema(BaseModel):
    """One source element.

    ``parameters`` maps well-known dimension names (``pipe_diameter``,
    ``curve_width``, ``cable_tray_height``, ``wall_width``, ...) to lengths
    in the scene unit; ``null`` marks a parameter present without a value.
    ``properties`` holds free-text parameters used only for filtering.
    """

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    category: str
    type_name: str | None = None
    parameters: dict[str, float | None] = Field(default_factory=dict)
    properties: dict[str, str] = Field(default_factory=dict)
    curve: CurveSchema | None = None
    layers: list[float] = Field(default_factory=list)
    solids: list[SolidSchema] = Field(default_factory=list)
    connector_frame: FrameSchema | None = None


class LinkedModelSchema(BaseModel):
    """A sub-model and its placement in working space."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    name: str = ""
    origin: Point = (0.0, 0.0, 0.0)
    rotation_z_degrees: float = 0.0
    loaded: bool = True
    elements: list[ElementSchema] = Field(default_factory=list)


class InstanceSchema(BaseModel):
    """A box instance stored in the target document."""

    model_config = ConfigDict(extra="forbid")

    id: str
    template: str
    location: Point
    hand: Point = (1.0, 0.0, 0.0)
    facing: Point = (0.0, 1.0, 0.0)
    up: Point = (0.0, 0.0, 1.0)
    parameters: dict[str, Any] = Field(default_factory=dict)


class DocumentSchema(BaseModel):
    """The target document and its state flags."""

    model_config = ConfigDict(extra="forbid")

    title: str = "Untitled"
    active: bool = True
    read_only: bool = False
    is_template: bool = False
    instances: list[InstanceSchema] = Field(default_factory=list)


class SceneSchema(BaseModel):
    """Root of a scene file."""

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(default="1.0", pattern=r"^\d+\.\d+$")
    unit: LengthUnit = LengthUnit.MILLIMETER
    models: list[LinkedModelSchema] = Field(default_factory=list)
    document: DocumentSchema = Field(default_factory=DocumentSchema)

    @model_validator(mode="after")
    def validate_unique_ids(self) -> SceneSchema:
        model_ids = [model.id for model in self.models]
        if len(model_ids) != len(set(model_ids)):
            raise ValueError("model ids must be unique")
        for model in self.models:
            element_ids = [element.id for element in model.elements]
            if len(element_ids) != len(set(element_ids)):
                raise ValueError(f"element ids in model '{model.id}' must be unique")
        return self


def to_vec(point: Sequence[float]) -> Vec3:
    return Vec3.from_iterable(point)


def to_point(vector: Vec3) -> Point:
    return vector.as_tuple()


def load_scene(path: Path) -> SceneSchema:
    """Load and validate a scene file.

    Raises:
        SceneError: If the file cannot be read, parsed or validated.
    """
    data = read_json_file(path, error_cls=SceneError, kind="scene")
    try:
        return SceneSchema.model_validate(data)
    except PydanticValidationError as e:
        details = extract_validation_errors(e)
        raise SceneError(
            message=format_validation_error_message(
                details, heading="Scene validation failed:"
            ),
            error_type="validation",
            path=path,
            details=details,
        )


def save_scene(document: InMemoryDocument, scene: SceneSchema, path: Path) -> None:
    """Write ``scene`` with the document's current instances to ``path``."""
    updated = scene.model_copy(
        update={
            "document": scene.document.model_copy(
                update={"instances": document.to_schema()}
            )
        }
    )
    payload = updated.model_dump(mode="json", by_alias=True)
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    logger.info(f"Wrote {len(payload['document']['instances'])} instance(s) to {path}")


class SceneElement:
    """Element handle handed to the engine: the schema plus its model id."""

    __slots__ = ("model_id", "schema")

    def __init__(self, model_id: str, schema: ElementSchema) -> None:
        self.model_id = model_id
        self.schema = schema

    def __repr__(self) -> str:
        return f"SceneElement({self.model_id}:{self.schema.id})"


class SceneModel:
    """Read access to the sub-models of a scene.

    Implements ``ModelQueryProtocol``.
    """

    def __init__(self, scene: SceneSchema) -> None:
        self.scene = scene
        self._models = {
            model.id: LinkedModel(
                model_id=model.id,
                name=model.name or model.id,
                transform=Transform.rotation_z(
                    math.radians(model.rotation_z_degrees), to_vec(model.origin)
                ),
                is_loaded=model.loaded,
            )
            for model in scene.models
        }

    @property
    def unit(self) -> LengthUnit:
        return self.scene.unit

    def linked_models(self) -> list[LinkedModel]:
        return list(self._models.values())

    def collect(
        self,
        categories: Sequence[ElementCategory],
        model_ids: Sequence[str] | None = None,
    ) -> list[ElementDescriptor]:
        wanted = {ElementCategory(category).value for category in categories}
        selected = set(model_ids) if model_ids is not None else None
        descriptors = []
        for model in self.scene.models:
            linked = self._models[model.id]
            if not linked.is_loaded:
                logger.debug(f"Skipping unloaded model {model.id}")
                continue
            if selected is not None and model.id not in selected:
                continue
            for element in model.elements:
                if element.category not in wanted:
                    continue
                descriptors.append(
                    ElementDescriptor(
                        model_id=model.id,
                        element_id=element.id,
                        transform=linked.transform,
                        element=SceneElement(model.id, element),
                    )
                )
        return descriptors

    def category(self, element: SceneElement) -> str:
        return element.schema.category

    def read_length(
        self, element: SceneElement, parameter: DimensionParameter
    ) -> float | None:
        return element.schema.parameters.get(parameter.value)

    def type_name(self, element: SceneElement) -> str | None:
        return element.schema.type_name

    def parameter_text(self, element: SceneElement, name: str) -> str | None:
        if name in element.schema.properties:
            return element.schema.properties[name]
        if name not in element.schema.parameters:
            return None
        value = element.schema.parameters[name]
        return "" if value is None else f"{value:g}"

    def path_curve(self, element: SceneElement) -> PathCurve | None:
        curve = element.schema.curve
        if curve is None:
            return None
        return PathCurve(start=to_vec(curve.start), end=to_vec(curve.end))

    def layer_widths(self, element: SceneElement) -> list[float]:
        return list(element.schema.layers)


def frame_from_schema(schema: FrameSchema) -> Frame:
    return Frame(
        origin=to_vec(schema.origin),
        x_axis=to_vec(schema.x_axis),
        y_axis=to_vec(schema.y_axis),
        z_axis=to_vec(schema.z_axis),
    )
