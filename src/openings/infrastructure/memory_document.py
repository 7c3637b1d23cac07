"""In-memory target document for opening box placement.

Holds loaded box templates and placed instances. Every mutation must happen
inside :meth:`InMemoryDocument.mutation_session`; instances created in a
session that exits with an exception are removed again.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator

from openings.domain.exceptions import ParameterWriteFailure
from openings.domain.value_objects import (
    X_AXIS,
    Y_AXIS,
    Z_AXIS,
    Frame,
    HostType,
    SectionShape,
    Vec3,
)
from openings.infrastructure.scene import (
    DocumentSchema,
    InstanceSchema,
    to_point,
    to_vec,
)

logger = logging.getLogger(__name__)


class MutationSessionError(RuntimeError):
    """Raised on mutation outside a session, or when sessions are nested."""


@dataclass(frozen=True)
class TemplateParameter:
    """A parameter declared by a box template.

    Attributes:
        kind: "length" parameters take numbers, "text" parameters strings.
    """

    name: str
    identifier: str | None = None
    kind: str = "length"
    read_only: bool = False


@dataclass
class BoxTemplate:
    """A loaded box template."""

    name: str
    host_type: HostType
    shape: SectionShape
    parameters: list[TemplateParameter] = field(default_factory=list)
    active: bool = False


@dataclass
class InstanceParameter:
    definition: TemplateParameter
    value: Any = None


@dataclass
class BoxInstance:
    """A placed box: insertion point, local axes and parameter values."""

    id: str
    template: str
    location: Vec3
    hand: Vec3 = X_AXIS
    facing: Vec3 = Y_AXIS
    up: Vec3 = Z_AXIS
    parameters: dict[str, InstanceParameter] = field(default_factory=dict)

    @property
    def frame(self) -> Frame:
        return Frame(
            origin=self.location, x_axis=self.hand, y_axis=self.facing, z_axis=self.up
        )


class InMemoryDocument:
    """Mutable document implementing ``TargetModelProtocol``."""

    def __init__(
        self,
        title: str = "Untitled",
        active: bool = True,
        read_only: bool = False,
        is_template: bool = False,
    ) -> None:
        self.title = title
        self._active = active
        self._read_only = read_only
        self._is_template = is_template
        self.templates: dict[str, BoxTemplate] = {}
        self.instances: dict[str, BoxInstance] = {}
        self.committed_sessions: list[str] = []
        self._session: str | None = None
        self._created_in_session: list[str] = []
        self._next_id = 1

    @classmethod
    def from_schema(cls, schema: DocumentSchema) -> InMemoryDocument:
        """Build a document holding the instances stored in a scene."""
        document = cls(
            title=schema.title,
            active=schema.active,
            read_only=schema.read_only,
            is_template=schema.is_template,
        )
        for stored in schema.instances:
            instance = BoxInstance(
                id=stored.id,
                template=stored.template,
                location=to_vec(stored.location),
                hand=to_vec(stored.hand),
                facing=to_vec(stored.facing),
                up=to_vec(stored.up),
                parameters={
                    name: InstanceParameter(
                        TemplateParameter(
                            name=name,
                            kind="text" if isinstance(value, str) else "length",
                        ),
                        value,
                    )
                    for name, value in stored.parameters.items()
                },
            )
            document.instances[instance.id] = instance
        document._next_id = len(document.instances) + 1
        return document

    def to_schema(self) -> list[InstanceSchema]:
        return [
            InstanceSchema(
                id=instance.id,
                template=instance.template,
                location=to_point(instance.location),
                hand=to_point(instance.hand),
                facing=to_point(instance.facing),
                up=to_point(instance.up),
                parameters={
                    name: parameter.value
                    for name, parameter in instance.parameters.items()
                },
            )
            for instance in self.instances.values()
        ]

    # -- document state ----------------------------------------------------

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def is_read_only(self) -> bool:
        return self._read_only

    @property
    def is_template_document(self) -> bool:
        return self._is_template

    @contextmanager
    def mutation_session(self, name: str) -> Iterator[InMemoryDocument]:
        """Exclusive session; created instances are rolled back on error."""
        if self._session is not None:
            raise MutationSessionError(
                f"Session '{self._session}' is already open; cannot start '{name}'"
            )
        self._session = name
        self._created_in_session = []
        try:
            yield self
        except BaseException:
            for instance_id in self._created_in_session:
                self.instances.pop(instance_id, None)
            logger.warning(
                f"Rolled back session '{name}' "
                f"({len(self._created_in_session)} instance(s) removed)"
            )
            raise
        else:
            self.committed_sessions.append(name)
        finally:
            self._session = None
            self._created_in_session = []

    def _require_session(self) -> None:
        if self._session is None:
            raise MutationSessionError("Model mutation outside a mutation session")

    # -- templates ---------------------------------------------------------

    def find_template(self, name: str) -> BoxTemplate | None:
        return self.templates.get(name)

    def load_template(self, template: BoxTemplate) -> BoxTemplate:
        """Add a template; an already-loaded name returns the existing one."""
        self._require_session()
        existing = self.templates.get(template.name)
        if existing is not None:
            return existing
        self.templates[template.name] = template
        logger.debug(f"Loaded template {template.name}")
        return template

    def activate_template(self, template: BoxTemplate) -> None:
        template.active = True

    # -- instances ---------------------------------------------------------

    def create_instance(self, template: BoxTemplate, location: Vec3) -> BoxInstance:
        self._require_session()
        if not template.active:
            raise ValueError(f"Template '{template.name}' is not active")
        instance_id = self._new_id()
        instance = BoxInstance(
            id=instance_id,
            template=template.name,
            location=location,
            parameters={
                parameter.name: InstanceParameter(parameter)
                for parameter in template.parameters
            },
        )
        self.instances[instance_id] = instance
        self._created_in_session.append(instance_id)
        return instance

    def _new_id(self) -> str:
        while f"box-{self._next_id}" in self.instances:
            self._next_id += 1
        instance_id = f"box-{self._next_id}"
        self._next_id += 1
        return instance_id

    def instance_id(self, instance: BoxInstance) -> str:
        return instance.id

    def instance_location(self, instance: BoxInstance) -> Vec3:
        return instance.location

    def instance_frame(self, instance: BoxInstance) -> Frame:
        return instance.frame

    def rotate_instance(
        self, instance: BoxInstance, origin: Vec3, axis: Vec3, angle: float
    ) -> None:
        self._require_session()
        rotated = instance.frame.rotated(origin, axis, angle)
        instance.location = rotated.origin
        instance.hand = rotated.x_axis
        instance.facing = rotated.y_axis
        instance.up = rotated.z_axis

    def move_instance(self, instance: BoxInstance, delta: Vec3) -> None:
        self._require_session()
        instance.location = instance.location + delta

    def iter_box_instances(self) -> list[BoxInstance]:
        return list(self.instances.values())

    # -- parameters --------------------------------------------------------

    def set_parameter_by_id(
        self, instance: BoxInstance, identifier: str, value: Any
    ) -> None:
        for parameter in instance.parameters.values():
            if parameter.definition.identifier == identifier:
                self._assign(parameter, value)
                return
        raise ParameterWriteFailure(identifier, "no parameter with this identifier")

    def set_parameter_by_name(
        self, instance: BoxInstance, name: str, value: Any
    ) -> None:
        parameter = instance.parameters.get(name)
        if parameter is None:
            raise ParameterWriteFailure(name, "no parameter with this name")
        self._assign(parameter, value)

    def _assign(self, parameter: InstanceParameter, value: Any) -> None:
        self._require_session()
        definition = parameter.definition
        if definition.read_only:
            raise ParameterWriteFailure(definition.name, "parameter is read-only")
        if definition.kind == "text":
            if not isinstance(value, str):
                raise ParameterWriteFailure(definition.name, "expected text")
        elif isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ParameterWriteFailure(definition.name, "expected a length")
        parameter.value = value

    def get_parameter(self, instance: BoxInstance, name: str) -> Any:
        parameter = instance.parameters.get(name)
        return parameter.value if parameter is not None else None
