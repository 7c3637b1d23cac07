"""Pytest configuration and shared fixtures for opening box tests."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Any, Callable, Sequence

import pytest

from openings.contracts.dtos import GeometryResult, PathCurve
from openings.domain.exceptions import GeometryExtractionFailure
from openings.domain.value_objects import (
    ORIGIN,
    Y_AXIS,
    Z_AXIS,
    CrossSection,
    DimensionParameter,
    ElementCategory,
    ElementDescriptor,
    Frame,
    HostDescriptor,
    HostType,
    IntersectionRecord,
    LinkedModel,
    RoundSection,
    RunCategory,
    RunDescriptor,
    SectionShape,
    Transform,
    Vec3,
)
from openings.infrastructure import (
    BoxInstance,
    BoxTemplate,
    InMemoryDocument,
    TemplateParameter,
)


# =============================================================================
# Geometry kernel and source model fakes
# =============================================================================


@dataclass(frozen=True)
class FakeSolid:
    """Opaque solid identified by name, with a fixed volume and centroid."""

    name: str
    volume: float = 1.0
    centroid: Vec3 = ORIGIN


class FakeKernel:
    """Kernel whose overlaps are scripted per (run solid, host solid) pair.

    Elements are plain strings; unscripted pairs do not overlap.
    """

    def __init__(self) -> None:
        self.solids: dict[str, list[FakeSolid]] = {}
        self.results: dict[tuple[str, str], GeometryResult] = {}
        self.frames: dict[str, Frame] = {}
        self.broken: set[str] = set()
        self.extract_calls: Counter[str] = Counter()

    def add_element(self, element: str, count: int = 1) -> list[FakeSolid]:
        solids = [FakeSolid(f"{element}#{i}") for i in range(count)]
        self.solids[element] = solids
        return solids

    def overlap(
        self,
        run_solid: str,
        host_solid: str,
        volume: float = 1_000_000.0,
        centroid: Vec3 = ORIGIN,
    ) -> None:
        solid = FakeSolid(f"{run_solid}*{host_solid}", volume, centroid)
        self.results[(run_solid, host_solid)] = GeometryResult.success(solid)

    def fail(self, run_solid: str, host_solid: str) -> None:
        self.results[(run_solid, host_solid)] = GeometryResult.failure("kernel error")

    def transformed_solids(self, element: Any, transform: Transform) -> list[Any]:
        self.extract_calls[element] += 1
        if element in self.broken:
            raise GeometryExtractionFailure(element, "broken geometry")
        return list(self.solids.get(element, []))

    def intersect(self, a: Any, b: Any) -> GeometryResult:
        return self.results.get((a.name, b.name), GeometryResult.empty())

    def volume(self, solid: Any) -> float:
        return solid.volume

    def centroid(self, solid: Any) -> Vec3:
        return solid.centroid

    def cross_section_frame(self, run: RunDescriptor) -> Frame | None:
        return self.frames.get(run.element)


class FakeModel:
    """Source model backed by dictionaries keyed by element name."""

    def __init__(self) -> None:
        self.categories: dict[str, str] = {}
        self.lengths: dict[str, dict[str, float | None]] = {}
        self.curves: dict[str, PathCurve] = {}
        self.layers: dict[str, list[float]] = {}
        self.types: dict[str, str] = {}
        self.texts: dict[str, dict[str, str]] = {}
        self.order: list[str] = []

    def add(
        self,
        element: str,
        category: ElementCategory,
        curve: tuple[Vec3, Vec3] | None = None,
        layers: Sequence[float] = (),
        **lengths: float | None,
    ) -> ElementDescriptor:
        self.categories[element] = category.value
        self.lengths[element] = dict(lengths)
        if curve is not None:
            self.curves[element] = PathCurve(start=curve[0], end=curve[1])
        self.layers[element] = list(layers)
        self.order.append(element)
        return descriptor(element)

    def describe(self, element: str, type_name: str, **texts: str) -> None:
        self.types[element] = type_name
        self.texts[element] = dict(texts)

    def linked_models(self) -> list[LinkedModel]:
        return [LinkedModel(model_id="m", name="Model")]

    def collect(
        self,
        categories: Sequence[ElementCategory],
        model_ids: Sequence[str] | None = None,
    ) -> list[ElementDescriptor]:
        if model_ids is not None and "m" not in model_ids:
            return []
        wanted = {ElementCategory(category).value for category in categories}
        return [
            descriptor(element)
            for element in self.order
            if self.categories[element] in wanted
        ]

    def category(self, element: Any) -> str | None:
        return self.categories.get(element)

    def read_length(self, element: Any, parameter: DimensionParameter) -> float | None:
        return self.lengths.get(element, {}).get(parameter.value)

    def type_name(self, element: Any) -> str | None:
        return self.types.get(element)

    def parameter_text(self, element: Any, name: str) -> str | None:
        return self.texts.get(element, {}).get(name)

    def path_curve(self, element: Any) -> PathCurve | None:
        return self.curves.get(element)

    def layer_widths(self, element: Any) -> list[float]:
        return self.layers.get(element, [])


def descriptor(element: str, transform: Transform | None = None) -> ElementDescriptor:
    return ElementDescriptor(
        model_id="m",
        element_id=element,
        transform=transform or Transform.identity(),
        element=element,
    )


# =============================================================================
# Target document and template catalog
# =============================================================================


def box_template(
    name: str,
    host_type: HostType = HostType.WALL,
    shape: SectionShape = SectionShape.RECTANGULAR,
    read_only: frozenset[str] = frozenset(),
) -> BoxTemplate:
    """Template declaring the default box parameters."""
    secondary = "Height" if host_type is HostType.WALL else "Length"
    thickness = "Wall Thickness" if host_type is HostType.WALL else "Slab Thickness"
    thickness_id = (
        "6df7db81-c1d3-48f5-97a1-cd35960d9f1c"
        if host_type is HostType.WALL
        else "6b790a90-bd86-4366-84ee-8a6e60af2288"
    )
    declared = [
        ("Width", "6f459bf2-cf72-4223-9ee8-78e8252046a0", "length"),
        (secondary, "60bf9b18-17f9-4b8f-b214-fc13bc7b357f", "length"),
        (thickness, thickness_id, "length"),
        ("Additional Thickness 1", "ed4c28e9-f16d-49e8-bb98-7be58cdc2893", "length"),
        ("Additional Thickness 2", "1362f685-6d3d-4b3c-8a6d-51c59e1fd44b", "length"),
        ("Comments", None, "text"),
    ]
    return BoxTemplate(
        name=name,
        host_type=host_type,
        shape=shape,
        parameters=[
            TemplateParameter(
                name=param_name,
                identifier=identifier,
                kind=kind,
                read_only=param_name in read_only,
            )
            for param_name, identifier, kind in declared
        ],
    )


class FakeCatalog:
    """Catalog resolving every key to ``<host>_<shape>`` and counting loads."""

    def __init__(self, document: InMemoryDocument) -> None:
        self.document = document
        self.missing: set[tuple[HostType, SectionShape]] = set()
        self.unloadable: set[str] = set()
        self.resolve_calls = 0
        self.load_calls: Counter[str] = Counter()
        self.activated: list[str] = []

    def resolve(
        self, host_type: HostType, shape: SectionShape, category: RunCategory
    ) -> str | None:
        self.resolve_calls += 1
        if (host_type, shape) in self.missing:
            return None
        return f"{host_type.value}_{shape.value}"

    def load_or_get(self, path: str) -> BoxTemplate | None:
        self.load_calls[path] += 1
        if path in self.unloadable:
            return None
        existing = self.document.find_template(path)
        if existing is not None:
            return existing
        host, shape = path.split("_")
        return self.document.load_template(
            box_template(path, HostType(host), SectionShape(shape))
        )

    def activate(self, handle: BoxTemplate) -> None:
        self.activated.append(handle.name)
        self.document.activate_template(handle)


class DriftingDocument(InMemoryDocument):
    """Document whose instances shift after every rotation.

    Mimics templates that do not rotate about their insertion point.
    """

    drift = Vec3(7.0, -3.0, 2.0)

    def rotate_instance(
        self, instance: BoxInstance, origin: Vec3, axis: Vec3, angle: float
    ) -> None:
        super().rotate_instance(instance, origin, axis, angle)
        instance.location = instance.location + self.drift


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def kernel() -> FakeKernel:
    return FakeKernel()


@pytest.fixture
def model() -> FakeModel:
    return FakeModel()


@pytest.fixture
def document() -> InMemoryDocument:
    return InMemoryDocument(title="Test")


@pytest.fixture
def drifting_document() -> DriftingDocument:
    return DriftingDocument(title="Drifting")


@pytest.fixture
def catalog(document: InMemoryDocument) -> FakeCatalog:
    return FakeCatalog(document)


@pytest.fixture
def make_record() -> Callable[..., IntersectionRecord]:
    """Factory for intersection records with sensible defaults."""

    def factory(
        host_type: HostType = HostType.WALL,
        section: CrossSection | None = None,
        category: RunCategory = RunCategory.PIPE,
        centroid: Vec3 = Vec3(0.0, 0.0, 1500.0),
        host_normal: Vec3 | None = None,
        run_direction: Vec3 | None = None,
        host_thickness: float = 200.0,
        run_id: str = "p1",
        host_id: str = "h1",
    ) -> IntersectionRecord:
        if host_normal is None:
            host_normal = Y_AXIS if host_type is HostType.WALL else Z_AXIS
        if run_direction is None:
            run_direction = Y_AXIS if host_type is HostType.WALL else Z_AXIS
        run = RunDescriptor(
            model_id="mep",
            element_id=run_id,
            element=run_id,
            category=category,
            cross_section=section or RoundSection(diameter=100.0),
        )
        host = HostDescriptor(
            model_id="arch", element_id=host_id, element=host_id, host_type=host_type
        )
        return IntersectionRecord(
            run=run,
            host=host,
            centroid=centroid,
            host_normal=host_normal,
            run_direction=run_direction,
            host_thickness=host_thickness,
        )

    return factory


@pytest.fixture
def make_template() -> Callable[..., BoxTemplate]:
    """Factory for templates declaring the default box parameters."""
    return box_template
