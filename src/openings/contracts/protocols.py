"""Collaborator protocols for dependency injection.

This module defines protocol classes for the capabilities the placement
engine consumes but does not implement: the geometry kernel, read access to
the federated source model, the mutable target model and the box template
catalog. Infrastructure implementations depend on these protocols, so the
domain services can be driven by any host application or by test fakes.
"""

from __future__ import annotations

from typing import (
    TYPE_CHECKING,
    Any,
    ContextManager,
    Iterable,
    Protocol,
    Sequence,
    runtime_checkable,
)

if TYPE_CHECKING:
    from openings.contracts.dtos import GeometryResult, PathCurve
    from openings.domain.value_objects import (
        DimensionParameter,
        ElementCategory,
        ElementDescriptor,
        Frame,
        HostType,
        LinkedModel,
        RunCategory,
        RunDescriptor,
        SectionShape,
        Transform,
        Vec3,
    )


@runtime_checkable
class GeometryKernelProtocol(Protocol):
    """Protocol for the solid geometry kernel.

    Implementations own the solid representation; the engine only passes
    solids back into the kernel.

    Example:
        ```python
        class BoxGeometryKernel:
            def intersect(self, a: Solid, b: Solid) -> GeometryResult:
                ...
        ```
    """

    def transformed_solids(self, element: Any, transform: Transform) -> list[Any]:
        """Return the element's solids mapped into working space.

        Args:
            element: Opaque element handle.
            transform: Element-to-working-space transform.

        Returns:
            Solids with non-zero volume; empty when the element has none.

        Raises:
            GeometryExtractionFailure: If the geometry cannot be read.
        """
        ...

    def intersect(self, a: Any, b: Any) -> GeometryResult:
        """Boolean intersection of two solids.

        Args:
            a: First solid.
            b: Second solid.

        Returns:
            A result carrying the overlap solid, no solid when disjoint, or
            the kernel error when the operation failed.
        """
        ...

    def volume(self, solid: Any) -> float:
        """Return the volume of a solid."""
        ...

    def centroid(self, solid: Any) -> Vec3:
        """Return the centroid of a solid."""
        ...

    def cross_section_frame(self, run: RunDescriptor) -> Frame | None:
        """Return the run's connector frame in working space, if any.

        The frame's x axis follows the section width, y the section height
        and z the flow direction.
        """
        ...


@runtime_checkable
class ModelQueryProtocol(Protocol):
    """Protocol for read access to the federated source model."""

    def linked_models(self) -> list[LinkedModel]:
        """Return every sub-model with its working-space transform."""
        ...

    def collect(
        self,
        categories: Sequence[ElementCategory],
        model_ids: Sequence[str] | None = None,
    ) -> list[ElementDescriptor]:
        """Enumerate elements of the given categories.

        Args:
            categories: Source categories to collect.
            model_ids: Restrict collection to these sub-models; all loaded
                sub-models when None.

        Returns:
            Descriptors carrying each element's working-space transform.
        """
        ...

    def category(self, element: Any) -> ElementCategory | str | None:
        """Return the source category of an element."""
        ...

    def read_length(
        self, element: Any, parameter: DimensionParameter
    ) -> float | None:
        """Read an authored length parameter, ``None`` when absent or unset."""
        ...

    def type_name(self, element: Any) -> str | None:
        """Return the name of the element's type, ``None`` when untyped."""
        ...

    def parameter_text(self, element: Any, name: str) -> str | None:
        """Read any parameter as display text, ``None`` when the element lacks it."""
        ...

    def path_curve(self, element: Any) -> PathCurve | None:
        """Return the straight path curve in element coordinates, if any."""
        ...

    def layer_widths(self, element: Any) -> list[float]:
        """Return the compound-structure layer widths of a floor."""
        ...


@runtime_checkable
class TargetModelProtocol(Protocol):
    """Protocol for the mutable model boxes are placed into."""

    @property
    def is_active(self) -> bool:
        """Whether a document is open."""
        ...

    @property
    def is_read_only(self) -> bool:
        """Whether the document rejects modification."""
        ...

    @property
    def is_template_document(self) -> bool:
        """Whether the document is itself a template definition."""
        ...

    def mutation_session(self, name: str) -> ContextManager[Any]:
        """Open the exclusive mutation session spanning one batch.

        Changes are committed when the context exits normally and rolled
        back when it exits with an exception.
        """
        ...

    def create_instance(self, template: Any, location: Vec3) -> Any:
        """Place an instance of an activated template at ``location``."""
        ...

    def instance_id(self, instance: Any) -> str:
        """Return the stable identifier of an instance."""
        ...

    def instance_location(self, instance: Any) -> Vec3:
        """Return the current insertion point of an instance."""
        ...

    def instance_frame(self, instance: Any) -> Frame:
        """Return the instance's local frame (hand, facing, up)."""
        ...

    def rotate_instance(
        self, instance: Any, origin: Vec3, axis: Vec3, angle: float
    ) -> None:
        """Rotate an instance about the axis through ``origin``."""
        ...

    def move_instance(self, instance: Any, delta: Vec3) -> None:
        """Translate an instance by ``delta``."""
        ...

    def set_parameter_by_id(self, instance: Any, identifier: str, value: Any) -> None:
        """Write a parameter looked up by stable identifier.

        Raises:
            ParameterWriteFailure: If missing, read-only or of the wrong type.
        """
        ...

    def set_parameter_by_name(self, instance: Any, name: str, value: Any) -> None:
        """Write a parameter looked up by display name.

        Raises:
            ParameterWriteFailure: If missing, read-only or of the wrong type.
        """
        ...

    def get_parameter(self, instance: Any, name: str) -> Any:
        """Read a parameter value by display name, ``None`` when absent."""
        ...

    def iter_box_instances(self) -> Iterable[Any]:
        """Iterate over opening box instances currently in the model."""
        ...


@runtime_checkable
class TemplateCatalogProtocol(Protocol):
    """Protocol for the catalog of placeable box templates."""

    def resolve(
        self, host_type: HostType, shape: SectionShape, category: RunCategory
    ) -> str | None:
        """Return the template path for a key, ``None`` when none exists."""
        ...

    def load_or_get(self, path: str) -> Any:
        """Load a template into the target model, idempotently.

        Loading an already-loaded template returns the existing handle.

        Returns:
            The template handle, or ``None`` when the template file does not
            exist.
        """
        ...

    def activate(self, handle: Any) -> None:
        """Make a loaded template ready for instancing."""
        ...
