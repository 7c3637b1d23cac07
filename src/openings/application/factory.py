"""Service factory wiring a scene and a configuration into commands."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from openings.application.config import (
    OpeningConfiguration,
    config_to_bindings,
    config_to_filters,
    config_to_settings,
)
from openings.domain.value_objects import (
    BoxParameterBindings,
    HostType,
    PlacementSettings,
    SectionShape,
)

if TYPE_CHECKING:
    from openings.application.commands import (
        PlaceOpeningBoxesCommand,
        ScanIntersectionsCommand,
    )
    from openings.application.dispatch import MutationDispatcher
    from openings.contracts.dtos import BatchRequest
    from openings.infrastructure import (
        BatchSummaryFormatter,
        BoxGeometryKernel,
        BoxStlExporter,
        DirectoryTemplateCatalog,
        DuplicateReportFormatter,
        InMemoryDocument,
        IntersectionTableFormatter,
        SceneModel,
        SceneSchema,
    )


@dataclass
class ServiceFactory:
    """Factory for the services of one scene.

    The kernel, source model, target document and template catalog are
    created lazily and cached, so every command built by one factory shares
    the same target document.

    Attributes:
        scene: Loaded scene holding the source models and target document.
        config: Settings configuration; defaults apply when omitted.
        template_folder: Folder of box templates; the bundled templates
            are used when None.
    """

    scene: SceneSchema
    config: OpeningConfiguration = field(default_factory=OpeningConfiguration)
    template_folder: Path | None = None

    # Cached instances (use field with init=False for dataclass)
    _kernel: BoxGeometryKernel | None = field(default=None, init=False, repr=False)
    _model: SceneModel | None = field(default=None, init=False, repr=False)
    _document: InMemoryDocument | None = field(default=None, init=False, repr=False)
    _catalog: DirectoryTemplateCatalog | None = field(
        default=None, init=False, repr=False
    )

    def get_kernel(self) -> BoxGeometryKernel:
        """Get or create the geometry kernel."""
        if self._kernel is None:
            from openings.infrastructure import BoxGeometryKernel

            self._kernel = BoxGeometryKernel()
        return self._kernel

    def get_model(self) -> SceneModel:
        """Get or create the source model query."""
        if self._model is None:
            from openings.infrastructure import SceneModel

            self._model = SceneModel(self.scene)
        return self._model

    def get_document(self) -> InMemoryDocument:
        """Get or create the target document."""
        if self._document is None:
            from openings.infrastructure import InMemoryDocument

            self._document = InMemoryDocument.from_schema(self.scene.document)
        return self._document

    def get_catalog(self) -> DirectoryTemplateCatalog:
        """Get or create the template catalog for the configured names."""
        if self._catalog is None:
            from openings.infrastructure import (
                DirectoryTemplateCatalog,
                bundled_template_folder,
            )

            templates = self.config.templates
            self._catalog = DirectoryTemplateCatalog(
                folder=self.template_folder or bundled_template_folder(),
                document=self.get_document(),
                family_names={
                    (host_type, shape): templates.family_name(host_type, shape)
                    for host_type in HostType
                    for shape in SectionShape
                },
                extension=templates.extension,
            )
        return self._catalog

    def get_settings(self) -> PlacementSettings:
        """Settings in the unit of the scene unless the config pins one."""
        return config_to_settings(self.config, self.scene.unit)

    def get_bindings(self) -> BoxParameterBindings:
        return config_to_bindings(self.config)

    def create_request(self) -> BatchRequest:
        """Batch request covering the runs, walls and floors passing the filters."""
        from openings.application.commands import collect_request

        run_filter, host_filter = config_to_filters(self.config)
        return collect_request(
            self.get_model(),
            self.get_settings(),
            run_filter=run_filter,
            host_filter=host_filter,
        )

    def create_scan_command(self) -> ScanIntersectionsCommand:
        from openings.application.commands import ScanIntersectionsCommand

        return ScanIntersectionsCommand(self.get_kernel(), self.get_model())

    def create_place_command(self) -> PlaceOpeningBoxesCommand:
        """Create the placement command bound to the target document."""
        from openings.application.commands import PlaceOpeningBoxesCommand

        return PlaceOpeningBoxesCommand(
            kernel=self.get_kernel(),
            model=self.get_model(),
            target=self.get_document(),
            catalog=self.get_catalog(),
            bindings=self.get_bindings(),
        )

    def create_dispatcher(self) -> MutationDispatcher:
        from openings.application.dispatch import MutationDispatcher

        return MutationDispatcher()

    def get_batch_summary_formatter(self) -> BatchSummaryFormatter:
        from openings.infrastructure import BatchSummaryFormatter

        return BatchSummaryFormatter()

    def get_duplicate_report_formatter(self) -> DuplicateReportFormatter:
        from openings.infrastructure import DuplicateReportFormatter

        return DuplicateReportFormatter()

    def get_intersection_table_formatter(self) -> IntersectionTableFormatter:
        from openings.infrastructure import IntersectionTableFormatter

        return IntersectionTableFormatter(unit_label=self.get_settings().unit.value)

    def get_stl_exporter(self) -> BoxStlExporter:
        from openings.infrastructure import BoxStlExporter

        return BoxStlExporter(self.get_document())
