"""Infrastructure layer - scene files, reference kernel, document and outputs."""

from .box_kernel import AabbSolid, BoxGeometryKernel
from .formatters import (
    BatchSummaryFormatter,
    DuplicateReportFormatter,
    IntersectionTableFormatter,
)
from .memory_document import (
    BoxInstance,
    BoxTemplate,
    InMemoryDocument,
    MutationSessionError,
    TemplateParameter,
)
from .scene import SceneError, SceneModel, SceneSchema, load_scene, save_scene
from .stl_exporter import BoxStlExporter
from .template_catalog import (
    DEFAULT_FAMILY_NAMES,
    DirectoryTemplateCatalog,
    TemplateDefinitionError,
    bundled_template_folder,
)

__all__ = [
    # Geometry
    "AabbSolid",
    "BoxGeometryKernel",
    # Scene files
    "SceneError",
    "SceneModel",
    "SceneSchema",
    "load_scene",
    "save_scene",
    # Target document
    "BoxInstance",
    "BoxTemplate",
    "InMemoryDocument",
    "MutationSessionError",
    "TemplateParameter",
    # Templates
    "DEFAULT_FAMILY_NAMES",
    "DirectoryTemplateCatalog",
    "TemplateDefinitionError",
    "bundled_template_folder",
    # Output
    "BatchSummaryFormatter",
    "BoxStlExporter",
    "DuplicateReportFormatter",
    "IntersectionTableFormatter",
]
