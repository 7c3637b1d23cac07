"""Directory-backed catalog of opening box templates.

Template files are JSON definitions named after the template, one per
(host type, box shape) pair::

    {
      "name": "OpeningBox_Wall_Rectangular",
      "host_type": "wall",
      "shape": "rectangular",
      "parameters": [
        {"name": "Width", "identifier": "6f459bf2-...", "kind": "length"},
        {"name": "Comments", "kind": "text"}
      ]
    }
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from openings.application.config.loader import (
    ConfigError,
    extract_validation_errors,
    format_validation_error_message,
    read_json_file,
)
from openings.domain.value_objects import HostType, RunCategory, SectionShape
from openings.infrastructure.memory_document import (
    BoxTemplate,
    InMemoryDocument,
    TemplateParameter,
)

logger = logging.getLogger(__name__)

FamilyKey = tuple[HostType, SectionShape]

DEFAULT_FAMILY_NAMES: dict[FamilyKey, str] = {
    (HostType.WALL, SectionShape.RECTANGULAR): "OpeningBox_Wall_Rectangular",
    (HostType.WALL, SectionShape.ROUND): "OpeningBox_Wall_Round",
    (HostType.FLOOR, SectionShape.RECTANGULAR): "OpeningBox_Floor_Rectangular",
    (HostType.FLOOR, SectionShape.ROUND): "OpeningBox_Floor_Round",
}


class TemplateDefinitionError(ConfigError):
    """Raised when a template file cannot be read or validated."""


class TemplateParameterSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1)
    identifier: str | None = None
    kind: Literal["length", "text"] = "length"
    read_only: bool = False


class TemplateDefinitionSchema(BaseModel):
    """Contents of one template file."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1)
    host_type: HostType
    shape: SectionShape
    parameters: list[TemplateParameterSchema] = Field(default_factory=list)


@dataclass(frozen=True)
class ExpectedTemplate:
    """Template expected for one (host type, shape) key."""

    host_type: HostType
    shape: SectionShape
    name: str
    path: Path

    @property
    def exists(self) -> bool:
        return self.path.is_file()


def bundled_template_folder() -> Path:
    """Folder holding the templates shipped with the package."""
    folder = resources.files("openings.infrastructure").joinpath("template_data")
    return Path(str(folder))


class DirectoryTemplateCatalog:
    """Resolves template files in a folder and loads them into a document.

    Implements ``TemplateCatalogProtocol``. Template names depend on host
    type and box shape only; every run category shares them.
    """

    def __init__(
        self,
        folder: Path,
        document: InMemoryDocument,
        family_names: Mapping[FamilyKey, str] | None = None,
        extension: str = ".json",
    ) -> None:
        self.folder = Path(folder)
        self.document = document
        self.family_names = dict(family_names or DEFAULT_FAMILY_NAMES)
        self.extension = extension

    def path_for(self, host_type: HostType, shape: SectionShape) -> Path:
        name = self.family_names[(host_type, shape)]
        return self.folder / f"{name}{self.extension}"

    def expected_templates(self) -> list[ExpectedTemplate]:
        return [
            ExpectedTemplate(host_type, shape, name, self.path_for(host_type, shape))
            for (host_type, shape), name in self.family_names.items()
        ]

    def resolve(
        self, host_type: HostType, shape: SectionShape, category: RunCategory
    ) -> str | None:
        path = self.path_for(host_type, shape)
        if self.document.find_template(path.stem) is not None or path.is_file():
            return str(path)
        logger.debug(
            f"No template for {host_type.value}/{shape.value}/{category.value}: {path}"
        )
        return None

    def load_or_get(self, path: str) -> BoxTemplate | None:
        """Return the loaded template for ``path``, loading it on first use.

        Returns:
            The template, or None when neither the document nor the folder
            has it.

        Raises:
            TemplateDefinitionError: If the file exists but is invalid.
        """
        template_path = Path(path)
        existing = self.document.find_template(template_path.stem)
        if existing is not None:
            return existing
        if not template_path.is_file():
            return None
        return self.document.load_template(self._read(template_path))

    def activate(self, handle: BoxTemplate) -> None:
        self.document.activate_template(handle)

    def _read(self, path: Path) -> BoxTemplate:
        data = read_json_file(path, error_cls=TemplateDefinitionError, kind="template")
        try:
            definition = TemplateDefinitionSchema.model_validate(data)
        except PydanticValidationError as e:
            details = extract_validation_errors(e)
            raise TemplateDefinitionError(
                message=format_validation_error_message(
                    details, heading=f"Template validation failed: {path}"
                ),
                error_type="validation",
                path=path,
                details=details,
            )
        return BoxTemplate(
            name=path.stem,
            host_type=definition.host_type,
            shape=definition.shape,
            parameters=[
                TemplateParameter(
                    name=parameter.name,
                    identifier=parameter.identifier,
                    kind=parameter.kind,
                    read_only=parameter.read_only,
                )
                for parameter in definition.parameters
            ],
        )
