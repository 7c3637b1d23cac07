"""Parameter write-back onto placed opening boxes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..exceptions import ParameterWriteFailure
from ..value_objects import (
    BoxParameter,
    BoxParameterBindings,
    BoxSpec,
    IntersectionRecord,
    ParameterBinding,
)

if TYPE_CHECKING:
    from openings.contracts.protocols import TargetModelProtocol

logger = logging.getLogger(__name__)

__all__ = ["ParameterWriter"]


class ParameterWriter:
    """Writes box size, host thickness, protrusion and identity tag.

    Each parameter is looked up by identifier first and by display name when
    the identifier lookup fails. A parameter that cannot be written either
    way is reported and skipped; the placement itself still succeeds.

    Attributes:
        target: Target model holding the instances.
        bindings: Where each logical parameter lives on the templates.
    """

    def __init__(
        self,
        target: TargetModelProtocol,
        bindings: BoxParameterBindings | None = None,
    ) -> None:
        self.target = target
        self.bindings = bindings or BoxParameterBindings()

    def write(
        self, instance: Any, record: IntersectionRecord, spec: BoxSpec
    ) -> list[str]:
        """Write every box parameter.

        Args:
            instance: The placed box.
            record: The clash it marks.
            spec: Its computed size.

        Returns:
            Names of the parameters that could not be written.
        """
        host_type = record.host_type
        values: list[tuple[ParameterBinding, Any]] = [
            (self.bindings.binding_for(BoxParameter.WIDTH, host_type), spec.width),
            (self.bindings.binding_for(BoxParameter.SECONDARY, host_type), spec.height),
            (self.bindings.thickness_for(host_type), spec.host_thickness),
            (self.bindings.protrusion_1, spec.protrusion),
            (self.bindings.protrusion_2, spec.protrusion),
            (self.bindings.identity_tag, record.identity_tag),
        ]
        failed = []
        for binding, value in values:
            if not self.write_one(instance, binding, value):
                failed.append(binding.name)
        return failed

    def write_one(self, instance: Any, binding: ParameterBinding, value: Any) -> bool:
        """Write one parameter, by identifier then by name.

        Returns:
            True when either lookup succeeded.
        """
        if binding.identifier:
            try:
                self.target.set_parameter_by_id(instance, binding.identifier, value)
                return True
            except ParameterWriteFailure as exc:
                logger.debug(f"{exc}; retrying by name '{binding.name}'")
        try:
            self.target.set_parameter_by_name(instance, binding.name, value)
            return True
        except ParameterWriteFailure as exc:
            logger.warning(f"Parameter '{binding.name}' not written: {exc.reason}")
            return False
