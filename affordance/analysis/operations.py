"""Affordance operations: orientation tests that define affordance types.

Each operation holds the margins for one affordance type and a pure
`requirement` function deciding whether a triangle normal qualifies. Operations
are evaluated in priority order by the affordance extraction; the first
operation whose requirement holds claims the seed triangle.
"""

import logging
import math

from abc import ABC, abstractmethod
from dataclasses import dataclass

import numpy as np

from omegaconf import DictConfig, ListConfig

console_logger = logging.getLogger(__name__)

WORLD_UP_AXIS = np.array([0.0, 0.0, 1.0])
"""World Z axis (Drake Z-up convention)."""

AXIS_45 = np.array([1.0 / math.sqrt(2.0), 0.0, 1.0 / math.sqrt(2.0)])
"""Reference axis tilted 45 degrees from the world Z axis."""


@dataclass(frozen=True)
class OperationBase(ABC):
    """Configuration and requirement test for one affordance type.

    Subclasses implement `requirement`. The base class itself is abstract, so a
    placeholder "no affordance" operation can never take part in an analysis.
    """

    margin: float = 0.3
    """Error margin within which the requirement function must be fulfilled."""

    neighbor_margin: float = 0.3
    """Maximum squared deviation between the normals of two neighbouring
    triangles for them to be part of the same affordance region."""

    min_area: float = 0.05
    """Minimum accumulated area for a region to become an affordance."""

    name: str = ""
    """Name of the affordance type."""

    def __post_init__(self) -> None:
        if not self.name:
            object.__setattr__(self, "name", self.default_name)
        if self.margin <= 0.0:
            console_logger.warning(
                f"Operation '{self.name}' has non-positive margin {self.margin}; "
                "no triangle can satisfy its requirement"
            )
        if self.neighbor_margin <= 0.0:
            console_logger.warning(
                f"Operation '{self.name}' has non-positive neighbor_margin "
                f"{self.neighbor_margin}; its regions cannot grow beyond the seed"
            )
        if self.min_area < 0.0:
            console_logger.warning(
                f"Operation '{self.name}' has negative min_area {self.min_area}"
            )

    @property
    def world_up_axis(self) -> np.ndarray:
        return WORLD_UP_AXIS

    @property
    @abstractmethod
    def default_name(self) -> str:
        """Name used when none is given at construction."""

    @abstractmethod
    def requirement(self, normal: np.ndarray) -> bool:
        """Whether a triangle with this unit normal can be part of the affordance.

        Args:
            normal: Unit normal of the tested triangle in world frame (3,).

        Returns:
            True if the normal satisfies the orientation test.
        """


@dataclass(frozen=True)
class SupportOperation(OperationBase):
    """Surfaces facing upwards, e.g. floors and table tops."""

    @property
    def default_name(self) -> str:
        return "Support"

    def requirement(self, normal: np.ndarray) -> bool:
        return bool(np.sum((self.world_up_axis - normal) ** 2) < self.margin)


@dataclass(frozen=True)
class LeanOperation(OperationBase):
    """Roughly vertical surfaces, e.g. walls."""

    @property
    def default_name(self) -> str:
        return "Lean"

    def requirement(self, normal: np.ndarray) -> bool:
        return bool(abs(float(np.dot(normal, self.world_up_axis))) < self.margin)


@dataclass(frozen=True)
class Support45Operation(OperationBase):
    """Surfaces tilted roughly 45 degrees from horizontal, in any heading."""

    @property
    def default_name(self) -> str:
        return "Support45"

    def requirement(self, normal: np.ndarray) -> bool:
        # Project the normal onto the (horizontal magnitude, vertical) half plane
        # so the test is independent of the surface heading.
        projected_normal = np.array(
            [math.hypot(float(normal[0]), float(normal[1])), 0.0, float(normal[2])]
        )
        return bool(np.sum((AXIS_45 - projected_normal) ** 2) < self.margin)


OPERATION_TYPES: dict[str, type[OperationBase]] = {
    "support": SupportOperation,
    "lean": LeanOperation,
    "support45": Support45Operation,
}
"""Operation classes by configuration type key."""


def create_operations() -> list[OperationBase]:
    """Create the default operations with default margins.

    Returns:
        Support, Lean and Support45 operations, in that priority order.
    """
    return [SupportOperation(), LeanOperation(), Support45Operation()]


def create_operation(
    operation_type: str,
    margin: float = 0.3,
    neighbor_margin: float = 0.3,
    min_area: float = 0.05,
    name: str | None = None,
) -> OperationBase:
    """Create a single operation from its type key.

    Args:
        operation_type: One of the keys of OPERATION_TYPES (case-insensitive).
        margin: Requirement margin.
        neighbor_margin: Neighbouring triangle normal margin.
        min_area: Minimum affordance area.
        name: Affordance name. Defaults to the type's name.

    Returns:
        The operation.

    Raises:
        ValueError: If the operation type is unknown.
    """
    operation_cls = OPERATION_TYPES.get(operation_type.lower())
    if operation_cls is None:
        raise ValueError(
            f"Unknown operation type '{operation_type}', expected one of "
            f"{sorted(OPERATION_TYPES)}"
        )
    return operation_cls(
        margin=float(margin),
        neighbor_margin=float(neighbor_margin),
        min_area=float(min_area),
        name=name or "",
    )


def create_operations_from_config(cfg: ListConfig | DictConfig) -> list[OperationBase]:
    """Create operations from an OmegaConf list of operation entries.

    Each entry has a required `type` key and optional `margin`,
    `neighbor_margin`, `min_area` and `name` keys. A DictConfig with an
    `operations` key is also accepted.

    Args:
        cfg: Operation list, or a config subtree containing one.

    Returns:
        Operations in configuration order (which is their priority order).
    """
    if isinstance(cfg, DictConfig):
        cfg = cfg.operations

    operations = []
    for entry in cfg:
        operations.append(
            create_operation(
                operation_type=entry.type,
                margin=entry.get("margin", 0.3),
                neighbor_margin=entry.get("neighbor_margin", 0.3),
                min_area=entry.get("min_area", 0.05),
                name=entry.get("name", None),
            )
        )

    console_logger.debug(
        f"Created {len(operations)} operations: {[op.name for op in operations]}"
    )
    return operations
