"""Affordance extraction from the triangle mesh of a rigid object.

Every triangle not yet part of an affordance is used as a seed. The operations
are tried in priority order; the first operation whose requirement holds for the
seed normal grows a region from it, and the region becomes an affordance if its
area exceeds the operation's minimum area. Later operations are not tried for
that seed, whether or not the region was large enough.
"""

from __future__ import annotations

import logging
import time

from dataclasses import dataclass, field

import trimesh

from omegaconf import DictConfig

from affordance.analysis.operations import (
    OperationBase,
    create_operations_from_config,
)
from affordance.analysis.region_growing import (
    AdjacencyMode,
    build_adjacency,
    grow_region,
)
from affordance.analysis.triangles import AffordanceObject, build_triangles
from affordance.utils.geometry_utils import rigid_transform_to_matrix

console_logger = logging.getLogger(__name__)


@dataclass
class AffordanceExtractionConfig:
    """Parameters of the region growing shared by all operations."""

    adjacency_mode: AdjacencyMode = AdjacencyMode.EDGE
    """Neighbour criterion: shared edge, or shared vertex index."""

    neighbor_margin_override: float | None = None
    """If set, used as the neighbouring triangle normal tolerance for every
    operation instead of each operation's own neighbor_margin."""

    log_regions: bool = False
    """Log every grown region, including rejected ones, at INFO level."""

    @classmethod
    def from_config(cls, cfg: DictConfig) -> "AffordanceExtractionConfig":
        """Create config from an OmegaConf structure.

        Args:
            cfg: Region growing config subtree.

        Returns:
            AffordanceExtractionConfig instance.
        """
        override = cfg.get("neighbor_margin_override", None)
        return cls(
            adjacency_mode=AdjacencyMode(cfg.get("adjacency_mode", "edge")),
            neighbor_margin_override=None if override is None else float(override),
            log_regions=bool(cfg.get("log_regions", False)),
        )

    def neighbor_tolerance(self, operation: OperationBase) -> float:
        if self.neighbor_margin_override is not None:
            return self.neighbor_margin_override
        return operation.neighbor_margin


@dataclass(frozen=True)
class Affordance:
    """A connected set of triangles usable for one type of interaction."""

    triangle_indices: tuple[int, ...]
    """Indices of the region's triangles, in the order they joined the region."""

    source_object: AffordanceObject
    """Object the triangles belong to."""

    name: str = ""
    """Affordance type name (name of the operation that produced it)."""

    area: float = 0.0
    """Total area of the region's triangles."""

    def __len__(self) -> int:
        return len(self.triangle_indices)


@dataclass
class SemanticsData:
    """Result of an affordance analysis.

    Holds one list of affordances per operation, in the order the operations
    were given.
    """

    operations: list[OperationBase]
    """Operations the analysis ran with."""

    affordances: list[list[Affordance]] = field(default_factory=list)
    """Affordances found per operation slot."""

    def __post_init__(self) -> None:
        if not self.affordances:
            self.affordances = [[] for _ in self.operations]

    def __len__(self) -> int:
        return len(self.affordances)

    def __getitem__(self, index: int) -> list[Affordance]:
        return self.affordances[index]

    def __iter__(self):
        return iter(self.affordances)

    def get_affordances(self, name: str) -> list[Affordance]:
        """Affordances of all operations with the given name.

        Args:
            name: Affordance type name, e.g. "Support".

        Returns:
            Affordances in operation order. Empty if no operation has this name.
        """
        return [
            affordance
            for operation, bucket in zip(self.operations, self.affordances)
            if operation.name == name
            for affordance in bucket
        ]

    @property
    def num_affordances(self) -> int:
        return sum(len(bucket) for bucket in self.affordances)

    def classified_triangles(self) -> set[int]:
        """Indices of all triangles that belong to some affordance."""
        return {
            idx
            for bucket in self.affordances
            for affordance in bucket
            for idx in affordance.triangle_indices
        }


def analyze_affordances(
    affordance_object: AffordanceObject,
    operations: list[OperationBase],
    config: AffordanceExtractionConfig | None = None,
) -> SemanticsData:
    """Find the affordances of an object's surface.

    Algorithm:
        1. Build world-frame triangles and their adjacency
        2. For each unclassified triangle in index order:
           a. Copy the unclassified set as the candidates for this seed
           b. Find the first operation whose requirement holds for the seed
           c. Grow a region from the seed over the candidates
           d. If the region area exceeds the operation's min_area, store it as
              an affordance and mark its triangles as classified

    Args:
        affordance_object: Object with a triangle mesh and world pose.
        operations: Operations in priority order.
        config: Region growing parameters (defaults if None).

    Returns:
        SemanticsData with one affordance list per operation.

    Raises:
        InvalidGeometryKindError: If the object's geometry is not a triangle mesh.
    """
    start_time = time.time()
    if config is None:
        config = AffordanceExtractionConfig()

    operations = list(operations)
    triangles = build_triangles(affordance_object)
    adjacency = build_adjacency(triangles=triangles, mode=config.adjacency_mode)
    semantics_data = SemanticsData(operations=operations)

    unclassified = set(range(len(triangles)))
    region_log = console_logger.info if config.log_regions else console_logger.debug

    for triangle_idx, triangle in enumerate(triangles):
        if triangle_idx not in unclassified:
            continue

        for op_idx, operation in enumerate(operations):
            if not operation.requirement(triangle.normal):
                continue

            candidates = set(unclassified)
            region, area = grow_region(
                seed_index=triangle_idx,
                operation=operation,
                triangles=triangles,
                adjacency=adjacency,
                candidates=candidates,
                neighbor_tolerance=config.neighbor_tolerance(operation),
            )

            if area > operation.min_area:
                semantics_data.affordances[op_idx].append(
                    Affordance(
                        triangle_indices=tuple(region),
                        source_object=affordance_object,
                        name=operation.name,
                        area=area,
                    )
                )
                unclassified.difference_update(region)
                region_log(
                    f"{operation.name} affordance from seed {triangle_idx}: "
                    f"{len(region)} triangles, area {area:.4f}"
                )
            else:
                region_log(
                    f"Rejected {operation.name} region from seed {triangle_idx}: "
                    f"area {area:.4f} <= min_area {operation.min_area:.4f}"
                )

            # First matching operation claims the seed.
            break

    counts = ", ".join(
        f"{op.name}: {len(bucket)}" for op, bucket in zip(operations, semantics_data)
    )
    console_logger.info(
        f"Found {semantics_data.num_affordances} affordances ({counts}) "
        f"on '{affordance_object.name}' with {len(triangles)} triangles in "
        f"{time.time() - start_time:.2f} seconds"
    )
    return semantics_data


def analyze_affordances_from_config(
    affordance_object: AffordanceObject, cfg: DictConfig
) -> SemanticsData:
    """Run an affordance analysis configured by an OmegaConf tree.

    Args:
        affordance_object: Object with a triangle mesh and world pose.
        cfg: Config with an `operations` list and an optional `region_growing`
            subtree.

    Returns:
        SemanticsData with one affordance list per configured operation.
    """
    operations = create_operations_from_config(cfg.operations)
    region_cfg = cfg.get("region_growing", None)
    config = (
        AffordanceExtractionConfig()
        if region_cfg is None
        else AffordanceExtractionConfig.from_config(region_cfg)
    )
    return analyze_affordances(
        affordance_object=affordance_object, operations=operations, config=config
    )


def create_affordance_mesh(affordance: Affordance) -> trimesh.Trimesh:
    """Create a world-frame mesh of an affordance's triangles.

    Args:
        affordance: Affordance to extract.

    Returns:
        Mesh containing only the affordance's triangles, with vertices in world
        frame. Unreferenced vertices are removed.
    """
    source = affordance.source_object
    submesh = source.mesh.submesh([list(affordance.triangle_indices)], append=True)
    submesh.apply_transform(rigid_transform_to_matrix(source.transform))
    return submesh


def get_affordance_meshes(
    semantics_data: SemanticsData,
) -> list[list[trimesh.Trimesh]]:
    """Create world-frame meshes for all affordances of an analysis.

    Args:
        semantics_data: Analysis result.

    Returns:
        Per operation slot, one mesh per affordance.
    """
    return [
        [create_affordance_mesh(affordance) for affordance in bucket]
        for bucket in semantics_data
    ]
