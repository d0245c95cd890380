"""Region growing over mesh triangles for affordance extraction.

Regions grow depth-first from a seed triangle along triangle adjacency. A
neighbour joins the region when it satisfies the operation's requirement and its
normal is close to the normal of the triangle it was reached from.
"""

import logging

from enum import Enum

import numpy as np
import trimesh

from affordance.analysis.operations import OperationBase
from affordance.analysis.triangles import Triangle

console_logger = logging.getLogger(__name__)


class AdjacencyMode(str, Enum):
    """Which triangles count as neighbours during region growing."""

    EDGE = "edge"
    """Triangles sharing an edge."""

    VERTEX = "vertex"
    """Triangles sharing at least one vertex index."""


def build_adjacency(
    triangles: list[Triangle], mode: AdjacencyMode | str = AdjacencyMode.EDGE
) -> list[list[int]]:
    """Build a triangle adjacency list.

    Args:
        triangles: Triangle records, index-aligned with the mesh faces.
        mode: Adjacency criterion.

    Returns:
        For each triangle, the indices of its neighbours in ascending order.

    Raises:
        ValueError: If the mode is unknown.
    """
    mode = AdjacencyMode(mode)
    num_triangles = len(triangles)
    adjacency: list[set[int]] = [set() for _ in range(num_triangles)]
    if num_triangles == 0:
        return []

    faces = np.array([tri.index_triple for tri in triangles], dtype=np.int64)

    if mode == AdjacencyMode.EDGE:
        # Rows are grouped per undirected edge; face i owns rows 3i to 3i + 2.
        edges_sorted = np.sort(trimesh.geometry.faces_to_edges(faces), axis=1)
        for rows in trimesh.grouping.group_rows(edges_sorted, require_count=None):
            shared = {int(row) // 3 for row in rows}
            for face_a in shared:
                adjacency[face_a].update(shared)
    else:
        vertex_faces: dict[int, list[int]] = {}
        for face_idx, face in enumerate(faces):
            for vertex_idx in set(face.tolist()):
                vertex_faces.setdefault(vertex_idx, []).append(face_idx)
        for shared in vertex_faces.values():
            for face_a in shared:
                adjacency[face_a].update(shared)

    for face_idx in range(num_triangles):
        adjacency[face_idx].discard(face_idx)

    console_logger.debug(
        f"Built {mode.value} adjacency for {num_triangles} triangles "
        f"({sum(len(a) for a in adjacency) // 2} neighbour pairs)"
    )
    return [sorted(neighbors) for neighbors in adjacency]


def grow_region(
    seed_index: int,
    operation: OperationBase,
    triangles: list[Triangle],
    adjacency: list[list[int]],
    candidates: set[int],
    neighbor_tolerance: float,
) -> tuple[list[int], float]:
    """Grow an affordance region from a seed triangle.

    Neighbours are visited depth-first in ascending index order. For each
    neighbour still in `candidates`:
    - If it fails the operation's requirement, it is removed from `candidates`
      and can no longer join this region.
    - If it passes and the squared difference between its normal and the normal
      of the triangle it was reached from is below `neighbor_tolerance`, it
      joins the region and growing continues from it.
    - Otherwise it stays in `candidates` and may still be reached from another
      region triangle.

    Args:
        seed_index: Index of the seed triangle. The caller has checked that it
            satisfies the operation's requirement.
        operation: Operation whose requirement region triangles must satisfy.
        triangles: All triangle records.
        adjacency: Neighbour lists from build_adjacency.
        candidates: Triangle indices that may still join the region. Modified
            in-place: region triangles and rejected neighbours are removed.
        neighbor_tolerance: Maximum squared normal difference between
            neighbouring region triangles.

    Returns:
        Tuple of (region triangle indices in discovery order starting with the
        seed, accumulated region area including the seed).
    """
    region = [seed_index]
    area = triangles[seed_index].area
    candidates.discard(seed_index)

    # Explicit stack of (triangle, remaining neighbours) frames keeps the
    # depth-first visiting order without recursion.
    stack = [(seed_index, iter(adjacency[seed_index]))]
    while stack:
        current_index, neighbors = stack[-1]
        neighbor_index = next((n for n in neighbors if n in candidates), None)
        if neighbor_index is None:
            stack.pop()
            continue

        neighbor = triangles[neighbor_index]
        if not operation.requirement(neighbor.normal):
            candidates.discard(neighbor_index)
            continue

        current_normal = triangles[current_index].normal
        deviation = float(np.sum((neighbor.normal - current_normal) ** 2))
        if deviation < neighbor_tolerance:
            region.append(neighbor_index)
            area += neighbor.area
            candidates.discard(neighbor_index)
            stack.append((neighbor_index, iter(adjacency[neighbor_index])))

    return region, area
