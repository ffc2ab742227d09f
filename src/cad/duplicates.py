"""Collapse placements that share a location into one survivor per location."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from src.cad.points import DUPLICATE_TOLERANCE, points_near
from src.schema import Placement


@dataclass(frozen=True)
class PlacementGroup:
    """Placements found near one leader during a single resolution pass."""

    leader_index: int
    member_indices: Tuple[int, ...]
    members: Tuple[Placement, ...]

    @property
    def leader(self) -> Placement:
        return self.members[0]

    @property
    def size(self) -> int:
        return len(self.members)


def group_placements(
    placements: Optional[Sequence[Placement]],
    tolerance: float = DUPLICATE_TOLERANCE,
) -> List[PlacementGroup]:
    """Group placements around leaders in input order.

    Candidates are always compared with the leader, never with other group
    members, so a chain of neighbours does not merge beyond the leader's reach.
    """
    if not placements:
        return []

    items = list(placements)
    processed = [False] * len(items)
    groups: List[PlacementGroup] = []

    for i, leader in enumerate(items):
        if processed[i]:
            continue
        indices = [i]
        for j in range(i + 1, len(items)):
            if not processed[j] and points_near(leader, items[j], tolerance):
                indices.append(j)
                processed[j] = True
        processed[i] = True
        groups.append(
            PlacementGroup(
                leader_index=i,
                member_indices=tuple(indices),
                members=tuple(items[k] for k in indices),
            )
        )
    return groups


def pick_survivor(members: Sequence[Placement], unwanted_name: str) -> Placement:
    if len(members) == 1:
        return members[0]
    for member in members:
        if member.name != unwanted_name:
            # Only one wanted placement may occupy a location: the first one wins.
            return member
    # Все вхождения нежелательные: оставляем одно, чтобы не потерять точку.
    return members[0]


def resolve_duplicates(
    placements: Optional[Sequence[Placement]],
    unwanted_name: str,
    tolerance: float = DUPLICATE_TOLERANCE,
) -> List[Placement]:
    """Return one placement per location, in leader-discovery order."""
    return [pick_survivor(group.members, unwanted_name) for group in group_placements(placements, tolerance)]
