# logo_scout/clusterer.py
"""
Leader clustering of site records by dHash Hamming distance.

Each record not yet assigned seeds a new group; later unassigned records join
it when they are within *threshold* bits of the seed. Members are never
compared with each other, so two members of one group may be further apart
than *threshold*. This is not transitive clustering.
"""
from __future__ import annotations

from typing import List, Sequence, Set

from logo_scout.hasher import HASH_BITS, hamming_distance
from logo_scout.models import Group, SiteRecord

__all__ = ["DEFAULT_THRESHOLD", "cluster", "group_spread"]

DEFAULT_THRESHOLD = 8


def cluster(records: Sequence[SiteRecord], threshold: int = DEFAULT_THRESHOLD) -> List[Group]:
    """Partition *records* into groups, preserving seed and discovery order."""
    if not 0 <= threshold <= HASH_BITS:
        raise ValueError(f"threshold must be within 0..{HASH_BITS}, got {threshold}")

    hashes = [int(r.hash, 16) for r in records]
    used: Set[int] = set()
    groups: List[Group] = []

    for i, seed in enumerate(records):
        if i in used:
            continue
        used.add(i)
        group: Group = [seed]
        for j in range(i + 1, len(records)):
            if j in used:
                continue
            if (hashes[i] ^ hashes[j]).bit_count() <= threshold:
                group.append(records[j])
                used.add(j)
        groups.append(group)
    return groups


def group_spread(group: Group) -> int:
    """Largest pairwise distance inside *group* (may exceed the clustering threshold)."""
    spread = 0
    for i, a in enumerate(group):
        for b in group[i + 1:]:
            spread = max(spread, hamming_distance(a.hash, b.hash))
    return spread
