"""Near-duplicate award title reconciliation.

Titles whose case-insensitive Levenshtein distance is below the threshold are
joined by single linkage (union-find), so a title that matches two otherwise
distant titles merges all three into one cluster. Each cluster collapses to its
most frequent title; ties go to the title seen first.

Every distinct pair is compared, which is quadratic in the number of distinct
titles. That is fine for an export of tens to low hundreds of awards; larger
inputs need blocking (for example by title prefix) before comparison.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from loguru import logger
from rapidfuzz.distance import Levenshtein

from ..exceptions import TitleNormalizationError
from ..models.award import AwardRecord
from ..utils.text_normalization import title_key


class _DisjointSet:
    """Union-find over integer ids with path compression."""

    def __init__(self, size: int):
        self.parent = list(range(size))

    def find(self, i: int) -> int:
        root = i
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[i] != root:
            self.parent[i], i = root, self.parent[i]
        return root

    def union(self, a: int, b: int) -> None:
        ra, rb = self.find(a), self.find(b)
        if ra != rb:
            # lower id stays root so cluster order follows first occurrence
            self.parent[max(ra, rb)] = min(ra, rb)


@dataclass
class TitleCluster:
    """Titles collapsed to one canonical title."""

    canonical: str
    members: list[str]
    transitive: bool = False


@dataclass
class TitleClusters:
    """Result of clustering a title sequence."""

    mapping: dict[str, str] = field(default_factory=dict)
    clusters: list[TitleCluster] = field(default_factory=list)

    @property
    def transitive_clusters(self) -> list[TitleCluster]:
        """Clusters containing at least one pair that only matched through others."""
        return [c for c in self.clusters if c.transitive]

    @property
    def merged_clusters(self) -> list[TitleCluster]:
        """Clusters with more than one distinct title."""
        return [c for c in self.clusters if len(c.members) > 1]


class TitleNormalizer:
    """Cluster near-duplicate titles and map each to a canonical title."""

    def __init__(self, threshold: int = 5, case_insensitive: bool = True):
        if threshold < 1:
            raise TitleNormalizationError(
                "Edit distance threshold must be at least 1",
                operation="__init__",
                details={"threshold": threshold},
            )
        self.threshold = threshold
        self.case_insensitive = case_insensitive

    def is_match(self, a: str, b: str) -> bool:
        """True if the two titles are within the clustering distance."""
        max_distance = self.threshold - 1
        ka = title_key(a, self.case_insensitive)
        kb = title_key(b, self.case_insensitive)
        return Levenshtein.distance(ka, kb, score_cutoff=max_distance) <= max_distance

    def cluster(self, titles: Iterable[str]) -> TitleClusters:
        """Cluster an ordered title sequence.

        Args:
            titles: Raw titles from every award record, in record order

        Returns:
            TitleClusters with the original -> canonical mapping
        """
        sequence = list(titles)
        frequency = Counter(sequence)

        distinct: list[str] = []
        first_seen: dict[str, int] = {}
        for title in sequence:
            if title not in first_seen:
                first_seen[title] = len(distinct)
                distinct.append(title)

        result = TitleClusters()
        # Empty titles never cluster: they would match every short title.
        candidates = [t for t in distinct if t.strip()]
        for t in distinct:
            if not t.strip():
                result.mapping[t] = t

        disjoint = _DisjointSet(len(candidates))
        direct_pairs: set[tuple[int, int]] = set()
        for i in range(len(candidates)):
            for j in range(i + 1, len(candidates)):
                if self.is_match(candidates[i], candidates[j]):
                    disjoint.union(i, j)
                    direct_pairs.add((i, j))

        groups: dict[int, list[int]] = {}
        for i in range(len(candidates)):
            groups.setdefault(disjoint.find(i), []).append(i)

        for root in sorted(groups):
            ids = groups[root]
            members = [candidates[i] for i in ids]
            canonical = max(members, key=lambda t: (frequency[t], -first_seen[t]))
            transitive = any(
                (a, b) not in direct_pairs for k, a in enumerate(ids) for b in ids[k + 1 :]
            )
            cluster = TitleCluster(canonical=canonical, members=members, transitive=transitive)
            result.clusters.append(cluster)
            for member in members:
                result.mapping[member] = canonical

            if transitive:
                logger.warning(
                    f"Title cluster merged transitively ({len(members)} titles) into "
                    f"{canonical!r}; review: {members}"
                )
            elif len(members) > 1:
                logger.debug(f"Collapsed {len(members)} titles into {canonical!r}")

        logger.info(
            f"Title normalization: {len(distinct)} distinct titles -> "
            f"{len(set(result.mapping.values()))} canonical "
            f"({len(result.merged_clusters)} merged clusters, "
            f"{len(result.transitive_clusters)} transitive)"
        )
        return result

    def normalize(self, titles: Iterable[str]) -> dict[str, str]:
        """Mapping from each original title to its canonical title."""
        return self.cluster(titles).mapping

    def apply(
        self, records: Sequence[AwardRecord], mapping: dict[str, str] | None = None
    ) -> list[AwardRecord]:
        """Rewrite every record's title to its canonical title.

        Args:
            records: Award records in source order
            mapping: Precomputed mapping; computed from the records when omitted

        Returns:
            New records; inputs are left untouched
        """
        if mapping is None:
            mapping = self.normalize(r.title for r in records)
        return [
            r if mapping.get(r.title, r.title) == r.title else r.with_title(mapping[r.title])
            for r in records
        ]
