#!/usr/bin/env python3
"""
Redundancy reducer

Collapses nested and near-duplicate TE candidates into one representative
per family using the containment graph built from all-versus-all
alignments.

Sequence A is covered by sequence B when some alignment of A against B
spans at least ``min_coverage`` of A, is at least ``min_length`` bp long
and at least ``min_identity`` percent identical. Coverage edges form a
directed graph whose strongly connected components are groups of
mutually covering sequences. A component no outside sequence covers is
represented by its lowest ID member. Every other component takes the
representative of its best outside coverer (highest identity, then
longest alignment, then longest coverer, then lowest ID), so fragments
always resolve to the uncovered family that contains them. All other
sequences are discarded.
"""
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from panedta.exceptions import ValidationError
from panedta.models.library import AlignmentHit, CandidateSequence

logger = logging.getLogger("panedta.library.reducer")

# (identity, alignment length, coverer length, -coverer id); larger is better
CovererKey = Tuple[float, int, int, int]


@dataclass(frozen=True)
class ReductionThresholds:
    """Minimum alignment quality for one sequence to cover another"""
    min_coverage: float = 0.95
    min_length: int = 80
    min_identity: float = 80.0

    def accepts(self, hit: AlignmentHit) -> bool:
        return (hit.query_coverage >= self.min_coverage
                and hit.alignment_length >= self.min_length
                and hit.identity >= self.min_identity)

    @classmethod
    def from_config(cls, config: Dict) -> 'ReductionThresholds':
        """Build thresholds from the ``reduction`` config section"""
        section = config.get('reduction', config)
        return cls(
            min_coverage=float(section.get('min_coverage', cls.min_coverage)),
            min_length=int(section.get('min_length', cls.min_length)),
            min_identity=float(section.get('min_identity', cls.min_identity)),
        )


@dataclass
class ReductionResult:
    """Representatives and the membership of every pool sequence"""
    representatives: List[CandidateSequence] = field(default_factory=list)
    discarded: List[CandidateSequence] = field(default_factory=list)
    best_coverer: Dict[int, int] = field(default_factory=dict)
    representative_of: Dict[int, int] = field(default_factory=dict)

    @property
    def representative_ids(self) -> List[int]:
        return [candidate.id for candidate in self.representatives]

    def members(self, representative_id: int) -> List[int]:
        """IDs represented by ``representative_id``, itself included"""
        return sorted(member for member, root in self.representative_of.items()
                      if root == representative_id)

    def get_summary(self) -> Dict[str, int]:
        return {
            'pool': len(self.representative_of),
            'representatives': len(self.representatives),
            'discarded': len(self.discarded),
            'covered': len(self.best_coverer),
        }


class RedundancyReducer:
    """Keep one representative per containment component"""

    def __init__(self, thresholds: Optional[ReductionThresholds] = None):
        self.thresholds = thresholds or ReductionThresholds()

    def build_containment(self, candidates: Dict[str, CandidateSequence],
                          hits: Iterable[AlignmentHit]) -> Dict[int, Dict[int, CovererKey]]:
        """Collect, for each covered sequence, the best hit per coverer

        Args:
            candidates: Pool members keyed by name
            hits: Alignment hits among pool members

        Returns:
            covered ID -> {coverer ID -> best key for that pair}
        """
        covered_by: Dict[int, Dict[int, CovererKey]] = defaultdict(dict)
        unknown = set()
        self_hits = 0

        for hit in hits:
            if hit.is_self_hit:
                self_hits += 1
                continue

            query = candidates.get(hit.query_id)
            target = candidates.get(hit.target_id)
            if query is None or target is None:
                unknown.update(name for name in (hit.query_id, hit.target_id)
                               if name not in candidates)
                continue
            if query.id == target.id or not self.thresholds.accepts(hit):
                continue

            key = (hit.identity, hit.alignment_length, target.length, -target.id)
            current = covered_by[query.id].get(target.id)
            if current is None or key > current:
                covered_by[query.id][target.id] = key

        if unknown:
            logger.warning(f"Ignored hits naming {len(unknown)} sequences outside the pool, "
                           f"e.g. {sorted(unknown)[0]}")
        logger.debug(f"Excluded {self_hits} self hits")
        return covered_by

    @staticmethod
    def select_best_coverers(covered_by: Dict[int, Dict[int, CovererKey]]) -> Dict[int, int]:
        """Pick the coverer with the largest key for each covered sequence"""
        return {
            covered: max(coverers.items(), key=lambda item: item[1])[0]
            for covered, coverers in covered_by.items()
            if coverers
        }

    @staticmethod
    def find_components(ids: Iterable[int],
                        covered_by: Dict[int, Dict[int, CovererKey]]) -> List[List[int]]:
        """Strongly connected components of the containment graph

        Edges run from a covered sequence to each of its coverers. Uses an
        iterative Tarjan search, so a component is listed only after every
        component it has an edge into.

        Args:
            ids: All pool IDs
            covered_by: covered ID -> {coverer ID -> key}

        Returns:
            Components as sorted ID lists, sinks first
        """
        index: Dict[int, int] = {}
        lowlink: Dict[int, int] = {}
        stack: List[int] = []
        on_stack = set()
        components: List[List[int]] = []

        def visit(node: int, work: List[Tuple[int, Iterator[int]]]) -> None:
            index[node] = lowlink[node] = len(index)
            stack.append(node)
            on_stack.add(node)
            work.append((node, iter(sorted(covered_by.get(node, {})))))

        for start in sorted(ids):
            if start in index:
                continue

            work: List[Tuple[int, Iterator[int]]] = []
            visit(start, work)
            while work:
                node, coverers = work[-1]
                descended = False
                for coverer in coverers:
                    if coverer not in index:
                        visit(coverer, work)
                        descended = True
                        break
                    if coverer in on_stack:
                        lowlink[node] = min(lowlink[node], index[coverer])
                if descended:
                    continue

                work.pop()
                if work:
                    parent = work[-1][0]
                    lowlink[parent] = min(lowlink[parent], lowlink[node])
                if lowlink[node] == index[node]:
                    component = []
                    while True:
                        member = stack.pop()
                        on_stack.discard(member)
                        component.append(member)
                        if member == node:
                            break
                    components.append(sorted(component))

        return components

    def resolve_representatives(self, ids: Iterable[int],
                                covered_by: Dict[int, Dict[int, CovererKey]]) -> Dict[int, int]:
        """Assign every sequence the representative of its containment component

        A component with no coverer outside it is represented by its lowest
        ID. Any other component follows its best outside coverer, so a
        cycle of fragments inside a longer family resolves to that family.

        Args:
            ids: All pool IDs
            covered_by: covered ID -> {coverer ID -> key}

        Returns:
            ID -> representative ID
        """
        representative: Dict[int, int] = {}

        for component in self.find_components(ids, covered_by):
            members = set(component)
            exits = [(key, coverer)
                     for covered in component
                     for coverer, key in covered_by.get(covered, {}).items()
                     if coverer not in members]
            root = representative[max(exits)[1]] if exits else component[0]
            for member in component:
                representative[member] = root

        return representative

    def reduce(self, candidates: Iterable[CandidateSequence],
               hits: Optional[Iterable[AlignmentHit]] = None) -> ReductionResult:
        """Reduce the pool to one representative per containment component

        Args:
            candidates: Pool members; IDs and names must be unique
            hits: All-versus-all alignment hits; None or empty keeps everything

        Returns:
            ReductionResult with representatives in ascending ID order
        """
        pool = sorted(candidates, key=lambda candidate: candidate.id)
        by_name = {candidate.name: candidate for candidate in pool}
        if len(by_name) != len(pool) or len({c.id for c in pool}) != len(pool):
            raise ValidationError("Pool members must have unique names and IDs",
                                  {"pool": len(pool)})

        covered_by = self.build_containment(by_name, hits or [])
        best_coverer = self.select_best_coverers(covered_by)
        representative_of = self.resolve_representatives([c.id for c in pool], covered_by)

        result = ReductionResult(best_coverer=best_coverer, representative_of=representative_of)
        for candidate in pool:
            if representative_of[candidate.id] == candidate.id:
                result.representatives.append(candidate)
            else:
                result.discarded.append(candidate)

        logger.info(f"Redundancy reduction kept {len(result.representatives)} of {len(pool)} "
                    f"candidates (cov>={self.thresholds.min_coverage}, "
                    f"len>={self.thresholds.min_length}, iden>={self.thresholds.min_identity})")
        return result
