from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable

from tcga_cnratio.config import SampleTypes
from tcga_cnratio.errors import EmptyResultError, IntegrityError
from tcga_cnratio.naming import full_name_rules, rewriter
from tcga_cnratio.samples import SampleCollection, intersect_names
from tcga_cnratio.tcga_ids import TCGA, BarcodeGrammar


class SelectionMode(Enum):
    ALL = "all"
    CALLBACK = "callback"


@dataclass
class PairingResult:
    tumors: SampleCollection
    normals: SampleCollection
    # patients seen on one side only
    dropped_tumors: list[str] = field(default_factory=list)
    dropped_normals: list[str] = field(default_factory=list)

    @property
    def patients(self) -> list[str]:
        return self.tumors.names()

    def __len__(self) -> int:
        return len(self.tumors)


def check_pairing(tumors: SampleCollection, normals: SampleCollection) -> None:
    """Raise IntegrityError unless tumors[i] and normals[i] belong to the same patient for all i."""
    t = tumors.names()
    n = normals.names()
    if len(t) != len(n):
        raise IntegrityError(f"{len(t)} tumors vs {len(n)} normals", stage="pairing")
    for i, (a, b) in enumerate(zip(t, n)):
        if a != b:
            raise IntegrityError(f"index {i}: tumor {a} paired with normal {b}", stage="pairing", identity=a)


def _select(
    candidates: list[str],
    *,
    selection: SelectionMode,
    select_subset: Callable[[list[str]], Iterable[str]] | None,
) -> list[str]:
    logger = logging.getLogger(__name__)
    if selection is SelectionMode.ALL:
        return list(candidates)
    if select_subset is None:
        raise ValueError("SelectionMode.CALLBACK requires select_subset")
    picked = select_subset(list(candidates))
    if isinstance(picked, str):
        raise TypeError(f"select_subset must return a collection of names, not a single string: {picked!r}")
    chosen = set(picked)
    unknown = chosen.difference(candidates)
    if unknown:
        logger.warning("ignoring %d selected names that are not pair candidates: %s", len(unknown), sorted(unknown))
    return [c for c in candidates if c in chosen]


def pair_tumor_normal(
    samples: SampleCollection,
    *,
    grammar: BarcodeGrammar = TCGA,
    tumor_types: str = SampleTypes.PRIMARY_TUMOR,
    normal_types: str = SampleTypes.NORMAL,
    selection: SelectionMode = SelectionMode.ALL,
    select_subset: Callable[[list[str]], Iterable[str]] | None = None,
    allow: Iterable[str] | None = None,
) -> PairingResult:
    """
    Match primary tumors with normals of the same patient, one sample per side.

    Names are rewritten to "<patient>,<sampleId>,<tag>" so the sample name is the
    patient. Patients with replicates keep the first sample in collection order.
    """
    logger = logging.getLogger(__name__)
    renamed = samples.rename(rewriter(full_name_rules(grammar)))
    tumors = renamed.filter_by_type(tumor_types)
    normals = renamed.filter_by_type(normal_types)
    logger.info("tumor samples=%d normal samples=%d", len(tumors), len(normals))

    candidates = intersect_names(tumors, normals)
    dropped_tumors = sorted(set(tumors.names()).difference(candidates))
    dropped_normals = sorted(set(normals.names()).difference(candidates))
    if dropped_tumors:
        logger.info("tumors without a matched normal: %d (%s)", len(dropped_tumors), ", ".join(dropped_tumors))
    if dropped_normals:
        logger.info("normals without a matched tumor: %d (%s)", len(dropped_normals), ", ".join(dropped_normals))
    if not candidates:
        raise EmptyResultError("no tumor-normal pairs found", stage="intersect")

    if allow is not None:
        allowed = set(allow)
        candidates = [c for c in candidates if c in allowed]
    candidates = _select(candidates, selection=selection, select_subset=select_subset)
    if not candidates:
        raise EmptyResultError("no patients selected", stage="select")

    tumors = tumors.subset(candidates).dedupe_by_name()
    normals = normals.subset(candidates).dedupe_by_name()
    check_pairing(tumors, normals)
    logger.info("paired %d patients", len(tumors))
    return PairingResult(
        tumors=tumors,
        normals=normals,
        dropped_tumors=dropped_tumors,
        dropped_normals=dropped_normals,
    )
