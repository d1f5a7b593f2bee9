from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Protocol

import pandas as pd

from tcga_cnratio.samples import SampleCollection, SignalKind
from tcga_cnratio.tcga_ids import TCGA, BarcodeGrammar

_LOG_TAGS = {"log", "log2", "log10", "logratio", "seg"}


def signal_kind_for(dataset: str) -> SignalKind:
    """
    Infer the signal representation from data-set name tags, e.g.
    "TCGA,GBM,log2" -> LOG_TRANSFORMED, "TCGA,GBM,total" -> RAW_INTENSITY.
    """
    tags = {t.strip().lower() for t in re.split(r"[,.]", dataset)}
    return SignalKind.LOG_TRANSFORMED if tags & _LOG_TAGS else SignalKind.RAW_INTENSITY


class DatasetProvider(Protocol):
    def list_datasets(self, pattern: str | None = None) -> list[str]: ...

    def load(self, dataset: str) -> SampleCollection: ...


@dataclass
class FrameDatasetProvider:
    """Data sets held in memory as loci x samples matrices."""

    frames: dict[str, pd.DataFrame] = field(default_factory=dict)
    kinds: dict[str, SignalKind] = field(default_factory=dict)
    grammar: BarcodeGrammar = TCGA

    def add(self, dataset: str, frame: pd.DataFrame, *, kind: SignalKind | None = None) -> None:
        self.frames[dataset] = frame
        self.kinds[dataset] = kind if kind is not None else signal_kind_for(dataset)

    def list_datasets(self, pattern: str | None = None) -> list[str]:
        names = sorted(self.frames)
        if pattern is None:
            return names
        rx = re.compile(pattern)
        return [n for n in names if rx.search(n)]

    def load(self, dataset: str) -> SampleCollection:
        if dataset not in self.frames:
            raise KeyError(f"unknown data set: {dataset}")
        return SampleCollection.from_frame(self.frames[dataset], kind=self.kinds[dataset], grammar=self.grammar)
