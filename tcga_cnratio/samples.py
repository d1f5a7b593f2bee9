from __future__ import annotations

import logging
import re
from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Iterator

import pandas as pd

from tcga_cnratio.errors import IntegrityError
from tcga_cnratio.tcga_ids import TCGA, BarcodeGrammar, TcgaBarcode, try_parse_barcodes


class SignalKind(Enum):
    RAW_INTENSITY = "raw"
    LOG_TRANSFORMED = "log"


def split_full_name(full_name: str) -> tuple[str, list[str]]:
    """
    "<name>,<tag1>,<tag2>" -> ("<name>", ["<tag1>", "<tag2>"])
    """
    parts = full_name.split(",")
    return parts[0], [p for p in parts[1:] if p]


@dataclass(frozen=True)
class Sample:
    full_name: str
    barcode: TcgaBarcode
    kind: SignalKind
    values: pd.Series

    @property
    def name(self) -> str:
        return split_full_name(self.full_name)[0]

    @property
    def tags(self) -> list[str]:
        return split_full_name(self.full_name)[1]


class SampleCollection:
    """
    Ordered samples of one data set.

    frame: rows=loci, cols=samples (positional; column labels are the full names)
    Full names are unique when loaded; after rename() names may collide and
    dedupe_by_name() resolves that.
    """

    def __init__(
        self,
        frame: pd.DataFrame,
        *,
        full_names: list[str],
        barcodes: list[TcgaBarcode],
        kind: SignalKind,
    ) -> None:
        if frame.shape[1] != len(full_names) or len(full_names) != len(barcodes):
            raise ValueError(
                f"frame has {frame.shape[1]} columns but got {len(full_names)} names and {len(barcodes)} barcodes"
            )
        self._frame = frame.copy()
        self._frame.columns = pd.Index(full_names, dtype=object)
        self._full_names = list(full_names)
        self._barcodes = list(barcodes)
        self.kind = kind

    @classmethod
    def from_frame(
        cls,
        frame: pd.DataFrame,
        *,
        kind: SignalKind,
        grammar: BarcodeGrammar = TCGA,
        sort: bool = True,
    ) -> SampleCollection:
        """
        Load columns of a loci x samples matrix; column labels are sample barcodes.
        Unparseable labels are skipped. With sort=True samples are ordered by label so
        downstream first-seen choices do not depend on the loader's column order.
        """
        logger = logging.getLogger(__name__)
        labels = [str(c) for c in frame.columns]
        dups = pd.Index(labels)[pd.Index(labels).duplicated()]
        if len(dups):
            raise IntegrityError(
                f"duplicate sample labels: {', '.join(sorted(set(dups)))}", stage="load", identity=dups[0]
            )

        barcodes, failures = try_parse_barcodes(labels, grammar)
        if failures:
            logger.warning("skipped %d/%d unparseable sample labels", len(failures), len(labels))
        by_label = {b.label: i for i, b in enumerate(barcodes)}
        order = sorted(by_label) if sort else [b.label for b in barcodes]
        column_of = {label: i for i, label in enumerate(labels)}
        positions = [column_of[label] for label in order]
        out = cls(
            frame.iloc[:, positions],
            full_names=order,
            barcodes=[barcodes[by_label[label]] for label in order],
            kind=kind,
        )
        logger.debug("loaded %d samples x %d loci (%s)", len(out), len(out.loci), kind.value)
        return out

    def _take(self, positions: list[int]) -> SampleCollection:
        return SampleCollection(
            self._frame.iloc[:, positions],
            full_names=[self._full_names[i] for i in positions],
            barcodes=[self._barcodes[i] for i in positions],
            kind=self.kind,
        )

    def __len__(self) -> int:
        return len(self._full_names)

    def __iter__(self) -> Iterator[Sample]:
        return self.samples()

    def __repr__(self) -> str:
        return f"SampleCollection(n={len(self)}, loci={self._frame.shape[0]}, kind={self.kind.value})"

    @property
    def frame(self) -> pd.DataFrame:
        return self._frame.copy()

    @property
    def loci(self) -> pd.Index:
        return self._frame.index

    @property
    def barcodes(self) -> list[TcgaBarcode]:
        return list(self._barcodes)

    def samples(self) -> Iterator[Sample]:
        for i, full_name in enumerate(self._full_names):
            yield Sample(
                full_name=full_name,
                barcode=self._barcodes[i],
                kind=self.kind,
                values=self._frame.iloc[:, i],
            )

    def full_names(self) -> list[str]:
        return list(self._full_names)

    def names(self) -> list[str]:
        return [split_full_name(f)[0] for f in self._full_names]

    def filter_by_type(self, pattern: str) -> SampleCollection:
        """Samples whose sample-type code matches the regex prefix, e.g. ^01 or ^1[01]."""
        rx = re.compile(pattern)
        return self._take([i for i, b in enumerate(self._barcodes) if rx.match(b.sample_type)])

    def subset(self, keys: Iterable[str]) -> SampleCollection:
        """
        Samples whose name is in keys, ordered by keys. Replicates sharing a name stay
        in collection order.
        """
        by_name: dict[str, list[int]] = defaultdict(list)
        for i, name in enumerate(self.names()):
            by_name[name].append(i)
        positions = [i for key in dict.fromkeys(keys) for i in by_name.get(key, [])]
        return self._take(positions)

    def dedupe_by_name(self) -> SampleCollection:
        """First occurrence of each name wins."""
        logger = logging.getLogger(__name__)
        seen: set[str] = set()
        kept: list[int] = []
        for i, name in enumerate(self.names()):
            if name in seen:
                logger.debug("dropping replicate %s (name %s already kept)", self._full_names[i], name)
                continue
            seen.add(name)
            kept.append(i)
        return self._take(kept)

    def rename(self, rewrite: Callable[[str], str]) -> SampleCollection:
        return SampleCollection(
            self._frame,
            full_names=[rewrite(f) for f in self._full_names],
            barcodes=self._barcodes,
            kind=self.kind,
        )


def names_of(samples: SampleCollection) -> list[str]:
    return samples.names()


def intersect_names(a: SampleCollection, b: SampleCollection) -> list[str]:
    return sorted(set(a.names()) & set(b.names()))
