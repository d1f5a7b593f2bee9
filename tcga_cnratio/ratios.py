from __future__ import annotations

import logging
import warnings
from typing import Iterator

import numpy as np
import pandas as pd
from joblib import Parallel, delayed
from scipy import stats

from tcga_cnratio.config import DEFAULT_LOG_BASE, REF_SEPARATOR
from tcga_cnratio.errors import IntegrityError, NumericDomainWarning
from tcga_cnratio.naming import display_rules, rewriter
from tcga_cnratio.pairing import check_pairing
from tcga_cnratio.samples import SampleCollection, SignalKind
from tcga_cnratio.tcga_ids import TCGA, BarcodeGrammar


def ratio_key(tumor_full_name: str, normal_full_name: str, *, separator: str = REF_SEPARATOR) -> str:
    return f"{tumor_full_name}{separator}{normal_full_name}"


def split_ratio_key(key: str, *, separator: str = REF_SEPARATOR) -> tuple[str, str]:
    tumor, sep, normal = key.partition(separator)
    if not sep:
        raise ValueError(f"not a ratio key (missing {separator!r}): {key}")
    return tumor, normal


def _log(x: np.ndarray, base: float) -> np.ndarray:
    if base == 2:
        return np.log2(x)
    if base == 10:
        return np.log10(x)
    return np.log(x) / np.log(base)


def log_ratio(tumor: np.ndarray, normal: np.ndarray, *, kind: SignalKind, log_base: float = DEFAULT_LOG_BASE) -> np.ndarray:
    """
    Per-locus M-value.

    RAW_INTENSITY:   M = log_b(tumor / normal); loci with a non-positive intensity are non-finite.
    LOG_TRANSFORMED: M = tumor - normal (inputs already log_b scaled).
    """
    t = np.asarray(tumor, dtype=float)
    n = np.asarray(normal, dtype=float)
    if kind is SignalKind.LOG_TRANSFORMED:
        return t - n
    with np.errstate(divide="ignore", invalid="ignore"):
        m = _log(t / n, log_base)
    # negative/negative gives a positive ratio; still outside the domain
    bad = ((t <= 0) | (n <= 0)) & np.isfinite(m)
    if bad.any():
        m = np.where(bad, np.nan, m)
    return m


class RatioSet:
    """
    Log-ratios per tumor/normal pair.

    frame: rows=loci, cols="<tumor full name>,ref=<normal full name>"
    """

    def __init__(self, frame: pd.DataFrame, *, kind: SignalKind, log_base: float, separator: str = REF_SEPARATOR) -> None:
        self._frame = frame.copy()
        self.kind = kind
        self.log_base = log_base
        self.separator = separator

    def __len__(self) -> int:
        return self._frame.shape[1]

    def __getitem__(self, key: str) -> pd.Series:
        return self._frame[key].copy()

    def __repr__(self) -> str:
        return f"RatioSet(n={len(self)}, loci={self._frame.shape[0]}, kind={self.kind.value}, log_base={self.log_base})"

    @property
    def frame(self) -> pd.DataFrame:
        return self._frame.copy()

    def keys(self) -> list[str]:
        return [str(c) for c in self._frame.columns]

    def pairs(self) -> Iterator[tuple[str, str]]:
        for key in self.keys():
            yield split_ratio_key(key, separator=self.separator)

    def display_names(self, grammar: BarcodeGrammar = TCGA) -> list[str]:
        rename = rewriter(display_rules(grammar, separator=self.separator))
        return [rename(k) for k in self.keys()]

    def with_display_names(self, grammar: BarcodeGrammar = TCGA) -> pd.DataFrame:
        out = self.frame
        out.columns = self.display_names(grammar)
        return out


def compute_ratios(
    tumors: SampleCollection,
    normals: SampleCollection,
    *,
    log_base: float = DEFAULT_LOG_BASE,
    n_jobs: int = 1,
    separator: str = REF_SEPARATOR,
) -> RatioSet:
    """
    tumors[i] is compared against normals[i]; both must come out of pair_tumor_normal().
    The numeric mode follows the inputs' SignalKind.
    """
    logger = logging.getLogger(__name__)
    if log_base <= 0 or log_base == 1:
        raise ValueError(f"log_base must be positive and != 1, got {log_base}")
    if tumors.kind is not normals.kind:
        raise ValueError(f"signal kinds differ: tumors={tumors.kind.value} normals={normals.kind.value}")
    check_pairing(tumors, normals)
    if not tumors.loci.equals(normals.loci):
        raise IntegrityError("tumor and normal loci differ", stage="ratios")

    kind = tumors.kind
    t_frame = tumors.frame
    n_frame = normals.frame
    t_names = tumors.full_names()
    n_names = normals.full_names()

    def one_pair(i: int) -> tuple[str, np.ndarray]:
        m = log_ratio(t_frame.iloc[:, i].to_numpy(), n_frame.iloc[:, i].to_numpy(), kind=kind, log_base=log_base)
        return ratio_key(t_names[i], n_names[i], separator=separator), m

    n_jobs = max(1, int(n_jobs))
    if n_jobs > 1:
        results = Parallel(n_jobs=n_jobs, prefer="threads")(delayed(one_pair)(i) for i in range(len(t_names)))
    else:
        results = [one_pair(i) for i in range(len(t_names))]

    for key, m in results:
        n_bad = int((~np.isfinite(m)).sum())
        if n_bad and kind is SignalKind.RAW_INTENSITY:
            warnings.warn(
                f"{key}: {n_bad}/{m.size} loci with non-positive or missing intensity (non-finite ratio)",
                NumericDomainWarning,
                stacklevel=2,
            )

    frame = pd.DataFrame({key: m for key, m in results}, index=tumors.loci)
    logger.info("computed %d log-ratios (%s, base=%g) over %d loci", len(results), kind.value, log_base, frame.shape[0])
    return RatioSet(frame, kind=kind, log_base=log_base, separator=separator)


def summarize_ratios(ratios: RatioSet) -> pd.DataFrame:
    """One row per pair: locus counts and robust location/scale of the finite M-values."""
    rows: list[dict] = []
    frame = ratios.frame
    for (tumor, normal), key in zip(ratios.pairs(), ratios.keys()):
        m = frame[key].to_numpy(dtype=float)
        finite = m[np.isfinite(m)]
        rows.append(
            {
                "key": key,
                "tumor": tumor,
                "normal": normal,
                "n_loci": int(m.size),
                "n_nonfinite": int(m.size - finite.size),
                "mean": float(np.mean(finite)) if finite.size else np.nan,
                "median": float(np.median(finite)) if finite.size else np.nan,
                "mad": float(stats.median_abs_deviation(finite, scale="normal")) if finite.size else np.nan,
            }
        )
    return pd.DataFrame(rows, columns=["key", "tumor", "normal", "n_loci", "n_nonfinite", "mean", "median", "mad"])
