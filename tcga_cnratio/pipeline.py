from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable

import pandas as pd
from tqdm import tqdm

from tcga_cnratio.config import DEFAULT_LOG_BASE, SampleTypes
from tcga_cnratio.datasets import DatasetProvider
from tcga_cnratio.errors import EmptyResultError, IntegrityError
from tcga_cnratio.io import slugify_dataset_name, write_matrix_tsv, write_tsv
from tcga_cnratio.pairing import PairingResult, SelectionMode, pair_tumor_normal
from tcga_cnratio.ratios import RatioSet, compute_ratios, summarize_ratios
from tcga_cnratio.tcga_ids import TCGA, BarcodeGrammar


@dataclass
class PipelineParams:
    log_base: float = DEFAULT_LOG_BASE
    grammar: BarcodeGrammar = TCGA
    tumor_types: str = SampleTypes.PRIMARY_TUMOR
    normal_types: str = SampleTypes.NORMAL
    selection: SelectionMode = SelectionMode.ALL
    select_subset: Callable[[list[str]], Iterable[str]] | None = None
    allow: list[str] | None = None
    threads: int = 1


@dataclass
class DatasetResult:
    dataset: str
    pairing: PairingResult
    ratios: RatioSet
    summary: pd.DataFrame


@dataclass
class PipelineResult:
    results: dict[str, DatasetResult] = field(default_factory=dict)
    # dataset -> error message
    failed: dict[str, str] = field(default_factory=dict)


def run_dataset(provider: DatasetProvider, dataset: str, *, params: PipelineParams) -> DatasetResult:
    logger = logging.getLogger(__name__)
    t0 = time.perf_counter()
    samples = provider.load(dataset)
    if len(samples) == 0:
        raise EmptyResultError("no parseable samples", stage="load", dataset=dataset)
    logger.info("[%s] loaded %d samples x %d loci (%s)", dataset, len(samples), len(samples.loci), samples.kind.value)

    try:
        pairing = pair_tumor_normal(
            samples,
            grammar=params.grammar,
            tumor_types=params.tumor_types,
            normal_types=params.normal_types,
            selection=params.selection,
            select_subset=params.select_subset,
            allow=params.allow,
        )
    except EmptyResultError as e:
        raise EmptyResultError(e.message, stage=e.stage, dataset=dataset) from e

    ratios = compute_ratios(pairing.tumors, pairing.normals, log_base=params.log_base, n_jobs=params.threads)
    summary = summarize_ratios(ratios)
    logger.info("[%s] %d pairs done (%.1fs)", dataset, len(ratios), time.perf_counter() - t0)
    return DatasetResult(dataset=dataset, pairing=pairing, ratios=ratios, summary=summary)


def write_dataset_result(result: DatasetResult, out_dir: Path, *, grammar: BarcodeGrammar = TCGA) -> None:
    base = out_dir / slugify_dataset_name(result.dataset)
    write_matrix_tsv(result.ratios.frame, base / "log_ratios.tsv")
    write_matrix_tsv(result.ratios.with_display_names(grammar), base / "log_ratios.display.tsv")
    write_tsv(result.summary, base / "pair_summary.tsv")
    dropped = pd.DataFrame(
        [{"patient": p, "side": "tumor"} for p in result.pairing.dropped_tumors]
        + [{"patient": p, "side": "normal"} for p in result.pairing.dropped_normals],
        columns=["patient", "side"],
    )
    write_tsv(dropped, base / "unpaired.tsv")


def run_pipeline(
    provider: DatasetProvider,
    *,
    params: PipelineParams | None = None,
    pattern: str | None = None,
    out_dir: Path | None = None,
    overwrite: bool = False,
    show_progress: bool = True,
) -> PipelineResult:
    """
    Pair and compute log-ratios for every data set matching pattern.

    A data set with nothing to pair, or whose pairing fails the integrity check, is
    logged and recorded in PipelineResult.failed; the other data sets continue.
    """
    logger = logging.getLogger(__name__)
    params = params or PipelineParams()
    if out_dir is not None and out_dir.exists():
        if out_dir.is_file():
            raise FileExistsError(f"--out must be a directory, but got an existing file: {out_dir}")
        if any(p.name != "run.log" for p in out_dir.iterdir()) and not overwrite:
            raise FileExistsError(
                f"Output directory is not empty: {out_dir} (use --overwrite or choose a new --out)"
            )
    datasets = provider.list_datasets(pattern)
    if not datasets:
        raise EmptyResultError(f"no data sets match {pattern!r}", stage="discover")
    logger.info(
        "starting run: datasets=%d log_base=%g tumor_types=%s normal_types=%s selection=%s threads=%d",
        len(datasets),
        params.log_base,
        params.tumor_types,
        params.normal_types,
        params.selection.value,
        params.threads,
    )

    out = PipelineResult()
    for dataset in tqdm(datasets, desc="Tumor/normal ratios", disable=not show_progress):
        try:
            result = run_dataset(provider, dataset, params=params)
        except (EmptyResultError, IntegrityError) as e:
            logger.error("[%s] skipped: %s", dataset, e)
            out.failed[dataset] = str(e)
            continue
        out.results[dataset] = result
        if out_dir is not None:
            write_dataset_result(result, out_dir, grammar=params.grammar)
            logger.info("[%s] wrote %s", dataset, out_dir / slugify_dataset_name(dataset))

    logger.info("run finished: ok=%d failed=%d", len(out.results), len(out.failed))
    return out
