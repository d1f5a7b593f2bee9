#!/usr/bin/env python
from __future__ import annotations

import argparse
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="TCGA tumor/normal copy-number log-ratios")
    p.add_argument(
        "--input",
        type=Path,
        nargs="+",
        required=True,
        help="Loci x samples TSV matrices (first column = locus id, header = sample barcodes)",
    )
    p.add_argument(
        "--kind",
        type=str,
        default="auto",
        choices=["auto", "raw", "log"],
        help="Signal representation: raw intensities or log-transformed (auto = from file name tags)",
    )
    p.add_argument("--out", type=Path, default=Path("results"), help="Output directory")
    p.add_argument("--log-base", type=float, default=2.0, help="Logarithm base for raw-intensity ratios")
    p.add_argument("--tumor-types", type=str, default="^01", help="Sample-type regex for tumors")
    p.add_argument("--normal-types", type=str, default="^1[01]", help="Sample-type regex for normals")
    p.add_argument(
        "--patients",
        type=str,
        nargs="+",
        default=None,
        help="Restrict to these patient ids (default: all pairable patients)",
    )
    p.add_argument("--threads", type=int, default=1, help="Parallel workers for per-pair ratio computation")
    p.add_argument("--overwrite", action="store_true", help="Allow writing into a non-empty output directory")
    p.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Console/file log level",
    )
    p.add_argument("--log-file", type=Path, default=None, help="Log file path (default: <out>/run.log)")
    p.add_argument("--no-progress", action="store_true", help="Disable tqdm progress bars")
    return p


def main() -> None:
    args = build_parser().parse_args()
    from tcga_cnratio.logging_utils import configure_logging

    configure_logging(out_dir=args.out, level=args.log_level, log_file=args.log_file)
    from tcga_cnratio.datasets import FrameDatasetProvider
    from tcga_cnratio.io import read_matrix_tsv
    from tcga_cnratio.pipeline import PipelineParams, run_pipeline
    from tcga_cnratio.samples import SignalKind

    kind = {"raw": SignalKind.RAW_INTENSITY, "log": SignalKind.LOG_TRANSFORMED}.get(args.kind)
    provider = FrameDatasetProvider()
    for path in args.input:
        # e.g. TCGA,GBM,log2.tsv -> data set "TCGA,GBM,log2"
        provider.add(path.stem, read_matrix_tsv(path), kind=kind)

    result = run_pipeline(
        provider,
        params=PipelineParams(
            log_base=args.log_base,
            tumor_types=args.tumor_types,
            normal_types=args.normal_types,
            allow=args.patients,
            threads=args.threads,
        ),
        out_dir=args.out,
        overwrite=args.overwrite,
        show_progress=not args.no_progress,
    )
    if not result.results:
        sys.exit(1)


if __name__ == "__main__":
    main()
