from __future__ import annotations

from pathlib import Path

import pandas as pd

from tcga_cnratio.errors import IntegrityError


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def read_matrix_tsv(path: Path) -> pd.DataFrame:
    """
    loci x samples matrix; first column is the locus id.

    Duplicate sample labels are an error (pandas would otherwise rename them to X.1).
    """
    labels = pd.read_csv(path, sep="\t", nrows=1, header=None, dtype=str).iloc[0, 1:].astype(str)
    dups = labels[labels.duplicated()]
    if len(dups):
        raise IntegrityError(
            f"{path}: duplicate sample labels: {', '.join(sorted(set(dups)))}", stage="load", identity=dups.iloc[0]
        )
    return pd.read_csv(path, sep="\t", index_col=0)


def write_tsv(df: pd.DataFrame, path: Path) -> None:
    ensure_dir(path.parent)
    df.to_csv(path, sep="\t", index=False)


def write_matrix_tsv(df: pd.DataFrame, path: Path, *, index_label: str = "locus") -> None:
    ensure_dir(path.parent)
    df.to_csv(path, sep="\t", index=True, index_label=index_label, na_rep="NaN")


def slugify_dataset_name(dataset: str) -> str:
    return dataset.replace("/", "__").replace(",", "_")
