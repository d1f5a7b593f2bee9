"""Shared pytest fixtures for tcga-cnratio tests."""

import numpy as np
import pandas as pd
import pytest

from tcga_cnratio.tcga_ids import BarcodeGrammar

TUMOR_1 = "TCGA-02-0001-01C-01D-0182-01"
NORMAL_1 = "TCGA-02-0001-10A-01D-0182-01"
TUMOR_2 = "TCGA-02-0003-01A-01D-0182-01"
NORMAL_2 = "TCGA-02-0003-11A-01D-0182-01"
TUMOR_ONLY = "TCGA-02-0007-01A-01D-0182-01"


@pytest.fixture
def short_grammar():
    """Grammar for compact test labels such as P1-01A."""
    return BarcodeGrammar(patient="P[0-9]+", sample_id="[0-9]{2}[A-Z]?")


@pytest.fixture
def make_frame():
    """Build a loci x samples matrix; each sample gets a constant value unless given a list."""

    def _make(values_by_label, n_loci=4):
        data = {}
        for label, v in values_by_label.items():
            data[label] = np.asarray(v, dtype=float) if np.ndim(v) else np.full(n_loci, float(v))
        n = len(next(iter(data.values()))) if data else n_loci
        return pd.DataFrame(data, index=[f"locus{i}" for i in range(n)])

    return _make


@pytest.fixture
def tcga_frame(make_frame):
    """Two pairable patients and one tumor without a normal."""
    return make_frame(
        {
            TUMOR_1: [400.0, 200.0, 100.0, 50.0],
            NORMAL_1: [100.0, 100.0, 100.0, 100.0],
            TUMOR_2: [300.0, 300.0, 300.0, 300.0],
            NORMAL_2: [150.0, 150.0, 150.0, 150.0],
            TUMOR_ONLY: [100.0, 100.0, 100.0, 100.0],
        }
    )
