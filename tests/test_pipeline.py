"""Tests for tcga_cnratio/pipeline.py."""

import pandas as pd
import pytest

from tcga_cnratio.datasets import FrameDatasetProvider
from tcga_cnratio.errors import EmptyResultError
from tcga_cnratio.io import read_matrix_tsv
from tcga_cnratio.pipeline import PipelineParams, run_dataset, run_pipeline


@pytest.fixture
def provider(tcga_frame, make_frame):
    p = FrameDatasetProvider()
    p.add("TCGA,OV,total", tcga_frame)
    p.add("TCGA,GBM,total", make_frame({"TCGA-02-0001-01A": 1, "TCGA-02-0002-01A": 1}))
    return p


class TestRunDataset:
    def test_result(self, provider):
        result = run_dataset(provider, "TCGA,OV,total", params=PipelineParams())
        assert len(result.ratios) == 2
        assert result.pairing.dropped_tumors == ["TCGA-02-0007"]
        assert list(result.summary["n_loci"]) == [4, 4]

    def test_no_pairs_names_dataset(self, provider):
        with pytest.raises(EmptyResultError) as exc:
            run_dataset(provider, "TCGA,GBM,total", params=PipelineParams())
        assert exc.value.dataset == "TCGA,GBM,total"
        assert exc.value.stage == "intersect"

    def test_allow_list(self, provider):
        result = run_dataset(provider, "TCGA,OV,total", params=PipelineParams(allow=["TCGA-02-0003"]))
        assert result.pairing.patients == ["TCGA-02-0003"]


class TestRunPipeline:
    def test_failed_dataset_does_not_stop_others(self, provider):
        out = run_pipeline(provider, show_progress=False)
        assert list(out.results) == ["TCGA,OV,total"]
        assert list(out.failed) == ["TCGA,GBM,total"]

    def test_no_datasets(self, provider):
        with pytest.raises(EmptyResultError):
            run_pipeline(provider, pattern="^LUAD", show_progress=False)

    def test_writes_outputs(self, provider, tmp_path):
        out_dir = tmp_path / "out"
        run_pipeline(provider, pattern=",OV,", out_dir=out_dir, show_progress=False)
        base = out_dir / "TCGA_OV_total"
        ratios = read_matrix_tsv(base / "log_ratios.tsv")
        assert list(ratios.columns) == [
            "TCGA-02-0001,01C,01D-0182-01,ref=TCGA-02-0001,10A,01D-0182-01",
            "TCGA-02-0003,01A,01D-0182-01,ref=TCGA-02-0003,11A,01D-0182-01",
        ]
        assert ratios.iloc[0, 0] == pytest.approx(2.0)
        unpaired = pd.read_csv(base / "unpaired.tsv", sep="\t")
        assert unpaired["patient"].tolist() == ["TCGA-02-0007"]
        assert (base / "pair_summary.tsv").exists()
        assert (base / "log_ratios.display.tsv").exists()

    def test_refuses_non_empty_out(self, provider, tmp_path):
        (tmp_path / "existing.txt").write_text("x")
        with pytest.raises(FileExistsError):
            run_pipeline(provider, out_dir=tmp_path, show_progress=False)
