"""Unit tests for tcga_cnratio/tcga_ids.py."""

import pytest

from tcga_cnratio.errors import BarcodeParseError
from tcga_cnratio.tcga_ids import TCGA, parse_barcode, try_parse_barcodes


class TestParseBarcode:
    def test_full_aliquot_barcode(self):
        b = parse_barcode("TCGA-02-0001-01C-01D-0182-01")
        assert b.patient == "TCGA-02-0001"
        assert b.sample_id == "01C"
        assert b.sample_type == "01"
        assert b.tag == "01D-0182-01"

    def test_sample_barcode_without_tag(self):
        b = parse_barcode("TCGA-02-0001-11")
        assert b.patient == "TCGA-02-0001"
        assert b.sample_id == "11"
        assert b.tag == ""

    def test_deterministic(self):
        label = "TCGA-06-0125-10A-01D-0182-01"
        assert parse_barcode(label) == parse_barcode(label)

    def test_custom_grammar(self, short_grammar):
        b = parse_barcode("P12-10B", short_grammar)
        assert b.patient == "P12"
        assert b.sample_id == "10B"
        assert b.sample_type == "10"

    def test_malformed_raises(self):
        with pytest.raises(BarcodeParseError) as exc:
            parse_barcode("not-a-barcode")
        assert exc.value.label == "not-a-barcode"

    def test_pattern_has_three_fields(self):
        assert TCGA.regex.groups == 3


class TestTryParseBarcodes:
    def test_failures_do_not_stop_siblings(self):
        parsed, failures = try_parse_barcodes(["TCGA-02-0001-01A", "junk", "TCGA-02-0003-10A"])
        assert [b.patient for b in parsed] == ["TCGA-02-0001", "TCGA-02-0003"]
        assert [f.label for f in failures] == ["junk"]

