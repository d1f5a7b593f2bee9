"""Unit tests for tcga_cnratio/naming.py."""

from tcga_cnratio.naming import RewriteRule, display_rules, full_name_rules, rewrite, rewrite_all, rewriter


class TestRewrite:
    def test_single_rule(self):
        assert rewrite("a-b", RewriteRule("-", "_")) == "a_b"

    def test_rules_apply_in_order(self):
        rules = [RewriteRule("a", "b"), RewriteRule("b", "c")]
        assert rewrite_all("a", rules) == "c"

    def test_rewriter_is_reusable(self):
        f = rewriter([RewriteRule("^x", "y")])
        assert f("xx") == "yx"
        assert f("ax") == "ax"


class TestFullNameRules:
    def test_tcga_label(self):
        assert rewrite_all("TCGA-02-0001-01C-01D-0182-01", full_name_rules()) == "TCGA-02-0001,01C,01D-0182-01"

    def test_empty_tag_dropped(self, short_grammar):
        assert rewrite_all("P1-01A", full_name_rules(short_grammar)) == "P1,01A"

    def test_non_matching_label_unchanged(self):
        assert rewrite_all("something", full_name_rules()) == "something"


class TestDisplayRules:
    def test_tcga_composite(self):
        key = "TCGA-02-0001,01C,01D-0182-01,ref=TCGA-02-0001,10A,01D-0182-02"
        assert rewrite_all(key, display_rules()) == "TCGA-02-0001,01Cvs10A,01D-0182-01vs01D-0182-02"

    def test_composite_without_tags(self, short_grammar):
        assert rewrite_all("P1,01A,ref=P1,10B", display_rules(short_grammar)) == "P1,01Avs10B"

    def test_custom_separator(self, short_grammar):
        rules = display_rules(short_grammar, separator="|vs|")
        assert rewrite_all("P1,01A,x|vs|P1,11A,y", rules) == "P1,01Avs11A,xvsy"

    def test_tumor_tag_only(self):
        key = "TCGA-02-0001,01A,01D-0182-01,ref=TCGA-02-0001,10A"
        assert rewrite_all(key, display_rules()) == "TCGA-02-0001,01Avs10A,01D-0182-01vsNA"

    def test_normal_tag_only(self):
        key = "TCGA-02-0001,01A,ref=TCGA-02-0001,10A,01D"
        assert rewrite_all(key, display_rules()) == "TCGA-02-0001,01Avs10A,NAvs01D"
