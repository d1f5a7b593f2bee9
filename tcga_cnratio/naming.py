from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterable

from tcga_cnratio.config import REF_SEPARATOR
from tcga_cnratio.tcga_ids import TCGA, BarcodeGrammar


@dataclass(frozen=True)
class RewriteRule:
    pattern: str
    replacement: str

    def apply(self, name: str) -> str:
        return re.sub(self.pattern, self.replacement, name)


def rewrite(name: str, rule: RewriteRule) -> str:
    return rule.apply(name)


def rewrite_all(name: str, rules: Iterable[RewriteRule]) -> str:
    for rule in rules:
        name = rule.apply(name)
    return name


def rewriter(rules: Iterable[RewriteRule]) -> Callable[[str], str]:
    rules = tuple(rules)
    return lambda name: rewrite_all(name, rules)


def full_name_rules(grammar: BarcodeGrammar = TCGA) -> tuple[RewriteRule, ...]:
    """
    Raw label -> "<patient>,<sampleId>,<tag>".

    e.g. TCGA-02-0001-01C-01D-0182-01 -> TCGA-02-0001,01C,01D-0182-01
    The first comma-separated token (the sample name) is then the patient.
    """
    return (
        RewriteRule(grammar.pattern, r"\g<patient>,\g<sample_id>,\g<tag>"),
        RewriteRule(r",$", ""),
    )


def display_rules(grammar: BarcodeGrammar = TCGA, *, separator: str = REF_SEPARATOR) -> tuple[RewriteRule, ...]:
    """
    "<tumor full name>,ref=<normal full name>" -> "<patient>,<T>vs<N>,<Ttag>vs<Ntag>".

    e.g. TCGA-02-0001,01C,01D-0182-01,ref=TCGA-02-0001,10A,01D-0182-01
      -> TCGA-02-0001,01Cvs10A,01D-0182-01vs01D-0182-01
    A tag missing on one side only is shown as NA.
    """
    pattern = (
        f"^(?P<patient>{grammar.patient}),(?P<t_sample_id>{grammar.sample_id})(?:,(?P<t_tag>[^,]*))?"
        f"{re.escape(separator)}"
        f"(?:{grammar.patient}),(?P<n_sample_id>{grammar.sample_id})(?:,(?P<n_tag>[^,]*))?$"
    )
    return (
        RewriteRule(pattern, r"\g<patient>,\g<t_sample_id>vs\g<n_sample_id>,\g<t_tag>vs\g<n_tag>"),
        RewriteRule(r",vs$", ""),
        RewriteRule(r",vs(?=[^,]+$)", ",NAvs"),
        RewriteRule(r"(?<=,)([^,]+)vs$", r"\1vsNA"),
    )
