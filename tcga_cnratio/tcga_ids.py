from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable

from tcga_cnratio.config import TcgaBarcodePatterns
from tcga_cnratio.errors import BarcodeParseError


@dataclass(frozen=True)
class BarcodeGrammar:
    patient: str = TcgaBarcodePatterns.PATIENT
    sample_id: str = TcgaBarcodePatterns.SAMPLE_ID

    @property
    def pattern(self) -> str:
        return f"^(?P<patient>{self.patient})-(?P<sample_id>{self.sample_id})-*(?P<tag>.*)$"

    @property
    def regex(self) -> re.Pattern[str]:
        return re.compile(self.pattern)


TCGA = BarcodeGrammar()


@dataclass(frozen=True)
class TcgaBarcode:
    label: str
    patient: str
    sample_id: str
    tag: str = ""

    @property
    def sample_type(self) -> str:
        return self.sample_id[:2]


def parse_barcode(label: str, grammar: BarcodeGrammar = TCGA) -> TcgaBarcode:
    m = grammar.regex.match(label)
    if m is None:
        raise BarcodeParseError(label, grammar.pattern)
    return TcgaBarcode(label=label, patient=m.group("patient"), sample_id=m.group("sample_id"), tag=m.group("tag"))


def try_parse_barcodes(
    labels: Iterable[str], grammar: BarcodeGrammar = TCGA
) -> tuple[list[TcgaBarcode], list[BarcodeParseError]]:
    """
    Parse many labels; a malformed label is collected as a failure and the rest continue.
    """
    logger = logging.getLogger(__name__)
    parsed: list[TcgaBarcode] = []
    failures: list[BarcodeParseError] = []
    for label in labels:
        try:
            parsed.append(parse_barcode(label, grammar))
        except BarcodeParseError as e:
            logger.warning("skipping unparseable sample label: %s", e.label)
            failures.append(e)
    return parsed, failures
