from __future__ import annotations


class TcgaBarcodePatterns:
    # TCGA-<TSS>-<participant>
    PATIENT = "TCGA-[0-9A-Z]{2}-[0-9A-Z]{4}"
    # <sample type><vial>, e.g. 01A, 10B, 11
    SAMPLE_ID = "[0-9]{2}[A-Z]?"


class SampleTypes:
    PRIMARY_TUMOR = "^01"
    # 10 = blood derived normal, 11 = solid tissue normal
    NORMAL = "^1[01]"


REF_SEPARATOR = ",ref="
DEFAULT_LOG_BASE = 2.0
