from __future__ import annotations


class BarcodeParseError(ValueError):
    def __init__(self, label: str, pattern: str) -> None:
        super().__init__(f"cannot parse barcode {label!r} with pattern {pattern!r}")
        self.label = label
        self.pattern = pattern


class EmptyResultError(ValueError):
    """
    Nothing left to work on (no data sets, no pairable patients, empty selection).
    Aborts the run for one data set.
    """

    def __init__(self, message: str, *, stage: str, dataset: str | None = None) -> None:
        prefix = f"[{dataset}] " if dataset else ""
        super().__init__(f"{prefix}{stage}: {message}")
        self.message = message
        self.stage = stage
        self.dataset = dataset


class IntegrityError(RuntimeError):
    def __init__(self, message: str, *, stage: str, identity: str | None = None) -> None:
        super().__init__(f"{stage}: {message}")
        self.message = message
        self.stage = stage
        self.identity = identity


class NumericDomainWarning(RuntimeWarning):
    pass
