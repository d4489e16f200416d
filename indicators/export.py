from __future__ import annotations

import csv
from dataclasses import dataclass
from typing import Iterable

import pandas as pd

from indicators import labels as L
from indicators.projections import csv_row
from indicators.records import IndicatorRecord

BOM = "\ufeff"
CSV_MEDIA_TYPE = "text/csv;charset=utf-8"


@dataclass(frozen=True)
class ExportArtifact:
    filename: str
    media_type: str
    content: bytes


def records_to_csv(records: Iterable[IndicatorRecord]) -> str:
    """Serialize records to BOM-prefixed CSV text.

    The header row is bare; every data cell is quoted with embedded quotes
    doubled and newlines flattened to spaces.
    """
    headers = [header for header, _ in L.EXPORT_COLUMNS]
    rows = pd.DataFrame([csv_row(r) for r in records], columns=headers)
    body = "" if rows.empty else rows.to_csv(index=False, header=False, quoting=csv.QUOTE_ALL, lineterminator="\n")
    return BOM + ",".join(headers) + "\n" + body


def export_csv(records: Iterable[IndicatorRecord], *, filename: str = L.EXPORT_FILENAME) -> ExportArtifact:
    return ExportArtifact(
        filename=filename,
        media_type=CSV_MEDIA_TYPE,
        content=records_to_csv(records).encode("utf-8"),
    )
