from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Optional, Union

import pandas as pd

from indicators.records import IndicatorRecord

if TYPE_CHECKING:
    from indicators.data import Dataset


FRAME_COLUMNS = ["face", "status_tag", "department", "haystack"]


@dataclass(frozen=True)
class IndicatorFilters:
    face: str = ""
    status_tag: str = ""
    department: str = ""
    search_text: str = ""

    @property
    def query(self) -> str:
        return self.search_text.strip().casefold()


def search_haystack(record: IndicatorRecord) -> str:
    parts = [record.id, record.title, record.description, record.self_eval_note, record.department]
    return " ".join(p for p in parts if p).casefold()


def frame_row(record: IndicatorRecord) -> Dict[str, str]:
    return {
        "face": record.face or "",
        "status_tag": record.status_tag or "",
        "department": record.department or "",
        "haystack": search_haystack(record),
    }


def _as_str(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()


def normalize_filters(raw: Optional[dict]) -> IndicatorFilters:
    raw = raw or {}
    return IndicatorFilters(
        face=_as_str(raw.get("face")),
        status_tag=_as_str(raw.get("status_tag")),
        department=_as_str(raw.get("department")),
        search_text=_as_str(raw.get("search_text")),
    )


def filter_records(dataset: "Dataset", filters: Union[dict, IndicatorFilters, None]) -> List[IndicatorRecord]:
    """Return the records matching every specified criterion, in dataset order."""
    filt = filters if isinstance(filters, IndicatorFilters) else normalize_filters(filters)
    frame: pd.DataFrame = dataset.frame

    mask = pd.Series(True, index=frame.index)
    if filt.face:
        mask &= frame["face"].eq(filt.face)
    if filt.status_tag:
        mask &= frame["status_tag"].eq(filt.status_tag)
    if filt.department:
        mask &= frame["department"].eq(filt.department)
    q = filt.query
    if q:
        mask &= frame["haystack"].astype(str).str.contains(q, regex=False)

    return [record for record, keep in zip(dataset.records, mask.tolist()) if keep]
