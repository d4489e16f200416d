from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import pandas as pd
import requests

from indicators import labels as L
from indicators.filters import FRAME_COLUMNS, frame_row
from indicators.records import IndicatorRecord, is_indicator_id, record_from_mapping


logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parents[1]

PRIMARY_SOURCE = os.getenv("ESG_PRIMARY_SOURCE", str(DATA_DIR / "suggestions_output.json"))
FALLBACK_SOURCE = os.getenv("ESG_FALLBACK_SOURCE", str(DATA_DIR / "data.json"))
REQUEST_TIMEOUT: Optional[float] = None

Source = Union[str, Path]


class SourceUnavailable(Exception):
    """A single data source could not be retrieved."""


class DatasetLoadError(Exception):
    """Neither source could be retrieved, or the payload is not a record list."""


@dataclass(frozen=True, eq=False)
class Dataset:
    records: Tuple[IndicatorRecord, ...]
    source: str = ""
    dropped: int = 0
    frame: pd.DataFrame = field(init=False, repr=False)

    def __post_init__(self):
        records = tuple(self.records)
        object.__setattr__(self, "records", records)
        object.__setattr__(self, "frame", build_frame(records))

    def __len__(self) -> int:
        return len(self.records)

    def get(self, record_id: str) -> Optional[IndicatorRecord]:
        for record in self.records:
            if record.id == record_id:
                return record
        return None


def is_url(source: Source) -> bool:
    return str(source).lower().startswith(("http://", "https://"))


def fetch_source(source: Source) -> bytes:
    if is_url(source):
        try:
            resp = requests.get(str(source), timeout=REQUEST_TIMEOUT)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise SourceUnavailable(f"{source}: {exc}") from exc
        return resp.content
    try:
        return Path(source).read_bytes()
    except OSError as exc:
        raise SourceUnavailable(f"{source}: {exc}") from exc


def resolve_payload(primary: Source, fallback: Source) -> Tuple[str, bytes]:
    """Fetch the primary source, or the fallback if the primary is unavailable."""
    try:
        return str(primary), fetch_source(primary)
    except SourceUnavailable as exc:
        logger.warning("Primary source unavailable, using fallback %s (%s)", fallback, exc)
    try:
        return str(fallback), fetch_source(fallback)
    except SourceUnavailable as exc:
        raise DatasetLoadError(load_failure_message(primary, fallback)) from exc


def load_failure_message(primary: Source, fallback: Source) -> str:
    return f"Failed to load {Path(str(fallback)).name} or {Path(str(primary)).name}"


def parse_records(payload: Union[str, bytes]) -> Tuple[Tuple[IndicatorRecord, ...], int]:
    """Decode a JSON array into indicator records.

    Entries that are not objects or whose id does not look like an indicator
    code (section headers, extra rows) are dropped and counted.
    """
    try:
        data = json.loads(payload)
    except ValueError as exc:
        raise DatasetLoadError(f"Could not parse indicator data: {exc}") from exc
    if not isinstance(data, list):
        raise DatasetLoadError("Indicator data must be a JSON array of records.")

    records: List[IndicatorRecord] = []
    dropped = 0
    for entry in data:
        if not isinstance(entry, dict) or not is_indicator_id(entry.get(L.KEY_ID)):
            dropped += 1
            continue
        records.append(record_from_mapping(entry))
    return tuple(records), dropped


def build_frame(records: Iterable[IndicatorRecord]) -> pd.DataFrame:
    return pd.DataFrame([frame_row(r) for r in records], columns=FRAME_COLUMNS)


def make_dataset(records: Sequence[IndicatorRecord], *, source: str = "", dropped: int = 0) -> Dataset:
    records = tuple(records)
    return Dataset(records=records, source=source, dropped=dropped)


def load_dataset(primary: Optional[Source] = None, fallback: Optional[Source] = None) -> Dataset:
    primary = PRIMARY_SOURCE if primary is None else primary
    fallback = FALLBACK_SOURCE if fallback is None else fallback
    source, payload = resolve_payload(primary, fallback)
    records, dropped = parse_records(payload)
    if dropped:
        logger.info("Dropped %d non-indicator entries from %s", dropped, source)
    logger.info("Loaded %d indicators from %s", len(records), source)
    return make_dataset(records, source=source, dropped=dropped)


def source_signature(sources: Iterable[Source]) -> Tuple[Tuple[str, Optional[float]], ...]:
    sig = []
    for s in sources:
        if is_url(s):
            sig.append((str(s), None))
            continue
        path = Path(s)
        sig.append((str(path), path.stat().st_mtime if path.exists() else None))
    return tuple(sig)


@lru_cache(maxsize=4)
def _load_dashboard_data_cached(sources_sig: Tuple[Tuple[str, Optional[float]], ...]) -> Dataset:
    (primary, _), (fallback, _) = sources_sig
    return load_dataset(primary, fallback)


def load_dashboard_data() -> Dataset:
    return _load_dashboard_data_cached(source_signature([PRIMARY_SOURCE, FALLBACK_SOURCE]))


def department_options(dataset: Dataset) -> List[str]:
    return sorted({r.department for r in dataset.records if r.department})
