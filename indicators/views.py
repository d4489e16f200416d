from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Optional

from indicators.charts import department_workload_chart
from indicators.data import Dataset, department_options
from indicators.filters import IndicatorFilters, filter_records
from indicators.grouping import group_by_department
from indicators.projections import detail, summarize
from indicators.records import IndicatorRecord
from indicators.stats import compute_stats

KANBAN = "kanban"
TABLE = "table"
VIEWS = (KANBAN, TABLE)


def compute_kanban(
    filters: IndicatorFilters,
    dataset: Dataset,
    *,
    records: Optional[List[IndicatorRecord]] = None,
    include_chart: bool = False,
) -> Dict[str, Any]:
    records = filter_records(dataset, filters) if records is None else records
    groups = group_by_department(records)
    payload = {
        "surface": KANBAN,
        "filters": asdict(filters),
        "stats": compute_stats(records),
        "columns": [
            {
                "key": g.key,
                "accent": g.accent,
                "count": g.count,
                "cards": [summarize(r) for r in g.records],
            }
            for g in groups
        ],
    }
    if include_chart:
        payload["chart"] = department_workload_chart(groups)
    return payload


def compute_table(
    filters: IndicatorFilters,
    dataset: Dataset,
    *,
    records: Optional[List[IndicatorRecord]] = None,
) -> Dict[str, Any]:
    records = filter_records(dataset, filters) if records is None else records
    return {
        "surface": TABLE,
        "filters": asdict(filters),
        "stats": compute_stats(records),
        "rows": [summarize(r) for r in records],
    }


def compute_detail(record: IndicatorRecord) -> Dict[str, Any]:
    return {"surface": "detail", "record": detail(record)}


def compute_meta(dataset: Dataset) -> Dict[str, Any]:
    return {
        "departments": department_options(dataset),
        "source": dataset.source,
        "total": len(dataset),
        "dropped": dataset.dropped,
    }


def error_payload(message: str) -> Dict[str, Any]:
    return {"surface": "error", "message": message}
