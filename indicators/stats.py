from __future__ import annotations

from typing import Any, Dict, Iterable

from indicators.records import IndicatorRecord


def compute_stats(records: Iterable[IndicatorRecord]) -> Dict[str, Any]:
    records = list(records)
    ai_count = sum(1 for r in records if r.has_ai)
    return {
        "total": len(records),
        "new": sum(1 for r in records if r.is_new),
        "modified": sum(1 for r in records if r.is_modified),
        "ai": ai_count,
        "show_ai": ai_count > 0,
    }
