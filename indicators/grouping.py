from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

import icu

from indicators import labels as L
from indicators.records import IndicatorRecord


@dataclass(frozen=True)
class DepartmentGroup:
    key: str
    accent: str
    records: Tuple[IndicatorRecord, ...] = field(default_factory=tuple)

    @property
    def count(self) -> int:
        return len(self.records)


_COLLATOR = icu.Collator.createInstance(icu.Locale("zh_TW"))


def collation_key(label: str) -> Tuple[bytes, str]:
    """Sort key for department labels: zh-TW collation (stroke order), raw text as tie-break."""
    return _COLLATOR.getSortKey(label), label


def group_sort_key(key: str) -> Tuple[int, Tuple[bytes, str]]:
    if key == L.UNASSIGNED:
        return 1, (b"", "")
    return 0, collation_key(key)


def accent_for(key: str) -> str:
    for keyword, accent in L.DEPARTMENT_ACCENTS:
        if keyword in key:
            return accent
    return L.DEFAULT_ACCENT


def group_by_department(records: Iterable[IndicatorRecord]) -> List[DepartmentGroup]:
    buckets: Dict[str, List[IndicatorRecord]] = {}
    for record in records:
        buckets.setdefault(record.group_key, []).append(record)
    return [
        DepartmentGroup(key=key, accent=accent_for(key), records=tuple(buckets[key]))
        for key in sorted(buckets, key=group_sort_key)
    ]
