"""Shared fixtures: a ten-indicator sample set plus interleaved non-indicator rows."""

import json
import sys
from pathlib import Path
from typing import Any, Dict, List

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from indicators.data import make_dataset, parse_records  # noqa: E402


STRUCTURED_AI = {
    "核心要求白話文": "公司需揭露溫室氣體排放量",
    "差異分析": "去年未揭露範疇三",
    "具體行動與揭露清單": ["盤查範疇三", "於永續報告書揭露"],
    "官方參考與較佳案例": "GRI 305",
    "分派建議": "永續辦公室",
}


def _sample_entries() -> List[Any]:
    return [
        {"編號": "一、環境面", "評鑑指標": "section header"},
        {
            "編號": "E-1",
            "構面": "E",
            "狀態標記": "New_2026",
            "評鑑指標": "是否揭露\n溫室氣體排放",
            "指標說明": "新增溫室氣體指標",
            "題型": "是非題",
            "114_相關負責部門": "永續辦公室",
            "114_得分數值": 0,
            "ai_suggestion": STRUCTURED_AI,
        },
        {
            "編號": "E-2",
            "構面": "E",
            "狀態標記": "Modified_2026",
            "評鑑指標": "能源使用效率",
            "題型": "是非題",
            "前屆編號": "E-5",
            "114_相關負責部門": "財務處",
            "114_得分數值": 1,
            "114_自評來源及說明": "年報第 12 頁",
        },
        {
            "編號": "E-3",
            "構面": "E",
            "狀態標記": "Modified_2026",
            "評鑑指標": "水資源管理",
            "114_得分數值": 0,
            "114_年報有缺": "未揭露取水量",
            "ai_suggestion": {"parse_error": True, "raw_response": "xyz"},
        },
        {
            "編號": "S-1",
            "構面": "S",
            "狀態標記": "New_2026",
            "評鑑指標": "員工福利政策",
            "114_相關負責部門": "人資部",
            "114_得分數值": 0,
        },
        "not a record",
        {
            "編號": "S-2",
            "構面": "S",
            "狀態標記": "Modified_2026",
            "評鑑指標": "職業安全衛生",
            "114_相關負責部門": "永續辦公室",
            "114_自評得分": "符合且揭露完整",
        },
        {
            "編號": "S-3",
            "構面": "S",
            "狀態標記": "Modified_2026",
            "評鑑指標": "人權政策",
            "114_相關負責部門": "法務室",
            "ai_suggestion": {"核心要求": "訂定人權政策", "具體行動與揭露清單": "於官網公告"},
        },
        {
            "編號": "G-1",
            "構面": "G",
            "狀態標記": "New_2026",
            "評鑑指標": "董事會多元化",
            "114_相關負責部門": "董秘室",
        },
        {
            "編號": "G-2",
            "構面": "G",
            "狀態標記": "Modified_2026",
            "評鑑指標": "內部稽核",
            "ai_suggestion": {"error": "quota exceeded"},
        },
        {"編號": "", "評鑑指標": "blank id row"},
        {
            "編號": "G-3",
            "構面": "G",
            "評鑑指標": "資訊揭露",
            "114_相關負責部門": "財務處",
            "114_得分數值": 1,
        },
        {
            "編號": "E-4",
            "構面": "E",
            "狀態標記": "Modified_2026",
            "評鑑指標": "廢棄物管理",
            "114_相關負責部門": "董秘室",
        },
    ]


@pytest.fixture
def sample_entries() -> List[Any]:
    return _sample_entries()


@pytest.fixture
def sample_payload(sample_entries) -> str:
    return json.dumps(sample_entries, ensure_ascii=False)


@pytest.fixture
def dataset(sample_payload):
    records, dropped = parse_records(sample_payload)
    return make_dataset(records, source="sample.json", dropped=dropped)


@pytest.fixture
def data_files(tmp_path, sample_payload):
    """Primary and fallback JSON files; the primary only holds two indicators."""
    primary = tmp_path / "suggestions_output.json"
    fallback = tmp_path / "data.json"
    primary.write_text(
        json.dumps([{"編號": "E-1", "構面": "E"}, {"編號": "S-1", "構面": "S"}], ensure_ascii=False),
        encoding="utf-8",
    )
    fallback.write_text(sample_payload, encoding="utf-8")
    return primary, fallback


class RecordingRenderer:
    def __init__(self):
        self.payloads: List[Dict[str, Any]] = []

    def render(self, payload: Dict[str, Any]) -> None:
        self.payloads.append(payload)

    @property
    def last(self) -> Dict[str, Any]:
        return self.payloads[-1]

    def surfaces(self) -> List[str]:
        return [p["surface"] for p in self.payloads]


@pytest.fixture
def renderer():
    return RecordingRenderer()
