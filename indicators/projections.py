"""Record -> presentation payload mappings.

Every function here is total over ``IndicatorRecord``: absent fields map to a
fixed placeholder and nothing raises. Payloads are plain dicts of strings,
booleans and lists so any surface (JSON API, Streamlit) can draw them.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from indicators import labels as L
from indicators.records import IndicatorRecord, RawSuggestion, StructuredSuggestion

TITLE_LIMIT = 100
SCORE_TEXT_LIMIT = 6

SCORE_PASS = "pass"
SCORE_FAIL = "fail"
SCORE_TEXT = "text"
SCORE_NONE = "none"

AI_TITLE = "✨ AI 填答建議 (Gemini)"
AI_PLACEHOLDER_TITLE = "✨ AI 填答建議"
AI_PLACEHOLDER_TEXT = "尚未生成 AI 建議。請執行 generate_suggestions.py 後重新載入。"


def single_line(text: Optional[str]) -> str:
    return (text or "").replace("\n", " ")


def face_class(face: Optional[str]) -> str:
    return L.FACE_CLASSES.get(face or "", L.FACE_CLASS_DEFAULT)


def face_short_label(face: Optional[str]) -> str:
    return L.FACE_SHORT_LABELS.get(face or "", face or "")


def face_long_label(face: Optional[str]) -> str:
    return L.FACE_LONG_LABELS.get(face or "", L.FACE_LONG_LABEL_DEFAULT)


def classify_score(record: IndicatorRecord) -> str:
    """Numeric score wins over the free-text score."""
    if record.score_numeric == 1:
        return SCORE_PASS
    if record.score_numeric == 0:
        return SCORE_FAIL
    if record.score_text:
        return SCORE_TEXT
    return SCORE_NONE


def status_badge(record: IndicatorRecord) -> Dict[str, str]:
    # Anything that is not New renders as a modification.
    if record.is_new:
        return {"label": "NEW", "class": "new"}
    return {"label": "MOD", "class": "modified"}


def score_badge(record: IndicatorRecord) -> Dict[str, str]:
    if record.is_new:
        return {"label": L.NEW_MARK, "class": "new"}
    kind = classify_score(record)
    if kind == SCORE_PASS:
        return {"label": "1分", "class": "pass"}
    if kind == SCORE_FAIL:
        return {"label": "0分", "class": "fail"}
    if kind == SCORE_TEXT:
        return {"label": (record.score_text or "")[:SCORE_TEXT_LIMIT], "class": "pass"}
    return {"label": "--", "class": "na"}


def summarize(record: IndicatorRecord) -> Dict[str, Any]:
    """Compact payload shared by board cards and table rows."""
    full_title = single_line(record.title)
    return {
        "id": record.id,
        "face": record.face or "",
        "face_class": face_class(record.face),
        "face_label": face_short_label(record.face),
        "status": status_badge(record),
        "title": full_title[:TITLE_LIMIT],
        "full_title": full_title,
        "question_type": record.question_type or "",
        "score": score_badge(record),
        "department": record.group_key,
        "department_assigned": bool(record.department),
        "has_ai": record.has_ai,
    }


def _detail_score(record: IndicatorRecord) -> Dict[str, str]:
    if record.is_new:
        return {"label": "(新增題)", "class": "new"}
    kind = classify_score(record)
    if kind == SCORE_PASS:
        return {"label": "✓ 得分", "class": "pass"}
    if kind == SCORE_FAIL:
        return {"label": "✗ 未得分", "class": "fail"}
    return {"label": record.score_text or L.NOT_AVAILABLE, "class": "pass"}


def _gap_lines(record: IndicatorRecord) -> List[str]:
    pairs = [
        ("官網", record.gap_official_site),
        ("年報", record.gap_annual_report),
        ("113年", record.prior_unscored_note),
        ("修正型態", record.correction_type),
    ]
    return [f"{label}: {value}" for label, value in pairs if value]


def _ai_item(label: str, content: Optional[str]) -> Dict[str, Any]:
    return {"label": label, "content": content or L.NOT_AVAILABLE, "bullets": None}


def ai_section(record: IndicatorRecord) -> Dict[str, Any]:
    ai = record.ai_suggestion
    if isinstance(ai, StructuredSuggestion):
        if isinstance(ai.actions, tuple):
            actions = {"label": "具體行動與揭露清單", "content": None, "bullets": list(ai.actions)}
        else:
            actions = _ai_item("具體行動與揭露清單", ai.actions)
        return {
            "kind": "structured",
            "title": AI_TITLE,
            "items": [
                _ai_item("指標核心要求白話文", ai.core_requirement),
                _ai_item("差異分析 / 現況診斷", ai.diagnosis),
                actions,
                _ai_item("📚 官方參考與較佳案例", ai.references),
                _ai_item("分派建議", ai.assignment),
            ],
        }
    if isinstance(ai, RawSuggestion):
        return {"kind": "raw", "title": AI_TITLE, "text": ai.text, "preformatted": True}
    return {"kind": "placeholder", "title": AI_PLACEHOLDER_TITLE, "text": AI_PLACEHOLDER_TEXT}


def detail(record: IndicatorRecord) -> Dict[str, Any]:
    """Full payload for the single-record overlay."""
    badge = (
        {"label": "NEW 2026 新增指標", "class": "new"}
        if record.is_new
        else {"label": "MOD 2026 修正指標", "class": "modified"}
    )
    score = _detail_score(record)
    info = [
        {"label": "構面", "value": face_long_label(record.face)},
        {"label": "題型", "value": record.question_type or L.NOT_AVAILABLE},
        {"label": "前屆編號", "value": record.prior_id or L.NEW_MARK},
        {"label": "114 年得分", "value": score["label"], "class": score["class"]},
        {"label": "負責部門", "value": record.group_key},
    ]

    sections = [
        {"key": "description", "title": "📋 115年 指標說明", "content": record.description or L.NOT_AVAILABLE},
        {"key": "evidence", "title": "📎 評鑑資訊依據", "content": record.evidence_basis or L.NOT_AVAILABLE},
    ]
    if not record.is_new:
        if record.self_eval_note:
            sections.append({"key": "self_eval", "title": "📝 114年 自評來源及說明", "content": record.self_eval_note})
        gaps = _gap_lines(record)
        if gaps:
            sections.append({"key": "gaps", "title": "⚠️ 缺失與修正", "content": "\n".join(gaps)})

    return {
        "id": record.id,
        "badge": badge,
        "title": f"{record.id} — {single_line(record.title)}",
        "info": info,
        "sections": sections,
        "ai": ai_section(record),
    }


def _cell(value: Optional[str]) -> str:
    return (value or "").replace("\n", " ")


def csv_row(record: IndicatorRecord) -> List[str]:
    """Export cells in ``EXPORT_COLUMNS`` order."""
    return [_cell(getattr(record, attr)) for _, attr in L.EXPORT_COLUMNS]
