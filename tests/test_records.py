"""Tests for the record model: id pattern, score normalization, AI payload shapes."""

import pytest

from indicators.projections import ai_section
from indicators.records import (
    RawSuggestion,
    StructuredSuggestion,
    is_indicator_id,
    record_from_mapping,
    resolve_ai_suggestion,
)


class TestIndicatorId:
    @pytest.mark.parametrize("value", ["E-1", "S-12", "G-300"])
    def test_valid_codes(self, value):
        assert is_indicator_id(value)

    @pytest.mark.parametrize("value", ["", "X-1", "E1", "E-", "e-1", "一、環境面", None, 5, "E-1a"])
    def test_invalid_codes(self, value):
        assert not is_indicator_id(value)


class TestResolveAiSuggestion:
    def test_absent(self):
        assert resolve_ai_suggestion(None) is None
        assert resolve_ai_suggestion("") is None

    def test_empty_mapping_is_structured(self):
        assert resolve_ai_suggestion({}) == StructuredSuggestion()
        record = record_from_mapping({"編號": "E-1", "ai_suggestion": {}})
        assert record.has_ai
        section = ai_section(record)
        assert section["kind"] == "structured"
        assert [item["content"] for item in section["items"]] == ["N/A"] * 5

    def test_structured_uses_primary_keys(self):
        ai = resolve_ai_suggestion({"核心要求白話文": "A", "差異分析或現況診斷": "B", "分派建議": "C"})
        assert isinstance(ai, StructuredSuggestion)
        assert ai.core_requirement == "A"
        assert ai.diagnosis == "B"
        assert ai.assignment == "C"
        assert ai.references is None

    def test_structured_falls_back_to_alternate_keys(self):
        ai = resolve_ai_suggestion({"核心要求": "core", "差異分析": "gap"})
        assert ai.core_requirement == "core"
        assert ai.diagnosis == "gap"

    def test_action_list_becomes_tuple(self):
        ai = resolve_ai_suggestion({"具體行動與揭露清單": ["a", "b"]})
        assert ai.actions == ("a", "b")

    def test_parse_error_with_raw_text(self):
        ai = resolve_ai_suggestion({"parse_error": True, "raw_response": "xyz"})
        assert ai == RawSuggestion(text="xyz")

    def test_parse_error_without_raw_text_dumps_payload(self):
        ai = resolve_ai_suggestion({"parse_error": True, "detail": "bad json"})
        assert isinstance(ai, RawSuggestion)
        assert '"parse_error": true' in ai.text
        assert '"detail": "bad json"' in ai.text

    def test_error_with_raw_response_is_raw(self):
        ai = resolve_ai_suggestion({"error": "timeout", "raw_response": "partial"})
        assert ai == RawSuggestion(text="partial")

    def test_error_only_counts_as_absent(self):
        assert resolve_ai_suggestion({"error": "quota exceeded"}) is None

    def test_non_mapping_is_raw(self):
        assert resolve_ai_suggestion("free text answer") == RawSuggestion(text="free text answer")
        assert isinstance(resolve_ai_suggestion(["a"]), RawSuggestion)


class TestRecordFromMapping:
    def test_maps_source_keys(self):
        record = record_from_mapping(
            {"編號": "E-1", "構面": "E", "狀態標記": "New_2026", "114_相關負責部門": "財務處", "114_得分數值": 1}
        )
        assert record.id == "E-1"
        assert record.face == "E"
        assert record.is_new
        assert record.department == "財務處"
        assert record.score_numeric == 1

    def test_empty_strings_are_absent(self):
        record = record_from_mapping({"編號": "E-1", "114_相關負責部門": "", "評鑑指標": ""})
        assert record.department is None
        assert record.title is None
        assert record.group_key == "待分配"

    @pytest.mark.parametrize("value", [True, False, 2, -1, 0.5, "1", None])
    def test_out_of_range_scores_are_dropped(self, value):
        assert record_from_mapping({"編號": "E-1", "114_得分數值": value}).score_numeric is None

    def test_float_scores_normalize(self):
        assert record_from_mapping({"編號": "E-1", "114_得分數值": 1.0}).score_numeric == 1
        assert record_from_mapping({"編號": "E-1", "114_得分數值": 0.0}).score_numeric == 0

    def test_has_ai_only_for_structured(self):
        structured = record_from_mapping({"編號": "E-1", "ai_suggestion": {"分派建議": "x"}})
        raw = record_from_mapping({"編號": "E-2", "ai_suggestion": {"parse_error": True}})
        absent = record_from_mapping({"編號": "E-3"})
        assert structured.has_ai
        assert not raw.has_ai
        assert not absent.has_ai
