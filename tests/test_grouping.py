"""Tests for department grouping, column ordering and accents."""

import pytest

from indicators.filters import filter_records
from indicators.grouping import accent_for, collation_key, group_by_department
from indicators.records import IndicatorRecord


def keys(groups):
    return [g.key for g in groups]


def test_groups_cover_every_record_exactly_once(dataset):
    groups = group_by_department(dataset.records)
    assert sum(g.count for g in groups) == len(dataset.records)
    flattened = [r.id for g in groups for r in g.records]
    assert sorted(flattened) == sorted(r.id for r in dataset.records)


def test_column_order_with_unassigned_last(dataset):
    assert keys(group_by_department(dataset.records)) == ["人資部", "永續辦公室", "法務室", "財務處", "董秘室", "待分配"]


def test_members_keep_filtered_order(dataset):
    groups = {g.key: g for g in group_by_department(dataset.records)}
    assert [r.id for r in groups["董秘室"].records] == ["G-1", "E-4"]
    assert [r.id for r in groups["待分配"].records] == ["E-3", "G-2"]


@pytest.mark.parametrize(
    "departments",
    [
        [None],
        [None, "Zeta"],
        ["Alpha", None, "Beta"],
        ["需要", "一般", None, "待辦", "ａｂｃ"],
        ["待分配X", None, "待"],
    ],
)
def test_unassigned_always_last(departments):
    records = [IndicatorRecord(id=f"G-{i}", department=d) for i, d in enumerate(departments)]
    result = keys(group_by_department(records))
    assert result[-1] == "待分配"
    assert result.count("待分配") == 1


def test_no_unassigned_group_when_all_assigned(dataset):
    records = filter_records(dataset, {"department": "財務處"})
    assert keys(group_by_department(records)) == ["財務處"]


def test_empty_input():
    assert group_by_department([]) == []


def test_columns_follow_stroke_order_not_code_points():
    records = [IndicatorRecord(id="G-1", department="董秘室"), IndicatorRecord(id="E-2", department="財務處")]
    assert keys(group_by_department(records)) == ["財務處", "董秘室"]


def test_collation_stroke_order():
    labels = ["董秘室", "人資部", "財務處", "永續辦公室", "法務室"]
    assert sorted(labels, key=collation_key) == ["人資部", "永續辦公室", "法務室", "財務處", "董秘室"]


def test_collation_latin_labels():
    assert sorted(["beta", "Alpha", "ＣＡＴ"], key=collation_key) == ["Alpha", "beta", "ＣＡＴ"]


class TestAccents:
    def test_keyword_matches(self):
        assert accent_for("永續辦公室") == "env"
        assert accent_for("董秘室") == "gov"
        assert accent_for("財務處") == "blue"
        assert accent_for("人資部") == "soc"
        assert accent_for("法務室") == "orange"
        assert accent_for("待分配") == "muted"

    def test_first_keyword_wins(self):
        assert accent_for("財務及法務處") == "blue"
        assert accent_for("法務與人資") == "soc"

    def test_default_accent(self):
        assert accent_for("資訊部") == "cyan"

    def test_groups_carry_accent(self, dataset):
        accents = {g.key: g.accent for g in group_by_department(dataset.records)}
        assert accents["永續辦公室"] == "env"
        assert accents["待分配"] == "muted"
