from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple, Union

from indicators import labels as L

INDICATOR_ID_PATTERN = re.compile(r"^[ESG]-\d+$")


@dataclass(frozen=True)
class StructuredSuggestion:
    """Well-formed AI output: the five answer fields, each possibly absent."""

    core_requirement: Optional[str] = None
    diagnosis: Optional[str] = None
    actions: Union[Tuple[str, ...], str, None] = None
    references: Optional[str] = None
    assignment: Optional[str] = None


@dataclass(frozen=True)
class RawSuggestion:
    """AI output that could not be parsed; shown verbatim."""

    text: str


AiSuggestion = Union[StructuredSuggestion, RawSuggestion, None]


def _text(value: object) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value or None
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def _first_text(data: Mapping[str, Any], keys: Tuple[str, ...]) -> Optional[str]:
    for key in keys:
        value = _text(data.get(key))
        if value is not None:
            return value
    return None


def resolve_ai_suggestion(value: object) -> AiSuggestion:
    """Classify an upstream AI payload once, at load time.

    Mappings without an error or parse-error marker are structured. A
    raw-response or parse-error marker yields the raw text (or the whole
    payload as JSON when there is no raw text). An empty mapping is still
    structured. Anything else, including an error-only mapping, counts as no
    suggestion.
    """
    if value is None or value == "":
        return None
    if not isinstance(value, Mapping):
        if isinstance(value, str):
            return RawSuggestion(text=value)
        return RawSuggestion(text=json.dumps(value, ensure_ascii=False, indent=2, default=str))

    if not value.get(L.AI_ERROR) and not value.get(L.AI_PARSE_ERROR):
        actions = value.get(L.AI_ACTIONS)
        if isinstance(actions, (list, tuple)):
            actions = tuple("" if a is None else str(a) for a in actions)
        else:
            actions = _text(actions)
        return StructuredSuggestion(
            core_requirement=_first_text(value, L.AI_CORE_REQUIREMENT),
            diagnosis=_first_text(value, L.AI_DIAGNOSIS),
            actions=actions,
            references=_text(value.get(L.AI_REFERENCES)),
            assignment=_text(value.get(L.AI_ASSIGNMENT)),
        )

    raw = value.get(L.AI_RAW_RESPONSE)
    if raw or value.get(L.AI_PARSE_ERROR):
        text = _text(raw) or json.dumps(dict(value), ensure_ascii=False, indent=2, default=str)
        return RawSuggestion(text=text)
    return None


def _score_numeric(value: object) -> Optional[int]:
    # Booleans are ints in Python; a JSON true is not a score.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if value == 1:
        return 1
    if value == 0:
        return 0
    return None


@dataclass(frozen=True)
class IndicatorRecord:
    id: str
    face: Optional[str] = None
    status_tag: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    evidence_basis: Optional[str] = None
    question_type: Optional[str] = None
    prior_id: Optional[str] = None
    score_numeric: Optional[int] = None
    score_text: Optional[str] = None
    department: Optional[str] = None
    self_eval_note: Optional[str] = None
    gap_official_site: Optional[str] = None
    gap_annual_report: Optional[str] = None
    prior_unscored_note: Optional[str] = None
    correction_type: Optional[str] = None
    ai_suggestion: AiSuggestion = None

    @property
    def is_new(self) -> bool:
        return self.status_tag == L.STATUS_NEW

    @property
    def is_modified(self) -> bool:
        return self.status_tag == L.STATUS_MODIFIED

    @property
    def has_ai(self) -> bool:
        return isinstance(self.ai_suggestion, StructuredSuggestion)

    @property
    def group_key(self) -> str:
        return self.department or L.UNASSIGNED


def is_indicator_id(value: object) -> bool:
    return isinstance(value, str) and bool(INDICATOR_ID_PATTERN.match(value))


def record_from_mapping(data: Mapping[str, Any]) -> IndicatorRecord:
    return IndicatorRecord(
        id=str(data[L.KEY_ID]),
        face=_text(data.get(L.KEY_FACE)),
        status_tag=_text(data.get(L.KEY_STATUS)),
        title=_text(data.get(L.KEY_TITLE)),
        description=_text(data.get(L.KEY_DESCRIPTION)),
        evidence_basis=_text(data.get(L.KEY_EVIDENCE)),
        question_type=_text(data.get(L.KEY_QUESTION_TYPE)),
        prior_id=_text(data.get(L.KEY_PRIOR_ID)),
        score_numeric=_score_numeric(data.get(L.KEY_SCORE_NUMERIC)),
        score_text=_text(data.get(L.KEY_SCORE_TEXT)),
        department=_text(data.get(L.KEY_DEPARTMENT)),
        self_eval_note=_text(data.get(L.KEY_SELF_EVAL_NOTE)),
        gap_official_site=_text(data.get(L.KEY_GAP_OFFICIAL_SITE)),
        gap_annual_report=_text(data.get(L.KEY_GAP_ANNUAL_REPORT)),
        prior_unscored_note=_text(data.get(L.KEY_PRIOR_UNSCORED)),
        correction_type=_text(data.get(L.KEY_CORRECTION_TYPE)),
        ai_suggestion=resolve_ai_suggestion(data.get(L.KEY_AI_SUGGESTION)),
    )
