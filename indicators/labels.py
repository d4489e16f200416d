from __future__ import annotations

from typing import Dict, List, Tuple

# Source JSON keys (column headers of the evaluation sheet).
KEY_ID = "編號"
KEY_FACE = "構面"
KEY_STATUS = "狀態標記"
KEY_TITLE = "評鑑指標"
KEY_DESCRIPTION = "指標說明"
KEY_EVIDENCE = "評鑑資訊依據"
KEY_QUESTION_TYPE = "題型"
KEY_PRIOR_ID = "前屆編號"
KEY_SCORE_NUMERIC = "114_得分數值"
KEY_SCORE_TEXT = "114_自評得分"
KEY_DEPARTMENT = "114_相關負責部門"
KEY_SELF_EVAL_NOTE = "114_自評來源及說明"
KEY_GAP_OFFICIAL_SITE = "114_公司官網有缺"
KEY_GAP_ANNUAL_REPORT = "114_年報有缺"
KEY_PRIOR_UNSCORED = "114_113年未得分"
KEY_CORRECTION_TYPE = "114_修正型態"
KEY_AI_SUGGESTION = "ai_suggestion"

STATUS_NEW = "New_2026"
STATUS_MODIFIED = "Modified_2026"

UNASSIGNED = "待分配"
NOT_AVAILABLE = "N/A"
NEW_MARK = "(新增)"

FACE_CLASSES: Dict[str, str] = {"E": "env", "S": "soc"}
FACE_CLASS_DEFAULT = "gov"

FACE_SHORT_LABELS: Dict[str, str] = {"E": "環境", "S": "社會", "G": "治理"}
FACE_LONG_LABELS: Dict[str, str] = {"E": "環境面 (E)", "S": "社會面 (S)"}
FACE_LONG_LABEL_DEFAULT = "公司治理面 (G)"

# Department keyword -> column accent. Order matters: the first keyword contained
# in the department name wins.
DEPARTMENT_ACCENTS: List[Tuple[str, str]] = [
    ("永續辦", "env"),
    ("董秘", "gov"),
    ("財務", "blue"),
    ("人資", "soc"),
    ("法務", "orange"),
    (UNASSIGNED, "muted"),
]
DEFAULT_ACCENT = "cyan"

# AI suggestion payload keys.
AI_ERROR = "error"
AI_PARSE_ERROR = "parse_error"
AI_RAW_RESPONSE = "raw_response"
AI_CORE_REQUIREMENT = ("核心要求白話文", "核心要求")
AI_DIAGNOSIS = ("差異分析或現況診斷", "差異分析")
AI_ACTIONS = "具體行動與揭露清單"
AI_REFERENCES = "官方參考與較佳案例"
AI_ASSIGNMENT = "分派建議"

EXPORT_COLUMNS: List[Tuple[str, str]] = [
    (KEY_ID, "id"),
    (KEY_STATUS, "status_tag"),
    (KEY_FACE, "face"),
    (KEY_TITLE, "title"),
    (KEY_QUESTION_TYPE, "question_type"),
    (KEY_SCORE_TEXT, "score_text"),
    (KEY_DEPARTMENT, "department"),
    (KEY_SELF_EVAL_NOTE, "self_eval_note"),
]
EXPORT_FILENAME = "esg_indicators_export.csv"
