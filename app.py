import html
from typing import Any, Dict, Optional

import pandas as pd
import streamlit as st

from indicators import labels as L
from indicators.controller import DashboardController, ViewState
from indicators.data import DatasetLoadError, department_options, load_dashboard_data
from indicators.filters import IndicatorFilters
from indicators.views import KANBAN, TABLE, error_payload

ACCENT_COLORS = {
    "env": "#34d399",
    "soc": "#60a5fa",
    "gov": "#a78bfa",
    "blue": "#3b82f6",
    "orange": "#f97316",
    "muted": "#9ca3af",
    "cyan": "#06b6d4",
}
FACE_OPTIONS = {"": "全部構面", "E": "環境 (E)", "S": "社會 (S)", "G": "治理 (G)"}
STATUS_OPTIONS = {"": "全部狀態", L.STATUS_NEW: "新增", L.STATUS_MODIFIED: "修正"}
VIEW_LABELS = {KANBAN: "看板", TABLE: "表格"}


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .kanban-column-header {display: flex;justify-content: space-between;align-items: center;
                               font-weight: 600;padding: 6px 0;border-bottom: 1px solid #e5e7eb;margin-bottom: 8px;}
        .column-color-dot {display: inline-block;width: 10px;height: 10px;border-radius: 50%;margin-right: 6px;}
        .card {border: 1px solid #e5e7eb;border-radius: 10px;padding: 10px 12px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04);margin-bottom: 4px;}
        .card-header {display: flex;justify-content: space-between;align-items: center;margin-bottom: 4px;}
        .card-id {font-weight: 700;font-size: 0.85rem;}
        .card-id.env {color: #059669;} .card-id.soc {color: #2563eb;} .card-id.gov {color: #7c3aed;}
        .card-badge {font-size: 0.7rem;font-weight: 700;border-radius: 6px;padding: 1px 6px;}
        .card-badge.new {background: #dcfce7;color: #15803d;} .card-badge.modified {background: #fef3c7;color: #b45309;}
        .card-title {font-size: 0.9rem;color: #111827;margin-bottom: 6px;}
        .card-footer {display: flex;justify-content: space-between;font-size: 0.8rem;color: #6b7280;}
        .card-score.pass {color: #16a34a;} .card-score.fail {color: #dc2626;}
        .card-score.new {color: #15803d;} .card-score.na {color: #9ca3af;}
        .card-ai-badge {font-size: 0.75rem;color: #7c3aed;margin-top: 4px;}
        .stat-chip {background: #f3f4f6;border: 1px solid #e5e7eb;border-radius: 14px;padding: 4px 10px;
                    font-size: 0.85rem;color: #374151;margin-right: 6px;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


def _esc(text: Optional[str]) -> str:
    return html.escape(text or "")


def _open_record(record_id: str):
    st.session_state["selected_id"] = record_id


def _close_record():
    st.session_state["selected_id"] = None


def render_stats(stats: Dict[str, Any]):
    chips = [
        f"<span class='stat-chip'><b>{stats['total']}</b> 指標</span>",
        f"<span class='stat-chip'><b>{stats['new']}</b> 新增</span>",
        f"<span class='stat-chip'><b>{stats['modified']}</b> 修正</span>",
    ]
    if stats["show_ai"]:
        chips.append(f"<span class='stat-chip'><b>{stats['ai']}</b> AI建議</span>")
    st.markdown("".join(chips), unsafe_allow_html=True)


def card_html(card: Dict[str, Any]) -> str:
    ai_badge = "<div class='card-ai-badge'>&#x2728; AI 建議</div>" if card["has_ai"] else ""
    return f"""
        <div class="card">
          <div class="card-header">
            <span class="card-id {card['face_class']}">{_esc(card['id'])}</span>
            <span class="card-badge {card['status']['class']}">{card['status']['label']}</span>
          </div>
          <div class="card-title">{_esc(card['title'])}</div>
          <div class="card-footer">
            <span class="card-type">{_esc(card['question_type'])}</span>
            <span class="card-score {card['score']['class']}">{_esc(card['score']['label'])}</span>
          </div>
          {ai_badge}
        </div>
    """


class StreamlitRenderer:
    """Draws controller payloads with Streamlit widgets."""

    def __init__(self, detail_slot=None):
        self.detail_slot = detail_slot

    def render(self, payload: Dict[str, Any]) -> None:
        surface = payload.get("surface")
        handlers = {
            "error": self._render_error,
            "kanban": self._render_kanban,
            "table": self._render_table,
            "detail": self._render_detail,
            "detail_closed": lambda _payload: None,
        }
        handlers[surface](payload)

    def _render_error(self, payload: Dict[str, Any]):
        st.error(payload["message"])
        st.stop()

    def _render_kanban(self, payload: Dict[str, Any]):
        render_stats(payload["stats"])
        columns = payload["columns"]
        if not columns:
            st.info("沒有符合篩選條件的指標。")
            return
        if payload.get("chart"):
            with st.expander("各部門指標數", expanded=False):
                st.vega_lite_chart(payload["chart"], use_container_width=True)
        st_cols = st.columns(len(columns))
        for st_col, column in zip(st_cols, columns):
            with st_col:
                color = ACCENT_COLORS.get(column["accent"], ACCENT_COLORS["cyan"])
                st.markdown(
                    f"<div class='kanban-column-header'><span><span class='column-color-dot' style='background:{color}'></span>"
                    f"{_esc(column['key'])}</span><span>{column['count']}</span></div>",
                    unsafe_allow_html=True,
                )
                for pos, card in enumerate(column["cards"]):
                    st.markdown(card_html(card), unsafe_allow_html=True)
                    st.button("詳細", key=f"open-{column['key']}-{pos}-{card['id']}", on_click=_open_record, args=(card["id"],))

    def _render_table(self, payload: Dict[str, Any]):
        render_stats(payload["stats"])
        rows = payload["rows"]
        if not rows:
            st.info("沒有符合篩選條件的指標。")
            return
        display = pd.DataFrame(
            [
                {
                    "編號": r["id"],
                    "狀態": r["status"]["label"],
                    "構面": r["face_label"],
                    "評鑑指標": r["full_title"],
                    "題型": r["question_type"],
                    "114 得分": r["score"]["label"],
                    "負責部門": r["department"],
                    "AI": "✨" if r["has_ai"] else "",
                }
                for r in rows
            ]
        )
        event = st.dataframe(
            display,
            use_container_width=True,
            hide_index=True,
            on_select="rerun",
            selection_mode="single-row",
            key="indicator_table",
        )
        picked = event.selection.rows if event is not None else []
        picked_id = rows[picked[0]]["id"] if picked else None
        # Only a new row pick opens the detail, so closing it sticks.
        if picked_id != st.session_state.get("_table_pick"):
            st.session_state["_table_pick"] = picked_id
            if picked_id:
                _open_record(picked_id)

    def _render_detail(self, payload: Dict[str, Any]):
        record = payload["record"]
        slot = self.detail_slot if self.detail_slot is not None else st.container()
        with slot:
            with st.container(border=True):
                head, close = st.columns([9, 1])
                head.markdown(
                    f"<span class='card-badge {record['badge']['class']}'>{_esc(record['badge']['label'])}</span>",
                    unsafe_allow_html=True,
                )
                head.subheader(record["title"])
                close.button("✕", key="close-detail", on_click=_close_record, help="關閉")

                info_cols = st.columns(len(record["info"]))
                for col, item in zip(info_cols, record["info"]):
                    col.caption(item["label"])
                    col.markdown(f"**{item['value']}**")

                for section in record["sections"]:
                    st.markdown(f"**{section['title']}**")
                    st.text(section["content"])

                ai = record["ai"]
                st.markdown(f"**{ai['title']}**")
                if ai["kind"] == "structured":
                    for item in ai["items"]:
                        st.caption(item["label"])
                        if item["bullets"] is not None:
                            st.markdown("\n".join(f"- {b}" for b in item["bullets"]) or " ")
                        else:
                            st.write(item["content"])
                elif ai["kind"] == "raw":
                    st.code(ai["text"], language=None)
                else:
                    st.info(ai["text"])


# ---------- UI setup ----------
st.set_page_config(page_title="ESG 評鑑指標看板", layout="wide")
inject_base_styles()
st.title("ESG 評鑑指標看板")
st.caption("依負責部門分組的指標看板，含 AI 填答建議。")

renderer = StreamlitRenderer()
try:
    dataset = load_dashboard_data()
except DatasetLoadError as exc:
    renderer.render(error_payload(str(exc)))

st.session_state.setdefault("view", KANBAN)
st.session_state.setdefault("selected_id", None)

# ----- Sidebar: filters + view + export -----
with st.sidebar:
    st.markdown("### 篩選")
    face = st.selectbox("構面", options=list(FACE_OPTIONS), format_func=FACE_OPTIONS.get)
    status_tag = st.selectbox("狀態", options=list(STATUS_OPTIONS), format_func=STATUS_OPTIONS.get)
    department = st.selectbox("負責部門", options=[""] + department_options(dataset), format_func=lambda d: d or "全部部門")
    # text_input commits on enter; this page does not use the controller debounce path.
    search_text = st.text_input("搜尋 (編號、指標、說明、部門)", "")

    st.markdown("---")
    view = st.radio("檢視", options=[KANBAN, TABLE], format_func=VIEW_LABELS.get, horizontal=True, key="view")

filters = IndicatorFilters(face=face, status_tag=status_tag, department=department, search_text=search_text)

detail_slot = st.container()
renderer.detail_slot = detail_slot
controller = DashboardController(renderer, dataset, include_chart=True)
controller.state = ViewState(view=view, filters=filters)
controller.start()

if st.session_state.get("selected_id"):
    controller.select_record(st.session_state["selected_id"])

with st.sidebar:
    artifact = controller.export_csv()
    st.download_button("匯出 CSV", data=artifact.content, file_name=artifact.filename, mime="text/csv")
    st.caption(f"資料來源：{dataset.source}")
