from __future__ import annotations

from typing import Any, Dict, List

import altair as alt
import pandas as pd

from indicators.grouping import DepartmentGroup

alt.data_transformers.disable_max_rows()

STATUS_COLORS = {"NEW": "#22c55e", "MOD": "#f59e0b"}


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def department_workload_chart(groups: List[DepartmentGroup]) -> Dict[str, Any]:
    """Stacked bar of indicators per department column, split New / Modified."""
    rows = [
        {"department": g.key, "status": "NEW" if r.is_new else "MOD", "count": 1}
        for g in groups
        for r in g.records
    ]
    df = pd.DataFrame(rows, columns=["department", "status", "count"])
    if not df.empty:
        df = df.groupby(["department", "status"], sort=False)["count"].sum().reset_index()
    order = [g.key for g in groups]
    chart = (
        alt.Chart(df)
        .mark_bar()
        .encode(
            y=alt.Y("department:N", title="負責部門", sort=order),
            x=alt.X("count:Q", title="指標數", axis=alt.Axis(format="d")),
            color=alt.Color(
                "status:N",
                title="狀態",
                scale=alt.Scale(domain=list(STATUS_COLORS), range=list(STATUS_COLORS.values())),
            ),
            tooltip=["department", "status", alt.Tooltip("count:Q", format=",")],
        )
        .properties(height=max(120, 28 * len(order)))
    )
    return to_vega_spec(chart)
