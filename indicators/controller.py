"""Dashboard state machine.

State is ``view`` (kanban | table) x ``modal`` (closed | open(record)) plus the
active filters. Every event maps the state to a new ``ViewState`` and hands one
payload to the renderer; the pipeline itself lives in pure functions
(``filter_records`` -> ``group_by_department`` -> projections).
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional, Protocol, Union

from indicators.data import Dataset, DatasetLoadError, load_dataset
from indicators.events import SEARCH_DEBOUNCE_SECONDS, Debouncer
from indicators.export import ExportArtifact, export_csv
from indicators.filters import IndicatorFilters, filter_records
from indicators.records import IndicatorRecord
from indicators.views import KANBAN, VIEWS, compute_detail, compute_kanban, compute_table, error_payload


logger = logging.getLogger(__name__)


class Renderer(Protocol):
    def render(self, payload: Dict[str, Any]) -> None:
        ...


@dataclass(frozen=True)
class ViewState:
    view: str = KANBAN
    filters: IndicatorFilters = field(default_factory=IndicatorFilters)
    modal: Optional[IndicatorRecord] = None

    @property
    def modal_open(self) -> bool:
        return self.modal is not None


class DashboardController:
    def __init__(
        self,
        renderer: Renderer,
        dataset: Optional[Dataset] = None,
        *,
        loader: Callable[[], Dataset] = load_dataset,
        debounce: bool = False,
        debounce_seconds: float = SEARCH_DEBOUNCE_SECONDS,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        include_chart: bool = False,
    ):
        self.renderer = renderer
        self.dataset = dataset
        self.state = ViewState()
        self.filtered: List[IndicatorRecord] = []
        self.load_error: Optional[str] = None
        self.include_chart = include_chart
        self._loader = loader
        self._debouncer = Debouncer(self._apply_search, debounce_seconds, loop=loop) if debounce else None

    @property
    def ready(self) -> bool:
        return self.dataset is not None and self.load_error is None

    def start(self) -> None:
        if self.dataset is None:
            try:
                self.dataset = self._loader()
            except DatasetLoadError as exc:
                logger.error("Dataset load failed: %s", exc)
                self.load_error = str(exc)
                self.renderer.render(error_payload(self.load_error))
                return
        self._render_view()

    def update_filters(self, **changes: Optional[str]) -> None:
        cleaned = {k: "" if v is None else str(v) for k, v in changes.items()}
        self.state = replace(self.state, filters=replace(self.state.filters, **cleaned))
        if self.ready:
            self._render_view()

    def search_input(self, text: str) -> None:
        if self._debouncer is None:
            self._apply_search(text)
        else:
            self._debouncer.trigger(text)

    def _apply_search(self, text: str) -> None:
        self.update_filters(search_text=text)

    def switch_view(self, view: str) -> None:
        if view not in VIEWS:
            raise ValueError(f"Unknown view {view!r}; expected one of {VIEWS}")
        self.state = replace(self.state, view=view)
        if self.ready:
            self._render_view()

    def select_record(self, record: Union[str, IndicatorRecord]) -> Optional[IndicatorRecord]:
        if isinstance(record, str):
            found = self.dataset.get(record) if self.ready else None
            if found is None:
                logger.warning("No indicator with id %s", record)
                return None
            record = found
        self.state = replace(self.state, modal=record)
        self.renderer.render(compute_detail(record))
        return record

    def close_detail(self) -> None:
        self.state = replace(self.state, modal=None)
        self.renderer.render({"surface": "detail_closed"})

    def export_csv(self) -> ExportArtifact:
        records = filter_records(self.dataset, self.state.filters) if self.ready else []
        return export_csv(records)

    def _render_view(self) -> None:
        self.filtered = filter_records(self.dataset, self.state.filters)
        if self.state.view == KANBAN:
            payload = compute_kanban(
                self.state.filters, self.dataset, records=self.filtered, include_chart=self.include_chart
            )
        else:
            payload = compute_table(self.state.filters, self.dataset, records=self.filtered)
        self.renderer.render(payload)
