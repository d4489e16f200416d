from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from api.schemas import IndicatorFiltersModel, MetaListResponse
from indicators.data import DatasetLoadError, department_options, load_dashboard_data
from indicators.export import export_csv
from indicators.filters import IndicatorFilters, filter_records, normalize_filters
from indicators.stats import compute_stats
from indicators.views import compute_detail, compute_kanban, compute_meta, compute_table


app = FastAPI(title="ESG Indicator Dashboard API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _filters_from_model(model: IndicatorFiltersModel) -> IndicatorFilters:
    return normalize_filters(model.model_dump())


def _json(data: object) -> JSONResponse:
    return JSONResponse(content=jsonable_encoder(data))


def _error(exc: Exception, status_code: int = 500) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": str(exc), "type": type(exc).__name__})


@app.exception_handler(DatasetLoadError)
async def dataset_load_failed(request: Request, exc: DatasetLoadError):
    logger.error("Dataset load failed: %s", exc)
    return _error(exc, status_code=503)


@app.get("/meta")
def meta():
    data_ctx = load_dashboard_data()
    try:
        return _json(compute_meta(data_ctx))
    except Exception as exc:
        logger.exception("meta failed")
        return _error(exc)


@app.get("/meta/departments", response_model=MetaListResponse)
def meta_departments():
    data_ctx = load_dashboard_data()
    return _json({"values": department_options(data_ctx)})


@app.post("/stats")
def stats(filters: IndicatorFiltersModel):
    data_ctx = load_dashboard_data()
    try:
        f = _filters_from_model(filters)
        return _json(compute_stats(filter_records(data_ctx, f)))
    except Exception as exc:
        logger.exception("stats failed")
        return _error(exc)


@app.post("/kanban")
def kanban(filters: IndicatorFiltersModel, chart: bool = False):
    data_ctx = load_dashboard_data()
    try:
        f = _filters_from_model(filters)
        return _json(compute_kanban(f, data_ctx, include_chart=chart))
    except Exception as exc:
        logger.exception("kanban failed")
        return _error(exc)


@app.post("/table")
def table(filters: IndicatorFiltersModel):
    data_ctx = load_dashboard_data()
    try:
        f = _filters_from_model(filters)
        return _json(compute_table(f, data_ctx))
    except Exception as exc:
        logger.exception("table failed")
        return _error(exc)


@app.get("/indicators/{indicator_id}")
def indicator_detail(indicator_id: str):
    data_ctx = load_dashboard_data()
    record = data_ctx.get(indicator_id)
    if record is None:
        return JSONResponse(status_code=404, content={"error": f"Unknown indicator {indicator_id}", "type": "NotFound"})
    try:
        return _json(compute_detail(record))
    except Exception as exc:
        logger.exception("indicator_detail failed")
        return _error(exc)


@app.post("/export")
def export(filters: IndicatorFiltersModel):
    data_ctx = load_dashboard_data()
    f = _filters_from_model(filters)
    artifact = export_csv(filter_records(data_ctx, f))
    return Response(
        content=artifact.content,
        media_type=artifact.media_type,
        headers={"Content-Disposition": f"attachment; filename={artifact.filename}"},
    )
