from __future__ import annotations

import logging
from functools import lru_cache
from typing import List

from fastapi import Depends, FastAPI, File, HTTPException, Query, UploadFile

from .config import Settings, load_settings
from .csvtext import normalize_header
from .datasets import DatasetCache, fetcher_for, load_records
from .errors import LoadFailure, ValidationFailure
from .models import (
    DatasetInfo,
    DatasetSummary,
    ErrorResponse,
    FieldOptionOut,
    HealthResponse,
    RecordsResponse,
    SearchResponse,
)
from .search import SearchPolicy, filter_records, paginate, validate_query

logger = logging.getLogger(__name__)

_LOAD_ERRORS = {
    404: {"model": ErrorResponse, "description": "No data file is configured for the dataset"},
    502: {"model": ErrorResponse, "description": "The dataset could not be fetched"},
}
_INVALID = {422: {"model": ErrorResponse, "description": "The request was rejected"}}

app = FastAPI(
    title="library-search",
    description="Field search over library catalogue CSV exports",
    version="0.1.0",
)


@lru_cache
def get_settings() -> Settings:
    return load_settings()


@lru_cache
def get_catalog() -> DatasetCache:
    settings = get_settings()
    return DatasetCache(settings, fetcher_for(settings))


async def _records_for(catalog: DatasetCache, key: str):
    if key not in catalog.settings.datasets:
        raise HTTPException(status_code=404, detail=f"No data file is configured for dataset '{key}'.")
    try:
        return await catalog.get_or_load(key)
    except LoadFailure as e:
        raise HTTPException(status_code=502, detail=e.message)


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.get("/fields", response_model=List[FieldOptionOut])
def fields(settings: Settings = Depends(get_settings)):
    return [f.model_dump() for f in settings.fields]


@app.get("/datasets", response_model=List[DatasetInfo])
def datasets(catalog: DatasetCache = Depends(get_catalog)):
    return [
        DatasetInfo(key=key, path=cfg.path, loan_days=cfg.loan_days, loaded=catalog.is_loaded(key))
        for key, cfg in catalog.settings.datasets.items()
    ]


@app.get("/datasets/{key}", response_model=DatasetSummary, responses=_LOAD_ERRORS)
async def dataset_summary(key: str, catalog: DatasetCache = Depends(get_catalog)):
    records = await _records_for(catalog, key)
    return DatasetSummary(
        key=key,
        total_records=len(records),
        loan_days=catalog.settings.datasets[key].loan_days,
    )


@app.get(
    "/datasets/{key}/search",
    response_model=SearchResponse,
    responses={**_LOAD_ERRORS, **_INVALID},
)
async def search(
    key: str,
    field: str,
    q: str = "",
    page: int = Query(default=1),
    catalog: DatasetCache = Depends(get_catalog),
):
    settings = catalog.settings
    policy = SearchPolicy.for_mode(settings.match_mode)

    field_key = normalize_header(field)
    columns = [normalize_header(v) for v in settings.field_values()]
    try:
        if field_key not in columns:
            raise ValidationFailure(f"'{field}' is not a searchable field.")
        query = validate_query(q, policy.min_length)
    except ValidationFailure as e:
        raise HTTPException(status_code=422, detail=e.message)

    records = await _records_for(catalog, key)
    matched = filter_records(records, field_key, query, policy.whitespace_insensitive)
    result = paginate(matched, page, settings.page_size)
    result = result.model_copy(update={"items": [r.project(columns) for r in result.items]})

    logger.debug("search %s[%s] %r: %d results", key, field_key, query, result.total_results)
    return SearchResponse(
        dataset=key,
        field=field_key,
        query=query,
        total_records=len(records),
        results=result,
    )


@app.post("/records", response_model=RecordsResponse, responses=_INVALID)
async def parse_records(file: UploadFile = File(...)):
    if not (file.filename or "").lower().endswith(".csv"):
        raise HTTPException(status_code=422, detail="Only CSV files are supported")

    raw = await file.read()
    records = load_records(raw)
    return RecordsResponse(total_records=len(records), records=records)
