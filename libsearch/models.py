from __future__ import annotations

from typing import Dict, Iterable, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class Record(BaseModel):
    """One data row of a dataset, keyed by normalized header name."""

    model_config = ConfigDict(frozen=True)

    id: str
    fields: Dict[str, str] = Field(default_factory=dict)

    def get(self, key: str) -> Optional[str]:
        return self.fields.get(key)

    def project(self, keys: Iterable[str]) -> "Record":
        return Record(id=self.id, fields={k: self.fields.get(k, "") for k in keys})


class Page(BaseModel):
    items: List[Record] = Field(default_factory=list)
    page: int = Field(default=1, examples=[1])
    total_pages: int = Field(default=1, examples=[1])
    total_results: int = 0
    page_size: int = 10


class FieldOptionOut(BaseModel):
    value: str
    label: str


class DatasetInfo(BaseModel):
    key: str
    path: str
    loan_days: Optional[int] = None
    loaded: bool = False


class DatasetSummary(BaseModel):
    key: str
    total_records: int
    loan_days: Optional[int] = None


class SearchResponse(BaseModel):
    dataset: str
    field: str
    query: str
    total_records: int
    results: Page


class RecordsResponse(BaseModel):
    total_records: int
    records: List[Record] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    detail: str


class HealthResponse(BaseModel):
    ok: bool = True
