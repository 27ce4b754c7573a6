"""
Deployment configuration.

Settings come from a JSON file (argument or LIBSEARCH_CONFIG), with
LIBSEARCH_SOURCE / LIBSEARCH_MATCH_MODE overriding single values.
Invalid settings fail at startup with pydantic's ValidationError.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from .rules import PAGE_SIZE


class FieldOption(BaseModel):
    value: str
    label: str


class DatasetConfig(BaseModel):
    path: str
    # Loan period shown next to the dataset; search never reads it
    loan_days: Optional[int] = Field(default=None, ge=0)


def _default_fields() -> List[FieldOption]:
    return [
        FieldOption(value="서명", label="서명"),
        FieldOption(value="저자", label="작가명(저자)"),
        FieldOption(value="출판사", label="출판사"),
    ]


def _default_datasets() -> Dict[str, DatasetConfig]:
    return {"books": DatasetConfig(path="books.csv")}


class Settings(BaseModel):
    source: str = "data"
    page_size: int = Field(default=PAGE_SIZE, ge=1)
    match_mode: Literal["strict", "lenient"] = "strict"
    fields: List[FieldOption] = Field(default_factory=_default_fields)
    datasets: Dict[str, DatasetConfig] = Field(default_factory=_default_datasets)

    @field_validator("fields")
    @classmethod
    def _fields_not_empty(cls, v: List[FieldOption]) -> List[FieldOption]:
        if not v:
            raise ValueError("at least one searchable field is required")
        return v

    @property
    def is_remote(self) -> bool:
        return self.source.startswith(("http://", "https://"))

    def field_values(self) -> List[str]:
        return [f.value for f in self.fields]


def load_settings(path: Optional[str] = None) -> Settings:
    path = path or os.environ.get("LIBSEARCH_CONFIG")
    if path:
        settings = Settings.model_validate_json(Path(path).read_text(encoding="utf-8"))
    else:
        settings = Settings()

    overrides = {}
    if os.environ.get("LIBSEARCH_SOURCE"):
        overrides["source"] = os.environ["LIBSEARCH_SOURCE"]
    if os.environ.get("LIBSEARCH_MATCH_MODE"):
        overrides["match_mode"] = os.environ["LIBSEARCH_MATCH_MODE"]
    if overrides:
        settings = Settings.model_validate({**settings.model_dump(), **overrides})

    return settings
