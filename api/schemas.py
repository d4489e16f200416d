from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel


class IndicatorFiltersModel(BaseModel):
    face: Optional[str] = ""
    status_tag: Optional[str] = ""
    department: Optional[str] = ""
    search_text: Optional[str] = ""


class MetaListResponse(BaseModel):
    values: List[str]
