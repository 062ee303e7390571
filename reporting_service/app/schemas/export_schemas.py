from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from ..enum.report_enum import FundName, OperatorCode, ReportType
from shared.core.schemas import Lookup
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel


class ExportRequest(EmptyStringModel):
    report_type: ReportType = ReportType.BOTH
    reference_ids: List[str] = []
    columns: Optional[List[str]] = None        # rent roll only
    fund_name: Optional[FundName] = None
    operator_code: Optional[OperatorCode] = None
    salesperson_id: Optional[int] = Field(default=None, gt=0)

    @field_validator("reference_ids", mode="before")
    @classmethod
    def clean_reference_ids(cls, v):
        if v is None:
            return []
        if not isinstance(v, list):
            return v
        cleaned = []
        for ref in v:
            # blanks were already turned into None
            if ref is None or ref in cleaned:
                continue
            cleaned.append(ref)
        return cleaned

    @field_validator("columns", mode="before")
    @classmethod
    def drop_blank_columns(cls, v):
        if isinstance(v, list):
            return [key for key in v if key is not None]
        return v


class ColumnLookup(BaseModel):
    key: str
    label: str
    is_default: bool


class ExportLookups(BaseModel):
    columns: List[ColumnLookup]
    report_types: List[Lookup]
    funds: List[Lookup]
    operators: List[Lookup]
