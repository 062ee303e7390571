from pydantic import BaseModel
from typing import Any, Generic, Optional, TypeVar, Union

# Shared properties
T = TypeVar("T")


class Lookup(BaseModel):
    id: Union[str, int]
    name: str

    class Config:
        from_attributes = True


class JsonOutResult(BaseModel, Generic[T]):
    data: Optional[T] = None
    status: str
    status_code: str
    message: str


class SheetData(BaseModel):
    """One worksheet worth of rows, ready for the excel writer."""
    name: str
    columns: list[str]
    rows: list[dict[str, Any]]
    number_formats: dict[str, Optional[str]] = {}
    date_columns: set[str] = set()
