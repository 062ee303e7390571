from typing import Union
from pydantic import BaseModel


class OptionSummary(BaseModel):
    count: int = 0
    duration: float = 0


class AssetAggregate(BaseModel):
    rentable_area: float = 0
    base_rent: float = 0
    walt: float = 0


WaltValue = Union[float, int, str]
