import math
from datetime import datetime
from typing import Any, Dict, Iterable, Optional, Sequence

from shared.helpers.date_helper import parse_date
from ..enum.report_enum import M2M
from ..schemas.rent_roll_schemas import AssetAggregate, WaltValue

DAYS_PER_YEAR = 365.25
SECONDS_PER_YEAR = DAYS_PER_YEAR * 24 * 60 * 60

# The tenancy model differs between ERP installs; first field present wins.
AREA_FIELDS = ("space", "gla", "leased_area", "area")
RENT_FIELDS = ("current_rent", "rent", "actual_rent")
START_DATE_FIELDS = ("date_start", "lease_start", "start_date")
END_DATE_FIELDS = ("date_end_display", "lease_end", "end_date")


def _is_absent(value: Any) -> bool:
    # Odoo sends False for empty fields
    return value is None or value is False


def to_number(value: Any) -> float:
    """Lossy numeric coercion: anything unusable becomes 0."""
    if _is_absent(value) or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return 0 if isinstance(value, float) and math.isnan(value) else value
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0
        return 0 if math.isnan(number) else number
    return 0


def to_text(value: Any) -> Optional[str]:
    if _is_absent(value):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None


def first_value(record: Dict[str, Any], fields: Sequence[str]) -> Any:
    for field in fields:
        value = record.get(field)
        if not _is_absent(value):
            return value
    return None


def compute_walt(start: Any, end: Any, now: Optional[datetime] = None) -> WaltValue:
    """
    Remaining lease term in years.

    No usable end date means month-to-month when the lease has started,
    and 0 when there is no start either. An end date in the past is also
    month-to-month.
    """
    end_date = parse_date(end)
    if end_date is None:
        return M2M if parse_date(start) is not None else 0

    now = now or datetime.now()
    years = (end_date - now).total_seconds() / SECONDS_PER_YEAR
    if years < 0:
        return M2M
    return round(years, 2)


def walt_years(walt: WaltValue) -> float:
    if isinstance(walt, str):
        return 0
    return to_number(walt)


def compute_psm(current_rent: Any, leased_area: Any) -> float:
    # rent is annual, psm is monthly
    area = to_number(leased_area)
    if area <= 0:
        return 0
    return (to_number(current_rent) / 12) / area


def format_options_summary(count: int, duration: float) -> str:
    if count > 0 and duration > 0:
        return f"{round(duration, 1):.1f}yrs x {count}"
    return ""


def format_construction_modernization(construction: Any, modernization: Any) -> str:
    built = _year_text(construction)
    modernized = _year_text(modernization)
    if built and modernized:
        return f"{built} / {modernized}"
    return built or modernized or ""


def _year_text(value: Any) -> Optional[str]:
    # integer fields come back as 0 when unset
    if _is_absent(value) or value == 0:
        return None
    return to_text(value)


def tenancy_walt(tenancy: Dict[str, Any], now: Optional[datetime] = None) -> WaltValue:
    return compute_walt(
        first_value(tenancy, START_DATE_FIELDS),
        first_value(tenancy, END_DATE_FIELDS),
        now,
    )


def aggregate_asset(tenancies: Iterable[Dict[str, Any]], now: Optional[datetime] = None) -> AssetAggregate:
    """Roll tenancies up to their main asset, weighting WALT by total current rent."""
    now = now or datetime.now()
    rentable_area = 0
    base_rent = 0
    weighted_walt = 0

    for tenancy in tenancies:
        rent = to_number(tenancy.get("total_current_rent"))
        rentable_area += to_number(first_value(tenancy, AREA_FIELDS))
        base_rent += rent
        weighted_walt += walt_years(tenancy_walt(tenancy, now)) * rent

    walt = round(weighted_walt / base_rent, 2) if base_rent else 0
    return AssetAggregate(rentable_area=rentable_area, base_rent=base_rent, walt=walt)
