from enum import Enum

from shared.exporthelper import DECIMAL_FORMAT, INTEGER_FORMAT


class RentRollColumn(str, Enum):
    REFERENCE_ID = "reference_id"
    CITY = "city"
    STREET_NR = "street_nr"
    ZIP = "zip"
    LOCATION_NAME = "location_name"
    TENANCY_NAME = "tenancy_name"
    GLA = "gla"
    TENANCY_DATE_START = "tenancy_date_start"
    TENANCY_DATE_END_DISPLAY = "tenancy_date_end_display"
    WALT = "walt"
    TOTAL_CURRENT_RENT = "total_current_rent"
    PSM = "psm"
    OPTIONS_SUMMARY = "options_summary"
    CURRENT_RENT = "current_rent"
    CURRENT_ANCILLARY_COSTS = "current_ancillary_costs"


# Canonical display order. Output always follows this, never the request order.
RENT_ROLL_COLUMNS = (
    ("reference_id", "Asset Ref"),
    ("city", "City"),
    ("street_nr", "Street + Nr"),
    ("zip", "ZIP"),
    ("location_name", "Location"),
    ("tenancy_name", "Tenancy name"),
    ("gla", "GLA (space)"),
    ("tenancy_date_start", "Date start"),
    ("tenancy_date_end_display", "Date end (display)"),
    ("walt", "WALT (yrs)"),
    ("total_current_rent", "Total current rent"),
    ("psm", "PSM (monthly)"),
    ("options_summary", "Options (yrs x count)"),
    ("current_rent", "Current rent"),
    ("current_ancillary_costs", "Ancillary costs (current)"),
)

RENT_ROLL_COLUMN_LABELS = dict(RENT_ROLL_COLUMNS)

ALLOWED_RENT_ROLL_COLUMNS = frozenset(RENT_ROLL_COLUMN_LABELS)

DEFAULT_RENT_ROLL_COLUMNS = [
    "reference_id",
    "city",
    "street_nr",
    "zip",
    "location_name",
    "tenancy_name",
    "gla",
    "tenancy_date_start",
    "tenancy_date_end_display",
    "walt",
    "total_current_rent",
    "psm",
    "options_summary",
]

RENT_ROLL_NUMBER_FORMATS = {
    "GLA (space)": INTEGER_FORMAT,
    "WALT (yrs)": DECIMAL_FORMAT,
    "Total current rent": INTEGER_FORMAT,
    "PSM (monthly)": DECIMAL_FORMAT,
    "Current rent": INTEGER_FORMAT,
    "Ancillary costs (current)": INTEGER_FORMAT,
}

RENT_ROLL_DATE_COLUMNS = {"Date start", "Date end (display)"}


# Asset tape layout is fixed
ASSET_TAPE_COLUMNS = [
    "Asset Ref",
    "City",
    "Street + Nr",
    "ZIP",
    "Entity",
    "Construction / Modernization",
    "Plot area",
    "Parking",
    "Rentable area",
    "WALT (yrs)",
    "Base rent (monthly)",
]

ASSET_TAPE_NUMBER_FORMATS = {
    "Plot area": INTEGER_FORMAT,
    "Parking": INTEGER_FORMAT,
    "Rentable area": INTEGER_FORMAT,
    "WALT (yrs)": DECIMAL_FORMAT,
    "Base rent (monthly)": INTEGER_FORMAT,
}
