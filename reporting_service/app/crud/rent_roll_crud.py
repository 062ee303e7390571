import unicodedata
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from shared.core.schemas import SheetData
from shared.helpers.many2one_helper import m2o_id, m2o_name
from ..enum.report_enum import ReportType, SheetName
from ..enum.report_columns_enum import (
    ALLOWED_RENT_ROLL_COLUMNS,
    ASSET_TAPE_COLUMNS,
    ASSET_TAPE_NUMBER_FORMATS,
    DEFAULT_RENT_ROLL_COLUMNS,
    RENT_ROLL_COLUMN_LABELS,
    RENT_ROLL_COLUMNS,
    RENT_ROLL_DATE_COLUMNS,
    RENT_ROLL_NUMBER_FORMATS,
    RentRollColumn,
)
from ..helpers.metrics_helper import (
    AREA_FIELDS,
    END_DATE_FIELDS,
    RENT_FIELDS,
    START_DATE_FIELDS,
    aggregate_asset,
    compute_psm,
    first_value,
    format_construction_modernization,
    format_options_summary,
    tenancy_walt,
    to_number,
    to_text,
)
from ..helpers.reference_helper import (
    build_main_property_map,
    fold_tenancy_options,
    group_tenancies_by_main_property,
)
from ..schemas.rent_roll_schemas import OptionSummary


def collation_key(text: Optional[str]) -> Tuple:
    """
    Sort key close to a locale compare: letters first, then accents,
    then case (lower before upper). Missing values go last.
    """
    if text is None:
        return (1, "", "", ())
    decomposed = unicodedata.normalize("NFD", text)
    base = "".join(c for c in decomposed if not unicodedata.combining(c))
    return (0, base.casefold(), decomposed.casefold(), tuple(c.isupper() for c in text))


def _sorted_by_reference(pairs: Iterable[Tuple[Optional[str], Dict[str, Any]]]) -> List[Dict[str, Any]]:
    return [row for _, row in sorted(pairs, key=lambda pair: collation_key(pair[0]))]


def resolve_rent_roll_columns(requested: Optional[List[str]]) -> List[str]:
    """Known keys only, in canonical order. Unknown keys are dropped silently."""
    if requested is None:
        requested = DEFAULT_RENT_ROLL_COLUMNS
    wanted = {key for key in requested if key in ALLOWED_RENT_ROLL_COLUMNS}
    return [key for key, _ in RENT_ROLL_COLUMNS if key in wanted]


def _street_nr(prop: Dict[str, Any]) -> Optional[str]:
    parts = [to_text(prop.get("street")), to_text(prop.get("nr"))]
    return " ".join(p for p in parts if p) or None


def rent_roll_values(
    tenancy: Dict[str, Any],
    prop: Optional[Dict[str, Any]],
    options: Optional[OptionSummary],
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    prop = prop or {}
    options = options or OptionSummary()
    area = to_number(first_value(tenancy, AREA_FIELDS))
    current_rent = to_number(first_value(tenancy, RENT_FIELDS))

    return {
        RentRollColumn.REFERENCE_ID.value: to_text(prop.get("reference_id")),
        RentRollColumn.CITY.value: to_text(prop.get("city")),
        RentRollColumn.STREET_NR.value: _street_nr(prop),
        RentRollColumn.ZIP.value: to_text(prop.get("zip")),
        RentRollColumn.LOCATION_NAME.value: m2o_name(prop.get("location_id")),
        RentRollColumn.TENANCY_NAME.value: to_text(tenancy.get("name")),
        RentRollColumn.GLA.value: area,
        RentRollColumn.TENANCY_DATE_START.value: to_text(first_value(tenancy, START_DATE_FIELDS)),
        RentRollColumn.TENANCY_DATE_END_DISPLAY.value: to_text(first_value(tenancy, END_DATE_FIELDS)),
        RentRollColumn.WALT.value: tenancy_walt(tenancy, now),
        RentRollColumn.TOTAL_CURRENT_RENT.value: to_number(tenancy.get("total_current_rent")),
        RentRollColumn.PSM.value: compute_psm(current_rent, area),
        RentRollColumn.OPTIONS_SUMMARY.value: format_options_summary(options.count, options.duration),
        RentRollColumn.CURRENT_RENT.value: current_rent,
        RentRollColumn.CURRENT_ANCILLARY_COSTS.value: to_number(tenancy.get("current_ancillary_costs")),
    }


def build_rent_roll_rows(
    tenancies: List[Dict[str, Any]],
    main_property_map: Dict[int, Dict[str, Any]],
    options_by_tenancy: Dict[int, OptionSummary],
    columns: List[str],
    now: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    now = now or datetime.now()
    pairs = []
    for tenancy in tenancies:
        # unattributed tenancies still get a row, with blank asset columns
        prop = main_property_map.get(m2o_id(tenancy.get("main_property_id")))
        options = options_by_tenancy.get(m2o_id(tenancy.get("id")))
        values = rent_roll_values(tenancy, prop, options, now)
        row = {RENT_ROLL_COLUMN_LABELS[key]: values[key] for key in columns}
        pairs.append((values[RentRollColumn.REFERENCE_ID.value], row))
    return _sorted_by_reference(pairs)


def build_asset_tape_rows(
    main_property_map: Dict[int, Dict[str, Any]],
    tenancies_by_main: Dict[int, List[Dict[str, Any]]],
    now: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    now = now or datetime.now()
    pairs = []
    for main_id, prop in main_property_map.items():
        aggregate = aggregate_asset(tenancies_by_main.get(main_id, []), now)
        reference = to_text(prop.get("reference_id"))
        row = {
            "Asset Ref": reference,
            "City": to_text(prop.get("city")),
            "Street + Nr": _street_nr(prop),
            "ZIP": to_text(prop.get("zip")),
            "Entity": m2o_name(prop.get("entity_id")),
            "Construction / Modernization": format_construction_modernization(
                prop.get("construction_year"), prop.get("last_modernization")),
            "Plot area": to_number(prop.get("plot_area")),
            "Parking": to_number(prop.get("no_of_parking")),
            "Rentable area": aggregate.rentable_area,
            "WALT (yrs)": aggregate.walt,
            "Base rent (monthly)": aggregate.base_rent,
        }
        pairs.append((reference, row))
    return _sorted_by_reference(pairs)


def build_report_sheets(
    report_type: ReportType,
    columns: List[str],
    properties: List[Dict[str, Any]],
    tenancies: List[Dict[str, Any]],
    options: List[Dict[str, Any]],
    now: Optional[datetime] = None,
) -> List[SheetData]:
    """Resolve references, compute metrics and lay out the requested sheets."""
    now = now or datetime.now()
    main_property_map = build_main_property_map(properties)
    sheets = []

    if report_type in (ReportType.RENT_ROLL, ReportType.BOTH):
        options_by_tenancy = fold_tenancy_options(options)
        labels = [RENT_ROLL_COLUMN_LABELS[key] for key in columns]
        sheets.append(SheetData(
            name=SheetName.RENT_ROLL.value,
            columns=labels,
            rows=build_rent_roll_rows(
                tenancies, main_property_map, options_by_tenancy, columns, now),
            number_formats={k: v for k, v in RENT_ROLL_NUMBER_FORMATS.items() if k in labels},
            date_columns={c for c in RENT_ROLL_DATE_COLUMNS if c in labels},
        ))

    if report_type in (ReportType.ASSET_TAPE, ReportType.BOTH):
        tenancies_by_main = group_tenancies_by_main_property(tenancies)
        sheets.append(SheetData(
            name=SheetName.ASSET_TAPE.value,
            columns=ASSET_TAPE_COLUMNS,
            rows=build_asset_tape_rows(main_property_map, tenancies_by_main, now),
            number_formats=ASSET_TAPE_NUMBER_FORMATS,
        ))

    return sheets
