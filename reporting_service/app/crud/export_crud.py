import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from fastapi.responses import StreamingResponse

from shared.core.schemas import Lookup
from shared.exporthelper import export_to_excel
from shared.helpers.many2one_helper import m2o_id
from shared.utils.odoo_client import OdooClient
from ..enum.report_columns_enum import DEFAULT_RENT_ROLL_COLUMNS, RENT_ROLL_COLUMNS
from ..enum.report_enum import OPERATOR_CODE_TO_ID, FundName, OperatorCode, ReportType
from ..helpers.metrics_helper import AREA_FIELDS, END_DATE_FIELDS, RENT_FIELDS, START_DATE_FIELDS
from ..helpers.reference_helper import collect_main_property_ids
from ..schemas.export_schemas import ColumnLookup, ExportLookups, ExportRequest
from .rent_roll_crud import build_report_sheets, resolve_rent_roll_columns

logger = logging.getLogger(__name__)

PROPERTY_MODEL = "property.property"
TENANCY_MODEL = "property.tenancy"
TENANCY_OPTION_MODEL = "property.tenancy.option"
COMPANY_MODEL = "res.company"

PROPERTY_FIELDS = [
    "id",
    "reference_id",
    "main_property_id",
    "sales_person_id",
    "company_id",
    "entity_id",
    "location_id",
    "city",
    "street",
    "nr",
    "zip",
    "construction_year",
    "last_modernization",
    "plot_area",
    "no_of_parking",
]

TENANCY_FIELDS = [
    "id",
    "main_property_id",
    "name",
    *AREA_FIELDS,
    *RENT_FIELDS,
    "total_current_rent",
    "current_ancillary_costs",
    *START_DATE_FIELDS,
    *END_DATE_FIELDS,
]

TENANCY_OPTION_FIELDS = ["id", "tenancy_id", "duration"]


class ReportNotFoundError(Exception):
    pass


def resolve_company_id(client: OdooClient, fund_name: FundName) -> int:
    rows = client.search_read(
        COMPANY_MODEL, [["name", "=", fund_name.value]], ["id", "name"], limit=1)
    company_id = m2o_id(rows[0].get("id")) if rows else None
    if company_id is None:
        logger.warning("Fund %r has no matching company in Odoo", fund_name.value)
        raise ValueError(f"Unknown fund: {fund_name.value}")
    return company_id


def build_property_domain(params: ExportRequest, company_id: Optional[int] = None) -> List[Any]:
    domain: List[Any] = []
    if params.reference_ids:
        domain.append(["reference_id", "in", params.reference_ids])
    if params.salesperson_id is not None:
        domain.append(["sales_person_id", "=", params.salesperson_id])
    if company_id is not None:
        domain.append(["company_id", "=", company_id])
    if params.operator_code is not None:
        domain.append(["operator_id", "=", OPERATOR_CODE_TO_ID[params.operator_code]])
    return domain


def fetch_report_records(
    client: OdooClient,
    params: ExportRequest
) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]], List[Dict[str, Any]]]:
    company_id = None
    if params.fund_name is not None:
        company_id = resolve_company_id(client, params.fund_name)

    properties = client.search_read(
        PROPERTY_MODEL,
        build_property_domain(params, company_id),
        client.available_fields(PROPERTY_MODEL, PROPERTY_FIELDS),
    )
    logger.info("Fetched %s properties", len(properties))
    if not properties:
        return [], [], []

    main_ids = collect_main_property_ids(properties)
    tenancies = client.search_read(
        TENANCY_MODEL,
        [["main_property_id", "in", main_ids]],
        client.available_fields(TENANCY_MODEL, TENANCY_FIELDS),
    )
    logger.info("Fetched %s tenancies for %s main properties",
                len(tenancies), len(main_ids))

    # options only feed the rent roll
    options: List[Dict[str, Any]] = []
    tenancy_ids = [tid for tid in (m2o_id(t.get("id")) for t in tenancies) if tid is not None]
    if tenancy_ids and params.report_type != ReportType.ASSET_TAPE:
        options = client.search_read(
            TENANCY_OPTION_MODEL,
            [["tenancy_id", "in", tenancy_ids]],
            TENANCY_OPTION_FIELDS,
        )
        logger.info("Fetched %s tenancy options", len(options))

    return properties, tenancies, options


def generate_report(
    client: OdooClient,
    params: ExportRequest,
    now: Optional[datetime] = None
) -> StreamingResponse:
    columns = resolve_rent_roll_columns(params.columns)
    if params.report_type != ReportType.ASSET_TAPE and not columns:
        raise ValueError("No valid column requested")

    properties, tenancies, options = fetch_report_records(client, params)
    if not properties:
        raise ReportNotFoundError("No asset found for the given filters")

    now = now or datetime.now()
    sheets = build_report_sheets(
        params.report_type, columns, properties, tenancies, options, now)

    filename = f"rent_roll_export_{now.strftime('%Y%m%d_%H%M%S')}.xlsx"
    return export_to_excel(sheets, filename)


def get_export_lookups() -> ExportLookups:
    defaults = set(DEFAULT_RENT_ROLL_COLUMNS)
    return ExportLookups(
        columns=[
            ColumnLookup(key=key, label=label, is_default=key in defaults)
            for key, label in RENT_ROLL_COLUMNS
        ],
        report_types=[
            Lookup(id=t.value, name=t.name.replace("_", " ").title()) for t in ReportType
        ],
        funds=[Lookup(id=f.value, name=f.value) for f in FundName],
        operators=[
            Lookup(id=o.value, name=o.value.title()) for o in OperatorCode
        ],
    )
