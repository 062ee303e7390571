from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse

from shared.core.config import ODOO_CONFIG
from shared.exporthelper import XLSX_MEDIA_TYPE
from shared.utils.odoo_client import OdooClient
from ..crud import export_crud as crud
from ..crud.export_crud import ReportNotFoundError
from ..schemas.export_schemas import ExportLookups, ExportRequest


router = APIRouter(
    prefix="/api/export",
    tags=["Export"]
)


def get_odoo_client() -> OdooClient:
    # one client (and one authentication) per request
    return OdooClient(ODOO_CONFIG)


@router.get("/lookups", response_model=ExportLookups)
def get_export_lookups():
    return crud.get_export_lookups()


@router.post(
    "",
    response_class=StreamingResponse,
    responses={
        200: {
            "content": {XLSX_MEDIA_TYPE: {}},
            "description": "Excel file download",
        }
    },
)
def export_report(
    payload: ExportRequest,
    client: OdooClient = Depends(get_odoo_client)
):
    try:
        return crud.generate_report(client, payload)
    except ReportNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
