import logging

from fastapi import FastAPI, Request, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from shared.core.schemas import JsonOutResult
from shared.utils.app_status_code import AppStatusCode
from shared.utils.odoo_client import OdooRpcError

logger = logging.getLogger(__name__)


def setup_exception_handlers(app: FastAPI):

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        status_code = AppStatusCode.OPERATION_FAILED
        if exc.status_code == 404:
            status_code = AppStatusCode.NOT_FOUND
        elif exc.status_code in (400, 422):
            status_code = AppStatusCode.INVALID_INPUT

        wrapped = JsonOutResult(
            data=None,
            status="Failure",
            status_code=status_code,
            message=str(exc.detail)
        ).model_dump()
        return JSONResponse(content=wrapped, status_code=exc.status_code or 400)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        # field level errors go in data so the form can highlight them
        errors = [
            {
                "field": ".".join(str(p) for p in err.get("loc", []) if p != "body"),
                "message": err.get("msg"),
            }
            for err in exc.errors()
        ]
        wrapped = JsonOutResult(
            data=jsonable_encoder(errors),
            status="Failure",
            status_code=AppStatusCode.INVALID_INPUT,
            message="Invalid request"
        ).model_dump()
        return JSONResponse(content=wrapped, status_code=422)

    @app.exception_handler(OdooRpcError)
    async def odoo_exception_handler(request: Request, exc: OdooRpcError):
        logger.error("Odoo gateway failure on %s: %s", request.url.path, exc)
        wrapped = JsonOutResult(
            data=None,
            status="Failure",
            status_code=AppStatusCode.UPSTREAM_FAILED,
            message=str(exc)
        ).model_dump()
        return JSONResponse(content=wrapped, status_code=502)

    # Catch all unhandled exceptions
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s", request.url.path)

        wrapped = JsonOutResult(
            data=None,
            status="Failure",
            status_code=AppStatusCode.OPERATION_FAILED,
            message=str(exc)
        ).model_dump()
        return JSONResponse(content=wrapped, status_code=500)
