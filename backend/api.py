"""FastAPI entrypoint for merchant and transaction HTTP endpoints."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, NoReturn

from fastapi import FastAPI, HTTPException, Query
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.requests import Request
from fastapi.responses import JSONResponse, Response

from backend.factory import BackendServices, build_backend_services
from backend.services.merchant_service import MerchantService
from backend.services.transaction_service import TransactionService
from shared import config as _config
from shared.models import ErrorCode, MerchantListQuery, MerchantRequest, ServiceError


logger = logging.getLogger(__name__)


_HTTP_STATUS_BY_ERROR_CODE = {
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.BACKEND_ERROR: 503,
}


@lru_cache(maxsize=1)
def get_backend_services() -> BackendServices:
    """Create and cache backend services once per process."""
    return build_backend_services()


def get_merchant_service() -> MerchantService:
    return get_backend_services().merchant_service


def get_transaction_service() -> TransactionService:
    return get_backend_services().transaction_service


def _raise_service_error(error: ServiceError) -> NoReturn:
    status_code = _HTTP_STATUS_BY_ERROR_CODE.get(error.code, 500)
    detail = error.message
    if error.code == ErrorCode.BACKEND_ERROR:
        detail = "Data store request failed"
    raise HTTPException(status_code=status_code, detail=detail)


def _blank_to_none(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value


app = FastAPI(title="Merchant Transactions API")

ALLOW_ORIGINS = _config.cors_allow_origins()


@app.middleware("http")
async def log_http_requests(request: Request, call_next):
    """Log incoming requests, HTTP status codes and unexpected errors."""

    logger.info("http_request_received method=%s path=%s", request.method, request.url.path)
    try:
        response = await call_next(request)
    except Exception:
        logger.exception(
            "http_request_failed method=%s path=%s",
            request.method,
            request.url.path,
        )
        raise

    logger.info(
        "http_response_sent method=%s path=%s status_code=%s",
        request.method,
        request.url.path,
        response.status_code,
    )
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

logger.info("cors_allow_origins=%s", ALLOW_ORIGINS)


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Answer malformed query parameters and bodies with 400 and a readable message."""

    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        messages.append(f"{location}: {error.get('msg', 'invalid value')}")
    detail = "; ".join(messages) or "Invalid request"
    logger.info(
        "request_validation_failed method=%s path=%s detail=%s",
        request.method,
        request.url.path,
        detail,
    )
    return JSONResponse(status_code=400, content={"detail": detail})


@app.exception_handler(Exception)
async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
    """Return a JSON 500 response for unhandled exceptions."""

    logger.exception(
        "unhandled_exception method=%s path=%s exception_type=%s message=%s",
        request.method,
        request.url.path,
        type(exc).__name__,
        str(exc),
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


@app.get("/health")
def health() -> dict[str, str]:
    """Healthcheck endpoint."""

    return {"status": "ok"}


@app.get("/api/v1/merchants")
def list_merchants(
    page: int = Query(default=1),
    limit: int = Query(default=20, ge=1),
    search: str | None = Query(default=None),
    status: str | None = Query(default=None),
    sort_field: str = Query(default="name", alias="sortField"),
    sort_direction: str = Query(default="asc", alias="sortDirection"),
) -> Any:
    """Return one page of merchants after search, status filter and sort."""

    max_page_size = _config.max_page_size()
    if limit > max_page_size:
        raise HTTPException(status_code=400, detail=f"limit must be between 1 and {max_page_size}")

    result = get_merchant_service().list_merchants(
        MerchantListQuery(
            page=page,
            limit=limit,
            search=_blank_to_none(search),
            status=_blank_to_none(status),
            sort_field=sort_field,
            sort_direction=sort_direction,
        )
    )
    if isinstance(result, ServiceError):
        _raise_service_error(result)
    return jsonable_encoder(result)


@app.get("/api/v1/merchants/{merchant_id}")
def get_merchant(merchant_id: str) -> Any:
    result = get_merchant_service().get_merchant(merchant_id)
    if isinstance(result, ServiceError):
        _raise_service_error(result)
    return jsonable_encoder(result)


@app.post("/api/v1/merchants", status_code=201)
def create_merchant(payload: MerchantRequest) -> Any:
    """Create a merchant; the server assigns the id and timestamps."""

    result = get_merchant_service().create_merchant(payload)
    if isinstance(result, ServiceError):
        _raise_service_error(result)
    return jsonable_encoder(result)


@app.put("/api/v1/merchants/{merchant_id}")
def update_merchant(merchant_id: str, payload: MerchantRequest) -> Any:
    result = get_merchant_service().update_merchant(merchant_id, payload)
    if isinstance(result, ServiceError):
        _raise_service_error(result)
    return jsonable_encoder(result)


@app.delete("/api/v1/merchants/{merchant_id}", status_code=204)
def delete_merchant(merchant_id: str) -> Response:
    result = get_merchant_service().delete_merchant(merchant_id)
    if isinstance(result, ServiceError):
        _raise_service_error(result)
    return Response(status_code=204)


@app.get("/api/v1/merchants/{merchant_id}/transactions")
def get_merchant_transactions(
    merchant_id: str,
    page: int = Query(default=0, ge=0),
    size: int = Query(default=20),
    start_date: str | None = Query(default=None, alias="startDate"),
    end_date: str | None = Query(default=None, alias="endDate"),
    status: str | None = Query(default=None),
) -> Any:
    """Return a page of a merchant's transactions with a summary of all matches."""

    result = get_transaction_service().get_merchant_transactions(
        merchant_id,
        page=page,
        size=size,
        start_date=start_date,
        end_date=end_date,
        status=status,
    )
    if isinstance(result, ServiceError):
        _raise_service_error(result)
    return jsonable_encoder(result)
