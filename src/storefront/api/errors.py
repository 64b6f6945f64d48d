"""Map storefront errors to HTTP responses.

Each error class answers with its own status and a body of the form
``{"code": ..., "message": ..., "errors": {...}}``. Protean's own handlers
cover framework exceptions raised outside the storefront taxonomy. A version
conflict that outlasted Protean's handler retries answers 409 with the
``concurrent_update`` code so clients can retry the request.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError
from protean.integrations.fastapi import register_exception_handlers

from storefront.errors import DOMAIN_ERRORS

logger = structlog.get_logger(__name__)

CONCURRENT_UPDATE = "concurrent_update"


async def storefront_error_handler(request: Request, exc) -> JSONResponse:
    logger.info(
        "Request rejected",
        path=request.url.path,
        code=exc.code,
        status_code=exc.status_code,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def version_conflict_handler(request: Request, exc: ExpectedVersionError) -> JSONResponse:
    logger.warning("Concurrent update rejected", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=409,
        content={
            "code": CONCURRENT_UPDATE,
            "message": "The record was changed by another request, retry",
            "errors": {},
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)
    app.add_exception_handler(ExpectedVersionError, version_conflict_handler)
    for error_cls in DOMAIN_ERRORS:
        app.add_exception_handler(error_cls, storefront_error_handler)
