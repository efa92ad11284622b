"""Map domain exceptions to HTTP responses.

Protean's handlers cover validation (400), missing records (404), invalid
state (409) and invalid operations (422). The one mapping added here is
UpstreamFailure (502), raised when every backend behind an operation failed.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers as register_protean_handlers

from shared.errors import UpstreamFailure


async def upstream_failure_handler(request: Request, exc: UpstreamFailure) -> JSONResponse:
    return JSONResponse(
        status_code=502,
        content={"error": str(exc), "failures": exc.failure_details()},
    )


def register_exception_handlers(app: FastAPI) -> FastAPI:
    register_protean_handlers(app)
    app.add_exception_handler(UpstreamFailure, upstream_failure_handler)
    return app
