"""API presentation layer."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ...core.exceptions import SmartClinicException
from . import content, engagement, promo, system


def create_api_routes(app: FastAPI) -> None:
    """Create API routes and error handlers."""

    @app.exception_handler(SmartClinicException)
    async def smart_clinic_error(request: Request, exc: SmartClinicException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": exc.message, "code": exc.code},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        details = [{"loc": list(error.get("loc", ())), "msg": error.get("msg")} for error in exc.errors()]
        return JSONResponse(
            status_code=400,
            content={"success": False, "error": "Invalid request", "code": "VALIDATION_ERROR", "details": details},
        )

    app.include_router(system.router)
    app.include_router(content.router)
    app.include_router(engagement.router)
    app.include_router(promo.router)
