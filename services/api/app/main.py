"""Mixbox API service entrypoint."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from services.api.app.config import configure_logging
from services.api.app.db.init_db import init_db
from services.api.app.routers.audit import router as audit_router
from services.api.app.routers.basket import router as basket_router
from services.api.app.routers.catalog import router as catalog_router
from services.api.app.routers.maintenance import router as maintenance_router
from services.api.app.routers.selection import router as selection_router
from services.api.app.routers.session import router as session_router

configure_logging()

app = FastAPI(title="Mixbox API")

app.include_router(session_router)
app.include_router(selection_router)
app.include_router(basket_router)
app.include_router(catalog_router)
app.include_router(audit_router)
app.include_router(maintenance_router)

_REQUEST_PARTS = {"body", "query", "cookie", "header", "path"}


@app.exception_handler(RequestValidationError)
async def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    del request

    errors: dict[str, str] = {}
    for err in exc.errors():
        field = ".".join(str(p) for p in err["loc"] if p not in _REQUEST_PARTS) or "body"
        errors.setdefault(field, err["msg"])

    return JSONResponse(
        status_code=400,
        content={"detail": {"message": "Invalid request", "errors": errors}},
    )


@app.on_event("startup")
def _startup() -> None:
    init_db()


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}
