from __future__ import annotations

import logging
from typing import NoReturn

from fastapi import HTTPException
from services.api.app.services.errors import (
    CatalogDataError,
    ConcurrentModificationError,
    MixboxError,
    NotFoundError,
    ValidationFailedError,
)

logger = logging.getLogger(__name__)


def raise_http_error(e: Exception) -> NoReturn:
    if isinstance(e, HTTPException):
        raise e

    if isinstance(e, ValidationFailedError):
        if e.errors:
            raise HTTPException(
                status_code=400, detail={"message": e.message, "errors": e.errors}
            ) from e
        raise HTTPException(status_code=400, detail=str(e)) from e

    if isinstance(e, NotFoundError):
        raise HTTPException(status_code=404, detail=str(e)) from e

    if isinstance(e, ConcurrentModificationError):
        raise HTTPException(status_code=409, detail=str(e)) from e

    if isinstance(e, CatalogDataError):
        logger.error("Unusable catalog data: %s", e)
        raise HTTPException(status_code=502, detail=str(e)) from e

    if isinstance(e, MixboxError):
        raise HTTPException(status_code=400, detail=str(e)) from e

    logger.exception("Unhandled error while serving request")
    raise HTTPException(status_code=500, detail="Internal Server Error") from e
