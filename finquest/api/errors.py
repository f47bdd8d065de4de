"""Mapping from domain exceptions to HTTP errors"""

import logging
from fastapi import HTTPException
from finquest.domain.exceptions import (
    DomainException,
    InvalidArgumentError,
    NotFoundError,
    UnauthenticatedError,
    UnavailableError,
)


def to_http_error(error: DomainException, request_id: str) -> HTTPException:
    """Translate a domain failure into the status code the caller should see"""
    if isinstance(error, InvalidArgumentError):
        logging.warning(f"Invalid argument: {error}", extra={"request_id": request_id})
        return HTTPException(status_code=422, detail=str(error))

    if isinstance(error, UnauthenticatedError):
        return HTTPException(status_code=401, detail="Not authenticated")

    if isinstance(error, NotFoundError):
        logging.info(f"Not found: {error}", extra={"request_id": request_id})
        return HTTPException(status_code=404, detail=str(error))

    if isinstance(error, UnavailableError):
        logging.error(f"Unavailable: {error}", extra={"request_id": request_id})
        return HTTPException(status_code=503, detail="Progress service unavailable, retry the request")

    logging.error(f"Unexpected domain error: {error}", extra={"request_id": request_id})
    return HTTPException(status_code=500, detail="Internal server error")
