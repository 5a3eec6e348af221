# routers/errors.py
"""
Translate domain errors into HTTP errors.

NotFound -> 404, Validation / NotOnboarded -> 400, already settled or
settling -> 409, processor failures -> 402 during settlement and 502 elsewhere.
"""
from fastapi import HTTPException, status

from errors import (
     AlreadySettledError,
     MarketplaceError,
     NotFoundError,
     NotOnboardedError,
     ProcessorError,
     SettlementInProgressError,
     ValidationError,
)


def to_http_exception(
     error: MarketplaceError,
     processor_status: int = status.HTTP_502_BAD_GATEWAY,
) -> HTTPException:
     if isinstance(error, NotFoundError):
          return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error.message)
     if isinstance(error, (ValidationError, NotOnboardedError)):
          return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error.message)
     if isinstance(error, (AlreadySettledError, SettlementInProgressError)):
          return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=error.message)
     if isinstance(error, ProcessorError):
          return HTTPException(status_code=processor_status, detail=error.message)
     return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")
