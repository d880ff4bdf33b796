"""
Mapping of service exceptions to HTTP errors.
"""

import logging

from fastapi import HTTPException

from dex_mcp.dex.client import DexAPIError, DexConnectionError, DexNotFoundError

logger = logging.getLogger(__name__)


def to_http_exception(error: Exception) -> HTTPException:
    """
    Convert a service error into an HTTPException.

    400 for invalid parameters (including MatchParameterError), 404 for
    unknown records, 503 when Dex is unreachable, 502 for other Dex errors.
    """
    if isinstance(error, ValueError):
        return HTTPException(status_code=400, detail=str(error))
    if isinstance(error, DexNotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, DexConnectionError):
        return HTTPException(
            status_code=503,
            detail=f"Failed to connect to Dex API: {str(error)}"
        )
    if isinstance(error, DexAPIError):
        logger.error(f"Dex API request failed: {error}")
        return HTTPException(status_code=502, detail=str(error))
    logger.error(f"Unexpected error: {error}")
    return HTTPException(status_code=500, detail=str(error))
