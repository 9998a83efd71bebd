"""Write protection for journal data.

Reads are open. Creating, editing and deleting trades, strategies, tags and
settings requires the X-API-Key header once a key is configured. A local
development journal with no key configured accepts writes without one.
"""

import logging
import secrets

from fastapi import HTTPException, Request, Security
from fastapi.security import APIKeyHeader

from tradejournal.config import settings

logger = logging.getLogger(__name__)

_api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


def writes_unprotected() -> bool:
    """True for a development journal with no key configured."""
    return not settings.api_key and settings.app_env == "development"


async def require_api_key(
    request: Request, api_key: str | None = Security(_api_key_header)
) -> str:
    """Dependency on every mutating route."""
    if writes_unprotected():
        return "dev-bypass"
    if not settings.api_key:
        logger.warning("Refusing %s %s: no API key configured (app_env=%s)",
                       request.method, request.url.path, settings.app_env)
        raise HTTPException(status_code=403, detail="API key not configured on server")

    if api_key is None or not secrets.compare_digest(api_key.encode(), settings.api_key.encode()):
        logger.warning("Rejected %s %s: invalid or missing API key", request.method, request.url.path)
        raise HTTPException(status_code=401, detail="Invalid or missing API key")
    return api_key
