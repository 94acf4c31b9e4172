"""Error taxonomy and error payload helpers for the catalog backend."""
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    def __init__(self, message: str, *, code: Optional[Any] = None, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details


class AuthError(CatalogError):
    """Service account credentials are missing or malformed."""


class SourceUnavailableError(CatalogError):
    """The spreadsheet is unreachable or not configured."""


class BadRequestError(CatalogError):
    """A client-supplied identifier failed validation."""


class UpstreamError(CatalogError):
    """A proxied remote resource answered with an error."""


class ErrorHandler:
    def to_payload(self, exc: Exception, context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        logger.error("Request failed (%s): %s", (context or {}).get("operation", "unknown"), exc, exc_info=True)
        if isinstance(exc, CatalogError):
            return {"ok": False, "message": exc.message, "code": exc.code, "errors": exc.details}
        return {"ok": False, "message": str(exc), "code": None, "errors": None}
