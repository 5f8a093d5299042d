"""
Error taxonomy shared by services and routers.

Each error carries the HTTP status it is reported with; handlers registered in
``securauditz.main`` turn them into ``{"detail": ...}`` responses.
"""
import functools
import logging

from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class AuditzError(Exception):
    """Base class for errors reported to the API caller."""
    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(AuditzError):
    """Required input missing or malformed. Nothing was written."""
    status_code = 400


class NotFoundError(AuditzError):
    """Referenced audit or control does not exist. Nothing was written."""
    status_code = 404


class UpstreamUnavailableError(AuditzError):
    """Generative-text provider is not configured."""
    status_code = 503


class UpstreamRequestError(UpstreamUnavailableError):
    """Generative-text provider was called and failed."""
    status_code = 502


class StoreError(AuditzError):
    """Underlying document store call failed; the operation was aborted."""
    status_code = 500


def store_call(func):
    """Wrap an async store accessor so driver failures surface as StoreError."""

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except SQLAlchemyError as exc:
            logger.error("Store call %s failed: %s", func.__qualname__, exc)
            raise StoreError(f"Store error in {func.__name__}: {exc}") from exc

    return wrapper
