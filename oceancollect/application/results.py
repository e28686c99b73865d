"""Result object shared by the application services."""
import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass
class ServiceResult:
    """Result of a service operation."""
    success: bool
    message: str
    data: Optional[dict] = None
    error: Optional[str] = None


def backend_message(exc) -> str:
    """Message of the database driver when there is one, else the exception text."""
    orig = getattr(exc, 'orig', None)
    return str(orig) if orig is not None else str(exc)


def database_failure(uow, exc, prefix: str) -> ServiceResult:
    """Rollback the unit of work and turn a database exception into a failed result."""
    uow.rollback()
    logger.error(f'{prefix} {exc}')
    return ServiceResult(success=False, message=f'{prefix} {backend_message(exc)}', error='DB_ERROR')
