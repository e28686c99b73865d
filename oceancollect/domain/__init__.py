# Domain Layer - Pure business rules, no dependencies on infrastructure

from .exceptions import (
    DomainError,
    ValidationError,
    NotFoundError,
    UnauthorizedError,
    TemplateNotFoundError,
)
from .value_objects import Email

__all__ = [
    'DomainError',
    'ValidationError',
    'NotFoundError',
    'UnauthorizedError',
    'TemplateNotFoundError',
    'Email',
]
