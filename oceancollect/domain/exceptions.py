"""
Errors raised by payload parsing and the services.

Each carries a French `message` shown to the admin and a machine `code`
that ends up in `ServiceResult.error` and in JSON responses.
"""


class DomainError(Exception):

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        super().__init__(message)
        self.message = message
        self.code = code


class ValidationError(DomainError):
    """Invalid form input. `field` names the offending form field, if known."""

    def __init__(self, message: str, field: str = None):
        self.field = field
        suffix = f"_{field.upper()}" if field else ""
        super().__init__(message, "VALIDATION_ERROR" + suffix)


class NotFoundError(DomainError):

    def __init__(self, entity_type: str, identifier: str = None):
        self.entity_type = entity_type
        self.identifier = identifier
        label = f"{entity_type} '{identifier}'" if identifier else entity_type
        super().__init__(f"{label} introuvable", "NOT_FOUND")


class UnauthorizedError(DomainError):

    def __init__(self, message: str = "Accès non autorisé"):
        super().__init__(message, "UNAUTHORIZED")


class TemplateNotFoundError(NotFoundError):
    """Questionnaire template missing (detail page, item operations)."""

    def __init__(self, template_id: str = None):
        super().__init__("Modèle", template_id)
