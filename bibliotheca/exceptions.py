"""
Exceptions for Bibliotheca

Every failure a repository can raise maps to one HTTP status and one
machine-readable code. The message text matches the wording clients of
the catalog already rely on ("Book not available", "User already exist").
"""


class BibliothecaException(Exception):
    """Base exception for Bibliotheca errors."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        detail: str = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.detail = detail
        super().__init__(message)


class NotFoundError(BibliothecaException):
    """Resource not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(
            message=f"{resource} not found",
            code="NOT_FOUND",
            status_code=404,
            detail=f"No {resource.lower()} with identifier '{identifier}' exists",
        )


class ConflictError(BibliothecaException):
    """A uniqueness rule was violated (duplicate email, duplicate genre name)."""

    def __init__(self, message: str, detail: str = None):
        super().__init__(
            message=message,
            code="CONFLICT",
            status_code=409,
            detail=detail,
        )


class ValidationError(BibliothecaException):
    """Input validation failed."""

    def __init__(self, message: str, detail: str = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=400,
            detail=detail,
        )


class InvalidIdentifierError(ValidationError):
    """A string is not a well-formed store identifier."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(
            message="Invalid id",
            detail=f"'{value}' is not a 24 character hexadecimal identifier",
        )


class DomainRuleError(BibliothecaException):
    """The entity is not in the state the operation requires."""

    def __init__(self, message: str, detail: str = None):
        super().__init__(
            message=message,
            code="DOMAIN_RULE",
            status_code=409,
            detail=detail,
        )


class NoCriteriaError(BibliothecaException):
    """A search was issued without any criteria."""

    def __init__(self):
        super().__init__(
            message="No search criteria provided",
            code="NO_CRITERIA",
            status_code=400,
        )


class StoreUnavailableError(BibliothecaException):
    """The document store could not be reached or rejected the operation."""

    def __init__(self, detail: str = None):
        super().__init__(
            message="Document store unavailable",
            code="STORE_UNAVAILABLE",
            status_code=503,
            detail=detail,
        )
