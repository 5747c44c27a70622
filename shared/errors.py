"""
Domain errors raised by the lifecycle managers.

Every business rule violation is reported as a DomainError carrying:
- kind: machine-readable category (DomainErrorKind)
- message: developer detail, meant for logs
- user_message: short description of the failed operation, safe to return

None of these are crashes. They are terminal for the operation and are
propagated unchanged to the API layer, which turns them into responses.
"""

from enum import Enum
from typing import Optional


class DomainErrorKind(str, Enum):
    """Categories of business rule violations."""
    NOT_FOUND = "NotFound"                        # No active client for the id
    CLIENT_NOT_FOUND = "ClientNotFound"           # Contract op on a missing/inactive client
    CONTRACT_NOT_FOUND = "ContractNotFound"       # No active contract for the id
    DUPLICATE_IDENTIFIER = "DuplicateIdentifier"  # Active organization already holds it
    INVALID_DATE_RANGE = "InvalidDateRange"       # start_date after end_date
    INVALID_BIRTHDATE = "InvalidBirthdate"        # birthdate after the reference date
    TYPE_MISMATCH = "TypeMismatch"                # Request variant != stored variant
    UNSUPPORTED_TYPE = "UnsupportedType"          # Variant outside the closed set


class DomainError(Exception):
    """
    A business rule violation.

    Example:
        raise DomainError(
            DomainErrorKind.NOT_FOUND,
            f"Not found client by id: {client_id}",
            "Update client failed",
        )
    """

    def __init__(
        self,
        kind: DomainErrorKind,
        message: str,
        user_message: Optional[str] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.user_message = user_message or message

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"
