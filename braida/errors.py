"""Domain error codes shared by the pricing, cancellation and share services."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    NOT_FOUND = "NOT_FOUND"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    INTERNAL = "INTERNAL"


HTTP_STATUS_BY_CODE = {
    ErrorCode.INVALID_ARGUMENT: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.PERMISSION_DENIED: 403,
    ErrorCode.INTERNAL: 500,
}


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    @property
    def status_code(self) -> int:
        return HTTP_STATUS_BY_CODE[self.code]


class InvalidArgumentError(DomainError):
    """Raised when input is malformed or outside its documented domain."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_ARGUMENT, message=message)


class NotFoundError(DomainError):
    """Raised when a booking or share link does not exist."""

    def __init__(self, message: str = "Not found") -> None:
        super().__init__(code=ErrorCode.NOT_FOUND, message=message)


class PermissionDeniedError(DomainError):
    """Raised for the wrong issuer/requester, or a revoked or expired share link."""

    def __init__(self, message: str = "Permission denied") -> None:
        super().__init__(code=ErrorCode.PERMISSION_DENIED, message=message)


class InternalError(DomainError):
    """Raised when the service cannot complete an operation through no fault of the caller."""

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(code=ErrorCode.INTERNAL, message=message)
