"""Operation results returned by the authentication engine"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union

from ..domain.exceptions import AuthError, AuthErrorCode, DeliveryFailureReason, ErrorCategory


T = TypeVar("T")


@dataclass(frozen=True)
class ErrorDetail:
    code: AuthErrorCode
    category: ErrorCategory
    message: str
    delivery_reason: Optional[DeliveryFailureReason] = None

    @classmethod
    def from_exception(cls, error: AuthError) -> 'ErrorDetail':
        return cls(
            code=error.code,
            category=error.category,
            message=error.message,
            delivery_reason=getattr(error, "reason", None)
        )


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    error: ErrorDetail

    @property
    def ok(self) -> bool:
        return False

    @property
    def code(self) -> AuthErrorCode:
        return self.error.code

    @property
    def category(self) -> ErrorCategory:
        return self.error.category


Result = Union[Success[T], Failure]
