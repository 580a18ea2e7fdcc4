"""Authentication errors

Use cases raise these; the engine facade turns them into ``Failure`` results
so callers branch on ``code`` / ``category`` instead of parsing messages.
"""

from enum import Enum
from typing import Optional


class ErrorCategory(str, Enum):
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INVALID = "invalid"
    VALIDATION = "validation"
    DELIVERY_FAILURE = "delivery_failure"


class AuthErrorCode(str, Enum):
    EMAIL_ALREADY_REGISTERED = "email_already_registered"
    INVALID_CREDENTIALS = "invalid_credentials"
    WRONG_METHOD = "wrong_method"
    USER_NOT_FOUND = "user_not_found"
    INVALID_OR_EXPIRED_OTP = "invalid_or_expired_otp"
    GOOGLE_ACCOUNT_ONLY = "google_account_only"
    CREDENTIAL_ACCOUNT_EXISTS = "credential_account_exists"
    INVALID_TOKEN = "invalid_token"
    SESSION_EXPIRED = "session_expired"
    GOOGLE_ID_IN_USE = "google_id_in_use"
    DELIVERY_FAILED = "delivery_failed"


class DeliveryFailureReason(str, Enum):
    RATE_LIMIT = "rate_limit"
    CONFIGURATION = "configuration"
    SEND = "send"


class AuthError(Exception):
    code: AuthErrorCode
    category: ErrorCategory
    default_message = "Authentication failed."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class EmailAlreadyRegistered(AuthError):
    code = AuthErrorCode.EMAIL_ALREADY_REGISTERED
    category = ErrorCategory.CONFLICT
    default_message = "Email is already registered. Please log in."


class InvalidCredentials(AuthError):
    code = AuthErrorCode.INVALID_CREDENTIALS
    category = ErrorCategory.INVALID
    default_message = "Invalid email or password."


class WrongMethod(AuthError):
    code = AuthErrorCode.WRONG_METHOD
    category = ErrorCategory.CONFLICT
    default_message = "This email is registered with Google. Please sign in with Google."


class UserNotFound(AuthError):
    code = AuthErrorCode.USER_NOT_FOUND
    category = ErrorCategory.NOT_FOUND
    default_message = "User not found."


class InvalidOrExpiredOtp(AuthError):
    code = AuthErrorCode.INVALID_OR_EXPIRED_OTP
    category = ErrorCategory.INVALID
    default_message = "The OTP code is invalid or has expired."


class GoogleAccountOnly(AuthError):
    code = AuthErrorCode.GOOGLE_ACCOUNT_ONLY
    category = ErrorCategory.CONFLICT
    default_message = "This account is registered with Google. Please sign in with Google."


class CredentialAccountExists(AuthError):
    code = AuthErrorCode.CREDENTIAL_ACCOUNT_EXISTS
    category = ErrorCategory.CONFLICT
    default_message = "This email is registered with a password. Please log in with email and password."


class GoogleIdInUse(AuthError):
    code = AuthErrorCode.GOOGLE_ID_IN_USE
    category = ErrorCategory.CONFLICT
    default_message = "This Google account is already linked to a different email."


class InvalidToken(AuthError):
    code = AuthErrorCode.INVALID_TOKEN
    category = ErrorCategory.INVALID
    default_message = "Invalid refresh token."


class SessionExpired(AuthError):
    code = AuthErrorCode.SESSION_EXPIRED
    category = ErrorCategory.INVALID
    default_message = "Refresh token has expired."


class DeliveryFailure(AuthError):
    code = AuthErrorCode.DELIVERY_FAILED
    category = ErrorCategory.DELIVERY_FAILURE

    _messages = {
        DeliveryFailureReason.RATE_LIMIT: "Email sending limit reached. Please try again later.",
        DeliveryFailureReason.CONFIGURATION: "Email delivery is misconfigured.",
        DeliveryFailureReason.SEND: "The email could not be sent.",
    }

    def __init__(self, reason: DeliveryFailureReason, message: Optional[str] = None):
        self.reason = reason
        super().__init__(message or self._messages[reason])
