"""
Domain Enums - Business domain enumerations
"""

from enum import Enum


class UserType(str, Enum):
    MEMBER = "member"
    ADMIN = "admin"
    MODERATOR = "moderator"


class LoginType(str, Enum):
    CREDENTIAL = "credential"
    GOOGLE = "google"


class OtpPurpose(str, Enum):
    EMAIL_VERIFICATION = "email_verification"
    PASSWORD_RESET = "password_reset"
