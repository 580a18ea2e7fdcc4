"""Credential and Google sign-in with OTP email verification"""

__version__ = "1.0.0"
