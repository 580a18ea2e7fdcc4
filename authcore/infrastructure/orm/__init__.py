"""Infrastructure ORM Models"""

from .user_model import UserModel
from .otp_code_model import OtpCodeModel
from .session_model import SessionModel

__all__ = [
    'UserModel',
    'OtpCodeModel',
    'SessionModel'
]
