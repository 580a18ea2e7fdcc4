"""Google ID token verification"""

import logging
from typing import Optional

from google.auth.transport import requests
from google.oauth2 import id_token

from ...application.dtos.user_dtos import GoogleOAuthDto


logger = logging.getLogger(__name__)


class GoogleTokenError(ValueError):
    pass


class GoogleIdentityService:
    """Turns a Google ID token into the verified profile claims the engine consumes"""

    def __init__(self, client_id: Optional[str]):
        self.client_id = client_id

    def verify_id_token(self, google_token: str) -> GoogleOAuthDto:
        if not self.client_id:
            raise GoogleTokenError("Google OAuth is not configured on the server")

        try:
            idinfo = id_token.verify_oauth2_token(
                google_token,
                requests.Request(),
                self.client_id
            )
        except ValueError as e:
            logger.info("Rejected Google ID token: %s", e)
            raise GoogleTokenError("Invalid Google token") from e

        if not idinfo.get('email') or not idinfo.get('email_verified', False):
            raise GoogleTokenError("Google account email is not verified")

        full_name = idinfo.get('name') or " ".join(
            part for part in (idinfo.get('given_name'), idinfo.get('family_name')) if part
        )

        return GoogleOAuthDto(
            email=idinfo['email'],
            full_name=full_name or idinfo['email'],
            profile_photo=idinfo.get('picture'),
            google_id=idinfo['sub']
        )
