"""Offline identity for Minecraft."""

from pydantic import BaseModel

from ..core.arguments import LEGACY_USER_TYPE, OFFLINE_ACCESS_TOKEN, OFFLINE_UUID
from ..errors import InvalidUsernameError

DEFAULT_USERNAME = "Player"


class OfflineProfile(BaseModel):
    name: str
    uuid: str = OFFLINE_UUID
    access_token: str = OFFLINE_ACCESS_TOKEN
    user_type: str = LEGACY_USER_TYPE
    xuid: str = "0"


class OfflineAuthenticator:
    """Offline mode authenticator with username only."""

    @staticmethod
    async def authenticate(username: str = DEFAULT_USERNAME) -> OfflineProfile:
        """Authenticate offline with given username."""
        if not username or len(username) > 16:
            raise InvalidUsernameError(username)

        return OfflineProfile(name=username)
