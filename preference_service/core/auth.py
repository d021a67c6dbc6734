"""
This module contains authentication dependencies for FastAPI routes.
It provides a way to retrieve the current authenticated user based on a JWT token.
Tokens are issued by the identity provider of the composing application, this service only verifies them.

Docs: https://fastapi.tiangolo.com/tutorial/security/
"""

import logging
from typing import Annotated, Literal

from fastapi import Depends, Security, status
from fastapi.security import OAuth2PasswordBearer, SecurityScopes
import jwt
from pydantic import BaseModel, ValidationError

from preference_service.core.exceptions import ServiceException
from preference_service.core.settings import Settings, SettingsDep

logger = logging.getLogger(__name__)

# Model representing the authenticated user data in JWT tokens
# The organization id is what org scoped preferences are keyed on.
# ----------------------------------------------------------------------------------------------------------------------


class AuthUser(BaseModel):
    id: str
    org_id: str = ""
    type: Literal["admin", "member"] = "member"
    email: str | None = None


class AuthException(BaseException):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__()


class Authenticator:
    def __init__(self, settings: Settings):
        super().__init__()
        self.settings = settings

    def jwt_encode(self, payload: dict[str, object]) -> str:
        return jwt.encode(  # pyright: ignore[reportUnknownMemberType]
            algorithm="HS256", key=self.settings.jwt_secret_key, payload=payload
        )

    def jwt_decode(self, token: str) -> dict[str, object]:
        return jwt.decode(  # pyright: ignore[reportUnknownMemberType]
            token, self.settings.jwt_secret_key, algorithms=["HS256"]
        )

    def user(self, access_token: str) -> AuthUser:
        """Extract the user information from the given JWT access token."""
        try:
            payload: dict[str, object] = self.jwt_decode(access_token)
        except jwt.PyJWTError as e:
            raise AuthException("JWT decode error") from e

        if payload.get("type") != "access":
            raise AuthException("Invalid JWT access token (wrong type)")

        user_data = payload.get("user")
        if user_data is None:
            raise AuthException("Invalid JWT access token (missing user data)")

        try:
            user = AuthUser.model_validate(user_data)
        except ValidationError as e:
            raise AuthException("AuthUser validation error") from e

        return user

    def scopes(self, token: str) -> set[str]:
        """Extract the scopes from the given JWT token."""
        try:
            payload: dict[str, object] = self.jwt_decode(token)
        except jwt.PyJWTError as e:
            raise AuthException("JWT decode error") from e

        scope_str = str(payload.get("scope", ""))
        return set(scope_str.split()) if scope_str else set()


def get_authenticator(settings: SettingsDep) -> Authenticator:
    return Authenticator(settings)


AuthenticatorDep = Annotated[Authenticator, Depends(get_authenticator)]


# Exceptions
# ----------------------------------------------------------------------------------------------------------------------


class AuthenticationFailedException(ServiceException):
    status_code = status.HTTP_401_UNAUTHORIZED
    type = "auth/authentication-failed"
    detail = "Authentication failed, please login again"

    def __init__(self, authenticate_value: str) -> None:
        headers = {"WWW-Authenticate": authenticate_value}
        super().__init__(headers=headers)


class AuthorizationFailedException(ServiceException):
    status_code = status.HTTP_403_FORBIDDEN
    type = "auth/authorization-failed"
    detail = "You do not have permission to access this resource"

    def __init__(self, authenticate_value: str) -> None:
        headers = {"WWW-Authenticate": authenticate_value}
        super().__init__(headers=headers)


# Dependency to get the current authenticated user
# ----------------------------------------------------------------------------------------------------------------------

oauth2_scheme = OAuth2PasswordBearer(
    scheme_name="JWT",
    tokenUrl="/api/auth/oauth2/token",
    scopes={
        "user": "Authenticated user access",
        "admin": "Organization administrator access",
    },
)


def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    authenticator: AuthenticatorDep,
    security_scopes: SecurityScopes,
) -> AuthUser:
    authenticate_value = "Bearer"
    if security_scopes.scopes:
        authenticate_value = f'Bearer scope="{security_scopes.scope_str}"'

    try:
        user = authenticator.user(token)
        scopes = authenticator.scopes(token)
    except AuthException as e:
        logger.warning("token validation failed", exc_info=True)
        raise AuthenticationFailedException(authenticate_value) from e

    if not set(security_scopes.scopes).issubset(scopes):
        logger.warning("authorization failed: required scopes=%s, token scopes=%s", security_scopes.scopes, scopes)
        raise AuthorizationFailedException(authenticate_value)

    return user


CurrentUserDep = Annotated[AuthUser, Security(get_current_user, scopes=["user"])]
CurrentAdminDep = Annotated[AuthUser, Security(get_current_user, scopes=["user", "admin"])]
