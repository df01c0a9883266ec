"""FastAPI dependencies for authentication and stores."""

import json
from typing import Annotated, Any

from fastapi import Depends, Request
from fastapi.security import APIKeyCookie, HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from src.config import SESSION_COOKIE_NAME, Settings
from src.database import get_db
from src.errors import AuthError, AuthPolicy, InvalidTokenError, ValidationError
from src.services.auth import Identity, TokenService
from src.services.credentials import CredentialStore
from src.services.telemetry import TelemetryStore

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

# auto_error=False: SessionGate decides how a missing token is answered
bearer_scheme = HTTPBearer(auto_error=False)
session_cookie = APIKeyCookie(name=SESSION_COOKIE_NAME, auto_error=False)


def get_settings(request: Request) -> Settings:
    """Settings the running application was built with."""
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    """Token service of the running application."""
    return request.app.state.token_service


def get_credential_store(
    db: Annotated[Session, Depends(get_db)],
) -> CredentialStore:
    """Get credential store bound to the request session."""
    return CredentialStore(db)


def get_telemetry_store(
    db: Annotated[Session, Depends(get_db)],
) -> TelemetryStore:
    """Get telemetry store bound to the request session."""
    return TelemetryStore(db)


class SessionGate:
    """Dependency that resolves the caller's identity or rejects the request.

    The token is taken from ``Authorization: Bearer <token>`` when that header
    is present, otherwise from the session cookie. A present header that
    HTTPBearer cannot parse (another scheme, no credentials) is a failure and
    does not fall back to the cookie. Failures raise AuthError carrying this
    gate's policy: API routes answer 401 with a JSON body, interactive routes
    redirect to the login page.
    """

    def __init__(self, policy: AuthPolicy):
        self.policy = policy

    def __call__(
        self,
        request: Request,
        bearer: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
        cookie_token: Annotated[str | None, Depends(session_cookie)],
    ) -> Identity:
        if bearer is not None:
            token = bearer.credentials
        elif "Authorization" in request.headers:
            raise AuthError("Malformed authorization header", policy=self.policy)
        else:
            token = cookie_token

        if not token:
            raise AuthError("Authentication required", policy=self.policy)

        try:
            return get_token_service(request).verify(token)
        except InvalidTokenError as e:
            e.policy = self.policy
            raise


def client_policy(request: Request) -> AuthPolicy:
    """Form posts come from the browser flow, everything else is an API client."""
    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    if content_type in FORM_CONTENT_TYPES:
        return AuthPolicy.INTERACTIVE
    return AuthPolicy.API


async def read_payload(request: Request, policy: AuthPolicy) -> dict[str, Any]:
    """Read a form or JSON body as a plain dict."""
    if policy == AuthPolicy.INTERACTIVE:
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}

    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError("Request body must be valid JSON") from e
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload
