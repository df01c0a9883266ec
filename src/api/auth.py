"""Authentication endpoints for API clients and the browser flow."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, RedirectResponse, Response
from pydantic import ValidationError as PydanticValidationError

from src.api.dependencies import (
    SessionGate,
    client_policy,
    get_credential_store,
    get_settings,
    get_token_service,
    read_payload,
)
from src.api.pages import render_page
from src.config import SESSION_COOKIE_NAME, Settings
from src.errors import AppError, AuthError, AuthPolicy, NotFoundError, ValidationError
from src.models.user import User
from src.schemas.auth import AuthResponse, UserLogin, UserResponse, UserSignup
from src.services.auth import Identity, TokenService
from src.services.credentials import CredentialStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

# Bodies are read by hand so one path serves JSON and form posts alike.
SIGNUP_BODY = {"requestBody": {"content": {"application/json": {"schema": UserSignup.model_json_schema()}}}}
LOGIN_BODY = {"requestBody": {"content": {"application/json": {"schema": UserLogin.model_json_schema()}}}}


def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    """Attach the session cookie used by the browser flow."""
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        max_age=settings.session_max_age,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
    )


def authenticated_response(
    user: User,
    tokens: TokenService,
    settings: Settings,
    policy: AuthPolicy,
    status_code: int,
) -> Response:
    """Token in the body for API clients, cookie plus redirect for browsers."""
    token = tokens.issue(user)
    if policy == AuthPolicy.INTERACTIVE:
        response = RedirectResponse(settings.post_login_path, status_code=status.HTTP_303_SEE_OTHER)
        set_session_cookie(response, token, settings)
        return response

    body = AuthResponse(token=token, user=UserResponse.model_validate(user))
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    openapi_extra=SIGNUP_BODY,
)
async def signup(
    request: Request,
    store: Annotated[CredentialStore, Depends(get_credential_store)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """Register a new user."""
    policy = client_policy(request)
    payload = await read_payload(request, policy)

    try:
        try:
            data = UserSignup.model_validate(payload)
        except PydanticValidationError as e:
            raise ValidationError.from_errors(
                e.errors(), "Name, email and a password of 6 to 72 characters are required"
            ) from e

        user = store.create_user(data.name, data.email, data.password)
    except AppError as e:
        if policy == AuthPolicy.API:
            raise
        return render_page(
            request,
            "signup.html",
            status_code=e.status_code,
            error=e.message,
            name=payload.get("name"),
            email=payload.get("email"),
        )

    return authenticated_response(user, tokens, settings, policy, status.HTTP_201_CREATED)


@router.post("/login", response_model=AuthResponse, openapi_extra=LOGIN_BODY)
async def login(
    request: Request,
    store: Annotated[CredentialStore, Depends(get_credential_store)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """Login with email and password."""
    policy = client_policy(request)
    payload = await read_payload(request, policy)

    try:
        try:
            credentials = UserLogin.model_validate(payload)
        except PydanticValidationError as e:
            raise ValidationError.from_errors(e.errors(), "Email and password are required") from e

        user = store.authenticate(credentials.email, credentials.password)
        if user is None:
            logger.info(f"Failed login for {credentials.email}")
            raise AuthError("Invalid email or password")
    except AppError as e:
        if policy == AuthPolicy.API:
            raise
        return render_page(
            request,
            "login.html",
            status_code=e.status_code,
            error=e.message,
            email=payload.get("email"),
        )

    logger.info(f"User logged in: {user.email}")
    return authenticated_response(user, tokens, settings, policy, status.HTTP_200_OK)


@router.post("/logout")
async def logout(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
):
    """Logout: clear the browser session; API clients discard their token."""
    if client_policy(request) == AuthPolicy.INTERACTIVE:
        response: Response = RedirectResponse(settings.login_path, status_code=status.HTTP_303_SEE_OTHER)
    else:
        response = JSONResponse({"message": "Logged out successfully"})
    response.delete_cookie(
        SESSION_COOKIE_NAME,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
    )
    return response


@router.get("/me", response_model=UserResponse)
def get_me(
    identity: Annotated[Identity, Depends(SessionGate(AuthPolicy.API))],
    store: Annotated[CredentialStore, Depends(get_credential_store)],
):
    """Get current user information."""
    user = store.find_user_by_id(identity.user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user
