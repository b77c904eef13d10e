# app/adapters/inbound/api/v1/endpoints/auth_endpoint.py

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, Security, status

from app.adapters.inbound.api.deps import (
    authorization_header,
    get_auth_service,
    get_current_claims,
)
from app.adapters.outbound.security.jwt_cookies import jwt_cookie_manager
from app.application.use_cases.auth_use_cases import AsyncAuthService, AuthSession
from app.application.dtos.user_dto import (
    ChangePasswordRequest,
    LoginResponse,
    LogoutAllResponse,
    MessageResponse,
    SessionOutput,
    UserLogin,
    UserOutput,
)
from app.domain.models.identity_claims import IdentityClaims
from app.shared.utils.error_responses import auth_errors, common_errors, token_errors
from app.shared.utils.messages_utils import get_message
from app.shared.utils.success_responses import auth_success, common_success

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
    responses={404: {"description": "Not found"}}
)


def _session_response(response: Response, session: AuthSession) -> LoginResponse:
    """Put the refresh token in its cookie and the rest in the body."""
    jwt_cookie_manager.set_refresh_token_cookie(response, session.tokens.refresh_token)
    return LoginResponse(
        access_token=session.tokens.access_token,
        expires_at=session.tokens.expires_at,
        user=UserOutput.from_claims(session.claims),
    )


@router.post(
    "/login",
    response_model=LoginResponse,
    status_code=status.HTTP_200_OK,
    summary="Login user",
    description="Authenticates username and password. Returns the access token in the body "
                "and sets the refresh token as an HttpOnly cookie.",
    responses={**auth_success, **auth_errors}
)
async def login_user(
        user_input: UserLogin,
        response: Response,
        service: AsyncAuthService = Depends(get_auth_service),
):
    session = await service.login_user(user_input.username, user_input.password)
    return _session_response(response, session)


@router.post(
    "/refresh",
    response_model=LoginResponse,
    status_code=status.HTTP_200_OK,
    summary="Refresh authentication token",
    description="Issues a new token pair from the refresh token cookie and replaces the cookie.",
    responses={**auth_success, **token_errors}
)
async def refresh_token(
        request: Request,
        response: Response,
        service: AsyncAuthService = Depends(get_auth_service),
):
    session = await service.refresh_token(jwt_cookie_manager.get_token_from_cookie(request))
    return _session_response(response, session)


@router.post(
    "/logout",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Logout user",
    description="Clears the refresh cookie and blacklists the presented tokens. Always succeeds.",
    responses={**common_success, **common_errors}
)
async def logout_user(
        request: Request,
        response: Response,
        authorization: Optional[str] = Security(authorization_header),
        service: AsyncAuthService = Depends(get_auth_service),
):
    await service.logout_user(
        access_token=jwt_cookie_manager.extract_bearer_token(authorization),
        refresh_token=jwt_cookie_manager.get_token_from_cookie(request),
    )
    jwt_cookie_manager.unset_refresh_token_cookie(response)
    return MessageResponse(detail=get_message("logout_success"))


@router.post(
    "/logout-all",
    response_model=LogoutAllResponse,
    status_code=status.HTTP_200_OK,
    summary="Logout from every session",
    description="Invalidates every access and refresh token issued to the current user so far.",
    responses={**common_success, **token_errors}
)
async def logout_all(
        response: Response,
        claims: IdentityClaims = Depends(get_current_claims),
        service: AsyncAuthService = Depends(get_auth_service),
):
    version = await service.logout_all(claims)
    jwt_cookie_manager.unset_refresh_token_cookie(response)
    return LogoutAllResponse(detail=get_message("logout_all_success"), token_version=version)


@router.post(
    "/change-password",
    response_model=LoginResponse,
    status_code=status.HTTP_200_OK,
    summary="Change password",
    description="Verifies the current password, stores the new one and ends every other session. "
                "Returns a new token pair for this session.",
    responses={**auth_success, **auth_errors, **token_errors}
)
async def change_password(
        data: ChangePasswordRequest,
        response: Response,
        claims: IdentityClaims = Depends(get_current_claims),
        service: AsyncAuthService = Depends(get_auth_service),
):
    session = await service.change_password(claims, data.current_password, data.new_password)
    return _session_response(response, session)


@router.get(
    "/me",
    response_model=SessionOutput,
    summary="Current session",
    description="Returns the identity carried by the access token.",
    responses={**token_errors}
)
async def get_session_info(claims: IdentityClaims = Depends(get_current_claims)):
    return SessionOutput(user=UserOutput.from_claims(claims), session_id=claims.session_id)
