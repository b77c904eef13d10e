# app/application/dtos/user_dto.py

"""
Schemas for user and authentication data.

This module defines DTOs (Data Transfer Objects) for validating and
serializing data related to users, including login, token responses,
session information and profile management.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from app.application.dtos.base_dto import CustomBaseModel
from app.shared.utils.input_validation import InputValidator


class UserLogin(CustomBaseModel):
    """
    Schema for user login.

    Used for user authentication via username and password.
    """

    username: str = Field(
        ...,
        min_length=1,
        max_length=InputValidator.MAX_USERNAME_LENGTH,
        description="Username of the account (exact, case-sensitive match).",
    )
    password: str = Field(
        ...,
        min_length=1,
        max_length=InputValidator.MAX_PASSWORD_LENGTH,
        description="User's password used for authentication.",
    )


class UserOutput(CustomBaseModel):
    """
    Schema for returning user identity data.

    Used in login/refresh responses without exposing sensitive data.
    """
    id: int = Field(..., description="User's numeric identifier.")
    username: str = Field(..., description="Username.")
    role: str = Field(..., description="Role of the user.")
    organization_id: Optional[int] = Field(None, description="Organization the user belongs to.")
    organization_name: Optional[str] = Field(None, description="Name of the user's organization.")

    @classmethod
    def from_claims(cls, claims) -> "UserOutput":
        return cls(
            id=claims.user_id,
            username=claims.username,
            role=claims.role,
            organization_id=claims.organization_id,
            organization_name=claims.organization_name,
        )


class UserProfileOutput(UserOutput):
    """Profile of the current user, with sensitive fields already decrypted."""
    email: Optional[str] = Field(None, description="Email of the user.")
    phone: Optional[str] = Field(None, description="Phone number (stored encrypted).")
    is_active: bool = Field(..., description="Indicates if the user is active.")
    created_at: Optional[datetime] = Field(None, description="User creation date and time.")


class TokenData(CustomBaseModel):
    """Access/refresh pair produced by the token issuer."""
    access_token: str
    refresh_token: str
    expires_at: datetime = Field(..., description="Expiry of the access token.")


class LoginResponse(CustomBaseModel):
    """Body of a successful login or refresh. The refresh token travels only as a cookie."""
    access_token: str = Field(..., description="Short-lived bearer token.")
    expires_at: datetime = Field(..., description="Expiry of the access token.")
    user: UserOutput


class SessionOutput(CustomBaseModel):
    """Claims of the token used for the current request."""
    user: UserOutput
    session_id: Optional[str] = None


class ChangePasswordRequest(CustomBaseModel):
    current_password: str = Field(..., min_length=1, max_length=InputValidator.MAX_PASSWORD_LENGTH)
    new_password: str = Field(..., description="New password; must satisfy the password policy.")

    @field_validator("new_password")
    def validate_password_security(cls, v):
        """
        Validates the password to ensure minimum security requirements.

        Raises:
            ValueError: If the password doesn't meet requirements
        """
        is_valid, errors = InputValidator.validate_password(v)
        if not is_valid:
            raise ValueError("; ".join(errors))
        return v


class PhoneUpdate(CustomBaseModel):
    phone: str = Field(..., description="Phone number in international or local format.")

    @field_validator("phone")
    def validate_phone(cls, v):
        is_valid, error_msg = InputValidator.validate_phone(v)
        if not is_valid:
            raise ValueError(error_msg)
        return v.strip()


class MessageResponse(CustomBaseModel):
    success: bool = True
    detail: str


class LogoutAllResponse(MessageResponse):
    token_version: int = Field(..., description="New token version; older tokens are rejected.")
