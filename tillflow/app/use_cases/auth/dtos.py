"""
Authentication Use Case DTOs (Data Transfer Objects)

Command, context and response classes for the auth domain.
Provides type safety and clear contracts between layers.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from tillflow.domain.entities import Role, Session, User


# ============================================================================
# Context
# ============================================================================


class RequestContext(BaseModel):
    """
    What a use case may know about the inbound request.

    Built by the API layer from cookies and headers so that session
    resolution never reaches into framework globals.
    """

    session_token: Optional[str] = None
    ip_address: Optional[str] = None


class AuthenticatedUser(BaseModel):
    """Detached snapshot of the signed-in user and the session that proved it"""

    id: UUID
    business_id: UUID
    email: str
    name: str
    role: Role
    active: bool
    two_factor_enabled: bool
    session_id: UUID

    @classmethod
    def from_entities(cls, session: Session, user: User) -> "AuthenticatedUser":
        return cls(
            id=user.id,
            business_id=user.business_id,
            email=user.email,
            name=user.name,
            role=user.role,
            active=user.active,
            two_factor_enabled=user.two_factor_enabled,
            session_id=session.id,
        )


# ============================================================================
# Commands
# ============================================================================


class RegisterCommand(BaseModel):
    """Self-service signup of a new business and its owner"""

    business_name: str
    owner_name: str
    email: str
    password: str
    currency: str = "GHS"


class LoginCommand(BaseModel):
    """Credentials plus the optional authenticator code"""

    email: str
    password: str
    otp: Optional[str] = None
    ip_address: Optional[str] = None


class ConfirmPasswordResetCommand(BaseModel):
    """New password submitted from the emailed reset link"""

    token: str
    new_password: str
    confirm_password: str


# ============================================================================
# Response DTOs
# ============================================================================


class UserInfo(BaseModel):
    """User information in authentication responses"""

    id: str
    email: str
    name: str
    role: str
    business_id: str


class IssuedSession(BaseModel):
    """
    A freshly created session.

    ``token`` is the only copy of the raw cookie value; the store keeps its
    digest.
    """

    token: str
    session_id: str
    expires_at: datetime
    user: UserInfo


class LogoutResponse(BaseModel):
    status: str
    message: str


class PasswordResetResponse(BaseModel):
    status: str
    message: str
