# polity/shared/exceptions.py
from typing import Optional

from fastapi import HTTPException, status


class BaseHTTPException(HTTPException):
    """
    Base class for domain exceptions.

    Subclasses set ``status_code`` and ``message`` at class level; a message
    passed to the constructor overrides the default one.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(
            status_code=type(self).status_code, detail=message or type(self).message
        )


# Authentication & Authorization Exceptions
class InvalidTokenError(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing or invalid token"
        )


class InsufficientPermissionsError(BaseHTTPException):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Insufficient permissions"


# Resource Not Found Exceptions
class RoleNotFoundError(BaseHTTPException):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Role not found"


class AmendmentNotFoundError(BaseHTTPException):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Amendment not found"


class CollaboratorNotFoundError(BaseHTTPException):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Collaborator not found"


class MembershipNotFoundError(BaseHTTPException):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Membership not found"


class ParticipantNotFoundError(BaseHTTPException):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Participant not found"


# Validation / Request Exceptions
class InvalidWorkflowTransitionError(BaseHTTPException):
    status_code = status.HTTP_409_CONFLICT
    message = "Workflow transition not allowed"


# Write path
class WriteFailedError(BaseHTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Failed to save changes. Please try again."
