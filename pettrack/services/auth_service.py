"""
Authentication service: resolves the current owner from a bearer token.

Credentials are issued by the identity provider; this service only reads the
identity a token carries.
"""

from datetime import timedelta

from fastapi import Depends, HTTPException, status
from jose import JWTError
from pydantic import ValidationError
from sqlalchemy.orm import Session

from pettrack.core.config import settings
from pettrack.core.security import create_access_token, decode_access_token, oauth2_scheme
from pettrack.db.database import get_db
from pettrack.models.user import User
from pettrack.schemas.token import TokenPayload


class AuthService:
    """Service for handling authentication operations."""

    @staticmethod
    def generate_access_token(user_id: int) -> str:
        """
        Generate an access token for a user.

        Args:
            user_id: The ID of the user to generate token for

        Returns:
            JWT access token string
        """
        access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        return create_access_token(subject=user_id, expires_delta=access_token_expires)

    @staticmethod
    def get_current_user(
        db: Session = Depends(get_db), token: str = Depends(oauth2_scheme)
    ) -> User:
        """
        Decode JWT token and return the current user.

        Args:
            db: Database session
            token: JWT token from request

        Returns:
            User object for the authenticated user

        Raises:
            HTTPException: If token is invalid or user not found
        """
        try:
            token_data = TokenPayload(**decode_access_token(token))
            user_id = int(token_data.sub)  # type: ignore[arg-type]
        except (JWTError, ValidationError, TypeError, ValueError):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Could not validate credentials",
            )

        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user


# Create a singleton instance
auth_service = AuthService()
