"""
Authentication Service

Resolves the caller identity of a request. A bearer JWT yields an
authenticated app identity; without one, the caller falls back to the
``userId`` parameter (voice-assistant clients cannot send app tokens).
"""

import datetime
from typing import Any, Dict, Optional

import jwt

from ..models.user import Caller


class AuthenticationError(Exception):
    """A bearer token was presented but could not be verified."""


class AuthService:
    """
    Authentication service for verifying and issuing JWT tokens.
    """

    def __init__(self, jwt_secret: str, algorithm: str = "HS256", expiration_days: int = 7):
        """
        Args:
            jwt_secret: Secret key for JWT token signing
            algorithm: JWT signing algorithm
            expiration_days: Lifetime of issued tokens
        """
        self.jwt_secret = jwt_secret
        self.algorithm = algorithm
        self.expiration_days = expiration_days

    def create_token(self, user_id: str) -> str:
        """Issue a signed token for ``user_id``."""
        payload = {
            "user_id": user_id,
            "exp": datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(days=self.expiration_days)
        }
        return jwt.encode(payload, self.jwt_secret, algorithm=self.algorithm)

    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode a JWT token.

        Returns:
            Dictionary with success status and user id or error
        """
        try:
            if not token:
                return {"success": False, "error": "Token is required"}

            payload = jwt.decode(token, self.jwt_secret, algorithms=[self.algorithm])
            user_id = payload.get("user_id") or payload.get("sub")

            if not user_id:
                return {"success": False, "error": "Invalid token payload"}

            return {"success": True, "user_id": str(user_id)}

        except jwt.ExpiredSignatureError:
            return {"success": False, "error": "Token has expired"}
        except jwt.InvalidTokenError:
            return {"success": False, "error": "Invalid token"}

    def resolve_caller(self, auth_header: Optional[str], params: Dict[str, Any]) -> Caller:
        """
        Build the request's Caller.

        Raises:
            AuthenticationError: If a bearer token is present but invalid
        """
        if auth_header and auth_header.startswith('Bearer '):
            token = auth_header.split(' ', 1)[1].strip()
            result = self.verify_token(token)
            if not result['success']:
                raise AuthenticationError(result['error'])
            return Caller(identity=result['user_id'], authenticated=True)

        user_id = params.get('userId')
        user_id = str(user_id).strip() if user_id is not None else None
        return Caller(identity=user_id or None, authenticated=False)


# Global service instance
_auth_service = None


def get_auth_service() -> Optional[AuthService]:
    """Get the global auth service instance."""
    return _auth_service


def initialize_auth_service(jwt_secret: str, algorithm: str = "HS256",
                            expiration_days: int = 7) -> Optional[AuthService]:
    """Initialize the global auth service instance."""
    global _auth_service
    if not jwt_secret:
        print("JWT secret not configured, bearer tokens will be rejected")
        _auth_service = None
        return None
    _auth_service = AuthService(jwt_secret, algorithm, expiration_days)
    return _auth_service
