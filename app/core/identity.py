"""
Identity provider - Firebase Authentication behind a small interface.

The provider is built in the application lifespan and reached through
``request.app.state.identity``; tests swap in a fake with the same interface.
Account-level side effects (disable, admin claim, delete) are mirrors of the
database flags, so permission failures there are logged and not raised.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import firebase_admin
from firebase_admin import auth as firebase_auth
from firebase_admin import exceptions as firebase_exceptions

logger = logging.getLogger(__name__)


@dataclass
class Identity:
    """Claims decoded from a verified ID token."""
    uid: str
    email: Optional[str] = None
    name: Optional[str] = None
    email_verified: bool = False
    is_admin: bool = False


class InvalidTokenError(Exception):
    """The token could not be verified (malformed, expired, revoked, wrong project)."""


class IdentityProvider(ABC):

    @abstractmethod
    def verify_token(self, token: str) -> Identity:
        """Verify an ID token. Raises InvalidTokenError."""

    @abstractmethod
    def set_disabled(self, uid: str, disabled: bool) -> bool:
        """Mirror the disabled flag on the identity record. Returns False if not applied."""

    @abstractmethod
    def set_admin_claim(self, uid: str, is_admin: bool) -> bool:
        """Mirror the admin flag as a custom claim. Returns False if not applied."""

    @abstractmethod
    def delete_user(self, uid: str) -> bool:
        """Delete the identity record. Returns False if not applied."""


class FirebaseIdentityProvider(IdentityProvider):

    def __init__(self, app: firebase_admin.App):
        self.app = app

    def verify_token(self, token: str) -> Identity:
        try:
            decoded = firebase_auth.verify_id_token(token, app=self.app)
        except firebase_auth.ExpiredIdTokenError as e:
            raise InvalidTokenError("Token expired") from e
        except (firebase_auth.InvalidIdTokenError, ValueError) as e:
            raise InvalidTokenError(f"Invalid token: {e}") from e
        except firebase_exceptions.FirebaseError as e:
            logger.error(f"Token verification failed: {e}")
            raise InvalidTokenError("Token verification failed") from e

        return Identity(
            uid=decoded["uid"],
            email=decoded.get("email"),
            name=decoded.get("name"),
            email_verified=bool(decoded.get("email_verified", False)),
            is_admin=decoded.get("admin") is True,
        )

    def set_disabled(self, uid: str, disabled: bool) -> bool:
        try:
            firebase_auth.update_user(uid, disabled=disabled, app=self.app)
            return True
        except firebase_exceptions.FirebaseError as e:
            logger.warning(f"Could not update Firebase Auth status for {uid}: {e}")
            return False

    def set_admin_claim(self, uid: str, is_admin: bool) -> bool:
        try:
            firebase_auth.set_custom_user_claims(uid, {"admin": is_admin}, app=self.app)
            return True
        except firebase_exceptions.FirebaseError as e:
            logger.warning(f"Could not update Firebase Auth custom claims for {uid}: {e}")
            return False

    def delete_user(self, uid: str) -> bool:
        try:
            firebase_auth.delete_user(uid, app=self.app)
            return True
        except firebase_auth.UserNotFoundError:
            return True
        except firebase_exceptions.FirebaseError as e:
            logger.warning(f"Could not delete {uid} from Firebase Auth: {e}")
            return False
