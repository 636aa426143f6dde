"""
Authentication service for Pantrify application.

Handles signup validation, login by email/username/phone, profile edits,
password changes, account deletion and time-in-app tracking. Email and username comparisons
are case-insensitive.
"""

from datetime import datetime, date
from enum import Enum
from typing import Optional

import bcrypt

from models import AccountResult
from services.database_service import DatabaseService, get_database_service
from utils import get_logger

logger = get_logger(__name__)


class LoginMethod(Enum):
    """Identifier types accepted at login"""
    EMAIL = "Email"
    USERNAME = "Username"
    PHONE = "Phone"


class AuthService:
    """
    Account operations. Validation failures come back in AccountResult.errors
    and leave the database untouched.
    """

    def __init__(self, database_service: Optional[DatabaseService] = None):
        self.db = database_service or get_database_service()

    # Password Management

    def hash_password(self, password: str) -> str:
        """Hash password using bcrypt"""
        salt = bcrypt.gensalt()
        hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
        return hashed.decode('utf-8')

    def verify_password(self, password: str, password_hash: str) -> bool:
        """Verify password against hash"""
        try:
            return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
        except ValueError as e:
            logger.error(f"Password verification error: {e}")
            return False

    # Registration and Login

    def register_user(self, first_name: str, last_name: str, email: str, username: str,
                      password: str, confirm_password: str, phone_number: Optional[str] = None,
                      date_of_birth: Optional[date] = None, sex: Optional[str] = None) -> AccountResult:
        """Validate and create a new account"""
        result = AccountResult()
        first_name, last_name = (first_name or "").strip(), (last_name or "").strip()
        email, username = (email or "").strip(), (username or "").strip()

        if not all([first_name, last_name, email, username]):
            return result.add_error("All required fields must be filled")

        if password != confirm_password:
            return result.add_error("Passwords do not match")

        if self.db.find_user_by_email(email):
            return result.add_error("Email already exists")

        if self.db.find_user_by_username(username):
            return result.add_error("Username already exists")

        user = self.db.create_user(
            email=email,
            username=username,
            password_hash=self.hash_password(password),
            first_name=first_name,
            last_name=last_name,
            phone_number=(phone_number or "").strip() or None,
            date_of_birth=date_of_birth,
            sex=(sex or "").strip() or None
        )

        if user is None:
            logger.error(f"User registration failed while saving: {email}")
            return result.add_error("Failed to save account. Please try again.")

        logger.info(f"User registered successfully: {email}")
        result.user = user
        return result

    def authenticate_user(self, identifier: str, password: str,
                          method: LoginMethod = LoginMethod.EMAIL) -> AccountResult:
        """Log in with an email, username or phone number and a password"""
        result = AccountResult()
        identifier = (identifier or "").strip()

        if not identifier or not password:
            return result.add_error("Please enter all fields")

        if method == LoginMethod.EMAIL:
            user = self.db.find_user_by_email(identifier)
        elif method == LoginMethod.USERNAME:
            user = self.db.find_user_by_username(identifier)
        else:
            user = self.db.find_user_by_phone(identifier)

        if user is None or not self.verify_password(password, user.password_hash):
            logger.warning(f"Login failed for {identifier}")
            return result.add_error(f"Invalid {method.value.lower()} or password")

        logger.info(f"Login success: {user.email}")
        result.user = user
        return result

    # Profile

    def update_profile(self, user_id: int, first_name: str, last_name: str, username: str,
                       email: str, phone_number: Optional[str] = None) -> AccountResult:
        """
        Save edited profile details.

        Email and username must stay unique (ignoring case) among other users;
        a user may keep or re-case their own.
        """
        result = AccountResult()
        first_name, last_name = (first_name or "").strip(), (last_name or "").strip()
        email, username = (email or "").strip(), (username or "").strip()

        if not all([first_name, last_name, email, username]):
            return result.add_error("All required fields must be filled")

        owner = self.db.find_user_by_email(email)
        if owner and owner.id != user_id:
            return result.add_error("Email already exists")

        owner = self.db.find_user_by_username(username)
        if owner and owner.id != user_id:
            return result.add_error("Username already exists")

        saved = self.db.update_user_details(
            user_id, first_name, last_name, username, email,
            (phone_number or "").strip() or None
        )
        if not saved:
            return result.add_error("Failed to save details. Please try again.")

        logger.info(f"Profile updated for user {user_id}")
        result.user = self.db.get_user_by_id(user_id)
        return result

    def change_password(self, user_id: int, new_password: str, confirm_password: str) -> AccountResult:
        result = AccountResult()

        if not new_password:
            return result.add_error("Password cannot be empty")

        if new_password != confirm_password:
            return result.add_error("Passwords do not match")

        if not self.db.update_password_hash(user_id, self.hash_password(new_password)):
            return result.add_error("Failed to save password. Please try again.")

        logger.info(f"Password changed for user {user_id}")
        result.user = self.db.get_user_by_id(user_id)
        return result

    def delete_account(self, user_id: int) -> bool:
        """Delete the user together with their pantry and recipes"""
        deleted = self.db.delete_user(user_id)
        if deleted:
            logger.info(f"Deleted account {user_id}")
        else:
            logger.error(f"Failed to delete account {user_id}")
        return deleted

    # Usage Tracking

    def record_session(self, user_id: int, started_at: datetime,
                       ended_at: Optional[datetime] = None) -> float:
        """Add the session length in hours to the user's total; returns the hours added"""
        ended_at = ended_at or datetime.now()
        hours = max((ended_at - started_at).total_seconds(), 0) / 3600
        if not self.db.add_hours_spent(user_id, hours):
            logger.error(f"Failed to record session time for user {user_id}")
            return 0.0
        return hours


# Global service instance
_auth_service: Optional[AuthService] = None


def get_auth_service(database_service: Optional[DatabaseService] = None) -> AuthService:
    """Get singleton auth service instance"""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService(database_service)
    return _auth_service
