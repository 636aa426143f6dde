"""
User models for the Pantrify application.

Handles user accounts and the result type returned by account operations.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from typing import List, Optional


@dataclass
class User:
    """
    User model for authentication and account management.
    Owns its pantry ingredients and recipes (deleted along with the user).
    """
    id: int
    email: str
    username: str
    password_hash: str
    first_name: str = ""
    last_name: str = ""
    phone_number: Optional[str] = None
    date_of_birth: Optional[date] = None
    sex: Optional[str] = None
    hours_spent: float = 0.0
    created_at: datetime = field(default_factory=datetime.now)
    
    def get_display_name(self) -> str:
        """Get user's display name"""
        if self.first_name and self.last_name:
            return f"{self.first_name} {self.last_name}"
        elif self.username:
            return self.username
        else:
            return self.email.split('@')[0]
    
    def get_join_date_label(self) -> str:
        """Join date formatted like 'Aug 2025'"""
        return self.created_at.strftime("%b %Y")


@dataclass
class AccountResult:
    """
    Outcome of an account operation (signup, login, password change).
    Carries the user on success or the user-facing validation errors.
    """
    user: Optional[User] = None
    errors: List[str] = field(default_factory=list)
    
    @property
    def success(self) -> bool:
        return self.user is not None and not self.errors
    
    @property
    def error(self) -> Optional[str]:
        """First error message, for inline display"""
        return self.errors[0] if self.errors else None
    
    def add_error(self, message: str) -> 'AccountResult':
        self.errors.append(message)
        return self
