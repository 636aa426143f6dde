#!/usr/bin/env python3
"""
Test script for authentication service functionality.
Tests signup validation, login methods, profile edits, password changes,
session time tracking and account deletion.
"""

import sys
from datetime import date, datetime, timedelta
from pathlib import Path

import pytest

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent))

from services.auth_service import AuthService, LoginMethod
from services.database_service import DatabaseService
from services.pantry_service import PantryService
from services.recipe_service import RecipeService


def setup_auth():
    db = DatabaseService(":memory:")
    return db, AuthService(db)


def register_sample(auth, **overrides):
    fields = dict(
        first_name="Ada", last_name="Lovelace", email="ada@example.com", username="ada",
        password="secret123", confirm_password="secret123", phone_number="555-0100",
        date_of_birth=date(1990, 12, 10), sex="Female"
    )
    fields.update(overrides)
    return auth.register_user(**fields)


def test_register_user():
    print("Testing user registration...")
    db, auth = setup_auth()

    result = register_sample(auth)
    assert result.success, result.errors
    user = result.user
    assert user.id > 0
    assert user.get_display_name() == "Ada Lovelace"
    assert user.date_of_birth == date(1990, 12, 10)
    assert user.password_hash != "secret123"
    assert auth.verify_password("secret123", user.password_hash)

    print("[OK] User registered with hashed password")


def test_register_validation():
    print("Testing registration validation...")
    db, auth = setup_auth()
    register_sample(auth)

    assert register_sample(auth, first_name=" ").error == "All required fields must be filled"
    assert register_sample(auth, username="").error == "All required fields must be filled"
    assert register_sample(auth, confirm_password="other").error == "Passwords do not match"
    assert register_sample(auth, email="ADA@Example.com", username="ada2").error == "Email already exists"
    assert register_sample(auth, email="new@example.com", username="ADA").error == "Username already exists"
    assert db.get_database_stats()["users"] == 1

    print("[OK] Invalid signups rejected")


@pytest.mark.parametrize("method,identifier", [
    (LoginMethod.EMAIL, "ADA@example.com"),
    (LoginMethod.USERNAME, "Ada"),
    (LoginMethod.PHONE, "555-0100"),
])
def test_login_methods(method, identifier):
    db, auth = setup_auth()
    registered = register_sample(auth).user

    result = auth.authenticate_user(identifier, "secret123", method)
    assert result.success
    assert result.user.id == registered.id


def test_login_failures():
    print("Testing login failures...")
    db, auth = setup_auth()
    register_sample(auth)

    assert auth.authenticate_user("", "secret123").error == "Please enter all fields"
    assert auth.authenticate_user("ada@example.com", "").error == "Please enter all fields"
    assert auth.authenticate_user("ada@example.com", "wrong").error == "Invalid email or password"
    assert auth.authenticate_user("nobody", "secret123", LoginMethod.USERNAME).error == \
        "Invalid username or password"
    # phone numbers match exactly
    assert auth.authenticate_user("5550100", "secret123", LoginMethod.PHONE).error == \
        "Invalid phone or password"

    print("[OK] Bad credentials rejected")


def test_change_password():
    print("Testing password change...")
    db, auth = setup_auth()
    user = register_sample(auth).user

    assert auth.change_password(user.id, "", "").error == "Password cannot be empty"
    assert auth.change_password(user.id, "newpass", "other").error == "Passwords do not match"

    assert auth.change_password(user.id, "newpass", "newpass").success
    assert auth.authenticate_user("ada", "newpass", LoginMethod.USERNAME).success
    assert not auth.authenticate_user("ada", "secret123", LoginMethod.USERNAME).success

    print("[OK] Password changed")


def test_update_profile():
    print("Testing profile edits...")
    db, auth = setup_auth()
    user = register_sample(auth).user

    result = auth.update_profile(user.id, " Augusta ", "King", "countess", "augusta@example.com", "")
    assert result.success, result.errors
    assert result.user.get_display_name() == "Augusta King"
    assert result.user.username == "countess"
    assert result.user.phone_number is None
    assert auth.authenticate_user("augusta@example.com", "secret123").success
    assert not auth.authenticate_user("ada@example.com", "secret123").success

    # keeping or re-casing your own email and username is allowed
    same = auth.update_profile(user.id, "Augusta", "King", "Countess", "AUGUSTA@example.com", "555-0199")
    assert same.success, same.errors
    assert same.user.phone_number == "555-0199"

    print("[OK] Profile details saved")


def test_update_profile_validation():
    print("Testing profile edit validation...")
    db, auth = setup_auth()
    user = register_sample(auth).user
    register_sample(auth, email="grace@example.com", username="grace")

    assert auth.update_profile(user.id, "", "Lovelace", "ada", "ada@example.com").error == \
        "All required fields must be filled"
    assert auth.update_profile(user.id, "Ada", "Lovelace", "ada", "GRACE@example.com").error == \
        "Email already exists"
    assert auth.update_profile(user.id, "Ada", "Lovelace", "Grace", "ada@example.com").error == \
        "Username already exists"

    unchanged = db.get_user_by_id(user.id)
    assert unchanged.email == "ada@example.com"
    assert unchanged.username == "ada"
    assert unchanged.first_name == "Ada"

    print("[OK] Invalid profile edits rejected")


def test_record_session_accumulates_hours():
    db, auth = setup_auth()
    user = register_sample(auth).user
    start = datetime(2025, 8, 1, 9, 0)

    assert auth.record_session(user.id, start, start + timedelta(hours=2)) == pytest.approx(2.0)
    auth.record_session(user.id, start, start + timedelta(minutes=30))
    assert db.get_user_by_id(user.id).hours_spent == pytest.approx(2.5)
    print("[OK] Session hours recorded")


def test_delete_account_cascades():
    print("Testing account deletion...")
    db, auth = setup_auth()
    user = register_sample(auth).user
    other = register_sample(auth, email="grace@example.com", username="grace").user

    pantry = PantryService(db)
    recipes = RecipeService(db, pantry)
    pantry.add_ingredient(user.id, "Egg", "pieces", "pcs", 2)
    recipes.create_recipe(user.id, "Boiled Egg", ["Egg"], ["Boil."])
    pantry.add_ingredient(other.id, "Milk", "liters", "L", 1)

    assert auth.delete_account(user.id)
    assert db.get_user_by_id(user.id) is None
    assert pantry.get_user_pantry(user.id) == []
    assert recipes.get_user_recipes(user.id) == []
    assert len(pantry.get_user_pantry(other.id)) == 1
    assert not auth.delete_account(user.id)

    print("[OK] Account and owned data deleted")


if __name__ == "__main__":
    test_register_user()
    test_register_validation()
    for method, identifier in [(LoginMethod.EMAIL, "ADA@example.com"), (LoginMethod.USERNAME, "Ada"),
                               (LoginMethod.PHONE, "555-0100")]:
        test_login_methods(method, identifier)
    print("[OK] All login methods work")
    test_login_failures()
    test_change_password()
    test_update_profile()
    test_update_profile_validation()
    test_record_session_accumulates_hours()
    test_delete_account_cascades()
    print("\n[SUCCESS] All authentication tests passed!")
