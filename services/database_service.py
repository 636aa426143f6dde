"""
Database service for Pantrify application.

Handles all SQLite operations for users, pantry ingredients and recipes.
Ownership is expressed with explicit user_id foreign keys; deleting a user
cascades to everything the user owns.
"""

import sqlite3
import json
from contextlib import contextmanager
from datetime import datetime, date
from typing import List, Optional, Dict, Any

from models import Ingredient, Recipe, User
from utils import get_config, get_logger

logger = get_logger(__name__)


SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    email TEXT UNIQUE NOT NULL,
    username TEXT UNIQUE NOT NULL,
    password_hash TEXT NOT NULL,
    first_name TEXT DEFAULT '',
    last_name TEXT DEFAULT '',
    phone_number TEXT,
    date_of_birth TEXT,
    sex TEXT,
    hours_spent REAL DEFAULT 0,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS ingredients (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    name TEXT NOT NULL,
    normalized TEXT NOT NULL,
    unit_category TEXT NOT NULL,
    unit TEXT NOT NULL,
    quantity REAL NOT NULL CHECK (quantity >= 0),
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS recipes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER REFERENCES users(id) ON DELETE CASCADE,
    title TEXT NOT NULL,
    ingredient_keys TEXT NOT NULL DEFAULT '[]',
    display_ingredients TEXT NOT NULL DEFAULT '[]',
    instructions TEXT NOT NULL DEFAULT '[]',
    tags TEXT NOT NULL DEFAULT '[]',
    source_url TEXT,
    cook_time_minutes INTEGER,
    servings INTEGER,
    difficulty TEXT,
    is_planned INTEGER DEFAULT 0,
    is_cooked INTEGER DEFAULT 0,
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_ingredients_user ON ingredients(user_id);
CREATE INDEX IF NOT EXISTS idx_recipes_user ON recipes(user_id);
"""


class DatabaseService:
    """
    Centralized database service for all SQLite operations.
    Persistence failures are logged and reported as None/False.
    """

    def __init__(self, db_path: str = "pantrify.db"):
        self.db_path = db_path
        # Keep persistent connection for in-memory databases
        self._persistent_conn = None
        if db_path == ":memory:":
            self._persistent_conn = self._connect()
        self.initialize_database()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row  # Enable dict-like access
        conn.execute("PRAGMA foreign_keys=ON")
        return conn

    @contextmanager
    def get_connection(self):
        """Context manager for database connections with proper cleanup"""
        if self._persistent_conn:
            try:
                yield self._persistent_conn
            except Exception as e:
                self._persistent_conn.rollback()
                logger.error(f"Database error: {e}")
                raise
        else:
            conn = None
            try:
                conn = self._connect()
                yield conn
            except Exception as e:
                if conn:
                    conn.rollback()
                logger.error(f"Database error: {e}")
                raise
            finally:
                if conn:
                    conn.close()

    def initialize_database(self):
        """Create tables if they don't exist"""
        with self.get_connection() as conn:
            conn.executescript(SCHEMA_SQL)
            conn.commit()
        logger.info(f"Database ready: {self.db_path}")

    def get_database_stats(self) -> Dict[str, int]:
        """Row counts per table"""
        stats = {}
        for table in ['users', 'ingredients', 'recipes']:
            rows = self._fetch_rows(f"SELECT COUNT(*) FROM {table}", (), f"count {table}")
            stats[table] = rows[0][0] if rows else 0
        return stats

    # User Management Methods

    def create_user(self, email: str, username: str, password_hash: str, first_name: str = "",
                    last_name: str = "", phone_number: Optional[str] = None,
                    date_of_birth: Optional[date] = None, sex: Optional[str] = None) -> Optional[User]:
        """Create a new user account"""
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("""
                    INSERT INTO users (email, username, password_hash, first_name, last_name,
                                       phone_number, date_of_birth, sex, created_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    email, username, password_hash, first_name, last_name, phone_number,
                    date_of_birth.isoformat() if date_of_birth else None,
                    sex, datetime.now().isoformat()
                ))
                user_id = cursor.lastrowid
                conn.commit()

            return self.get_user_by_id(user_id)

        except sqlite3.Error as e:
            logger.error(f"Failed to create user {email}: {e}")
            return None

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        rows = self._fetch_rows("SELECT * FROM users WHERE id = ?", (user_id,), f"load user {user_id}")
        return self._row_to_user(rows[0]) if rows else None

    def find_user_by_email(self, email: str) -> Optional[User]:
        """Case-insensitive lookup by email"""
        return self._find_user("lower(email) = lower(?)", email)

    def find_user_by_username(self, username: str) -> Optional[User]:
        """Case-insensitive lookup by username"""
        return self._find_user("lower(username) = lower(?)", username)

    def find_user_by_phone(self, phone_number: str) -> Optional[User]:
        return self._find_user("phone_number = ?", phone_number)

    def _find_user(self, where: str, value: str) -> Optional[User]:
        rows = self._fetch_rows(
            f"SELECT * FROM users WHERE {where} ORDER BY id LIMIT 1", (value,), f"look up user {value}"
        )
        return self._row_to_user(rows[0]) if rows else None

    def update_user_details(self, user_id: int, first_name: str, last_name: str, username: str,
                            email: str, phone_number: Optional[str] = None) -> bool:
        """Update the editable profile fields"""
        return self._execute_update("""
            UPDATE users SET first_name = ?, last_name = ?, username = ?, email = ?, phone_number = ?
            WHERE id = ?
        """, (first_name, last_name, username, email, phone_number, user_id),
            f"update details for user {user_id}")

    def update_password_hash(self, user_id: int, password_hash: str) -> bool:
        return self._execute_update(
            "UPDATE users SET password_hash = ? WHERE id = ?", (password_hash, user_id),
            f"update password for user {user_id}"
        )

    def add_hours_spent(self, user_id: int, hours: float) -> bool:
        return self._execute_update(
            "UPDATE users SET hours_spent = hours_spent + ? WHERE id = ?", (hours, user_id),
            f"add hours for user {user_id}"
        )

    def delete_user(self, user_id: int) -> bool:
        """Delete a user; pantry and recipes are removed by cascade"""
        return self._execute_update("DELETE FROM users WHERE id = ?", (user_id,), f"delete user {user_id}")

    # Pantry Ingredient Methods

    def create_ingredient(self, ingredient: Ingredient) -> Optional[Ingredient]:
        """Insert a pantry ingredient, returning it with its new id"""
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("""
                    INSERT INTO ingredients (user_id, name, normalized, unit_category, unit, quantity, created_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                """, (
                    ingredient.user_id, ingredient.name, ingredient.normalized, ingredient.unit_category,
                    ingredient.unit, ingredient.quantity, ingredient.created_at.isoformat()
                ))
                ingredient_id = cursor.lastrowid
                conn.commit()

            return self.get_ingredient_by_id(ingredient_id)

        except sqlite3.Error as e:
            logger.error(f"Failed to create ingredient {ingredient.name}: {e}")
            return None

    def get_ingredient_by_id(self, ingredient_id: int) -> Optional[Ingredient]:
        rows = self._fetch_rows(
            "SELECT * FROM ingredients WHERE id = ?", (ingredient_id,), f"load ingredient {ingredient_id}"
        )
        return self._row_to_ingredient(rows[0]) if rows else None

    def get_user_ingredients(self, user_id: int) -> List[Ingredient]:
        """A user's pantry in the order items were added"""
        rows = self._fetch_rows("""
            SELECT * FROM ingredients WHERE user_id = ?
            ORDER BY created_at, id
        """, (user_id,), f"load pantry of user {user_id}")
        return [self._row_to_ingredient(row) for row in rows or []]

    def update_ingredient_quantity(self, ingredient_id: int, quantity: float) -> bool:
        return self._execute_update(
            "UPDATE ingredients SET quantity = ? WHERE id = ?", (quantity, ingredient_id),
            f"update quantity of ingredient {ingredient_id}"
        )

    def delete_ingredient(self, ingredient_id: int) -> bool:
        return self._execute_update(
            "DELETE FROM ingredients WHERE id = ?", (ingredient_id,), f"delete ingredient {ingredient_id}"
        )

    # Recipe Methods

    def create_recipe(self, recipe: Recipe) -> Optional[Recipe]:
        """Insert a recipe, returning it with its new id"""
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("""
                    INSERT INTO recipes (
                        user_id, title, ingredient_keys, display_ingredients, instructions, tags,
                        source_url, cook_time_minutes, servings, difficulty, is_planned, is_cooked, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    recipe.user_id,
                    recipe.title,
                    json.dumps(recipe.ingredient_keys),
                    json.dumps(recipe.display_ingredients),
                    json.dumps(recipe.instructions),
                    json.dumps(recipe.tags),
                    recipe.source_url,
                    recipe.cook_time_minutes,
                    recipe.servings,
                    recipe.difficulty,
                    int(recipe.is_planned),
                    int(recipe.is_cooked),
                    recipe.created_at.isoformat()
                ))
                recipe_id = cursor.lastrowid
                conn.commit()

            return self.get_recipe_by_id(recipe_id)

        except sqlite3.Error as e:
            logger.error(f"Failed to create recipe {recipe.title}: {e}")
            return None

    def get_recipe_by_id(self, recipe_id: int) -> Optional[Recipe]:
        rows = self._fetch_rows("SELECT * FROM recipes WHERE id = ?", (recipe_id,), f"load recipe {recipe_id}")
        return self._row_to_recipe(rows[0]) if rows else None

    def get_user_recipes(self, user_id: int) -> List[Recipe]:
        """A user's recipes, newest first"""
        rows = self._fetch_rows("""
            SELECT * FROM recipes WHERE user_id = ?
            ORDER BY created_at DESC, id DESC
        """, (user_id,), f"load recipes of user {user_id}")
        return [self._row_to_recipe(row) for row in rows or []]

    def update_recipe_flags(self, recipe_id: int, is_planned: Optional[bool] = None,
                            is_cooked: Optional[bool] = None) -> bool:
        """Update the planned and/or cooked flags"""
        update_fields = []
        update_values: List[Any] = []
        if is_planned is not None:
            update_fields.append("is_planned = ?")
            update_values.append(int(is_planned))
        if is_cooked is not None:
            update_fields.append("is_cooked = ?")
            update_values.append(int(is_cooked))

        if not update_fields:
            logger.warning(f"No flags to update for recipe {recipe_id}")
            return False

        update_values.append(recipe_id)
        return self._execute_update(
            f"UPDATE recipes SET {', '.join(update_fields)} WHERE id = ?", tuple(update_values),
            f"update flags of recipe {recipe_id}"
        )

    def delete_recipe(self, recipe_id: int) -> bool:
        return self._execute_update("DELETE FROM recipes WHERE id = ?", (recipe_id,), f"delete recipe {recipe_id}")

    def count_cooked_recipes(self, user_id: int) -> int:
        rows = self._fetch_rows(
            "SELECT COUNT(*) FROM recipes WHERE user_id = ? AND is_cooked = 1", (user_id,),
            f"count cooked recipes of user {user_id}"
        )
        return rows[0][0] if rows else 0

    # Helper methods

    def _fetch_rows(self, sql: str, params: tuple, description: str) -> Optional[List[sqlite3.Row]]:
        """Run a SELECT; None if the query failed"""
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute(sql, params)
                return cursor.fetchall()

        except sqlite3.Error as e:
            logger.error(f"Failed to {description}: {e}")
            return None

    def _execute_update(self, sql: str, params: tuple, description: str) -> bool:
        """Run a single UPDATE/DELETE; True if a row was affected"""
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute(sql, params)
                conn.commit()
                return cursor.rowcount > 0

        except sqlite3.Error as e:
            logger.error(f"Failed to {description}: {e}")
            return False

    def _row_to_user(self, row) -> User:
        return User(
            id=row['id'],
            email=row['email'],
            username=row['username'],
            password_hash=row['password_hash'],
            first_name=row['first_name'] or '',
            last_name=row['last_name'] or '',
            phone_number=row['phone_number'],
            date_of_birth=date.fromisoformat(row['date_of_birth']) if row['date_of_birth'] else None,
            sex=row['sex'],
            hours_spent=row['hours_spent'] or 0.0,
            created_at=datetime.fromisoformat(row['created_at'])
        )

    def _row_to_ingredient(self, row) -> Ingredient:
        return Ingredient(
            id=row['id'],
            user_id=row['user_id'],
            name=row['name'],
            normalized=row['normalized'],
            unit_category=row['unit_category'],
            unit=row['unit'],
            quantity=row['quantity'],
            created_at=datetime.fromisoformat(row['created_at'])
        )

    def _row_to_recipe(self, row) -> Recipe:
        return Recipe(
            id=row['id'],
            title=row['title'],
            ingredient_keys=json.loads(row['ingredient_keys'] or '[]'),
            display_ingredients=json.loads(row['display_ingredients'] or '[]'),
            instructions=json.loads(row['instructions'] or '[]'),
            tags=json.loads(row['tags'] or '[]'),
            user_id=row['user_id'],
            source_url=row['source_url'],
            cook_time_minutes=row['cook_time_minutes'],
            servings=row['servings'],
            difficulty=row['difficulty'],
            is_planned=bool(row['is_planned']),
            is_cooked=bool(row['is_cooked']),
            created_at=datetime.fromisoformat(row['created_at'])
        )


# Global database service instance
_database_service: Optional[DatabaseService] = None


def get_database_service(db_path: Optional[str] = None) -> DatabaseService:
    """Get singleton database service instance"""
    global _database_service
    if _database_service is None:
        if db_path is None:
            db_path = get_config().database_path
        _database_service = DatabaseService(db_path)
    return _database_service
