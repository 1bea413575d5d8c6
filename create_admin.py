#!/usr/bin/env python3
"""
First-run administrator setup, or password reset for an existing user.
There is no default account; run this once after creating the database:
    python create_admin.py
"""
import getpass
import sys
import os

# Add the app to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from spartec.database import SessionLocal, engine, Base
from spartec import models  # noqa: F401  registers the tables with Base
from spartec.storage.base import StorageError
from spartec.storage.database import DatabaseStorage
from spartec.utils.security import get_password_hash, validate_password_complexity

PASSWORD_RULES = "at least 8 characters, one uppercase letter and one special character"


def list_users(storage: DatabaseStorage):
    """List all users in the database"""
    users = storage.users.get_all()
    if not users:
        print("\nNo users found in database.")
        return []

    print("\n=== Existing Users ===")
    for user in users:
        print(f"  ID: {user['id']}, Username: {user['username']}, Name: {user['full_name']}, Role: {user['role']}")
    return users


def prompt_password() -> str:
    """Ask twice; empty string if the entries differ or fail the complexity rule"""
    password = getpass.getpass("Enter password: ")
    if not validate_password_complexity(password):
        print(f"Password must contain {PASSWORD_RULES}.")
        return ""
    if getpass.getpass("Repeat password: ") != password:
        print("Passwords do not match.")
        return ""
    return password


def reset_password(storage: DatabaseStorage, username: str, new_password: str) -> bool:
    """Reset password for an existing user"""
    user = storage.users.get_by_username(username)
    if not user:
        print(f"\nError: User '{username}' not found.")
        return False

    storage.users.set_password(user["id"], get_password_hash(new_password))
    print(f"\nSuccess! Password reset for user: {user['username']}")
    return True


def create_admin(storage: DatabaseStorage, username: str, password: str, full_name: str, email: str = None) -> bool:
    """Create a new beheerder user"""
    try:
        storage.users.create({
            "username": username,
            "full_name": full_name,
            "email": email,
            "password": get_password_hash(password),
            "role": "beheerder",
        })
    except ValueError as e:
        print(f"\n{e}. Use the reset option instead.")
        return False

    print(f"\nSuccess! Created administrator: {username}")
    return True


def main():
    print("\n=== Spartec User Management ===")

    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    storage = DatabaseStorage(db)
    try:
        users = list_users(storage)

        print("\nOptions:")
        print("  1. Reset password for existing user")
        print("  2. Create new administrator")
        print("  3. Print password hash for ADMIN_PASSWORD_HASH (memory backend)")
        print("  4. Exit")

        choice = input("\nEnter choice (1/2/3/4): ").strip()

        if choice == "1":
            if not users:
                print("No users to reset. Create a new administrator instead.")
                choice = "2"
            else:
                username = input("Enter username: ").strip()
                new_password = prompt_password()
                if username and new_password:
                    reset_password(storage, username, new_password)
                else:
                    print("Username and a valid password are required.")

        if choice == "2":
            username = input("Enter username: ").strip()
            full_name = input("Enter full name: ").strip()
            email = input("Enter email (optional): ").strip() or None
            password = prompt_password()
            if username and full_name and password:
                create_admin(storage, username, password, full_name, email)
            else:
                print("Username, full name and a valid password are required.")

        if choice == "3":
            password = prompt_password()
            if password:
                print("\nSet these in .env to log in with STORAGE_BACKEND=memory:")
                print("  ADMIN_USERNAME=<username>")
                print(f"  ADMIN_PASSWORD_HASH='{get_password_hash(password)}'")

        if choice == "4":
            print("Goodbye!")
    except StorageError as e:
        print(f"\nError: {e}")
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()
