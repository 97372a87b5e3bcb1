"""
Script to create an Admin account
Run this to create the first administrator
"""

import sys
import asyncio
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from fastapi import HTTPException

from app.auth import generate_random_password
from app.database import connect_db, disconnect_db
from app.services.user_service import user_service


async def create_admin(email: str, first_name: str, last_name: str, university_id: str, password: str = None):
    """
    Create an admin user

    Args:
        email: Admin email
        first_name: Admin first name
        last_name: Admin last name
        university_id: Staff number
        password: Password (if None, will generate random)
    """
    await connect_db()

    try:
        generated = password is None
        if generated:
            password = generate_random_password(12)

        user = await user_service.create_user(
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            university_id=university_id,
            user_type="Admin",
            email_confirmed=True
        )

        print("Admin created successfully!")
        print(f"   Email: {user['email']}")
        print(f"   Name: {user['full_name']}")

        if generated:
            print(f"   Password: {password}")
            print("   IMPORTANT: Save this password!")
        else:
            print("   Password: (custom password set)")

    except HTTPException as e:
        print(f"Error creating admin: {e.detail}")

    finally:
        await disconnect_db()


async def main():
    """Main function"""
    print("\n" + "=" * 60)
    print("CREATE ADMIN")
    print("=" * 60 + "\n")

    email = input("Enter email: ").strip()
    first_name = input("Enter first name: ").strip()
    last_name = input("Enter last name: ").strip()
    university_id = input("Enter staff/university ID: ").strip()

    use_custom = input("Set custom password? (y/n): ").strip().lower()

    if use_custom == 'y':
        password = input("Enter password: ").strip()
        confirm = input("Confirm password: ").strip()

        if password != confirm:
            print("Passwords do not match!")
            return

        if len(password) < 8:
            print("Password must be at least 8 characters!")
            return
    else:
        password = None

    print("\n")
    await create_admin(email, first_name, last_name, university_id, password)
    print("\n")


if __name__ == "__main__":
    asyncio.run(main())
