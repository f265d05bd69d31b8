"""
Script to grant (or revoke) the admin role for an existing account.

The API never hands out the admin role; this is how the first admin is made.

Run this script from the project root:
    python promote_admin.py someone@example.com
    python promote_admin.py someone@example.com --revoke
"""

import argparse
import os
import sys

# Add app to Python path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from app.core.database import SessionLocal
from app.crud import user as user_crud
from app.models.user import UserRole


def promote_admin(email: str, revoke: bool = False) -> int:
    """Set the role for the account with this email. Returns a process exit code."""
    db = SessionLocal()

    try:
        user = user_crud.get_by_email(db, email)
        if user is None:
            print(f"✗ No account found for {email}")
            return 1

        role = UserRole.USER if revoke else UserRole.ADMIN
        if user.role == role:
            print(f"→ {email} already has role '{role.value}'")
            return 0

        user_crud.set_role(db, user, role)
        print(f"✓ {email} now has role '{role.value}'")
        return 0

    except Exception as e:
        db.rollback()
        print(f"\n✗ Error updating role: {e}")
        print("Database changes have been rolled back.")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Grant or revoke the admin role")
    parser.add_argument("email", help="Email of an existing account")
    parser.add_argument("--revoke", action="store_true", help="Demote the account back to 'user'")
    args = parser.parse_args()
    sys.exit(promote_admin(args.email, revoke=args.revoke))
